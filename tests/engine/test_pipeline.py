"""Tests for the fluent Infer builder."""
import numpy as np
import pandas as pd
import pytest


@pytest.fixture
def flights_sample():
    from infer_mcp.engine import Sample

    rng = np.random.default_rng(10)
    n = 400
    season = np.where(rng.random(n) < 0.5, 'summer', 'winter')
    day_hour = np.where(rng.random(n) < np.where(season == 'summer', 0.5, 0.3), 'morning', 'not morning')
    df = pd.DataFrame({
        'dep_delay': rng.normal(loc=11, scale=8, size=n),
        'season': season,
        'day_hour': day_hour,
    })
    return Sample.from_frame(df)


def test_observed_statistic(flights_sample):
    from infer_mcp.engine import Infer, Statistic

    observed = Infer(flights_sample).specify(response='dep_delay').calculate('mean')

    assert isinstance(observed, Statistic)
    assert observed.value == pytest.approx(float(np.mean(flights_sample.values('dep_delay'))))


def test_null_distribution_matches_functional_api(flights_sample):
    """The builder produces the same distribution as calling the functions directly."""
    from infer_mcp.engine import Infer, specify, hypothesize, generate

    null = (Infer(flights_sample)
            .specify(response='dep_delay')
            .hypothesize('point', mu=10)
            .generate(reps=200, seed=42)
            .calculate('mean'))
    direct = generate(specify(flights_sample, 'dep_delay'), hypothesize('point', mu=10), reps=200, seed=42)

    assert np.array_equal(null.values, direct.values)


def test_t_takes_mu_from_null(flights_sample):
    from infer_mcp.engine import Infer, StatKind

    hypothesized = Infer(flights_sample).specify(response='dep_delay').hypothesize('point', mu=10)

    observed = hypothesized.calculate('t')
    null = hypothesized.generate(reps=100, seed=1).calculate('t')

    assert observed.kind is StatKind.T
    assert null.kind is StatKind.T


def test_independence_pipeline(flights_sample):
    from infer_mcp.engine import Infer, get_p_value

    specified = Infer(flights_sample).specify(response='day_hour', explanatory='season', success='morning')
    observed = specified.calculate('diff in props', order=['summer', 'winter'])
    null = (specified
            .hypothesize('independence')
            .generate(reps=500, seed=42)
            .calculate('diff in props', order=['summer', 'winter']))

    result = get_p_value(null, observed, 'greater')

    assert 0.0 <= result.p_value <= 1.0
    assert observed.value > 0


def test_bootstrap_without_hypothesis(flights_sample):
    from infer_mcp.engine import Infer

    boot = Infer(flights_sample).specify(response='dep_delay').generate(reps=100, seed=0).calculate('median')

    assert boot.generation == 'bootstrap'
    assert len(boot) == 100


def test_steps_do_not_mutate(flights_sample):
    from infer_mcp.engine import Infer

    base = Infer(flights_sample)
    specified = base.specify(response='dep_delay')
    specified.hypothesize('point', mu=10)

    assert base.working is None
    assert specified.null_model is None


def test_steps_out_of_order(flights_sample):
    from infer_mcp.engine import Infer, InvalidSpecification

    with pytest.raises(InvalidSpecification):
        Infer(flights_sample).hypothesize('point', mu=10)
    with pytest.raises(InvalidSpecification):
        Infer(flights_sample).calculate('mean')
    with pytest.raises(InvalidSpecification):
        Infer(flights_sample).specify(response='dep_delay').generate(reps=10, seed=0).hypothesize('point', mu=1)


def test_hypothesize_checks_shape(flights_sample):
    """Model/shape mismatches surface at hypothesize(), before any generation."""
    from infer_mcp.engine import Infer, ModelMismatch

    with pytest.raises(ModelMismatch):
        Infer(flights_sample).specify(response='dep_delay').hypothesize('independence')
