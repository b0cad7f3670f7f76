"""Tests for the simulation-based hypothesis test tools."""
import numpy as np
import pandas as pd
import pytest


def _flights(n=500, seed=0):
    """Synthetic flights with a departure delay averaging 12 minutes."""
    rng = np.random.default_rng(seed)
    dep_delay = rng.normal(loc=12.0, scale=6.0, size=n)
    dep_delay = dep_delay - dep_delay.mean() + 12.0
    season = np.where(rng.random(n) < 0.5, "summer", "winter")
    p_morning = np.where(season == "summer", 0.55, 0.35)
    day_hour = np.where(rng.random(n) < p_morning, "morning", "not morning")
    df = pd.DataFrame({
        "dep_delay": dep_delay,
        "season": season,
        "day_hour": day_hour,
        "cancelled": (rng.random(n) < 0.1).astype(int),
    })
    df.loc[:9, "dep_delay"] = np.nan
    return df


@pytest.fixture
def flights_file(manifest_path):
    from infer_mcp.infrastructure.resources import _store_resource

    return _store_resource(_flights(), manifest_path, "flights", "Synthetic flights", "csv")


def test_one_sample_mean_rejects(manifest_path, flights_file):
    from infer_mcp.tools.inference.hypothesis_tests import test_one_sample_mean

    result = test_one_sample_mean(flights_file, manifest_path, "dep_delay", mu=10, reps=500)

    assert result["statistic"] == "mean"
    assert result["n_samples"] == 490
    assert result["is_significant"] is True
    assert result["p_value"] < 0.05
    assert result["theory_p_value"] < 0.05
    assert result["null_distribution_summary"]["mean"] == pytest.approx(10.0, abs=0.1)
    assert "Reject H0" in result["interpretation"]


def test_one_sample_mean_reproducible(manifest_path, flights_file):
    from infer_mcp.tools.inference.hypothesis_tests import test_one_sample_mean

    first = test_one_sample_mean(flights_file, manifest_path, "dep_delay", mu=11.8, reps=300, random_state=7)
    second = test_one_sample_mean(flights_file, manifest_path, "dep_delay", mu=11.8, reps=300, random_state=7)

    assert first["p_value"] == second["p_value"]
    assert first["null_distribution_summary"] == second["null_distribution_summary"]


def test_one_sample_mean_p_zero_note(manifest_path, flights_file):
    from infer_mcp.tools.inference.hypothesis_tests import test_one_sample_mean

    result = test_one_sample_mean(flights_file, manifest_path, "dep_delay", mu=0, reps=200, direction="greater")

    assert result["p_value"] == 0.0
    assert "note" in result


def test_one_sample_mean_constant_column(manifest_path):
    """A constant column has no t test reference but still gets a simulation p-value."""
    from infer_mcp.infrastructure.resources import _store_resource
    from infer_mcp.tools.inference.hypothesis_tests import test_one_sample_mean

    df = pd.DataFrame({"dep_delay": [10.0] * 50})
    filename = _store_resource(df, manifest_path, "constant_delays", "Constant departure delays", "csv")

    result = test_one_sample_mean(filename, manifest_path, "dep_delay", mu=8, reps=200)

    assert result["observed_statistic"] == pytest.approx(10.0)
    assert result["p_value"] == 0.0
    assert result["n_greater_equal"] == 0
    assert result["is_significant"] is True
    assert result["theory_p_value"] is None
    assert "non-zero variance" in result["theory_note"]


def test_one_sample_t(manifest_path, flights_file):
    from scipy import stats
    from infer_mcp.tools.inference.hypothesis_tests import test_one_sample_t

    result = test_one_sample_t(flights_file, manifest_path, "dep_delay", mu=12, reps=300)
    values = _flights()["dep_delay"].dropna().to_numpy()

    assert result["statistic"] == "t"
    assert result["observed_statistic"] == pytest.approx(stats.ttest_1samp(values, 12).statistic)
    assert result["is_significant"] is False


def test_one_sample_median(manifest_path, flights_file):
    from infer_mcp.tools.inference.hypothesis_tests import test_one_sample_median

    result = test_one_sample_median(flights_file, manifest_path, "dep_delay", med=-1, direction="greater", reps=300)

    assert result["statistic"] == "median"
    assert result["theory_p_value"] is None
    assert result["is_significant"] is True


def test_one_proportion(manifest_path, flights_file):
    from infer_mcp.tools.inference.hypothesis_tests import test_one_proportion

    result = test_one_proportion(flights_file, manifest_path, "day_hour", success="morning", p=0.45, reps=500)

    assert result["statistic"] == "prop"
    assert result["success"] == "morning"
    assert 0.0 <= result["p_value"] <= 1.0
    assert result["theory_p_value"] is not None
    assert "theory_note" not in result


def test_one_proportion_boundary_p(manifest_path, flights_file):
    """p = 0 has no z test reference; every Bernoulli draw is a failure."""
    from infer_mcp.tools.inference.hypothesis_tests import test_one_proportion

    result = test_one_proportion(flights_file, manifest_path, "day_hour", success="morning", p=0.0, reps=200)

    assert result["null_distribution_summary"]["mean"] == 0.0
    assert result["p_value"] == 0.0
    assert result["theory_p_value"] is None
    assert "p = 0.0" in result["theory_note"]


def test_one_proportion_numeric_codes(manifest_path, flights_file):
    """0/1 columns are treated as categorical with success given as a string."""
    from infer_mcp.tools.inference.hypothesis_tests import test_one_proportion

    result = test_one_proportion(flights_file, manifest_path, "cancelled", success="1", p=0.1, reps=300)

    assert result["observed_statistic"] == pytest.approx(float(_flights()["cancelled"].mean()))


def test_one_proportion_unknown_success(manifest_path, flights_file):
    from infer_mcp.engine import InvalidSpecification
    from infer_mcp.tools.inference.hypothesis_tests import test_one_proportion

    with pytest.raises(InvalidSpecification):
        test_one_proportion(flights_file, manifest_path, "day_hour", success="evening", p=0.5, reps=10)


def test_difference_in_proportions(manifest_path, flights_file):
    from infer_mcp.tools.inference.hypothesis_tests import test_difference_in_proportions

    result = test_difference_in_proportions(
        flights_file, manifest_path, "day_hour", success="morning",
        group_column="season", order=["summer", "winter"], direction="greater", reps=500,
    )

    summer = result["group_proportions"]["summer"]
    winter = result["group_proportions"]["winter"]
    assert result["statistic"] == "diff in props"
    assert result["order"] == ["summer", "winter"]
    assert result["observed_statistic"] == pytest.approx(summer["prop"] - winter["prop"])
    assert summer["n"] + winter["n"] == 500
    assert result["is_significant"] is True
    assert result["null_distribution_summary"]["mean"] == pytest.approx(0.0, abs=0.02)


def test_difference_in_proportions_single_response_level(manifest_path):
    """Every flight in the morning: no z test reference, permutation p-value of 1."""
    from infer_mcp.infrastructure.resources import _store_resource
    from infer_mcp.tools.inference.hypothesis_tests import test_difference_in_proportions

    df = pd.DataFrame({
        "day_hour": ["morning"] * 40,
        "season": ["summer"] * 20 + ["winter"] * 20,
    })
    filename = _store_resource(df, manifest_path, "morning_flights", "Morning flights only", "csv")

    result = test_difference_in_proportions(
        filename, manifest_path, "day_hour", success="morning", group_column="season", reps=100,
    )

    assert result["observed_statistic"] == 0.0
    assert result["p_value"] == 1.0
    assert result["is_significant"] is False
    assert result["theory_p_value"] is None
    assert "pooled proportion" in result["theory_note"]
    assert result["group_proportions"]["summer"]["prop"] == 1.0


def test_difference_in_proportions_bad_order(manifest_path, flights_file):
    from infer_mcp.engine import InvalidOrder
    from infer_mcp.tools.inference.hypothesis_tests import test_difference_in_proportions

    with pytest.raises(InvalidOrder):
        test_difference_in_proportions(
            flights_file, manifest_path, "day_hour", success="morning",
            group_column="season", order=["summer", "autumn"], reps=10,
        )


def test_store_null_distribution(manifest_path, flights_file):
    from infer_mcp.infrastructure.resources import _load_resource
    from infer_mcp.tools.inference.hypothesis_tests import test_one_sample_mean

    result = test_one_sample_mean(
        flights_file, manifest_path, "dep_delay", mu=10, reps=100,
        store_null_distribution=True, output_filename="null_mu10",
    )

    null = _load_resource(manifest_path, result["null_distribution_filename"])
    assert len(null) == 100
    assert null.kind.value == "mean"


def test_store_null_distribution_needs_filename(manifest_path, flights_file):
    from infer_mcp.tools.inference.hypothesis_tests import test_one_sample_mean

    with pytest.raises(ValueError, match="output_filename"):
        test_one_sample_mean(flights_file, manifest_path, "dep_delay", mu=10, reps=10, store_null_distribution=True)


def test_unknown_column(manifest_path, flights_file):
    from infer_mcp.tools.inference.hypothesis_tests import test_one_sample_mean

    with pytest.raises(ValueError, match="not found"):
        test_one_sample_mean(flights_file, manifest_path, "arr_delay", mu=10, reps=10)


def test_bootstrap_confidence_interval_mean(manifest_path, flights_file):
    from infer_mcp.tools.inference.hypothesis_tests import bootstrap_confidence_interval

    result = bootstrap_confidence_interval(flights_file, manifest_path, "dep_delay", reps=500)

    assert result["statistic"] == "mean"
    assert result["lower"] < 12.0 < result["upper"]
    assert result["ci_type"] == "percentile"


def test_bootstrap_confidence_interval_diff_in_props(manifest_path, flights_file):
    from infer_mcp.tools.inference.hypothesis_tests import bootstrap_confidence_interval

    result = bootstrap_confidence_interval(
        flights_file, manifest_path, "day_hour", stat="diff in props", ci_type="se",
        success="morning", group_column="season", order=["summer", "winter"], reps=300,
    )

    assert result["lower"] < result["observed_statistic"] < result["upper"]
    assert result["lower"] > 0


def test_all_tools_registered():
    from infer_mcp.tools.inference import get_all_hypothesis_test_tools

    names = {tool.__name__ for tool in get_all_hypothesis_test_tools()}

    assert names == {
        "test_one_sample_mean",
        "test_one_sample_t",
        "test_one_sample_median",
        "test_one_proportion",
        "test_difference_in_proportions",
        "bootstrap_confidence_interval",
    }


def test_failed_call_is_logged_and_raised(manifest_path, flights_file):
    """A failing tool writes a 'failed' entry with its seed and re-raises the engine error."""
    from infer_mcp.config import LOG_PATH
    from infer_mcp.engine import InvalidOrder
    from infer_mcp.tools.inference.hypothesis_tests import test_difference_in_proportions

    with pytest.raises(InvalidOrder):
        test_difference_in_proportions(
            flights_file, manifest_path, "day_hour", success="morning",
            group_column="season", order=["summer", "spring"], reps=10, random_state=1234,
        )

    last_entry = LOG_PATH.read_text(encoding="utf-8").rsplit("Function:", 1)[1]
    assert last_entry.startswith(" test_difference_in_proportions()")
    assert "Seed: 1234" in last_entry
    assert "Status: failed (InvalidOrder" in last_entry
