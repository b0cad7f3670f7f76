"""
Replicate generation: null and bootstrap distributions.

Generation types:
- point null on a numeric response: shift the values so that the mean (mu)
  or median (med) equals the hypothesized value, then bootstrap-resample
- point null on p: draw n Bernoulli(p) outcomes
- independence null: permute the explanatory values, response held fixed
- bootstrap (no null): resample whole records with replacement

Every replicate draws from its own random stream, spawned from the base seed
and indexed by replicate, so results are identical whether the replicate loop
runs sequentially or on several joblib workers.
"""

from dataclasses import dataclass, field
from typing import Callable, Dict, Optional, Sequence, Union

import numpy as np
import pandas as pd
from joblib import Parallel, delayed

from infer_mcp.engine.errors import InvalidReps, MissingParameter
from infer_mcp.engine.null_models import IndependenceNull, NullModel, PointNull, check_compatible
from infer_mcp.engine.specification import WorkingDataset
from infer_mcp.engine.statistics import StatKind, calculate, resolve_order

SeedLike = Union[int, np.random.SeedSequence, None]


@dataclass(frozen=True, eq=False)
class NullDistribution:
    """One statistic value per replicate, in replicate order."""
    values: np.ndarray = field(repr=False)
    kind: StatKind
    generation: str
    reps: int
    seed: Union[int, Sequence[int], None] = None

    def __len__(self) -> int:
        return len(self.values)

    def __iter__(self):
        return iter(self.values.tolist())

    def mean(self) -> float:
        return float(np.mean(self.values))

    def std(self) -> float:
        return float(np.std(self.values, ddof=1)) if len(self.values) > 1 else 0.0

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame({"replicate": np.arange(1, len(self.values) + 1), "stat": self.values})

    def summary(self) -> Dict:
        quantiles = np.quantile(self.values, [0.025, 0.25, 0.5, 0.75, 0.975])
        return {
            "stat": self.kind.value,
            "generation": self.generation,
            "reps": self.reps,
            "seed": self.seed,
            "mean": self.mean(),
            "std": self.std(),
            "min": float(np.min(self.values)),
            "q025": float(quantiles[0]),
            "q25": float(quantiles[1]),
            "median": float(quantiles[2]),
            "q75": float(quantiles[3]),
            "q975": float(quantiles[4]),
            "max": float(np.max(self.values)),
        }


def check_reps(reps) -> int:
    if isinstance(reps, bool) or not isinstance(reps, (int, np.integer)):
        raise InvalidReps(f"reps must be a positive integer, got {reps!r}")
    if reps <= 0:
        raise InvalidReps(f"reps must be a positive integer, got {reps}")
    return int(reps)


def _seed_sequence(seed: SeedLike) -> np.random.SeedSequence:
    # A fresh copy: spawning advances the counter of the sequence it is called on
    if isinstance(seed, np.random.SeedSequence):
        return np.random.SeedSequence(seed.entropy, spawn_key=seed.spawn_key)
    return np.random.SeedSequence(seed)


def _run_replicates(
    make_replicate: Callable[[np.random.Generator], WorkingDataset],
    score: Callable[[WorkingDataset], float],
    reps: int,
    seed_seq: np.random.SeedSequence,
    n_jobs: int,
) -> np.ndarray:
    def _one(child: np.random.SeedSequence) -> float:
        rng = np.random.default_rng(child)
        return score(make_replicate(rng))

    children = seed_seq.spawn(reps)
    if n_jobs == 1:
        values = [_one(child) for child in children]
    else:
        # joblib returns results in submission order
        values = Parallel(n_jobs=n_jobs, prefer="threads")(delayed(_one)(child) for child in children)

    values = np.asarray(values, dtype=np.float64)
    values.setflags(write=False)
    return values


def _point_replicate_factory(working: WorkingDataset, null_model: PointNull):
    n = working.n

    if null_model.parameter == "p":
        success = working.success
        others = [level for level in working.response.levels if level != success]
        failure = others[0] if len(others) == 1 else f"not {success}"
        p = null_model.value

        def make_replicate(rng: np.random.Generator) -> WorkingDataset:
            hits = rng.random(n) < p
            return working.with_values(response_values=np.where(hits, success, failure).astype(object))

        return make_replicate, "draw"

    values = np.asarray(working.response_values, dtype=np.float64)
    center = np.mean(values) if null_model.parameter == "mu" else np.median(values)
    shifted = values + (null_model.value - center)

    def make_replicate(rng: np.random.Generator) -> WorkingDataset:
        return working.with_values(response_values=shifted[rng.integers(0, n, size=n)])

    return make_replicate, "bootstrap"


def _permute_replicate_factory(working: WorkingDataset):
    explanatory = working.explanatory_values

    def make_replicate(rng: np.random.Generator) -> WorkingDataset:
        return working.with_values(explanatory_values=rng.permutation(explanatory))

    return make_replicate, "permute"


def generate(
    working: WorkingDataset,
    null_model: NullModel,
    reps: int,
    seed: SeedLike,
    stat: Optional[Union[StatKind, str]] = None,
    order: Optional[Sequence[str]] = None,
    n_jobs: int = 1,
) -> NullDistribution:
    """
    Generate a null distribution.

    Args:
        working: Dataset returned by `specify`.
        null_model: PointNull or IndependenceNull.
        reps: Number of replicates (positive integer).
        seed: Base seed (int or numpy SeedSequence). None draws fresh entropy.
        stat: Statistic scored on each replicate (default depends on the null:
            mu -> mean, med -> median, p -> prop, independence -> diff in props).
            "t" under a null on mu uses the hypothesized mu.
        order: Two explanatory levels for "diff in props".
        n_jobs: joblib workers for the replicate loop.

    Returns:
        NullDistribution with exactly `reps` values.

    Raises:
        InvalidReps: reps is not a positive integer.
        ModelMismatch: null model incompatible with the dataset or statistic.
        Any calculate() error from the first failing replicate.
    """
    reps = check_reps(reps)
    kind = check_compatible(working, null_model, stat)

    mu = null_model.value if isinstance(null_model, PointNull) and null_model.parameter == "mu" else None
    if kind is StatKind.DIFF_IN_PROPS:
        order = resolve_order(working, order)

    # surfaces order / success / degeneracy errors before any replicate is drawn
    calculate(working, kind, mu=mu, order=order)

    if isinstance(null_model, IndependenceNull):
        make_replicate, generation = _permute_replicate_factory(working)
    else:
        make_replicate, generation = _point_replicate_factory(working, null_model)

    seed_seq = _seed_sequence(seed)
    values = _run_replicates(
        make_replicate,
        lambda replicate: calculate(replicate, kind, mu=mu, order=order).value,
        reps,
        seed_seq,
        n_jobs,
    )
    return NullDistribution(values=values, kind=kind, generation=generation, reps=reps, seed=seed_seq.entropy)


def generate_bootstrap(
    working: WorkingDataset,
    stat: Union[StatKind, str],
    reps: int,
    seed: SeedLike,
    mu: Optional[float] = None,
    order: Optional[Sequence[str]] = None,
    n_jobs: int = 1,
) -> NullDistribution:
    """
    Generate a bootstrap distribution of a statistic (no null hypothesis).

    Whole records are resampled with replacement at the original size, so a
    two-variable dataset keeps its response/explanatory pairs together.
    """
    reps = check_reps(reps)
    kind = StatKind.parse(stat)
    if kind is StatKind.T and mu is None:
        raise MissingParameter("Statistic 't' needs a hypothesized mean (mu)")
    if kind is StatKind.DIFF_IN_PROPS:
        order = resolve_order(working, order)

    calculate(working, kind, mu=mu, order=order)

    n = working.n

    def make_replicate(rng: np.random.Generator) -> WorkingDataset:
        idx = rng.integers(0, n, size=n)
        explanatory = working.explanatory_values[idx] if working.is_two_variable else None
        return working.with_values(response_values=working.response_values[idx], explanatory_values=explanatory)

    seed_seq = _seed_sequence(seed)
    values = _run_replicates(
        make_replicate,
        lambda replicate: calculate(replicate, kind, mu=mu, order=order).value,
        reps,
        seed_seq,
        n_jobs,
    )
    return NullDistribution(values=values, kind=kind, generation="bootstrap", reps=reps, seed=seed_seq.entropy)
