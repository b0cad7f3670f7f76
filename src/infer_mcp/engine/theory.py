"""
Theory-based reference p-values.

Used next to the simulation-based p-value for comparison:
- mean / t under a null on mu: one-sample t test (scipy)
- prop under a null on p: one-sample z test (statsmodels)
- diff in props under independence: two-sample z test (statsmodels)
- median has no theory-based reference
"""

from typing import Optional, Sequence, Union

import numpy as np
from scipy import stats
from statsmodels.stats.proportion import proportions_ztest

from infer_mcp.engine.errors import DegenerateStatistic
from infer_mcp.engine.null_models import NullModel, PointNull, check_compatible
from infer_mcp.engine.p_value import Direction
from infer_mcp.engine.specification import WorkingDataset
from infer_mcp.engine.statistics import StatKind, resolve_order

# statsmodels spells the one-sided alternatives differently from scipy
_ZTEST_ALTERNATIVE = {
    Direction.LESS: "smaller",
    Direction.GREATER: "larger",
    Direction.TWO_SIDED: "two-sided",
}


def theory_p_value(
    working: WorkingDataset,
    null_model: NullModel,
    direction: Union[Direction, str],
    stat: Optional[Union[StatKind, str]] = None,
    order: Optional[Sequence[str]] = None,
) -> Optional[float]:
    """Theory-based p-value for the same test, or None for the median."""
    kind = check_compatible(working, null_model, stat)
    direction = Direction.parse(direction)

    if kind is StatKind.MEDIAN:
        return None

    if isinstance(null_model, PointNull) and null_model.parameter == "mu":
        values = np.asarray(working.response_values, dtype=np.float64)
        if len(values) < 2 or np.std(values, ddof=1) == 0.0:
            raise DegenerateStatistic("One-sample t test needs at least 2 values with non-zero variance")
        result = stats.ttest_1samp(values, popmean=null_model.value, alternative=direction.alternative)
        return float(result.pvalue)

    hits = working.response_values == working.success

    if isinstance(null_model, PointNull):
        p = null_model.value
        if p in (0.0, 1.0):
            raise DegenerateStatistic(f"One-sample z test is undefined for p = {p}")
        _, p_value = proportions_ztest(
            count=int(np.count_nonzero(hits)),
            nobs=working.n,
            value=p,
            alternative=_ZTEST_ALTERNATIVE[direction],
            prop_var=p,
        )
        return float(p_value)

    # check_compatible leaves only the independence null here
    first, second = resolve_order(working, order)
    counts, nobs = [], []
    for level in (first, second):
        in_group = working.explanatory_values == level
        counts.append(int(np.count_nonzero(hits & in_group)))
        nobs.append(int(np.count_nonzero(in_group)))
    pooled = sum(counts) / sum(nobs) if sum(nobs) else 0.0
    if min(nobs) == 0 or pooled in (0.0, 1.0):
        raise DegenerateStatistic("Two-sample z test needs non-empty groups with a pooled proportion in (0, 1)")
    _, p_value = proportions_ztest(
        count=np.array(counts),
        nobs=np.array(nobs),
        value=0,
        alternative=_ZTEST_ALTERNATIVE[direction],
    )
    return float(p_value)
