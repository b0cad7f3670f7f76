"""
Statistic calculator.

Supported statistics:
- mean: arithmetic mean of a numeric response
- t: standardized mean, (mean - mu) / (sd / sqrt(n)) with the n - 1 sd
- median: middle value (mean of the two middle values for even n)
- prop: share of records whose categorical response is the success level
- diff in props: prop at order[0] minus prop at order[1] of the explanatory field

Degenerate inputs raise DegenerateStatistic instead of producing NaN.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence, Tuple, Union

import numpy as np

from infer_mcp.engine.errors import (
    DegenerateStatistic,
    InvalidOrder,
    InvalidSpecification,
    InvalidSuccessLevel,
    MissingParameter,
)
from infer_mcp.engine.specification import WorkingDataset


class StatKind(str, Enum):
    MEAN = "mean"
    T = "t"
    MEDIAN = "median"
    PROP = "prop"
    DIFF_IN_PROPS = "diff in props"

    @classmethod
    def parse(cls, value: Union["StatKind", str]) -> "StatKind":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise InvalidSpecification(
                f"Unknown statistic '{value}'. "
                f"Supported: {[kind.value for kind in cls]}"
            ) from None

    @property
    def needs_numeric_response(self) -> bool:
        return self in (StatKind.MEAN, StatKind.T, StatKind.MEDIAN)


@dataclass(frozen=True)
class Statistic:
    """A scalar statistic tagged with its kind."""
    value: float
    kind: StatKind

    def __float__(self) -> float:
        return self.value


def resolve_order(working: WorkingDataset, order: Optional[Sequence[str]]) -> Tuple[str, str]:
    """
    Validate the level order for a difference in proportions.

    Without an explicit order, a two-level explanatory field is taken in
    sorted level order.
    """
    if working.explanatory is None:
        raise InvalidSpecification("diff in props needs an explanatory field")
    levels = working.explanatory.levels
    if order is None:
        if len(levels) != 2:
            raise InvalidOrder(
                f"Explanatory field '{working.explanatory.name}' must have exactly two levels, "
                f"got {list(levels)}"
            )
        return levels[0], levels[1]

    order = tuple(str(level) for level in order)
    if len(order) != 2 or len(levels) != 2 or set(order) != set(levels):
        raise InvalidOrder(
            f"order must contain exactly the two levels of '{working.explanatory.name}' "
            f"{list(levels)}, got {list(order)}"
        )
    return order[0], order[1]


def _numeric_response(working: WorkingDataset, kind: StatKind) -> np.ndarray:
    if not working.response.is_numeric:
        raise InvalidSpecification(
            f"Statistic '{kind.value}' needs a numeric response; "
            f"'{working.response.name}' is categorical"
        )
    values = np.asarray(working.response_values, dtype=np.float64)
    if len(values) == 0:
        raise DegenerateStatistic(f"Cannot compute '{kind.value}' of an empty response")
    return values


def _success_indicator(working: WorkingDataset, kind: StatKind) -> np.ndarray:
    if not working.response.is_categorical:
        raise InvalidSpecification(
            f"Statistic '{kind.value}' needs a categorical response; "
            f"'{working.response.name}' is numeric"
        )
    if working.success is None:
        raise InvalidSuccessLevel(
            f"Statistic '{kind.value}' needs a success level for '{working.response.name}'. "
            f"Levels: {list(working.response.levels)}"
        )
    return working.response_values == working.success


def _mean(working: WorkingDataset) -> float:
    return float(np.mean(_numeric_response(working, StatKind.MEAN)))


def _t(working: WorkingDataset, mu: Optional[float]) -> float:
    if mu is None:
        raise MissingParameter("Statistic 't' needs a hypothesized mean (mu)")
    values = _numeric_response(working, StatKind.T)
    n = len(values)
    if n < 2:
        raise DegenerateStatistic(f"Statistic 't' needs at least 2 values, got {n}")
    sd = float(np.std(values, ddof=1))
    if sd == 0.0:
        raise DegenerateStatistic("Statistic 't' is undefined for a response with zero variance")
    return (float(np.mean(values)) - float(mu)) / (sd / np.sqrt(n))


def _median(working: WorkingDataset) -> float:
    return float(np.median(_numeric_response(working, StatKind.MEDIAN)))


def _prop(working: WorkingDataset) -> float:
    hits = _success_indicator(working, StatKind.PROP)
    if len(hits) == 0:
        raise DegenerateStatistic("Cannot compute 'prop' of an empty response")
    return float(np.count_nonzero(hits)) / len(hits)


def _diff_in_props(working: WorkingDataset, order: Optional[Sequence[str]]) -> float:
    first, second = resolve_order(working, order)
    hits = _success_indicator(working, StatKind.DIFF_IN_PROPS)

    props = []
    for level in (first, second):
        in_group = working.explanatory_values == level
        n_group = int(np.count_nonzero(in_group))
        if n_group == 0:
            raise DegenerateStatistic(
                f"Group '{level}' of '{working.explanatory.name}' is empty"
            )
        props.append(float(np.count_nonzero(hits & in_group)) / n_group)
    return props[0] - props[1]


def calculate(
    working: WorkingDataset,
    stat: Union[StatKind, str],
    mu: Optional[float] = None,
    order: Optional[Sequence[str]] = None,
) -> Statistic:
    """
    Compute a statistic from a working dataset.

    Args:
        working: Dataset returned by `specify` (or a generated replicate).
        stat: One of "mean", "t", "median", "prop", "diff in props".
        mu: Hypothesized mean, required for "t".
        order: Two explanatory levels for "diff in props".

    Returns:
        Statistic with a float64 value.

    Raises:
        MissingParameter: "t" without mu.
        InvalidSuccessLevel: proportion without a success level.
        InvalidOrder: order not matching the two explanatory levels.
        DegenerateStatistic: empty data, empty group, or zero variance.
        InvalidSpecification: statistic does not fit the response type.
    """
    kind = StatKind.parse(stat)

    if kind is StatKind.MEAN:
        value = _mean(working)
    elif kind is StatKind.T:
        value = _t(working, mu)
    elif kind is StatKind.MEDIAN:
        value = _median(working)
    elif kind is StatKind.PROP:
        value = _prop(working)
    else:
        value = _diff_in_props(working, order)

    if not np.isfinite(value):
        raise DegenerateStatistic(f"Statistic '{kind.value}' is not finite ({value})")
    return Statistic(value=float(value), kind=kind)
