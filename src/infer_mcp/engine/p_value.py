"""
p-values from a null distribution.

- less: fraction of null values <= observed
- greater: fraction of null values >= observed
- two_sided: 2 * min(less, greater), capped at 1
"""

from dataclasses import dataclass
from enum import Enum
from typing import Union

import numpy as np

from infer_mcp.constants import DIRECTION_ALIASES
from infer_mcp.engine.errors import InvalidDirection, KindMismatch
from infer_mcp.engine.generator import NullDistribution
from infer_mcp.engine.statistics import Statistic


class Direction(str, Enum):
    LESS = "less"
    GREATER = "greater"
    TWO_SIDED = "two_sided"

    @classmethod
    def parse(cls, value: Union["Direction", str]) -> "Direction":
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower()
        if key not in DIRECTION_ALIASES:
            raise InvalidDirection(
                f"Unknown direction '{value}'. "
                f"Supported: {sorted(DIRECTION_ALIASES)}"
            )
        return cls(DIRECTION_ALIASES[key])

    @property
    def alternative(self) -> str:
        """Spelling used by scipy's `alternative` argument."""
        return "two-sided" if self is Direction.TWO_SIDED else self.value


@dataclass(frozen=True)
class TestResult:
    p_value: float
    direction: Direction
    observed: float
    n_less_equal: int
    n_greater_equal: int
    reps: int

    __test__ = False  # not a pytest test class


def get_p_value(
    null_distribution: NullDistribution,
    observed: Statistic,
    direction: Union[Direction, str],
) -> TestResult:
    """
    Compare an observed statistic against a null distribution.

    Raises:
        KindMismatch: the observed statistic and the null distribution differ in kind.
        InvalidDirection: unknown direction.
    """
    if observed.kind is not null_distribution.kind:
        raise KindMismatch(
            f"Observed statistic is '{observed.kind.value}' but the null distribution "
            f"holds '{null_distribution.kind.value}'"
        )
    direction = Direction.parse(direction)

    values = null_distribution.values
    reps = len(values)
    n_less_equal = int(np.count_nonzero(values <= observed.value))
    n_greater_equal = int(np.count_nonzero(values >= observed.value))
    less = n_less_equal / reps
    greater = n_greater_equal / reps

    if direction is Direction.LESS:
        p_value = less
    elif direction is Direction.GREATER:
        p_value = greater
    else:
        p_value = min(1.0, 2.0 * min(less, greater))

    return TestResult(
        p_value=float(p_value),
        direction=direction,
        observed=observed.value,
        n_less_equal=n_less_equal,
        n_greater_equal=n_greater_equal,
        reps=reps,
    )
