"""
Null models: how data is regenerated under a null hypothesis.

- PointNull(parameter, value): a single parameter (mu, med or p) equals a value.
- IndependenceNull(): response and explanatory variables are independent.
"""

import math
from dataclasses import dataclass
from typing import Optional, Union

from infer_mcp.constants import (
    DEFAULT_STAT_FOR_INDEPENDENCE,
    DEFAULT_STAT_FOR_PARAMETER,
    POINT_NULL_PARAMETERS,
    STATS_FOR_PARAMETER,
)
from infer_mcp.engine.errors import (
    InvalidSpecification,
    InvalidSuccessLevel,
    MissingParameter,
    ModelMismatch,
)
from infer_mcp.engine.specification import WorkingDataset
from infer_mcp.engine.statistics import StatKind


@dataclass(frozen=True)
class PointNull:
    parameter: str
    value: float

    def __post_init__(self):
        if self.parameter not in POINT_NULL_PARAMETERS:
            raise InvalidSpecification(
                f"Unknown point null parameter '{self.parameter}'. "
                f"Supported: {list(POINT_NULL_PARAMETERS)}"
            )
        value = float(self.value)
        if not math.isfinite(value):
            raise InvalidSpecification(f"Hypothesized {self.parameter} must be finite, got {self.value}")
        if self.parameter == "p" and not 0.0 <= value <= 1.0:
            raise InvalidSpecification(f"Hypothesized p must lie in [0, 1], got {value}")
        object.__setattr__(self, "value", value)

    @property
    def default_stat(self) -> StatKind:
        return StatKind(DEFAULT_STAT_FOR_PARAMETER[self.parameter])


@dataclass(frozen=True)
class IndependenceNull:

    @property
    def default_stat(self) -> StatKind:
        return StatKind(DEFAULT_STAT_FOR_INDEPENDENCE)


NullModel = Union[PointNull, IndependenceNull]


def hypothesize(
    null: str,
    mu: Optional[float] = None,
    med: Optional[float] = None,
    p: Optional[float] = None,
) -> NullModel:
    """
    Build a null model.

    Args:
        null: "point" or "independence".
        mu, med, p: The hypothesized parameter of a point null; exactly one
            must be given.

    Returns:
        PointNull or IndependenceNull.
    """
    params = {name: value for name, value in (("mu", mu), ("med", med), ("p", p)) if value is not None}

    if null == "point":
        if not params:
            raise MissingParameter("A point null needs one of mu, med or p")
        if len(params) > 1:
            raise InvalidSpecification(f"A point null takes exactly one parameter, got {sorted(params)}")
        (parameter, value), = params.items()
        return PointNull(parameter=parameter, value=value)

    if null == "independence":
        if params:
            raise InvalidSpecification(f"An independence null takes no parameters, got {sorted(params)}")
        return IndependenceNull()

    raise InvalidSpecification(f"Unknown null hypothesis '{null}'. Supported: ['point', 'independence']")


def check_compatible(
    working: WorkingDataset,
    null_model: NullModel,
    stat: Optional[Union[StatKind, str]] = None,
) -> StatKind:
    """
    Check that a null model can generate data for a working dataset and statistic.

    Returns:
        The statistic to score replicates with (the null's default when
        `stat` is None).

    Raises:
        ModelMismatch: the null does not fit the dataset shape or the statistic.
        InvalidSuccessLevel: a proportion null without a success level.
    """
    kind = null_model.default_stat if stat is None else StatKind.parse(stat)

    if isinstance(null_model, PointNull):
        if working.is_two_variable:
            raise ModelMismatch(
                f"A point null applies to a single variable; "
                f"drop the explanatory field '{working.explanatory.name}'"
            )
        if kind.value not in STATS_FOR_PARAMETER[null_model.parameter]:
            raise ModelMismatch(
                f"Statistic '{kind.value}' cannot be scored under a point null on "
                f"'{null_model.parameter}'. Supported: {list(STATS_FOR_PARAMETER[null_model.parameter])}"
            )
        if null_model.parameter == "p":
            if not working.response.is_categorical:
                raise ModelMismatch(f"A null on p needs a categorical response; '{working.response.name}' is numeric")
            if working.success is None:
                raise InvalidSuccessLevel(
                    f"A null on p needs a success level for '{working.response.name}'. "
                    f"Levels: {list(working.response.levels)}"
                )
        elif not working.response.is_numeric:
            raise ModelMismatch(
                f"A null on {null_model.parameter} needs a numeric response; "
                f"'{working.response.name}' is categorical"
            )
        return kind

    if not working.is_two_variable:
        raise ModelMismatch("An independence null needs an explanatory field")
    if kind is not StatKind.DIFF_IN_PROPS:
        raise ModelMismatch(f"Statistic '{kind.value}' cannot be scored under an independence null")
    if not working.response.is_categorical:
        raise ModelMismatch(
            f"An independence null needs a categorical response; '{working.response.name}' is numeric"
        )
    return kind
