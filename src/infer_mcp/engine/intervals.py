"""Confidence intervals from a bootstrap distribution."""

from dataclasses import dataclass
from typing import Optional, Union

import numpy as np
from scipy import stats

from infer_mcp.constants import CI_TYPES
from infer_mcp.engine.errors import InvalidLevel, InvalidSpecification, MissingParameter
from infer_mcp.engine.generator import NullDistribution
from infer_mcp.engine.statistics import Statistic


@dataclass(frozen=True)
class ConfidenceInterval:
    lower: float
    upper: float
    level: float
    ci_type: str


def get_confidence_interval(
    distribution: NullDistribution,
    level: float = 0.95,
    ci_type: str = "percentile",
    point_estimate: Optional[Union[Statistic, float]] = None,
) -> ConfidenceInterval:
    """
    Confidence interval from a bootstrap distribution.

    percentile: the (1 - level) / 2 and (1 + level) / 2 quantiles.
    se: point_estimate -/+ z * sd(distribution), z the standard normal quantile.
    """
    if not 0.0 < level < 1.0:
        raise InvalidLevel(f"level must lie in (0, 1), got {level}")
    if ci_type not in CI_TYPES:
        raise InvalidSpecification(f"Unknown ci_type '{ci_type}'. Supported: {list(CI_TYPES)}")

    if ci_type == "percentile":
        lower, upper = np.quantile(distribution.values, [(1 - level) / 2, (1 + level) / 2])
    else:
        if point_estimate is None:
            raise MissingParameter("An 'se' interval needs a point estimate")
        center = float(point_estimate)
        half_width = stats.norm.ppf((1 + level) / 2) * distribution.std()
        lower, upper = center - half_width, center + half_width

    return ConfidenceInterval(lower=float(lower), upper=float(upper), level=level, ci_type=ci_type)
