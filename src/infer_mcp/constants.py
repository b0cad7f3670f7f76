"""
Constants for infer_mcp package.

DEFAULT_REPS / DEFAULT_RANDOM_STATE / DEFAULT_ALPHA: defaults used by the tool layer.
POINT_NULL_PARAMETERS: parameters a point null hypothesis can fix.
DEFAULT_STAT_FOR_PARAMETER: statistic scored under each point null when none is given.
DIRECTION_ALIASES: accepted spellings for the direction of a test.
"""

from __future__ import annotations
from typing import Dict, Mapping


DEFAULT_REPS = 1000
DEFAULT_RANDOM_STATE = 42
DEFAULT_ALPHA = 0.05
DEFAULT_CONFIDENCE_LEVEL = 0.95

POINT_NULL_PARAMETERS = ("mu", "med", "p")

DEFAULT_STAT_FOR_PARAMETER: Mapping[str, str] = {
    "mu": "mean",
    "med": "median",
    "p": "prop",
}

DEFAULT_STAT_FOR_INDEPENDENCE = "diff in props"

# statistics each point null parameter can be scored with
STATS_FOR_PARAMETER: Mapping[str, tuple] = {
    "mu": ("mean", "t"),
    "med": ("median",),
    "p": ("prop",),
}

DIRECTION_ALIASES: Dict[str, str] = {
    "less": "less",
    "left": "less",
    "greater": "greater",
    "right": "greater",
    "two_sided": "two_sided",
    "two-sided": "two_sided",
    "two sided": "two_sided",
    "both": "two_sided",
}

CI_TYPES = ("percentile", "se")
