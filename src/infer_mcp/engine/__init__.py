"""Resampling-based hypothesis testing engine."""

from infer_mcp.engine.errors import (
    InferError,
    InvalidSpecification,
    MissingParameter,
    InvalidSuccessLevel,
    InvalidOrder,
    DegenerateStatistic,
    InvalidReps,
    ModelMismatch,
    KindMismatch,
    InvalidDirection,
    InvalidLevel,
)
from infer_mcp.engine.sample import Sample, Field, FieldKind
from infer_mcp.engine.specification import WorkingDataset, specify
from infer_mcp.engine.statistics import StatKind, Statistic, calculate
from infer_mcp.engine.null_models import PointNull, IndependenceNull, hypothesize
from infer_mcp.engine.generator import NullDistribution, generate, generate_bootstrap
from infer_mcp.engine.p_value import Direction, get_p_value
from infer_mcp.engine.intervals import ConfidenceInterval, get_confidence_interval
from infer_mcp.engine.theory import theory_p_value
from infer_mcp.engine.pipeline import Infer

__all__ = [
    'InferError',
    'InvalidSpecification',
    'MissingParameter',
    'InvalidSuccessLevel',
    'InvalidOrder',
    'DegenerateStatistic',
    'InvalidReps',
    'ModelMismatch',
    'KindMismatch',
    'InvalidDirection',
    'InvalidLevel',
    'Sample',
    'Field',
    'FieldKind',
    'WorkingDataset',
    'specify',
    'StatKind',
    'Statistic',
    'calculate',
    'PointNull',
    'IndependenceNull',
    'hypothesize',
    'NullDistribution',
    'generate',
    'generate_bootstrap',
    'Direction',
    'get_p_value',
    'ConfidenceInterval',
    'get_confidence_interval',
    'theory_p_value',
    'Infer',
]
