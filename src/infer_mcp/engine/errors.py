"""
Errors raised by the inference engine.

Every error derives from ValueError so that callers handling bad input the
usual way keep working. None of them is retried: they are deterministic
functions of the inputs.
"""


class InferError(ValueError):
    """Base class for all inference engine errors."""


class InvalidSpecification(InferError):
    """Unknown field, wrong field type, or steps used in the wrong order."""


class MissingParameter(InferError):
    """A statistic or null hypothesis needs a parameter that was not supplied."""


class InvalidSuccessLevel(InferError):
    """A proportion was requested without a usable success level."""


class InvalidOrder(InferError):
    """The order for a difference in proportions does not match the explanatory levels."""


class DegenerateStatistic(InferError):
    """The statistic is undefined for the data (zero variance, empty group)."""


class InvalidReps(InferError):
    """The number of replicates is not a positive integer."""


class ModelMismatch(InferError):
    """The null model does not fit the shape of the working dataset or the statistic."""


class KindMismatch(InferError):
    """An observed statistic was compared against a null distribution of another kind."""


class InvalidDirection(InferError):
    """Unknown direction for a p-value."""


class InvalidLevel(InferError):
    """Confidence level outside the open interval (0, 1)."""
