"""
Specification: choose the response (and explanatory) variable of a test.

`specify` validates the requested fields against the Sample's schema and
returns a WorkingDataset, the projection of the Sample onto the selected
fields. Record order and count are preserved.
"""

from dataclasses import dataclass, field, replace
from typing import Optional

import numpy as np
import pandas as pd

from infer_mcp.engine.errors import InvalidSpecification
from infer_mcp.engine.sample import Field, Sample


@dataclass(frozen=True, eq=False)
class WorkingDataset:
    """Response values (and optional explanatory values) selected from a Sample."""
    response: Field
    response_values: np.ndarray = field(repr=False)
    explanatory: Optional[Field] = None
    explanatory_values: Optional[np.ndarray] = field(default=None, repr=False)
    success: Optional[str] = None

    @property
    def n(self) -> int:
        return len(self.response_values)

    @property
    def is_two_variable(self) -> bool:
        return self.explanatory is not None

    def with_values(
        self,
        response_values: Optional[np.ndarray] = None,
        explanatory_values: Optional[np.ndarray] = None,
    ) -> "WorkingDataset":
        """Return a dataset of the same shape carrying replacement values."""
        changes = {}
        if response_values is not None:
            changes["response_values"] = response_values
        if explanatory_values is not None:
            changes["explanatory_values"] = explanatory_values
        return replace(self, **changes)

    def to_frame(self) -> pd.DataFrame:
        data = {self.response.name: self.response_values}
        if self.explanatory is not None:
            data[self.explanatory.name] = self.explanatory_values
        return pd.DataFrame(data)


def specify(
    sample: Sample,
    response: str,
    explanatory: Optional[str] = None,
    success: Optional[str] = None,
) -> WorkingDataset:
    """
    Select the response (and optional explanatory) field of a Sample.

    Args:
        sample: The loaded Sample.
        response: Name of the response field.
        explanatory: Name of a categorical explanatory field, for two-variable tests.
        success: Level of a categorical response counted as a "success".

    Returns:
        WorkingDataset projected onto the selected field(s).

    Raises:
        InvalidSpecification: Unknown field, non-categorical explanatory field,
            explanatory equal to response, or a success level that is not a
            level of the response.
    """
    if response not in sample.schema:
        raise InvalidSpecification(
            f"Response field '{response}' not found. "
            f"Available: {sample.field_names}"
        )
    response_field = sample.schema[response]

    explanatory_field = None
    explanatory_values = None
    if explanatory is not None:
        if explanatory not in sample.schema:
            raise InvalidSpecification(
                f"Explanatory field '{explanatory}' not found. "
                f"Available: {sample.field_names}"
            )
        if explanatory == response:
            raise InvalidSpecification("Response and explanatory fields must differ")
        explanatory_field = sample.schema[explanatory]
        if not explanatory_field.is_categorical:
            raise InvalidSpecification(
                f"Explanatory field '{explanatory}' must be categorical, "
                f"got {explanatory_field.kind.value}"
            )
        explanatory_values = sample.values(explanatory)

    if success is not None:
        if not response_field.is_categorical:
            raise InvalidSpecification(
                f"A success level only applies to a categorical response; "
                f"'{response}' is {response_field.kind.value}"
            )
        success = str(success)
        if success not in response_field.levels:
            raise InvalidSpecification(
                f"Success level '{success}' is not a level of '{response}'. "
                f"Levels: {list(response_field.levels)}"
            )

    return WorkingDataset(
        response=response_field,
        response_values=sample.values(response),
        explanatory=explanatory_field,
        explanatory_values=explanatory_values,
        success=success,
    )
