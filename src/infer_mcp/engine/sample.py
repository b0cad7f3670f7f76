"""
Samples: immutable, typed tabular datasets.

A Sample wraps a pandas DataFrame together with a schema that types every
column as Numeric or Categorical. Categorical values are stored as strings and
their levels are fixed when the Sample is built. Missing values are excluded
at load time.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, Optional, Tuple

import numpy as np
import pandas as pd

from infer_mcp.engine.errors import InvalidSpecification


class FieldKind(str, Enum):
    NUMERIC = "numeric"
    CATEGORICAL = "categorical"


@dataclass(frozen=True)
class Field:
    """A typed column of a Sample. `levels` is empty for numeric fields."""
    name: str
    kind: FieldKind
    levels: Tuple[str, ...] = ()

    @property
    def is_numeric(self) -> bool:
        return self.kind is FieldKind.NUMERIC

    @property
    def is_categorical(self) -> bool:
        return self.kind is FieldKind.CATEGORICAL


def _read_only(values: np.ndarray) -> np.ndarray:
    values = np.array(values, copy=True)
    values.setflags(write=False)
    return values


def _infer_kind(series: pd.Series) -> FieldKind:
    if pd.api.types.is_bool_dtype(series):
        return FieldKind.CATEGORICAL
    if pd.api.types.is_numeric_dtype(series):
        return FieldKind.NUMERIC
    return FieldKind.CATEGORICAL


@dataclass(frozen=True, eq=False)
class Sample:
    """
    An ordered, immutable collection of records sharing one schema.

    Build it with `Sample.from_frame`; the column arrays are read-only
    copies, so nothing downstream can mutate the loaded data.
    """
    schema: Dict[str, Field]
    columns: Dict[str, np.ndarray] = field(repr=False)
    n_records: int

    @classmethod
    def from_frame(
        cls,
        df: pd.DataFrame,
        columns: Optional[Iterable[str]] = None,
        categorical: Optional[Iterable[str]] = None,
        drop_missing: bool = True,
    ) -> "Sample":
        """
        Build a Sample from a DataFrame.

        Args:
            df: Source data.
            columns: Columns to keep (default: all).
            categorical: Columns to treat as categorical even when numeric
                (e.g. 0/1 coded outcomes).
            drop_missing: Drop rows with a missing value in any kept column.
                When False, missing values raise InvalidSpecification.

        Returns:
            Sample with numeric columns as float64 and categorical columns
            as strings with sorted levels.
        """
        selected = list(df.columns) if columns is None else list(columns)
        missing_cols = [col for col in selected if col not in df.columns]
        if missing_cols:
            raise InvalidSpecification(
                f"Columns {missing_cols} not found. "
                f"Available: {list(df.columns)}"
            )

        forced = set(categorical or [])
        unknown_forced = forced - set(selected)
        if unknown_forced:
            raise InvalidSpecification(
                f"Categorical columns {sorted(unknown_forced)} are not among the selected columns {selected}"
            )

        df_sel = df[selected]
        if df_sel.isna().any().any():
            if not drop_missing:
                raise InvalidSpecification(
                    f"Missing values found in columns "
                    f"{[c for c in selected if df_sel[c].isna().any()]}"
                )
            df_sel = df_sel.dropna()

        schema: Dict[str, Field] = {}
        arrays: Dict[str, np.ndarray] = {}
        for col in selected:
            series = df_sel[col]
            kind = FieldKind.CATEGORICAL if col in forced else _infer_kind(series)
            if kind is FieldKind.NUMERIC:
                arrays[col] = _read_only(series.to_numpy(dtype=np.float64))
                schema[col] = Field(name=col, kind=kind)
            else:
                # 0/1 codes read as floats (because of dropped NaNs) stay "0"/"1"
                if pd.api.types.is_float_dtype(series) and (series % 1 == 0).all():
                    series = series.astype(np.int64)
                values = series.astype(str).to_numpy(dtype=object)
                arrays[col] = _read_only(values)
                schema[col] = Field(name=col, kind=kind, levels=tuple(sorted(set(values))))

        return cls(schema=schema, columns=arrays, n_records=len(df_sel))

    @property
    def field_names(self) -> List[str]:
        return list(self.schema)

    def get_field(self, name: str) -> Field:
        if name not in self.schema:
            raise InvalidSpecification(
                f"Field '{name}' not found. "
                f"Available: {self.field_names}"
            )
        return self.schema[name]

    def values(self, name: str) -> np.ndarray:
        self.get_field(name)
        return self.columns[name]

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame({name: self.columns[name] for name in self.schema})

    def __len__(self) -> int:
        return self.n_records
