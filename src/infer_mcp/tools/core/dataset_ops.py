"""
Client-facing dataset tools.

These functions provide MCP-accessible operations for getting a tabular
dataset ready for a hypothesis test: storing a CSV, inspecting it, dropping
rows with missing values, sampling rows, and deriving categorical columns
from numeric ones (e.g. "morning" / "not morning" from a departure hour).
"""

from typing import Dict, List, Optional

import pandas as pd

from infer_mcp.infrastructure.resources import _load_resource, _store_resource
from infer_mcp.infrastructure.logging import loggable


def _validate_columns(df: pd.DataFrame, columns: List[str]) -> None:
    missing_cols = [col for col in columns if col not in df.columns]
    if missing_cols:
        raise ValueError(
            f"Column(s) not found in dataset: {missing_cols}. "
            f"Available: {list(df.columns)}"
        )


@loggable
def store_csv_as_dataset(file_path: str, project_manifest_path: str, filename: str, explanation: str) -> dict:
    """
    Store a CSV file from a local file path provided by the MCP client.

    Parameters
    ----------
    file_path : str
        Path to a CSV file supplied by the client. The file is read exactly as provided.
    project_manifest_path : str
        Path to the project manifest file for tracking this resource.
    filename : str
        Base filename for the stored resource (without extension).
    explanation : str
        Brief description of what this dataset contains.

    Returns
    -------
    dict
        {
            "output_filename": str,  # identifier for the stored dataset
            "n_rows": int,
            "columns": list[str],
            "preview": list[dict],   # first 5 rows as records
        }
    """
    df = pd.read_csv(file_path)

    output_filename = _store_resource(df, project_manifest_path, filename, explanation, "csv")

    return {
        "output_filename": output_filename,
        "n_rows": len(df),
        "columns": list(df.columns),
        "preview": df.head(5).to_dict(orient="records"),
    }


@loggable
def store_csv_as_dataset_from_text(csv_content: str, project_manifest_path: str, filename: str, explanation: str) -> dict:
    """
    Store CSV data from content provided by the MCP client.

    Parameters
    ----------
    csv_content : str
        The CSV file content as a string.
    project_manifest_path : str
        Path to the project manifest file for tracking this resource.
    filename : str
        Base filename for the stored resource (without extension).
    explanation : str
        Brief description of what this dataset contains.

    Returns
    -------
    dict
        Dataset metadata (same keys as store_csv_as_dataset)
    """
    from io import StringIO

    df = pd.read_csv(StringIO(csv_content))

    output_filename = _store_resource(df, project_manifest_path, filename, explanation, "csv")

    return {
        "output_filename": output_filename,
        "n_rows": len(df),
        "columns": list(df.columns),
        "preview": df.head(5).to_dict(orient="records"),
    }


def get_dataset_head(project_manifest_path: str, input_filename: str, n_rows: int = 10) -> dict:
    """
    Get the first n rows of a dataset for quick inspection.

    Parameters
    ----------
    project_manifest_path : str
        Path to the project manifest file.
    input_filename : str
        Filename of the dataset resource.
    n_rows : int, default=10
        Number of rows to return from the top of the dataset.

    Returns
    -------
    dict
        {
            "input_filename": str,
            "n_rows_returned": int,
            "n_rows_total": int,
            "columns": list[str],
            "rows": list[dict],
        }
    """
    df = _load_resource(project_manifest_path, input_filename)
    head = df.head(n_rows)

    return {
        "input_filename": input_filename,
        "n_rows_returned": len(head),
        "n_rows_total": len(df),
        "columns": list(df.columns),
        "rows": head.to_dict(orient="records"),
    }


def get_dataset_summary(project_manifest_path: str, input_filename: str, columns: Optional[List[str]] = None) -> dict:
    """
    Summarize each column the way the hypothesis tests will see it.

    Numeric columns can be used as the response of mean, t and median tests;
    categorical columns as the response of proportion tests or as the
    explanatory (grouping) variable of a difference in proportions.

    Parameters
    ----------
    project_manifest_path : str
        Path to the project manifest file.
    input_filename : str
        Filename of the dataset resource.
    columns : list[str] | None, optional
        Columns to summarize. If None, all columns are summarized.

    Returns
    -------
    dict
        {
            "input_filename": str,
            "n_rows": int,
            "n_columns": int,
            "column_summaries": dict,
        }

        Numeric column summary: kind, dtype, count, n_missing, min, max, mean, median, std.
        Categorical column summary: kind, dtype, count, n_missing, n_levels,
        levels (up to 20), level_counts (up to 20).
    """
    df = _load_resource(project_manifest_path, input_filename)

    if columns is None:
        cols_to_summarize = list(df.columns)
    else:
        _validate_columns(df, columns)
        cols_to_summarize = columns

    column_summaries = {}
    for col in cols_to_summarize:
        col_data = df[col]
        count = int(col_data.notna().sum())
        summary = {
            "dtype": str(col_data.dtype),
            "count": count,
            "n_missing": int(col_data.isna().sum()),
        }

        if pd.api.types.is_numeric_dtype(col_data) and not pd.api.types.is_bool_dtype(col_data):
            summary["kind"] = "numeric"
            for stat_name in ("min", "max", "mean", "median", "std"):
                summary[stat_name] = float(getattr(col_data, stat_name)()) if count > 0 else None
        else:
            counts = col_data.dropna().astype(str).value_counts().sort_index()
            summary["kind"] = "categorical"
            summary["n_levels"] = int(len(counts))
            summary["levels"] = list(counts.index[:20])
            summary["level_counts"] = {str(k): int(v) for k, v in counts.head(20).items()}

        column_summaries[col] = summary

    return {
        "input_filename": input_filename,
        "n_rows": len(df),
        "n_columns": len(df.columns),
        "column_summaries": column_summaries,
    }


@loggable
def drop_missing_rows(
    input_filename: str,
    project_manifest_path: str,
    columns: Optional[List[str]],
    output_filename: str,
    explanation: str,
) -> dict:
    """
    Drop rows with a missing value in any of the given columns (all columns if None).

    Returns
    -------
    dict
        {
            "output_filename": str,
            "n_rows_before": int,
            "n_rows_after": int,
            "n_rows_dropped": int,
        }
    """
    df = _load_resource(project_manifest_path, input_filename)
    if columns is not None:
        _validate_columns(df, columns)

    df_clean = df.dropna(subset=columns).reset_index(drop=True)

    output_filename = _store_resource(df_clean, project_manifest_path, output_filename, explanation, "csv")

    return {
        "output_filename": output_filename,
        "n_rows_before": len(df),
        "n_rows_after": len(df_clean),
        "n_rows_dropped": len(df) - len(df_clean),
    }


@loggable
def sample_dataset_rows(
    input_filename: str,
    project_manifest_path: str,
    n_rows: int,
    output_filename: str,
    explanation: str,
    random_state: int = 42,
) -> dict:
    """
    Draw a random subset of rows without replacement.

    Returns
    -------
    dict
        {
            "output_filename": str,
            "n_rows_total": int,
            "n_rows_sampled": int,
            "random_state": int,
        }
    """
    df = _load_resource(project_manifest_path, input_filename)
    if n_rows <= 0 or n_rows > len(df):
        raise ValueError(f"n_rows must lie in [1, {len(df)}], got {n_rows}")

    df_sample = df.sample(n=n_rows, random_state=random_state).reset_index(drop=True)

    output_filename = _store_resource(df_sample, project_manifest_path, output_filename, explanation, "csv")

    return {
        "output_filename": output_filename,
        "n_rows_total": len(df),
        "n_rows_sampled": len(df_sample),
        "random_state": random_state,
    }


@loggable
def derive_category_from_threshold(
    input_filename: str,
    project_manifest_path: str,
    column: str,
    new_column: str,
    threshold: float,
    label_below: str,
    label_at_or_above: str,
    output_filename: str,
    explanation: str,
) -> dict:
    """
    Add a two-level categorical column by thresholding a numeric column.

    Rows with column < threshold get `label_below`, the others
    `label_at_or_above`; missing values stay missing.

    Example:
        derive_category_from_threshold(
            "flights_A3F2B1D4.csv", manifest, "hour", "day_hour",
            threshold=12, label_below="morning", label_at_or_above="not morning",
            output_filename="flights_day_hour", explanation="Flights with morning flag"
        )
    """
    df = _load_resource(project_manifest_path, input_filename)
    _validate_columns(df, [column])
    if not pd.api.types.is_numeric_dtype(df[column]):
        raise ValueError(f"Column '{column}' must be numeric, got {df[column].dtype}")
    if new_column in df.columns:
        raise ValueError(f"Column '{new_column}' already exists")

    df_result = df.copy()
    labels = pd.Series(label_at_or_above, index=df.index, dtype=object)
    labels[df[column] < threshold] = label_below
    labels[df[column].isna()] = None
    df_result[new_column] = labels

    output_filename = _store_resource(df_result, project_manifest_path, output_filename, explanation, "csv")

    return {
        "output_filename": output_filename,
        "n_rows": len(df_result),
        "new_column": new_column,
        "level_counts": {str(k): int(v) for k, v in df_result[new_column].value_counts().items()},
    }


@loggable
def derive_category_from_values(
    input_filename: str,
    project_manifest_path: str,
    column: str,
    new_column: str,
    mapping: Dict[str, str],
    output_filename: str,
    explanation: str,
    default_label: Optional[str] = None,
) -> dict:
    """
    Add a categorical column by mapping the values of an existing column.

    Values are matched on their string form, so {"1": "winter"} matches the
    integer month 1. Unmapped values get `default_label` (missing if None).

    Example:
        derive_category_from_values(
            "flights_A3F2B1D4.csv", manifest, "month", "season",
            mapping={"1": "winter", "2": "winter", "6": "summer", "7": "summer"},
            output_filename="flights_season", explanation="Flights with season"
        )
    """
    df = _load_resource(project_manifest_path, input_filename)
    _validate_columns(df, [column])
    if new_column in df.columns:
        raise ValueError(f"Column '{new_column}' already exists")

    df_result = df.copy()
    source = df[column]
    # integer columns with a missing value are read back as floats; key 1.0 as "1"
    if pd.api.types.is_float_dtype(source) and (source.dropna() % 1 == 0).all():
        source = source.astype("Int64")
    keys = source.astype(str).where(df[column].notna())
    df_result[new_column] = keys.map({str(k): v for k, v in mapping.items()})
    if default_label is not None:
        df_result.loc[df[column].notna() & df_result[new_column].isna(), new_column] = default_label

    output_filename = _store_resource(df_result, project_manifest_path, output_filename, explanation, "csv")

    return {
        "output_filename": output_filename,
        "n_rows": len(df_result),
        "new_column": new_column,
        "n_unmapped": int(df_result[new_column].isna().sum()),
        "level_counts": {str(k): int(v) for k, v in df_result[new_column].value_counts().items()},
    }


def get_all_dataset_tools():
    """Returns the dataset tools for MCP server registration."""
    return [
        store_csv_as_dataset,
        store_csv_as_dataset_from_text,
        get_dataset_head,
        get_dataset_summary,
        drop_missing_rows,
        sample_dataset_rows,
        derive_category_from_threshold,
        derive_category_from_values,
    ]
