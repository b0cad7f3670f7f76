"""Core tools package - dataset storage and preparation."""

from infer_mcp.tools.core.dataset_ops import (
    store_csv_as_dataset,
    store_csv_as_dataset_from_text,
    get_dataset_head,
    get_dataset_summary,
    drop_missing_rows,
    sample_dataset_rows,
    derive_category_from_threshold,
    derive_category_from_values,
    get_all_dataset_tools,
)

__all__ = [
    'store_csv_as_dataset',
    'store_csv_as_dataset_from_text',
    'get_dataset_head',
    'get_dataset_summary',
    'drop_missing_rows',
    'sample_dataset_rows',
    'derive_category_from_threshold',
    'derive_category_from_values',
    'get_all_dataset_tools',
]
