"""
Staging: load a CSV, normalize it, and filter it down to the rows to report on.
"""

from .filters import apply_filters, drop_duplicate_rows, exclude_categories, filter_date_range
from .loader import load_csv
from .normalize import (
    coerce_numeric,
    normalize,
    fold_column_names,
    normalize_column_names,
    normalize_strings,
    parse_dates,
    reclassify,
    unparseable_column,
)

__all__ = [
    "apply_filters",
    "coerce_numeric",
    "drop_duplicate_rows",
    "exclude_categories",
    "filter_date_range",
    "load_csv",
    "normalize",
    "fold_column_names",
    "normalize_column_names",
    "normalize_strings",
    "parse_dates",
    "reclassify",
    "unparseable_column",
]
