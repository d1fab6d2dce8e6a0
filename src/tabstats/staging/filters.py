"""
Row filters: inclusive date range, exact-duplicate removal, excluded categories.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Iterable, Optional

import polars as pl

logger = logging.getLogger(__name__)


def filter_date_range(
    df: pl.DataFrame,
    column: str,
    start: Optional[date],
    end: Optional[date],
) -> pl.DataFrame:
    """
    Keep rows with `start <= column <= end`, sorted ascending by date.

    Either bound may be None (open). Rows with a null date never pass.
    An inverted range (start > end) returns an empty frame.
    """
    if start is not None and end is not None and start > end:
        return df.clear()

    cond = pl.col(column).is_not_null()
    if start is not None:
        cond = cond & (pl.col(column) >= pl.lit(start))
    if end is not None:
        cond = cond & (pl.col(column) <= pl.lit(end))
    return df.filter(cond).sort(column, maintain_order=True)


def drop_duplicate_rows(df: pl.DataFrame) -> pl.DataFrame:
    """Remove rows equal in every column, keeping the first occurrence in place."""
    return df.unique(keep="first", maintain_order=True)


def exclude_categories(df: pl.DataFrame, column: str, excluded: Iterable[str]) -> pl.DataFrame:
    excluded = list(excluded)
    if not excluded:
        return df
    return df.filter(~pl.col(column).is_in(excluded).fill_null(False))


def apply_filters(
    df: pl.DataFrame,
    date_column: str,
    start: Optional[date],
    end: Optional[date],
    category_column: Optional[str] = None,
    excluded: Iterable[str] = (),
) -> pl.DataFrame:
    """Date range, then dedupe, then category exclusion."""
    n_in = df.height
    out = filter_date_range(df, date_column, start, end)
    n_range = out.height
    out = drop_duplicate_rows(out)
    n_unique = out.height
    if category_column is not None:
        out = exclude_categories(out, category_column, excluded)

    logger.info(
        f"Filtered {n_in:,} → {out.height:,} rows "
        f"(out of range: {n_in - n_range:,}, duplicates: {n_range - n_unique:,}, "
        f"excluded: {n_unique - out.height:,})"
    )
    return out
