"""
Group-and-count aggregations over calendar buckets and categories.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence

import polars as pl

from ..errors import DatasetError

WEEKDAY_NAMES = (
    "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday",
)
MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)
UNKNOWN_BUCKET = "unknown"


@dataclass(frozen=True)
class AggregationBucket:
    key: str
    count: int


def _bucket_expr(date_column: str, bucket: str) -> tuple[pl.Expr, Sequence[str]]:
    # polars weekday() is 1=Monday..7=Sunday, month() is 1..12
    if bucket == "weekday":
        return pl.col(date_column).dt.weekday(), WEEKDAY_NAMES
    if bucket == "month":
        return pl.col(date_column).dt.month(), MONTH_NAMES
    raise ValueError(f"Unknown bucket '{bucket}'. Use 'weekday' or 'month'")


def bucket_counts(df: pl.DataFrame, date_column: str, bucket: str = "weekday") -> List[AggregationBucket]:
    """
    Count rows per weekday or month of `date_column`.

    Buckets come out in calendar order and only when present. Rows with a null
    date are counted in a trailing "unknown" bucket, so the counts always add
    up to df.height.
    """
    key, names = _bucket_expr(date_column, bucket)
    if date_column not in df.columns:
        raise DatasetError(f"Date column '{date_column}' not found. Found: {df.columns}")
    dtype = df.schema[date_column]
    if dtype != pl.Date and dtype != pl.Datetime:
        raise DatasetError(f"Column '{date_column}' is {dtype}, expected a parsed date")
    if df.is_empty():
        return []

    counts = (
        df.group_by(key.alias("_key"))
          .agg(pl.len().alias("count"))
          .sort("_key", nulls_last=True)
    )
    return [
        AggregationBucket(names[k - 1] if k is not None else UNKNOWN_BUCKET, int(n))
        for k, n in counts.iter_rows()
    ]


def extreme_bucket(buckets: Sequence[AggregationBucket], which: str = "max") -> Optional[AggregationBucket]:
    """
    Highest ("max") or lowest ("min") bucket.

    Ties go to the first bucket in sequence order. Returns None for no buckets.
    """
    if which not in ("max", "min"):
        raise ValueError(f"which must be 'max' or 'min', got '{which}'")
    best = None
    for b in buckets:
        if best is None:
            best = b
        elif which == "max" and b.count > best.count:
            best = b
        elif which == "min" and b.count < best.count:
            best = b
    return best


def calendar_buckets(buckets: Sequence[AggregationBucket]) -> List[AggregationBucket]:
    """Drop the trailing null-date bucket, leaving real weekdays or months."""
    return [b for b in buckets if b.key != UNKNOWN_BUCKET]


def mean_count(buckets: Sequence[AggregationBucket]) -> float:
    if not buckets:
        return 0.0
    return sum(b.count for b in buckets) / len(buckets)


def category_counts(df: pl.DataFrame, column: str, top_n: int = 10) -> List[AggregationBucket]:
    """
    Rows per category value, ascending by count, keeping the last `top_n`.

    Equal counts keep first-seen order, so the result is deterministic.
    """
    if column not in df.columns:
        raise DatasetError(f"Category column '{column}' not found. Found: {df.columns}")
    if df.is_empty():
        return []

    counts = (
        df.group_by(column, maintain_order=True)
          .agg(pl.len().alias("count"))
          .sort("count", maintain_order=True)
          .tail(top_n)
    )
    return [
        AggregationBucket(str(k) if k is not None else UNKNOWN_BUCKET, int(n))
        for k, n in counts.iter_rows()
    ]


def buckets_to_frame(buckets: Sequence[AggregationBucket], key_name: str = "bucket") -> pl.DataFrame:
    return pl.DataFrame(
        {key_name: [b.key for b in buckets], "count": [b.count for b in buckets]},
        schema={key_name: pl.Utf8, "count": pl.Int64},
    )
