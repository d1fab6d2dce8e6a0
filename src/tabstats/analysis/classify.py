"""
Allow/deny classification of rows into a "yes"/"no" label.

A row is labelled "yes" when its category is in the allow-list and its
secondary field is not in the deny-list. Anything else, including values the
lists have never seen and missing values, is "no".
"""

from __future__ import annotations

from typing import Collection, Optional

import polars as pl

YES = "yes"
NO = "no"


def classify(
    category: Optional[str],
    secondary: Optional[str],
    allow: Collection[str],
    deny: Collection[str],
) -> str:
    if category is None or category not in allow:
        return NO
    if secondary is not None and secondary in deny:
        return NO
    return YES


def add_label(
    df: pl.DataFrame,
    category_column: str,
    secondary_column: Optional[str],
    allow: Collection[str],
    deny: Collection[str],
    label_column: str = "label",
) -> pl.DataFrame:
    """Vectorized `classify` over every row; adds `label_column`."""
    if not allow:
        return df.with_columns(pl.lit(NO).alias(label_column))

    allowed = pl.col(category_column).is_in(list(allow)).fill_null(False)
    if secondary_column is not None and deny:
        denied = pl.col(secondary_column).is_in(list(deny)).fill_null(False)
        cond = allowed & ~denied
    else:
        cond = allowed
    return df.with_columns(
        pl.when(cond).then(pl.lit(YES)).otherwise(pl.lit(NO)).alias(label_column)
    )


def labelled_subset(df: pl.DataFrame, label_column: str = "label") -> pl.DataFrame:
    return df.filter(pl.col(label_column) == YES)
