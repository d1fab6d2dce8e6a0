"""
Normalization pass: column names, text cells, dates, numbers, categories.

Every function returns a new DataFrame; the input is never modified.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Dict, Iterable, List, Mapping, Sequence

import polars as pl

from ..errors import DatasetError

if TYPE_CHECKING:
    from ..models.parameters import DatasetProfile

logger = logging.getLogger(__name__)

UNPARSEABLE_SUFFIX = "_unparseable"

# strftime directives that carry a time-of-day component
_TIME_DIRECTIVES = ("%H", "%I", "%M", "%S", "%T", "%R", "%p")


def fold_column_names(columns: Iterable[str]) -> Dict[str, str]:
    """
    Map each header to its stripped, lower-cased form.

    Raises DatasetError when two headers fold to the same name (e.g. "ID", "id").
    """
    mapping = {c: c.strip().lower() for c in columns}
    seen: Dict[str, List[str]] = {}
    for original, folded in mapping.items():
        seen.setdefault(folded, []).append(original)
    clashes = {folded: names for folded, names in seen.items() if len(names) > 1}
    if clashes:
        detail = "; ".join(f"{names} -> '{folded}'" for folded, names in clashes.items())
        raise DatasetError(f"Column names collide after case-folding: {detail}")
    return mapping


def normalize_column_names(df: pl.DataFrame) -> pl.DataFrame:
    return df.rename(fold_column_names(df.columns))


def unparseable_column(date_column: str) -> str:
    return f"{date_column}{UNPARSEABLE_SUFFIX}"


def parse_dates(df: pl.DataFrame, formats: Mapping[str, str]) -> pl.DataFrame:
    """
    Parse text date columns into pl.Date.

    Values that don't match the format (or are missing) become null and are
    flagged in a boolean `<column>_unparseable` column. Formats with a time
    part are parsed as datetimes and truncated to the calendar date.
    """
    out = df
    for col, fmt in formats.items():
        if col not in out.columns:
            raise DatasetError(f"Date column '{col}' not found. Found: {out.columns}")
        if out.schema[col] == pl.Date:
            continue

        raw = pl.col(col).cast(pl.Utf8).str.strip_chars()
        if any(tok in fmt for tok in _TIME_DIRECTIVES):
            parsed = raw.str.strptime(pl.Datetime, fmt, strict=False).dt.date()
        else:
            parsed = raw.str.strptime(pl.Date, fmt, strict=False)

        flag = unparseable_column(col)
        out = out.with_columns(parsed.alias(col), parsed.is_null().alias(flag))

        n_bad = int(out.get_column(flag).sum())
        if n_bad:
            logger.warning(
                f"{n_bad:,} of {out.height:,} rows have an unparseable '{col}' "
                f"(expected {fmt}); flagged in '{flag}' and excluded from date filtering"
            )
    return out


def coerce_numeric(df: pl.DataFrame, columns: Sequence[str]) -> pl.DataFrame:
    """Cast text amounts like "$1,250.00" to Float64. Unconvertible cells become null."""
    out = df
    for col in columns:
        if col not in out.columns:
            raise DatasetError(f"Numeric column '{col}' not found. Found: {out.columns}")
        if out.schema[col] != pl.Utf8:
            out = out.with_columns(pl.col(col).cast(pl.Float64))
            continue

        text = pl.col(col).str.strip_chars()
        value = text.str.replace_all(r"[\$,]", "").cast(pl.Float64, strict=False)
        n_bad = out.select(
            (text.is_not_null() & (text != "") & value.is_null()).sum()
        ).item()
        if n_bad:
            logger.warning(f"{n_bad:,} non-numeric values in '{col}' set to null")
        out = out.with_columns(value.alias(col))
    return out


def normalize_strings(
    df: pl.DataFrame,
    null_tokens: Iterable[str],
    sentinel: str = "unknown",
    exclude: Iterable[str] = (),
) -> pl.DataFrame:
    """
    Trim and lower-case every text cell; null-like cells become `sentinel`.

    Tokens are matched case-insensitively after trimming, so "NA ", "Null"
    and "<NULL>" all match. Missing cells are treated as null-like.
    """
    tokens = sorted({t.strip().lower() for t in null_tokens})
    skip = set(exclude)

    exprs = []
    for col, dtype in df.schema.items():
        if col in skip or dtype != pl.Utf8:
            continue
        folded = pl.col(col).str.strip_chars().str.to_lowercase()
        exprs.append(
            pl.when(pl.col(col).is_null() | folded.is_in(tokens))
            .then(pl.lit(sentinel))
            .otherwise(folded)
            .alias(col)
        )
    return df.with_columns(exprs) if exprs else df


def reclassify(df: pl.DataFrame, column: str, mapping: Mapping[str, str]) -> pl.DataFrame:
    """Map normalized category values onto new ones; unmapped values are kept."""
    if column not in df.columns:
        raise DatasetError(f"Reclassified column '{column}' not found. Found: {df.columns}")
    if not mapping:
        return df
    return df.with_columns(pl.col(column).replace(dict(mapping)))


def normalize(df: pl.DataFrame, profile: "DatasetProfile") -> pl.DataFrame:
    """Full normalization pass: names, dates, numbers, text, reclassification."""
    out = normalize_column_names(df)
    out = parse_dates(out, profile.date_formats)
    out = coerce_numeric(out, profile.numeric_columns)
    out = normalize_strings(out, profile.null_tokens, profile.sentinel)
    for col, mapping in profile.reclassify.items():
        out = reclassify(out, col, mapping)
    return out
