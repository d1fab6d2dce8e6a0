"""
CSV loading.

The whole file is read into memory with every column as text; typing happens
in the normalizer so that malformed cells can be flagged instead of failing
the read.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Sequence

import polars as pl

from ..errors import DatasetError
from .normalize import fold_column_names

logger = logging.getLogger(__name__)


def load_csv(
    path: Path,
    columns: Optional[Sequence[str]] = None,
    encoding: str = "utf8",
) -> pl.DataFrame:
    """
    Load a CSV into a DataFrame of text columns.

    Args:
        path: CSV file
        columns: Columns to keep, in order (matched after case-folding headers).
            None or empty keeps every column.
        encoding: "utf8" (strict), "utf8-lossy", or a codec polars decodes
            in Python first (e.g. "latin-1")

    Returns:
        DataFrame with stripped, lower-cased column names
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"CSV not found: {path}")

    # infer_schema_length=0 reads every column as String
    try:
        df = pl.read_csv(path, infer_schema_length=0, encoding=encoding)
    except UnicodeDecodeError as e:
        raise DatasetError(f"Could not decode {path.name} as {encoding}: {e}") from e
    except pl.exceptions.ComputeError as e:
        if "utf-8" in str(e).lower() or "utf8" in str(e).lower():
            raise DatasetError(
                f"{path.name} is not valid {encoding}; set the profile's encoding "
                f"(e.g. utf8-lossy or latin-1)"
            ) from e
        raise DatasetError(f"Could not parse {path.name}: {e}") from e

    df = df.rename(fold_column_names(df.columns))
    logger.info(f"Loaded [bold]{df.height:,}[/bold] rows x {df.width} columns from [path]{path.name}[/path]")

    if columns:
        wanted = [c.strip().lower() for c in columns]
        missing = [c for c in wanted if c not in df.columns]
        if missing:
            raise DatasetError(f"CSV is missing required columns: {missing}. Found: {df.columns}")
        df = df.select(wanted)

    return df
