"""
Rich Logging Utilities

RichHandler setup for the `tabstats` logger and Rich table builders for
report output.
"""

import logging
from typing import Any, Dict, Optional, Sequence

from rich.logging import RichHandler
from rich.table import Table

from .console import console, format_value

LOGGER_NAME = "tabstats"


def setup_rich_logging(level: str = "INFO") -> logging.Logger:
    """
    Set up the Rich logging handler on the package logger.

    Library modules log through logging.getLogger(__name__), so everything
    under `tabstats.*` ends up here.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR)

    Returns:
        The configured `tabstats` logger
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, level.upper()))

    # Remove existing handlers
    logger.handlers.clear()

    rich_handler = RichHandler(
        console=console,
        rich_tracebacks=True,
        tracebacks_show_locals=False,
        markup=True,
        show_time=True,
        show_path=False,
    )
    rich_handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(rich_handler)

    return logger


def create_summary_table(
    title: str,
    data: Dict[str, Any],
    show_header: bool = True,
    labels: Optional[Dict[str, str]] = None,
) -> Table:
    """
    Create a summary table from a dictionary.

    Args:
        title: Table title
        data: Dictionary of key-value pairs
        show_header: Whether to show column headers
        labels: Optional display names overriding the Title Cased keys

    Returns:
        Rich Table instance
    """
    labels = labels or {}
    table = Table(title=title, show_header=show_header)

    if show_header:
        table.add_column("Metric", style="cyan", width=30)
        table.add_column("Value", style="green", justify="right")
    else:
        table.add_column("", style="cyan", width=30)
        table.add_column("", style="green", justify="right")

    for key, value in data.items():
        formatted_key = labels.get(key, key.replace("_", " ").title())
        table.add_row(formatted_key, format_value(value))

    return table


def create_bucket_table(title: str, buckets: Sequence, key_header: str = "Bucket") -> Table:
    """Two-column table of (key, count) buckets with each bucket's share."""
    table = Table(title=title, box=None)
    table.add_column(key_header, style="cyan")
    table.add_column("Count", style="green", justify="right")
    table.add_column("Share", style="dim", justify="right")

    total = sum(b.count for b in buckets)
    for b in buckets:
        pct = (b.count / total * 100) if total > 0 else 0
        table.add_row(b.key, f"{b.count:,}", f"{pct:.1f}%")
    return table


def create_year_over_year_table(rows: Sequence[Dict[str, Any]], title: str = "📊 Year over Year") -> Table:
    """One row per year; columns taken from the first row's keys."""
    table = Table(title=title)
    if not rows:
        table.add_column("No years reported", style="dim")
        return table

    columns = list(rows[0].keys())
    for col in columns:
        justify = "left" if col in ("busiest_weekday", "busiest_month") else "right"
        table.add_column(col.replace("_", " ").title(), style="cyan" if col == "year" else "green", justify=justify)
    for row in rows:
        table.add_row(*[
            str(row[c]) if c == "year" else format_value(row[c])
            for c in columns
        ])
    return table
