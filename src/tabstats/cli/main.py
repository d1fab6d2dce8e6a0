"""
tabstats CLI - Main Application

Command-line interface for the tabstats report pipeline.
Built with Typer for the CLI framework and Rich for terminal output.

Usage:
    tabstats report [OPTIONS]     # Clean a CSV and print per-year reports
    tabstats datasets [OPTIONS]   # List dataset profiles
    tabstats --help               # Show help message
"""

from typing import Optional

import typer

from .commands.datasets import datasets
from .commands.report import report
from .utils.console import console

app = typer.Typer(
    name="tabstats",
    help="📊 tabstats - descriptive reports over flat CSV datasets",
    add_completion=True,
    rich_markup_mode="rich",
    no_args_is_help=True,
)


def version_callback(value: bool):
    """Print version and exit."""
    if value:
        from . import __version__
        console.print(f"[bold cyan]tabstats[/bold cyan] version [green]{__version__}[/green]")
        raise typer.Exit()


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
):
    """
    📊 tabstats

    Reproducible descriptive reports over a flat CSV file.

    \b
    Stages:
      1. Load      whole CSV into memory, text columns
      2. Normalize case-fold names and text, null-like tokens → "unknown", parse dates
      3. Filter    date range, duplicates, excluded categories
      4. Classify  allow/deny label per row
      5. Report    per-year counts by weekday, month and category, with charts

    \b
    Quick Start:
      • List profiles:  tabstats datasets --config config/datasets.yml
      • Crime report:   tabstats report --csv data/crime.csv --dataset crime
      • Save charts:    tabstats report --csv data/crime.csv --dataset crime --plots-dir figures
    """
    pass


app.command(name="report", help="Clean a CSV and print per-year summary reports")(report)
app.command(name="datasets", help="List dataset profiles")(datasets)


if __name__ == "__main__":
    app()
