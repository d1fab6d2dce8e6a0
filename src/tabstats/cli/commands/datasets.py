"""
Datasets Command

List the dataset profiles defined in a YAML config file.
"""

from pathlib import Path

import typer
from pydantic import ValidationError
from rich.markup import escape
from rich.table import Table

from ...models.parameters import load_profiles
from ..utils.console import console, print_error


def datasets(
    config: Path = typer.Option(
        "config/datasets.yml",
        "--config",
        "-c",
        help="YAML file defining dataset profiles",
        file_okay=True,
        dir_okay=False,
    ),
):
    """
    List dataset profiles and their column roles.
    """
    try:
        profiles = load_profiles(config)
    except FileNotFoundError:
        print_error(f"Config file not found: {config}", "Pass --config with a valid YAML file.")
        raise typer.Exit(1)
    except ValidationError as e:
        print_error(f"Invalid dataset profile: {escape(str(e))}", f"Fix the profile definitions in {config}.")
        raise typer.Exit(1)

    table = Table(title=f"Dataset profiles ({config})")
    table.add_column("Name", style="bold cyan")
    table.add_column("Date column", style="green")
    table.add_column("Category", style="green")
    table.add_column("Ranked", style="green")
    table.add_column("Label", style="magenta")
    table.add_column("Allow / deny", style="dim", justify="right")

    for name, p in sorted(profiles.items()):
        table.add_row(
            name,
            f"{p.date_column} ({p.date_formats[p.date_column]})",
            p.category_column,
            p.ranked_column,
            p.label_name,
            f"{len(p.label_allow)} / {len(p.label_deny)}",
        )

    console.print()
    console.print(table)
