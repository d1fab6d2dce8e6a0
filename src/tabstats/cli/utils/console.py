"""
Rich Console Singleton

Globally accessible Rich console with the tabstats theme, value formatting
shared by every table, and the panels printed by the report commands.
"""

from datetime import date
from pathlib import Path
from typing import Any, Mapping

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.theme import Theme

custom_theme = Theme({
    "info": "cyan",
    "success": "bold green",
    "warning": "bold yellow",
    "error": "bold red",
    "step": "bold blue",
    "path": "italic cyan",
    "value": "green",
    "key": "cyan",
    "dim": "dim",
})

console = Console(theme=custom_theme)


def format_value(value: Any) -> str:
    """
    Render a report or configuration value for a table cell.

    None shows as "-", floats with two decimals, ints with thousands
    separators, dates as ISO, lists and tuples comma-joined ("all" if empty).
    """
    if value is None:
        return "-"
    if isinstance(value, bool):
        return "yes" if value else "no"
    if isinstance(value, float):
        return f"{value:,.2f}"
    if isinstance(value, int):
        return f"{value:,}"
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, Path):
        return f"[path]{escape(str(value))}[/path]"
    if isinstance(value, (list, tuple)):
        return ", ".join(format_value(v) for v in value) or "all"
    return escape(str(value))


def print_step(step_num: int, title: str, description: str = ""):
    """Step header panel ("STEP 1: CONFIGURATION")."""
    content = f"[step]STEP {step_num}: {title.upper()}[/step]"
    if description:
        content += f"\n{description}"

    console.print()
    console.print(Panel.fit(content, border_style="cyan"))


def print_success(message: str, details: str = ""):
    content = message
    if details:
        content += f"\n\n{details}"
    console.print(Panel(content, title="[success]Success[/success]", border_style="green"))


def print_error(message: str, solution: str = ""):
    """
    Print an error message in a panel.

    Args:
        message: Error message (markup allowed; escape exception text first)
        solution: Optional suggested fix
    """
    content = message
    if solution:
        content += f"\n\n[bold]Solution:[/bold]\n{solution}"
    console.print(Panel(content, title="[error]Error[/error]", border_style="red"))


def print_warning(message: str):
    console.print(f"[warning]{message}[/warning]")


def print_failures(failures: Mapping[int, str]):
    """One warning line per failed year section, in year order."""
    for year, message in sorted(failures.items()):
        print_warning(f"Report section {year} failed: {escape(message)}")


def print_config(config_dict: Mapping[str, Any], title: str = "Configuration"):
    """Two-column table of run parameters; keys in Title Case."""
    table = Table(title=title, show_header=False, box=None)
    table.add_column("Parameter", style="key", width=25)
    table.add_column("Value", style="value")

    for key, value in config_dict.items():
        table.add_row(key.replace("_", " ").title(), format_value(value))

    console.print()
    console.print(table)
    console.print()
