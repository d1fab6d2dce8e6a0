"""
Report Command

Clean a CSV dataset and print per-year summary reports, optionally saving charts.
"""

from datetime import datetime
from pathlib import Path
from typing import List, Optional

import typer
from pydantic import ValidationError
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from ...errors import DatasetError
from ...models.parameters import PipelineParameters, PlottingParameters, get_profile
from ..utils.console import (
    console,
    print_config,
    print_error,
    print_failures,
    print_step,
    print_success,
    print_warning,
)
from ..utils.logging import (
    create_bucket_table,
    create_summary_table,
    create_year_over_year_table,
    setup_rich_logging,
)


def _build_parameters(
    params_file: Optional[Path],
    csv: Optional[Path],
    dataset: Optional[str],
    config: Path,
    years: List[int],
    start: Optional[datetime],
    end: Optional[datetime],
    top: Optional[int],
    plots_dir: Optional[Path],
    theme: str,
    dpi: int,
    fmt: str,
    show: bool,
) -> PipelineParameters:
    if params_file is not None:
        return PipelineParameters.from_json(params_file)

    if csv is None or dataset is None:
        raise typer.BadParameter("--csv and --dataset are required unless --params is given")

    profile = get_profile(config, dataset)
    if top is not None:
        profile = profile.model_copy(update={"top_n": top})

    return PipelineParameters(
        csv_path=csv,
        profile=profile,
        years=years,
        start=start.date() if start else None,
        end=end.date() if end else None,
        plotting=PlottingParameters(
            output_dir=plots_dir,
            theme=theme,
            dpi=dpi,
            format=fmt,
            show=show,
        ),
    )


def _year_panel(result, label_name: str) -> Panel:
    s = result.summary
    grid = Table.grid(padding=(0, 2))
    grid.add_column()
    grid.add_column()
    grid.add_row(
        create_summary_table(
            f"{result.year}",
            s.as_dict(),
            labels={
                "label_total": f"{label_name.capitalize()} records",
                "label_rate": f"{label_name.capitalize()} share",
            },
        ),
        create_bucket_table("By weekday", s.weekday_counts, key_header="Weekday"),
    )
    grid.add_row(
        create_bucket_table("By month", s.month_counts, key_header="Month"),
        create_bucket_table(f"Top {len(s.top_categories)}", s.top_categories[::-1], key_header="Category"),
    )
    return Panel(grid, title=f"[bold cyan]Summary {result.year}[/bold cyan]", border_style="cyan")


def report(
    csv: Optional[Path] = typer.Option(
        None,
        "--csv",
        help="Input CSV file",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
    dataset: Optional[str] = typer.Option(
        None,
        "--dataset",
        "-d",
        help="Dataset profile name from the config file (e.g. crime, crowdfunding)",
    ),
    config: Path = typer.Option(
        "config/datasets.yml",
        "--config",
        "-c",
        help="YAML file defining dataset profiles",
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
    year: List[int] = typer.Option(
        [],
        "--year",
        "-y",
        help="Year to report (repeatable; default: every year in the data)",
    ),
    start: Optional[datetime] = typer.Option(
        None,
        "--start",
        formats=["%Y-%m-%d"],
        help="First date to include (YYYY-MM-DD)",
    ),
    end: Optional[datetime] = typer.Option(
        None,
        "--end",
        formats=["%Y-%m-%d"],
        help="Last date to include (YYYY-MM-DD)",
    ),
    top: Optional[int] = typer.Option(
        None,
        "--top",
        min=1,
        max=100,
        help="Number of categories in the top-N table (default: profile's top_n)",
    ),
    plots_dir: Optional[Path] = typer.Option(
        None,
        "--plots-dir",
        help="Save charts under this directory (one subdirectory per year)",
        file_okay=False,
        dir_okay=True,
    ),
    theme: str = typer.Option("default", "--theme", help="Plot theme"),
    dpi: int = typer.Option(200, "--dpi", min=72, max=1200, help="DPI of saved charts"),
    fmt: str = typer.Option("png", "--format", help="Chart file format (png, pdf, svg)"),
    show: bool = typer.Option(False, "--show", help="Display charts interactively"),
    params_file: Optional[Path] = typer.Option(
        None,
        "--params",
        help="JSON parameter file (overrides the other options)",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
    save_params: Optional[Path] = typer.Option(
        None,
        "--save-params",
        help="Write the effective parameters to this JSON file",
        dir_okay=False,
    ),
    log_level: str = typer.Option("INFO", "--log-level", help="DEBUG, INFO, WARNING or ERROR"),
):
    """
    Clean a CSV and print per-year summary reports.

    \b
    This command:
      • Case-folds column names and text cells, maps null-like tokens to "unknown"
      • Parses date columns (unparseable dates are flagged and excluded)
      • Filters to the date range, drops duplicates and excluded categories
      • Labels rows with the profile's allow/deny lists
      • Counts rows per weekday, month and category for each year

    \b
    Example:
      tabstats report --csv data/crime.csv --dataset crime --year 2022 --year 2023 \\
        --plots-dir figures/crime
    """
    print_step(1, "CONFIGURATION", "Validating report parameters")

    try:
        params = _build_parameters(
            params_file, csv, dataset, config, year, start, end, top,
            plots_dir, theme, dpi, fmt, show,
        )
    except (ValidationError, DatasetError, FileNotFoundError, typer.BadParameter) as e:
        print_error(
            f"Parameter validation failed: {escape(str(e))}",
            "Check your input parameters and try again."
        )
        raise typer.Exit(1)

    start_d, end_d = params.date_range()
    print_config({
        "csv_path": params.csv_path,
        "dataset": params.profile.name,
        "years": params.years,
        "start": start_d,
        "end": end_d,
        "top_n": params.profile.top_n,
        "plots_dir": params.plotting.output_dir,
        "theme": params.plotting.theme,
    })

    if save_params is not None:
        params.to_json(save_params)
        console.print(f"Parameters saved to [path]{save_params}[/path]")

    logger = setup_rich_logging(log_level)

    print_step(2, "REPORT", "Load → normalize → filter → classify → aggregate")

    # Import here so --help stays fast
    from ...analysis.report import year_over_year
    from ...pipeline import run_pipeline

    try:
        report_set = run_pipeline(params)
    except (DatasetError, FileNotFoundError) as e:
        print_error(f"Report failed: {escape(str(e))}", "Check that the CSV matches the dataset profile.")
        raise typer.Exit(1)
    except Exception as e:
        print_error(f"Report failed: {escape(str(e))}", "Check the error message above for details.")
        if console.is_terminal:
            console.print("\n[dim]Full traceback:[/dim]")
            console.print_exception()
        raise typer.Exit(1)

    for y in report_set.years:
        console.print(_year_panel(report_set[y], params.profile.label_name))

    print_failures(report_set.failures)

    if not report_set.results:
        if report_set.failures:
            print_error("All report sections failed", "Check the error messages above for details")
            raise typer.Exit(1)
        print_warning("No rows matched the filters; nothing to report")
        return

    console.print()
    console.print(create_year_over_year_table(year_over_year(report_set).to_dicts()))
    console.print()

    details = f"Years reported: {', '.join(map(str, report_set.years))}"
    if params.plotting.output_dir is not None:
        details += f"\nCharts saved to: [path]{params.plotting.output_dir}[/path]"
    logger.debug(f"{len(report_set.results)} sections, {len(report_set.failures)} failures")
    print_success("Report completed", details)
