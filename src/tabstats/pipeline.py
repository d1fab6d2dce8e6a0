"""
End-to-end report pipeline.

    load CSV → normalize → filter → classify → per-year reports → charts
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Optional

import polars as pl

from .analysis.classify import add_label
from .analysis.report import ReportSet, available_years, build_reports
from .models.parameters import DatasetProfile, PipelineParameters
from .ploting.charts import render_year
from .ploting.plotting_config import setup_publication_style
from .staging.filters import apply_filters
from .staging.loader import load_csv
from .staging.normalize import normalize

logger = logging.getLogger(__name__)


def prepare_dataset(
    raw: pl.DataFrame,
    profile: DatasetProfile,
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> pl.DataFrame:
    """Normalize, filter and label a freshly loaded table."""
    df = normalize(raw, profile)
    df = apply_filters(
        df,
        profile.date_column,
        start,
        end,
        category_column=profile.category_column,
        excluded=profile.excluded_categories,
    )
    return add_label(
        df,
        profile.category_column,
        profile.secondary_column,
        profile.label_allow,
        profile.label_deny,
        profile.label_column,
    )


def run_pipeline(params: PipelineParameters, render: bool = True) -> ReportSet:
    """
    Run every stage for `params` and return the per-year results.

    Charts are drawn only when `render` is set and the plotting parameters ask
    for saved or displayed figures.
    """
    profile = params.profile
    raw = load_csv(params.csv_path, profile.columns, encoding=profile.encoding)

    start, end = params.date_range()
    df = prepare_dataset(raw, profile, start, end)

    years = params.years or available_years(df, profile.date_column)
    if not years:
        logger.warning("No rows left after filtering; nothing to report")
    logger.info(f"Building reports for years: {', '.join(map(str, years)) or '-'}")

    report_set = build_reports(df, years, profile)

    plotting = params.plotting
    if render and (plotting.output_dir is not None or plotting.show):
        setup_publication_style(plotting.theme, dpi=plotting.dpi)
        for year in report_set.years:
            try:
                render_year(report_set[year], plotting, label_name=profile.label_name)
            except Exception as e:
                logger.exception(f"Charts for {year} failed")
                report_set.failures[year] = f"{type(e).__name__}: {e}"

    return report_set
