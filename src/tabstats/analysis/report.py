"""
Per-year summary reports.

One parameterized function builds the result for any year; results are
returned in an explicit year -> YearResult mapping. A year that fails is
recorded in ReportSet.failures and the remaining years still run.
"""

from __future__ import annotations

import calendar
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional, Tuple

import polars as pl

from .aggregate import (
    AggregationBucket,
    bucket_counts,
    calendar_buckets,
    category_counts,
    extreme_bucket,
)
from .classify import YES, labelled_subset

if TYPE_CHECKING:
    from ..models.parameters import DatasetProfile

logger = logging.getLogger(__name__)

WEEKS_PER_YEAR = 52
MONTHS_PER_YEAR = 12


def days_in_year(year: int) -> int:
    return 366 if calendar.isleap(year) else 365


def _safe_div(num: float, den: float) -> float:
    return num / den if den else 0.0


@dataclass(frozen=True)
class SummaryReport:
    year: int
    total: int
    avg_per_day: float
    avg_per_week: float
    avg_per_month: float
    weekday_counts: Tuple[AggregationBucket, ...]
    month_counts: Tuple[AggregationBucket, ...]
    busiest_weekday: Optional[AggregationBucket]
    quietest_weekday: Optional[AggregationBucket]
    busiest_month: Optional[AggregationBucket]
    quietest_month: Optional[AggregationBucket]
    top_categories: Tuple[AggregationBucket, ...]
    label_total: int = 0
    label_rate: float = 0.0
    amount_total: Optional[float] = None
    amount_mean: Optional[float] = None

    def as_dict(self) -> Dict[str, Any]:
        """Headline scalars, in display order."""

        def _fmt(b: Optional[AggregationBucket]) -> str:
            return f"{b.key} ({b.count:,})" if b is not None else "-"

        out: Dict[str, Any] = {
            "total": self.total,
            "avg_per_day": self.avg_per_day,
            "avg_per_week": self.avg_per_week,
            "avg_per_month": self.avg_per_month,
            "busiest_weekday": _fmt(self.busiest_weekday),
            "quietest_weekday": _fmt(self.quietest_weekday),
            "busiest_month": _fmt(self.busiest_month),
            "quietest_month": _fmt(self.quietest_month),
            "label_total": self.label_total,
            "label_rate": self.label_rate,
        }
        if self.amount_total is not None:
            out["amount_total"] = self.amount_total
            out["amount_mean"] = self.amount_mean if self.amount_mean is not None else 0.0
        return out


@dataclass(frozen=True)
class YearResult:
    year: int
    frame: pl.DataFrame
    labelled: pl.DataFrame
    summary: SummaryReport
    labelled_summary: SummaryReport


@dataclass
class ReportSet:
    results: Dict[int, YearResult] = field(default_factory=dict)
    failures: Dict[int, str] = field(default_factory=dict)

    @property
    def years(self) -> List[int]:
        return sorted(self.results)

    def __getitem__(self, year: int) -> YearResult:
        return self.results[year]


def summarize(
    df: pl.DataFrame,
    year: int,
    date_column: str,
    ranked_column: str,
    top_n: int = 10,
    label_column: Optional[str] = None,
    amount_column: Optional[str] = None,
) -> SummaryReport:
    """
    Scalar statistics and bucket counts for one year slice.

    Averages divide the total by the days in the year (365/366), 52 weeks and
    12 months. An empty slice reports zeros and no busiest/quietest buckets.
    Busiest/quietest are picked among real weekdays and months only; rows
    without a date stay in the "unknown" bucket of the counts.
    """
    total = df.height
    weekdays = tuple(bucket_counts(df, date_column, "weekday"))
    months = tuple(bucket_counts(df, date_column, "month"))

    label_total = 0
    if label_column is not None and label_column in df.columns:
        label_total = df.filter(pl.col(label_column) == YES).height

    amount_total = amount_mean = None
    if amount_column is not None:
        values = df.get_column(amount_column).drop_nulls()
        amount_total = float(values.sum()) if values.len() else 0.0
        amount_mean = float(values.mean()) if values.len() else 0.0

    return SummaryReport(
        year=year,
        total=total,
        avg_per_day=_safe_div(total, days_in_year(year)),
        avg_per_week=_safe_div(total, WEEKS_PER_YEAR),
        avg_per_month=_safe_div(total, MONTHS_PER_YEAR),
        weekday_counts=weekdays,
        month_counts=months,
        busiest_weekday=extreme_bucket(calendar_buckets(weekdays), "max"),
        quietest_weekday=extreme_bucket(calendar_buckets(weekdays), "min"),
        busiest_month=extreme_bucket(calendar_buckets(months), "max"),
        quietest_month=extreme_bucket(calendar_buckets(months), "min"),
        top_categories=tuple(category_counts(df, ranked_column, top_n)),
        label_total=label_total,
        label_rate=_safe_div(label_total, total),
        amount_total=amount_total,
        amount_mean=amount_mean,
    )


def build_year_result(df: pl.DataFrame, year: int, profile: "DatasetProfile") -> YearResult:
    """Slice `df` to `year` and summarize both the slice and its labelled subset."""
    subset = df.filter(pl.col(profile.date_column).dt.year() == year)
    if profile.label_column in subset.columns:
        labelled = labelled_subset(subset, profile.label_column)
    else:
        labelled = subset.clear()

    kwargs = dict(
        date_column=profile.date_column,
        ranked_column=profile.ranked_column,
        top_n=profile.top_n,
        label_column=profile.label_column,
        amount_column=profile.amount_column,
    )
    return YearResult(
        year=year,
        frame=subset,
        labelled=labelled,
        summary=summarize(subset, year, **kwargs),
        labelled_summary=summarize(labelled, year, **kwargs),
    )


def available_years(df: pl.DataFrame, date_column: str) -> List[int]:
    return (
        df.select(pl.col(date_column).dt.year().drop_nulls().unique().sort())
          .to_series()
          .to_list()
    )


def build_reports(df: pl.DataFrame, years: Iterable[int], profile: "DatasetProfile") -> ReportSet:
    """Build one YearResult per year; a failing year is logged and skipped."""
    report_set = ReportSet()
    for year in years:
        try:
            report_set.results[year] = build_year_result(df, year, profile)
        except Exception as e:
            logger.exception(f"Report section for {year} failed")
            report_set.failures[year] = f"{type(e).__name__}: {e}"
    return report_set


_YOY_SCHEMA = {
    "year": pl.Int64,
    "total": pl.Int64,
    "avg_per_day": pl.Float64,
    "avg_per_week": pl.Float64,
    "avg_per_month": pl.Float64,
    "busiest_weekday": pl.Utf8,
    "busiest_month": pl.Utf8,
    "label_total": pl.Int64,
    "label_rate": pl.Float64,
}


def year_over_year(report_set: ReportSet) -> pl.DataFrame:
    """One row of headline numbers per reported year."""
    rows = []
    for year in report_set.years:
        s = report_set[year].summary
        rows.append({
            "year": year,
            "total": s.total,
            "avg_per_day": s.avg_per_day,
            "avg_per_week": s.avg_per_week,
            "avg_per_month": s.avg_per_month,
            "busiest_weekday": s.busiest_weekday.key if s.busiest_weekday else None,
            "busiest_month": s.busiest_month.key if s.busiest_month else None,
            "label_total": s.label_total,
            "label_rate": s.label_rate,
        })
    return pl.DataFrame(rows, schema=_YOY_SCHEMA)
