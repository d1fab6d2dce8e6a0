"""
Analysis layer: classification, aggregation and per-year summary reports.
"""

from .aggregate import (
    AggregationBucket,
    bucket_counts,
    buckets_to_frame,
    calendar_buckets,
    category_counts,
    extreme_bucket,
    mean_count,
)
from .classify import add_label, classify, labelled_subset
from .report import (
    ReportSet,
    SummaryReport,
    YearResult,
    available_years,
    build_reports,
    build_year_result,
    summarize,
    year_over_year,
)

__all__ = [
    "AggregationBucket",
    "ReportSet",
    "SummaryReport",
    "YearResult",
    "add_label",
    "available_years",
    "bucket_counts",
    "buckets_to_frame",
    "calendar_buckets",
    "build_reports",
    "build_year_result",
    "category_counts",
    "classify",
    "extreme_bucket",
    "labelled_subset",
    "mean_count",
    "summarize",
    "year_over_year",
]
