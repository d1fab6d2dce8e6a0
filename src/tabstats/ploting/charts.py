"""
Report charts: bucket counts with a mean reference line, top-N categories.

Each plot function returns (fig, ax). Figures are saved when `out_path` is
given and closed unless `show` is set.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Dict, Optional, Sequence, Tuple

import matplotlib.pyplot as plt
import matplotlib.ticker as mticker
import numpy as np

from ..analysis.aggregate import AggregationBucket, calendar_buckets, mean_count
from .plotting_config import MEAN_LINE_COLOR, apply_grid, set_spine_visibility

if TYPE_CHECKING:
    from ..analysis.report import YearResult
    from ..models.parameters import PlottingParameters

logger = logging.getLogger(__name__)


def _rc_color(i: int = 0) -> str:
    base = plt.rcParams.get("axes.prop_cycle", None)
    palette = base.by_key().get("color", list(plt.cm.tab10.colors)) if base else list(plt.cm.tab10.colors)
    return palette[i % len(palette)]


def _finish(fig, out_path: Optional[Path], show: bool, dpi: int) -> None:
    fig.tight_layout()
    if out_path:
        out_path = Path(out_path)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(out_path, dpi=dpi, bbox_inches="tight")
        logger.info(f"Saved plot to [path]{out_path}[/path]")
    if show:
        plt.show()
    else:
        plt.close(fig)


def _empty(title: str, figsize) -> Tuple[plt.Figure, plt.Axes]:
    fig, ax = plt.subplots(figsize=figsize)
    ax.set_title(title)
    ax.text(0.5, 0.5, "No data", transform=ax.transAxes, ha="center", va="center", color="gray")
    ax.set_xticks([]); ax.set_yticks([])
    return fig, ax


def plot_bucket_counts(
    buckets: Sequence[AggregationBucket],
    title: str,
    *,
    kind: str = "bar",
    xlabel: str = "",
    ylabel: str = "Count",
    figsize: Optional[Tuple[float, float]] = None,
    out_path: Optional[Path] = None,
    show: bool = False,
    dpi: int = 200,
) -> Tuple[plt.Figure, plt.Axes]:
    """
    Bar or line chart of bucket counts with a dashed line at the mean count.

    An "unknown" (null-date) bucket is drawn but left out of the mean.
    """
    if kind not in ("bar", "line"):
        raise ValueError(f"kind must be 'bar' or 'line', got '{kind}'")

    if not buckets:
        logger.warning(f"No data to plot for '{title}'")
        fig, ax = _empty(title, figsize)
        _finish(fig, out_path, show, dpi)
        return fig, ax

    labels = [b.key for b in buckets]
    counts = [b.count for b in buckets]
    x = np.arange(len(labels))
    mean = mean_count(calendar_buckets(buckets))

    fig, ax = plt.subplots(figsize=figsize)
    if kind == "bar":
        ax.bar(x, counts, color=_rc_color(0))
    else:
        ax.plot(x, counts, marker="o", color=_rc_color(0))
    ax.axhline(mean, color=MEAN_LINE_COLOR, linestyle="--", linewidth=1.2, label=f"Mean: {mean:,.1f}")

    ax.set_title(title)
    ax.set_xlabel(xlabel)
    ax.set_ylabel(ylabel)
    ax.set_xticks(x)
    ax.set_xticklabels(labels, rotation=45, ha="right")
    ax.yaxis.set_major_locator(mticker.MaxNLocator(integer=True))
    ax.yaxis.set_major_formatter(mticker.StrMethodFormatter("{x:,.0f}"))
    ax.set_ylim(0, max(counts) * 1.12 if max(counts) > 0 else 1)
    apply_grid(ax, axis="y")
    set_spine_visibility(ax)
    ax.legend(loc="upper right")

    _finish(fig, out_path, show, dpi)
    return fig, ax


def plot_category_counts(
    buckets: Sequence[AggregationBucket],
    title: str,
    *,
    xlabel: str = "Count",
    figsize: Optional[Tuple[float, float]] = None,
    out_path: Optional[Path] = None,
    show: bool = False,
    dpi: int = 200,
) -> Tuple[plt.Figure, plt.Axes]:
    """
    Horizontal bars for the top-N categories.

    `buckets` is expected ascending by count (as category_counts returns it),
    which puts the largest bar at the top.
    """
    if not buckets:
        logger.warning(f"No data to plot for '{title}'")
        fig, ax = _empty(title, figsize)
        _finish(fig, out_path, show, dpi)
        return fig, ax

    labels = [b.key for b in buckets]
    counts = [b.count for b in buckets]
    total = max(sum(counts), 1)
    y = np.arange(len(labels))

    if figsize is None:
        figsize = (10, max(4, 0.45 * len(labels) + 2))
    fig, ax = plt.subplots(figsize=figsize)
    ax.barh(y, counts, color=_rc_color(1))
    ax.set_yticks(y)
    ax.set_yticklabels(labels)
    ax.set_xlabel(xlabel)
    ax.set_title(title)
    ax.xaxis.set_major_locator(mticker.MaxNLocator(integer=True))
    ax.xaxis.set_major_formatter(mticker.StrMethodFormatter("{x:,.0f}"))
    ax.set_xlim(0, max(counts) * 1.2 if max(counts) > 0 else 1)
    apply_grid(ax, axis="x")
    set_spine_visibility(ax)

    for yi, v in enumerate(counts):
        pct = 100 * v / total
        ax.annotate(f"{v:,}  ({pct:.1f}%)", xy=(v, yi), xytext=(4, 0), textcoords="offset points",
                    ha="left", va="center", fontsize=9, clip_on=False)

    _finish(fig, out_path, show, dpi)
    return fig, ax


def render_year(
    result: "YearResult",
    plotting: "PlottingParameters",
    label_name: str = "labelled",
) -> Dict[str, plt.Figure]:
    """
    Draw every chart for one year: weekday and month counts for all rows and
    for the labelled subset, plus the top-N categories.

    Files go to `<output_dir>/<year>/` when plotting.output_dir is set.
    """
    year = result.year
    out_dir = Path(plotting.output_dir) / str(year) if plotting.output_dir else None

    def _path(name: str) -> Optional[Path]:
        return out_dir / f"{year}_{name}.{plotting.format}" if out_dir else None

    common = dict(figsize=plotting.get_figsize(), show=plotting.show, dpi=plotting.dpi)
    s, ls = result.summary, result.labelled_summary

    figures = {}
    figures["weekday"], _ = plot_bucket_counts(
        s.weekday_counts, f"Records per weekday ({year})", kind="bar",
        out_path=_path("weekday"), **common,
    )
    figures["month"], _ = plot_bucket_counts(
        s.month_counts, f"Records per month ({year})", kind="line",
        out_path=_path("month"), **common,
    )
    figures["top_categories"], _ = plot_category_counts(
        s.top_categories, f"Top {len(s.top_categories)} categories ({year})",
        out_path=_path("top_categories"), show=plotting.show, dpi=plotting.dpi,
    )
    if ls.total:
        figures["labelled_weekday"], _ = plot_bucket_counts(
            ls.weekday_counts, f"{label_name.capitalize()} records per weekday ({year})", kind="bar",
            out_path=_path("labelled_weekday"), **common,
        )
        figures["labelled_month"], _ = plot_bucket_counts(
            ls.month_counts, f"{label_name.capitalize()} records per month ({year})", kind="line",
            out_path=_path("labelled_month"), **common,
        )
    return figures
