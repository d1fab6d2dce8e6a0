"""
Chart rendering for summary reports.
"""

from .charts import plot_bucket_counts, plot_category_counts, render_year
from .plotting_config import PALETTES, THEMES, PlotStyle, setup_publication_style

__all__ = [
    "PALETTES",
    "THEMES",
    "PlotStyle",
    "plot_bucket_counts",
    "plot_category_counts",
    "render_year",
    "setup_publication_style",
]
