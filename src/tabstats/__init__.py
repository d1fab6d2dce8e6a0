"""
tabstats - reproducible descriptive reports over flat CSV datasets.

Load → normalize → filter → classify → aggregate → report.
"""

__version__ = "0.3.0"
