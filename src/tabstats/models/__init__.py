"""
Data models and configuration schemas for the tabstats pipeline.
"""

from .parameters import (
    DatasetProfile,
    PlottingParameters,
    PipelineParameters,
    load_profiles,
)

__all__ = [
    "DatasetProfile",
    "PlottingParameters",
    "PipelineParameters",
    "load_profiles",
]
