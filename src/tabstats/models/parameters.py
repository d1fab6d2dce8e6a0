"""
Pydantic parameter models for the tabstats pipeline.

Every model forbids unknown fields so typos in JSON/YAML configuration are
reported instead of silently ignored.

    DatasetProfile      - column roles and cleaning rules for one dataset
    PlottingParameters  - chart theme and output options
    PipelineParameters  - one full report run (input CSV + profile + years)
"""

from __future__ import annotations

import json
from datetime import date
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..errors import DatasetError

DEFAULT_DATE_FORMAT = "%m/%d/%Y"
DEFAULT_NULL_TOKENS = ["", "na", "null", "<null>"]


def _fold(name: str) -> str:
    return name.strip().lower()


class DatasetProfile(BaseModel):
    """
    Column roles and cleaning rules for a dataset.

    Column names are case-folded on validation, matching what the loader does
    to CSV headers.
    """

    model_config = ConfigDict(extra="forbid")

    name: str = Field(..., min_length=1)
    columns: List[str] = Field(
        default_factory=list,
        description="Columns kept after loading (empty keeps all)",
    )
    date_column: str = Field(..., description="Column used for date filtering and bucketing")
    date_formats: Dict[str, str] = Field(
        default_factory=dict,
        description="Date column -> strftime format of its text values",
    )
    numeric_columns: List[str] = Field(default_factory=list)
    category_column: str
    secondary_column: Optional[str] = None
    excluded_categories: List[str] = Field(default_factory=list)
    top_column: Optional[str] = Field(
        None,
        description="Column ranked in the top-N table (defaults to category_column)",
    )
    top_n: int = Field(10, ge=1, le=100)

    label_column: str = "label"
    label_name: str = Field("labelled", description="Human-readable name of the 'yes' subset")
    label_allow: List[str] = Field(default_factory=list)
    label_deny: List[str] = Field(default_factory=list)

    reclassify: Dict[str, Dict[str, str]] = Field(
        default_factory=dict,
        description="Column -> {old value: new value} applied after normalization",
    )
    amount_column: Optional[str] = None

    null_tokens: List[str] = Field(default_factory=lambda: list(DEFAULT_NULL_TOKENS))
    sentinel: str = "unknown"
    encoding: str = Field(
        "utf8",
        pattern=r"^(utf8|utf8-lossy|latin-1|cp1252)$",
        description="CSV text encoding; utf8-lossy replaces invalid bytes with U+FFFD",
    )

    start: Optional[date] = None
    end: Optional[date] = None

    @field_validator("columns", "numeric_columns")
    @classmethod
    def fold_column_lists(cls, v: List[str]) -> List[str]:
        return [_fold(c) for c in v]

    @field_validator("date_column", "category_column", "label_column")
    @classmethod
    def fold_column(cls, v: str) -> str:
        v = _fold(v)
        if not v:
            raise ValueError("column name must not be empty")
        return v

    @field_validator("secondary_column", "top_column", "amount_column")
    @classmethod
    def fold_optional_column(cls, v: Optional[str]) -> Optional[str]:
        return _fold(v) if v is not None else None

    @field_validator("date_formats")
    @classmethod
    def fold_date_formats(cls, v: Dict[str, str]) -> Dict[str, str]:
        return {_fold(k): fmt for k, fmt in v.items()}

    @field_validator("excluded_categories", "label_allow", "label_deny", "null_tokens")
    @classmethod
    def fold_values(cls, v: List[str]) -> List[str]:
        # Compared against normalized (trimmed, lower-cased) cells
        return [_fold(x) for x in v]

    @field_validator("reclassify")
    @classmethod
    def fold_reclassify(cls, v: Dict[str, Dict[str, str]]) -> Dict[str, Dict[str, str]]:
        return {
            _fold(col): {_fold(old): _fold(new) for old, new in mapping.items()}
            for col, mapping in v.items()
        }

    @model_validator(mode="after")
    def check_columns(self) -> "DatasetProfile":
        """Every column with a role must be loaded, and the date column must have a format."""
        if self.date_column not in self.date_formats:
            self.date_formats[self.date_column] = DEFAULT_DATE_FORMAT

        if self.columns:
            referenced = {
                "date_column": self.date_column,
                "category_column": self.category_column,
                "secondary_column": self.secondary_column,
                "top_column": self.top_column,
                "amount_column": self.amount_column,
            }
            for role, col in referenced.items():
                if col is not None and col not in self.columns:
                    raise ValueError(f"{role} '{col}' is not in columns")
            for col in list(self.date_formats) + self.numeric_columns + list(self.reclassify):
                if col not in self.columns:
                    raise ValueError(f"'{col}' is not in columns")

        if self.amount_column is not None and self.amount_column not in self.numeric_columns:
            raise ValueError(f"amount_column '{self.amount_column}' must be listed in numeric_columns")

        return self

    @property
    def ranked_column(self) -> str:
        return self.top_column or self.category_column


def load_profiles(path: Path) -> Dict[str, DatasetProfile]:
    """
    Load dataset profiles from a YAML file of the form::

        datasets:
          crime:
            date_column: occurred_date
            ...
    """
    with Path(path).open("r", encoding="utf-8") as f:
        y = yaml.safe_load(f) or {}
    root = y.get("datasets", {}) or {}
    profiles = {}
    for name, body in root.items():
        profiles[name] = DatasetProfile(name=name, **(body or {}))
    return profiles


def get_profile(path: Path, name: str) -> DatasetProfile:
    profiles = load_profiles(path)
    if name not in profiles:
        available = ", ".join(sorted(profiles)) or "none"
        raise DatasetError(f"Unknown dataset profile '{name}'. Available: {available}")
    return profiles[name]


class PlottingParameters(BaseModel):
    """Chart rendering options."""

    model_config = ConfigDict(extra="forbid")

    output_dir: Optional[Path] = Field(None, description="Directory for saved figures (None: don't save)")
    theme: str = Field("default", pattern=r"^(default|prism_rain|minimal|presentation)$")
    dpi: int = Field(200, ge=72, le=1200)
    format: str = Field("png", pattern=r"^(png|pdf|svg)$")
    figure_width: float = Field(10.0, gt=0, le=50)
    figure_height: float = Field(5.0, gt=0, le=50)
    show: bool = False

    def get_figsize(self) -> Tuple[float, float]:
        return (self.figure_width, self.figure_height)


class PipelineParameters(BaseModel):
    """
    Parameters for one report run.

    `years` selects the year slices to report; empty means every year present
    in the filtered data. `start`/`end` override the profile's date range.
    """

    model_config = ConfigDict(extra="forbid")

    csv_path: Path
    profile: DatasetProfile
    years: List[int] = Field(default_factory=list)
    start: Optional[date] = None
    end: Optional[date] = None
    plotting: PlottingParameters = Field(default_factory=PlottingParameters)

    @field_validator("csv_path")
    @classmethod
    def validate_csv_path(cls, v: Path) -> Path:
        if not v.exists():
            raise ValueError(f"Path does not exist: {v}")
        if not v.is_file():
            raise ValueError(f"Not a file: {v}")
        return v

    @field_validator("years")
    @classmethod
    def validate_years(cls, v: List[int]) -> List[int]:
        for year in v:
            if not 1900 <= year <= 2100:
                raise ValueError(f"Year {year} out of range (1900-2100)")
        return sorted(set(v))

    def date_range(self) -> Tuple[Optional[date], Optional[date]]:
        start = self.start if self.start is not None else self.profile.start
        end = self.end if self.end is not None else self.profile.end
        return start, end

    def to_json(self, path: Path) -> None:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.model_dump_json(indent=2), encoding="utf-8")

    @classmethod
    def from_json(cls, path: Path) -> "PipelineParameters":
        with Path(path).open("r", encoding="utf-8") as f:
            return cls.model_validate(json.load(f))
