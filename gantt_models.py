from __future__ import annotations


# =============================================================================
# gantt_models.py (data validation models)
#
# This module defines the Pydantic models:
#   - Task: one row of the chart (label, date bucket, status, ...)
#   - Margins: space reserved around the plot area
#   - ChartConfig: every dimension, colour and styling constant the layout
#     engine consumes
#
# Pydantic is used here to:
#   - validate required fields (label, date, status)
#   - normalize input (trim whitespace, dates -> "MM/DD/YYYY", colours -> hex)
#   - provide clear error messages when input is messy
# =============================================================================

from typing import Any, Optional, Tuple

import matplotlib.colors as mcolors
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from date_utils import coerce_date_key


def _normalize_color(value: Any) -> str:
    v = str(value or "").strip()
    if not v:
        raise ValueError("color is required.")
    try:
        return mcolors.to_hex(v).upper()
    except ValueError:
        pass
    # Bare hex without the leading '#'
    try:
        return mcolors.to_hex("#" + v).upper()
    except ValueError:
        raise ValueError(f"'{v}' is not a recognised color (use a name or a hex like #1F77B4).") from None


class Task(BaseModel):
    model_config = ConfigDict(frozen=True)

    label: str
    date: str
    status: str
    type: str = ""
    meeting: str = ""

    @field_validator("label")
    @classmethod
    def _label_not_empty(cls, v: str) -> str:
        v = (v or "").strip()
        if not v:
            raise ValueError("label is required.")
        return v

    @field_validator("date", mode="before")
    @classmethod
    def _date_key(cls, v: Any) -> str:
        key = coerce_date_key(v)
        if key is None:
            raise ValueError("date is required.")
        return key

    @field_validator("status")
    @classmethod
    def _status_not_empty(cls, v: str) -> str:
        v = (v or "").strip()
        if not v:
            raise ValueError("status is required.")
        return v

    @field_validator("type", "meeting", mode="before")
    @classmethod
    def _optional_text(cls, v: Any) -> str:
        if v is None:
            return ""
        return str(v).strip()


class Margins(BaseModel):
    model_config = ConfigDict(frozen=True)

    left: float = Field(default=40, ge=0)
    top: float = Field(default=30, ge=0)
    right: float = Field(default=40, ge=0)
    bottom: float = Field(default=50, ge=0)


class ChartConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    width: float = Field(default=500, gt=0)
    height: float = Field(default=400, gt=0)
    margins: Margins = Field(default_factory=Margins)

    band_padding: float = Field(default=0.4, ge=0.0, lt=1.0)
    color_range: Tuple[str, str] = Field(default=("#1F77B4", "#FF7F0E"))

    row_height: float = Field(default=30, gt=0)
    row_gap: float = Field(default=6, ge=0)
    highlight_opacity: float = Field(default=0.15, ge=0.0, le=1.0)

    label_offset: float = Field(default=20)
    font_size: float = Field(default=11, gt=0)
    font_family: str = Field(default="DejaVu Sans")  # Falls back at render-time if not found.
    label_color: str = Field(default="#1A1A1A")
    dpi: int = Field(default=100, gt=0)

    tooltip_scale: float = Field(default=1.0, gt=0)
    tooltip_offset: Tuple[float, float] = Field(default=(0.0, -8.0))
    tooltip_fade_ms: int = Field(default=200, ge=0)
    tooltip_separator: str = Field(default="/")

    @field_validator("color_range", mode="before")
    @classmethod
    def _normalize_range(cls, v: Any) -> Tuple[str, str]:
        values = list(v or [])
        if len(values) != 2:
            raise ValueError("color_range needs exactly two endpoint colors [low, high].")
        return (_normalize_color(values[0]), _normalize_color(values[1]))

    @field_validator("label_color")
    @classmethod
    def _normalize_label_color(cls, v: str) -> str:
        return _normalize_color(v)

    @field_validator("font_family")
    @classmethod
    def _font_not_empty(cls, v: str) -> str:
        v = (v or "").strip()
        if not v:
            return "DejaVu Sans"
        return v

    @model_validator(mode="after")
    def _plot_area_valid(self) -> "ChartConfig":
        if self.plot_width <= 0:
            raise ValueError("width must be larger than margins.left + margins.right.")
        return self

    @property
    def plot_width(self) -> float:
        return self.width - self.margins.left - self.margins.right

    @property
    def row_pitch(self) -> float:
        """Vertical distance between the tops of two consecutive rows."""
        return self.row_height + self.row_gap


def config_with(config: Optional[ChartConfig] = None, **updates: Any) -> ChartConfig:
    """Return a validated copy of ``config`` (or the defaults) with ``updates`` applied.

    ``model_copy(update=...)`` skips validation, so resize requests and other
    overrides go through a full re-validation here.
    """
    base = (config or ChartConfig()).model_dump()
    base.update(updates)
    return ChartConfig(**base)
