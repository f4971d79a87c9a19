from __future__ import annotations


# =============================================================================
# layout.py (task -> pixel geometry)
#
# compute_layout() is the heart of the chart. It is a pure function:
#   - scales and colours are rebuilt from the dataset on every call
#   - nothing is cached between calls (a resize is just another call)
#   - same tasks + same config -> equal ChartLayout
#
# Coordinates are absolute pixels in a y-down viewport of size
# (layout.width, layout.height). The plot area sits inside the margins.
# =============================================================================

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, Optional, Sequence, Tuple

from categories import extract_categories
from color_encoder import ColorEncoder
from gantt_models import ChartConfig, Task
from scales import BandScale, RowScale, Tick

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Rect:
    x: float
    y: float
    width: float
    height: float
    fill: str
    opacity: float = 1.0

    def contains(self, px: float, py: float) -> bool:
        return self.x <= px <= self.x + self.width and self.y <= py <= self.y + self.height


@dataclass(frozen=True)
class TaskGeometry:
    index: int
    x: float
    y: float
    width: float
    height: float
    fill: str
    label: str
    label_x: float
    label_y: float
    highlight: Rect

    @property
    def rect(self) -> Rect:
        return Rect(self.x, self.y, self.width, self.height, self.fill)


@dataclass(frozen=True)
class PlotArea:
    x0: float
    y0: float
    x1: float
    y1: float


@dataclass(frozen=True)
class ChartLayout:
    width: float
    height: float
    plot: PlotArea
    categories: Tuple[str, ...]
    colors: Tuple[Tuple[str, str], ...]
    bars: Tuple[TaskGeometry, ...]
    x_ticks: Tuple[Tick, ...]
    y_ticks: Tuple[Tick, ...]
    bandwidth: float
    font_size: float

    def color_map(self) -> Dict[str, str]:
        return dict(self.colors)


def build_scales(tasks: Sequence[Task], config: ChartConfig) -> Tuple[BandScale, RowScale]:
    """Fresh band (date -> x) and row (index -> y) scales for this dataset, in plot-local pixels."""
    band = BandScale(
        (t.date for t in tasks),
        (0.0, config.plot_width),
        padding=config.band_padding,
    )
    rows = RowScale(len(tasks), config.row_pitch)
    return band, rows


def compute_layout(
    tasks: Iterable[Task],
    config: Optional[ChartConfig] = None,
    *,
    categories: Optional[Sequence[str]] = None,
) -> ChartLayout:
    """
    Geometry for every task.

    ``categories`` lets a caller pin a precomputed category set; a task whose
    status is not in it raises CategoryNotFoundError instead of getting an
    arbitrary colour.
    """
    config = config or ChartConfig()
    tasks = list(tasks)
    m = config.margins

    cats = tuple(categories) if categories is not None else extract_categories(tasks)
    encoder = ColorEncoder(cats, config.color_range)
    band, rows = build_scales(tasks, config)
    bw = band.bandwidth()

    plot = PlotArea(
        x0=m.left,
        y0=m.top,
        x1=m.left + config.plot_width,
        y1=m.top + rows.span,
    )
    # Rectangles sit centred in their row pitch.
    inset = (config.row_pitch - config.row_height) / 2.0

    bars = []
    for i, t in enumerate(tasks):
        fill = encoder(t.status)
        x = m.left + band(t.date)
        row_top = m.top + rows(i)
        y = row_top + inset
        highlight = Rect(
            x=m.left,
            y=y,
            width=config.plot_width,
            height=config.row_height,
            fill=fill,
            opacity=config.highlight_opacity,
        )
        bars.append(
            TaskGeometry(
                index=i,
                x=x,
                y=y,
                width=bw,
                height=config.row_height,
                fill=fill,
                label=t.label,
                label_x=x + bw / 2.0,
                label_y=row_top + config.label_offset,
                highlight=highlight,
            )
        )

    x_ticks = tuple(
        Tick(value=tk.value, position=m.left + tk.position, label=tk.label) for tk in band.ticks()
    )
    y_ticks = tuple(
        Tick(value=tk.value, position=m.top + tk.position, label=tk.label)
        for tk in rows.ticks([t.label for t in tasks])
    )

    height = max(config.height, m.top + rows.span + m.bottom)
    logger.debug(
        "layout: %d tasks, %d dates, %d categories, canvas %.0fx%.0f",
        len(tasks), len(band), len(cats), config.width, height,
    )

    return ChartLayout(
        width=config.width,
        height=height,
        plot=plot,
        categories=cats,
        colors=tuple(encoder.mapping().items()),
        bars=tuple(bars),
        x_ticks=x_ticks,
        y_ticks=y_ticks,
        bandwidth=bw,
        font_size=config.font_size,
    )
