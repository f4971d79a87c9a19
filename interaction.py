from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Iterable, List, Optional, Tuple

from gantt_models import ChartConfig, Task
from layout import ChartLayout, Rect, TaskGeometry
from scales import DomainLookupError

logger = logging.getLogger(__name__)

# Average glyph width / line height as a fraction of the font size.
_GLYPH_WIDTH = 0.55
_LINE_HEIGHT = 1.25


@dataclass(frozen=True)
class TooltipState:
    visible: bool = False
    content: str = ""
    x: float = 0.0
    y: float = 0.0
    task_index: Optional[int] = None


@dataclass(frozen=True)
class Hit:
    bar: TaskGeometry
    part: str  # "rect" or "label"
    element: Rect


def label_box(bar: TaskGeometry, font_size: float) -> Rect:
    """Approximate extent of a bar's label (centred on label_x, baseline at label_y)."""
    w = len(bar.label) * font_size * _GLYPH_WIDTH
    h = font_size * _LINE_HEIGHT
    return Rect(
        x=bar.label_x - w / 2.0,
        y=bar.label_y - font_size,
        width=w,
        height=h,
        fill=bar.fill,
    )


def hit_test(layout: ChartLayout, x: float, y: float) -> Optional[Hit]:
    """Topmost bar (rectangle or label) under the pixel point; later rows are drawn on top."""
    for bar in reversed(layout.bars):
        lbl = label_box(bar, layout.font_size)
        if lbl.contains(x, y):
            return Hit(bar=bar, part="label", element=lbl)
        if bar.rect.contains(x, y):
            return Hit(bar=bar, part="rect", element=bar.rect)
    return None


def format_tooltip(task: Task, sep: str = "/") -> str:
    return sep.join([task.label, task.date, task.type, task.meeting, task.status])


def tooltip_anchor(
    element: Rect,
    scale: float = 1.0,
    offset: Tuple[float, float] = (0.0, 0.0),
) -> Tuple[float, float]:
    """Tooltip position for a hovered element: its top-centre, scale-corrected, then offset."""
    cx = element.x + element.width / 2.0
    return cx * scale + offset[0], element.y * scale + offset[1]


class HoverController:
    """
    Tooltip state machine for one rendered chart.

    Idle --enter--> Hovered --leave--> Idle. Rectangle and label hovers both
    go through enter(); only the element geometry differs. The most recent
    event wins: a leave for a task that is no longer hovered is ignored, and
    leaving keeps the last content/position (only visibility changes).
    """

    def __init__(self, tasks: Iterable[Task], layout: ChartLayout, config: Optional[ChartConfig] = None):
        self.tasks: List[Task] = list(tasks)
        if len(self.tasks) != len(layout.bars):
            raise ValueError("layout was computed for a different dataset.")
        self.layout = layout
        self.config = config or ChartConfig()
        self._hovered: Optional[int] = None
        self._state = TooltipState()

    @property
    def state(self) -> TooltipState:
        return self._state

    @property
    def hovered(self) -> Optional[int]:
        return self._hovered

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self.layout.bars):
            raise DomainLookupError(index, "row")

    def enter(self, index: int, element: Optional[Rect] = None) -> TooltipState:
        self._check_index(index)
        bar = self.layout.bars[index]
        element = element or bar.rect
        x, y = tooltip_anchor(element, self.config.tooltip_scale, self.config.tooltip_offset)
        self._hovered = index
        self._state = TooltipState(
            visible=True,
            content=format_tooltip(self.tasks[index], self.config.tooltip_separator),
            x=x,
            y=y,
            task_index=index,
        )
        logger.debug("hover enter: task %d (%s)", index, self.tasks[index].label)
        return self._state

    def leave(self, index: int) -> TooltipState:
        self._check_index(index)
        if self._hovered != index:
            return self._state
        self._hovered = None
        self._state = replace(self._state, visible=False)
        logger.debug("hover leave: task %d", index)
        return self._state

    def move(self, x: float, y: float) -> TooltipState:
        """Dispatch enter/leave for a pointer at (x, y) in layout pixels."""
        hit = hit_test(self.layout, x, y)
        new_index = hit.bar.index if hit else None
        if new_index == self._hovered:
            return self._state
        if self._hovered is not None:
            self.leave(self._hovered)
        if hit is not None:
            self.enter(hit.bar.index, hit.element)
        return self._state

    def reset(self) -> TooltipState:
        """Pointer left the chart entirely."""
        if self._hovered is not None:
            self.leave(self._hovered)
        return self._state
