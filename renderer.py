from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, Set, Tuple

import matplotlib
import matplotlib.pyplot as plt
from matplotlib.patches import Rectangle
from matplotlib.text import Text

from gantt_models import ChartConfig, Task
from interaction import HoverController, TooltipState
from layout import ChartLayout, compute_layout

logger = logging.getLogger(__name__)

AXIS_COLOR = "#333333"
TICK_LENGTH = 6.0
TOOLTIP_FRAME_MS = 20


@dataclass
class ChartArtists:
    ax: plt.Axes
    layout: ChartLayout
    highlights: List[Rectangle] = field(default_factory=list)
    bars: List[Rectangle] = field(default_factory=list)
    labels: List[Text] = field(default_factory=list)
    tooltip: Optional[Text] = None


FALLBACK_FONTS = ("Arial", "DejaVu Sans")


def _installed_font_names() -> Set[str]:
    # Matplotlib stores font names; compare case-insensitively.
    from matplotlib import font_manager as fm
    return {f.name.lower() for f in fm.fontManager.ttflist}


def resolve_font_family(preferred: str, fallbacks: Sequence[str] = FALLBACK_FONTS) -> str:
    """
    First of ``preferred`` and ``fallbacks`` that matplotlib can render.
    The last fallback is returned unchecked (DejaVu Sans ships with matplotlib).
    """
    installed = _installed_font_names()
    for family in ((preferred or "").strip(), *fallbacks[:-1]):
        if family and family.lower() in installed:
            return family
    return fallbacks[-1]


def px_to_pt(px: float, dpi: float) -> float:
    """Font sizes are configured in pixels; matplotlib wants points."""
    return px * 72.0 / dpi


def _draw_axes(ax, layout: ChartLayout, fs_pt: float) -> None:
    p = layout.plot

    # Bottom axis: one tick per date band
    ax.hlines(p.y1, p.x0, p.x1, colors=AXIS_COLOR, linewidth=1.0, zorder=2)
    for tk in layout.x_ticks:
        ax.vlines(tk.position, p.y1, p.y1 + TICK_LENGTH, colors=AXIS_COLOR, linewidth=1.0, zorder=2)
        ax.text(
            tk.position,
            p.y1 + TICK_LENGTH + 2,
            tk.label,
            ha="center",
            va="top",
            fontsize=fs_pt * 0.85,
            color=AXIS_COLOR,
            clip_on=False,
        )

    # Left axis: one tick per row
    ax.vlines(p.x0, p.y0, p.y1, colors=AXIS_COLOR, linewidth=1.0, zorder=2)
    for tk in layout.y_ticks:
        ax.hlines(tk.position, p.x0 - TICK_LENGTH, p.x0, colors=AXIS_COLOR, linewidth=1.0, zorder=2)
        ax.text(
            p.x0 - TICK_LENGTH - 2,
            tk.position,
            tk.label,
            ha="right",
            va="center",
            fontsize=fs_pt * 0.85,
            color=AXIS_COLOR,
            clip_on=False,
        )


def render_chart(
    tasks: Iterable[Task],
    config: Optional[ChartConfig] = None,
    *,
    layout: Optional[ChartLayout] = None,
) -> Tuple[plt.Figure, ChartArtists]:
    """
    Draw the chart on a new matplotlib figure sized to the layout in pixels.
    Returns (fig, artists).

    The single axes spans the whole figure with data units == pixels and y
    pointing down, so layout geometry is used as-is.
    """
    config = config or ChartConfig()
    tasks = list(tasks)
    layout = layout or compute_layout(tasks, config)

    matplotlib.rcParams["font.family"] = resolve_font_family(config.font_family)

    fig = plt.figure(figsize=(layout.width / config.dpi, layout.height / config.dpi), dpi=config.dpi)
    ax = fig.add_axes((0.0, 0.0, 1.0, 1.0))
    ax.set_xlim(0, layout.width)
    ax.set_ylim(layout.height, 0)
    ax.axis("off")

    fs_pt = px_to_pt(config.font_size, config.dpi)
    artists = ChartArtists(ax=ax, layout=layout)

    for bar in layout.bars:
        h = bar.highlight
        hl = Rectangle((h.x, h.y), h.width, h.height, facecolor=h.fill, edgecolor="none", alpha=h.opacity, zorder=1)
        ax.add_patch(hl)
        artists.highlights.append(hl)

    for bar in layout.bars:
        rect = Rectangle((bar.x, bar.y), bar.width, bar.height, facecolor=bar.fill, edgecolor="none", zorder=3)
        ax.add_patch(rect)
        artists.bars.append(rect)
        artists.labels.append(
            ax.text(
                bar.label_x,
                bar.label_y,
                bar.label,
                ha="center",
                va="baseline",
                fontsize=fs_pt,
                color=config.label_color,
                zorder=4,
            )
        )

    _draw_axes(ax, layout, fs_pt)

    artists.tooltip = ax.text(
        0.0,
        0.0,
        "",
        ha="center",
        va="bottom",
        fontsize=fs_pt * 0.9,
        color="#111111",
        bbox={"boxstyle": "round,pad=0.4", "facecolor": "white", "edgecolor": "#999999"},
        alpha=0.0,
        visible=False,
        zorder=10,
        clip_on=False,
    )

    logger.debug("rendered %d bars on a %.0fx%.0f px figure", len(layout.bars), layout.width, layout.height)
    return fig, artists


class HoverBinding:
    """
    Connects pointer motion on a rendered chart to a HoverController and
    mirrors its TooltipState on the tooltip artist, fading opacity with a
    canvas timer. A new hover restarts the fade from the current alpha.
    """

    def __init__(self, fig: plt.Figure, artists: ChartArtists, controller: HoverController):
        self.fig = fig
        self.artists = artists
        self.controller = controller
        self.fade_ms = controller.config.tooltip_fade_ms
        self.target_alpha = 0.0
        self._timer = None
        self._step = 0.0
        canvas = fig.canvas
        self._cids = [
            canvas.mpl_connect("motion_notify_event", self._on_motion),
            canvas.mpl_connect("figure_leave_event", self._on_figure_leave),
        ]

    def disconnect(self) -> None:
        for cid in self._cids:
            self.fig.canvas.mpl_disconnect(cid)
        self._cids = []
        self._stop_timer()

    def _to_layout(self, event) -> Optional[Tuple[float, float]]:
        if event.x is None or event.y is None:
            return None
        x, y = self.artists.ax.transData.inverted().transform((event.x, event.y))
        lay = self.artists.layout
        if not (0 <= x <= lay.width and 0 <= y <= lay.height):
            return None
        return float(x), float(y)

    def _on_motion(self, event) -> None:
        before = self.controller.state
        point = self._to_layout(event)
        if point is None:
            state = self.controller.reset()
        else:
            state = self.controller.move(*point)
        if state is not before:
            self.apply(state)

    def _on_figure_leave(self, event) -> None:
        before = self.controller.state
        state = self.controller.reset()
        if state is not before:
            self.apply(state)

    def apply(self, state: TooltipState) -> None:
        tip = self.artists.tooltip
        tip.set_text(state.content)
        tip.set_position((state.x, state.y))
        self.target_alpha = 1.0 if state.visible else 0.0
        if state.visible:
            tip.set_visible(True)
        self._start_fade()

    def _start_fade(self) -> None:
        self._stop_timer()
        if self.fade_ms <= 0:
            self.finish_fade()
            return
        frames = max(1, self.fade_ms // TOOLTIP_FRAME_MS)
        current = self.artists.tooltip.get_alpha() or 0.0
        self._step = (self.target_alpha - current) / frames
        self._timer = self.fig.canvas.new_timer(interval=TOOLTIP_FRAME_MS)
        self._timer.add_callback(self._advance)
        self._timer.start()

    def _advance(self) -> None:
        tip = self.artists.tooltip
        alpha = (tip.get_alpha() or 0.0) + self._step
        if (self._step >= 0 and alpha >= self.target_alpha) or (self._step < 0 and alpha <= self.target_alpha):
            self.finish_fade()
            return
        tip.set_alpha(alpha)
        self.fig.canvas.draw_idle()

    def finish_fade(self) -> None:
        """Jump straight to the end of the current fade."""
        self._stop_timer()
        tip = self.artists.tooltip
        tip.set_alpha(self.target_alpha)
        tip.set_visible(self.target_alpha > 0)
        self.fig.canvas.draw_idle()

    def _stop_timer(self) -> None:
        if self._timer is not None:
            self._timer.stop()
            self._timer = None


def interactive_chart(
    tasks: Iterable[Task],
    config: Optional[ChartConfig] = None,
) -> Tuple[plt.Figure, ChartArtists, HoverBinding]:
    """Render and wire hover tooltips in one go (call plt.show() on an interactive backend)."""
    config = config or ChartConfig()
    tasks = list(tasks)
    fig, artists = render_chart(tasks, config)
    controller = HoverController(tasks, artists.layout, config)
    return fig, artists, HoverBinding(fig, artists, controller)
