import matplotlib.pyplot as plt
from matplotlib.backend_bases import MouseEvent

from export import export_pdf_bytes, export_png_bytes, export_svg_bytes
from gantt_models import ChartConfig
from renderer import interactive_chart, render_chart, resolve_font_family


def test_exports_produce_bytes(six_tasks):
    config = ChartConfig()

    png = export_png_bytes(six_tasks, config)
    assert png[:8] == b"\x89PNG\r\n\x1a\n"
    assert len(png) > 1_000

    hi_res = export_png_bytes(six_tasks, config, dpi=200)
    assert len(hi_res) > len(png)

    pdf = export_pdf_bytes(six_tasks, config)
    assert pdf[:4] == b"%PDF"

    svg = export_svg_bytes(six_tasks, config)
    assert b"<svg" in svg[:500]


def test_empty_dataset_still_renders():
    png = export_png_bytes([], ChartConfig())
    assert png[:8] == b"\x89PNG\r\n\x1a\n"


def test_render_draws_one_primitive_set_per_task(six_tasks):
    fig, artists = render_chart(six_tasks, ChartConfig())
    try:
        assert len(artists.bars) == len(artists.highlights) == len(artists.labels) == 6
        assert artists.highlights[0].get_alpha() == ChartConfig().highlight_opacity
        assert [t.get_text() for t in artists.labels] == [t.label for t in six_tasks]
        assert artists.tooltip.get_visible() is False
        # Figure size in pixels matches the layout
        w, h = fig.get_size_inches() * fig.dpi
        assert round(w) == round(artists.layout.width)
        assert round(h) == round(artists.layout.height)
    finally:
        plt.close(fig)


def _motion(fig, ax, x, y):
    dx, dy = ax.transData.transform((x, y))
    event = MouseEvent("motion_notify_event", fig.canvas, dx, dy)
    fig.canvas.callbacks.process("motion_notify_event", event)


def test_pointer_motion_drives_tooltip(six_tasks):
    config = ChartConfig(tooltip_fade_ms=0)
    fig, artists, binding = interactive_chart(six_tasks, config)
    try:
        bar = artists.layout.bars[1]
        _motion(fig, artists.ax, bar.x + 1.0, bar.y + 2.0)
        tip = artists.tooltip
        assert tip.get_visible() is True
        assert tip.get_alpha() == 1.0
        assert tip.get_text() == "Design/03/01/2022/Review/Weekly/In Progress"

        _motion(fig, artists.ax, 1.0, 1.0)
        assert tip.get_visible() is False
        # Content stays until the next hover.
        assert tip.get_text().startswith("Design/")
    finally:
        binding.disconnect()
        plt.close(fig)


def test_fade_targets_follow_latest_event(six_tasks):
    fig, artists, binding = interactive_chart(six_tasks, ChartConfig(tooltip_fade_ms=200))
    try:
        first, second = artists.layout.bars[0], artists.layout.bars[4]
        _motion(fig, artists.ax, first.x + 1.0, first.y + 2.0)
        assert binding.target_alpha == 1.0
        _motion(fig, artists.ax, 1.0, 1.0)
        assert binding.target_alpha == 0.0
        _motion(fig, artists.ax, second.x + 1.0, second.y + 2.0)
        assert binding.target_alpha == 1.0

        binding.finish_fade()
        assert artists.tooltip.get_visible() is True
        assert artists.tooltip.get_text().startswith("Ship/")
    finally:
        binding.disconnect()
        plt.close(fig)


def test_font_resolution_falls_back():
    assert resolve_font_family("No Such Font 12345", fallbacks=("Also Missing", "DejaVu Sans")) == "DejaVu Sans"
    assert resolve_font_family("dejavu sans") == "dejavu sans"
