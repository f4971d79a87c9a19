from __future__ import annotations

import logging
from io import BytesIO
from typing import List, Optional

import matplotlib.pyplot as plt

from gantt_models import ChartConfig, Task
from renderer import render_chart

logger = logging.getLogger(__name__)


def _figure_bytes(tasks: List[Task], config: Optional[ChartConfig], fmt: str, dpi: Optional[int] = None) -> bytes:
    config = config or ChartConfig()
    fig, _ = render_chart(tasks, config)
    bio = BytesIO()
    try:
        fig.savefig(bio, format=fmt, dpi=dpi or config.dpi, facecolor="white")
    finally:
        # Important: close to avoid memory growth when exporting repeatedly
        plt.close(fig)
    data = bio.getvalue()
    logger.info("exported %d tasks as %s (%d bytes)", len(tasks), fmt.upper(), len(data))
    return data


def export_png_bytes(tasks: List[Task], config: Optional[ChartConfig] = None, *, dpi: Optional[int] = None) -> bytes:
    """Raster export. ``dpi`` overrides config.dpi for the saved file only (hi-res output)."""
    return _figure_bytes(list(tasks), config, "png", dpi)


def export_pdf_bytes(tasks: List[Task], config: Optional[ChartConfig] = None) -> bytes:
    """Render the chart and return a PDF file as bytes (vector output)."""
    return _figure_bytes(list(tasks), config, "pdf")


def export_svg_bytes(tasks: List[Task], config: Optional[ChartConfig] = None) -> bytes:
    return _figure_bytes(list(tasks), config, "svg")
