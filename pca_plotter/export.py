"""
Export utilities for the PCA Plotter.

PNG export and clipboard copy of the active chart.  The GUI canvas is
dark-themed; exports are redrawn from the ``ChartSeries`` on a fresh
light-themed figure, so the on-screen figure is never modified.
"""

import io
import os

from .charts import new_figure, render_series
from .constants import CLIPBOARD_DPI, EXPORT_DPI
from .logger import get_logger
from .projection import ChartSeries

logger = get_logger(__name__)


def render_png(series: ChartSeries, *, dpi: int = EXPORT_DPI) -> bytes:
    """Render *series* in the light theme and return PNG bytes."""
    fig = new_figure(series)
    render_series(fig, series, for_export=True)
    buf = io.BytesIO()
    fig.savefig(
        buf, format='png', dpi=dpi,
        bbox_inches='tight',
        facecolor=fig.get_facecolor(),
        edgecolor='none',
        pad_inches=0.1,
    )
    return buf.getvalue()


def export_png(series: ChartSeries, filepath: str, *, dpi: int = EXPORT_DPI) -> str:
    """Write *series* as a PNG to *filepath*.

    A ``.png`` suffix is appended when missing.  Returns the path
    actually written.
    """
    if not filepath.lower().endswith('.png'):
        filepath += '.png'
    data = render_png(series, dpi=dpi)
    with open(filepath, 'wb') as fh:
        fh.write(data)
    logger.info("Exported %s chart to %s", series.mode.value,
                os.path.basename(filepath))
    return filepath


def copy_to_clipboard(series: ChartSeries, dpi: int = CLIPBOARD_DPI) -> bool:
    """Copy the chart to the system clipboard as an image.

    Returns ``True`` on success, ``False`` if the clipboard is
    unavailable.
    """
    from PySide6.QtGui import QGuiApplication, QImage

    img = QImage()
    if not img.loadFromData(render_png(series, dpi=dpi), 'PNG'):
        return False
    clipboard = QGuiApplication.clipboard()
    if clipboard is None:
        return False
    clipboard.setImage(img)
    return True
