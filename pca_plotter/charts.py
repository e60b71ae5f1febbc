"""
Chart dispatch for the PCA Plotter.

Maps each ``EncodingMode`` to its renderer so the GUI and the export
code draw through the same entry point.
"""

from matplotlib.figure import Figure

from .chart_bar import render_bar
from .chart_scatter import render_scatter
from .chart_scatter3d import render_scatter3d
from .constants import CANVAS_DPI
from .data_model import EncodingMode
from .projection import ChartSeries

RENDERERS = {
    EncodingMode.SCATTER_2D: render_scatter,
    EncodingMode.BAR: render_bar,
    EncodingMode.SCATTER_3D: render_scatter3d,
}


def render_series(fig: Figure, series: ChartSeries, *, for_export: bool = False) -> None:
    """Draw *series* on *fig* with the renderer for its encoding."""
    RENDERERS[series.mode](fig, series, for_export=for_export)


def new_figure(series: ChartSeries) -> Figure:
    """A detached figure sized to the series' canvas."""
    layout = series.layout
    return Figure(
        figsize=(layout.width_px / CANVAS_DPI, layout.height_px / CANVAS_DPI),
        dpi=CANVAS_DPI,
    )
