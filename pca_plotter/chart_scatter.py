"""
PC1 vs PC2 scatter plot for the PCA Plotter.

One marker per projected row, no grouping.  Non-finite points are
dropped from the drawing (the series itself is left untouched).
"""

import numpy as np
from matplotlib.figure import Figure

from .projection import ChartSeries
from .theme import plot_style, style_axes


def render_scatter(
    fig: Figure,
    series: ChartSeries,
    *,
    for_export: bool = False,
) -> None:
    """Render a 2-D scatter of *series* on *fig*.

    Parameters
    ----------
    fig : matplotlib.figure.Figure
        Figure to draw on (will be cleared).
    series : ChartSeries
        Output of ``project(result, EncodingMode.SCATTER_2D)``.
    for_export : bool
        If ``True``, use light-theme colours.
    """
    fig.clf()
    layout = series.layout
    ax = fig.add_subplot(111)

    x = np.asarray(series.x, dtype=float)
    y = np.asarray(series.y, dtype=float)
    keep = np.isfinite(x) & np.isfinite(y)

    if not keep.any():
        ax.text(0.5, 0.5, 'No valid data points',
                transform=ax.transAxes, ha='center', va='center')
    else:
        ax.scatter(
            x[keep], y[keep],
            c=layout.color, s=18, alpha=0.85,
            edgecolors='white', linewidths=0.3, zorder=3,
        )

    ax.set_xlabel(layout.x_label)
    ax.set_ylabel(layout.y_label)
    ax.set_title(layout.title, fontweight='bold')
    ax.grid(linewidth=0.4, alpha=0.5, color=plot_style(for_export)['grid.color'])
    ax.set_axisbelow(True)
    style_axes(ax, for_export=for_export)

    fig.tight_layout(pad=1.5)
