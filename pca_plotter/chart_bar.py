"""
PC1 bar chart for the PCA Plotter.

One bar per projected row, labelled "Point 1", "Point 2", …  Long
results hide the tick labels so they do not overlap into a solid
block; the bars themselves are always drawn.
"""

import numpy as np
from matplotlib.figure import Figure

from .constants import MAX_BAR_TICK_LABELS
from .projection import ChartSeries
from .theme import plot_style, style_axes


def render_bar(
    fig: Figure,
    series: ChartSeries,
    *,
    for_export: bool = False,
) -> None:
    """Render a PC1 bar chart of *series* on *fig*.

    Parameters
    ----------
    fig : matplotlib.figure.Figure
        Figure to draw on (will be cleared).
    series : ChartSeries
        Output of ``project(result, EncodingMode.BAR)``.
    for_export : bool
        If ``True``, use light-theme colours.
    """
    fig.clf()
    layout = series.layout
    ax = fig.add_subplot(111)

    heights = np.asarray(series.y, dtype=float)
    positions = np.arange(len(heights))

    if len(heights) == 0:
        ax.text(0.5, 0.5, 'No valid data points',
                transform=ax.transAxes, ha='center', va='center')
    else:
        # NaN heights draw as empty slots
        ax.bar(
            positions, np.where(np.isfinite(heights), heights, 0.0),
            color=layout.color, width=0.8, zorder=3,
        )
        ax.axhline(0, color=plot_style(for_export)['axes.edgecolor'],
                   linewidth=0.8, zorder=2)
        if len(heights) <= MAX_BAR_TICK_LABELS:
            ax.set_xticks(positions)
            ax.set_xticklabels(series.x, rotation=45, ha='right')
        else:
            ax.set_xticks([])

    ax.set_xlabel(layout.x_label)
    ax.set_ylabel(layout.y_label)
    ax.set_title(layout.title, fontweight='bold')
    ax.grid(axis='y', linewidth=0.4, alpha=0.5,
            color=plot_style(for_export)['grid.color'])
    ax.set_axisbelow(True)
    style_axes(ax, for_export=for_export)

    fig.tight_layout(pad=1.5)
