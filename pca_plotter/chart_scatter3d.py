"""
PC1/PC2/PC3 scatter plot for the PCA Plotter.

Two-component results arrive with ``z`` all zeros and plot on the
z = 0 plane.
"""

import numpy as np
from matplotlib.figure import Figure
from mpl_toolkits.mplot3d import Axes3D  # noqa: F401  registers '3d'

from .projection import ChartSeries
from .theme import style_axes


def render_scatter3d(
    fig: Figure,
    series: ChartSeries,
    *,
    for_export: bool = False,
) -> None:
    """Render a 3-D scatter of *series* on *fig*.

    Parameters
    ----------
    fig : matplotlib.figure.Figure
        Figure to draw on (will be cleared).
    series : ChartSeries
        Output of ``project(result, EncodingMode.SCATTER_3D)``.
    for_export : bool
        If ``True``, use light-theme colours.
    """
    fig.clf()
    layout = series.layout
    ax = fig.add_subplot(111, projection='3d')

    x = np.asarray(series.x, dtype=float)
    y = np.asarray(series.y, dtype=float)
    z = np.asarray(series.z if series.z is not None else np.zeros(len(x)),
                   dtype=float)
    keep = np.isfinite(x) & np.isfinite(y) & np.isfinite(z)

    if not keep.any():
        ax.text2D(0.5, 0.5, 'No valid data points',
                  transform=ax.transAxes, ha='center', va='center')
    else:
        # marker_size is a diameter; scatter wants points²
        size = (layout.marker_size or 4) ** 2
        ax.scatter(
            x[keep], y[keep], z[keep],
            c=layout.color, s=size, depthshade=True,
        )

    ax.set_xlabel(layout.x_label)
    ax.set_ylabel(layout.y_label)
    ax.set_zlabel(layout.z_label or "")
    ax.set_title(layout.title, fontweight='bold')
    style_axes(ax, for_export=for_export)

    fig.tight_layout(pad=1.5)
