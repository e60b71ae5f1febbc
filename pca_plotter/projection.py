"""
View projection for the PCA Plotter.

``project`` maps an ``AnalysisResult`` and an ``EncodingMode`` to the
series and static layout a chart renderer needs.  Pure: same inputs,
same ``ChartSeries``.
"""

from dataclasses import dataclass
from typing import Optional, Tuple, Union

from .constants import (
    CANVAS_HEIGHT_PX, CANVAS_WIDTH_PX, MARKER_SIZE_3D, SERIES_COLORS,
)
from .data_model import AnalysisResult, EncodingMode


@dataclass(frozen=True)
class ChartLayout:
    """Static rendering parameters for one encoding."""
    title: str
    x_label: str
    y_label: str
    z_label: Optional[str] = None
    width_px: int = CANVAS_WIDTH_PX
    height_px: int = CANVAS_HEIGHT_PX
    color: str = 'blue'
    marker_size: Optional[float] = None


@dataclass(frozen=True)
class ChartSeries:
    """One data series plus its layout.

    ``x`` holds point labels for ``BAR`` and floats otherwise.  ``z``
    is set only for ``SCATTER_3D``.
    """
    mode: EncodingMode
    x: Tuple[Union[float, str], ...]
    y: Tuple[float, ...]
    layout: ChartLayout
    z: Optional[Tuple[float, ...]] = None

    def __len__(self) -> int:
        return len(self.y)


LAYOUTS = {
    EncodingMode.SCATTER_2D: ChartLayout(
        title="PCA Results (Scatter Plot)",
        x_label="PC1",
        y_label="PC2",
        color=SERIES_COLORS['scatter'],
    ),
    EncodingMode.BAR: ChartLayout(
        title="PCA Results (Bar Plot)",
        x_label="Data Points",
        y_label="PC1",
        color=SERIES_COLORS['bar'],
    ),
    EncodingMode.SCATTER_3D: ChartLayout(
        title="PCA Results (3D Scatter Plot)",
        x_label="PC1",
        y_label="PC2",
        z_label="PC3",
        color=SERIES_COLORS['3d'],
        marker_size=MARKER_SIZE_3D,
    ),
}


def point_label(index: int) -> str:
    """1-based ordinal label for a bar, e.g. ``"Point 1"``."""
    return f"Point {index + 1}"


def project(result: AnalysisResult, mode: EncodingMode) -> ChartSeries:
    """Build the series for *mode* from *result*."""
    coords = result.coordinates
    layout = LAYOUTS[mode]

    if mode is EncodingMode.BAR:
        return ChartSeries(
            mode=mode,
            x=tuple(point_label(i) for i in range(len(coords))),
            y=tuple(p[0] for p in coords),
            layout=layout,
        )

    x = tuple(p[0] for p in coords)
    y = tuple(p[1] for p in coords)
    if mode is EncodingMode.SCATTER_3D:
        # Two-component results sit on the z = 0 plane
        z = tuple(p[2] if len(p) > 2 else 0.0 for p in coords)
        return ChartSeries(mode=mode, x=x, y=y, z=z, layout=layout)
    return ChartSeries(mode=mode, x=x, y=y, layout=layout)
