"""
Chart panel (right side) for the PCA Plotter.

Encoding toggle (scatter / bar / 3-D), a matplotlib canvas with its
navigation toolbar, and copy / export buttons.  Hidden until an
analysis has succeeded.
"""

import os

from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QPushButton, QButtonGroup,
    QFileDialog, QMessageBox,
)
from PySide6.QtCore import Signal

import matplotlib
matplotlib.use('QtAgg')
from matplotlib.figure import Figure
from matplotlib.backends.backend_qtagg import (
    FigureCanvasQTAgg as FigureCanvas,
    NavigationToolbar2QT as NavigationToolbar,
)

from .charts import render_series
from .constants import CANVAS_DPI, CANVAS_HEIGHT_PX, CANVAS_WIDTH_PX, DARK_COLORS
from .data_model import EncodingMode
from .export import copy_to_clipboard, export_png
from .logger import get_logger
from .projection import ChartSeries

logger = get_logger(__name__)

_ENCODING_BUTTONS = [
    (EncodingMode.SCATTER_2D, "Scatter Plot"),
    (EncodingMode.BAR, "Bar Plot"),
    (EncodingMode.SCATTER_3D, "3D Scatter Plot"),
]


class ChartPanel(QWidget):
    """Encoding selector plus the chart canvas."""

    encoding_selected = Signal(object)   # emits EncodingMode

    def __init__(self, parent=None):
        super().__init__(parent)
        self._series = None
        self._setup_ui()

    # ── UI setup ─────────────────────────────────────────────────────

    def _setup_ui(self):
        layout = QVBoxLayout(self)
        layout.setContentsMargins(4, 4, 4, 4)
        layout.setSpacing(4)

        # ── Encoding toggle row ──────────────────────────────────────
        toggle_row = QHBoxLayout()
        toggle_row.addStretch()
        self._btn_group = QButtonGroup(self)
        self._btn_group.setExclusive(True)
        self._mode_buttons = {}
        for idx, (mode, label) in enumerate(_ENCODING_BUTTONS):
            btn = QPushButton(label)
            btn.setCheckable(True)
            btn.setAccessibleName(label)
            self._btn_group.addButton(btn, idx)
            self._mode_buttons[mode] = btn
            toggle_row.addWidget(btn)
        toggle_row.addStretch()
        self._btn_group.idClicked.connect(
            lambda idx: self.encoding_selected.emit(_ENCODING_BUTTONS[idx][0])
        )
        layout.addLayout(toggle_row)

        # ── Toolbar row ──────────────────────────────────────────────
        toolbar_row = QHBoxLayout()
        toolbar_row.setSpacing(4)

        self._fig = Figure(
            figsize=(CANVAS_WIDTH_PX / CANVAS_DPI, CANVAS_HEIGHT_PX / CANVAS_DPI),
            dpi=CANVAS_DPI,
        )
        self._fig.set_facecolor(DARK_COLORS['bg_alt'])
        self._canvas = FigureCanvas(self._fig)
        self._toolbar = NavigationToolbar(self._canvas, self)

        toolbar_row.addWidget(self._toolbar)
        toolbar_row.addStretch()

        self._btn_copy = QPushButton("Copy to Clipboard")
        self._btn_copy.setFixedHeight(28)
        self._btn_copy.setStyleSheet("font-size: 11px; padding: 2px 8px;")
        self._btn_copy.clicked.connect(lambda *_: self._on_copy())
        toolbar_row.addWidget(self._btn_copy)

        self._btn_export = QPushButton("Export PNG...")
        self._btn_export.setFixedHeight(28)
        self._btn_export.setStyleSheet("font-size: 11px; padding: 2px 8px;")
        self._btn_export.clicked.connect(lambda *_: self.export_current())
        toolbar_row.addWidget(self._btn_export)

        layout.addLayout(toolbar_row)

        # ── Canvas ───────────────────────────────────────────────────
        layout.addWidget(self._canvas, 1)

    @property
    def fig(self) -> Figure:
        return self._fig

    @property
    def series(self):
        return self._series

    # ── Rendering ────────────────────────────────────────────────────

    def show_series(self, series: ChartSeries) -> None:
        """Draw *series* and sync the toggle buttons to its encoding."""
        if series == self._series:
            return
        self._series = series
        self._mode_buttons[series.mode].setChecked(True)
        render_series(self._fig, series)
        self._canvas.draw_idle()

    def clear(self) -> None:
        self._series = None
        self._fig.clf()
        self._canvas.draw_idle()

    # ── Export ───────────────────────────────────────────────────────

    def _on_copy(self):
        if self._series is None:
            return
        if copy_to_clipboard(self._series):
            self.window().statusBar().showMessage(
                "Chart copied to clipboard", 3000
            )
        else:
            QMessageBox.warning(self, "Copy Failed",
                                "Could not copy chart to clipboard.")

    def export_current(self):
        """Ask for a path and export the displayed chart as PNG."""
        if self._series is None:
            QMessageBox.warning(
                self, "Nothing to Export",
                "No chart is currently displayed.",
            )
            return
        path, _ = QFileDialog.getSaveFileName(
            self, "Export Chart as PNG",
            f"pca_{self._series.mode.value}.png",
            "PNG Files (*.png);;All Files (*)",
        )
        if not path:
            return
        try:
            written = export_png(self._series, path)
        except (OSError, ValueError) as exc:
            logger.error("Export to %s failed: %s", path, exc)
            QMessageBox.critical(
                self, "Export Error", f"Failed to export: {exc}"
            )
            return
        self.window().statusBar().showMessage(
            f"Exported to {os.path.basename(written)}", 3000
        )
