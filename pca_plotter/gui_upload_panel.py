"""
Upload panel (left side) for the PCA Plotter.

File selection, the Analyze button, the collapsible preview table,
the loading bar, the error banner and the explained-variance readout.
The panel holds no workflow state of its own: it emits user actions
and repaints from each ``WorkflowState`` passed to ``render_state``.
"""

import os

from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QGroupBox, QLabel, QPushButton, QFileDialog,
    QProgressBar, QTableWidget, QTableWidgetItem, QHeaderView,
)
from PySide6.QtCore import Qt, Signal

from .constants import DARK_COLORS, FILE_DIALOG_FILTER
from .data_model import PreviewGrid, WorkflowState


class UploadPanel(QWidget):
    """Left-side panel with file input, preview and analysis status."""

    # Signals
    file_chosen = Signal(str)      # emits the selected path
    analyze_requested = Signal()
    preview_toggled = Signal()

    def __init__(self, parent=None):
        super().__init__(parent)
        self._last_dir = ""
        self._setup_ui()
        self._connect_signals()

    # ── UI setup ─────────────────────────────────────────────────────

    def _setup_ui(self):
        layout = QVBoxLayout(self)
        layout.setContentsMargins(6, 6, 6, 6)
        layout.setSpacing(8)

        # ── Group 1: Data File ───────────────────────────────────────
        grp_file = QGroupBox("Upload a CSV or Excel file for PCA Analysis")
        file_layout = QVBoxLayout(grp_file)
        file_layout.setSpacing(6)

        self._btn_select = QPushButton("Select File")
        file_layout.addWidget(self._btn_select)

        self._lbl_file = QLabel("")
        self._lbl_file.setStyleSheet(
            f"color: {DARK_COLORS['fg_dim']}; font-size: 11px;"
        )
        self._lbl_file.setWordWrap(True)
        file_layout.addWidget(self._lbl_file)

        c = DARK_COLORS
        self._btn_analyze = QPushButton("Analyze")
        self._btn_analyze.setMinimumHeight(36)
        self._btn_analyze.setStyleSheet(
            f"QPushButton {{"
            f"  background-color: {c['accent']};"
            f"  color: {c['bg']};"
            f"  font-weight: bold; font-size: 14px;"
            f"}}"
            f"QPushButton:hover {{"
            f"  background-color: {c['accent_hover']};"
            f"}}"
            f"QPushButton:disabled {{"
            f"  background-color: {c['border']};"
            f"  color: {c['fg_dim']};"
            f"}}"
        )
        file_layout.addWidget(self._btn_analyze)

        self._progress = QProgressBar()
        self._progress.setRange(0, 0)       # indeterminate
        self._progress.setTextVisible(False)
        self._progress.setVisible(False)
        file_layout.addWidget(self._progress)

        self._lbl_error = QLabel("")
        self._lbl_error.setObjectName("errorLabel")
        self._lbl_error.setWordWrap(True)
        self._lbl_error.setTextInteractionFlags(
            Qt.TextInteractionFlag.TextSelectableByMouse
        )
        self._lbl_error.setVisible(False)
        file_layout.addWidget(self._lbl_error)

        self._lbl_variance = QLabel("")
        self._lbl_variance.setObjectName("varianceLabel")
        self._lbl_variance.setVisible(False)
        file_layout.addWidget(self._lbl_variance)

        layout.addWidget(grp_file)

        # ── Group 2: Preview ─────────────────────────────────────────
        grp_preview = QGroupBox("Preview")
        preview_layout = QVBoxLayout(grp_preview)
        preview_layout.setSpacing(6)

        self._btn_preview = QPushButton("Show CSV Preview")
        self._btn_preview.setVisible(False)
        preview_layout.addWidget(self._btn_preview)

        self._lbl_preview_error = QLabel("")
        self._lbl_preview_error.setObjectName("errorLabel")
        self._lbl_preview_error.setWordWrap(True)
        self._lbl_preview_error.setVisible(False)
        preview_layout.addWidget(self._lbl_preview_error)

        self._tbl_preview = QTableWidget()
        self._tbl_preview.setAccessibleName("CSV Preview")
        self._tbl_preview.setEditTriggers(QTableWidget.EditTrigger.NoEditTriggers)
        self._tbl_preview.setAlternatingRowColors(True)
        self._tbl_preview.verticalHeader().setVisible(False)
        self._tbl_preview.horizontalHeader().setSectionResizeMode(
            QHeaderView.ResizeMode.ResizeToContents
        )
        self._tbl_preview.setVisible(False)
        preview_layout.addWidget(self._tbl_preview)

        layout.addWidget(grp_preview)
        layout.addStretch()

    def _connect_signals(self):
        self._btn_select.clicked.connect(lambda *_: self._browse_file())
        self._btn_analyze.clicked.connect(
            lambda *_: self.analyze_requested.emit()
        )
        self._btn_preview.clicked.connect(
            lambda *_: self.preview_toggled.emit()
        )

    # ── Slots ────────────────────────────────────────────────────────

    def _browse_file(self):
        path, _ = QFileDialog.getOpenFileName(
            self, "Select File", self._last_dir, FILE_DIALOG_FILTER,
        )
        if path:
            self._last_dir = os.path.dirname(path)
            self.file_chosen.emit(path)

    # ── Rendering ────────────────────────────────────────────────────

    def render_state(self, state: WorkflowState) -> None:
        """Repaint every widget from *state*."""
        if state.file is not None:
            self._lbl_file.setText(f"Selected File: {state.file.name}")
        else:
            self._lbl_file.setText("")

        self._btn_select.setEnabled(not state.loading)
        self._btn_analyze.setEnabled(not state.loading)
        self._progress.setVisible(state.loading)

        error = state.error_message
        self._lbl_error.setText(error or "")
        self._lbl_error.setVisible(error is not None)

        result = state.result
        if result is not None:
            self._lbl_variance.setText(
                f"Explained Variance: {result.variance_text}"
            )
        self._lbl_variance.setVisible(result is not None)

        self._lbl_preview_error.setText(state.preview_error or "")
        self._lbl_preview_error.setVisible(state.preview_error is not None)

        has_preview = state.preview is not None
        self._btn_preview.setVisible(has_preview)
        self._btn_preview.setText(
            f"{'Hide' if state.preview_visible else 'Show'} CSV Preview"
        )
        self._tbl_preview.setVisible(has_preview and state.preview_visible)
        if has_preview:
            self._fill_preview(state.preview)
        else:
            self._tbl_preview.clear()
            self._tbl_preview.setRowCount(0)
            self._tbl_preview.setColumnCount(0)

    def _fill_preview(self, grid: PreviewGrid) -> None:
        n_cols = grid.column_count
        header = list(grid.header) + [""] * (n_cols - len(grid.header))
        data_rows = grid.data_rows

        self._tbl_preview.clear()
        self._tbl_preview.setColumnCount(n_cols)
        self._tbl_preview.setRowCount(len(data_rows))
        self._tbl_preview.setHorizontalHeaderLabels(header)

        for r, row in enumerate(data_rows):
            for c_idx in range(n_cols):
                text = row[c_idx] if c_idx < len(row) else ""
                item = QTableWidgetItem(text)
                item.setTextAlignment(Qt.AlignmentFlag.AlignCenter)
                self._tbl_preview.setItem(r, c_idx, item)
