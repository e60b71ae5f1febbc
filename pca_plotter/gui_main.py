"""
Main window for the PCA Plotter.

Hosts the UploadPanel (left) and ChartPanel (right) in a horizontal
splitter, with a menu bar and status bar.  The window owns the
``WorkflowOrchestrator`` and is its only driver in the GUI: user
actions become orchestrator calls, background workers report back
with the token they were started with, and every state change
repaints both panels.
"""

import os
import tempfile

from PySide6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QSplitter, QScrollArea,
    QMessageBox,
)
from PySide6.QtGui import QAction
from PySide6.QtCore import Qt, Slot

from . import APP_DATE, APP_NAME, APP_VERSION
from .analysis_client import AnalysisClient
from .config import ClientConfig
from .data_model import AnalysisFailure, ErrorKind, Phase, UploadedFile, WorkflowState
from .errors import GENERIC_ERROR_MESSAGE
from .gui_chart_panel import ChartPanel
from .gui_upload_panel import UploadPanel
from .gui_workers import WorkerPool, _AnalysisWorkerThread, _PreviewWorkerThread
from .logger import get_logger
from .workflow import WorkflowOrchestrator

logger = get_logger(__name__)

_PHASE_MESSAGES = {
    Phase.IDLE: "Ready. Select a CSV or Excel file to begin",
    Phase.FILE_SELECTED: "File selected. Click Analyze to run PCA",
    Phase.ANALYZING: "Running PCA analysis...",
    Phase.SUCCEEDED: "Analysis complete",
    Phase.FAILED: "Analysis failed",
}


class PlotterMainWindow(QMainWindow):
    """Main window for the PCA Plotter."""

    def __init__(self, config: ClientConfig = None):
        super().__init__()
        self._config = config or ClientConfig.from_env()
        self._orchestrator = WorkflowOrchestrator(
            AnalysisClient.from_config(self._config)
        )
        self._workers = WorkerPool(self)

        self.setWindowTitle(f"{APP_NAME} v{APP_VERSION}")
        self.setMinimumSize(1200, 760)

        self._setup_ui()
        self._setup_menu()
        self._connect_signals()

        self._orchestrator.subscribe(self._on_state_changed)
        self._on_state_changed(self._orchestrator.state)

    @property
    def orchestrator(self) -> WorkflowOrchestrator:
        return self._orchestrator

    # ── UI setup ─────────────────────────────────────────────────────

    def _setup_ui(self):
        central = QWidget()
        self.setCentralWidget(central)
        main_layout = QVBoxLayout(central)
        main_layout.setContentsMargins(4, 4, 4, 4)
        main_layout.setSpacing(4)

        splitter = QSplitter(Qt.Orientation.Horizontal)

        # Left panel: upload + preview in scroll area
        self._upload_panel = UploadPanel()
        scroll = QScrollArea()
        scroll.setWidget(self._upload_panel)
        scroll.setWidgetResizable(True)
        scroll.setMinimumWidth(340)

        # Right panel: chart
        self._chart_panel = ChartPanel()

        splitter.addWidget(scroll)
        splitter.addWidget(self._chart_panel)
        splitter.setStretchFactor(0, 0)
        splitter.setStretchFactor(1, 1)
        splitter.setSizes([400, 820])

        main_layout.addWidget(splitter)

    def _setup_menu(self):
        menubar = self.menuBar()

        # ── File menu ────────────────────────────────────────────────
        file_menu = menubar.addMenu("File")

        act_open = QAction("Open File...", self)
        act_open.triggered.connect(
            lambda *_: self._upload_panel._browse_file()
        )
        file_menu.addAction(act_open)

        act_export = QAction("Export Chart...", self)
        act_export.triggered.connect(
            lambda *_: self._chart_panel.export_current()
        )
        file_menu.addAction(act_export)

        file_menu.addSeparator()

        act_exit = QAction("Exit", self)
        act_exit.triggered.connect(self.close)
        file_menu.addAction(act_exit)

        # ── Examples menu ────────────────────────────────────────────
        examples_menu = menubar.addMenu("Examples")

        act_load_example = QAction("Load Example Dataset", self)
        act_load_example.triggered.connect(lambda *_: self._load_example())
        examples_menu.addAction(act_load_example)

        # ── Help menu ────────────────────────────────────────────────
        help_menu = menubar.addMenu("Help")

        act_about = QAction("About", self)
        act_about.triggered.connect(lambda *_: self._show_about())
        help_menu.addAction(act_about)

    def _connect_signals(self):
        self._upload_panel.file_chosen.connect(self._on_file_chosen)
        self._upload_panel.analyze_requested.connect(self._on_analyze)
        self._upload_panel.preview_toggled.connect(
            lambda *_: self._orchestrator.toggle_preview()
        )
        self._chart_panel.encoding_selected.connect(
            self._orchestrator.change_encoding
        )

    # ── Workers ──────────────────────────────────────────────────────

    # Worker signals are connected to methods of this window (a QObject
    # on the GUI thread) so they arrive as queued calls on that thread.

    @Slot(int, object)
    def _on_preview_ready(self, token: int, grid):
        self._orchestrator.apply_preview(token, grid)

    @Slot(int, str)
    def _on_preview_failed(self, token: int, message: str):
        self._orchestrator.fail_preview(token, message)

    @Slot(int, object)
    def _on_analysis_finished(self, token: int, outcome):
        self._orchestrator.resolve(token, outcome)

    # ── Slots ────────────────────────────────────────────────────────

    def _on_file_chosen(self, path: str):
        try:
            file = UploadedFile.from_path(path)
        except OSError as exc:
            logger.error("Could not open %s: %s", path, exc)
            QMessageBox.critical(
                self, "File Error",
                f"Could not open '{os.path.basename(path)}':\n\n{exc}",
            )
            return

        token = self._orchestrator.select_file(file)
        worker = _PreviewWorkerThread(
            token, file, self._orchestrator.extractor, parent=self,
        )
        worker.finished_result.connect(self._on_preview_ready)
        worker.error_occurred.connect(self._on_preview_failed)
        self._workers.start(worker)

    def _on_analyze(self):
        token = self._orchestrator.begin_submit()
        if token is None:
            return
        worker = _AnalysisWorkerThread(
            token, self._orchestrator.state.file,
            self._orchestrator.client, parent=self,
        )
        worker.finished_result.connect(self._on_analysis_finished)
        worker.error_occurred.connect(self._on_analysis_crashed)
        self._workers.start(worker)

    @Slot(int, str)
    def _on_analysis_crashed(self, token: int, detail: str):
        logger.error("Analysis worker crashed: %s", detail)
        self._orchestrator.resolve(
            token, AnalysisFailure(GENERIC_ERROR_MESSAGE, ErrorKind.TRANSPORT),
        )

    def _on_state_changed(self, state: WorkflowState):
        self._upload_panel.render_state(state)

        series = self._orchestrator.current_series()
        self._chart_panel.setVisible(series is not None)
        if series is None:
            self._chart_panel.clear()
        else:
            try:
                self._chart_panel.show_series(series)
            except (ValueError, RuntimeError) as exc:
                logger.exception("Chart rendering failed")
                QMessageBox.critical(
                    self, "Chart Rendering Error",
                    f"An error occurred while drawing the chart:\n\n{exc}",
                )

        self.statusBar().showMessage(_PHASE_MESSAGES[state.phase])

    def _load_example(self):
        """Generate the example CSV and select it."""
        from .example_data import generate_example_csv

        example_dir = os.path.join(tempfile.gettempdir(), 'pca_plotter_example')
        try:
            path = generate_example_csv(example_dir)
        except OSError as exc:
            QMessageBox.critical(
                self, "Example Data Error",
                f"Could not write example data:\n\n{exc}",
            )
            return
        self._on_file_chosen(path)

    def _show_about(self):
        QMessageBox.about(
            self,
            f"About {APP_NAME}",
            f"<h3>{APP_NAME} v{APP_VERSION}</h3>"
            f"<p>{APP_DATE}</p>"
            f"<p>Dimensionality Reduction - PCA Analysis.</p>"
            f"<p>Upload a CSV or Excel file, preview its first rows and "
            f"plot the principal components returned by the analysis "
            f"service as a scatter, bar or 3D scatter chart.</p>"
            f"<p>Service: {self._config.service_url}</p>",
        )

    def closeEvent(self, event):
        # A hung request can block forever; the window is going away.
        self._workers.shutdown(2000)
        super().closeEvent(event)
