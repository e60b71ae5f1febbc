"""
Background workers for the PCA Plotter GUI.

Preview parsing and the analysis request run on ``QThread`` workers
so the window stays responsive.  Each worker carries the token the
orchestrator issued when the work started and emits it back with the
result; signals cross into the GUI thread as queued connections, so
every state change still happens on the main thread.
"""

import asyncio

from PySide6.QtCore import QObject, QThread, Signal, Slot

from .analysis_client import AnalysisClient
from .data_model import UploadedFile
from .errors import PARSE_ERROR_MESSAGE, ParseError
from .logger import get_logger

logger = get_logger(__name__)


class _PreviewWorkerThread(QThread):
    """Parses the preview grid of one file.

    Signals
    -------
    finished_result : Signal(int, object)
        ``(token, PreviewGrid)`` on success.
    error_occurred : Signal(int, str)
        ``(token, message)`` if the file cannot be parsed.
    """

    finished_result = Signal(int, object)
    error_occurred = Signal(int, str)

    def __init__(self, token: int, file: UploadedFile, extractor, parent=None):
        super().__init__(parent)
        self.token = token
        self._file = file
        self._extractor = extractor

    def run(self):  # noqa: D401 – Qt override
        try:
            grid = self._extractor(self._file)
        except ParseError as exc:
            self.error_occurred.emit(self.token, exc.message)
            return
        except Exception as exc:
            logger.exception("Unexpected preview failure for '%s'",
                             self._file.name)
            self.error_occurred.emit(self.token, PARSE_ERROR_MESSAGE)
            return
        self.finished_result.emit(self.token, grid)


class _AnalysisWorkerThread(QThread):
    """Runs one ``AnalysisClient.analyze`` call on its own event loop.

    Signals
    -------
    finished_result : Signal(int, object)
        ``(token, AnalysisSuccess | AnalysisFailure)``.
    error_occurred : Signal(int, str)
        ``(token, message)`` if the client itself crashed.
    """

    finished_result = Signal(int, object)
    error_occurred = Signal(int, str)

    def __init__(self, token: int, file: UploadedFile,
                 client: AnalysisClient, parent=None):
        super().__init__(parent)
        self.token = token
        self._file = file
        self._client = client

    def run(self):  # noqa: D401 – Qt override
        try:
            outcome = asyncio.run(self._client.analyze(self._file))
        except Exception as exc:
            logger.exception("Unexpected analysis failure for '%s'",
                             self._file.name)
            self.error_occurred.emit(self.token, f"{type(exc).__name__}: {exc}")
            return
        self.finished_result.emit(self.token, outcome)


class WorkerPool(QObject):
    """Keeps running workers alive and releases them when they finish.

    Superseded workers keep running until their transport returns, so
    the pool holds a reference to each one until its ``finished``
    signal, then schedules it for deletion.
    """

    def __init__(self, parent=None):
        super().__init__(parent)
        self._workers = set()

    def __len__(self) -> int:
        return len(self._workers)

    def start(self, worker: QThread) -> None:
        self._workers.add(worker)
        worker.finished.connect(self._on_worker_finished)
        worker.start()

    @Slot()
    def _on_worker_finished(self):
        worker = self.sender()
        self._workers.discard(worker)
        if worker is not None:
            worker.deleteLater()

    def shutdown(self, timeout_ms: int = 2000) -> None:
        """Wait for running workers, terminating any still blocked."""
        for worker in list(self._workers):
            if not worker.wait(timeout_ms):
                logger.warning("Terminating %s after %d ms",
                               type(worker).__name__, timeout_ms)
                worker.terminate()
                worker.wait()
