"""
Workflow orchestrator for the PCA Plotter.

All workflow state lives in one ``WorkflowState`` value.  It changes
only through ``transition(state, event)``, a pure reducer, so the
state machine can be tested without any GUI:

    IDLE ──select──▶ FILE_SELECTED ──submit──▶ ANALYZING
                         ▲                        │ resolved
                         │ select                 ▼
                         └──────────────── SUCCEEDED / FAILED
                                             │ submit (again)
                                             ▼
                                          ANALYZING

Stale deliveries are discarded by token.  Every submit and every file
selection bumps ``request_token``; an ``AnalysisResolved`` carrying an
older token leaves the state untouched.  Previews use
``preview_token`` the same way.  In-flight transports are never
aborted, only ignored.

``WorkflowOrchestrator`` wraps the reducer with the side effects: it
runs the preview extractor and the analysis client, captures the
token before each suspension point, and notifies subscribers after
each change.
"""

import asyncio
import dataclasses
from dataclasses import dataclass
from typing import Callable, List, Optional, Union

from .analysis_client import AnalysisClient
from .data_model import (
    DEFAULT_ENCODING, AnalysisFailure, AnalysisOutcome, AnalysisSuccess,
    Empty, EncodingMode, Failed, Phase, PreviewGrid, Succeeded,
    UploadedFile, WorkflowState,
)
from .errors import ParseError, ValidationError
from .logger import get_logger
from .preview_parser import extract_preview
from .projection import ChartSeries, project

logger = get_logger(__name__)


# ── Events ───────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class FileChosen:
    file: Optional[UploadedFile]


@dataclass(frozen=True)
class PreviewLoaded:
    token: int
    grid: PreviewGrid


@dataclass(frozen=True)
class PreviewFailed:
    token: int
    message: str


@dataclass(frozen=True)
class SubmitRequested:
    pass


@dataclass(frozen=True)
class AnalysisResolved:
    token: int
    outcome: AnalysisOutcome


@dataclass(frozen=True)
class PreviewToggled:
    pass


@dataclass(frozen=True)
class EncodingChanged:
    mode: EncodingMode


Event = Union[
    FileChosen, PreviewLoaded, PreviewFailed, SubmitRequested,
    AnalysisResolved, PreviewToggled, EncodingChanged,
]


# ── Reducer ──────────────────────────────────────────────────────────────

def transition(state: WorkflowState, event: Event) -> WorkflowState:
    """Return the state that follows *state* after *event*."""
    replace = dataclasses.replace

    if isinstance(event, FileChosen):
        return replace(
            state,
            file=event.file,
            preview=None,
            preview_error=None,
            loading=False,
            outcome=Empty(),
            encoding=DEFAULT_ENCODING,
            request_token=state.request_token + 1,
            preview_token=state.preview_token + 1,
        )

    if isinstance(event, PreviewLoaded):
        if event.token != state.preview_token:
            return state
        return replace(state, preview=event.grid, preview_error=None)

    if isinstance(event, PreviewFailed):
        if event.token != state.preview_token:
            return state
        return replace(state, preview=None, preview_error=event.message)

    if isinstance(event, SubmitRequested):
        if state.file is None:
            err = ValidationError()
            return replace(state, outcome=Failed(err.message, err.kind))
        return replace(
            state,
            loading=True,
            outcome=Empty(),
            request_token=state.request_token + 1,
        )

    if isinstance(event, AnalysisResolved):
        if event.token != state.request_token or not state.loading:
            return state
        outcome = event.outcome
        if isinstance(outcome, AnalysisSuccess):
            return replace(state, loading=False, outcome=Succeeded(outcome.result))
        return replace(
            state,
            loading=False,
            outcome=Failed(outcome.message, outcome.kind),
        )

    if isinstance(event, PreviewToggled):
        return replace(state, preview_visible=not state.preview_visible)

    if isinstance(event, EncodingChanged):
        if state.phase is not Phase.SUCCEEDED:
            return state
        return replace(state, encoding=event.mode)

    raise TypeError(f"Unknown workflow event: {event!r}")


# ── Orchestrator ─────────────────────────────────────────────────────────

Listener = Callable[[WorkflowState], None]


class WorkflowOrchestrator:
    """Owns ``WorkflowState`` and sequences preview, analysis and view.

    Parameters
    ----------
    client : AnalysisClient
        Performs the remote analysis call.
    extractor : callable, optional
        ``UploadedFile -> PreviewGrid``; defaults to
        ``preview_parser.extract_preview``.
    """

    def __init__(
        self,
        client: AnalysisClient,
        extractor: Callable[[UploadedFile], PreviewGrid] = extract_preview,
    ):
        self._client = client
        self._extractor = extractor
        self._state = WorkflowState()
        self._listeners: List[Listener] = []

    @property
    def state(self) -> WorkflowState:
        return self._state

    @property
    def extractor(self) -> Callable[[UploadedFile], PreviewGrid]:
        return self._extractor

    @property
    def client(self) -> AnalysisClient:
        return self._client

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call *listener* with the new state after every change.

        Returns a callable that removes the listener.
        """
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)
        return unsubscribe

    def dispatch(self, event: Event) -> WorkflowState:
        before = self._state
        after = transition(before, event)
        if after is before:
            logger.debug("Ignored %s in phase %s", type(event).__name__,
                         before.phase.value)
            return after
        self._state = after
        logger.debug("%s: %s -> %s", type(event).__name__,
                     before.phase.value, after.phase.value)
        for listener in list(self._listeners):
            listener(after)
        return after

    # ── File selection and preview ───────────────────────────────────

    def select_file(self, file: Optional[UploadedFile]) -> int:
        """Make *file* current.  Returns the token for its preview."""
        if file is not None:
            logger.info("Selected '%s' (%d bytes)", file.name, file.size)
        self.dispatch(FileChosen(file))
        return self._state.preview_token

    def apply_preview(self, token: int, grid: PreviewGrid) -> WorkflowState:
        return self.dispatch(PreviewLoaded(token, grid))

    def fail_preview(self, token: int, message: str) -> WorkflowState:
        return self.dispatch(PreviewFailed(token, message))

    async def load_preview(self, file: UploadedFile) -> WorkflowState:
        """Select *file* and parse its preview off the event loop."""
        token = self.select_file(file)
        try:
            grid = await asyncio.to_thread(self._extractor, file)
        except ParseError as exc:
            return self.fail_preview(token, exc.message)
        return self.apply_preview(token, grid)

    def toggle_preview(self) -> WorkflowState:
        return self.dispatch(PreviewToggled())

    # ── Analysis ─────────────────────────────────────────────────────

    def begin_submit(self) -> Optional[int]:
        """Enter ``ANALYZING``.  Returns the request token, or ``None``
        when no file is selected (the state then carries the
        validation error and no request must be made)."""
        state = self.dispatch(SubmitRequested())
        if not state.loading:
            logger.info("Submit ignored: no file selected")
            return None
        logger.info("Submitting '%s' (request %d)", state.file.name,
                    state.request_token)
        return state.request_token

    def resolve(self, token: int, outcome: AnalysisOutcome) -> WorkflowState:
        """Deliver the outcome of request *token*."""
        if token != self._state.request_token:
            logger.info("Discarding stale result of request %d (current %d)",
                        token, self._state.request_token)
            return self._state
        if isinstance(outcome, AnalysisFailure):
            logger.warning("Request %d failed: %s", token, outcome.message)
        else:
            logger.info("Request %d succeeded", token)
        return self.dispatch(AnalysisResolved(token, outcome))

    async def submit(self) -> WorkflowState:
        """Run one analysis of the current file and apply its outcome."""
        token = self.begin_submit()
        if token is None:
            return self._state
        file = self._state.file
        outcome = await self._client.analyze(file)
        return self.resolve(token, outcome)

    # ── View ─────────────────────────────────────────────────────────

    def change_encoding(self, mode: EncodingMode) -> WorkflowState:
        return self.dispatch(EncodingChanged(mode))

    def current_series(self) -> Optional[ChartSeries]:
        """Series for the active encoding, or ``None`` without a result."""
        result = self._state.result
        if result is None:
            return None
        return project(result, self._state.encoding)
