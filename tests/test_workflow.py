"""
Tests for the workflow reducer and orchestrator.

Verifies that:
- The reducer implements every transition of the state machine
- Result and error never coexist, and loading implies neither
- Stale analysis and preview deliveries are discarded by token
- Preview failures never touch the main workflow fields
- Submitting without a file makes no request
- End-to-end scenarios A, B and C behave as described
"""

import asyncio
import dataclasses

import pytest

from conftest import json_response, make_csv, make_zip
from pca_plotter.data_model import (
    AnalysisFailure, AnalysisResult, AnalysisSuccess, Empty, EncodingMode,
    ErrorKind, Failed, Phase, PreviewGrid, UploadedFile,
    WorkflowState,
)
from pca_plotter.errors import NO_FILE_MESSAGE, PARSE_ERROR_MESSAGE
from pca_plotter.workflow import (
    AnalysisResolved, EncodingChanged, FileChosen, PreviewFailed,
    PreviewLoaded, PreviewToggled, SubmitRequested, WorkflowOrchestrator,
    transition,
)

FILE = UploadedFile("data.csv", b"a,b\n1,2\n")
RESULT = AnalysisResult(coordinates=((1.0, 2.0), (3.0, 4.0)),
                        explained_variance=0.87)
SUCCESS = AnalysisSuccess(RESULT)
FAILURE = AnalysisFailure("boom", ErrorKind.SERVICE)
GRID = PreviewGrid(rows=(("a", "b"), ("1", "2")))


def _run(*events, state=None):
    state = state or WorkflowState()
    for event in events:
        state = transition(state, event)
    return state


def _assert_exclusive(state):
    """Result XOR error XOR neither; loading implies neither."""
    assert not (state.result is not None and state.error_message is not None)
    if state.loading:
        assert isinstance(state.outcome, Empty)


class FakeClient:
    """AnalysisClient stand-in whose calls resolve on demand."""

    def __init__(self):
        self.calls = []

    async def analyze(self, file):
        future = asyncio.get_running_loop().create_future()
        self.calls.append((file, future))
        return await future


# ============= Reducer =============


class TestReducer:
    """Pure state transitions."""

    def test_initial_state(self):
        state = WorkflowState()
        assert state.phase is Phase.IDLE
        assert state.encoding is EncodingMode.SCATTER_2D
        assert isinstance(state.outcome, Empty)
        assert state.preview_visible is False

    def test_select_file(self):
        state = _run(FileChosen(FILE))
        assert state.phase is Phase.FILE_SELECTED
        assert state.file == FILE
        assert state.preview_token == 1

    def test_select_file_clears_result_and_encoding(self):
        state = _run(
            FileChosen(FILE), SubmitRequested(),
            AnalysisResolved(2, SUCCESS), EncodingChanged(EncodingMode.BAR),
        )
        assert state.encoding is EncodingMode.BAR

        state = transition(state, FileChosen(FILE))
        assert state.phase is Phase.FILE_SELECTED
        assert state.result is None
        assert state.encoding is EncodingMode.SCATTER_2D

    def test_select_none_returns_to_idle(self):
        state = _run(FileChosen(FILE), FileChosen(None))
        assert state.phase is Phase.IDLE

    def test_submit_enters_analyzing(self):
        state = _run(FileChosen(FILE), SubmitRequested())
        assert state.phase is Phase.ANALYZING
        assert state.loading is True
        assert state.request_token == 2
        _assert_exclusive(state)

    def test_submit_without_file_is_validation_error(self):
        state = _run(SubmitRequested())
        assert state.loading is False
        assert state.outcome == Failed(NO_FILE_MESSAGE, ErrorKind.VALIDATION)
        assert state.request_token == 0

    def test_resolve_success(self):
        state = _run(FileChosen(FILE), SubmitRequested(), AnalysisResolved(2, SUCCESS))
        assert state.phase is Phase.SUCCEEDED
        assert state.result == RESULT
        assert state.loading is False

    def test_resolve_failure(self):
        state = _run(FileChosen(FILE), SubmitRequested(), AnalysisResolved(2, FAILURE))
        assert state.phase is Phase.FAILED
        assert state.error_message == "boom"
        assert state.outcome.kind is ErrorKind.SERVICE

    def test_resubmit_after_success_clears_result(self):
        state = _run(
            FileChosen(FILE), SubmitRequested(), AnalysisResolved(2, SUCCESS),
            SubmitRequested(),
        )
        assert state.phase is Phase.ANALYZING
        assert state.result is None
        _assert_exclusive(state)

    def test_resubmit_after_failure(self):
        state = _run(
            FileChosen(FILE), SubmitRequested(), AnalysisResolved(2, FAILURE),
            SubmitRequested(), AnalysisResolved(3, SUCCESS),
        )
        assert state.phase is Phase.SUCCEEDED

    def test_stale_token_is_discarded(self):
        before = _run(FileChosen(FILE), SubmitRequested(), SubmitRequested())
        after = transition(before, AnalysisResolved(2, SUCCESS))
        assert after is before

    def test_resolution_after_new_file_is_discarded(self):
        in_flight = _run(FileChosen(FILE), SubmitRequested())
        token = in_flight.request_token
        state = transition(in_flight, FileChosen(UploadedFile("other.csv", b"x\n1\n")))
        assert transition(state, AnalysisResolved(token, SUCCESS)) is state

    def test_toggle_preview_is_orthogonal(self):
        base = _run(FileChosen(FILE), SubmitRequested())
        toggled = transition(base, PreviewToggled())
        assert toggled.preview_visible is True
        assert dataclasses.replace(toggled, preview_visible=False) == base
        assert transition(toggled, PreviewToggled()).preview_visible is False

    def test_encoding_change_only_after_success(self):
        pending = _run(FileChosen(FILE), SubmitRequested())
        assert transition(pending, EncodingChanged(EncodingMode.BAR)) is pending

        failed = transition(pending, AnalysisResolved(2, FAILURE))
        assert transition(failed, EncodingChanged(EncodingMode.BAR)) is failed

        done = transition(pending, AnalysisResolved(2, SUCCESS))
        assert transition(done, EncodingChanged(EncodingMode.SCATTER_3D)).encoding \
            is EncodingMode.SCATTER_3D

    def test_preview_loaded_and_failed(self):
        state = _run(FileChosen(FILE), PreviewLoaded(1, GRID))
        assert state.preview == GRID
        state = _run(FileChosen(FILE), PreviewFailed(1, "bad"))
        assert state.preview is None
        assert state.preview_error == "bad"

    def test_stale_preview_is_discarded(self):
        state = _run(FileChosen(FILE), FileChosen(FILE))
        assert transition(state, PreviewLoaded(1, GRID)) is state
        assert transition(state, PreviewFailed(1, "bad")) is state

    def test_preview_failure_leaves_main_fields(self):
        base = _run(FileChosen(FILE), SubmitRequested(), AnalysisResolved(2, SUCCESS))
        state = transition(base, PreviewFailed(1, "bad"))
        assert state.outcome == base.outcome
        assert state.loading == base.loading
        assert state.encoding == base.encoding
        assert state.file == base.file
        assert state.request_token == base.request_token

    def test_unknown_event(self):
        with pytest.raises(TypeError):
            transition(WorkflowState(), object())


# ============= Orchestrator =============


class TestOrchestrator:
    """Side effects sequenced around the reducer."""

    @pytest.mark.asyncio
    async def test_submit_without_file_never_calls_client(self):
        client = FakeClient()
        orch = WorkflowOrchestrator(client)
        state = await orch.submit()
        assert client.calls == []
        assert state.outcome.kind is ErrorKind.VALIDATION
        assert state.error_message == NO_FILE_MESSAGE

    @pytest.mark.asyncio
    async def test_only_latest_submit_is_applied(self):
        client = FakeClient()
        orch = WorkflowOrchestrator(client)
        orch.select_file(FILE)

        first = asyncio.create_task(orch.submit())
        await asyncio.sleep(0)
        second = asyncio.create_task(orch.submit())
        await asyncio.sleep(0)
        assert len(client.calls) == 2

        # Resolve the first (stale) call after the second was issued
        client.calls[0][1].set_result(AnalysisFailure("stale", ErrorKind.SERVICE))
        await first
        assert orch.state.phase is Phase.ANALYZING
        assert orch.state.error_message is None

        client.calls[1][1].set_result(SUCCESS)
        await second
        assert orch.state.phase is Phase.SUCCEEDED
        assert orch.state.result == RESULT

    @pytest.mark.asyncio
    async def test_stale_success_after_newer_failure(self):
        client = FakeClient()
        orch = WorkflowOrchestrator(client)
        orch.select_file(FILE)

        first = asyncio.create_task(orch.submit())
        await asyncio.sleep(0)
        second = asyncio.create_task(orch.submit())
        await asyncio.sleep(0)

        client.calls[1][1].set_result(FAILURE)
        await second
        client.calls[0][1].set_result(SUCCESS)
        await first

        assert orch.state.phase is Phase.FAILED
        assert orch.state.result is None

    @pytest.mark.asyncio
    async def test_load_preview_failure_is_preview_only(self):
        orch = WorkflowOrchestrator(FakeClient())
        state = await orch.load_preview(UploadedFile("bad.csv", b""))
        assert state.preview is None
        assert state.preview_error == PARSE_ERROR_MESSAGE
        assert state.phase is Phase.FILE_SELECTED
        assert isinstance(state.outcome, Empty)
        assert state.loading is False

    @pytest.mark.asyncio
    async def test_load_preview_corrupt_workbook(self):
        orch = WorkflowOrchestrator(FakeClient())
        state = await orch.load_preview(
            make_zip({"[Content_Types].xml": "<<not xml"})
        )
        assert state.preview is None
        assert state.preview_error == PARSE_ERROR_MESSAGE
        assert isinstance(state.outcome, Empty)

    @pytest.mark.asyncio
    async def test_preview_failure_does_not_block_submit(self):
        client = FakeClient()
        orch = WorkflowOrchestrator(client)
        await orch.load_preview(UploadedFile("bad.csv", b""))

        task = asyncio.create_task(orch.submit())
        await asyncio.sleep(0)
        client.calls[0][1].set_result(SUCCESS)
        state = await task
        assert state.phase is Phase.SUCCEEDED
        assert state.preview_error == PARSE_ERROR_MESSAGE

    def test_subscribers_notified(self):
        orch = WorkflowOrchestrator(FakeClient())
        seen = []
        unsubscribe = orch.subscribe(seen.append)
        orch.select_file(FILE)
        orch.toggle_preview()
        assert [s.phase for s in seen] == [Phase.FILE_SELECTED, Phase.FILE_SELECTED]
        assert seen[-1].preview_visible is True

        unsubscribe()
        orch.toggle_preview()
        assert len(seen) == 2

    def test_ignored_event_does_not_notify(self):
        orch = WorkflowOrchestrator(FakeClient())
        seen = []
        orch.subscribe(seen.append)
        orch.change_encoding(EncodingMode.BAR)
        assert seen == []
        assert orch.state.encoding is EncodingMode.SCATTER_2D

    def test_split_submit_api(self):
        orch = WorkflowOrchestrator(FakeClient())
        orch.select_file(FILE)
        old = orch.begin_submit()
        new = orch.begin_submit()
        assert new > old
        orch.resolve(old, SUCCESS)
        assert orch.state.loading is True
        orch.resolve(new, SUCCESS)
        assert orch.current_series().x == (1.0, 3.0)

    def test_current_series_none_without_result(self):
        orch = WorkflowOrchestrator(FakeClient())
        assert orch.current_series() is None


# ============= End-to-end scenarios =============


class TestScenarios:
    """Full runs through the real preview parser and a mocked service."""

    @pytest.mark.asyncio
    async def test_scenario_a_upload_and_analyze(self, mock_client):
        client, requests = mock_client(lambda r: json_response(200, {
            "status": True, "data": [[1, 2], [3, 4]], "explained_variance": 0.87,
        }))
        orch = WorkflowOrchestrator(client)

        state = await orch.load_preview(make_csv(10))
        assert len(state.preview.rows) == 6

        state = await orch.submit()
        assert len(requests) == 1
        assert state.phase is Phase.SUCCEEDED
        series = orch.current_series()
        assert series.x == (1.0, 3.0)
        assert series.y == (2.0, 4.0)
        assert state.result.variance_text == "87.00%"

    @pytest.mark.asyncio
    async def test_scenario_b_service_error(self, mock_client):
        client, _ = mock_client(
            lambda r: json_response(500, {"msg": "PCA failed: singular matrix"})
        )
        orch = WorkflowOrchestrator(client)
        orch.select_file(make_csv(10))

        state = await orch.submit()
        assert state.phase is Phase.FAILED
        assert state.error_message == "PCA failed: singular matrix"
        assert orch.current_series() is None

    @pytest.mark.asyncio
    async def test_scenario_c_switch_to_bar(self, mock_client):
        client, _ = mock_client(lambda r: json_response(200, {
            "status": True, "data": [[1, 2], [3, 4]], "explained_variance": 0.87,
        }))
        orch = WorkflowOrchestrator(client)
        await orch.load_preview(make_csv(10))
        await orch.submit()

        state = orch.change_encoding(EncodingMode.BAR)
        assert state.encoding is EncodingMode.BAR
        series = orch.current_series()
        assert series.x == ("Point 1", "Point 2")
        assert series.y == (1.0, 3.0)
