"""
Data model for the PCA Plotter.

Immutable dataclasses for everything the workflow passes around: the
uploaded file, its preview grid, the analysis result and outcome, and
the aggregate ``WorkflowState``.  Records are replaced, never mutated.

Result and error are mutually exclusive.  ``WorkflowState.outcome`` is
one of ``Empty``, ``Succeeded`` or ``Failed`` rather than two optional
fields, so a state holding both cannot be built.
"""

import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple, Union


class EncodingMode(Enum):
    """Visual encoding applied to an analysis result."""
    SCATTER_2D = "scatter"
    BAR = "bar"
    SCATTER_3D = "3d"


DEFAULT_ENCODING = EncodingMode.SCATTER_2D


class ErrorKind(Enum):
    """Cause of a failed workflow outcome."""
    VALIDATION = "validation"
    TRANSPORT = "transport"
    SERVICE = "service"
    MALFORMED = "malformed"


class Phase(Enum):
    """Main workflow state, derived from ``WorkflowState``."""
    IDLE = "idle"
    FILE_SELECTED = "file_selected"
    ANALYZING = "analyzing"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class UploadedFile:
    """A user-selected file held in memory.

    Parameters
    ----------
    name : str
        Display name, e.g. ``"iris.csv"``.
    content : bytes
        Raw file bytes, sent unchanged to the analysis service.
    """
    name: str
    content: bytes = field(repr=False)

    @property
    def extension(self) -> str:
        """Lower-case suffix including the dot, e.g. ``".csv"``."""
        return os.path.splitext(self.name)[1].lower()

    @property
    def size(self) -> int:
        return len(self.content)

    @classmethod
    def from_path(cls, path: str) -> "UploadedFile":
        with open(path, 'rb') as fh:
            content = fh.read()
        return cls(name=os.path.basename(path), content=content)


@dataclass(frozen=True)
class PreviewGrid:
    """First rows of a file for display.

    Parameters
    ----------
    rows : tuple of tuple of str
        Header row followed by up to five data rows.  Blank cells are
        empty strings.  Rows may differ in length.
    """
    rows: Tuple[Tuple[str, ...], ...]

    @property
    def header(self) -> Tuple[str, ...]:
        return self.rows[0] if self.rows else ()

    @property
    def data_rows(self) -> Tuple[Tuple[str, ...], ...]:
        return self.rows[1:]

    @property
    def column_count(self) -> int:
        return max((len(r) for r in self.rows), default=0)


@dataclass(frozen=True)
class AnalysisResult:
    """Projection returned by the PCA service.

    Parameters
    ----------
    coordinates : tuple of tuple of float
        One tuple per input row, each with at least two components
        (PC1, PC2) and optionally a third (PC3).
    explained_variance : float
        Fraction of variance explained, in ``[0, 1]``.
    """
    coordinates: Tuple[Tuple[float, ...], ...]
    explained_variance: float

    @property
    def variance_text(self) -> str:
        """Explained variance as a percentage, e.g. ``"87.00%"``."""
        return f"{self.explained_variance * 100:.2f}%"


@dataclass(frozen=True)
class AnalysisSuccess:
    result: AnalysisResult


@dataclass(frozen=True)
class AnalysisFailure:
    message: str
    kind: ErrorKind = ErrorKind.SERVICE


AnalysisOutcome = Union[AnalysisSuccess, AnalysisFailure]


# ── Workflow outcome variants ────────────────────────────────────────────

@dataclass(frozen=True)
class Empty:
    """No result and no error: initial state, or analysis in flight."""


@dataclass(frozen=True)
class Succeeded:
    result: AnalysisResult


@dataclass(frozen=True)
class Failed:
    message: str
    kind: ErrorKind = ErrorKind.SERVICE


Outcome = Union[Empty, Succeeded, Failed]


@dataclass(frozen=True)
class WorkflowState:
    """Aggregate state owned by ``WorkflowOrchestrator``.

    Parameters
    ----------
    file : UploadedFile or None
        Currently selected file.
    preview : PreviewGrid or None
        Preview of ``file``; ``None`` until parsed or if parsing failed.
    preview_error : str or None
        Preview-only error.  Independent of ``outcome``.
    preview_visible : bool
        Whether the preview table is shown.
    loading : bool
        ``True`` while an analysis request is in flight.  ``outcome``
        is always ``Empty`` while loading.
    outcome : Empty, Succeeded or Failed
        Result of the latest analysis (or submit validation).
    encoding : EncodingMode
        Active chart encoding.
    request_token : int
        Generation of the latest analysis request.  Deliveries carrying
        any other token are stale.
    preview_token : int
        Generation of the latest file selection, for preview deliveries.
    """
    file: Optional[UploadedFile] = None
    preview: Optional[PreviewGrid] = None
    preview_error: Optional[str] = None
    preview_visible: bool = False
    loading: bool = False
    outcome: Outcome = Empty()
    encoding: EncodingMode = DEFAULT_ENCODING
    request_token: int = 0
    preview_token: int = 0

    @property
    def phase(self) -> Phase:
        if self.loading:
            return Phase.ANALYZING
        if isinstance(self.outcome, Succeeded):
            return Phase.SUCCEEDED
        if isinstance(self.outcome, Failed) and self.file is not None:
            return Phase.FAILED
        if self.file is None:
            return Phase.IDLE
        return Phase.FILE_SELECTED

    @property
    def result(self) -> Optional[AnalysisResult]:
        if isinstance(self.outcome, Succeeded):
            return self.outcome.result
        return None

    @property
    def error_message(self) -> Optional[str]:
        if isinstance(self.outcome, Failed):
            return self.outcome.message
        return None
