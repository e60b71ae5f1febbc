"""
Error taxonomy for the PCA Plotter.

Preview errors and analysis errors belong to separate pipelines and
never cascade into each other.  Analysis errors are not raised to the
caller of ``AnalysisClient.analyze``; the client folds them into an
``AnalysisFailure`` carrying the message and ``ErrorKind``.
"""

from .data_model import ErrorKind

GENERIC_ERROR_MESSAGE = "An error occurred"
PARSE_ERROR_MESSAGE = (
    "Failed to read file. Please ensure it is a valid CSV or Excel file."
)
NO_FILE_MESSAGE = "Please select a file"


class PlotterError(Exception):
    """Base class for all PCA Plotter errors."""


class ParseError(PlotterError, ValueError):
    """The uploaded file could not be read as a table."""

    def __init__(self, detail: str = ""):
        super().__init__(PARSE_ERROR_MESSAGE)
        self.detail = detail

    @property
    def message(self) -> str:
        return PARSE_ERROR_MESSAGE


class ValidationError(PlotterError):
    """Analysis was requested with no file selected."""

    kind = ErrorKind.VALIDATION

    def __init__(self, message: str = NO_FILE_MESSAGE):
        super().__init__(message)
        self.message = message


class AnalysisError(PlotterError):
    """Base class for failures of the remote analysis call."""

    kind = ErrorKind.SERVICE

    def __init__(self, message: str = GENERIC_ERROR_MESSAGE):
        super().__init__(message or GENERIC_ERROR_MESSAGE)
        self.message = message or GENERIC_ERROR_MESSAGE


class TransportError(AnalysisError):
    """Network failure or timeout before a response arrived."""

    kind = ErrorKind.TRANSPORT


class ServiceError(AnalysisError):
    """Non-2xx response, or an explicit failure flag in the body."""

    kind = ErrorKind.SERVICE


class MalformedResponse(AnalysisError):
    """A successful-looking response missing required fields."""

    kind = ErrorKind.MALFORMED
