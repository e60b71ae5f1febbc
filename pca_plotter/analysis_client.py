"""
Client for the remote PCA service.

``AnalysisClient.analyze`` posts one file and resolves to exactly one
``AnalysisSuccess`` or ``AnalysisFailure``.  Network errors, non-2xx
responses, explicit failure flags and malformed bodies all become an
``AnalysisFailure``; nothing is raised to the caller.  There are no
retries.

Expected response body::

    {"status": true, "data": [[pc1, pc2, pc3?], ...],
     "explained_variance": 0.87}

and on failure ``{"msg": "..."}``.
"""

import math
import mimetypes
from numbers import Real
from typing import Any, Optional, Tuple

import httpx

from .config import ClientConfig
from .constants import UPLOAD_FIELD_NAME
from .data_model import (
    AnalysisFailure, AnalysisOutcome, AnalysisResult, AnalysisSuccess,
    UploadedFile,
)
from .errors import (
    AnalysisError, MalformedResponse, ServiceError, TransportError,
)
from .logger import get_logger

logger = get_logger(__name__)

# Keys checked, in order, for a service-provided error message
_MESSAGE_KEYS = ("msg", "message", "detail", "error")


def _service_message(payload: Any) -> Optional[str]:
    """Most specific error message in *payload*, if any."""
    if not isinstance(payload, dict):
        return None
    for key in _MESSAGE_KEYS:
        value = payload.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


def _is_number(value: Any) -> bool:
    if not isinstance(value, Real) or isinstance(value, bool):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        # JSON integers beyond float range
        return False


def _parse_coordinates(data: Any) -> Tuple[Tuple[float, ...], ...]:
    if not isinstance(data, list) or not data:
        raise MalformedResponse()
    coords = []
    for point in data:
        if not isinstance(point, list) or len(point) < 2:
            raise MalformedResponse()
        if not all(_is_number(v) for v in point):
            raise MalformedResponse()
        coords.append(tuple(float(v) for v in point))
    return tuple(coords)


def interpret_response(status_code: int, payload: Any) -> AnalysisResult:
    """Validate a decoded service response.

    Parameters
    ----------
    status_code : int
        HTTP status of the response.
    payload : Any
        Decoded JSON body (``None`` if the body was not JSON).

    Returns
    -------
    AnalysisResult

    Raises
    ------
    ServiceError
        Non-2xx status or a falsy ``status`` flag.
    MalformedResponse
        A successful response without valid ``data`` and
        ``explained_variance``.
    """
    message = _service_message(payload)
    if not 200 <= status_code < 300:
        raise ServiceError(message)
    if not isinstance(payload, dict):
        raise MalformedResponse(message)
    if not payload.get("status"):
        raise ServiceError(message)

    try:
        coordinates = _parse_coordinates(payload.get("data"))
    except MalformedResponse:
        raise MalformedResponse(message) from None

    variance = payload.get("explained_variance")
    if not _is_number(variance) or not 0.0 <= variance <= 1.0:
        raise MalformedResponse(message)

    return AnalysisResult(
        coordinates=coordinates,
        explained_variance=float(variance),
    )


class AnalysisClient:
    """Submits files to the PCA service.

    Parameters
    ----------
    service_url : str
        Endpoint receiving the multipart POST.
    timeout : float or None
        Client-side timeout in seconds; ``None`` waits indefinitely.
    transport : httpx.AsyncBaseTransport, optional
        Custom transport (tests use ``httpx.MockTransport``).
    """

    def __init__(
        self,
        service_url: str,
        *,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.service_url = service_url
        self.timeout = timeout
        self._transport = transport

    @classmethod
    def from_config(cls, config: ClientConfig, **kwargs) -> "AnalysisClient":
        return cls(config.service_url, timeout=config.request_timeout, **kwargs)

    async def analyze(self, file: UploadedFile) -> AnalysisOutcome:
        """Run one analysis of *file*.  Never raises for service errors."""
        try:
            result = await self._post(file)
        except AnalysisError as exc:
            logger.warning(
                "Analysis of '%s' failed (%s): %s",
                file.name, exc.kind.value, exc.message,
            )
            return AnalysisFailure(message=exc.message, kind=exc.kind)

        logger.info(
            "Analysis of '%s' returned %d points (explained variance %s)",
            file.name, len(result.coordinates), result.variance_text,
        )
        return AnalysisSuccess(result=result)

    async def _post(self, file: UploadedFile) -> AnalysisResult:
        content_type = (
            mimetypes.guess_type(file.name)[0] or "application/octet-stream"
        )
        files = {UPLOAD_FIELD_NAME: (file.name, file.content, content_type)}

        logger.info(
            "POST %s with '%s' (%d bytes)",
            self.service_url, file.name, file.size,
        )
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self._transport,
            ) as client:
                response = await client.post(self.service_url, files=files)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            logger.debug("Transport error: %r", exc)
            raise TransportError() from exc

        logger.debug("Service responded with HTTP %d", response.status_code)
        try:
            payload = response.json()
        except ValueError:
            payload = None
        return interpret_response(response.status_code, payload)
