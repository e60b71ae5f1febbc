"""
Runtime configuration for the PCA Plotter.

Values come from environment variables, in order of priority:

1. Command-line flags (see ``__main__``)
2. ``PCA_PLOTTER_SERVICE_URL``, ``PCA_PLOTTER_TIMEOUT``,
   ``PCA_PLOTTER_LOG_LEVEL``
3. Built-in defaults below
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

DEFAULT_SERVICE_URL = "https://metadata-dr-backend.onrender.com/pca"
# Free-tier hosts can take minutes to wake up.
DEFAULT_TIMEOUT_SECONDS = 300.0
DEFAULT_LOG_LEVEL = "INFO"

ENV_SERVICE_URL = "PCA_PLOTTER_SERVICE_URL"
ENV_TIMEOUT = "PCA_PLOTTER_TIMEOUT"
ENV_LOG_LEVEL = "PCA_PLOTTER_LOG_LEVEL"


def parse_timeout(text: str) -> Optional[float]:
    """Parse a timeout in seconds.  ``"0"`` or ``"none"`` disables it."""
    s = text.strip().lower()
    if s in ("", "none", "off"):
        return None
    try:
        value = float(s)
    except ValueError:
        raise ValueError(
            f"Invalid timeout {text!r}: expected a number of seconds or 'none'"
        ) from None
    if value < 0:
        raise ValueError(f"Invalid timeout {text!r}: must not be negative")
    return value or None


@dataclass(frozen=True)
class ClientConfig:
    """Settings for the analysis client and the application shell."""
    service_url: str = DEFAULT_SERVICE_URL
    request_timeout: Optional[float] = DEFAULT_TIMEOUT_SECONDS
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ClientConfig":
        env = os.environ if environ is None else environ
        timeout = DEFAULT_TIMEOUT_SECONDS
        if env.get(ENV_TIMEOUT) is not None:
            timeout = parse_timeout(env[ENV_TIMEOUT])
        return cls(
            service_url=env.get(ENV_SERVICE_URL) or DEFAULT_SERVICE_URL,
            request_timeout=timeout,
            log_level=(env.get(ENV_LOG_LEVEL) or DEFAULT_LOG_LEVEL).upper(),
        )
