"""
Logging setup for the PCA Plotter.

Every module asks for its own logger::

    from .logger import get_logger

    logger = get_logger(__name__)
    logger.info("Submitting %s", file.name)

``setup_logging`` is called once from the entry point.
"""

import logging
import sys

_configured = False


def setup_logging(level: str = "INFO") -> None:
    """Configure root logging for the application.

    Subsequent calls are no-ops.
    """
    global _configured
    if _configured:
        return

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
        force=True,
    )
    _configured = True


def get_logger(name: str) -> logging.Logger:
    """Return a logger for *name* (typically ``__name__``)."""
    return logging.getLogger(name)
