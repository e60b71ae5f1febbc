"""
Entry point for the PCA Plotter.

Usage:
    python -m pca_plotter [--service-url URL] [--timeout SECONDS]
                          [--log-level LEVEL]
"""

import argparse
import dataclasses
import os
import sys
import traceback

from .config import ClientConfig, parse_timeout
from .logger import get_logger, setup_logging

logger = get_logger(__name__)


def _check_dependencies():
    """Verify required packages are installed."""
    missing = []
    for name in ("PySide6", "matplotlib", "numpy", "openpyxl", "httpx"):
        try:
            __import__(name)
        except ImportError:
            missing.append(name)

    if missing:
        print(
            f"Missing required packages: {', '.join(missing)}\n"
            f"Install with: pip install {' '.join(missing)}",
            file=sys.stderr,
        )
        sys.exit(1)


def _exception_hook(exc_type, exc_value, exc_tb):
    """Global exception handler to prevent silent crashes."""
    msg = ''.join(traceback.format_exception(exc_type, exc_value, exc_tb))
    logger.critical("Unhandled exception:\n%s", msg)

    from PySide6.QtWidgets import QMessageBox, QApplication
    if QApplication.instance() is not None:
        QMessageBox.critical(
            None, "Unhandled Error",
            f"An unexpected error occurred:\n\n"
            f"{exc_type.__name__}: {exc_value}\n\n"
            f"See console for full traceback.",
        )


def parse_args(argv=None, environ=None) -> ClientConfig:
    """Build the configuration from the environment and *argv*."""
    defaults = ClientConfig.from_env(environ)
    parser = argparse.ArgumentParser(
        prog="pca_plotter",
        description="Desktop client for a remote PCA service",
    )
    parser.add_argument(
        "--service-url",
        default=defaults.service_url,
        help="PCA endpoint (default: %(default)s or PCA_PLOTTER_SERVICE_URL)",
    )
    parser.add_argument(
        "--timeout",
        type=parse_timeout,
        default=defaults.request_timeout,
        help="Request timeout in seconds, 'none' to wait indefinitely "
             "(default: %(default)s or PCA_PLOTTER_TIMEOUT)",
    )
    parser.add_argument(
        "--log-level",
        default=defaults.log_level,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        type=str.upper,
        help="Logging level (default: %(default)s or PCA_PLOTTER_LOG_LEVEL)",
    )
    args = parser.parse_args(argv)
    return dataclasses.replace(
        defaults,
        service_url=args.service_url,
        request_timeout=args.timeout,
        log_level=args.log_level,
    )


def main(argv=None):
    """Launch the PCA Plotter GUI."""
    config = parse_args(argv)
    setup_logging(config.log_level)
    _check_dependencies()

    # Set exception hook before anything else
    sys.excepthook = _exception_hook

    # Configure matplotlib backend before importing Qt widgets
    os.environ.setdefault("QT_API", "pyside6")
    import matplotlib
    matplotlib.use('QtAgg')

    from PySide6.QtWidgets import QApplication
    from PySide6.QtGui import QFont, QFontDatabase

    from .constants import FONT_FAMILIES
    from .theme import get_dark_stylesheet
    from .gui_main import PlotterMainWindow

    app = QApplication(sys.argv[:1])
    app.setStyle("Fusion")

    font = QFont()
    for family in FONT_FAMILIES:
        if QFontDatabase.hasFamily(family):
            font.setFamily(family)
            break
    font.setPointSize(10)
    app.setFont(font)

    app.setStyleSheet(get_dark_stylesheet())

    logger.info("Starting with service %s (timeout %s)",
                config.service_url, config.request_timeout)
    window = PlotterMainWindow(config)
    window.show()

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
