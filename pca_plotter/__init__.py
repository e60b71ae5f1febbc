"""
PCA Plotter v1.0.0

Desktop client for a remote dimensionality-reduction (PCA) service.
Loads a CSV or Excel file, previews its first rows, submits it to the
service and plots the returned projection as a 2-D scatter, a bar
chart or a 3-D scatter.

The workflow core (preview extraction, analysis client, view
projection and the orchestrator state machine) is free of Qt and can
be driven from plain asyncio code.
"""

APP_NAME = "PCA Plotter"
APP_VERSION = "1.0.0"
APP_DATE = "2026-10-19"
__version__ = APP_VERSION
