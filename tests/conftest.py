"""
Root conftest.py for PCA Plotter tests.

Shared fixtures: in-memory upload files and a factory for
``AnalysisClient`` instances backed by ``httpx.MockTransport``.
"""

import io
import json
import sys
import zipfile
from pathlib import Path

import httpx
import pytest

# Ensure the project root is on the path when running without install
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from pca_plotter.analysis_client import AnalysisClient
from pca_plotter.data_model import UploadedFile

SERVICE_URL = "https://pca.test/pca"


# ============================================================================
# Helpers
# ============================================================================


def make_csv(n_rows: int, header=("a", "b", "c")) -> UploadedFile:
    """CSV with a header and *n_rows* numeric rows."""
    lines = [",".join(header)]
    for i in range(n_rows):
        lines.append(",".join(str(i * len(header) + j) for j in range(len(header))))
    return UploadedFile("data.csv", ("\n".join(lines) + "\n").encode("utf-8"))


def make_xlsx(rows, name="data.xlsx") -> UploadedFile:
    """Workbook with *rows* on its active sheet, built in memory."""
    import openpyxl

    wb = openpyxl.Workbook()
    ws = wb.active
    for row in rows:
        ws.append(list(row))
    buf = io.BytesIO()
    wb.save(buf)
    return UploadedFile(name, buf.getvalue())


def make_zip(parts, name="corrupt.xlsx") -> UploadedFile:
    """Zip archive with *parts* (member name -> text), built in memory."""
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w") as zf:
        for member, text in parts.items():
            zf.writestr(member, text)
    return UploadedFile(name, buf.getvalue())


def json_response(status_code: int, body) -> httpx.Response:
    return httpx.Response(
        status_code,
        content=json.dumps(body).encode("utf-8"),
        headers={"Content-Type": "application/json"},
    )


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def csv_file() -> UploadedFile:
    return make_csv(10)


@pytest.fixture
def mock_client():
    """Factory: ``mock_client(handler)`` -> (client, captured requests)."""

    def factory(handler):
        requests = []

        def recording(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return handler(request)

        client = AnalysisClient(
            SERVICE_URL, timeout=5.0, transport=httpx.MockTransport(recording),
        )
        return client, requests

    return factory
