"""
Preview parser for the PCA Plotter.

Turns an ``UploadedFile`` into a ``PreviewGrid``: the header row plus
the first five data rows.  Handles:

- CSV / delimited text with auto-detected delimiters (tab → semicolon
  → comma)
- UTF-8 BOM markers
- Quoted fields containing delimiters
- Excel workbooks (``.xlsx``) via openpyxl, first worksheet only
- Blank cells (mapped to ``""``)

The whole document is parsed before truncation, so a file that is
malformed past the preview rows still raises ``ParseError``.
"""

import csv
import datetime
import io
import zipfile
from typing import List

from .constants import PREVIEW_MAX_ROWS, SPREADSHEET_EXTENSIONS
from .data_model import PreviewGrid, UploadedFile
from .errors import ParseError
from .logger import get_logger

logger = get_logger(__name__)

# Local file header of a zip container (xlsx is a zip of XML parts)
_ZIP_SIGNATURE = b"PK\x03\x04"

# Raised by openpyxl for corrupt zip members or malformed XML parts.
# Both xml.etree and lxml parse errors subclass SyntaxError.
_WORKBOOK_ERRORS = (
    zipfile.BadZipFile, SyntaxError, KeyError, OSError, ValueError,
    TypeError, AttributeError,
)


# ── Cell formatting ──────────────────────────────────────────────────────

def _cell_text(value) -> str:
    """Render a spreadsheet cell value as display text."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, datetime.datetime) and value.time() == datetime.time():
        return value.date().isoformat()
    if isinstance(value, (datetime.date, datetime.time)):
        return value.isoformat()
    return str(value).strip()


# ── Delimiter auto-detection ─────────────────────────────────────────────

def _detect_delimiter(sample_line: str) -> str:
    """Detect the delimiter from a sample line.

    Priority: tab → semicolon → comma.
    European CSVs use semicolons as field delimiters with comma decimals.
    """
    if '\t' in sample_line:
        return '\t'
    if ';' in sample_line:
        return ';'
    return ','


# ── Format readers ───────────────────────────────────────────────────────

def _read_delimited(content: bytes) -> List[List[str]]:
    try:
        text = content.decode('utf-8-sig')
    except UnicodeDecodeError as exc:
        raise ParseError(f"not UTF-8 text: {exc}") from exc
    if '\x00' in text:
        raise ParseError("binary content (NUL bytes)")

    first = next((ln for ln in text.splitlines() if ln.strip()), None)
    if first is None:
        raise ParseError("file is empty")

    reader = csv.reader(
        io.StringIO(text, newline=''),
        delimiter=_detect_delimiter(first),
        strict=True,
    )
    rows: List[List[str]] = []
    try:
        for row in reader:
            # Blank lines come through as [] or ['']
            if not any(cell.strip() for cell in row):
                continue
            rows.append([cell.strip() for cell in row])
    except csv.Error as exc:
        raise ParseError(f"line {reader.line_num}: {exc}") from exc
    return rows


def _read_workbook(content: bytes) -> List[List[str]]:
    import openpyxl
    from openpyxl.utils.exceptions import InvalidFileException

    try:
        wb = openpyxl.load_workbook(
            io.BytesIO(content), read_only=True, data_only=True,
        )
    except _WORKBOOK_ERRORS + (InvalidFileException,) as exc:
        raise ParseError(f"unreadable workbook: {exc}") from exc

    try:
        ws = wb.active
        if ws is None:
            raise ParseError("workbook has no worksheets")
        rows: List[List[str]] = []
        for values in ws.iter_rows(values_only=True):
            row = [_cell_text(v) for v in values]
            if not any(row):
                continue
            # Trailing empty cells are formatting residue
            while row and not row[-1]:
                row.pop()
            rows.append(row)
    except ParseError:
        raise
    except _WORKBOOK_ERRORS as exc:
        raise ParseError(f"unreadable worksheet: {exc}") from exc
    finally:
        wb.close()
    return rows


# ── Public API ───────────────────────────────────────────────────────────

def parse_table(file: UploadedFile) -> List[List[str]]:
    """Parse every non-blank row of *file* into lists of cell strings.

    Raises
    ------
    ParseError
        If the file is empty, not decodable, or not a valid table.
    """
    content = file.content
    if not content:
        raise ParseError("file is empty")

    if content.startswith(_ZIP_SIGNATURE):
        rows = _read_workbook(content)
    elif file.extension in SPREADSHEET_EXTENSIONS:
        # Legacy binary .xls (OLE2) and mislabelled files land here
        raise ParseError(
            f"'{file.name}' is not an Office Open XML workbook"
        )
    else:
        rows = _read_delimited(content)

    if not rows:
        raise ParseError("no rows found")
    return rows


def extract_preview(
    file: UploadedFile,
    max_rows: int = PREVIEW_MAX_ROWS,
) -> PreviewGrid:
    """Build the preview grid for *file*.

    Parameters
    ----------
    file : UploadedFile
    max_rows : int
        Header plus data rows to keep (default 6: header + 5 rows).

    Returns
    -------
    PreviewGrid

    Raises
    ------
    ParseError
        If the file cannot be read as a table.
    """
    try:
        rows = parse_table(file)
    except ParseError as exc:
        logger.warning("Preview of '%s' failed: %s", file.name, exc.detail)
        raise

    logger.debug(
        "Parsed '%s': %d rows, previewing %d",
        file.name, len(rows), min(len(rows), max_rows),
    )
    return PreviewGrid(rows=tuple(tuple(r) for r in rows[:max_rows]))
