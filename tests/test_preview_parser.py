"""
Tests for the preview parser.

Verifies that:
- Previews never exceed the header + 5 data rows cap
- Short files pass through unchanged
- Delimiters, quoting, BOMs and blank lines are handled
- Workbooks are read through openpyxl
- Unreadable input raises ParseError with the user-facing message
"""

import pytest

from conftest import make_csv, make_xlsx, make_zip
from pca_plotter.data_model import UploadedFile
from pca_plotter.errors import PARSE_ERROR_MESSAGE, ParseError
from pca_plotter.preview_parser import extract_preview, parse_table


# ============= Row cap =============


class TestPreviewCap:
    """The grid holds at most a header and five data rows."""

    @pytest.mark.parametrize("n_rows", [0, 1, 4, 5, 6, 10, 500])
    def test_never_more_than_six_rows(self, n_rows):
        grid = extract_preview(make_csv(n_rows))
        assert len(grid.rows) <= 6
        assert len(grid.rows) == min(n_rows + 1, 6)

    def test_ten_row_csv_shows_header_and_five_rows(self, csv_file):
        grid = extract_preview(csv_file)
        assert grid.header == ("a", "b", "c")
        assert len(grid.data_rows) == 5
        assert grid.data_rows[0] == ("0", "1", "2")
        assert grid.data_rows[-1] == ("12", "13", "14")

    def test_fewer_rows_pass_through(self):
        grid = extract_preview(make_csv(2))
        assert grid.rows == (("a", "b", "c"), ("0", "1", "2"), ("3", "4", "5"))

    def test_custom_cap(self, csv_file):
        assert len(extract_preview(csv_file, max_rows=3).rows) == 3


# ============= Delimited text =============


class TestDelimitedText:
    """CSV dialect handling."""

    def test_semicolon_delimiter(self):
        f = UploadedFile("eu.csv", "x;y\n1,5;2,5\n".encode("utf-8"))
        assert extract_preview(f).rows == (("x", "y"), ("1,5", "2,5"))

    def test_tab_delimiter(self):
        f = UploadedFile("t.csv", b"x\ty\n1\t2\n")
        assert extract_preview(f).rows == (("x", "y"), ("1", "2"))

    def test_quoted_field_keeps_comma(self):
        f = UploadedFile("q.csv", b'name,value\n"Smith, J",3\n')
        assert extract_preview(f).data_rows == (("Smith, J", "3"),)

    def test_utf8_bom_is_stripped(self):
        f = UploadedFile("bom.csv", "\ufeffcol1,col2\n1,2\n".encode("utf-8"))
        assert extract_preview(f).header == ("col1", "col2")

    def test_blank_lines_skipped(self):
        f = UploadedFile("b.csv", b"\n\nh1,h2\n\n1,2\n\n")
        assert extract_preview(f).rows == (("h1", "h2"), ("1", "2"))

    def test_empty_cells_are_empty_strings(self):
        f = UploadedFile("e.csv", b"a,b,c\n1,,3\n")
        assert extract_preview(f).data_rows == (("1", "", "3"),)

    def test_ragged_rows_kept(self):
        f = UploadedFile("r.csv", b"a,b,c\n1\n1,2,3,4\n")
        grid = extract_preview(f)
        assert grid.data_rows == (("1",), ("1", "2", "3", "4"))
        assert grid.column_count == 4

    def test_quoted_field_spanning_lines(self):
        f = UploadedFile("m.csv", b'id,note\n1,"two\nlines"\n2,x\n')
        assert parse_table(f) == [["id", "note"], ["1", "two\nlines"], ["2", "x"]]

    def test_whole_file_parsed_before_truncation(self):
        lines = ["a,b"] + [f"{i},{i}" for i in range(10)] + ['"unterminated,1']
        f = UploadedFile("late.csv", "\n".join(lines).encode("utf-8"))
        with pytest.raises(ParseError):
            extract_preview(f)


# ============= Workbooks =============


class TestWorkbooks:
    """Excel input through openpyxl."""

    def test_xlsx_rows(self):
        f = make_xlsx([("PC", "value"), ("a", 1.0), ("b", 2.5), ("c", None)])
        grid = extract_preview(f)
        assert grid.rows == (("PC", "value"), ("a", "1"), ("b", "2.5"), ("c",))

    def test_xlsx_truncated(self):
        rows = [("h",)] + [(i,) for i in range(20)]
        grid = extract_preview(make_xlsx(rows))
        assert len(grid.rows) == 6
        assert grid.data_rows[-1] == ("4",)

    def test_zip_content_detected_regardless_of_extension(self):
        f = make_xlsx([("a", "b"), (1, 2)], name="mislabelled.xls")
        assert extract_preview(f).rows == (("a", "b"), ("1", "2"))


# ============= Errors =============


class TestParseErrors:
    """Unreadable files raise ParseError."""

    @pytest.mark.parametrize("file", [
        UploadedFile("empty.csv", b""),
        UploadedFile("blank.csv", b"\n \n\n"),
        UploadedFile("latin.csv", b"caf\xe9,x\n1,2\n"),
        UploadedFile("nul.csv", b"a,b\n1\x002,3\n"),
        UploadedFile("legacy.xls", b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1" + b"\x00" * 64),
        UploadedFile("fake.xlsx", b"a,b\n1,2\n"),
        UploadedFile("broken.xlsx", b"PK\x03\x04not really a zip"),
    ], ids=lambda f: f.name)
    def test_malformed_input(self, file):
        with pytest.raises(ParseError) as exc_info:
            extract_preview(file)
        assert exc_info.value.message == PARSE_ERROR_MESSAGE

    @pytest.mark.parametrize("parts", [
        {"[Content_Types].xml": "<<not xml"},
        {"[Content_Types].xml": "<Types/>", "xl/workbook.xml": "<<not xml"},
    ], ids=["manifest", "workbook"])
    def test_zip_with_malformed_xml_parts(self, parts):
        with pytest.raises(ParseError) as exc_info:
            extract_preview(make_zip(parts))
        assert exc_info.value.message == PARSE_ERROR_MESSAGE

    def test_bad_quoting_raises(self):
        f = UploadedFile("q.csv", b'a,b\n"x"y,2\n')
        with pytest.raises(ParseError):
            extract_preview(f)

    def test_parse_error_is_value_error(self):
        with pytest.raises(ValueError):
            extract_preview(UploadedFile("empty.csv", b""))
