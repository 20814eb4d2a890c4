"""Tests for tabular file loading."""

import io
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest
import xlrd
from openpyxl import Workbook

from gemini_mcp_tools.exceptions import ParseError
from gemini_mcp_tools.tools.tabular import file_format, load_csv, load_table


def _xlsx_bytes(*sheets: list[list]) -> bytes:
    wb = Workbook()
    wb.remove(wb.active)
    for index, grid in enumerate(sheets):
        ws = wb.create_sheet(f"Sheet{index + 1}")
        for row in grid:
            ws.append(row)
    buf = io.BytesIO()
    wb.save(buf)
    return buf.getvalue()


def _xls_sheet(grid: list[list[tuple[int, object]]]) -> SimpleNamespace:
    rows = [[SimpleNamespace(ctype=ctype, value=value) for ctype, value in row] for row in grid]
    return SimpleNamespace(nrows=len(rows), row=lambda r: rows[r])


class TestFileFormat:
    """Tests for extension detection."""

    @pytest.mark.parametrize("name,expected", [
        ("data.csv", ".csv"),
        ("Report.XLSX", ".xlsx"),
        ("legacy.xls", ".xls"),
        ("notes.txt", ""),
        ("noext", ""),
    ])
    def test_file_format(self, name, expected):
        assert file_format(name) == expected


class TestLoadCsv:
    """Tests for CSV parsing."""

    def test_numeric_cells_become_numbers(self):
        rows = load_csv(b"a,b,c\n1,x,2.5\n2,y,3\n")
        assert rows == [{"a": 1, "b": "x", "c": 2.5}, {"a": 2, "b": "y", "c": 3}]

    def test_empty_cells_are_omitted(self):
        rows = load_csv(b"a,b\n1,\n,y\n")
        assert rows == [{"a": 1}, {"b": "y"}]

    def test_byte_order_mark_is_stripped(self):
        rows = load_csv(b"\xef\xbb\xbfa,b\n1,x\n")
        assert list(rows[0]) == ["a", "b"]

    def test_nan_text_stays_text(self):
        rows = load_csv(b"a\nnan\n")
        assert rows == [{"a": "nan"}]

    def test_header_only_has_no_rows(self):
        assert load_csv(b"a,b\n") == []

    def test_invalid_utf8_raises(self):
        with pytest.raises(ParseError):
            load_csv(b"a,b\n\xff\xfe\xfa,1\n")


class TestLoadTable:
    """Tests for load_table dispatch."""

    def test_csv_preserves_row_order(self):
        rows = load_table(b"n\n3\n1\n2\n", "data.csv")
        assert [row["n"] for row in rows] == [3, 1, 2]

    def test_xlsx_reads_first_sheet_only(self):
        buffer = _xlsx_bytes(
            [["name", "score"], ["ann", 90], ["bob", 75.5]],
            [["other"], ["ignored"]],
        )

        rows = load_table(buffer, "scores.xlsx")

        assert rows == [{"name": "ann", "score": 90}, {"name": "bob", "score": 75.5}]

    def test_xlsx_blank_cells_are_omitted(self):
        buffer = _xlsx_bytes([["a", "b"], [1, None], [None, "y"]])
        rows = load_table(buffer, "sparse.xlsx")
        assert rows == [{"a": 1}, {"b": "y"}]

    def test_corrupt_xlsx_raises_with_file_name(self):
        with pytest.raises(ParseError) as exc_info:
            load_table(b"definitely not a zip archive", "broken.xlsx")
        assert exc_info.value.file_name == "broken.xlsx"

    def test_corrupt_xls_raises(self):
        with pytest.raises(ParseError):
            load_table(b"definitely not a workbook", "broken.xls")

    def test_unsupported_extension_raises(self):
        with pytest.raises(ParseError) as exc_info:
            load_table(b"a,b\n1,2\n", "data.json")
        assert "unsupported" in str(exc_info.value)


class TestLoadXls:
    """Tests for legacy .xls loading with a stubbed xlrd workbook."""

    def test_reads_first_sheet_cells(self):
        text, number = xlrd.XL_CELL_TEXT, xlrd.XL_CELL_NUMBER
        first = _xls_sheet([
            [(text, "name"), (text, "score"), (text, "active")],
            [(text, "ann"), (number, 90.0), (xlrd.XL_CELL_BOOLEAN, 1)],
            [(text, "bob"), (number, 75.5), (xlrd.XL_CELL_BLANK, "")],
            [(xlrd.XL_CELL_EMPTY, ""), (number, 3.0), (xlrd.XL_CELL_BOOLEAN, 0)],
        ])
        second = _xls_sheet([[(text, "other")], [(text, "ignored")]])
        book = MagicMock()
        book.sheet_by_index.side_effect = [first, second].__getitem__

        with patch("gemini_mcp_tools.tools.tabular.xlrd.open_workbook", return_value=book) as open_book:
            rows = load_table(b"xls bytes", "legacy.xls")

        open_book.assert_called_once_with(file_contents=b"xls bytes")
        book.sheet_by_index.assert_called_once_with(0)
        assert rows == [
            {"name": "ann", "score": 90, "active": "TRUE"},
            {"name": "bob", "score": 75.5},
            {"score": 3, "active": "FALSE"},
        ]
        assert isinstance(rows[0]["score"], int)
