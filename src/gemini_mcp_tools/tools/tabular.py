"""Tabular file loading.

Supported formats:
- CSV (`.csv`) - UTF-8, header row names the columns
- Excel (`.xlsx`) via `openpyxl`
- Legacy Excel (`.xls`) via `xlrd`

Only the first sheet of a workbook is read. Every loader returns rows in
source order as plain dicts; a cell that is empty in the source is left out
of its row rather than stored as an empty value.
"""

from __future__ import annotations

import csv
import io
import math
import zipfile
from pathlib import Path
from typing import Any, Iterable, Sequence

import xlrd
from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from ..exceptions import ParseError
from ..logging import get_logger
from ..types import DataRow

logger = get_logger(__name__)

SUPPORTED_EXTENSIONS = (".csv", ".xlsx", ".xls")


def file_format(file_name: str) -> str:
    """Return the lowercase extension of ``file_name`` ('' if unsupported)."""
    suffix = Path(file_name).suffix.lower()
    return suffix if suffix in SUPPORTED_EXTENSIONS else ""


def _parse_number(text: str) -> int | float | str:
    txt = text.strip()
    try:
        return int(txt)
    except ValueError:
        pass
    try:
        number = float(txt)
    except ValueError:
        return text
    # "nan"/"inf" stay text
    if math.isnan(number) or math.isinf(number):
        return text
    return number


def _normalize_cell(value: Any) -> int | float | str | None:
    if value is None:
        return None
    if isinstance(value, bool):
        return str(value).upper()
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, (int, float, str)):
        return value if value != "" else None
    # dates, times and anything else openpyxl hands back
    return str(value)


def _header(raw_columns: Iterable[Any]) -> list[str]:
    return [
        str(c) if c not in (None, "") else f"col_{idx + 1}"
        for idx, c in enumerate(raw_columns)
    ]


def _rows_from_grid(grid: Sequence[Sequence[Any]]) -> list[DataRow]:
    if not grid:
        return []

    columns = _header(grid[0])
    rows: list[DataRow] = []
    for raw in grid[1:]:
        row: DataRow = {}
        for idx, column in enumerate(columns):
            if idx >= len(raw):
                break
            value = _normalize_cell(raw[idx])
            if value is not None:
                row[column] = value
        if row:
            rows.append(row)
    return rows


def load_csv(buffer: bytes) -> list[DataRow]:
    """Parse CSV bytes, reading numeric-looking cells as numbers."""
    try:
        text = buffer.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise ParseError("<csv>", f"not valid UTF-8 text ({e})") from e

    try:
        reader = csv.DictReader(io.StringIO(text, newline=""))
        rows: list[DataRow] = []
        for record in reader:
            row: DataRow = {}
            for key, value in record.items():
                # short rows give None, long rows put the overflow under a None key
                if key is None or value is None or value == "":
                    continue
                row[key] = _parse_number(value)
            if row:
                rows.append(row)
    except csv.Error as e:
        raise ParseError("<csv>", str(e)) from e
    return rows


def load_xlsx(buffer: bytes) -> list[DataRow]:
    """Parse the first worksheet of an .xlsx workbook."""
    try:
        wb = load_workbook(io.BytesIO(buffer), read_only=True, data_only=True)
    except (InvalidFileException, zipfile.BadZipFile, KeyError, ValueError, OSError) as e:
        raise ParseError("<xlsx>", f"not a readable workbook ({e})") from e

    try:
        ws = wb.worksheets[0]
        grid = [tuple(r) for r in ws.iter_rows(values_only=True)]
    finally:
        wb.close()
    return _rows_from_grid(grid)


def load_xls(buffer: bytes) -> list[DataRow]:
    """Parse the first sheet of a legacy .xls workbook."""
    try:
        book = xlrd.open_workbook(file_contents=buffer)
    except Exception as e:  # xlrd raises several unrelated types on corrupt input
        raise ParseError("<xls>", f"not a readable workbook ({e})") from e

    sheet = book.sheet_by_index(0)
    grid = []
    for r in range(sheet.nrows):
        values = []
        for cell in sheet.row(r):
            if cell.ctype in (xlrd.XL_CELL_EMPTY, xlrd.XL_CELL_BLANK):
                values.append(None)
            elif cell.ctype == xlrd.XL_CELL_BOOLEAN:
                values.append(bool(cell.value))
            else:
                values.append(cell.value)
        grid.append(values)
    return _rows_from_grid(grid)


def load_table(buffer: bytes, file_name: str) -> list[DataRow]:
    """Parse an uploaded table, choosing the parser by file extension.

    Args:
        buffer: Raw file content
        file_name: Original file name, only its extension is used

    Returns:
        Rows in source order

    Raises:
        ParseError: If the extension is unsupported or the content is unreadable
    """
    fmt = file_format(file_name)
    try:
        if fmt == ".csv":
            rows = load_csv(buffer)
        elif fmt == ".xlsx":
            rows = load_xlsx(buffer)
        elif fmt == ".xls":
            rows = load_xls(buffer)
        else:
            raise ParseError(
                file_name,
                f"unsupported file type. Supported: {', '.join(SUPPORTED_EXTENSIONS)}",
            )
    except ParseError as e:
        if e.file_name == file_name:
            raise
        raise ParseError(file_name, e.reason) from e

    logger.debug(f"loaded {len(rows)} rows from {file_name}")
    return rows
