"""
Spreadsheet reading: xlsx (openpyxl), xls (xlrd) and csv bytes to a cell grid
"""
import csv
import io
import logging
import os
import struct
import zipfile
from typing import Any, List, Optional, Tuple

import openpyxl
import xlrd
from openpyxl.utils.exceptions import InvalidFileException
from xlrd.compdoc import CompDocError

from .exceptions import EmptySheetError, UnreadableFileError

logger = logging.getLogger(__name__)

Grid = List[List[Any]]

_XLSX_MAGIC = b"PK\x03\x04"
_XLS_MAGIC = b"\xd0\xcf\x11\xe0"


def _is_blank(cell: Any) -> bool:
    return cell is None or (isinstance(cell, str) and not cell.strip())


def _non_empty_rows(rows) -> Grid:
    grid = []
    for row in rows:
        cells = list(row)
        if any(not _is_blank(cell) for cell in cells):
            grid.append(cells)
    return grid


def detect_format(data: bytes, filename: str) -> str:
    """'xlsx', 'xls' or 'csv' from the extension, else from the leading bytes"""
    ext = os.path.splitext(filename or "")[1].lower()
    if ext in (".xlsx", ".xlsm"):
        return "xlsx"
    if ext == ".xls":
        return "xls"
    if ext in (".csv", ".txt"):
        return "csv"
    if data.startswith(_XLSX_MAGIC):
        return "xlsx"
    if data.startswith(_XLS_MAGIC):
        return "xls"
    return "csv"


# openpyxl raises ElementTree's or lxml's ParseError, both SyntaxError subclasses
_XLSX_ERRORS = (InvalidFileException, zipfile.BadZipFile, SyntaxError, KeyError, ValueError, OSError)
_XLS_ERRORS = (xlrd.XLRDError, CompDocError, struct.error, IndexError, ValueError, OSError)


def _read_xlsx(data: bytes) -> Grid:
    try:
        wb = openpyxl.load_workbook(io.BytesIO(data), read_only=True, data_only=True)
        try:
            for ws in wb.worksheets:
                grid = _non_empty_rows(ws.iter_rows(values_only=True))
                if grid:
                    logger.debug("Using sheet '%s' (%d rows)", ws.title, len(grid))
                    return grid
        finally:
            wb.close()
    except _XLSX_ERRORS as e:
        raise UnreadableFileError(f"Could not read xlsx workbook: {e}") from e
    return []


def _read_xls(data: bytes) -> Grid:
    try:
        book = xlrd.open_workbook(file_contents=data)
        for sheet in book.sheets():
            grid = _non_empty_rows(sheet.row_values(i) for i in range(sheet.nrows))
            if grid:
                logger.debug("Using sheet '%s' (%d rows)", sheet.name, len(grid))
                return grid
    except _XLS_ERRORS as e:
        raise UnreadableFileError(f"Could not read xls workbook: {e}") from e
    return []


def decode_text(data: bytes) -> str:
    """UTF-8 (BOM tolerated), falling back to cp1252 for older exports"""
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError:
        logger.info("File is not UTF-8, decoding as cp1252")
        return data.decode("cp1252", errors="replace")


def _read_csv(text: str) -> Grid:
    try:
        return _non_empty_rows(csv.reader(io.StringIO(text)))
    except csv.Error as e:
        raise UnreadableFileError(f"Could not read csv: {e}") from e


def read_grid(data: bytes, filename: str) -> Tuple[Grid, Optional[str]]:
    """Read the first non-empty sheet.

    Returns the grid of raw cells and, for CSV sources only, the decoded
    text so the importer can try the club-column fallback parser.

    Raises:
        UnreadableFileError: bytes are not a readable workbook or csv
        EmptySheetError: no sheet has a non-empty row
    """
    if not data:
        raise EmptySheetError(f"{filename} is empty")

    kind = detect_format(data, filename)
    csv_text = None
    if kind == "xlsx":
        grid = _read_xlsx(data)
    elif kind == "xls":
        grid = _read_xls(data)
    else:
        csv_text = decode_text(data)
        grid = _read_csv(csv_text)

    if not grid:
        raise EmptySheetError(f"{filename} has no non-empty rows")
    logger.info("Read %d rows from %s (%s)", len(grid), filename, kind)
    return grid, csv_text
