"""
Workbook Reading Service

Loads an uploaded spreadsheet (xlsx/xlsm via openpyxl, legacy xls via xlrd,
or CSV) into a ``SheetGrid``: a 0-indexed matrix of literal cell values plus
the fill styling of every cell that carries one.
"""

import csv
import io
import zipfile
from pathlib import Path

import xlrd
from openpyxl import load_workbook
from openpyxl.styles.colors import Color
from openpyxl.utils.exceptions import InvalidFileException
from xlrd.compdoc import CompDocError
from xlrd.xldate import XLDateError

from core.config import (
    CSV_KINDS,
    LEGACY_SPREADSHEET_KINDS,
    MAX_SCAN_COLUMNS,
    MAX_SCAN_ROWS,
    SPREADSHEET_KINDS,
)
from models.sheet import CellStyle, SheetGrid

# Font colors that every default workbook style carries
DEFAULT_FONT_RGB = {"FF000000", "00000000", "000000"}
DEFAULT_FONT_THEMES = {1}
# BIFF colour indexes for black, system window text and "automatic"
DEFAULT_FONT_INDEXES = {8, 64, 0x7FFF}

READABLE_KINDS = SPREADSHEET_KINDS | LEGACY_SPREADSHEET_KINDS | CSV_KINDS


class MalformedWorkbookError(ValueError):
    """The buffer cannot be decoded as the declared file format."""


# =============================================================================
# FORMAT DETECTION
# =============================================================================


def kind_from_filename(filename: str | None) -> str:
    """Derive the reader kind from an upload's extension (defaults to xlsx)."""
    if not filename:
        return "xlsx"
    suffix = Path(filename).suffix.lower().lstrip(".")
    if suffix in READABLE_KINDS:
        return suffix
    return "xlsx"


# =============================================================================
# STYLE TRANSLATION
# =============================================================================


def _color_encoding(color: Color | None, unset_is_none: bool = True) -> dict | None:
    """Translate an openpyxl Color into a single CellStyle encoding.

    openpyxl exposes the active encoding through ``color.type``; reading the
    other attributes returns descriptor objects rather than values. openpyxl
    stores both "unset" and six-digit black as ``00000000``.
    """
    if color is None:
        return None
    color_type = getattr(color, "type", None)
    tint = float(getattr(color, "tint", 0.0) or 0.0)

    if color_type == "rgb":
        rgb = color.rgb
        if not isinstance(rgb, str):
            return None
        if rgb == "00000000" and unset_is_none:
            return None
        return {"rgb": rgb, "tint": tint}
    if color_type == "indexed":
        return {"indexed": int(color.indexed), "tint": tint}
    if color_type == "theme":
        return {"theme": int(color.theme), "tint": tint}
    return None


def _font_color(cell) -> str | None:
    """Explicit, non-default font color of a cell as a short descriptor."""
    font = cell.font
    color = getattr(font, "color", None) if font is not None else None
    encoding = _color_encoding(color)
    if not encoding:
        return None
    if "rgb" in encoding:
        if encoding["rgb"].upper() in DEFAULT_FONT_RGB:
            return None
        return encoding["rgb"].upper()
    if "theme" in encoding:
        if encoding["theme"] in DEFAULT_FONT_THEMES and not encoding["tint"]:
            return None
        return f"theme:{encoding['theme']}"
    return f"indexed:{encoding['indexed']}"


def extract_cell_style(cell) -> CellStyle | None:
    """Build the CellStyle for an openpyxl cell, or None for unstyled cells."""
    fill = cell.fill
    has_pattern = bool(fill is not None and getattr(fill, "fill_type", None))
    encoding = None

    if has_pattern:
        # Solid fills store the visible color as the pattern foreground
        encoding = _color_encoding(fill.fgColor, unset_is_none=False) or _color_encoding(
            fill.bgColor
        )

    font_color = _font_color(cell)

    if not has_pattern and font_color is None:
        return None

    return CellStyle(
        has_pattern=has_pattern,
        font_color=font_color,
        **(encoding or {}),
    )


def extract_xls_cell_style(book: xlrd.book.Book, xf_index: int) -> CellStyle | None:
    """Build the CellStyle for a BIFF cell format, or None for unstyled cells.

    Legacy workbooks only carry palette indexes; a solid pattern's visible
    color is its pattern color.
    """
    xf = book.xf_list[xf_index]
    background = xf.background
    has_pattern = bool(background.fill_pattern)

    font_color = None
    if xf.font_index < len(book.font_list):
        colour_index = book.font_list[xf.font_index].colour_index
        if colour_index not in DEFAULT_FONT_INDEXES:
            font_color = f"indexed:{colour_index}"

    if not has_pattern and font_color is None:
        return None

    return CellStyle(
        indexed=background.pattern_colour_index if has_pattern else None,
        has_pattern=has_pattern,
        font_color=font_color,
    )


# =============================================================================
# READERS
# =============================================================================


def _read_spreadsheet(data: bytes, sheet_name: str | None) -> SheetGrid:
    try:
        wb = load_workbook(io.BytesIO(data), data_only=True)
    except (zipfile.BadZipFile, InvalidFileException, KeyError, OSError, ValueError) as e:
        raise MalformedWorkbookError(f"Could not read spreadsheet: {e}") from e

    if not wb.worksheets:
        raise MalformedWorkbookError("Workbook contains no readable sheets")

    if sheet_name is not None:
        matches = [ws for ws in wb.worksheets if ws.title == sheet_name]
        if not matches:
            raise MalformedWorkbookError(f"Sheet '{sheet_name}' not found in workbook")
        ws = matches[0]
    else:
        ws = wb.worksheets[0]

    max_row = min(ws.max_row, MAX_SCAN_ROWS)
    max_col = min(ws.max_column, MAX_SCAN_COLUMNS)

    values = []
    styles = {}
    for row_idx, row in enumerate(
        ws.iter_rows(min_row=1, max_row=max_row, max_col=max_col)
    ):
        row_values = []
        for col_idx, cell in enumerate(row):
            row_values.append(cell.value)
            style = extract_cell_style(cell)
            if style is not None:
                styles[(row_idx, col_idx)] = style
        values.append(row_values)

    return SheetGrid(values=_pad(values), styles=styles, sheet_name=ws.title)


def _xls_value(cell, datemode: int):
    """Convert an xlrd cell to the value openpyxl would report for it."""
    if cell.ctype in (xlrd.XL_CELL_EMPTY, xlrd.XL_CELL_BLANK, xlrd.XL_CELL_ERROR):
        return None
    if cell.ctype == xlrd.XL_CELL_TEXT:
        return cell.value or None
    if cell.ctype == xlrd.XL_CELL_NUMBER:
        # BIFF stores every number as a float
        return int(cell.value) if float(cell.value).is_integer() else cell.value
    if cell.ctype == xlrd.XL_CELL_DATE:
        try:
            return xlrd.xldate_as_datetime(cell.value, datemode)
        except XLDateError:
            return cell.value
    if cell.ctype == xlrd.XL_CELL_BOOLEAN:
        return bool(cell.value)
    return cell.value


def _read_xls(data: bytes, sheet_name: str | None) -> SheetGrid:
    try:
        book = xlrd.open_workbook(file_contents=data, formatting_info=True)
    except (xlrd.XLRDError, CompDocError, EOFError, OSError, ValueError) as e:
        raise MalformedWorkbookError(f"Could not read spreadsheet: {e}") from e

    if book.nsheets == 0:
        raise MalformedWorkbookError("Workbook contains no readable sheets")

    if sheet_name is not None:
        if sheet_name not in book.sheet_names():
            raise MalformedWorkbookError(f"Sheet '{sheet_name}' not found in workbook")
        sheet = book.sheet_by_name(sheet_name)
    else:
        sheet = book.sheet_by_index(0)

    max_row = min(sheet.nrows, MAX_SCAN_ROWS)
    max_col = min(sheet.ncols, MAX_SCAN_COLUMNS)

    values = []
    styles = {}
    for row_idx in range(max_row):
        row_values = []
        for col_idx in range(max_col):
            row_values.append(_xls_value(sheet.cell(row_idx, col_idx), book.datemode))
            style = extract_xls_cell_style(book, sheet.cell_xf_index(row_idx, col_idx))
            if style is not None:
                styles[(row_idx, col_idx)] = style
        values.append(row_values)

    return SheetGrid(values=_pad(values), styles=styles, sheet_name=sheet.name)


def _read_csv(data: bytes) -> SheetGrid:
    try:
        text = data.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise MalformedWorkbookError(f"CSV file is not valid UTF-8: {e}") from e

    if "\x00" in text:
        raise MalformedWorkbookError("CSV file contains binary data")

    try:
        rows = list(csv.reader(io.StringIO(text)))
    except csv.Error as e:
        raise MalformedWorkbookError(f"Could not read CSV: {e}") from e

    values = [
        [cell if cell.strip() else None for cell in row[:MAX_SCAN_COLUMNS]]
        for row in rows[:MAX_SCAN_ROWS]
    ]
    return SheetGrid(values=_pad(values), styles={}, sheet_name="csv")


def _pad(values: list[list]) -> list[list]:
    """Pad rows to a common width so column lookups never go out of range."""
    width = max((len(row) for row in values), default=0)
    return [row + [None] * (width - len(row)) for row in values]


def read_workbook(
    data: bytes,
    kind: str = "xlsx",
    sheet_name: str | None = None,
) -> SheetGrid:
    """
    Load a spreadsheet byte buffer into a SheetGrid.

    Args:
        data: Raw file bytes
        kind: Declared format ("xlsx", "xlsm", "xls" or "csv")
        sheet_name: Optional sheet to read instead of the first one

    Raises:
        MalformedWorkbookError: The buffer cannot be decoded as ``kind``
    """
    if not data:
        raise MalformedWorkbookError("File is empty")

    kind = (kind or "xlsx").lower().lstrip(".")
    if kind in SPREADSHEET_KINDS:
        return _read_spreadsheet(data, sheet_name)
    if kind in LEGACY_SPREADSHEET_KINDS:
        return _read_xls(data, sheet_name)
    if kind in CSV_KINDS:
        return _read_csv(data)
    raise MalformedWorkbookError(f"Unsupported file kind '{kind}'")
