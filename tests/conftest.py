"""
Pytest configuration and shared fixtures.
"""

import io
import sys
from pathlib import Path

import pytest
import xlwt
from openpyxl import Workbook
from openpyxl.styles import Color, PatternFill

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))


def build_xlsx(rows, fills=None, fonts=None, merges=None, sheet_title="Calendar") -> bytes:
    """
    Build an .xlsx byte buffer.

    ``fills`` and ``fonts`` are keyed by 0-based (row, column); ``merges`` are
    A1-style ranges.
    """
    wb = Workbook()
    ws = wb.active
    ws.title = sheet_title

    for row_idx, row in enumerate(rows, start=1):
        for col_idx, value in enumerate(row, start=1):
            if value is not None and value != "":
                ws.cell(row=row_idx, column=col_idx, value=value)

    for (row, col), fill in (fills or {}).items():
        ws.cell(row=row + 1, column=col + 1).fill = fill
    for (row, col), font in (fonts or {}).items():
        ws.cell(row=row + 1, column=col + 1).font = font
    for cell_range in merges or []:
        ws.merge_cells(cell_range)

    buffer = io.BytesIO()
    wb.save(buffer)
    return buffer.getvalue()


def build_xls(rows, styles=None, sheet_title="Calendar") -> bytes:
    """
    Build a legacy .xls byte buffer.

    ``styles`` maps 0-based (row, column) to an ``xlwt.easyxf`` style.
    """
    styles = styles or {}
    wb = xlwt.Workbook()
    ws = wb.add_sheet(sheet_title)

    cells = {
        (row_idx, col_idx): value
        for row_idx, row in enumerate(rows)
        for col_idx, value in enumerate(row)
        if value is not None and value != ""
    }
    for row, col in sorted(set(cells) | set(styles)):
        if (row, col) in styles:
            ws.write(row, col, cells.get((row, col)), styles[(row, col)])
        else:
            ws.write(row, col, cells[(row, col)])

    buffer = io.BytesIO()
    wb.save(buffer)
    return buffer.getvalue()


def pattern(colour: str) -> xlwt.XFStyle:
    """Solid .xls fill in one of xlwt's named palette colours."""
    return xlwt.easyxf(f"pattern: pattern solid, fore_colour {colour};")


def solid(color) -> PatternFill:
    """Solid fill from an RGB string or an openpyxl Color."""
    return PatternFill(patternType="solid", fgColor=color)


@pytest.fixture
def xlsx_builder():
    """The workbook builder, for tests that lay out their own sheet."""
    return build_xlsx


@pytest.fixture
def xls_builder():
    """The legacy .xls builder."""
    return build_xls


@pytest.fixture
def solid_fill():
    """Solid PatternFill factory."""
    return solid


@pytest.fixture
def scenario_a_xlsx():
    """Month row, week row and one activity with a single orange cell."""
    rows = [
        ["JAN", "JAN", "FEB", "FEB"],
        ["WK1", "WK2", "WK3", "WK4"],
        ["", "Land preparation", "", "X", ""],
    ]
    return build_xlsx(rows, fills={(2, 3): solid("FFA500")})


@pytest.fixture
def unrecognized_xlsx():
    """Sheet with no title, no time headers and no commodity."""
    rows = [
        ["Name", "Value"],
        ["foo", 1],
        ["bar", 2],
    ]
    return build_xlsx(rows)


@pytest.fixture
def maize_calendar_xlsx():
    """
    Seasonal maize calendar with merged month headers and fills in all three
    color encodings.

    Rows (0-based):
        0 title
        1 S/N | Stage of Activity | JAN (merged) | FEB (merged) | MAR (merged)
        2 week labels WK1..WK6
        3 calendar dates
        4 Site Selection              indexed 64 in JAN WK1-WK2
        5 Land preparation            theme 5 in FEB WK3, white in FEB WK4
        6 2nd Fertilizer Application  orange RGB in MAR WK5-WK6
        7 Harvesting                  "X" without fill in MAR WK6
        8 bare serial "5"
    """
    rows = [
        ["MAIZE PRODUCTION CALENDAR - ASHANTI"],
        ["S/N", "Stage of Activity", "JAN", None, "FEB", None, "MAR", None],
        [None, None, "WK1", "WK2", "WK3", "WK4", "WK5", "WK6"],
        [None, "Calendar Date", "1-7", "8-14", "1-7", "8-14", "1-7", "8-14"],
        [1, "Site Selection"],
        [2, "Land preparation"],
        [3, "2nd Fertilizer Application"],
        [4, "Harvesting", None, None, None, None, None, "X"],
        ["5", "5"],
    ]
    fills = {
        (4, 2): solid(Color(indexed=64)),
        (4, 3): solid(Color(indexed=64)),
        (5, 4): solid(Color(theme=5)),
        (5, 5): solid("FFFFFF"),
        (6, 6): solid("FFA500"),
        (6, 7): solid("FFA500"),
    }
    return build_xlsx(rows, fills=fills, merges=["C2:D2", "E2:F2", "G2:H2"])


@pytest.fixture
def maize_calendar_xls():
    """
    The maize calendar saved as a legacy .xls workbook.

    Fills are palette indexes: red in JAN WK1-WK2, light green and white in
    FEB, orange in MAR WK5-WK6. Month headers are left unmerged.
    """
    rows = [
        ["MAIZE PRODUCTION CALENDAR - ASHANTI"],
        ["S/N", "Stage of Activity", "JAN", None, "FEB", None, "MAR", None],
        [None, None, "WK1", "WK2", "WK3", "WK4", "WK5", "WK6"],
        [None, "Calendar Date", "1-7", "8-14", "1-7", "8-14", "1-7", "8-14"],
        [1, "Site Selection"],
        [2, "Land preparation"],
        [3, "2nd Fertilizer Application"],
        [4, "Harvesting", None, None, None, None, None, "X"],
        ["5", "5"],
    ]
    styles = {
        (4, 2): pattern("red"),
        (4, 3): pattern("red"),
        (5, 4): pattern("light_green"),
        (5, 5): pattern("white"),
        (6, 6): pattern("orange"),
        (6, 7): pattern("orange"),
    }
    return build_xls(rows, styles=styles, sheet_title="Maize")
