"""Tests for reading spreadsheets into a SheetGrid."""

import pytest
import xlwt
from openpyxl.styles import Color, Font

from services.workbook import MalformedWorkbookError, kind_from_filename, read_workbook


def test_reads_values_and_padding(xlsx_builder):
    data = xlsx_builder([["a", "b", "c"], ["d"]])

    grid = read_workbook(data)

    assert grid.sheet_name == "Calendar"
    assert grid.values == [["a", "b", "c"], ["d", None, None]]
    assert grid.row_count == 2
    assert grid.column_count == 3


def test_fill_encodings_are_translated(maize_calendar_xlsx):
    grid = read_workbook(maize_calendar_xlsx)

    indexed = grid.style(4, 2)
    assert indexed.indexed == 64
    assert indexed.has_pattern

    theme = grid.style(5, 4)
    assert theme.theme == 5
    assert theme.tint == 0.0

    rgb = grid.style(6, 6)
    assert rgb.rgb.upper().endswith("FFA500")


def test_white_fill_is_kept_as_styled_cell(maize_calendar_xlsx):
    grid = read_workbook(maize_calendar_xlsx)

    style = grid.style(5, 5)
    assert style.has_pattern
    assert style.rgb.upper().endswith("FFFFFF")


def test_plain_cells_have_no_style(maize_calendar_xlsx):
    grid = read_workbook(maize_calendar_xlsx)

    # "Harvesting" label and its unfilled "X" carry only the default font
    assert grid.style(7, 1) is None
    assert grid.style(7, 7) is None
    assert grid.value(7, 7) == "X"


def test_merged_month_cells_read_as_blank(maize_calendar_xlsx):
    grid = read_workbook(maize_calendar_xlsx)

    assert grid.value(1, 2) == "JAN"
    assert grid.value(1, 3) is None
    assert grid.value(1, 4) == "FEB"


def test_explicit_font_color_is_captured(xlsx_builder):
    data = xlsx_builder(
        [["a", "b"]],
        fonts={(0, 0): Font(color="FF0000"), (0, 1): Font(color=Color(theme=1))},
    )

    grid = read_workbook(data)

    assert grid.style(0, 0).font_color is not None
    assert not grid.style(0, 0).has_pattern
    # Theme 1 is the default text color
    assert grid.style(0, 1) is None


def test_reads_named_sheet(xlsx_builder):
    data = xlsx_builder([["x"]], sheet_title="Maize")

    assert read_workbook(data, sheet_name="Maize").values == [["x"]]
    with pytest.raises(MalformedWorkbookError):
        read_workbook(data, sheet_name="Rice")


def test_reads_csv():
    data = "Activity,JAN,FEB\nPlanting,X,\n".encode("utf-8")

    grid = read_workbook(data, kind="csv")

    assert grid.values == [["Activity", "JAN", "FEB"], ["Planting", "X", None]]
    assert grid.styles == {}


def test_csv_with_bom():
    data = "\ufeffActivity,JAN\n".encode("utf-8")

    assert read_workbook(data, kind="csv").values == [["Activity", "JAN"]]


@pytest.mark.parametrize(
    "data, kind",
    [
        (b"", "xlsx"),
        (b"not a zip file", "xlsx"),
        (b"PK\x03\x04broken", "xlsx"),
        (b"\xff\xfe\x00bad", "csv"),
        (b"not an ole2 file", "xls"),
        (b"a,b", "ods"),
    ],
)
def test_malformed_input_raises(data, kind):
    with pytest.raises(MalformedWorkbookError):
        read_workbook(data, kind=kind)


def test_malformed_error_is_value_error():
    assert issubclass(MalformedWorkbookError, ValueError)


@pytest.mark.parametrize(
    "filename, expected",
    [
        ("calendar.xlsx", "xlsx"),
        ("CALENDAR.XLSM", "xlsm"),
        ("export.csv", "csv"),
        ("maize.xls", "xls"),
        ("OLD.XLS", "xls"),
        ("calendar", "xlsx"),
        ("", "xlsx"),
        (None, "xlsx"),
    ],
)
def test_kind_from_filename(filename, expected):
    assert kind_from_filename(filename) == expected


def test_reads_legacy_xls_values(maize_calendar_xls):
    grid = read_workbook(maize_calendar_xls, kind="xls")

    assert grid.sheet_name == "Maize"
    assert grid.value(0, 0) == "MAIZE PRODUCTION CALENDAR - ASHANTI"
    assert grid.value(1, 2) == "JAN"
    assert grid.value(1, 3) is None
    # Whole numbers come back as ints, not BIFF floats
    assert grid.value(4, 0) == 1
    assert isinstance(grid.value(4, 0), int)
    assert grid.value(7, 7) == "X"


def test_legacy_xls_fills_become_indexed_styles(maize_calendar_xls):
    grid = read_workbook(maize_calendar_xls, kind="xls")

    red = grid.style(4, 2)
    assert red.has_pattern
    assert red.indexed == xlwt.Style.colour_map["red"]
    assert red.rgb is None and red.theme is None

    assert grid.style(5, 5).indexed == xlwt.Style.colour_map["white"]
    assert grid.style(6, 6).indexed == xlwt.Style.colour_map["orange"]

    # Unformatted cells carry no style
    assert grid.style(7, 1) is None
    assert grid.style(7, 7) is None


def test_legacy_xls_font_color(xls_builder):
    data = xls_builder(
        [["a", "b"]],
        styles={(0, 0): xlwt.easyxf("font: colour red;")},
    )

    grid = read_workbook(data, kind="xls")

    assert grid.style(0, 0).font_color == f"indexed:{xlwt.Style.colour_map['red']}"
    assert not grid.style(0, 0).has_pattern
    assert grid.style(0, 1) is None


def test_legacy_xls_named_sheet(xls_builder):
    data = xls_builder([["x"]], sheet_title="Maize")

    assert read_workbook(data, kind="xls", sheet_name="Maize").values == [["x"]]
    with pytest.raises(MalformedWorkbookError):
        read_workbook(data, kind="xls", sheet_name="Rice")


def test_xlsx_buffer_declared_as_xls_is_malformed(maize_calendar_xlsx):
    with pytest.raises(MalformedWorkbookError):
        read_workbook(maize_calendar_xlsx, kind="xls")
