"""
In-memory representation of a worksheet: literal values plus fill styling.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any


@dataclass(frozen=True)
class CellStyle:
    """Fill descriptor for one cell.

    At most one of ``rgb``, ``indexed`` and ``theme`` is set. ``has_pattern``
    records that the cell carries a fill pattern even when no color could be
    read from it.
    """

    rgb: str | None = None
    indexed: int | None = None
    theme: int | None = None
    tint: float = 0.0
    has_pattern: bool = False
    font_color: str | None = None

    def __post_init__(self):
        encodings = [v for v in (self.rgb, self.indexed, self.theme) if v is not None]
        if len(encodings) > 1:
            raise ValueError("CellStyle accepts only one color encoding")


@dataclass(frozen=True)
class SheetGrid:
    """Cell matrix (0-indexed rows/columns) with a sparse style lookup."""

    values: list[list[Any]]
    styles: dict[tuple[int, int], CellStyle] = field(default_factory=dict)
    sheet_name: str = ""

    @property
    def row_count(self) -> int:
        return len(self.values)

    @property
    def column_count(self) -> int:
        return max((len(row) for row in self.values), default=0)

    def value(self, row: int, col: int) -> Any:
        if 0 <= row < len(self.values) and 0 <= col < len(self.values[row]):
            return self.values[row][col]
        return None

    def style(self, row: int, col: int) -> CellStyle | None:
        return self.styles.get((row, col))


def cell_text(value: Any) -> str:
    """Render a cell value as stripped text ('' for empty cells)."""
    if value is None:
        return ""
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()
