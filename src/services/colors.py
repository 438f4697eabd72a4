"""
Cell Color Resolution

Turns a CellStyle into the effective ``#RRGGBB`` fill color of a cell, or
None when the cell has no meaningful fill. White is the spreadsheet
convention for "no fill" in every encoding.
"""

import colorsys
import re

from core.config import PLACEHOLDER_COLOR, WHITE
from core.palettes import DEFAULT_PALETTE, Palette
from models.sheet import CellStyle

HEX_PATTERN = re.compile(r"^[0-9A-F]{6}$")


def normalize_rgb(value: str) -> str | None:
    """
    Normalize an RGB/ARGB string to ``#RRGGBB``.

    Accepts an optional leading ``#`` and an 8-digit ARGB form (alpha is
    dropped). Returns None for anything that is not a hex color.
    """
    if not isinstance(value, str):
        return None
    text = value.strip().lstrip("#").upper()
    if len(text) == 8:
        text = text[2:]
    if not HEX_PATTERN.match(text):
        return None
    return f"#{text}"


def apply_tint(color: str, tint: float) -> str:
    """Apply an Excel tint (-1.0 darkest .. 1.0 lightest) to a ``#RRGGBB`` color."""
    if not tint:
        return color
    r, g, b = (int(color[i:i + 2], 16) / 255 for i in (1, 3, 5))
    h, l, s = colorsys.rgb_to_hls(r, g, b)
    if tint < 0:
        l = l * (1 + tint)
    else:
        l = l * (1 - tint) + tint
    l = min(max(l, 0.0), 1.0)
    r, g, b = colorsys.hls_to_rgb(h, l, s)
    return "#" + "".join(f"{round(channel * 255):02X}" for channel in (r, g, b))


def _white_to_none(color: str) -> str | None:
    return None if color == WHITE else color


def resolve_cell_color(
    style: CellStyle | None,
    palette: Palette = DEFAULT_PALETTE,
) -> str | None:
    """
    Resolve the effective fill color of a cell.

    Precedence is direct RGB, then the indexed palette, then the theme
    palette. A style that carries a color encoding (or a fill pattern) that
    cannot be decoded resolves to the placeholder color, so styled cells are
    never silently dropped.

    Args:
        style: Fill descriptor read from the workbook (None for unstyled cells)
        palette: Indexed/theme lookup tables

    Returns:
        ``#RRGGBB``, the placeholder color, or None
    """
    if style is None:
        return None

    if style.rgb is not None:
        color = normalize_rgb(style.rgb)
        if color is not None:
            return _white_to_none(color)
        return PLACEHOLDER_COLOR

    if style.indexed is not None:
        color = palette.indexed.get(style.indexed)
        if color is not None:
            return _white_to_none(color)
        return PLACEHOLDER_COLOR

    if style.theme is not None:
        color = palette.theme.get(style.theme)
        if color is not None:
            return _white_to_none(apply_tint(color, style.tint))
        return PLACEHOLDER_COLOR

    if style.has_pattern:
        return PLACEHOLDER_COLOR

    return None
