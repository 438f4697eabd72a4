"""
Color lookup tables for the three spreadsheet fill encodings.

Indices 64-79 of the indexed table are repurposed by the calendar authors for
the canonical activity colors; everything else follows the standard palette.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

# Standard palette (0-63)
_STANDARD_INDEXED = [
    "#000000", "#FFFFFF", "#FF0000", "#00FF00", "#0000FF", "#FFFF00", "#FF00FF", "#00FFFF",
    "#000000", "#FFFFFF", "#800000", "#008000", "#000080", "#808000", "#800080", "#008080",
    "#C0C0C0", "#808080", "#9999FF", "#993366", "#FFFFCC", "#CCFFFF", "#660066", "#FF8080",
    "#0066CC", "#CCCCFF", "#000080", "#FF00FF", "#FFFF00", "#00FFFF", "#800080", "#800000",
    "#008080", "#0000FF", "#00CCFF", "#CCFFFF", "#CCFFCC", "#FFFF99", "#99CCFF", "#FF99CC",
    "#CC99FF", "#FFCC99", "#3366FF", "#33CCCC", "#99CC00", "#FFCC00", "#FF9900", "#FF6600",
    "#666699", "#969696", "#003366", "#339966", "#003300", "#333300", "#993300", "#993366",
    "#333399", "#333333", "#3F3F3F", "#808080", "#FF0000", "#FF6600", "#FFCC00", "#FFFF00",
]

# Activity colors used by the calendar templates (64-79)
_ACTIVITY_INDEXED = [
    "#00B0F0",  # 64 site selection
    "#BF9000",  # 65 land preparation
    "#000000",  # 66 planting/sowing
    "#FFFF00",  # 67 1st fertilizer application
    "#FF0000",  # 68 weed management
    "#000000",  # 69 2nd fertilizer application
    "#FF0000",  # 70 pest and disease control
    "#008000",  # 71 harvesting
    "#800080",  # 72 post-harvest handling
    "#000000", "#00B0F0", "#BF9000", "#000000", "#000000", "#000000", "#000000",
]

# Extended range (80-127)
_EXTENDED_INDEXED = [
    "#FFFFFF", "#000000", "#FF0000", "#00FF00", "#0000FF", "#FFFF00", "#FF00FF", "#00FFFF",
] + ["#000000"] * 40

INDEXED_COLORS = dict(enumerate(_STANDARD_INDEXED + _ACTIVITY_INDEXED + _EXTENDED_INDEXED))

THEME_COLORS = {
    0: "#FFFFFF",
    1: "#000000",
    2: "#E7E6E6",
    3: "#44546A",
    4: "#5B9BD5",
    5: "#70AD47",
    6: "#FFC000",
    7: "#F79646",
    8: "#C5504B",
    9: "#9F4F96",
}


@dataclass(frozen=True)
class Palette:
    """Immutable indexed/theme lookup pair."""

    indexed: Mapping[int, str] = field(default_factory=lambda: MappingProxyType(INDEXED_COLORS))
    theme: Mapping[int, str] = field(default_factory=lambda: MappingProxyType(THEME_COLORS))

    def __post_init__(self):
        if not isinstance(self.indexed, MappingProxyType):
            object.__setattr__(self, "indexed", MappingProxyType(dict(self.indexed)))
        if not isinstance(self.theme, MappingProxyType):
            object.__setattr__(self, "theme", MappingProxyType(dict(self.theme)))


DEFAULT_PALETTE = Palette()
