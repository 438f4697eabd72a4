"""
Configuration constants and environment setup.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# =============================================================================
# PATHS
# =============================================================================

PROJECT_ROOT = Path(__file__).parent.parent.parent
DB_PATH = Path(
    os.environ.get("CALENDAR_DB_PATH", PROJECT_ROOT / "data" / "db" / "calendar-parser.db")
)
OUTPUT_DIR = Path(os.environ.get("OUTPUT_DIR", PROJECT_ROOT / "output"))

# =============================================================================
# WORKBOOK READING
# =============================================================================

# Calendars are small hand-authored grids; anything past these bounds is noise
MAX_SCAN_ROWS = int(os.environ.get("MAX_SCAN_ROWS", "200"))
MAX_SCAN_COLUMNS = int(os.environ.get("MAX_SCAN_COLUMNS", "120"))
MAX_UPLOAD_SIZE_MB = int(os.environ.get("MAX_UPLOAD_SIZE_MB", "10"))
MAX_UPLOAD_SIZE_BYTES = MAX_UPLOAD_SIZE_MB * 1024 * 1024

SPREADSHEET_KINDS = {"xlsx", "xlsm"}
LEGACY_SPREADSHEET_KINDS = {"xls"}
CSV_KINDS = {"csv"}

# =============================================================================
# DETECTION WINDOWS
# =============================================================================

TITLE_SCAN_ROWS = 5
HEADER_SCAN_ROWS = 10
ACTIVITY_HEADER_SCAN_ROWS = 10
ACTIVITY_HEADER_SCAN_COLUMNS = 5
ACTIVITY_SCAN_ROWS = 20
MIN_HEADER_TOKENS = 3  # Cells needed before a row counts as a month/week/date header

# Used when no "activity" header cell is found
DEFAULT_ACTIVITY_COLUMN = 1
DEFAULT_ACTIVITY_HEADER_ROW = 0

# =============================================================================
# CLASSIFICATION DEFAULTS
# =============================================================================

DEFAULT_SEASONAL_COMMODITY = "maize"
DEFAULT_CYCLE_COMMODITY = "broiler"
DEFAULT_POULTRY_INDICATOR_COMMODITY = "layer"

# =============================================================================
# COLORS
# =============================================================================

WHITE = "#FFFFFF"
PLACEHOLDER_COLOR = "#CCCCCC"  # Styled cell whose fill could not be decoded

# =============================================================================
# FALLBACK CALENDAR
# =============================================================================

FALLBACK_MONTHS = ["JAN", "FEB", "MAR", "APR", "MAY", "JUN", "JUL"]
FALLBACK_WEEKS_PER_MONTH = 4

# (name, 0-based timeline indices, color)
FALLBACK_ACTIVITIES = [
    ("Site Selection", range(0, 2), "#00B0F0"),
    ("Land preparation", range(2, 6), "#BF9000"),
    ("Planting/sowing", range(8, 12), "#000000"),
    ("1st fertilizer application", range(12, 14), "#FFFF00"),
    ("First weed management & Control of fall army worm", range(14, 16), "#FF0000"),
    ("2nd Fertilizer Application (Urea or SOA)", range(16, 20), "#000000"),
    ("Second weed management & Pest and disease control", range(20, 24), "#FF0000"),
    ("Harvesting", range(24, 28), "#008000"),
    ("Post harvest handling", range(26, 28), "#800080"),
]
