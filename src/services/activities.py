"""
Activity Extraction Service

Finds the activity-label column of a calendar sheet and reads the ordered
list of production stages below its header, skipping row serials and
header text.
"""

import re
from dataclasses import dataclass, field
from typing import Any

from core.config import (
    ACTIVITY_HEADER_SCAN_COLUMNS,
    ACTIVITY_HEADER_SCAN_ROWS,
    ACTIVITY_SCAN_ROWS,
    DEFAULT_ACTIVITY_COLUMN,
    DEFAULT_ACTIVITY_HEADER_ROW,
)
from core.vocabulary import DEFAULT_VOCABULARY, Vocabulary
from models.calendar import Activity
from models.sheet import cell_text

# Row serials: "3", "4.", "2)", "1st", "III", "iv."
NUMBER_PATTERN = re.compile(r"^\d+[.)]?$")
ORDINAL_PATTERN = re.compile(r"^\d+(st|nd|rd|th)[.)]?$", re.IGNORECASE)
ROMAN_PATTERN = re.compile(r"^(?=[ivxlc])(xc|xl|l?x{0,3})(ix|iv|v?i{0,3})[.)]?$", re.IGNORECASE)

# Label led by a serial: "1. Land preparation", "2)abc", "iv. Harvest"
SERIAL_PREFIX_PATTERN = re.compile(
    r"^(\d+(st|nd|rd|th)?[.)]?|(?=[ivxlc])(xc|xl|l?x{0,3})(ix|iv|v?i{0,3})[.)])\s*\w",
    re.IGNORECASE,
)

# Legitimately numbered stage: "1st weeding", "2nd Fertilizer Application"
NUMBERED_STAGE_PATTERN = re.compile(r"^\d+(st|nd|rd|th)\s+\w+", re.IGNORECASE)

BARE_WEEK_PATTERN = re.compile(r"^(weeks?|wk|w)\s*\d*[.)]?$", re.IGNORECASE)


@dataclass
class ActivityExtraction:
    """Where the activity labels were found and what was read from them."""

    activity_column: int
    header_row: int
    header_found: bool = False
    activities: list[Activity] = field(default_factory=list)


# =============================================================================
# LABEL FILTERS
# =============================================================================


def is_serial_label(text: str) -> bool:
    """True for bare row serials: pure numbers, ordinals and roman numerals."""
    text = (text or "").strip()
    if not text:
        return False
    return bool(
        NUMBER_PATTERN.match(text) or ORDINAL_PATTERN.match(text) or ROMAN_PATTERN.match(text)
    )


def _has_agricultural_keyword(text: str, vocabulary: Vocabulary) -> bool:
    lowered = text.lower()
    return any(keyword in lowered for keyword in vocabulary.agricultural_keywords)


def _is_header_text(text: str, vocabulary: Vocabulary) -> bool:
    lowered = text.lower().rstrip(":.").strip()
    if lowered in vocabulary.non_activity_keywords:
        return True
    if vocabulary.month_pattern.fullmatch(text):
        return True
    return bool(BARE_WEEK_PATTERN.match(text))


def is_activity_label(text: str, vocabulary: Vocabulary = DEFAULT_VOCABULARY) -> bool:
    """
    Decide whether a label cell names a production stage.

    Header text and bare month/week tokens are rejected first. Bare serials
    and serial-led labels are then rejected unless the label is a numbered
    stage, contains an agricultural keyword or is a multi-word phrase.
    """
    text = (text or "").strip()
    if not text or _is_header_text(text, vocabulary):
        return False

    if is_serial_label(text) or SERIAL_PREFIX_PATTERN.match(text):
        keeps = (
            NUMBERED_STAGE_PATTERN.match(text)
            or _has_agricultural_keyword(text, vocabulary)
            or " " in text
        )
        return bool(keeps)

    return True


# =============================================================================
# EXTRACTION
# =============================================================================


def slugify(name: str) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")
    return slug or "activity"


def find_activity_header(
    values: list[list[Any]],
    vocabulary: Vocabulary = DEFAULT_VOCABULARY,
) -> tuple[int, int] | None:
    """(row, column) of the first "activity" header cell, or None."""
    for row_idx, row in enumerate(values[:ACTIVITY_HEADER_SCAN_ROWS]):
        for col_idx, value in enumerate(row[:ACTIVITY_HEADER_SCAN_COLUMNS]):
            lowered = cell_text(value).lower()
            if lowered and any(k in lowered for k in vocabulary.activity_header_keywords):
                return row_idx, col_idx
    return None


def extract_activities(
    values: list[list[Any]],
    vocabulary: Vocabulary = DEFAULT_VOCABULARY,
) -> ActivityExtraction:
    """
    Read the ordered activities of a calendar sheet.

    Args:
        values: Cell matrix of the sheet
        vocabulary: Keyword lists to match against

    Returns:
        ActivityExtraction with the label column, header row and activities
        in row order (ids are unique slugs of the names)
    """
    header = find_activity_header(values, vocabulary)
    if header is not None:
        extraction = ActivityExtraction(
            activity_column=header[1], header_row=header[0], header_found=True
        )
    else:
        extraction = ActivityExtraction(
            activity_column=DEFAULT_ACTIVITY_COLUMN,
            header_row=DEFAULT_ACTIVITY_HEADER_ROW,
        )

    used_ids: set[str] = set()
    first_row = extraction.header_row + 1
    for row_idx in range(first_row, min(first_row + ACTIVITY_SCAN_ROWS, len(values))):
        row = values[row_idx]
        if extraction.activity_column >= len(row):
            continue
        name = cell_text(row[extraction.activity_column])
        if not is_activity_label(name, vocabulary):
            continue

        slug = slugify(name)
        activity_id = slug
        suffix = 2
        while activity_id in used_ids:
            activity_id = f"{slug}-{suffix}"
            suffix += 1
        used_ids.add(activity_id)

        extraction.activities.append(
            Activity(id=activity_id, name=name, source_row=row_idx)
        )

    return extraction
