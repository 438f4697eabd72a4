"""
Calendar Classification Service

Decides whether a sheet is a seasonal crop calendar or a relative-week
production cycle (poultry), and which commodity it covers, from the title,
the filename and the header rows.
"""

from typing import Any

from core.config import (
    DEFAULT_CYCLE_COMMODITY,
    DEFAULT_POULTRY_INDICATOR_COMMODITY,
    DEFAULT_SEASONAL_COMMODITY,
    HEADER_SCAN_ROWS,
    TITLE_SCAN_ROWS,
)
from core.vocabulary import DATE_RANGE_PATTERN, DEFAULT_VOCABULARY, Vocabulary
from models.calendar import Classification, HeaderEvidence
from models.sheet import cell_text

# Decision table rule names (surfaced as classificationDecision)
RULE_CROP_WITH_DATES = "crop_commodity_with_dates"
RULE_POULTRY_WITH_WEEKS = "poultry_commodity_with_weeks"
RULE_RELATIVE_WEEKS = "relative_weeks_default_commodity"
RULE_ABSOLUTE_DATES = "absolute_dates_default_commodity"
RULE_UNKNOWN = "unrecognized"


# =============================================================================
# SIGNALS
# =============================================================================


def find_title(values: list[list[Any]], vocabulary: Vocabulary = DEFAULT_VOCABULARY) -> str:
    """First cell in the top rows that reads like a calendar title."""
    for row in values[:TITLE_SCAN_ROWS]:
        for value in row:
            text = cell_text(value)
            lowered = text.lower()
            if text and any(keyword in lowered for keyword in vocabulary.title_keywords):
                return text
    return ""


def detect_commodity(
    text: str,
    vocabulary: Vocabulary = DEFAULT_VOCABULARY,
) -> tuple[str, str, bool]:
    """
    Find the commodity named in text.

    Returns:
        (commodity, group, defaulted) where group is "crop", "poultry" or ""
        when no commodity is named. ``defaulted`` is True when only a generic
        poultry word was found and the commodity is the configured default.
    """
    lowered = text.lower()

    for crop in vocabulary.crop_commodities:
        if crop in lowered:
            return crop, "crop", False
    for alias, crop in vocabulary.crop_aliases:
        if alias in lowered:
            return crop, "crop", False

    for poultry in vocabulary.poultry_commodities:
        if poultry in lowered:
            return poultry, "poultry", False
    for indicator in vocabulary.poultry_indicators:
        if indicator in lowered:
            return DEFAULT_POULTRY_INDICATOR_COMMODITY, "poultry", True

    return "", "", False


def collect_evidence(
    values: list[list[Any]],
    vocabulary: Vocabulary = DEFAULT_VOCABULARY,
) -> HeaderEvidence:
    """Count month, week, date-range and cycle-keyword cells in the header rows."""
    evidence = HeaderEvidence()
    for row in values[:HEADER_SCAN_ROWS]:
        for value in row:
            text = cell_text(value)
            if not text:
                continue
            if vocabulary.is_month(text):
                evidence.month_cells += 1
            if vocabulary.is_week(text):
                evidence.week_cells += 1
            if DATE_RANGE_PATTERN.search(text):
                evidence.date_range_cells += 1
            lowered = text.lower()
            evidence.cycle_keyword_hits += sum(
                1 for keyword in vocabulary.cycle_keywords if keyword in lowered
            )
    return evidence


# =============================================================================
# DECISION
# =============================================================================


def classify_calendar(
    values: list[list[Any]],
    filename: str = "",
    vocabulary: Vocabulary = DEFAULT_VOCABULARY,
) -> Classification:
    """
    Classify a sheet as seasonal, cycle or unknown.

    Rules are evaluated in order and the first match wins:

    1. crop commodity with month or date headers -> seasonal
    2. poultry commodity with week headers or cycle keywords -> cycle
    3. week headers or cycle keywords only -> cycle, default commodity
    4. month or date headers only -> seasonal, default commodity
    5. anything else -> unknown

    Args:
        values: Cell matrix of the sheet
        filename: Upload filename, searched for commodity names too
        vocabulary: Keyword lists to match against
    """
    title = find_title(values, vocabulary)
    commodity, group, defaulted = detect_commodity(f"{title} {filename or ''}", vocabulary)
    evidence = collect_evidence(values, vocabulary)

    absolute = evidence.has_months or evidence.has_date_ranges
    relative = evidence.has_weeks or evidence.has_cycle_keywords
    display_title = title or filename or ""

    if group == "crop" and absolute:
        return Classification(
            type="seasonal",
            commodity=commodity,
            title=display_title,
            decision=RULE_CROP_WITH_DATES,
            evidence=evidence,
        )

    if group == "poultry" and relative:
        return Classification(
            type="cycle",
            commodity=commodity,
            title=display_title,
            decision=RULE_POULTRY_WITH_WEEKS,
            commodity_defaulted=defaulted,
            evidence=evidence,
        )

    if relative and not absolute:
        return Classification(
            type="cycle",
            commodity=DEFAULT_CYCLE_COMMODITY,
            title=display_title,
            decision=RULE_RELATIVE_WEEKS,
            commodity_defaulted=True,
            evidence=evidence,
        )

    if absolute:
        return Classification(
            type="seasonal",
            commodity=DEFAULT_SEASONAL_COMMODITY,
            title=display_title,
            decision=RULE_ABSOLUTE_DATES,
            commodity_defaulted=True,
            evidence=evidence,
        )

    return Classification(
        type="unknown",
        commodity=commodity,
        title=display_title,
        decision=RULE_UNKNOWN,
        commodity_defaulted=defaulted,
        evidence=evidence,
    )
