"""
Keyword vocabularies used to recognize calendar structure in free-form sheets.

Kept as a frozen dataclass so tests (or regional deployments) can swap in
their own word lists without touching detection code.
"""

import re
from dataclasses import dataclass, field


@dataclass(frozen=True)
class Vocabulary:
    """Read-only word lists for classification and header detection."""

    title_keywords: tuple[str, ...] = ("calendar", "production", "schedule", "season")

    crop_commodities: tuple[str, ...] = (
        "maize", "rice", "cassava", "yam", "plantain", "cocoa", "coffee",
        "tomato", "pepper", "onion", "okra", "garden egg", "beans",
        "groundnut", "soybean", "sorghum", "cowpea", "oil palm", "coconut",
    )
    # Alternate names seen in filenames and titles
    crop_aliases: tuple[tuple[str, str], ...] = (
        ("corn", "maize"),
        ("zea mays", "maize"),
        ("paddy", "rice"),
        ("oryza", "rice"),
        ("manihot", "cassava"),
        ("tapioca", "cassava"),
        ("soya", "soybean"),
        ("peanut", "groundnut"),
    )
    poultry_commodities: tuple[str, ...] = (
        "broiler", "layer", "cockerel", "duck", "turkey", "guinea fowl", "goose",
    )
    poultry_indicators: tuple[str, ...] = ("poultry", "chicken", "bird")

    cycle_keywords: tuple[str, ...] = (
        "brooding", "brooder", "starter phase", "grower phase", "finisher phase",
        "production week", "cycle week", "day-old", "point of lay", "depopulation",
    )

    month_names: tuple[tuple[str, int], ...] = (
        ("january", 1), ("february", 2), ("march", 3), ("april", 4),
        ("may", 5), ("june", 6), ("july", 7), ("august", 8),
        ("september", 9), ("october", 10), ("november", 11), ("december", 12),
    )

    non_activity_keywords: tuple[str, ...] = (
        "calendar date", "date", "s/n", "stage of activity", "activity",
        "month", "week", "total", "summary",
    )
    activity_header_keywords: tuple[str, ...] = ("stage of activity", "activity")

    agricultural_keywords: tuple[str, ...] = (
        "site", "selection", "land", "preparation", "plant", "sow", "seed",
        "nursery", "transplant", "fertili", "urea", "soa", "npk", "weed",
        "pest", "disease", "army worm", "spray", "irrigat", "harvest",
        "storage", "drying", "threshing", "control", "management",
        "application", "brood", "vaccin", "feed", "housing", "litter",
        "debeak", "biosecurity", "chick", "egg", "market",
    )

    month_pattern: re.Pattern = field(init=False, repr=False, compare=False)
    week_pattern: re.Pattern = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        # Accept JAN, Jan., January, SEPT; reject "mar" inside "market"
        alternatives = "|".join(
            rf"{name[:3]}(?:{name[3:]}|{'t' if name == 'september' else ''})?"
            for name, _ in self.month_names
        )
        object.__setattr__(
            self,
            "month_pattern",
            re.compile(rf"\b({alternatives})\b\.?", re.IGNORECASE),
        )
        object.__setattr__(
            self,
            "week_pattern",
            re.compile(r"\bweeks?\b|\bwk\s*\d+\b|\bw\d+\b", re.IGNORECASE),
        )

    def month_number(self, text: str) -> int | None:
        """Return 1-12 for the first month name found in text."""
        match = self.month_pattern.search(text)
        if not match:
            return None
        prefix = match.group(1)[:3].lower()
        for name, number in self.month_names:
            if name.startswith(prefix):
                return number
        return None

    def month_label(self, text: str) -> str | None:
        """Return the three-letter upper-case month found in text (JAN, FEB, ...)."""
        number = self.month_number(text)
        if number is None:
            return None
        return self.month_names[number - 1][0][:3].upper()

    def is_month(self, text: str) -> bool:
        return bool(self.month_pattern.search(text))

    def is_week(self, text: str) -> bool:
        return bool(self.week_pattern.search(text))


DEFAULT_VOCABULARY = Vocabulary()

DATE_RANGE_PATTERN = re.compile(r"\d{1,2}[-/]\d{1,2}")
