"""
Timeline Extraction Service

Locates the month/week/date header rows of a calendar sheet and turns the
columns under them into an ordered list of TimelineColumns.
"""

from typing import Any

from core.config import HEADER_SCAN_ROWS, MIN_HEADER_TOKENS
from core.vocabulary import DATE_RANGE_PATTERN, DEFAULT_VOCABULARY, Vocabulary
from models.calendar import TimelineColumn
from models.sheet import cell_text


def _find_header_row(values: list[list[Any]], predicate) -> int | None:
    """First row in the header window with enough cells matching predicate."""
    for row_idx, row in enumerate(values[:HEADER_SCAN_ROWS]):
        texts = [cell_text(value) for value in row]
        hits = sum(1 for text in texts if text and predicate(text))
        if hits >= MIN_HEADER_TOKENS:
            return row_idx
    return None


def find_header_rows(
    values: list[list[Any]],
    vocabulary: Vocabulary = DEFAULT_VOCABULARY,
) -> dict[str, int | None]:
    """Row indices of the month, week and date-range header rows (None if absent)."""
    return {
        "month": _find_header_row(values, vocabulary.is_month),
        "week": _find_header_row(values, vocabulary.is_week),
        "date": _find_header_row(values, lambda text: bool(DATE_RANGE_PATTERN.search(text))),
    }


def _row_text(values: list[list[Any]], row_idx: int | None, col: int) -> str:
    if row_idx is None or col >= len(values[row_idx]):
        return ""
    return cell_text(values[row_idx][col])


def extract_timeline(
    values: list[list[Any]],
    first_column: int = 0,
    vocabulary: Vocabulary = DEFAULT_VOCABULARY,
) -> list[TimelineColumn]:
    """
    Build the ordered time axis of a calendar sheet.

    The axis starts at the first column holding month/week vocabulary (never
    left of ``first_column``) and runs to the last non-empty header column.
    Blank cells under a merged month header inherit the current month.

    Args:
        values: Cell matrix of the sheet
        first_column: Leftmost column that may belong to the timeline
        vocabulary: Keyword lists to match against

    Returns:
        TimelineColumns with contiguous indices, or an empty list when the
        sheet has no month header row
    """
    rows = find_header_rows(values, vocabulary)
    month_row, week_row, date_row = rows["month"], rows["week"], rows["date"]
    if month_row is None:
        return []

    header_rows = [r for r in (month_row, week_row, date_row) if r is not None]
    width = max(len(values[r]) for r in header_rows)

    # Leftmost column carrying time vocabulary
    start = None
    for col in range(width):
        month_text = _row_text(values, month_row, col)
        week_text = _row_text(values, week_row, col)
        if (month_text and vocabulary.is_month(month_text)) or (
            week_text and vocabulary.is_week(week_text)
        ):
            start = col
            break
    if start is None:
        return []
    start = max(start, first_column)

    end = -1
    for r in header_rows:
        for col in range(width - 1, -1, -1):
            if _row_text(values, r, col):
                end = max(end, col)
                break
    if end < start:
        return []

    # A merged month header may begin left of the first timeline column
    current_month = None
    for col in range(start):
        month_text = _row_text(values, month_row, col)
        if month_text and vocabulary.is_month(month_text):
            current_month = vocabulary.month_label(month_text)

    timeline = []
    for col in range(start, end + 1):
        month_text = _row_text(values, month_row, col)
        if month_text and vocabulary.is_month(month_text):
            current_month = vocabulary.month_label(month_text)

        index = len(timeline)
        week_label = _row_text(values, week_row, col) or None
        date_range = _row_text(values, date_row, col) or f"{7 * index + 1}-{7 * index + 7}"

        timeline.append(
            TimelineColumn(
                index=index,
                label=week_label or f"WK{index + 1}",
                month=current_month,
                week_label=week_label,
                date_range=date_range,
                source_column=col,
            )
        )

    return timeline


def month_spans(timeline: list[TimelineColumn]) -> list[dict]:
    """
    Group consecutive timeline columns by month for a spanning header row.

    Returns:
        List of dicts with name, start_index, end_index and colspan
    """
    spans = []
    for column in timeline:
        name = column.month or ""
        if spans and spans[-1]["name"] == name:
            spans[-1]["end_index"] = column.index
            spans[-1]["colspan"] += 1
        else:
            spans.append(
                {
                    "name": name,
                    "start_index": column.index,
                    "end_index": column.index,
                    "colspan": 1,
                }
            )
    return spans
