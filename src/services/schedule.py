"""
Schedule Mapping Service

Crosses activities with timeline columns and decides, cell by cell, whether
an activity is active in a time slot. Fill color is the primary signal;
literal content and explicit font colors count too.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Any

from core.config import PLACEHOLDER_COLOR
from core.palettes import DEFAULT_PALETTE, Palette
from models.calendar import Activity, CalendarModel, Period, TimelineColumn
from models.sheet import CellStyle, SheetGrid, cell_text
from services.colors import resolve_cell_color
from services.timeline import month_spans

# Literal values that mean "not active"
INACTIVE_MARKERS = {"0", "false", "null"}


@dataclass
class ScheduleMapping:
    """Sparse schedule plus the dense boolean grid it was built from."""

    schedule: dict[str, list[Period]] = field(default_factory=dict)
    grid: dict[str, list[bool]] = field(default_factory=dict)
    activities: list[Activity] = field(default_factory=list)


def is_cell_active(color: str | None, value: Any, style: CellStyle | None = None) -> bool:
    """True when the cell has a color, meaningful content or an explicit font color."""
    if color is not None:
        return True
    text = cell_text(value)
    if text and text.lower() not in INACTIVE_MARKERS:
        return True
    return bool(style is not None and style.font_color)


def _json_value(value: Any) -> Any:
    if isinstance(value, date):
        return cell_text(value)
    return value


def map_schedule(
    grid: SheetGrid,
    activities: list[Activity],
    timeline: list[TimelineColumn],
    palette: Palette = DEFAULT_PALETTE,
) -> ScheduleMapping:
    """
    Evaluate every (activity, timeline column) cell of the sheet.

    Args:
        grid: Sheet values and styles
        activities: Activities with their source rows
        timeline: Time columns with their source columns
        palette: Indexed/theme lookup tables for color resolution

    Returns:
        ScheduleMapping whose schedule keeps only active periods, whose grid
        holds one boolean per column for every activity, and whose
        activities carry their display color
    """
    mapping = ScheduleMapping()

    for activity in activities:
        periods = []
        row_flags = []
        display_color = None

        for column in timeline:
            style = grid.style(activity.source_row, column.source_column)
            value = grid.value(activity.source_row, column.source_column)
            color = resolve_cell_color(style, palette)
            active = is_cell_active(color, value, style)
            row_flags.append(active)

            if not active:
                continue
            periods.append(
                Period(
                    activity_id=activity.id,
                    timeline_index=column.index,
                    active=True,
                    color=color,
                    raw_value=_json_value(value),
                )
            )
            if display_color is None and color is not None and color != PLACEHOLDER_COLOR:
                display_color = color

        mapping.schedule[activity.id] = periods
        mapping.grid[activity.id] = row_flags
        mapping.activities.append(activity.model_copy(update={"color": display_color}))

    return mapping


def grid_from_schedule(
    schedule: dict[str, list[Period]],
    activities: list[Activity],
    timeline: list[TimelineColumn],
) -> dict[str, list[bool]]:
    """Rebuild the dense boolean grid from a sparse schedule."""
    grid = {activity.id: [False] * len(timeline) for activity in activities}
    for activity_id, periods in schedule.items():
        if activity_id not in grid:
            continue
        for period in periods:
            if period.active and 0 <= period.timeline_index < len(timeline):
                grid[activity_id][period.timeline_index] = True
    return grid


def build_calendar_grid(model: CalendarModel) -> dict:
    """
    Preview-friendly rendering of a calendar: column headers, month spans and
    one row of cells per activity.
    """
    periods_by_cell = {
        (period.activity_id, period.timeline_index): period
        for periods in model.schedule.values()
        for period in periods
    }

    rows = []
    for activity in model.activities:
        cells = []
        for column in model.timeline:
            period = periods_by_cell.get((activity.id, column.index))
            cells.append(
                {
                    "timeline_index": column.index,
                    "active": period is not None,
                    "color": period.color if period is not None else None,
                }
            )
        rows.append(
            {
                "activity_id": activity.id,
                "name": activity.name,
                "color": activity.color,
                "cells": cells,
            }
        )

    return {
        "title": model.classification.title,
        "headers": [
            {"label": column.label, "month": column.month, "date_range": column.date_range}
            for column in model.timeline
        ],
        "months": month_spans(model.timeline),
        "rows": rows,
    }
