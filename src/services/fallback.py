"""
Fallback Calendar

Canonical maize calendar returned whenever a sheet cannot be read as a
calendar, so callers always receive something renderable.
"""

from core.config import FALLBACK_ACTIVITIES, FALLBACK_MONTHS, FALLBACK_WEEKS_PER_MONTH
from models.calendar import (
    Activity,
    CalendarModel,
    Classification,
    Period,
    TimelineColumn,
    build_summary,
)
from services.activities import slugify


def fallback_timeline() -> list[TimelineColumn]:
    """JAN-JUL, four weeks each, labelled WK1..WK28 with 7-day windows."""
    timeline = []
    for month in FALLBACK_MONTHS:
        for _ in range(FALLBACK_WEEKS_PER_MONTH):
            index = len(timeline)
            label = f"WK{index + 1}"
            timeline.append(
                TimelineColumn(
                    index=index,
                    label=label,
                    month=month,
                    week_label=label,
                    date_range=f"{7 * index + 1}-{7 * index + 7}",
                    source_column=index,
                )
            )
    return timeline


def synthesize_fallback(classification: Classification) -> CalendarModel:
    """
    Build the canonical fallback calendar.

    Args:
        classification: Classification of the input sheet, carried through
            unchanged so an "unknown" sheet stays visible as such

    The reason for falling back is recorded by the caller on the trace and
    the result metadata.
    """
    timeline = fallback_timeline()
    activities = []
    schedule = {}

    for row, (name, weeks, color) in enumerate(FALLBACK_ACTIVITIES):
        activity = Activity(id=slugify(name), name=name, source_row=row, color=color)
        activities.append(activity)
        schedule[activity.id] = [
            Period(activity_id=activity.id, timeline_index=week, active=True, color=color)
            for week in weeks
            if week < len(timeline)
        ]

    return CalendarModel(
        classification=classification,
        timeline=timeline,
        activities=activities,
        schedule=schedule,
        summary=build_summary(activities, timeline, schedule),
    )
