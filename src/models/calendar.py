"""
Pydantic models for the normalized calendar produced by a parse.

Python code uses snake_case; JSON output uses the camelCase names consumed by
the preview UI (``model_dump(by_alias=True)``).
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from core.config import MIN_HEADER_TOKENS

CalendarType = Literal["seasonal", "cycle", "unknown"]


class CamelModel(BaseModel):
    """Base model serializing with camelCase aliases."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class HeaderEvidence(CamelModel):
    """Counts of header signals found in the top rows."""

    month_cells: int = 0
    week_cells: int = 0
    date_range_cells: int = 0
    cycle_keyword_hits: int = 0

    @property
    def has_months(self) -> bool:
        return self.month_cells >= MIN_HEADER_TOKENS

    @property
    def has_weeks(self) -> bool:
        return self.week_cells >= MIN_HEADER_TOKENS

    @property
    def has_date_ranges(self) -> bool:
        return self.date_range_cells >= MIN_HEADER_TOKENS

    @property
    def has_cycle_keywords(self) -> bool:
        return self.cycle_keyword_hits > 0


class Classification(CamelModel):
    """Calendar kind decision."""

    type: CalendarType
    commodity: str = ""
    title: str = ""
    decision: str = ""  # Which decision-table rule fired
    commodity_defaulted: bool = False
    evidence: HeaderEvidence = Field(default_factory=HeaderEvidence)


class TimelineColumn(CamelModel):
    """One time slot of the calendar axis."""

    index: int
    label: str
    month: str | None = None
    week_label: str | None = None
    date_range: str | None = None
    source_column: int


class Activity(CamelModel):
    """One production stage, tied to its source row."""

    id: str
    name: str
    source_row: int
    color: str | None = None


class Period(CamelModel):
    """Outcome of one activity x timeline cell."""

    activity_id: str
    timeline_index: int
    active: bool
    color: str | None = None
    raw_value: Any = None


class CalendarSummary(CamelModel):
    total_activities: int
    time_span: int
    active_periods_count: int


class CalendarModel(CamelModel):
    """Full parse result for one sheet."""

    classification: Classification
    timeline: list[TimelineColumn]
    activities: list[Activity]
    schedule: dict[str, list[Period]]
    summary: CalendarSummary


class ParseResult(CamelModel):
    """Envelope returned by the parse entry point."""

    success: bool
    data: CalendarModel | None = None
    error: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)
    trace: list[dict[str, str]] = Field(default_factory=list)


def build_summary(
    activities: list[Activity],
    timeline: list[TimelineColumn],
    schedule: dict[str, list[Period]],
) -> CalendarSummary:
    """Summary counts for a calendar."""
    return CalendarSummary(
        total_activities=len(activities),
        time_span=len(timeline),
        active_periods_count=sum(len(periods) for periods in schedule.values()),
    )
