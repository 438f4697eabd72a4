"""
Calendar Parsing Service

Top-level entry point: reads an uploaded calendar spreadsheet and returns a
normalized CalendarModel inside a ParseResult envelope. Sheets that cannot be
interpreted get the canonical fallback calendar; only unreadable files
produce an unsuccessful result.
"""

import time
from datetime import datetime, timezone
from typing import Any

from core.trace import ParseTrace
from models.calendar import CalendarModel, ParseResult, build_summary
from services.activities import extract_activities
from services.classifier import classify_calendar
from services.fallback import synthesize_fallback
from services.schedule import map_schedule
from services.timeline import extract_timeline
from services.workbook import MalformedWorkbookError, kind_from_filename, read_workbook

UNEXPECTED_ERROR_MESSAGE = "Unexpected error while parsing calendar"

# Fallback reasons (surfaced as fallbackReason)
REASON_UNKNOWN_TYPE = "unrecognized calendar layout"
REASON_NO_TIMELINE = "no month header row found"
REASON_NO_ACTIVITIES = "no activity labels found"


def _build_metadata(
    filename: str,
    model: CalendarModel | None,
    fallback_reason: str | None,
    caller_metadata: dict[str, Any] | None,
) -> dict[str, Any]:
    metadata = dict(caller_metadata or {})
    metadata.update(
        {
            "filename": filename,
            "totalActivities": len(model.activities) if model else 0,
            "totalTimeColumns": len(model.timeline) if model else 0,
            "processingDate": datetime.now(timezone.utc).isoformat(),
            "fallbackUsed": fallback_reason is not None,
            "fallbackReason": fallback_reason,
        }
    )
    if model is not None:
        metadata["classificationDecision"] = model.classification.decision
        metadata["commodityDefaulted"] = model.classification.commodity_defaulted
    return metadata


def _interpret(data: bytes, filename: str, kind: str, trace: ParseTrace) -> CalendarModel:
    """Run classification and extraction, falling back when the sheet is not usable."""
    grid = read_workbook(data, kind)
    trace.record(
        "read",
        f"Sheet '{grid.sheet_name}': {grid.row_count} rows x {grid.column_count} columns, "
        f"{len(grid.styles)} styled cells",
    )

    classification = classify_calendar(grid.values, filename)
    trace.calendar_type = classification.type
    trace.commodity = classification.commodity
    trace.record(
        "classify",
        f"{classification.type} via {classification.decision} "
        f"(commodity '{classification.commodity}'"
        f"{', defaulted' if classification.commodity_defaulted else ''})",
    )

    if classification.type == "unknown":
        return _fallback(classification, REASON_UNKNOWN_TYPE, trace)

    extraction = extract_activities(grid.values)
    trace.record(
        "activities",
        f"{len(extraction.activities)} activities in column {extraction.activity_column} "
        f"below row {extraction.header_row}"
        f"{'' if extraction.header_found else ' (default position)'}",
    )

    timeline = extract_timeline(grid.values, first_column=extraction.activity_column + 1)
    if not timeline:
        trace.record("timeline", "No timeline columns found")
        return _fallback(classification, REASON_NO_TIMELINE, trace)
    trace.record(
        "timeline",
        f"{len(timeline)} columns from column {timeline[0].source_column} "
        f"to {timeline[-1].source_column}",
    )

    if not extraction.activities:
        return _fallback(classification, REASON_NO_ACTIVITIES, trace)

    mapping = map_schedule(grid, extraction.activities, timeline)
    model = CalendarModel(
        classification=classification,
        timeline=timeline,
        activities=mapping.activities,
        schedule=mapping.schedule,
        summary=build_summary(mapping.activities, timeline, mapping.schedule),
    )
    trace.record("schedule", f"{model.summary.active_periods_count} active periods")
    return model


def _fallback(classification, reason: str, trace: ParseTrace) -> CalendarModel:
    trace.fallback_reason = reason
    trace.record("fallback", reason)
    return synthesize_fallback(classification)


def parse_calendar_with_trace(
    data: bytes,
    filename: str = "",
    kind: str | None = None,
    metadata: dict[str, Any] | None = None,
) -> tuple[ParseResult, ParseTrace]:
    """
    Parse a calendar spreadsheet and return the result with its trace.

    Never raises: read failures and unexpected errors become
    ``success=False`` results.
    """
    start_time = time.time()
    filename = filename or ""
    trace = ParseTrace(filename=filename, file_size_bytes=len(data) if data else 0)
    kind = kind or kind_from_filename(filename)
    trace.record("input", f"{trace.file_size_bytes} bytes as {kind}")

    model = None
    error = None
    try:
        model = _interpret(data, filename, kind, trace)
    except MalformedWorkbookError as e:
        error = str(e)
        trace.record("read_error", error)
    except Exception as e:
        error = UNEXPECTED_ERROR_MESSAGE
        trace.record("error", f"{type(e).__name__}: {e}")

    trace.success = model is not None
    trace.error_message = error
    if model is not None:
        trace.activities_found = len(model.activities)
        trace.time_columns_found = len(model.timeline)
    trace.processing_time_ms = int((time.time() - start_time) * 1000)

    result = ParseResult(
        success=model is not None,
        data=model,
        error=error,
        metadata=_build_metadata(filename, model, trace.fallback_reason, metadata),
        trace=trace.as_list(),
    )
    return result, trace


def parse_calendar(
    data: bytes,
    filename: str = "",
    kind: str | None = None,
    metadata: dict[str, Any] | None = None,
) -> ParseResult:
    """
    Parse an agricultural calendar spreadsheet.

    Args:
        data: Raw file bytes
        filename: Upload filename (used for format detection, commodity
            detection and display)
        kind: Explicit format ("xlsx", "xlsm", "xls", "csv"); derived from the
            filename when omitted
        metadata: Caller context (region, district, commodity, ...) passed
            through to the result metadata

    Returns:
        ParseResult envelope; ``success`` is False only when the file cannot
        be read
    """
    result, _ = parse_calendar_with_trace(data, filename, kind, metadata)
    return result
