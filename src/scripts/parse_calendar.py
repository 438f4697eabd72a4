#!/usr/bin/env python3
"""
Parse an agricultural production calendar spreadsheet into normalized JSON.

Detects the calendar kind and commodity, reads the timeline and activities,
maps colored cells to active periods, and prints (or writes) the result.
Every run is recorded in the SQLite parse log.

Usage:
    uv run python src/scripts/parse_calendar.py <calendar.xlsx> [--output result.json]

Example:
    uv run python src/scripts/parse_calendar.py data/maize_calendar.xlsx --region Ashanti --grid
"""

import argparse
import json
import sqlite3
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.config import MAX_UPLOAD_SIZE_BYTES, OUTPUT_DIR
from core.database import log_parse
from services.calendar_parser import parse_calendar_with_trace
from services.schedule import build_calendar_grid


def build_metadata(args: argparse.Namespace) -> dict[str, str]:
    """Caller context passed through to the result metadata."""
    metadata = {
        "region": args.region,
        "district": args.district,
        "commodity": args.commodity,
        "poultryType": args.poultry_type,
    }
    return {key: value for key, value in metadata.items() if value}


def main(argv: list[str] | None = None):
    parser = argparse.ArgumentParser(
        description="Parse an agricultural calendar spreadsheet into normalized JSON"
    )
    parser.add_argument(
        "input_file",
        type=Path,
        help="Path to the calendar spreadsheet (.xlsx, .xlsm, .xls or .csv)",
    )
    parser.add_argument("--output", type=Path, help="Write JSON to this file instead of stdout")
    parser.add_argument(
        "--save",
        action="store_true",
        help="Write JSON to output/calendars/<input name>.json",
    )
    parser.add_argument("--region", help="Region the calendar belongs to")
    parser.add_argument("--district", help="District the calendar belongs to")
    parser.add_argument("--commodity", help="Commodity declared by the uploader")
    parser.add_argument("--poultry-type", help="Poultry type declared by the uploader")
    parser.add_argument(
        "--grid",
        action="store_true",
        help="Include the preview grid (headers, month spans, cell rows)",
    )
    parser.add_argument("--quiet", action="store_true", help="Suppress progress output")

    args = parser.parse_args(argv)

    if not args.input_file.exists():
        print(f"Error: File not found: {args.input_file}")
        sys.exit(1)

    data = args.input_file.read_bytes()
    if len(data) > MAX_UPLOAD_SIZE_BYTES:
        max_mb = MAX_UPLOAD_SIZE_BYTES // (1024 * 1024)
        print(f"Error: File exceeds maximum size of {max_mb} MB")
        sys.exit(1)

    if not args.quiet:
        print(f"Parsing {args.input_file.name} ({len(data)} bytes)...", file=sys.stderr)

    result, trace = parse_calendar_with_trace(
        data,
        filename=args.input_file.name,
        metadata=build_metadata(args),
    )

    try:
        log_parse(trace)
    except sqlite3.Error as e:
        if not args.quiet:
            print(f"Warning: could not write parse log: {e}", file=sys.stderr)

    if not result.success:
        print(f"Error: {result.error}")
        sys.exit(1)

    if not args.quiet:
        for stage, message in trace.details:
            print(f"  [{stage}] {message}", file=sys.stderr)

    output = result.model_dump(by_alias=True, mode="json")
    if args.grid:
        output["grid"] = build_calendar_grid(result.data)

    text = json.dumps(output, indent=2)
    if args.save and not args.output:
        args.output = OUTPUT_DIR / "calendars" / f"{args.input_file.stem}.json"

    if args.output:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_text(text)
        if not args.quiet:
            print(f"\nCalendar written to: {args.output}", file=sys.stderr)
    else:
        print(text)


if __name__ == "__main__":
    main()
