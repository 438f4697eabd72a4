"""
SQLite parse log.

Each parse run is stored as one ``parse_requests`` row plus one
``parse_request_details`` row per recorded detection step.
"""

import sqlite3
from pathlib import Path

from core.config import DB_PATH
from core.trace import ParseTrace


def get_connection(db_path: Path | None = None) -> sqlite3.Connection:
    """Get a database connection."""
    return sqlite3.connect(db_path or DB_PATH)


def create_tables(conn: sqlite3.Connection):
    """Create the parse log tables and indexes if they don't exist."""
    cursor = conn.cursor()

    cursor.execute("""
        CREATE TABLE IF NOT EXISTS parse_requests (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            request_id TEXT UNIQUE NOT NULL,
            timestamp TEXT NOT NULL,
            file_name TEXT,
            file_size_bytes INTEGER,
            success INTEGER NOT NULL,
            error_message TEXT,
            calendar_type TEXT CHECK(calendar_type IN ('seasonal', 'cycle', 'unknown')),
            commodity TEXT,
            fallback_reason TEXT,
            processing_time_ms INTEGER NOT NULL,
            activities_found INTEGER,
            time_columns_found INTEGER
        )
    """)

    cursor.execute("""
        CREATE TABLE IF NOT EXISTS parse_request_details (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            request_id TEXT NOT NULL,
            stage TEXT NOT NULL,
            message TEXT NOT NULL,
            FOREIGN KEY (request_id) REFERENCES parse_requests(request_id)
        )
    """)

    cursor.execute(
        "CREATE INDEX IF NOT EXISTS idx_parse_requests_timestamp ON parse_requests(timestamp)"
    )
    cursor.execute(
        "CREATE INDEX IF NOT EXISTS idx_parse_request_details_request ON parse_request_details(request_id)"
    )
    conn.commit()


def log_parse(trace: ParseTrace, db_path: Path | None = None) -> None:
    """Write a parse trace to the SQLite parse log."""
    conn = get_connection(db_path)
    try:
        cursor = conn.cursor()

        # Insert main request record
        cursor.execute(
            """
            INSERT INTO parse_requests (
                request_id, timestamp, file_name, file_size_bytes, success,
                error_message, calendar_type, commodity, fallback_reason,
                processing_time_ms, activities_found, time_columns_found
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        """,
            (
                trace.request_id,
                trace.timestamp,
                trace.filename,
                trace.file_size_bytes,
                int(trace.success),
                trace.error_message,
                trace.calendar_type,
                trace.commodity,
                trace.fallback_reason,
                trace.processing_time_ms,
                trace.activities_found,
                trace.time_columns_found,
            ),
        )

        # Insert detail records
        for stage, message in trace.details:
            cursor.execute(
                """
                INSERT INTO parse_request_details (request_id, stage, message)
                VALUES (?, ?, ?)
            """,
                (trace.request_id, stage, message),
            )

        conn.commit()
    finally:
        conn.close()


def get_parse_details(request_id: str, db_path: Path | None = None) -> list[tuple[str, str]]:
    """Recorded (stage, message) steps of a logged parse, in order."""
    conn = get_connection(db_path)
    try:
        cursor = conn.cursor()
        cursor.execute(
            "SELECT stage, message FROM parse_request_details WHERE request_id = ? ORDER BY id",
            (request_id,),
        )
        return cursor.fetchall()
    finally:
        conn.close()
