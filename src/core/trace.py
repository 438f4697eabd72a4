"""Structured record of the detection branches taken during one parse."""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone


@dataclass
class ParseTrace:
    """Captured decisions for one parse call."""

    request_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    timestamp: str = field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )
    filename: str | None = None
    file_size_bytes: int | None = None
    success: bool = False
    error_message: str | None = None
    calendar_type: str | None = None
    commodity: str | None = None
    fallback_reason: str | None = None
    processing_time_ms: int = 0
    activities_found: int | None = None
    time_columns_found: int | None = None
    details: list[tuple[str, str]] = field(default_factory=list)  # (stage, message)

    def record(self, stage: str, message: str) -> None:
        self.details.append((stage, message))

    def stages(self) -> list[str]:
        return [stage for stage, _ in self.details]

    def as_list(self) -> list[dict[str, str]]:
        return [{"stage": stage, "message": message} for stage, message in self.details]
