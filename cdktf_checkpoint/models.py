from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

# attribute name -> wire key, in wire order
WIRE_KEYS = {
    "date_time": "dateTime",
    "arch": "arch",
    "os": "os",
    "payload": "payload",
    "product": "product",
    "run_id": "runID",
    "version": "version",
    "command": "command",
    "language": "language",
    "user_id": "userId",
    "ci": "ci",
    "project_id": "projectId",
}


def format_timestamp(value: datetime) -> str:
    """ISO-8601 in UTC with millisecond precision, e.g. 2024-01-01T00:00:00.000Z."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


@dataclass
class ReportRecord:
    """One telemetry report. Built per call, enriched in place, sent once.

    user_id and ci are mutually exclusive on a finalized record.
    """
    product: str
    payload: dict[str, Any] = field(default_factory=dict)
    command: str | None = None
    version: str | None = None
    date_time: datetime | None = None
    arch: str | None = None
    os: str | None = None
    run_id: str | None = None
    user_id: str | None = None
    project_id: str | None = None
    ci: str | None = None
    language: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Wire shape: camelCase keys, unset fields omitted."""
        out: dict[str, Any] = {}
        for attr, key in WIRE_KEYS.items():
            value = getattr(self, attr)
            if value is None:
                continue
            if isinstance(value, datetime):
                value = format_timestamp(value)
            out[key] = value
        return out

    def to_json(self) -> str:
        return json.dumps(self.to_dict())


@dataclass
class ReportResult:
    """Outcome of a reporting call. Callers may ignore it; it never signals failure by raising."""
    delivered: bool = False
    skipped: bool = False
    error: str = ""
