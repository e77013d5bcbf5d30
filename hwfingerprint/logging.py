"""
hwfingerprint.logging

Structured JSON event logging for ops ingestion

Contract:
- One JSON object per line to stderr (stdout carries the fingerprint only)
- Stable event vocabulary (allowlist)
- UTC timestamps only
- Events below the run's minimum level (EventLog) are dropped
"""

from __future__ import annotations

import json
import sys
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, TextIO

from hwfingerprint import AGENT_VERSION

# Event types
VALID_EVENT_TYPES = {
    "fingerprint_start",
    "wmi_wait_attempt",
    "wmi_ready",
    "wmi_unavailable",
    "interface_selected",
    "version_detection_failed",
    "category_collected",
    "category_failed",
    "host_info_failed",
    "fingerprint_emitted",
    "agent_shutdown",
}

LEVELS = {"debug": 10, "info": 20, "warning": 30, "error": 40}

def _truncate_message(value: str, *, limit: int = 200) -> str:
    """
    Cap message length to keep events compact
    """
    if len(value) <= limit:
        return value
    return value[:limit] + f"...[truncated {len(value) - limit} chars]"


# Time: current in UTC ISO 8601
def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def emit_event(
    event_type: str,
    *,
    level: str = "info",
    min_level: str = "info",
    stream: TextIO | None = None,
    **fields: Any,
) -> None:
    """
    Emit structured event line

    Rules:
    - event_type in VALID_EVENT_TYPES, level and min_level in LEVELS
    - nothing is written when level is below min_level
    - event_type, level, agent_version, utc_now always present
    - sort_keys + compact separators for format
    """
    if event_type not in VALID_EVENT_TYPES:
        raise ValueError(f"invalid event_type: {event_type}")
    for name in (level, min_level):
        if name not in LEVELS:
            raise ValueError(f"invalid level: {name}")

    if LEVELS[level] < LEVELS[min_level]:
        return

    if "message" in fields and isinstance(fields["message"], str):
        # Avoid emitting long strings (wmic output, stack text) in event fields
        fields["message"] = _truncate_message(fields["message"])

    payload: dict[str, Any] = {
        "event_type": event_type,
        "level": level,
        "utc_now": utc_now_iso(),
        "agent_version": AGENT_VERSION,
        **fields,
    }

    print(
        json.dumps(
            payload,
            sort_keys=True,
            separators=(",", ":"),
            ensure_ascii=False,
            default=str,
        ),
        file=stream if stream is not None else sys.stderr,
    )


@dataclass(frozen=True)
class EventLog:
    """
    Event emitter bound to one run's minimum level and stream
    """

    min_level: str = "info"
    stream: TextIO | None = None

    def __post_init__(self) -> None:
        if self.min_level not in LEVELS:
            raise ValueError(f"invalid level: {self.min_level}")

    def emit(self, event_type: str, *, level: str = "info", **fields: Any) -> None:
        emit_event(event_type, level=level, min_level=self.min_level, stream=self.stream, **fields)
