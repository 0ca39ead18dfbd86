"""Activity log.

Observability sink for operations: every tool call, UI action and demo
helper reports its input and outcome here. Recording never changes the
outcome of the operation being recorded.
"""

from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

import structlog

logger = structlog.get_logger()


def to_wire(value: Any) -> Any:
    """Serialize a domain value for callers and the activity log."""
    if hasattr(value, "to_dict"):
        return value.to_dict()
    if isinstance(value, (list, tuple)):
        return [to_wire(item) for item in value]
    return value


@dataclass(frozen=True)
class ActivityEntry:
    """A single recorded event, e.g. ``tool:addToCart``."""

    event: str
    payload: dict[str, Any]
    time: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def failed(self) -> bool:
        return "error" in self.payload

    def to_dict(self) -> dict[str, Any]:
        return {
            "event": self.event,
            "time": self.time.isoformat(),
            "payload": self.payload,
        }


class ActivityLog:
    """Bounded, newest-first record of recent activity."""

    def __init__(self, max_entries: int = 8) -> None:
        self._entries: deque[ActivityEntry] = deque(maxlen=max_entries)

    def record(self, event: str, payload: dict[str, Any]) -> ActivityEntry:
        """Record an event and log it."""
        entry = ActivityEntry(event=event, payload=payload)
        self._entries.appendleft(entry)
        if entry.failed:
            logger.warning("Activity", activity_event=event, **payload)
        else:
            logger.info("Activity", activity_event=event, **payload)
        return entry

    def entries(self) -> list[ActivityEntry]:
        """Recent entries, newest first."""
        return list(self._entries)

    @property
    def latest(self) -> ActivityEntry | None:
        return self._entries[0] if self._entries else None

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
