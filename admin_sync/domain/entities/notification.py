"""Domain entity — a non-blocking message shown to the user (toast)."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum


class NotificationLevel(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class Notification:
    """One user-facing message.

    ``record_id`` is set when the message concerns a single record, e.g. a
    rejected create whose temporary id any open dialog must drop.
    """

    level: NotificationLevel
    title: str
    message: str
    resource_key: str = ""
    record_id: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> dict:
        return {
            "level": self.level.value,
            "title": self.title,
            "message": self.message,
            "resource_key": self.resource_key,
            "record_id": self.record_id,
            "created_at": self.created_at.isoformat(),
        }
