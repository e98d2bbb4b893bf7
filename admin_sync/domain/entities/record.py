"""Domain entity — one row of an administrative collection."""

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any
from uuid import uuid4

LOCAL_ID_PREFIX = "local-"


class RecordStatus(str, Enum):
    """Status set shared by roles, categories, suppliers and doctors."""

    ACTIVE = "active"
    INACTIVE = "inactive"


class AttendanceStatus(str, Enum):
    """Status set of an attendance entry."""

    PRESENT = "Present"
    ABSENT = "Absent"
    LATE = "Late"
    HALF_DAY = "Half Day"


def new_local_id() -> str:
    """Temporary identifier for a record the server has not confirmed yet."""
    return f"{LOCAL_ID_PREFIX}{uuid4()}"


@dataclass(frozen=True)
class Record:
    """Core domain entity: a role, category, supplier, doctor, staff member or attendance entry.

    The attributes every resource shares are explicit; everything else the
    backend sends (name, description, permissions, staff_id, date, ...) lives
    in ``fields``. Records are immutable — edits produce a new instance.
    """

    id: str
    status: str
    created_at: datetime | None = None
    fields: dict[str, Any] = field(default_factory=dict)

    @property
    def is_local(self) -> bool:
        """True while the record only exists on this client."""
        return self.id.startswith(LOCAL_ID_PREFIX)

    def get(self, name: str, default: Any = None) -> Any:
        if name == "id":
            return self.id
        if name == "status":
            return self.status
        if name == "created_at":
            return self.created_at
        return self.fields.get(name, default)

    def merged(self, changes: dict[str, Any]) -> "Record":
        """Return a copy with ``changes`` applied; ``status`` is routed to its own slot."""
        changes = dict(changes)
        status = changes.pop("status", None) or self.status
        changes.pop("id", None)
        changes.pop("created_at", None)
        return replace(self, status=status, fields={**self.fields, **changes})

    def to_dict(self) -> dict[str, Any]:
        """Flat JSON-compatible representation (fallback store format)."""
        data: dict[str, Any] = dict(self.fields)
        data["id"] = self.id
        data["status"] = self.status
        data["created_at"] = self.created_at.isoformat() if self.created_at else None
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Record":
        """Inverse of :meth:`to_dict`. Raises ``KeyError``/``ValueError`` on bad input."""
        payload = dict(data)
        record_id = payload.pop("id")
        status = payload.pop("status")
        raw_created = payload.pop("created_at", None)
        if record_id is None or status is None:
            raise ValueError("record requires id and status")
        created_at = datetime.fromisoformat(raw_created) if raw_created else None
        return cls(id=str(record_id), status=str(status), created_at=created_at, fields=payload)

    @classmethod
    def draft(cls, fields: dict[str, Any], default_status: str) -> "Record":
        """Optimistic stand-in for a record that is being created."""
        payload = dict(fields)
        payload.pop("id", None)
        status = payload.pop("status", None) or default_status
        return cls(
            id=new_local_id(),
            status=status,
            created_at=datetime.now(timezone.utc),
            fields=payload,
        )
