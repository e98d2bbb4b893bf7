"""Domain entities for optimistic mutations."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from uuid import uuid4


class IntentKind(str, Enum):
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


class MutationState(str, Enum):
    """Lifecycle of one intent after it was applied locally."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    REVERTED = "reverted"


@dataclass(frozen=True)
class MutationIntent:
    """A single requested create/update/delete, tracked on its own for reversion."""

    kind: IntentKind
    record_id: str | None = None
    fields: dict[str, Any] = field(default_factory=dict)
    intent_id: str = field(default_factory=lambda: str(uuid4()))

    @classmethod
    def create(cls, fields: dict[str, Any]) -> "MutationIntent":
        return cls(kind=IntentKind.CREATE, fields=dict(fields))

    @classmethod
    def update(cls, record_id: str, fields: dict[str, Any]) -> "MutationIntent":
        return cls(kind=IntentKind.UPDATE, record_id=record_id, fields=dict(fields))

    @classmethod
    def delete(cls, record_id: str) -> "MutationIntent":
        return cls(kind=IntentKind.DELETE, record_id=record_id)
