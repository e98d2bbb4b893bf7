"""Pydantic DTOs for records exchanged with the backend."""

from datetime import datetime
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from admin_sync.domain.entities import Record, ResourceType


class RecordPayload(BaseModel):
    """Shape every backend row must have; other columns pass through untouched."""

    model_config = ConfigDict(extra="allow")

    id: str
    status: str | None = None
    created_at: datetime | None = Field(
        default=None,
        validation_alias=AliasChoices("created_at", "createdAt"),
    )

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> str:
        # MySQL auto-increment ids arrive as numbers, staff ids as "STF001".
        if isinstance(value, bool) or value is None or value == "":
            raise ValueError("id must be a non-empty string or number")
        if isinstance(value, (int, str)):
            return str(value)
        raise ValueError(f"id must be a string or number, got {type(value).__name__}")

    @field_validator("created_at", mode="before")
    @classmethod
    def _lenient_created_at(cls, value: Any) -> Any:
        # Rows with a missing or garbled date are still valid rows.
        if isinstance(value, datetime):
            return value
        if not isinstance(value, str) or not value.strip():
            return None
        try:
            return datetime.fromisoformat(value.strip())
        except ValueError:
            return None

    def to_record(self, resource_type: ResourceType) -> Record:
        extra = dict(self.model_extra or {})
        extra.pop("createdAt", None)
        return Record(
            id=self.id,
            status=self.status or resource_type.default_status,
            created_at=self.created_at,
            fields=extra,
        )
