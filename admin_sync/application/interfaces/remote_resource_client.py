"""Abstract remote client interface (port) for one CRUD resource type."""

from abc import ABC, abstractmethod
from typing import Any

from admin_sync.domain.entities import Record, ResourceType


class RemoteResourceClient(ABC):
    """Port — what the sync core needs from the backend data service.

    Every operation either returns the described value or raises
    ``RemoteFailure``. A failed call must never look like a success
    (e.g. an error response is not an empty list).
    """

    @property
    @abstractmethod
    def resource_type(self) -> ResourceType:
        ...

    @abstractmethod
    async def list(self) -> list[Record]:
        """Fetch the whole collection."""
        ...

    @abstractmethod
    async def create(self, fields: dict[str, Any]) -> Record:
        """Persist a new record; the returned record carries the server id."""
        ...

    @abstractmethod
    async def update(self, record_id: str, fields: dict[str, Any]) -> Record:
        """Persist changes to an existing record and return the stored version."""
        ...

    @abstractmethod
    async def delete(self, record_id: str) -> bool:
        """Delete a record. Returns True once the backend acknowledged it."""
        ...
