"""Abstract durable store interface (port) for last-known-good snapshots."""

from abc import ABC, abstractmethod
from collections.abc import Iterable

from admin_sync.domain.entities import Record


class FallbackStore(ABC):
    """Port for per-resource snapshots that survive restarts.

    Reads and writes are synchronous. ``load`` never raises: a missing or
    unreadable snapshot is reported as ``None``.
    """

    @abstractmethod
    def save(self, resource_key: str, records: Iterable[Record]) -> None:
        """Overwrite the snapshot for ``resource_key``."""
        ...

    @abstractmethod
    def load(self, resource_key: str) -> tuple[Record, ...] | None:
        """Return the last saved snapshot, or None when there is none."""
        ...

    @abstractmethod
    def clear(self, resource_key: str) -> None:
        """Forget the snapshot for ``resource_key``."""
        ...
