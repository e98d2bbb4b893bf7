"""Synchronized collection cache — the in-memory list behind one admin screen.

The visible collection is computed as::

    base (last applied fetch or fallback snapshot, plus confirmed mutations)
      └─ overlays of pending optimistic intents, in the order they were applied

Every state change rebuilds the visible tuple and swaps it in with a single
assignment, so a reader never sees a half-applied mutation.
"""

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from admin_sync.application.interfaces import FallbackStore, RemoteResourceClient
from admin_sync.application.services.notification_center import NotificationCenter
from admin_sync.domain.entities import NotificationLevel, Record, ResourceType
from admin_sync.domain.exceptions import RemoteFailure
from admin_sync.infrastructure.logging.colored_logger import SyncLogger, SyncStage

logger = logging.getLogger(__name__)

Records = tuple[Record, ...]
Effect = Callable[[Records], Records]


class DataSource(str, Enum):
    """Where the visible collection came from."""

    NONE = "none"            # nothing loaded yet
    REMOTE = "remote"        # a successful fetch
    FALLBACK = "fallback"    # the persisted snapshot, after a failed fetch
    EMPTY = "empty"          # fetch failed and no snapshot exists


@dataclass(frozen=True)
class CollectionView:
    """Immutable snapshot handed to views by ``current()``."""

    records: Records
    is_loading: bool
    is_stale: bool
    source: DataSource
    version: int


# ── Collection operations (pure) ─────────────────────────────────────


def unique_by_id(records: Iterable[Record]) -> Records:
    seen: set[str] = set()
    result: list[Record] = []
    for record in records:
        if record.id in seen:
            continue
        seen.add(record.id)
        result.append(record)
    return tuple(result)


def upsert_by_id(records: Records, record: Record) -> Records:
    """Replace the record with the same id, or append it."""
    if any(r.id == record.id for r in records):
        return tuple(record if r.id == record.id else r for r in records)
    return records + (record,)


def merge_by_id(records: Records, record_id: str, changes: dict[str, Any]) -> Records:
    """Apply ``changes`` to the record with ``record_id``; no-op when it is gone."""
    return tuple(r.merged(changes) if r.id == record_id else r for r in records)


def remove_by_id(records: Records, record_id: str) -> Records:
    return tuple(r for r in records if r.id != record_id)


def upsert_by_natural_key(records: Records, record: Record, resource_type: ResourceType) -> Records:
    """Replace every entry sharing ``record``'s natural key with ``record``.

    Also drops an entry carrying the same id, so a server row that replaces
    a temporary one never appears twice.
    """
    key = resource_type.natural_key_of(record)
    kept: list[Record] = []
    inserted = False
    for existing in records:
        if existing.id == record.id or resource_type.natural_key_of(existing) == key:
            if not inserted:
                kept.append(record)
                inserted = True
            continue
        kept.append(existing)
    if not inserted:
        kept.append(record)
    return tuple(kept)


# ── Cache ────────────────────────────────────────────────────────────


class SynchronizedCollectionCache:
    """Owns the collection of one resource type for the lifetime of a screen.

    Only this class and the OptimisticMutationCoordinator (through
    ``add_overlay``/``revert``/``confirm``) change the collection or the
    fallback snapshot. Views read ``current()``.
    """

    def __init__(
        self,
        resource_type: ResourceType,
        client: RemoteResourceClient,
        store: FallbackStore,
        notifications: NotificationCenter | None = None,
    ) -> None:
        self._resource = resource_type
        self._client = client
        self._store = store
        self._notifications = notifications
        self._log = SyncLogger(f"SyncCore.{resource_type.key}")

        self._base: Records | None = None
        self._records: Records = ()
        self._source = DataSource.NONE
        self._version = 0

        # Pending optimistic intents: intent_id -> effect
        self._overlays: dict[str, Effect] = {}
        # Confirmed mutation effects, replayed over fetches issued before them
        self._confirmed: list[tuple[int, Effect]] = []
        self._epoch = 0

        self._issued_seq = 0
        self._applied_seq = 0
        # In-flight refreshes: sequence number -> epoch when issued
        self._in_flight: dict[int, int] = {}

    @property
    def resource_type(self) -> ResourceType:
        return self._resource

    def current(self) -> CollectionView:
        return CollectionView(
            records=self._records,
            is_loading=bool(self._in_flight),
            is_stale=self._source in (DataSource.FALLBACK, DataSource.EMPTY),
            source=self._source,
            version=self._version,
        )

    def find(self, record_id: str) -> Record | None:
        return next((r for r in self._records if r.id == record_id), None)

    def find_by_natural_key(self, key: tuple[str, ...]) -> Record | None:
        return next(
            (r for r in self._records if self._resource.natural_key_of(r) == key),
            None,
        )

    # ── Refresh ─────────────────────────────────────────────────────

    async def refresh(self) -> CollectionView:
        """Fetch the collection; degrade to the fallback snapshot on failure.

        Existing records stay visible while loading. A result is applied only
        if no later-issued refresh has been applied already.
        """
        self._issued_seq += 1
        seq = self._issued_seq
        self._in_flight[seq] = self._epoch

        try:
            try:
                with self._log.timed_step(
                    SyncStage.REFRESH, f"Fetching {self._resource.label}", seq=seq
                ):
                    fetched = await self._client.list()
            except RemoteFailure as exc:
                self._handle_refresh_failure(seq, exc)
            else:
                self._apply_fetch(seq, fetched)
        finally:
            self._in_flight.pop(seq, None)
            self._prune_confirmed()

        return self.current()

    def _apply_fetch(self, seq: int, fetched: Iterable[Record]) -> None:
        if seq < self._applied_seq:
            self._log.detail(
                "Discarding out-of-order fetch", seq=seq, applied=self._applied_seq
            )
            return

        self._applied_seq = seq
        self._establish_base(unique_by_id(fetched), self._in_flight.get(seq, self._epoch))
        self._source = DataSource.REMOTE
        self._rebuild()
        self._persist()
        self._log.step_complete(
            SyncStage.REFRESH,
            f"{self._resource.label} up to date",
            records=len(self._records),
            pending=len(self._overlays),
        )

    def _handle_refresh_failure(self, seq: int, exc: RemoteFailure) -> None:
        if self._base is not None:
            # Keep whatever is on screen (fresh, optimistic or fallback).
            if seq > self._applied_seq:
                self._publish(
                    NotificationLevel.WARNING,
                    "Error",
                    f"Failed to refresh {self._resource.label.lower()}; showing current data",
                )
            return

        snapshot = self._store.load(self._resource.key)
        if snapshot is not None:
            self._establish_base(snapshot, self._in_flight.get(seq, self._epoch))
            self._source = DataSource.FALLBACK
            self._rebuild()
            self._log.step_warning(
                SyncStage.FALLBACK,
                f"Backend unavailable — showing cached {self._resource.label.lower()}",
                records=len(snapshot),
            )
            self._publish(
                NotificationLevel.WARNING,
                "Using cached data",
                f"Could not reach the server; showing the last saved "
                f"{self._resource.label.lower()} ({len(snapshot)} records)",
            )
        else:
            self._establish_base((), self._in_flight.get(seq, self._epoch))
            self._source = DataSource.EMPTY
            self._rebuild()
            self._log.step_error(
                SyncStage.FALLBACK, f"No {self._resource.label.lower()} available", error=exc
            )
            self._publish(
                NotificationLevel.ERROR,
                "No data available",
                f"Could not load {self._resource.label.lower()} and no saved copy exists",
            )

    def _establish_base(self, records: Records, issued_epoch: int) -> None:
        first_load = self._base is None
        base = records
        for epoch, effect in self._confirmed:
            if first_load or epoch > issued_epoch:
                base = effect(base)
        self._base = base

    def _prune_confirmed(self) -> None:
        if self._base is None:
            return
        if not self._in_flight:
            self._confirmed.clear()
            return
        oldest = min(self._in_flight.values())
        self._confirmed = [(e, f) for e, f in self._confirmed if e > oldest]

    # ── Mutation seams (used by the coordinator) ────────────────────

    def add_overlay(self, intent_id: str, effect: Effect) -> None:
        """Show an optimistic change immediately and persist it."""
        self._overlays[intent_id] = effect
        self._rebuild()
        self._persist()

    def revert(self, intent_id: str) -> bool:
        """Undo one pending intent. Other pending intents are untouched."""
        if self._overlays.pop(intent_id, None) is None:
            return False
        self._rebuild()
        self._persist()
        return True

    def confirm(self, intent_id: str, effect: Effect) -> None:
        """Replace an intent's optimistic overlay with the server-confirmed effect."""
        self._overlays.pop(intent_id, None)
        self._epoch += 1
        self._confirmed.append((self._epoch, effect))
        if self._base is not None:
            self._base = effect(self._base)
        self._prune_confirmed()
        self._rebuild()
        self._persist()

    @property
    def pending_intents(self) -> list[str]:
        return list(self._overlays)

    # ── Internals ───────────────────────────────────────────────────

    def _rebuild(self) -> None:
        records = self._base or ()
        for effect in self._overlays.values():
            records = effect(records)
        self._records = records
        self._version += 1

    def _persist(self) -> None:
        if self._base is None:
            # Never overwrite a good snapshot before the collection was loaded.
            return
        try:
            self._store.save(self._resource.key, self._records)
        except (OSError, TypeError, ValueError) as exc:
            logger.warning("Could not persist %s snapshot: %s", self._resource.key, exc)

    def _publish(self, level: NotificationLevel, title: str, message: str) -> None:
        if self._notifications is not None:
            self._notifications.notify(
                level, title, message, resource_key=self._resource.key
            )
