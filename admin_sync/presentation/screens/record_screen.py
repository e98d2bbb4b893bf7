"""Record screen — one mounted admin screen (roles, categories, suppliers, staff, ...).

Owns the synchronization core for its resource type: a collection cache,
a mutation coordinator and a refresh scheduler, all created per screen and
torn down on ``deactivate()``.
"""

import logging
from dataclasses import replace
from datetime import date
from typing import Any

from admin_sync.application.interfaces import FallbackStore, RemoteResourceClient
from admin_sync.application.schemas import validate_form
from admin_sync.application.services import (
    CollectionView,
    CsvExport,
    NotificationCenter,
    OptimisticMutationCoordinator,
    PendingMutation,
    ProjectionResult,
    RefreshScheduler,
    SynchronizedCollectionCache,
    project,
    status_counts,
)
from admin_sync.application.services.csv_export import export_filename, export_records
from admin_sync.domain.entities import (
    DEFAULT_PAGE_SIZE,
    FilterState,
    MutationIntent,
    ResourceType,
)
from admin_sync.domain.exceptions import EntityNotFoundError

logger = logging.getLogger(__name__)


class RecordScreen:
    """Screen-level facade over the sync core for one resource type.

    Views read ``view`` / ``current_page()`` and call the CRUD methods;
    they never touch the cache or the fallback store directly.
    """

    def __init__(
        self,
        resource_type: ResourceType,
        client: RemoteResourceClient,
        store: FallbackStore,
        *,
        notifications: NotificationCenter | None = None,
        page_size: int = DEFAULT_PAGE_SIZE,
        refresh_interval: float = 30.0,
    ) -> None:
        self.resource_type = resource_type
        self.notifications = notifications or NotificationCenter()
        self._filters = FilterState(page_size=page_size)

        self._cache = SynchronizedCollectionCache(
            resource_type, client, store, self.notifications
        )
        self._coordinator = OptimisticMutationCoordinator(
            self._cache, client, self.notifications
        )
        self._scheduler = RefreshScheduler(
            self._cache,
            interval_seconds=refresh_interval,
            snapshot_filters=lambda: self._filters,
            restore_filters=self._restore_filters,
        )

    # ── Lifecycle ───────────────────────────────────────────────────

    @property
    def is_active(self) -> bool:
        return self._scheduler.is_active

    async def activate(self) -> CollectionView | None:
        """Mount: load the collection and start periodic refreshes."""
        return await self._scheduler.start()

    async def deactivate(self) -> None:
        """Unmount: stop refreshing and let in-flight mutations settle."""
        await self._scheduler.stop()
        await self._coordinator.drain()

    async def refresh_now(self) -> CollectionView | None:
        return await self._scheduler.refresh_now()

    @property
    def view(self) -> CollectionView:
        return self._cache.current()

    @property
    def pending_mutations(self) -> int:
        return self._coordinator.pending_count

    # ── Filter state ────────────────────────────────────────────────

    @property
    def filter_state(self) -> FilterState:
        return self._filters

    def set_search(self, term: str) -> FilterState:
        self._filters = self._filters.with_search(term)
        return self._filters

    def set_status_filter(self, status: str) -> FilterState:
        self._filters = self._filters.with_status(status)
        return self._filters

    def set_created_period(self, month: int | None, year: int | None) -> FilterState:
        self._filters = self._filters.with_period(month, year)
        return self._filters

    def set_page(self, page: int) -> FilterState:
        self._filters = self._filters.with_page(max(1, page))
        return self._filters

    def next_page(self) -> FilterState:
        result = self.current_page()
        if result.has_next:
            self._filters = self._filters.with_page(result.page + 1)
        return self._filters

    def previous_page(self) -> FilterState:
        result = self.current_page()
        if result.has_previous:
            self._filters = self._filters.with_page(result.page - 1)
        return self._filters

    def current_page(self) -> ProjectionResult:
        """Visible page for the current filter state; a page past the end is clamped."""
        result = project(self.view.records, self._filters, self.resource_type)
        if result.page != self._filters.page:
            self._filters = self._filters.with_page(result.page)
        return result

    def _restore_filters(self, snapshot: FilterState) -> None:
        # Keep the user's selection; only the page may shrink with the collection.
        result = project(self.view.records, snapshot, self.resource_type)
        self._filters = replace(snapshot, page=result.page)

    # ── Mutations ───────────────────────────────────────────────────

    def create(self, fields: dict[str, Any]) -> PendingMutation:
        cleaned = validate_form(self.resource_type, fields)
        return self._coordinator.apply(MutationIntent.create(cleaned))

    def update(self, record_id: str, changes: dict[str, Any]) -> PendingMutation:
        existing = self._cache.find(record_id)
        if existing is None:
            raise EntityNotFoundError(self.resource_type.item_label, record_id)
        # Validate the record as it would look after the edit, send only the changes.
        cleaned = validate_form(
            self.resource_type, {**existing.fields, "status": existing.status, **changes}
        )
        sent = {key: cleaned[key] for key in changes if key in cleaned}
        return self._coordinator.apply(MutationIntent.update(record_id, sent))

    def delete(self, record_id: str) -> PendingMutation:
        return self._coordinator.apply(MutationIntent.delete(record_id))

    # ── Export & summary ────────────────────────────────────────────

    def export_csv(self, today: date | None = None) -> CsvExport:
        """Export every record matching the filters (not only the visible page)."""
        result = project(self.view.records, self._filters, self.resource_type)
        filename = export_filename(self.resource_type, self._filters, today or date.today())
        return CsvExport(
            filename=filename,
            content=export_records(result.matching, self.resource_type),
            row_count=result.total_matching,
        )

    def summary(self) -> dict[str, int]:
        return status_counts(self.view.records, self.resource_type)
