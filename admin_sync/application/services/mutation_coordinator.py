"""Optimistic mutation coordinator — apply locally first, confirm or undo later."""

import asyncio
from dataclasses import dataclass, field
from functools import partial

from admin_sync.application.interfaces import RemoteResourceClient
from admin_sync.application.services.collection_cache import (
    Effect,
    SynchronizedCollectionCache,
    merge_by_id,
    remove_by_id,
    upsert_by_id,
    upsert_by_natural_key,
)
from admin_sync.application.services.notification_center import NotificationCenter
from admin_sync.domain.entities import (
    IntentKind,
    MutationIntent,
    MutationState,
    NotificationLevel,
    Record,
)
from admin_sync.domain.exceptions import EntityNotFoundError, RemoteFailure, ValidationFailure
from admin_sync.infrastructure.logging.colored_logger import SyncLogger, SyncStage


_VERBS = {
    IntentKind.CREATE: ("add", "added"),
    IntentKind.UPDATE: ("update", "updated"),
    IntentKind.DELETE: ("delete", "deleted"),
}


@dataclass
class PendingMutation:
    """Handle returned by ``apply``; tracks one intent until it settles.

    ``record_id`` starts as the id shown optimistically (a temporary
    ``local-`` id for creates) and becomes the server id on confirmation.
    """

    intent: MutationIntent
    record_id: str
    optimistic: Record | None
    state: MutationState = MutationState.PENDING
    result: Record | None = None
    error: RemoteFailure | None = None
    _task: asyncio.Task | None = field(default=None, repr=False)

    @property
    def is_settled(self) -> bool:
        return self.state is not MutationState.PENDING

    async def wait(self) -> MutationState:
        """Wait for the backend to answer; returns the final state."""
        if self._task is not None and not self._task.done():
            await asyncio.wait({self._task})
        return self.state


class OptimisticMutationCoordinator:
    """Applies create/update/delete intents to the cache before the backend answers.

    Each intent is an overlay in the cache. The remote call runs as a
    background task: on success the overlay is swapped for the authoritative
    server result, on failure only that overlay is dropped.
    """

    def __init__(
        self,
        cache: SynchronizedCollectionCache,
        client: RemoteResourceClient,
        notifications: NotificationCenter | None = None,
    ) -> None:
        self._cache = cache
        self._client = client
        self._notifications = notifications
        self._resource = cache.resource_type
        self._tasks: set[asyncio.Task] = set()
        self._log = SyncLogger(f"SyncCore.{self._resource.key}")

    @property
    def pending_count(self) -> int:
        return len(self._tasks)

    def apply(self, intent: MutationIntent) -> PendingMutation:
        """Show the intent's effect now and send it to the backend in the background.

        Raises:
            EntityNotFoundError: update/delete of a record that is not in the collection.
            ValidationFailure: update/delete of a record whose create is still pending,
                or an update/delete without a record id.
        """
        loop = asyncio.get_running_loop()
        effect, pending = self._plan(intent)

        self._cache.add_overlay(intent.intent_id, effect)
        self._log.step_start(
            SyncStage.MUTATION,
            f"Applied {intent.kind.value} of {self._resource.item_label} locally",
            record=pending.record_id,
            intent=intent.intent_id[:8],
        )

        task = loop.create_task(self._settle(pending))
        pending._task = task
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return pending

    async def drain(self) -> None:
        """Wait until every in-flight mutation has settled."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    # ── Planning ────────────────────────────────────────────────────

    def _plan(self, intent: MutationIntent) -> tuple[Effect, PendingMutation]:
        if intent.kind is IntentKind.CREATE:
            return self._plan_create(intent)

        if not intent.record_id:
            raise ValidationFailure(f"{intent.kind.value} requires a record id")
        existing = self._cache.find(intent.record_id)
        if existing is None:
            raise EntityNotFoundError(self._resource.item_label, intent.record_id)
        if existing.is_local:
            raise ValidationFailure(
                f"This {self._resource.item_label} is still being saved; try again in a moment"
            )

        if intent.kind is IntentKind.UPDATE:
            optimistic = existing.merged(intent.fields)
            return (
                # Only this intent's fields; the rest comes from the layers below.
                partial(merge_by_id, record_id=existing.id, changes=dict(intent.fields)),
                PendingMutation(intent=intent, record_id=existing.id, optimistic=optimistic),
            )

        return (
            partial(remove_by_id, record_id=existing.id),
            PendingMutation(intent=intent, record_id=existing.id, optimistic=None),
        )

    def _plan_create(self, intent: MutationIntent) -> tuple[Effect, PendingMutation]:
        key = self._resource.natural_key_from_fields(intent.fields)
        existing = self._cache.find_by_natural_key(key) if key else None

        if existing is not None:
            # One entry per natural key: a second mark overwrites the first.
            optimistic = existing.merged(intent.fields)
        else:
            optimistic = Record.draft(intent.fields, self._resource.default_status)

        if self._resource.is_keyed:
            effect = partial(upsert_by_natural_key, record=optimistic, resource_type=self._resource)
        else:
            effect = partial(upsert_by_id, record=optimistic)
        return effect, PendingMutation(intent=intent, record_id=optimistic.id, optimistic=optimistic)

    # ── Settling ────────────────────────────────────────────────────

    async def _settle(self, pending: PendingMutation) -> None:
        intent = pending.intent
        verb, past = _VERBS[intent.kind]
        try:
            with self._log.timed_step(
                SyncStage.MUTATION,
                f"{verb} {self._resource.item_label} {pending.record_id}",
            ):
                result = await self._send(pending)
        except RemoteFailure as exc:
            self._revert(pending, exc)
            return
        except asyncio.CancelledError:
            self._cache.revert(intent.intent_id)
            pending.state = MutationState.REVERTED
            raise

        self._cache.confirm(intent.intent_id, self._confirmed_effect(pending, result))
        if result is not None and result.id != pending.record_id:
            self._log.step_complete(
                SyncStage.RECONCILE,
                f"{self._resource.item_label} {pending.record_id} is now {result.id}",
            )
            pending.record_id = result.id
        pending.result = result
        pending.state = MutationState.CONFIRMED
        self._publish(
            NotificationLevel.SUCCESS,
            "Success",
            f"{self._resource.item_label.capitalize()} {past} successfully",
            pending.record_id,
        )

    async def _send(self, pending: PendingMutation) -> Record | None:
        intent = pending.intent
        if intent.kind is IntentKind.CREATE:
            return await self._client.create(intent.fields)
        if intent.kind is IntentKind.UPDATE:
            return await self._client.update(pending.record_id, intent.fields)
        await self._client.delete(pending.record_id)
        return None

    def _confirmed_effect(self, pending: PendingMutation, result: Record | None) -> Effect:
        if pending.intent.kind is IntentKind.DELETE or result is None:
            return partial(remove_by_id, record_id=pending.record_id)
        if self._resource.is_keyed:
            return partial(upsert_by_natural_key, record=result, resource_type=self._resource)
        return partial(upsert_by_id, record=result)

    def _revert(self, pending: PendingMutation, exc: RemoteFailure) -> None:
        verb, _ = _VERBS[pending.intent.kind]
        self._cache.revert(pending.intent.intent_id)
        pending.state = MutationState.REVERTED
        pending.error = exc
        self._log.step_error(
            SyncStage.REVERT,
            f"Undid {pending.intent.kind.value} of {self._resource.item_label} {pending.record_id}",
            error=exc,
        )
        self._publish(
            NotificationLevel.ERROR,
            "Error",
            f"Failed to {verb} {self._resource.item_label}: {exc.message}",
            pending.record_id,
        )

    def _publish(
        self, level: NotificationLevel, title: str, message: str, record_id: str | None
    ) -> None:
        if self._notifications is not None:
            self._notifications.notify(
                level,
                title,
                message,
                resource_key=self._resource.key,
                record_id=record_id,
            )
