"""Refresh scheduler — activation, periodic and manual refreshes for one screen."""

import asyncio
import logging
from collections.abc import Callable
from typing import Any

from admin_sync.application.services.collection_cache import (
    CollectionView,
    SynchronizedCollectionCache,
)
from admin_sync.infrastructure.logging.colored_logger import SyncLogger, SyncStage

logger = logging.getLogger(__name__)

# Periodic refresh interval in seconds
DEFAULT_INTERVAL = 30.0


class RefreshScheduler:
    """Keeps one cache fresh while its screen is mounted.

    Created per screen, never shared: ``stop()`` on one screen cannot affect
    another. Each refresh snapshots the screen's filter state right before
    and hands it back right after, so a refresh never resets what the user
    is looking at.
    """

    def __init__(
        self,
        cache: SynchronizedCollectionCache,
        *,
        interval_seconds: float = DEFAULT_INTERVAL,
        snapshot_filters: Callable[[], Any] | None = None,
        restore_filters: Callable[[Any], None] | None = None,
    ) -> None:
        if interval_seconds <= 0:
            raise ValueError(f"interval_seconds must be positive, got {interval_seconds}")
        self._cache = cache
        self._interval = interval_seconds
        self._snapshot_filters = snapshot_filters
        self._restore_filters = restore_filters
        self._running = False
        self._task: asyncio.Task | None = None
        self._refreshes: set[asyncio.Task] = set()
        self._log = SyncLogger(f"SyncCore.{cache.resource_type.key}")

    @property
    def is_active(self) -> bool:
        return self._running

    @property
    def interval_seconds(self) -> float:
        return self._interval

    async def start(self) -> CollectionView | None:
        """Activate: refresh once now, then every ``interval_seconds``."""
        if self._running:
            return self._cache.current()
        self._running = True
        self._log.step_start(
            SyncStage.SCHEDULER,
            f"Activated {self._cache.resource_type.label}",
            interval=f"{self._interval:g}s",
        )
        view = await self.refresh_now()
        if self._running:
            self._task = asyncio.create_task(self._loop())
        return view

    async def refresh_now(self) -> CollectionView | None:
        """Manual refresh. Returns None when the scheduler is not active or was stopped meanwhile."""
        if not self._running:
            return None
        task = asyncio.get_running_loop().create_task(self._refresh())
        self._refreshes.add(task)
        task.add_done_callback(self._refreshes.discard)
        try:
            return await task
        except asyncio.CancelledError:
            current = asyncio.current_task()
            if current is not None and current.cancelling():
                raise
            # Cancelled by stop(), not by our caller.
            return None

    async def stop(self) -> None:
        """Deactivate and cancel the timer and any refresh still in flight."""
        self._running = False
        tasks = [t for t in (self._task, *self._refreshes) if t is not None and not t.done()]
        self._task = None
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self._log.step_complete(
            SyncStage.SCHEDULER, f"Deactivated {self._cache.resource_type.label}"
        )

    async def _loop(self) -> None:
        """Periodic loop; a failing tick is logged and the next one still runs."""
        while self._running:
            try:
                await asyncio.sleep(self._interval)
                if not self._running:
                    break
                await self._refresh()
            except asyncio.CancelledError:
                break
            except Exception:
                logger.exception(
                    "Periodic refresh of %s failed", self._cache.resource_type.key
                )

    async def _refresh(self) -> CollectionView:
        snapshot = self._snapshot_filters() if self._snapshot_filters else None
        view = await self._cache.refresh()
        if self._restore_filters is not None and self._snapshot_filters is not None:
            self._restore_filters(snapshot)
        return view
