"""Notification center — in-process broadcaster for user-facing toasts."""

import asyncio
import logging
from collections import deque
from collections.abc import AsyncGenerator

from admin_sync.domain.entities import Notification, NotificationLevel

logger = logging.getLogger(__name__)

_QUEUE_SIZE = 100


class NotificationCenter:
    """Broadcasts non-blocking notifications from the sync core to views.

    Each subscriber gets its own asyncio.Queue; publishing pushes to all of
    them without awaiting. A bounded history is kept for views that poll
    instead of subscribing.
    """

    def __init__(self, history_size: int = 50) -> None:
        self._queues: list[asyncio.Queue[Notification | None]] = []
        self._history: deque[Notification] = deque(maxlen=history_size)

    async def subscribe(self) -> AsyncGenerator[Notification, None]:
        """Yield notifications as they are published until shutdown()."""
        queue: asyncio.Queue[Notification | None] = asyncio.Queue(maxsize=_QUEUE_SIZE)
        self._queues.append(queue)
        try:
            while True:
                notification = await queue.get()
                if notification is None:
                    break
                yield notification
        finally:
            if queue in self._queues:
                self._queues.remove(queue)

    def publish(self, notification: Notification) -> None:
        """Record and fan out a notification. Never blocks, never raises."""
        self._history.append(notification)
        dead_queues: list[asyncio.Queue[Notification | None]] = []

        for queue in self._queues:
            try:
                queue.put_nowait(notification)
            except asyncio.QueueFull:
                dead_queues.append(queue)
                logger.warning("Notification subscriber queue full — disconnecting")

        for q in dead_queues:
            self._queues.remove(q)
            # Make room for the sentinel so the subscriber loop ends.
            try:
                q.get_nowait()
            except asyncio.QueueEmpty:
                pass
            q.put_nowait(None)

    def notify(
        self,
        level: NotificationLevel,
        title: str,
        message: str,
        *,
        resource_key: str = "",
        record_id: str | None = None,
    ) -> Notification:
        notification = Notification(
            level=level,
            title=title,
            message=message,
            resource_key=resource_key,
            record_id=record_id,
        )
        self.publish(notification)
        return notification

    async def shutdown(self) -> None:
        """Disconnect all subscribers."""
        for queue in self._queues:
            try:
                queue.put_nowait(None)
            except asyncio.QueueFull:
                queue.get_nowait()
                queue.put_nowait(None)
        self._queues.clear()

    @property
    def history(self) -> list[Notification]:
        return list(self._history)

    @property
    def subscriber_count(self) -> int:
        return len(self._queues)
