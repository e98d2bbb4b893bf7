"""Dependency wiring — builds screens from Settings and the infrastructure adapters."""

import httpx

from admin_sync.application.interfaces import FallbackStore, RemoteResourceClient
from admin_sync.application.services import NotificationCenter
from admin_sync.config import get_settings
from admin_sync.domain.entities import ResourceType, get_resource_type
from admin_sync.infrastructure.http import HttpResourceClient
from admin_sync.infrastructure.storage.json_fallback_store import JsonFileFallbackStore
from admin_sync.presentation.screens import AttendanceScreen, RecordScreen


def get_fallback_store() -> FallbackStore:
    """Provides the JSON-file fallback store under the configured directory."""
    settings = get_settings()
    return JsonFileFallbackStore(settings.fallback_dir)


def get_resource_client(
    resource_type: ResourceType,
    http_client: httpx.AsyncClient | None = None,
) -> RemoteResourceClient:
    """Provides an HTTP client for one resource type, pointed at the configured backend."""
    settings = get_settings()
    return HttpResourceClient(
        resource_type,
        settings.api_base_url,
        timeout=settings.request_timeout_seconds,
        http_client=http_client,
    )


def build_screen(
    resource_key: str,
    *,
    http_client: httpx.AsyncClient | None = None,
    store: FallbackStore | None = None,
    notifications: NotificationCenter | None = None,
) -> RecordScreen:
    """Provides a fresh screen (its own cache, coordinator and scheduler) for ``resource_key``.

    Attendance resources get an AttendanceScreen.
    """
    settings = get_settings()
    resource_type = get_resource_type(resource_key)
    screen_cls = AttendanceScreen if resource_type.is_keyed else RecordScreen
    return screen_cls(
        resource_type,
        get_resource_client(resource_type, http_client),
        store or get_fallback_store(),
        notifications=notifications or NotificationCenter(settings.notification_history_size),
        page_size=settings.page_size,
        refresh_interval=settings.refresh_interval_seconds,
    )
