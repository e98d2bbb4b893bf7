"""Logging setup for the sync core.

Each Settings ``log_level_*`` field governs a group of loggers, so periodic
refresh chatter or httpx request lines can be turned down without hiding
fallback and revert warnings.

Usage:
    from admin_sync.infrastructure.logging.log_config import setup_logging
    setup_logging()   # once, before the first screen is activated
"""

import logging
import sys

from admin_sync.config import Settings, get_settings

# Settings field -> logger names it controls
_LEVEL_GROUPS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("log_level_http", ("httpx", "httpcore", "admin_sync.infrastructure.http")),
    # SyncCore.<resource key> loggers come from SyncLogger
    ("log_level_sync", ("admin_sync.application.services", "admin_sync.presentation", "SyncCore")),
    ("log_level_storage", ("admin_sync.infrastructure.storage",)),
)

_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"
_DATE_FORMAT = "%H:%M:%S"


def setup_logging(settings: Settings | None = None) -> dict[str, int]:
    """Apply log levels from Settings; returns the level set per logger name."""
    settings = settings or get_settings()

    root = logging.getLogger()
    root.setLevel(_level(settings.log_level))
    if not root.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(_FORMAT, datefmt=_DATE_FORMAT))
        root.addHandler(handler)

    applied: dict[str, int] = {}
    for field_name, logger_names in _LEVEL_GROUPS:
        level = _level(getattr(settings, field_name))
        for name in logger_names:
            logging.getLogger(name).setLevel(level)
            applied[name] = level

    logging.getLogger(__name__).debug(
        "Log levels: root=%s http=%s sync=%s storage=%s",
        settings.log_level,
        settings.log_level_http,
        settings.log_level_sync,
        settings.log_level_storage,
    )
    return applied


def _level(name: str) -> int:
    """Level constant for ``name``; unknown names mean INFO."""
    value = logging.getLevelName(name.strip().upper())
    return value if isinstance(value, int) else logging.INFO
