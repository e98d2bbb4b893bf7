import logging
from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings

_config_logger = logging.getLogger(__name__)

_PROJECT_DIR = Path(__file__).resolve().parents[1]
_ENV_FILES = (
    _PROJECT_DIR / ".env",
    ".env",
)


class Settings(BaseSettings):
    """Client settings loaded from environment variables."""

    app_title: str = "Admin Sync"
    app_env: str = "development"

    # Backend data service
    api_base_url: str = "http://localhost:4000/api"
    request_timeout_seconds: float = 15.0

    # Screen behaviour
    refresh_interval_seconds: float = 30.0
    page_size: int = 10

    # Durable fallback snapshots (one JSON file per resource type)
    fallback_dir: str = "data/fallback"

    # Notifications kept for polling views
    notification_history_size: int = 50

    # Logging — per-category log levels (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    log_level: str = "INFO"                  # Root / app-wide
    log_level_http: str = "WARNING"          # httpx / httpcore — outbound HTTP
    log_level_sync: str = "INFO"             # cache, mutations, scheduler
    log_level_storage: str = "WARNING"       # fallback store reads/writes

    model_config = {
        "env_file": _ENV_FILES,
        "env_file_encoding": "utf-8",
    }

    def model_post_init(self, __context: object) -> None:
        """Keep intervals inside the range the screens were built for."""
        if self.refresh_interval_seconds <= 0:
            _config_logger.warning(
                "refresh_interval_seconds=%s is not positive; using 30s",
                self.refresh_interval_seconds,
            )
            object.__setattr__(self, "refresh_interval_seconds", 30.0)
        if self.page_size < 1:
            _config_logger.warning("page_size=%s is not positive; using 10", self.page_size)
            object.__setattr__(self, "page_size", 10)


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance — reads .env once."""
    return Settings()
