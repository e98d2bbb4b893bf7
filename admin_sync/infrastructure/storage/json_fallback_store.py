"""Local JSON snapshots of each collection — the screens' durable fallback.

Storage layout:
    <fallback_dir>/<resource_key>.json      — JSON array of record objects
"""

import json
import logging
import os
import re
import tempfile
from collections.abc import Iterable
from pathlib import Path

from admin_sync.application.interfaces import FallbackStore
from admin_sync.domain.entities import Record
from admin_sync.domain.exceptions import FallbackStoreCorrupt

logger = logging.getLogger(__name__)


def _sanitise(name: str, max_len: int = 80) -> str:
    """Replace non-word characters with underscores and truncate."""
    return re.sub(r"[^\w\-]", "_", name)[:max_len].strip("_") or "unnamed"


def encode_snapshot(records: Iterable[Record]) -> str:
    return json.dumps([record.to_dict() for record in records], ensure_ascii=False)


def decode_snapshot(resource_key: str, raw: str) -> tuple[Record, ...]:
    """Parse a snapshot; raises FallbackStoreCorrupt on any structural problem."""
    try:
        data = json.loads(raw)
    except ValueError as exc:
        raise FallbackStoreCorrupt(resource_key, f"invalid JSON ({exc})") from exc
    if not isinstance(data, list):
        raise FallbackStoreCorrupt(resource_key, f"expected a list, got {type(data).__name__}")

    records: list[Record] = []
    for index, item in enumerate(data):
        if not isinstance(item, dict):
            raise FallbackStoreCorrupt(resource_key, f"item {index} is not an object")
        try:
            records.append(Record.from_dict(item))
        except (KeyError, TypeError, ValueError) as exc:
            raise FallbackStoreCorrupt(resource_key, f"item {index}: {exc!r}") from exc
    return tuple(records)


class JsonFileFallbackStore(FallbackStore):
    """Infrastructure adapter for snapshot files on the local disk."""

    def __init__(self, directory: str | Path):
        self._directory = Path(directory)
        self._directory.mkdir(parents=True, exist_ok=True)

    def path_for(self, resource_key: str) -> Path:
        return self._directory / f"{_sanitise(resource_key)}.json"

    def save(self, resource_key: str, records: Iterable[Record]) -> None:
        """Write the snapshot atomically: temp file in the same folder, then rename."""
        payload = encode_snapshot(records)
        dest_path = self.path_for(resource_key)

        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{dest_path.stem}_", suffix=".tmp", dir=self._directory
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as tmp:
                tmp.write(payload)
            os.replace(tmp_name, dest_path)
        except OSError:
            Path(tmp_name).unlink(missing_ok=True)
            raise

        logger.debug("Saved fallback snapshot: %s (%d bytes)", dest_path, len(payload))

    def load(self, resource_key: str) -> tuple[Record, ...] | None:
        file_path = self.path_for(resource_key)
        try:
            raw = file_path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Could not read fallback snapshot %s: %s", file_path, exc)
            return None

        try:
            return decode_snapshot(resource_key, raw)
        except FallbackStoreCorrupt as exc:
            logger.warning("%s — treating as absent", exc)
            return None

    def clear(self, resource_key: str) -> None:
        self.path_for(resource_key).unlink(missing_ok=True)
        logger.info("Cleared fallback snapshot: %s", resource_key)


class InMemoryFallbackStore(FallbackStore):
    """Process-local store using the same JSON encoding as the file store.

    Useful for ephemeral screens and tests; snapshots do not survive a restart.
    """

    def __init__(self) -> None:
        self._snapshots: dict[str, str] = {}

    def save(self, resource_key: str, records: Iterable[Record]) -> None:
        self._snapshots[resource_key] = encode_snapshot(records)

    def load(self, resource_key: str) -> tuple[Record, ...] | None:
        raw = self._snapshots.get(resource_key)
        if raw is None:
            return None
        try:
            return decode_snapshot(resource_key, raw)
        except FallbackStoreCorrupt as exc:
            logger.warning("%s — treating as absent", exc)
            return None

    def clear(self, resource_key: str) -> None:
        self._snapshots.pop(resource_key, None)

    def put_raw(self, resource_key: str, raw: str) -> None:
        """Store an arbitrary payload (used to simulate damaged snapshots)."""
        self._snapshots[resource_key] = raw
