"""
Key-value stores for cached content records.

The service only needs get_string / set_string / delete, so any object with
those methods works. Two are provided:
- FileStore:   one JSON file per key in a directory (default ./content_cache/)
- MemoryStore: a dict, for tests and short-lived processes

Files are human-readable, so a cached record can be inspected or hand-edited
when a page changes and the extractor needs a fix.
"""

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from .exceptions import StorageError
from .logger import get_module_logger

logger = get_module_logger("storage")


class FileStore:
    """
    File-based string store.

    Each key maps to <cache_dir>/<key>.json holding the value plus when it was
    written. Reads never raise: a missing or unreadable file is a miss.
    """

    def __init__(self, cache_dir: Optional[str] = None):
        """
        Initialize the store.

        Args:
            cache_dir: Directory for the JSON files.
                      Defaults to ./content_cache/
        """
        if cache_dir is None:
            cache_dir = Path.cwd() / "content_cache"

        self.cache_dir = Path(cache_dir)
        self.cache_dir.mkdir(parents=True, exist_ok=True)

        logger.info(f"Content store initialized at: {self.cache_dir}")

    def _path(self, key: str) -> Path:
        # Keys are ours (e.g. "events_content_cache_v1"), but keep them
        # filesystem-safe anyway
        safe_key = "".join(c if c.isalnum() or c in '-_.' else '_' for c in key)
        return self.cache_dir / f"{safe_key}.json"

    def get_string(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.exists():
            logger.debug(f"Store miss for key: {key}")
            return None

        try:
            data = json.loads(path.read_text(encoding="utf-8"))
            value = data["value"]
        except (OSError, ValueError, KeyError, TypeError) as e:
            logger.warning(f"Failed to read store entry {path.name}: {e}")
            return None

        if not isinstance(value, str):
            logger.warning(f"Store entry {path.name} holds a non-string value, ignoring")
            return None
        return value

    def _write(self, key: str, value: str) -> Path:
        path = self._path(key)
        entry = {
            "key": key,
            "stored_at": datetime.now(timezone.utc).isoformat(),
            "value": value,
        }
        try:
            path.write_text(json.dumps(entry, indent=2, ensure_ascii=False), encoding="utf-8")
        except OSError as e:
            raise StorageError(
                f"Could not write store entry: {e}",
                key=key,
                details={"path": str(path)}
            ) from e
        return path

    def set_string(self, key: str, value: str) -> bool:
        """Persist a value. Returns False (and logs) instead of raising on failure."""
        try:
            path = self._write(key, value)
        except StorageError as e:
            logger.warning(f"{e.message} (key={e.key})")
            return False

        logger.debug(f"Stored key: {key} -> {path}")
        return True

    def exists(self, key: str) -> bool:
        return self._path(key).exists()

    def delete(self, key: str) -> bool:
        path = self._path(key)
        if path.exists():
            path.unlink()
            logger.info(f"Deleted store entry for key: {key}")
            return True
        return False

    def clear(self) -> int:
        """Remove every entry. Returns count of deleted files."""
        count = 0
        for path in self.cache_dir.glob("*.json"):
            path.unlink()
            count += 1
        logger.info(f"Cleared {count} store entries")
        return count


class MemoryStore:
    """In-process store with the same interface as FileStore."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self.values: dict[str, str] = dict(initial or {})

    def get_string(self, key: str) -> Optional[str]:
        return self.values.get(key)

    def set_string(self, key: str, value: str) -> bool:
        self.values[key] = value
        return True

    def exists(self, key: str) -> bool:
        return key in self.values

    def delete(self, key: str) -> bool:
        return self.values.pop(key, None) is not None

    def clear(self) -> int:
        count = len(self.values)
        self.values.clear()
        return count


# Singleton default store, shared by services created without an explicit one
_default_store: Optional[FileStore] = None


def get_default_store() -> FileStore:
    """Get or create the default store instance."""
    global _default_store
    if _default_store is None:
        _default_store = FileStore()
    return _default_store
