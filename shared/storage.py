"""
Durable key-value storage for client session state.

Values are strings, mirroring browser local storage. The session manager
persists tokens, the serialized user, and rate-limit timestamps here.
"""

import json
import logging
from pathlib import Path
from typing import Optional, Protocol, Union, runtime_checkable

from .config import get_settings

logger = logging.getLogger(__name__)

# Keys shared by the API client and the session manager
TOKEN_KEY = "token"
REFRESH_TOKEN_KEY = "refreshToken"
USER_KEY = "user"
LAST_VISITED_PATH_KEY = "lastVisitedPath"


@runtime_checkable
class IKeyValueStore(Protocol):
    """String key-value store that survives process restarts."""

    def get(self, key: str) -> Optional[str]:
        """Return the stored value, or None if the key is absent."""
        ...

    def set(self, key: str, value: str) -> None:
        """Store a value, replacing any previous one."""
        ...

    def remove(self, key: str) -> None:
        """Delete a key. Missing keys are ignored."""
        ...


class InMemoryStore:
    """
    Store backed by a dict.

    For testing and short-lived processes. Use JsonFileStore when state
    must survive a restart.
    """

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._data)


class JsonFileStore:
    """
    Store persisted as a single JSON object on disk.

    The whole file is rewritten on every change. A file that cannot be
    parsed is treated as empty and replaced on the next write.
    """

    def __init__(self, path: Union[str, Path]):
        self._path = Path(path)
        self._data = self._load()

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Ignoring unreadable session store {self._path}: {e}")
            return {}
        if not isinstance(raw, dict):
            logger.warning(f"Ignoring malformed session store {self._path}")
            return {}
        return {str(k): str(v) for k, v in raw.items()}

    def _flush(self) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_suffix(self._path.suffix + ".tmp")
        tmp.write_text(json.dumps(self._data, indent=2), encoding="utf-8")
        tmp.replace(self._path)

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value
        self._flush()

    def remove(self, key: str) -> None:
        if key in self._data:
            del self._data[key]
            self._flush()


# Module-level store cache
_store: Optional[JsonFileStore] = None


def get_store() -> JsonFileStore:
    """Get the file-backed store configured by HIVE_STORAGE_PATH."""
    global _store
    if _store is None:
        _store = JsonFileStore(get_settings().storage_path)
    return _store


def reset_store_cache() -> None:
    """
    Reset the cached store.

    Useful for testing or when configuration changes.
    """
    global _store
    _store = None
