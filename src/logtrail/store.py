"""
Persisted level override stores.

A store maps "<namespace>:<logger>:level" keys to numeric levels. When a
logger has a store, its level reads through the store and every level
write goes to the store as well, so a level chosen once outlives the
logger objects of a session.

  - MemoryLevelStore: session-scoped dict, shared by every registry that
    is handed the same instance
  - JsonFileLevelStore: a session file; processes pointed at the same path
    see each other's overrides (last write wins, no coordination)
"""

import json
import threading
from abc import ABC, abstractmethod
from pathlib import Path


def level_key(namespace: str, name: str) -> str:
    """Override key for a logger."""
    return f"{namespace}:{name}:level"


class LevelStore(ABC):
    """Base store. get() returns None for keys never written."""

    @abstractmethod
    def get(self, key: str) -> int | float | None: ...

    @abstractmethod
    def set(self, key: str, value: int | float) -> None: ...

    def delete(self, key: str) -> None:
        """Remove an override. Stores that cannot delete ignore the call."""
        pass

    def keys(self) -> list[str]:
        return []


class MemoryLevelStore(LevelStore):
    """In-process override store."""

    def __init__(self, initial: dict[str, int | float] | None = None):
        self._values: dict[str, int | float] = dict(initial or {})

    def get(self, key: str) -> int | float | None:
        return self._values.get(key)

    def set(self, key: str, value: int | float) -> None:
        self._values[key] = value

    def delete(self, key: str) -> None:
        self._values.pop(key, None)

    def keys(self) -> list[str]:
        return sorted(self._values)


class JsonFileLevelStore(LevelStore):
    """
    Override store backed by a JSON object on disk.

    The file is re-read on every get() so overrides written by another
    process sharing the path are picked up. A missing or unreadable file
    reads as empty.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self._lock = threading.Lock()

    def _load(self) -> dict[str, int | float]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        try:
            data = json.loads(raw) if raw.strip() else {}
        except json.JSONDecodeError:
            return {}
        if not isinstance(data, dict):
            return {}
        return {
            str(k): v for k, v in data.items()
            if isinstance(v, (int, float)) and not isinstance(v, bool)
        }

    def _save(self, data: dict[str, int | float]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, sort_keys=True, indent=2), encoding="utf-8")

    def get(self, key: str) -> int | float | None:
        with self._lock:
            return self._load().get(key)

    def set(self, key: str, value: int | float) -> None:
        with self._lock:
            data = self._load()
            data[key] = value if isinstance(value, float) else int(value)
            self._save(data)

    def delete(self, key: str) -> None:
        with self._lock:
            data = self._load()
            if data.pop(key, None) is not None:
                self._save(data)

    def keys(self) -> list[str]:
        with self._lock:
            return sorted(self._load())
