"""Key-value storage backends for persisted game state.

Every value is text, usually JSON, so persisted state stays human readable.
Two backends are provided:

- MemoryStore: a plain dict, for tests and throwaway sessions
- JSONFileStore: one JSON object in a file, rewritten atomically on each change
"""

from __future__ import annotations

import json
import os
import pathlib
from typing import Protocol, runtime_checkable

from geocoin.geocoin_logging import create_module_logger

__all__ = ["JSONFileStore", "KeyValueStore", "MemoryStore"]

_geocoin_logger = create_module_logger()


@runtime_checkable
class KeyValueStore(Protocol):
    """Protocol for durable string storage."""

    def get(self, key: str) -> str | None:
        """Return the value stored under key, or None."""
        ...

    def set(self, key: str, value: str) -> None:
        """Store value under key, replacing any previous value."""
        ...

    def remove(self, key: str) -> None:
        """Forget key; a missing key is not an error."""
        ...


class MemoryStore:
    """In-memory key-value store."""

    def __init__(self, data: dict[str, str] | None = None):
        """Create a store, optionally seeded with data."""
        self.data: dict[str, str] = dict(data) if data else {}

    def get(self, key: str) -> str | None:  # noqa: D102
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:  # noqa: D102
        self.data[key] = value

    def remove(self, key: str) -> None:  # noqa: D102
        self.data.pop(key, None)

    def __len__(self):  # noqa: D105
        return len(self.data)


class JSONFileStore:
    """Key-value store kept as a single JSON object on disk.

    Usage:
        store = JSONFileStore("geocoin_state.json")
        store.set("inventory", json.dumps(["0:0#1"]))

    A file that does not parse as a JSON object is logged and treated as
    empty; it is only overwritten on the next write.
    """

    def __init__(self, path: str | os.PathLike):
        """Open (or prepare to create) the store at path."""
        self.path = pathlib.Path(path)
        self.data: dict[str, str] = self._read()

    def _read(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, encoding="utf-8") as f:
                content = json.load(f)
        except (OSError, ValueError) as e:
            _geocoin_logger.warning(f"could not read state file {self.path}: {e}")
            return {}
        if not isinstance(content, dict):
            _geocoin_logger.warning(f"state file {self.path} is not a JSON object")
            return {}
        return {str(k): v for k, v in content.items() if isinstance(v, str)}

    def _write(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(self.data, f, indent=2)
        os.replace(tmp, self.path)

    def get(self, key: str) -> str | None:  # noqa: D102
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:  # noqa: D102
        self.data[key] = value
        self._write()

    def remove(self, key: str) -> None:  # noqa: D102
        if self.data.pop(key, None) is not None:
            self._write()

    def clear(self) -> None:
        """Remove every key and delete the file."""
        self.data.clear()
        self.path.unlink(missing_ok=True)
