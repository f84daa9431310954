"""Durable key-value storage backends for the cart.

The cart only needs ``get`` and ``set`` on string values, so storage is
an injected capability rather than a global.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Protocol

import structlog

logger = structlog.get_logger()


class KeyValueStorage(Protocol):
    """String key-value storage."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


class InMemoryStorage:
    """Process-local storage, mainly for tests."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value


class JsonFileStorage:
    """Storage backed by one JSON object file.

    Writes replace the file atomically, so a crash mid-write never leaves
    a truncated file behind. An unreadable file behaves as empty storage.
    """

    def __init__(self, path: str | Path) -> None:
        """Initialize file storage.

        Args:
            path: File holding the JSON object. Created on first write.
        """
        self.path = Path(path)

    def _load(self) -> dict[str, str]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning("Storage file is not valid JSON", path=str(self.path), error=str(e))
            return {}
        if not isinstance(data, dict):
            logger.warning("Storage file is not a JSON object", path=str(self.path))
            return {}
        return {k: v for k, v in data.items() if isinstance(v, str)}

    def get(self, key: str) -> str | None:
        return self._load().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value

        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f)
            os.replace(tmp_path, self.path)
        except BaseException:
            Path(tmp_path).unlink(missing_ok=True)
            raise
