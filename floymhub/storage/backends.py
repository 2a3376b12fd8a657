"""Mini README: Abstract key-value store and concrete backends.

Structure:
    * KeyValueStore - abstract interface with ``load``/``save``.
    * MemoryKeyValueStore - dictionary backed implementation.
    * JsonFileKeyValueStore - one ``<key>.json`` file per key on disk.

Backends deal in serialised text only; encoding entities is the ledger's job.
Write failures propagate as ``OSError`` so the ledger can decide how loudly to
report them.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Iterable, Optional

from ..logging_utils import get_logger

LOGGER = get_logger(__name__)

_SAFE_KEY = re.compile(r"^[A-Za-z0-9_.-]+$")


class KeyValueStore(ABC):
    """Minimal string store used to persist ledger collections."""

    @abstractmethod
    def load(self, key: str) -> Optional[str]:
        """Return the stored text for ``key`` or ``None`` when absent."""

    @abstractmethod
    def save(self, key: str, value: str) -> None:
        """Persist ``value`` under ``key`` replacing any previous content."""

    def keys(self) -> Iterable[str]:
        """Return the keys currently held, for diagnostics."""

        return []


class MemoryKeyValueStore(KeyValueStore):
    """In-process store; contents vanish with the object."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._data: Dict[str, str] = dict(initial or {})

    def load(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def save(self, key: str, value: str) -> None:
        self._data[key] = value

    def keys(self) -> Iterable[str]:
        return sorted(self._data.keys())


class JsonFileKeyValueStore(KeyValueStore):
    """Store each key as a UTF-8 JSON file under ``directory``."""

    def __init__(self, directory: Path) -> None:
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)
        LOGGER.debug("File key-value store rooted at %s", self.directory)

    def _path_for(self, key: str) -> Path:
        if not _SAFE_KEY.match(key):
            raise ValueError(f"Unsupported storage key: {key!r}")
        return self.directory / f"{key}.json"

    def load(self, key: str) -> Optional[str]:
        path = self._path_for(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def save(self, key: str, value: str) -> None:
        path = self._path_for(key)
        temp_path = path.with_suffix(".json.tmp")
        temp_path.write_text(value, encoding="utf-8")
        temp_path.replace(path)
        LOGGER.debug("Wrote %s bytes to %s", len(value), path)

    def keys(self) -> Iterable[str]:
        return sorted(path.stem for path in self.directory.glob("*.json"))
