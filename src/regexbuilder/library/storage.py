"""Durable key-value storage backends for the pattern library."""

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path

from regexbuilder import paths

logger = logging.getLogger(__name__)


class KeyValueStorage(ABC):
    """Abstract string-to-string storage."""

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Return the value stored under `key`, or None if absent."""
        raise NotImplementedError

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store `value` under `key`."""
        raise NotImplementedError


class MemoryStorage(KeyValueStorage):
    """Process-local storage, used by tests and ephemeral sessions."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        """Initialize the storage with optional initial content."""
        self.data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        """Return the value stored under `key`, or None if absent."""
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        """Store `value` under `key`."""
        self.data[key] = value


class JsonFileStorage(KeyValueStorage):
    """
    Storage backed by a single JSON object file.

    The whole file is read on every `get` and rewritten on every `set`. A file
    that is missing or unreadable behaves as empty storage.
    """

    def __init__(self, file_path: Path | None = None) -> None:
        """
        Initialize the storage.

        Args:
            file_path: The JSON file to use. Defaults to the storage file in the
                RegexBuilder data directory.

        """
        self.file_path = file_path or paths.get_storage_file_path()
        logger.debug("Storage file path initialized to: %s", self.file_path)

    def _read(self) -> dict[str, str]:
        if not self.file_path.exists():
            return {}
        try:
            with self.file_path.open("rb") as f:
                data = json.load(f)
        except (OSError, ValueError):
            logger.warning("Could not read or parse storage file at %s.", self.file_path)
            return {}
        if not isinstance(data, dict):
            logger.warning("Storage file at %s is not a JSON object. Ignoring its content.", self.file_path)
            return {}
        return {k: v for k, v in data.items() if isinstance(v, str)}

    def get(self, key: str) -> str | None:
        """Return the value stored under `key`, or None if absent."""
        return self._read().get(key)

    def set(self, key: str, value: str) -> None:
        """Store `value` under `key`, keeping every other key in the file."""
        data = self._read()
        data[key] = value
        try:
            paths.ensure_dir_exists(self.file_path.parent)
            with self.file_path.open("w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
        except OSError:
            logger.exception("Failed to write storage file %s", self.file_path)
