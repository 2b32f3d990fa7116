from __future__ import annotations

import json
import logging
import os
from typing import Protocol

from msal_extensions import (
    CrossPlatLock,
    FilePersistence,
    FilePersistenceWithDataProtection,
)
from msal_extensions.cache_lock import LockError
from msal_extensions.persistence import PersistenceNotFound

logger = logging.getLogger(__name__)


class KeyValueStorage(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...


class MemoryStorage:
    def __init__(self, initial: dict[str, str] | None = None):
        self._values: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        self._values[key] = value

    def remove(self, key: str) -> None:
        self._values.pop(key, None)


class FileStorage:
    """String values kept in a single JSON document on disk.

    Each write re-reads the document under a cross-process lock so that two
    running clients do not drop each other's keys.
    """

    def __init__(self, path: str):
        self._persistence = self._build_persistence(path)
        self._lock_path = f"{path}.lockfile"

    @staticmethod
    def _build_persistence(path: str):
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        try:
            return FilePersistenceWithDataProtection(path)
        except Exception:
            return FilePersistence(path)

    @property
    def location(self) -> str:
        return self._persistence.get_location()

    def get(self, key: str) -> str | None:
        value = self._load().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        self._update(lambda values: values.__setitem__(key, value))

    def remove(self, key: str) -> None:
        self._update(lambda values: values.pop(key, None))

    def _update(self, mutate) -> None:
        try:
            with CrossPlatLock(self._lock_path):
                values = self._load()
                mutate(values)
                self._persistence.save(json.dumps(values))
        except LockError as error:
            raise OSError(f"Token store {self.location} is locked by another process") from error

    def _load(self) -> dict[str, object]:
        try:
            content = self._persistence.load()
        except PersistenceNotFound:
            return {}
        except ValueError as error:
            logger.warning("Token store %s could not be decoded (%s); ignoring its contents", self.location, error)
            return {}
        if not content:
            return {}
        try:
            values = json.loads(content)
        except ValueError:
            logger.warning("Token store %s is not valid JSON; ignoring its contents", self.location)
            return {}
        return values if isinstance(values, dict) else {}
