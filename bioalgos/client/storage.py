"""Local persistent key-value store.

Values are JSON-serialized strings, mirroring browser storage. ``StoreFacade``
is the only way the rest of the package touches a store: it owns the JSON
codec and serializes read-modify-write sequences within the process.
"""
from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from abc import ABC, abstractmethod
from contextlib import contextmanager

from .errors import CorruptStoreError

logger = logging.getLogger(__name__)

# Well-known keys
PROBLEMS_KEY = 'problems'
SUBMISSIONS_KEY = 'submissions'
USERS_KEY = 'users'
SESSION_USER_KEY = 'user'
BROKER_USER_KEY = 'currentUser'
DRAFT_KEY = 'problem-editor-draft'


class KeyValueStore(ABC):
    """String-to-string storage backend."""

    @abstractmethod
    def get_item(self, key: str) -> str | None:
        ...

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        ...

    @abstractmethod
    def remove_item(self, key: str) -> None:
        ...

    @abstractmethod
    def keys(self) -> list[str]:
        ...


class MemoryStore(KeyValueStore):
    """In-process store; contents vanish with the object."""

    def __init__(self, initial: dict | None = None):
        self._data = dict(initial or {})

    def get_item(self, key):
        return self._data.get(key)

    def set_item(self, key, value):
        self._data[key] = str(value)

    def remove_item(self, key):
        self._data.pop(key, None)

    def keys(self):
        return list(self._data)


class JsonFileStore(KeyValueStore):
    """Store backed by a single JSON object on disk.

    The file is re-read on every access so separate processes sharing the
    path see each other's writes. Writes replace the file atomically; two
    writers racing on the same key are last-write-wins.
    """

    def __init__(self, path: str):
        self.path = path

    def _load(self) -> dict:
        if not os.path.exists(self.path):
            return {}
        with open(self.path, encoding='utf-8') as f:
            raw = f.read()
        if not raw.strip():
            return {}
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise CorruptStoreError(self.path, e) from e
        if not isinstance(data, dict):
            raise CorruptStoreError(self.path, 'top-level value is not an object')
        return data

    def _dump(self, data: dict) -> None:
        directory = os.path.dirname(os.path.abspath(self.path))
        os.makedirs(directory, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=directory, prefix='.store-', suffix='.tmp')
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                json.dump(data, f, ensure_ascii=False)
            os.replace(tmp_path, self.path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise

    def get_item(self, key):
        return self._load().get(key)

    def set_item(self, key, value):
        data = self._load()
        data[key] = str(value)
        self._dump(data)

    def remove_item(self, key):
        data = self._load()
        if key in data:
            del data[key]
            self._dump(data)

    def keys(self):
        return list(self._load())


class StoreFacade:
    """JSON view over a ``KeyValueStore`` with an explicit write lock."""

    def __init__(self, store: KeyValueStore):
        self.store = store
        self._lock = threading.RLock()

    @contextmanager
    def locked(self):
        """Hold the facade lock across a read-modify-write sequence."""
        with self._lock:
            yield self

    def read(self, key: str, default=None):
        raw = self.store.get_item(key)
        if raw is None:
            return default
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            logger.error(f'Corrupt value under {key!r} in local store')
            raise CorruptStoreError(key, e) from e

    def write(self, key: str, value) -> None:
        with self._lock:
            self.store.set_item(key, json.dumps(value, ensure_ascii=False))

    def remove(self, key: str) -> None:
        with self._lock:
            self.store.remove_item(key)

    def mutate(self, key: str, fn, default=None):
        """Apply ``fn(current) -> new`` to the value under *key* and persist it."""
        with self._lock:
            new_value = fn(self.read(key, default))
            self.write(key, new_value)
            return new_value

    def read_list(self, key: str) -> list:
        value = self.read(key, [])
        return value if isinstance(value, list) else []
