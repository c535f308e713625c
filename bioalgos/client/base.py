from __future__ import annotations

from abc import ABC, abstractmethod


class BaseStore(ABC):
    """One storage path for the logical ``(collection, verb, key, body)`` calls.

    Implementations return plain JSON records. A missing record is ``None``,
    never an exception.
    """

    NAME: str = ""

    @abstractmethod
    def list(self, collection: str) -> list[dict]:
        ...

    @abstractmethod
    def get(self, collection: str, key) -> dict | None:
        ...

    @abstractmethod
    def get_by_slug(self, collection: str, slug: str) -> dict | None:
        ...

    @abstractmethod
    def create(self, collection: str, record: dict) -> dict:
        ...

    @abstractmethod
    def update(self, collection: str, key, record: dict) -> dict | None:
        """Full replace of the record matching *key*; ``None`` if absent."""
        ...

    @abstractmethod
    def delete(self, collection: str, key) -> None:
        """Remove the record matching *key*. Deleting a missing key is a no-op."""
        ...
