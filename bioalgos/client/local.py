from __future__ import annotations

import logging
import time

from .base import BaseStore
from .errors import ConflictError
from .seed import sample_problems
from .storage import PROBLEMS_KEY, StoreFacade

logger = logging.getLogger(__name__)


def _same_id(item, key) -> bool:
    # Stored ids may be numeric while keys arrive as strings (e.g. from a URL)
    return isinstance(item, dict) and str(item.get('id')) == str(key)


def next_problem_id(items: list) -> int:
    """``max(existing numeric ids) + 1``, or 1 for an empty collection."""
    ids = []
    for item in items:
        try:
            ids.append(int(item.get('id')))
        except (TypeError, ValueError):
            continue
    return max(ids) + 1 if ids else 1


class LocalStore(BaseStore):
    """Emulates the REST API's CRUD semantics on the local key-value store."""

    NAME = "local"

    def __init__(self, storage: StoreFacade, seed_problems: bool = True):
        self.storage = storage
        self.seed_problems = seed_problems

    def _items(self, collection) -> list:
        if collection != PROBLEMS_KEY or not self.seed_problems:
            return self.storage.read_list(collection)

        with self.storage.locked():
            items = self.storage.read_list(collection)
            if not items:
                items = sample_problems()
                self.storage.write(collection, items)
                logger.info(f"Seeded local store with {len(items)} sample problems")
            return items

    def list(self, collection):
        return self._items(collection)

    def get(self, collection, key):
        for item in self._items(collection):
            if _same_id(item, key):
                return item
        return None

    def get_by_slug(self, collection, slug):
        for item in self._items(collection):
            if isinstance(item, dict) and item.get('slug') == slug:
                return item
        return None

    def _new_id(self, collection, items):
        if collection == PROBLEMS_KEY:
            return next_problem_id(items)
        new_id = int(time.time() * 1000)
        taken = {str(item.get('id')) for item in items if isinstance(item, dict)}
        while str(new_id) in taken:
            new_id += 1
        return new_id

    def create(self, collection, record):
        with self.storage.locked():
            items = self.storage.read_list(collection)
            new_item = dict(record)
            if new_item.get('id') in (None, ''):
                new_item['id'] = self._new_id(collection, items)
            elif any(_same_id(item, new_item['id']) for item in items):
                raise ConflictError(
                    f"{collection} record {new_item['id']} already exists",
                    key=new_item['id'],
                )
            items.append(new_item)
            self.storage.write(collection, items)
        logger.debug(f"Created {collection} record {new_item['id']} locally")
        return new_item

    def update(self, collection, key, record):
        with self.storage.locked():
            items = self.storage.read_list(collection)
            updated = None
            for idx, item in enumerate(items):
                if _same_id(item, key):
                    # Full replace; the stored id keeps its original type
                    updated = dict(record)
                    updated['id'] = item['id']
                    items[idx] = updated
                    break
            if updated is None:
                return None
            self.storage.write(collection, items)
        return updated

    def delete(self, collection, key):
        with self.storage.locked():
            items = self.storage.read_list(collection)
            remaining = [item for item in items if not _same_id(item, key)]
            if len(remaining) != len(items):
                self.storage.write(collection, remaining)
