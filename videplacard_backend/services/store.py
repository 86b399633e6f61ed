"""Key-value persistence for the inventory and saved-recipe collections.

Each collection is a JSON array stored under a fixed string key and rewritten
wholesale on every mutation. Mutations go through ``update`` so that the
read-modify-write of concurrent requests cannot interleave.
"""

from __future__ import annotations

import copy
import json
import logging
import threading
from json import JSONDecodeError
from typing import Any, Callable, Protocol

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from videplacard_backend.models import KeyValueEntry

logger = logging.getLogger(__name__)

INGREDIENTS_KEY = "vide-placard-ingredients"
SAVED_RECIPES_KEY = "vide-placard-saved-recipes"

Items = list[dict[str, Any]]
Mutation = Callable[[Items], Items]


class StoreError(RuntimeError):
    """Raised when the backing store cannot be read or written."""


class KeyValueStore(Protocol):
    """Load/save contract shared by every store implementation."""

    def load(self, key: str) -> Items:
        ...

    def save(self, key: str, items: Items) -> None:
        ...

    def update(self, key: str, mutate: Mutation) -> Items:
        """Atomically replace the collection with ``mutate(current)``."""
        ...


class InMemoryKeyValueStore:
    """Process-local store; contents are lost when the process exits."""

    def __init__(self) -> None:
        self._data: dict[str, Items] = {}
        self._lock = threading.Lock()

    def load(self, key: str) -> Items:
        with self._lock:
            return copy.deepcopy(self._data.get(key, []))

    def save(self, key: str, items: Items) -> None:
        with self._lock:
            self._data[key] = copy.deepcopy(list(items))

    def update(self, key: str, mutate: Mutation) -> Items:
        with self._lock:
            updated = list(mutate(copy.deepcopy(self._data.get(key, []))))
            self._data[key] = copy.deepcopy(updated)
            return updated


class SqlKeyValueStore:
    """Store each collection as a JSON text row in ``kv_entries``."""

    def __init__(self, session_factory: sessionmaker) -> None:
        self._session_factory = session_factory
        # SQLite ignores FOR UPDATE, so writers in this process also queue here.
        self._write_lock = threading.Lock()

    def load(self, key: str) -> Items:
        try:
            with self._session_factory() as session:
                entry = session.get(KeyValueEntry, key)
                raw_value = entry.value if entry is not None else None
        except SQLAlchemyError as exc:
            raise StoreError(f"failed to load {key!r}") from exc

        return _decode_items(key, raw_value)

    def save(self, key: str, items: Items) -> None:
        self.update(key, lambda _current: list(items))

    def update(self, key: str, mutate: Mutation) -> Items:
        with self._write_lock:
            try:
                with self._session_factory() as session:
                    entry = session.get(KeyValueEntry, key, with_for_update=True)
                    current = _decode_items(
                        key, entry.value if entry is not None else None
                    )
                    updated = list(mutate(current))
                    serialized = json.dumps(updated, ensure_ascii=False)
                    if entry is None:
                        session.add(KeyValueEntry(key=key, value=serialized))
                    else:
                        entry.value = serialized
                    session.commit()
            except SQLAlchemyError as exc:
                raise StoreError(f"failed to save {key!r}") from exc
        return updated


def _decode_items(key: str, raw_value: str | None) -> Items:
    if not raw_value:
        return []

    try:
        items = json.loads(raw_value)
    except JSONDecodeError:
        logger.warning("stored value for %s is not valid JSON; ignoring", key)
        return []

    if not isinstance(items, list):
        logger.warning("stored value for %s is not a JSON array; ignoring", key)
        return []
    return [item for item in items if isinstance(item, dict)]
