"""Helpers for working with the pantry inventory."""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import Iterable, TypedDict

from videplacard_backend.services.parsing import (
    split_bulk_text,
    strip_decoration,
)
from videplacard_backend.services.store import INGREDIENTS_KEY, KeyValueStore

logger = logging.getLogger(__name__)


class IngredientRecord(TypedDict):
    """A single ingredient the user has on hand."""

    id: str
    name: str
    addedAt: str


def _new_record(name: str) -> IngredientRecord:
    return {
        "id": str(uuid.uuid4()),
        "name": name,
        "addedAt": datetime.now(timezone.utc).isoformat(),
    }


class InventoryStore:
    """Inventory collection persisted wholesale on every mutation."""

    def __init__(self, store: KeyValueStore, *, key: str = INGREDIENTS_KEY) -> None:
        self._store = store
        self._key = key

    def list(self) -> list[IngredientRecord]:
        return self._store.load(self._key)  # type: ignore[return-value]

    def names(self) -> list[str]:
        return [record["name"] for record in self.list()]

    def add(self, name: str) -> IngredientRecord | None:
        """Append one record; empty or blank names are ignored."""

        trimmed = (name or "").strip()
        if not trimmed:
            return None

        record = _new_record(trimmed)
        self._store.update(self._key, lambda records: [*records, record])
        return record

    def add_bulk(self, text: str) -> list[IngredientRecord]:
        """Append one record per token of pasted text."""

        return self._append_names(split_bulk_text(text))

    def add_many(self, names: Iterable[str]) -> list[IngredientRecord]:
        """Append confirmed scan results."""

        cleaned = [
            strip_decoration(name) for name in names if isinstance(name, str)
        ]
        return self._append_names([name for name in cleaned if name])

    def remove(self, record_id: str) -> bool:
        removed: list[dict] = []

        def _drop(records):
            remaining = [record for record in records if record["id"] != record_id]
            removed.extend(record for record in records if record["id"] == record_id)
            return remaining

        self._store.update(self._key, _drop)
        return bool(removed)

    def clear(self) -> int:
        """Empty the inventory and return how many records were dropped."""

        removed: list[dict] = []

        def _empty(records):
            removed.extend(records)
            return []

        self._store.update(self._key, _empty)
        logger.info("inventory cleared", extra={"removed": len(removed)})
        return len(removed)

    def _append_names(self, names: list[str]) -> list[IngredientRecord]:
        if not names:
            return []
        new_records = [_new_record(name) for name in names]
        self._store.update(self._key, lambda records: [*records, *new_records])
        return new_records
