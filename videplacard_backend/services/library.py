"""The user's library of saved recipes."""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import Any

from videplacard_backend.services.recipes import Course, parse_recipe
from videplacard_backend.services.store import SAVED_RECIPES_KEY, KeyValueStore

logger = logging.getLogger(__name__)

# Bucket for saved recipes whose course tag is not a known course.
OTHER_COURSE = "other"


class SavedRecipeLibrary:
    """Saved-recipe collection persisted wholesale on every mutation."""

    def __init__(
        self, store: KeyValueStore, *, key: str = SAVED_RECIPES_KEY
    ) -> None:
        self._store = store
        self._key = key

    def list(self) -> list[dict[str, Any]]:
        return self._store.load(self._key)

    def save(self, recipe: object, course: str) -> dict[str, Any]:
        """Snapshot a generated recipe under a fresh id.

        Saving the same recipe twice yields two independent entries.
        """

        snapshot: dict[str, Any] = dict(parse_recipe(recipe))
        snapshot.update(
            id=str(uuid.uuid4()),
            course=Course.parse(course).value,
            savedAt=datetime.now(timezone.utc).isoformat(),
        )
        self._store.update(self._key, lambda saved: [*saved, snapshot])
        return snapshot

    def remove(self, recipe_id: str) -> bool:
        removed: list[dict[str, Any]] = []

        def _drop(saved):
            removed.extend(entry for entry in saved if entry.get("id") == recipe_id)
            return [entry for entry in saved if entry.get("id") != recipe_id]

        self._store.update(self._key, _drop)
        return bool(removed)

    def clear(self) -> int:
        removed: list[dict[str, Any]] = []

        def _empty(saved):
            removed.extend(saved)
            return []

        self._store.update(self._key, _empty)
        logger.info("saved recipes cleared", extra={"removed": len(removed)})
        return len(removed)

    def grouped(self) -> dict[str, list[dict[str, Any]]]:
        """Group saved recipes by course, starters first and unknown tags last."""

        groups: dict[str, list[dict[str, Any]]] = {}
        for entry in self.list():
            groups.setdefault(entry.get("course") or OTHER_COURSE, []).append(entry)

        rank = {course.value: index for index, course in enumerate(Course.order())}
        return {
            key: groups[key]
            for key in sorted(groups, key=lambda key: rank.get(key, len(rank)))
        }
