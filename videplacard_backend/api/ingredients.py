"""Inventory endpoints: manual add, bulk paste, scan confirmation, removal."""

from __future__ import annotations

from flask import Blueprint, current_app, jsonify, request

from videplacard_backend.api.deps import get_inventory, is_confirmed
from videplacard_backend.services.store import StoreError

bp = Blueprint("ingredients", __name__, url_prefix="/api")


@bp.get("/ingredients")
def list_ingredients():
    """Return the current inventory."""

    try:
        inventory = get_inventory()
    except RuntimeError as exc:
        return jsonify(error=str(exc)), 503

    try:
        records = inventory.list()
    except StoreError:
        current_app.logger.exception("failed to load inventory")
        return jsonify(error="failed to load inventory"), 500

    return jsonify(ingredients=records, count=len(records))


@bp.post("/ingredients")
def add_ingredient():
    """Add one ingredient; blank names are accepted as a no-op."""

    payload = request.get_json(silent=True) or {}
    name = payload.get("name") if isinstance(payload, dict) else None
    if name is not None and not isinstance(name, str):
        return jsonify(error="name must be a string"), 400

    try:
        inventory = get_inventory()
    except RuntimeError as exc:
        return jsonify(error=str(exc)), 503

    try:
        record = inventory.add(name or "")
    except StoreError:
        current_app.logger.exception("failed to add ingredient")
        return jsonify(error="failed to save inventory"), 500

    if record is None:
        return jsonify(ingredient=None, added=0)
    return jsonify(ingredient=record, added=1), 201


@bp.post("/ingredients/bulk")
def add_ingredients_bulk():
    """Add one ingredient per token of pasted text."""

    payload = request.get_json(silent=True) or {}
    text = payload.get("text") if isinstance(payload, dict) else None
    if text is not None and not isinstance(text, str):
        return jsonify(error="text must be a string"), 400

    return _append(lambda inventory: inventory.add_bulk(text or ""))


@bp.post("/ingredients/batch")
def add_ingredients_batch():
    """Add the ingredient names confirmed after a photo scan."""

    payload = request.get_json(silent=True) or {}
    names = payload.get("names") if isinstance(payload, dict) else None
    if not isinstance(names, list):
        return jsonify(error="names must be a list"), 400

    return _append(lambda inventory: inventory.add_many(names))


@bp.delete("/ingredients/<record_id>")
def remove_ingredient(record_id: str):
    try:
        inventory = get_inventory()
    except RuntimeError as exc:
        return jsonify(error=str(exc)), 503

    try:
        removed = inventory.remove(record_id)
    except StoreError:
        current_app.logger.exception("failed to remove ingredient")
        return jsonify(error="failed to save inventory"), 500

    if not removed:
        return jsonify(error="ingredient not found"), 404
    return jsonify(removed=record_id)


@bp.delete("/ingredients")
def clear_ingredients():
    """Empty the inventory once the caller confirms."""

    if not is_confirmed():
        return jsonify(error="confirmation required to clear the inventory"), 400

    try:
        inventory = get_inventory()
    except RuntimeError as exc:
        return jsonify(error=str(exc)), 503

    try:
        removed = inventory.clear()
    except StoreError:
        current_app.logger.exception("failed to clear inventory")
        return jsonify(error="failed to save inventory"), 500

    return jsonify(removed=removed, ingredients=[])


def _append(operation):
    try:
        inventory = get_inventory()
    except RuntimeError as exc:
        return jsonify(error=str(exc)), 503

    try:
        records = operation(inventory)
    except StoreError:
        current_app.logger.exception("failed to add ingredients")
        return jsonify(error="failed to save inventory"), 500

    status = 201 if records else 200
    return jsonify(ingredients=records, added=len(records)), status
