"""Saved-recipe library endpoints."""

from __future__ import annotations

from flask import Blueprint, current_app, jsonify, request

from videplacard_backend.api.deps import get_library, is_confirmed
from videplacard_backend.services.store import StoreError

bp = Blueprint("saved_recipes", __name__, url_prefix="/api")


@bp.get("/saved-recipes")
def list_saved_recipes():
    """Return saved recipes, flat and grouped by course."""

    try:
        library = get_library()
    except RuntimeError as exc:
        return jsonify(error=str(exc)), 503

    try:
        grouped = library.grouped()
    except StoreError:
        current_app.logger.exception("failed to load saved recipes")
        return jsonify(error="failed to load saved recipes"), 500

    recipes = [entry for entries in grouped.values() for entry in entries]
    return jsonify(recipes=recipes, byCourse=grouped, count=len(recipes))


@bp.post("/saved-recipes")
def save_recipe():
    """Snapshot a generated recipe into the library."""

    payload = request.get_json(silent=True) or {}
    if not isinstance(payload, dict):
        return jsonify(error="request body must be a JSON object"), 400

    course = payload.get("course")
    if not isinstance(course, str):
        return jsonify(error="course is required"), 400

    try:
        library = get_library()
    except RuntimeError as exc:
        return jsonify(error=str(exc)), 503

    try:
        saved = library.save(payload.get("recipe"), course)
    except StoreError:
        current_app.logger.exception("failed to save recipe")
        return jsonify(error="failed to save recipe"), 500
    except ValueError as exc:
        return jsonify(error=str(exc)), 400

    return jsonify(recipe=saved), 201


@bp.delete("/saved-recipes/<recipe_id>")
def remove_saved_recipe(recipe_id: str):
    try:
        library = get_library()
    except RuntimeError as exc:
        return jsonify(error=str(exc)), 503

    try:
        removed = library.remove(recipe_id)
    except StoreError:
        current_app.logger.exception("failed to remove saved recipe")
        return jsonify(error="failed to save recipes"), 500

    if not removed:
        return jsonify(error="saved recipe not found"), 404
    return jsonify(removed=recipe_id)


@bp.delete("/saved-recipes")
def clear_saved_recipes():
    """Empty the library once the caller confirms."""

    if not is_confirmed():
        return jsonify(error="confirmation required to clear saved recipes"), 400

    try:
        library = get_library()
    except RuntimeError as exc:
        return jsonify(error=str(exc)), 503

    try:
        removed = library.clear()
    except StoreError:
        current_app.logger.exception("failed to clear saved recipes")
        return jsonify(error="failed to save recipes"), 500

    return jsonify(removed=removed, recipes=[])
