"""Endpoint that turns a pantry photo into an ingredient list."""

from __future__ import annotations

from flask import Blueprint, current_app, jsonify, request

from videplacard_backend.api.deps import get_llm_client
from videplacard_backend.services.errors import (
    SCAN_ERROR_RESPONSES,
    LLMNotConfiguredError,
    ProviderError,
    error_response_for,
)
from videplacard_backend.services.images import ImageTooLargeError
from videplacard_backend.services.scan import read_image_upload, scan_ingredients

bp = Blueprint("scan", __name__, url_prefix="/api")

_UPLOAD_FIELDS = ("photo", "image")


@bp.post("/scan")
def scan_photo():
    """Accept a photo upload and list the visible ingredients."""

    try:
        client = get_llm_client()
    except LLMNotConfiguredError as exc:
        return jsonify(error=str(exc)), 500

    field_name = next(
        (name for name in _UPLOAD_FIELDS if name in request.files), None
    )
    if field_name is None:
        return jsonify(error="Aucune photo fournie"), 400

    image_file = request.files[field_name]
    try:
        image_bytes = read_image_upload(image_file)
    except ValueError as exc:
        return jsonify(error=str(exc)), 400

    try:
        ingredients = scan_ingredients(
            client,
            image_bytes=image_bytes,
            mime_type=image_file.mimetype,
        )
    except ImageTooLargeError as exc:
        current_app.logger.warning("rejected scan upload: %s", exc)
        return jsonify(error=str(exc)), 400
    except ProviderError as exc:
        mapped = error_response_for(exc, SCAN_ERROR_RESPONSES)
        current_app.logger.warning(
            "photo scan failed (%s): %s", exc.kind.value, exc.message
        )
        return jsonify(error=mapped.message), mapped.status

    return jsonify(ingredients=ingredients)
