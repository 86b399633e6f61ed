"""Recipe suggestion endpoint backed by the hosted LLM."""

from __future__ import annotations

from flask import Blueprint, current_app, jsonify, request

from videplacard_backend.api.deps import get_llm_client
from videplacard_backend.services.errors import (
    RECIPE_ERROR_RESPONSES,
    LLMNotConfiguredError,
    ProviderError,
    error_response_for,
)
from videplacard_backend.services.recipes import (
    DecodeFailure,
    ParsedRecipes,
    PlainText,
    generate_recipes,
    parse_recipe_request,
)

bp = Blueprint("recipes", __name__, url_prefix="/api")


@bp.post("/recipes")
def suggest_recipes():
    """Return recipe suggestions for the posted ingredient list."""

    try:
        client = get_llm_client()
    except LLMNotConfiguredError as exc:
        return jsonify(error=str(exc)), 500

    try:
        recipe_request = parse_recipe_request(request.get_json(silent=True))
    except ValueError as exc:
        return jsonify(error=str(exc)), 400

    try:
        result = generate_recipes(client, recipe_request)
    except ProviderError as exc:
        mapped = error_response_for(exc, RECIPE_ERROR_RESPONSES)
        current_app.logger.warning(
            "recipe generation failed (%s): %s", exc.kind.value, exc.message
        )
        return jsonify(error=mapped.message), mapped.status

    response_payload: dict[str, object] = {
        "format": recipe_request.format.value,
        "recipes": None,
        "fallback": None,
        "missingCourses": [],
    }
    if isinstance(result, ParsedRecipes):
        response_payload["recipes"] = result.value
        response_payload["missingCourses"] = [
            course.value for course in result.missing_courses
        ]
    elif isinstance(result, PlainText):
        response_payload["recipes"] = result.text
    elif isinstance(result, DecodeFailure):
        current_app.logger.info(
            "returning raw recipe text as fallback: %s", result.reason
        )
        response_payload["fallback"] = result.raw_text

    return jsonify(response_payload)
