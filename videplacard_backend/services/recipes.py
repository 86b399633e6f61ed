"""Recipe generation: prompt building and strict decoding of model output."""

from __future__ import annotations

import json
import logging
import re
import unicodedata
from dataclasses import dataclass, field
from enum import Enum
from json import JSONDecodeError
from typing import Any, Iterable, TypedDict, Union

from videplacard_backend.config.llm import (
    COURSES_FORMAT_INSTRUCTIONS,
    EXTRA_INGREDIENTS_ALLOWED,
    EXTRA_INGREDIENTS_ALLOWED_TEXT,
    EXTRA_INGREDIENTS_FORBIDDEN,
    EXTRA_INGREDIENTS_FORBIDDEN_TEXT,
    LIST_FORMAT_INSTRUCTIONS,
    RECIPE_SYSTEM_PROMPT,
    TEXT_FORMAT_INSTRUCTIONS,
)
from videplacard_backend.services.llm import LLMClient

logger = logging.getLogger(__name__)

RECIPES_PER_LIST = 3
OPTIONS_PER_COURSE = 2

_CODE_FENCE = re.compile(r"^```[a-zA-Z]*\s*|\s*```$")


def _fold(value: str) -> str:
    """Lower-case and strip accents, e.g. ``"Pétillant"`` -> ``"petillant"``."""

    decomposed = unicodedata.normalize("NFD", value.strip().lower())
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


class Course(str, Enum):
    """Meal categories, declared in presentation order."""

    STARTER = "starter"
    MAIN = "main"
    DESSERT = "dessert"

    @classmethod
    def parse(cls, raw: str) -> "Course":
        folded = _fold(raw)
        course = _COURSE_ALIASES.get(folded)
        if course is None:
            raise ValueError(f"unknown course {raw!r}")
        return course

    @classmethod
    def order(cls) -> list["Course"]:
        return list(cls)


_COURSE_ALIASES = {
    "starter": Course.STARTER,
    "entree": Course.STARTER,
    "main": Course.MAIN,
    "plat": Course.MAIN,
    "dessert": Course.DESSERT,
}


class WineColor(str, Enum):
    """Wine colors understood by the presentation layer."""

    RED = "red"
    WHITE = "white"
    ROSE = "rose"
    SPARKLING = "sparkling"

    @classmethod
    def parse(cls, raw: str) -> "WineColor":
        color = _WINE_COLOR_ALIASES.get(_fold(raw))
        if color is None:
            raise ValueError(f"unknown wine color {raw!r}")
        return color


_WINE_COLOR_ALIASES = {
    "red": WineColor.RED,
    "rouge": WineColor.RED,
    "white": WineColor.WHITE,
    "blanc": WineColor.WHITE,
    "rose": WineColor.ROSE,
    "sparkling": WineColor.SPARKLING,
    "petillant": WineColor.SPARKLING,
}


class RecipeFormat(str, Enum):
    """Output shapes the model can be asked for."""

    TEXT = "text"
    LIST = "list"
    COURSES = "courses"


class WinePairing(TypedDict):
    name: str
    color: str
    reason: str


class Recipe(TypedDict):
    """A generated recipe as returned to the client."""

    title: str
    prepTime: str
    cookTime: str
    usedIngredients: list[str]
    unusedIngredients: list[str]
    toBuy: list[str]
    steps: list[str]
    wine: WinePairing


@dataclass(slots=True)
class RecipeRequest:
    """Validated input of a recipe request."""

    ingredients: list[str]
    courses: list[Course] = field(default_factory=Course.order)
    allow_extra_ingredients: bool = False
    format: RecipeFormat = RecipeFormat.COURSES


@dataclass(slots=True)
class ParsedRecipes:
    """Model output matched the requested structured shape."""

    value: Any
    missing_courses: list[Course] = field(default_factory=list)


@dataclass(slots=True)
class PlainText:
    """Model output for the plain-text format."""

    text: str


@dataclass(slots=True)
class DecodeFailure:
    """Model output did not match the requested shape."""

    raw_text: str
    reason: str


RecipeDecodeResult = Union[ParsedRecipes, PlainText, DecodeFailure]


def parse_recipe_request(payload: object) -> RecipeRequest:
    """Validate a JSON request body, raising ``ValueError`` on bad input."""

    if not isinstance(payload, dict):
        raise ValueError("request body must be a JSON object")

    raw_ingredients = payload.get("ingredients")
    if not isinstance(raw_ingredients, list):
        raise ValueError("Aucun ingrédient fourni")
    ingredients = [
        item.strip()
        for item in raw_ingredients
        if isinstance(item, str) and item.strip()
    ]
    if not ingredients:
        raise ValueError("Aucun ingrédient fourni")

    raw_courses = payload.get("courses")
    if raw_courses is None:
        courses = Course.order()
    else:
        if not isinstance(raw_courses, list) or not all(
            isinstance(entry, str) for entry in raw_courses
        ):
            raise ValueError("courses must be a list of course names")
        selected = {Course.parse(entry) for entry in raw_courses}
        courses = [course for course in Course.order() if course in selected]
        if not courses:
            courses = Course.order()

    allow_extra = payload.get("allowExtraIngredients", False)
    if not isinstance(allow_extra, bool):
        raise ValueError("allowExtraIngredients must be a boolean")

    raw_format = payload.get("format", RecipeFormat.COURSES.value)
    try:
        recipe_format = RecipeFormat(raw_format)
    except ValueError:
        raise ValueError(f"unknown format {raw_format!r}") from None

    return RecipeRequest(
        ingredients=ingredients,
        courses=courses,
        allow_extra_ingredients=allow_extra,
        format=recipe_format,
    )


def build_recipe_prompt(request: RecipeRequest) -> str:
    """Return the user prompt describing the ingredients and desired shape."""

    if request.format is RecipeFormat.TEXT:
        instructions = TEXT_FORMAT_INSTRUCTIONS
    elif request.format is RecipeFormat.LIST:
        instructions = LIST_FORMAT_INSTRUCTIONS
    else:
        # The template embeds a JSON example, so str.format() is not usable.
        instructions = COURSES_FORMAT_INSTRUCTIONS.replace(
            "{courses}", ", ".join(course.value for course in request.courses)
        )

    if request.format is RecipeFormat.TEXT:
        extra_rule = (
            EXTRA_INGREDIENTS_ALLOWED_TEXT
            if request.allow_extra_ingredients
            else EXTRA_INGREDIENTS_FORBIDDEN_TEXT
        )
    else:
        extra_rule = (
            EXTRA_INGREDIENTS_ALLOWED
            if request.allow_extra_ingredients
            else EXTRA_INGREDIENTS_FORBIDDEN
        )

    return (
        "Voici les ingrédients disponibles dans mes placards et frigo :\n\n"
        f"{', '.join(request.ingredients)}\n\n"
        f"{extra_rule}\n\n"
        f"{instructions}"
    )


def _string_list(value: object, field_name: str) -> list[str]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError(f"{field_name} must be a list")
    cleaned = []
    for item in value:
        # Nulls and nested objects are not names.
        if isinstance(item, bool) or not isinstance(item, (str, int, float)):
            continue
        text = str(item).strip()
        if text:
            cleaned.append(text)
    return cleaned


def parse_recipe(payload: object) -> Recipe:
    """Validate one recipe object, raising ``ValueError`` on mismatch."""

    if not isinstance(payload, dict):
        raise ValueError("recipe must be a JSON object")

    title = payload.get("title")
    if not isinstance(title, str) or not title.strip():
        raise ValueError("recipe title is required")

    steps = _string_list(payload.get("steps"), "steps")
    if not steps:
        raise ValueError(f"recipe {title!r} has no steps")

    wine = payload.get("wine")
    if not isinstance(wine, dict):
        raise ValueError(f"recipe {title!r} has no wine pairing")
    color = wine.get("color")
    if not isinstance(color, str):
        raise ValueError(f"recipe {title!r} has no wine color")

    return {
        "title": title.strip(),
        "prepTime": str(payload.get("prepTime") or "").strip(),
        "cookTime": str(payload.get("cookTime") or "").strip(),
        "usedIngredients": _string_list(
            payload.get("usedIngredients"), "usedIngredients"
        ),
        "unusedIngredients": _string_list(
            payload.get("unusedIngredients"), "unusedIngredients"
        ),
        "toBuy": _string_list(payload.get("toBuy"), "toBuy"),
        "steps": steps,
        "wine": {
            "name": str(wine.get("name") or "").strip(),
            "color": WineColor.parse(color).value,
            "reason": str(wine.get("reason") or "").strip(),
        },
    }


def _load_json(text: str, opening: str, closing: str) -> Any:
    """Parse the outermost ``opening``...``closing`` span of ``text``."""

    candidate = _CODE_FENCE.sub("", (text or "").strip())
    start = candidate.find(opening)
    end = candidate.rfind(closing)
    if start == -1 or end == -1 or end < start:
        raise ValueError("no JSON payload found")
    try:
        return json.loads(candidate[start : end + 1])
    except JSONDecodeError as exc:
        raise ValueError(f"invalid JSON: {exc.msg}") from exc


def _decode_list(text: str) -> ParsedRecipes:
    payload = _load_json(text, "[", "]")
    if not isinstance(payload, list):
        raise ValueError("expected a JSON array")
    if len(payload) != RECIPES_PER_LIST:
        raise ValueError(
            f"expected {RECIPES_PER_LIST} recipes, got {len(payload)}"
        )
    return ParsedRecipes(value=[parse_recipe(entry) for entry in payload])


def _course_options(payload: dict[str, Any], course: Course) -> list[Recipe]:
    options = None
    for key, value in payload.items():
        try:
            if isinstance(key, str) and Course.parse(key) is course:
                options = value
                break
        except ValueError:
            continue

    if isinstance(options, dict):
        options = [options]
    if not isinstance(options, list):
        return []

    recipes: list[Recipe] = []
    for entry in options:
        try:
            recipes.append(parse_recipe(entry))
        except ValueError as exc:
            logger.warning("dropping invalid %s recipe: %s", course.value, exc)
    return recipes[:OPTIONS_PER_COURSE]


def _decode_courses(text: str, courses: Iterable[Course]) -> ParsedRecipes:
    payload = _load_json(text, "{", "}")
    if not isinstance(payload, dict):
        raise ValueError("expected a JSON object keyed by course")

    decoded: dict[str, list[Recipe]] = {}
    missing: list[Course] = []
    for course in courses:
        options = _course_options(payload, course)
        if options:
            decoded[course.value] = options
        else:
            missing.append(course)

    if not decoded:
        raise ValueError("no requested course could be decoded")
    return ParsedRecipes(value=decoded, missing_courses=missing)


def decode_recipe_response(
    text: str,
    recipe_format: RecipeFormat,
    courses: Iterable[Course] = (),
) -> RecipeDecodeResult:
    """Decode model output into the tagged result for ``recipe_format``."""

    raw_text = text or ""
    if not raw_text.strip():
        return DecodeFailure(raw_text=raw_text, reason="empty model output")

    if recipe_format is RecipeFormat.TEXT:
        return PlainText(text=raw_text.strip())

    try:
        if recipe_format is RecipeFormat.LIST:
            return _decode_list(raw_text)
        return _decode_courses(raw_text, courses)
    except ValueError as exc:
        logger.warning("recipe output did not match %s shape: %s", recipe_format.value, exc)
        return DecodeFailure(raw_text=raw_text, reason=str(exc))


def generate_recipes(
    llm_client: LLMClient, request: RecipeRequest
) -> RecipeDecodeResult:
    """Ask the model for recipes and decode the answer.

    Provider failures propagate as ``ProviderError``; shape mismatches are
    reported as ``DecodeFailure`` rather than raised.
    """

    result = llm_client.run_prompt(
        prompt=build_recipe_prompt(request),
        system_prompt=RECIPE_SYSTEM_PROMPT,
    )
    return decode_recipe_response(
        result.raw_text, request.format, request.courses
    )
