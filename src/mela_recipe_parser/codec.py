"""JSON encoding and decoding of single recipes."""

from __future__ import annotations

import json
from collections.abc import Iterable
from typing import Any

from mela_recipe_parser.schemas import DateEncoding, Recipe, format_recipe_date


def decode_recipe(data: bytes | str) -> Recipe:
    """Parse one recipe from JSON.

    Raises ``json.JSONDecodeError`` for malformed JSON and
    ``pydantic.ValidationError`` for missing fields or type mismatches.
    """
    payload = json.loads(data)
    return Recipe.model_validate(payload)


def recipe_to_payload(
    recipe: Recipe,
    date_encoding: DateEncoding = DateEncoding.ISO8601,
) -> dict[str, Any]:
    """Return the JSON-ready mapping for ``recipe``; unset optional fields are omitted."""
    payload = recipe.model_dump(mode="json", by_alias=True, exclude_none=True)
    payload["date"] = format_recipe_date(recipe.date, date_encoding)
    return payload


def recipes_to_payload(
    recipes: Iterable[Recipe],
    date_encoding: DateEncoding = DateEncoding.ISO8601,
) -> list[dict[str, Any]]:
    return [recipe_to_payload(recipe, date_encoding) for recipe in recipes]


def dump_payload(payload: Any, *, indent: int | None = None) -> bytes:
    """Serialize a payload to UTF-8 JSON, compact unless ``indent`` is given."""
    if indent:
        text = json.dumps(payload, ensure_ascii=False, indent=indent)
    else:
        text = json.dumps(payload, ensure_ascii=False, separators=(",", ":"))
    return text.encode("utf-8")


def encode_recipe(
    recipe: Recipe,
    *,
    date_encoding: DateEncoding = DateEncoding.ISO8601,
    indent: int | None = None,
) -> bytes:
    return dump_payload(recipe_to_payload(recipe, date_encoding), indent=indent)


__all__ = [
    "decode_recipe",
    "dump_payload",
    "encode_recipe",
    "recipe_to_payload",
    "recipes_to_payload",
]
