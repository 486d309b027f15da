"""Pydantic models and enumerations describing Mela recipe data."""

from __future__ import annotations

import datetime as dt
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_validator

from mela_recipe_parser.file_io import path_extension

# Mela stores dates as seconds since this instant when it writes its own files.
REFERENCE_DATE = dt.datetime(2001, 1, 1, tzinfo=dt.timezone.utc)

# Lax parsing accepts every ISO-8601 variant pydantic understands (any fraction
# length, basic format) regardless of the interpreter version.
_ISO_DATETIME = TypeAdapter(dt.datetime)


# ---------------------------------------------------------------------------
# File formats
# ---------------------------------------------------------------------------

class RecipeFormat(str, Enum):
    """Recognized file extensions (matched exactly, case-sensitive)."""

    ARCHIVE = "melarecipes"
    SINGLE = "melarecipe"
    JSON = "json"
    UNKNOWN = ""

    @classmethod
    def from_path(cls, path: str | Path) -> RecipeFormat:
        """Classify ``path`` by its extension without touching the file."""
        ext = path_extension(path)
        if not ext:
            return cls.UNKNOWN
        try:
            return cls(ext)
        except ValueError:
            return cls.UNKNOWN

    @property
    def suffix(self) -> str:
        return f".{self.value}" if self.value else ""


class DateEncoding(str, Enum):
    """How ``Recipe.date`` is written to JSON."""

    ISO8601 = "iso8601"
    REFERENCE_SECONDS = "reference_seconds"


def parse_recipe_date(value: Any) -> Any:
    """Coerce ISO-8601 strings and reference-date seconds into aware datetimes.

    Values of any other type are returned untouched so that strict model
    validation reports them as type errors.
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        try:
            return REFERENCE_DATE + dt.timedelta(seconds=value)
        except OverflowError as exc:
            raise ValueError(f"date out of range: {value!r}") from exc
    if isinstance(value, str):
        try:
            parsed = _ISO_DATETIME.validate_python(value.strip())
        except ValidationError as exc:
            raise ValueError(f"invalid ISO-8601 date: {value!r}") from exc
        return _ensure_aware(parsed)
    if isinstance(value, dt.datetime):
        return _ensure_aware(value)
    return value


def _ensure_aware(value: dt.datetime) -> dt.datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=dt.timezone.utc)
    return value


def format_recipe_date(value: dt.datetime, encoding: DateEncoding) -> str | float:
    """Return the JSON representation of ``value`` for ``encoding``."""
    if encoding is DateEncoding.REFERENCE_SECONDS:
        return (_ensure_aware(value) - REFERENCE_DATE).total_seconds()
    return _ensure_aware(value).isoformat().replace("+00:00", "Z")


# ---------------------------------------------------------------------------
# Recipe
# ---------------------------------------------------------------------------

class Recipe(BaseModel):
    """A single recipe as exported by Mela.

    Attribute names are snake_case; the JSON keys are the app's camelCase
    names (``cookTime``, ``wantToCook``, ``yield``...). Instances are frozen.
    """

    model_config = ConfigDict(
        frozen=True,
        strict=True,
        extra="ignore",
        populate_by_name=True,
    )

    id: str
    date: dt.datetime
    images: list[str]
    title: str | None = None
    yield_: str | None = Field(default=None, alias="yield")
    cook_time: str | None = Field(default=None, alias="cookTime")
    prep_time: str | None = Field(default=None, alias="prepTime")
    total_time: str | None = Field(default=None, alias="totalTime")
    link: str | None = Field(default=None, description="Source of the recipe; a URL or plain text.")
    text: str | None = None
    ingredients: str | None = None
    instructions: str | None = None
    notes: str | None = None
    nutrition: str | None = None
    categories: list[str] = Field(description="Tags, in display order.")
    want_to_cook: bool = Field(alias="wantToCook")
    favorite: bool

    @field_validator("date", mode="before")
    @classmethod
    def _coerce_date(cls, value: Any) -> Any:
        return parse_recipe_date(value)

    @property
    def display_name(self) -> str:
        """Title used for file names, falling back to the id."""
        if self.title and self.title.strip():
            return self.title
        return self.id


__all__ = [
    "DateEncoding",
    "REFERENCE_DATE",
    "Recipe",
    "RecipeFormat",
    "format_recipe_date",
    "parse_recipe_date",
]
