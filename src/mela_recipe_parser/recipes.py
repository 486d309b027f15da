"""Recipe containers and the load/write facade.

``Recipes`` is either a :class:`SingleRecipe` (read from ``.melarecipe``) or a
:class:`RecipeCollection` (read from ``.melarecipes``). The variant decides
output file names and how the native writer stores the data.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from mela_recipe_parser.archive import collect_archive, expand_archive
from mela_recipe_parser.codec import decode_recipe, dump_payload, recipe_to_payload, recipes_to_payload
from mela_recipe_parser.config import ParserSettings, load_settings
from mela_recipe_parser.errors import IncompatibleFormatError
from mela_recipe_parser.file_io import atomic_write_bytes, safe_filename
from mela_recipe_parser.native import build_native_file
from mela_recipe_parser.schemas import DateEncoding, Recipe, RecipeFormat

logger = logging.getLogger(__name__)

COLLECTION_BASENAME = "Recipes"


@dataclass(frozen=True, slots=True)
class SingleRecipe:
    """One recipe, as stored in a ``.melarecipe`` file."""

    recipe: Recipe

    @property
    def json_filename(self) -> str:
        return safe_filename(self.recipe.display_name) + RecipeFormat.JSON.suffix

    def to_payload(self, date_encoding: DateEncoding = DateEncoding.ISO8601) -> dict[str, Any]:
        return recipe_to_payload(self.recipe, date_encoding)

    def __iter__(self) -> Iterator[Recipe]:
        yield self.recipe

    def __len__(self) -> int:
        return 1


@dataclass(frozen=True, slots=True)
class RecipeCollection:
    """Several recipes, as stored in a ``.melarecipes`` archive."""

    recipes: tuple[Recipe, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "recipes", tuple(self.recipes))

    @property
    def json_filename(self) -> str:
        return COLLECTION_BASENAME + RecipeFormat.JSON.suffix

    @property
    def native_filename(self) -> str:
        return COLLECTION_BASENAME + RecipeFormat.ARCHIVE.suffix

    def to_payload(self, date_encoding: DateEncoding = DateEncoding.ISO8601) -> list[dict[str, Any]]:
        return recipes_to_payload(self.recipes, date_encoding)

    def __iter__(self) -> Iterator[Recipe]:
        return iter(self.recipes)

    def __len__(self) -> int:
        return len(self.recipes)


Recipes = SingleRecipe | RecipeCollection


def load_from_path(path: str | Path, *, settings: ParserSettings | None = None) -> Recipes:
    """Read a ``.melarecipe`` or ``.melarecipes`` file.

    The format is chosen from the extension alone; any other extension raises
    :class:`IncompatibleFormatError` before the file is opened.
    """
    source = Path(path)
    fmt = RecipeFormat.from_path(source)
    logger.debug("Detected format %s for %s", fmt.name, source)
    if fmt is RecipeFormat.ARCHIVE:
        settings = settings or load_settings()
        recipes = expand_archive(source.read_bytes(), staging_root=settings.staging_root)
        return RecipeCollection(tuple(recipes))
    if fmt is RecipeFormat.SINGLE:
        return SingleRecipe(decode_recipe(source.read_bytes()))
    raise IncompatibleFormatError(f"{IncompatibleFormatError.default_message}: {source}")


def write_json(
    container: Recipes,
    directory: str | Path,
    *,
    settings: ParserSettings | None = None,
) -> Path:
    """Write ``container`` as plain JSON (ISO-8601 dates) into ``directory``."""
    settings = settings or load_settings()
    data = dump_payload(container.to_payload(DateEncoding.ISO8601), indent=settings.json_indent)
    destination = atomic_write_bytes(Path(directory) / container.json_filename, data)
    logger.debug("Exported %d recipe(s) to %s", len(container), destination)
    return destination


def write_native(
    container: Recipes,
    directory: str | Path,
    *,
    settings: ParserSettings | None = None,
) -> Path:
    """Write ``container`` in Mela's own format into ``directory``.

    A single recipe becomes ``<title>.melarecipe``; a collection becomes
    ``Recipes.melarecipes``. Ids that break the identity rule raise
    :class:`IncompatibleFormatError` and nothing is written.
    """
    if isinstance(container, SingleRecipe):
        destination = build_native_file(container.recipe).write_to(directory)
    elif isinstance(container, RecipeCollection):
        settings = settings or load_settings()
        data = collect_archive(container.recipes, staging_root=settings.staging_root)
        destination = atomic_write_bytes(Path(directory) / container.native_filename, data)
    else:
        raise TypeError(f"Unsupported recipe container: {type(container).__name__}")
    logger.debug("Wrote %d recipe(s) to %s", len(container), destination)
    return destination


__all__ = [
    "RecipeCollection",
    "Recipes",
    "SingleRecipe",
    "load_from_path",
    "write_json",
    "write_native",
]
