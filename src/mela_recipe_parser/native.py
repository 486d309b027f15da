"""Writer for the native single-recipe ``.melarecipe`` format."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from mela_recipe_parser.codec import encode_recipe
from mela_recipe_parser.errors import IncompatibleFormatError, IncorrectIDFormatError
from mela_recipe_parser.file_io import atomic_write_bytes, safe_filename
from mela_recipe_parser.identity import validate_identity
from mela_recipe_parser.schemas import DateEncoding, Recipe, RecipeFormat


@dataclass(frozen=True, slots=True)
class NativeFile:
    """Encoded ``.melarecipe`` content and its suggested file name."""

    filename: str
    data: bytes

    def write_to(self, directory: str | Path) -> Path:
        """Write into an existing ``directory``, replacing any file with the same name."""
        return atomic_write_bytes(Path(directory) / self.filename, self.data)


def native_filename(recipe: Recipe) -> str:
    return safe_filename(recipe.display_name) + RecipeFormat.SINGLE.suffix


def build_native_file(recipe: Recipe) -> NativeFile:
    """Validate the recipe id and encode the recipe as a native file.

    An id that breaks the identity rule means the recipe cannot be stored as
    a canonical ``.melarecipe`` file, so the validation error is reported as
    :class:`IncompatibleFormatError` with the precise cause chained.
    """
    try:
        validate_identity(recipe)
    except IncorrectIDFormatError as exc:
        raise IncompatibleFormatError(
            f"Recipe {recipe.display_name!r} cannot be written as '.melarecipe': {exc}"
        ) from exc
    data = encode_recipe(recipe, date_encoding=DateEncoding.REFERENCE_SECONDS)
    return NativeFile(filename=native_filename(recipe), data=data)


__all__ = ["NativeFile", "build_native_file", "native_filename"]
