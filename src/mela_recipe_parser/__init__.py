"""Mela Recipe Parser - read and write Mela ``.melarecipe`` / ``.melarecipes`` exports."""

from importlib.metadata import PackageNotFoundError, version

from mela_recipe_parser.errors import IncompatibleFormatError, IncorrectIDFormatError, MelaRecipeError
from mela_recipe_parser.recipes import (
    RecipeCollection,
    Recipes,
    SingleRecipe,
    load_from_path,
    write_json,
    write_native,
)
from mela_recipe_parser.schemas import Recipe, RecipeFormat

__all__ = [
    "IncompatibleFormatError",
    "IncorrectIDFormatError",
    "MelaRecipeError",
    "Recipe",
    "RecipeCollection",
    "RecipeFormat",
    "Recipes",
    "SingleRecipe",
    "load_from_path",
    "write_json",
    "write_native",
]

try:
    __version__ = version("mela-recipe-parser")
except PackageNotFoundError:
    __version__ = "0.0.0"
