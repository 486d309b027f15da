"""Domain errors raised while reading or writing Mela recipe files.

Decoding and filesystem failures are not part of this hierarchy: malformed
JSON (``json.JSONDecodeError``), schema mismatches (``pydantic.ValidationError``),
corrupt archives (``zipfile.BadZipFile``) and ``OSError`` propagate unchanged.
"""

from __future__ import annotations


class MelaRecipeError(Exception):
    """Base class for recipe format errors."""

    default_message = "Mela recipe error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)


class IncompatibleFormatError(MelaRecipeError):
    """Raised for an unrecognized file extension or a recipe that cannot be written natively."""

    default_message = "File must be format '.melarecipes' or '.melarecipe'"


class IncorrectIDFormatError(MelaRecipeError):
    """Raised when a recipe ``id`` violates the identity rule."""

    default_message = (
        "`id` must be equal to `link` if link is present and a URL, "
        "otherwise `id` must be a UUID"
    )


__all__ = ["IncompatibleFormatError", "IncorrectIDFormatError", "MelaRecipeError"]
