"""Identity rule for recipe ids.

When ``link`` is an absolute URL the id is the link without its
``scheme://`` prefix; otherwise the id is a UUID.
"""

from __future__ import annotations

import re
from urllib.parse import urlsplit

from mela_recipe_parser.errors import IncorrectIDFormatError
from mela_recipe_parser.schemas import Recipe

_UUID_RE = re.compile(
    r"[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}"
)


def _scheme_prefix_length(link: str) -> int:
    """Length of the leading ``scheme://`` in ``link``, or 0 when there is none.

    ``urlsplit`` lowercases the scheme, so the prefix is compared without case.
    """
    scheme = urlsplit(link).scheme
    if not scheme:
        return 0
    prefix_length = len(scheme) + len("://")
    if link[:prefix_length].lower() != f"{scheme}://":
        return 0
    return prefix_length


def link_is_url(link: str | None) -> bool:
    """Return ``True`` for a well-formed absolute URL (scheme and host present)."""
    if not link or link != link.strip():
        return False
    try:
        parts = urlsplit(link)
    except ValueError:
        return False
    return bool(parts.netloc) and _scheme_prefix_length(link) > 0


def strip_scheme(link: str) -> str:
    """Drop the leading ``scheme://`` from ``link``, whatever its case."""
    return link[_scheme_prefix_length(link):]


def is_uuid(value: str) -> bool:
    return _UUID_RE.fullmatch(value) is not None


def expected_id(recipe: Recipe) -> str | None:
    """Return the id the recipe must carry, or ``None`` when any UUID is accepted."""
    if link_is_url(recipe.link):
        return strip_scheme(recipe.link or "")
    return None


def identity_is_valid(recipe: Recipe) -> bool:
    expected = expected_id(recipe)
    if expected is not None:
        return recipe.id == expected
    return is_uuid(recipe.id)


def validate_identity(recipe: Recipe) -> None:
    """Raise :class:`IncorrectIDFormatError` when ``recipe.id`` breaks the identity rule."""
    if identity_is_valid(recipe):
        return
    expected = expected_id(recipe)
    requirement = f"expected {expected!r}" if expected is not None else "expected a UUID"
    raise IncorrectIDFormatError(
        f"{IncorrectIDFormatError.default_message} (got {recipe.id!r}, {requirement})"
    )


__all__ = [
    "expected_id",
    "identity_is_valid",
    "is_uuid",
    "link_is_url",
    "strip_scheme",
    "validate_identity",
]
