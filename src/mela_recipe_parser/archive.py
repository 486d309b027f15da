"""Zip archive codec for ``.melarecipes`` files.

An archive holds sibling ``.melarecipe`` JSON documents, one per recipe.
Both directions go through a private staging directory that is removed
before the call returns, including when it raises.
"""

from __future__ import annotations

import io
import logging
import zipfile
from collections.abc import Iterable
from pathlib import Path

from mela_recipe_parser.codec import decode_recipe
from mela_recipe_parser.file_io import is_directory, staging_directory
from mela_recipe_parser.native import build_native_file
from mela_recipe_parser.schemas import Recipe

logger = logging.getLogger(__name__)


def expand_archive(data: bytes, *, staging_root: str | Path | None = None) -> list[Recipe]:
    """Decode every top-level file of a ``.melarecipes`` archive.

    Entries are read in name order; directories are skipped. The first entry
    that fails to decode aborts the whole expansion.
    """
    with zipfile.ZipFile(io.BytesIO(data)) as archive, staging_directory(staging_root) as staging:
        archive.extractall(staging)
        recipes: list[Recipe] = []
        for entry in sorted(staging.iterdir(), key=lambda path: path.name):
            if is_directory(entry):
                logger.debug("Skipping directory entry %s", entry.name)
                continue
            recipes.append(decode_recipe(entry.read_bytes()))
        logger.debug("Expanded %d recipes from archive", len(recipes))
        return recipes


def _unique_name(filename: str, taken: set[str]) -> str:
    stem, dot, ext = filename.rpartition(".")
    candidate = filename
    counter = 2
    while candidate.casefold() in taken:
        candidate = f"{stem} {counter}{dot}{ext}"
        counter += 1
    taken.add(candidate.casefold())
    return candidate


def collect_archive(recipes: Iterable[Recipe], *, staging_root: str | Path | None = None) -> bytes:
    """Bundle ``recipes`` into ``.melarecipes`` archive bytes.

    Every recipe must satisfy the identity rule; the first one that does not
    raises :class:`~mela_recipe_parser.errors.IncompatibleFormatError` and no
    archive is produced.
    """
    with staging_directory(staging_root) as staging:
        taken: set[str] = set()
        for recipe in recipes:
            native = build_native_file(recipe)
            name = _unique_name(native.filename, taken)
            (staging / name).write_bytes(native.data)

        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as archive:
            for staged in sorted(staging.iterdir(), key=lambda path: path.name):
                archive.write(staged, arcname=staged.name)
        logger.debug("Collected %d recipes into archive", len(taken))
        return buffer.getvalue()


__all__ = ["collect_archive", "expand_archive"]
