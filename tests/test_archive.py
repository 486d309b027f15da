"""Tests for ``.melarecipes`` archive expansion and collection."""

from __future__ import annotations

import io
import json
import zipfile
from pathlib import Path

import pytest
from pydantic import ValidationError

import mela_recipe_parser.archive as archive_module
from mela_recipe_parser.archive import collect_archive, expand_archive
from mela_recipe_parser.codec import decode_recipe
from mela_recipe_parser.errors import IncompatibleFormatError
from mela_recipe_parser.schemas import Recipe

pytestmark = pytest.mark.integration

OTHER_ID = "0b7f1e2a-3c4d-4e5f-8a9b-0c1d2e3f4a5b"


@pytest.fixture
def staging_root(tmp_path: Path) -> Path:
    root = tmp_path / "staging"
    root.mkdir()
    return root


def _members(data: bytes) -> dict[str, bytes]:
    with zipfile.ZipFile(io.BytesIO(data)) as archive:
        return {name: archive.read(name) for name in archive.namelist()}


def test_expand_archive_decodes_files_and_skips_directories(
    recipe_payload, zip_bytes, staging_root: Path
) -> None:
    data = zip_bytes(
        {
            "Soup.melarecipe": json.dumps(recipe_payload()).encode("utf-8"),
            "Stew.melarecipe": json.dumps(recipe_payload(id=OTHER_ID, title="Stew")).encode("utf-8"),
            "images/": b"",
        }
    )

    recipes = expand_archive(data, staging_root=staging_root)

    assert [recipe.title for recipe in recipes] == ["Soup", "Stew"]
    assert list(staging_root.iterdir()) == []


def test_expand_archive_accepts_recipes_violating_identity_rule(
    recipe_payload, zip_bytes, staging_root: Path
) -> None:
    data = zip_bytes({"Odd.melarecipe": json.dumps(recipe_payload(id="not-a-uuid")).encode("utf-8")})

    recipes = expand_archive(data, staging_root=staging_root)

    assert recipes[0].id == "not-a-uuid"


def test_expand_archive_bad_entry_raises_and_cleans_staging(
    recipe_payload, zip_bytes, staging_root: Path
) -> None:
    data = zip_bytes(
        {
            "A.melarecipe": json.dumps(recipe_payload()).encode("utf-8"),
            "B.melarecipe": json.dumps(recipe_payload(favorite="yes")).encode("utf-8"),
        }
    )

    with pytest.raises(ValidationError):
        expand_archive(data, staging_root=staging_root)

    assert list(staging_root.iterdir()) == []


def test_expand_archive_malformed_json_raises(zip_bytes, staging_root: Path) -> None:
    data = zip_bytes({"Broken.melarecipe": b"{not json"})

    with pytest.raises(json.JSONDecodeError):
        expand_archive(data, staging_root=staging_root)

    assert list(staging_root.iterdir()) == []


def test_expand_archive_corrupt_zip_raises(staging_root: Path) -> None:
    with pytest.raises(zipfile.BadZipFile):
        expand_archive(b"definitely not a zip", staging_root=staging_root)

    assert list(staging_root.iterdir()) == []


def test_collect_archive_writes_flat_native_files(recipe_payload, staging_root: Path) -> None:
    soup = Recipe.model_validate(recipe_payload())
    stew = Recipe.model_validate(recipe_payload(id=OTHER_ID, title="Stew"))

    members = _members(collect_archive([soup, stew], staging_root=staging_root))

    assert sorted(members) == ["Soup.melarecipe", "Stew.melarecipe"]
    assert decode_recipe(members["Soup.melarecipe"]) == soup
    assert decode_recipe(members["Stew.melarecipe"]) == stew
    assert list(staging_root.iterdir()) == []


def test_collect_archive_keeps_recipes_with_same_title(recipe_payload, staging_root: Path) -> None:
    first = Recipe.model_validate(recipe_payload())
    second = Recipe.model_validate(recipe_payload(id=OTHER_ID))

    members = _members(collect_archive([first, second], staging_root=staging_root))

    assert sorted(members) == ["Soup 2.melarecipe", "Soup.melarecipe"]


def test_collect_archive_invalid_recipe_aborts_and_cleans_staging(
    recipe_payload, staging_root: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    good = Recipe.model_validate(recipe_payload())
    bad = Recipe.model_validate(recipe_payload(id="not-a-uuid", title="Bad"))
    opened: list[object] = []
    monkeypatch.setattr(archive_module.zipfile, "ZipFile", lambda *a, **k: opened.append(a))

    with pytest.raises(IncompatibleFormatError):
        collect_archive([good, bad], staging_root=staging_root)

    assert opened == []
    assert list(staging_root.iterdir()) == []


def test_collect_then_expand_preserves_recipes(recipe_payload, staging_root: Path) -> None:
    recipes = [
        Recipe.model_validate(recipe_payload()),
        Recipe.model_validate(recipe_payload(id=OTHER_ID, title="Stew", categories=["Winter"])),
        Recipe.model_validate(
            recipe_payload(
                id="www.example.com/bread",
                link="https://www.example.com/bread",
                title="Bread",
            )
        ),
    ]

    data = collect_archive(recipes, staging_root=staging_root)
    expanded = expand_archive(data, staging_root=staging_root)
    again = expand_archive(collect_archive(expanded, staging_root=staging_root), staging_root=staging_root)

    by_id = {recipe.id: recipe for recipe in recipes}
    assert len(expanded) == len(recipes)
    assert {recipe.id: recipe for recipe in expanded} == by_id
    assert {recipe.id: recipe for recipe in again} == by_id
