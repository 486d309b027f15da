"""Shared pytest configuration, marker registration and recipe fixtures."""

from __future__ import annotations

import io
import zipfile
from collections.abc import Callable
from typing import Any

import pytest

SOUP_ID = "7c9e6679-7425-40de-944b-e07fc1f90ae7"


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line("markers", "unit: fast isolated unit tests")
    config.addinivalue_line("markers", "integration: filesystem/archive integration tests")


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    """Run fast unit tests first, integration tests second."""

    def sort_key(item: pytest.Item) -> tuple[int, str]:
        if item.get_closest_marker("integration"):
            return (1, item.nodeid)
        return (0, item.nodeid)

    items.sort(key=sort_key)


@pytest.fixture(autouse=True)
def _isolated_settings_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("MELA_RECIPE_STAGING_DIR", raising=False)
    monkeypatch.delenv("MELA_RECIPE_JSON_INDENT", raising=False)


@pytest.fixture
def recipe_payload() -> Callable[..., dict[str, Any]]:
    """Return a builder for wire-format recipe dicts (camelCase keys)."""

    def _build(**overrides: Any) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "id": SOUP_ID,
            "date": "2023-01-01T00:00:00Z",
            "images": [],
            "title": "Soup",
            "categories": [],
            "wantToCook": False,
            "favorite": True,
        }
        payload.update(overrides)
        return payload

    return _build


@pytest.fixture
def zip_bytes() -> Callable[[dict[str, bytes]], bytes]:
    """Return a builder that zips ``{name: content}`` in memory; names ending in ``/`` are directories."""

    def _build(entries: dict[str, bytes]) -> bytes:
        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, "w") as archive:
            for name, content in entries.items():
                archive.writestr(name, content)
        return buffer.getvalue()

    return _build
