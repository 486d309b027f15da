"""Environment-driven settings for staging and JSON output."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

STAGING_DIR_ENV = "MELA_RECIPE_STAGING_DIR"
JSON_INDENT_ENV = "MELA_RECIPE_JSON_INDENT"

_DEFAULT_JSON_INDENT = 2


@dataclass(frozen=True, slots=True)
class ParserSettings:
    """Runtime knobs; every field has a working default."""

    staging_root: Path | None = None
    json_indent: int = _DEFAULT_JSON_INDENT


def _staging_root_from_env() -> Path | None:
    raw = os.getenv(STAGING_DIR_ENV, "").strip()
    if not raw:
        return None
    path = Path(raw).expanduser()
    if not path.is_dir():
        logger.warning("Ignoring %s=%r; not a directory", STAGING_DIR_ENV, raw)
        return None
    return path


def _json_indent_from_env() -> int:
    raw = os.getenv(JSON_INDENT_ENV, "").strip()
    if not raw:
        return _DEFAULT_JSON_INDENT
    try:
        return max(0, int(raw))
    except ValueError:
        logger.warning(
            "Invalid %s=%r; using %s",
            JSON_INDENT_ENV,
            raw,
            _DEFAULT_JSON_INDENT,
        )
        return _DEFAULT_JSON_INDENT


def load_settings() -> ParserSettings:
    """Read settings from the environment."""
    return ParserSettings(
        staging_root=_staging_root_from_env(),
        json_indent=_json_indent_from_env(),
    )


__all__ = ["JSON_INDENT_ENV", "STAGING_DIR_ENV", "ParserSettings", "load_settings"]
