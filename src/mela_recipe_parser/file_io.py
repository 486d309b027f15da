"""Filesystem helpers: extension sniffing, scoped staging directories and atomic writes."""

from __future__ import annotations

import errno
import logging
import os
import shutil
import tempfile
import threading
import time
from collections.abc import Iterator
from contextlib import contextmanager, suppress
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)

_REPLACE_ATTEMPTS = 8
_REPLACE_BACKOFF_SECONDS = 0.01
_STAGING_PREFIX = "mela-staging-"
_UNSAFE_FILENAME_CHARS = ("/", "\\", "\x00")


def is_directory(path: str | Path) -> bool:
    """Return ``True`` when ``path`` exists and is a directory."""
    try:
        return Path(path).is_dir()
    except OSError:
        return False


def path_extension(path: str | Path) -> str:
    """Return the last extension of ``path`` without the dot (``""`` when none)."""
    suffix = Path(path).suffix
    return suffix[1:] if suffix else ""


def safe_filename(name: str) -> str:
    """Replace characters that would let ``name`` escape its directory."""
    cleaned = name
    for ch in _UNSAFE_FILENAME_CHARS:
        cleaned = cleaned.replace(ch, "-")
    if cleaned in {".", ".."}:
        cleaned = cleaned.replace(".", "-")
    return cleaned


@contextmanager
def staging_directory(root: str | Path | None = None) -> Iterator[Path]:
    """Create a uniquely named temporary directory and remove it on exit.

    The directory is removed whether the body returns or raises, so callers
    never leak staged files on the error path.
    """
    parent = None if root is None else str(root)
    staging = Path(tempfile.mkdtemp(prefix=_STAGING_PREFIX, dir=parent))
    logger.debug("Created staging directory %s", staging)
    try:
        yield staging
    finally:
        shutil.rmtree(staging, ignore_errors=True)
        logger.debug("Removed staging directory %s", staging)


@dataclass(slots=True)
class _WriteLock:
    lock: threading.RLock = field(default_factory=threading.RLock)
    holders: int = 0


_write_locks_guard = threading.Lock()
_write_locks: dict[str, _WriteLock] = {}


@contextmanager
def locked_path(path: Path) -> Iterator[None]:
    """Hold the in-process write lock for ``path`` (aliases share one lock).

    The entry is dropped once its last holder leaves, so the table only ever
    holds destinations that are being written right now.
    """
    key = str(path.resolve())
    with _write_locks_guard:
        entry = _write_locks.setdefault(key, _WriteLock())
        entry.holders += 1
    try:
        with entry.lock:
            yield
    finally:
        with _write_locks_guard:
            entry.holders -= 1
            if entry.holders == 0:
                del _write_locks[key]


def _is_access_denied(exc: OSError) -> bool:
    return isinstance(exc, PermissionError) or exc.errno == errno.EACCES


def _replace_with_retry(src: Path, dst: Path) -> None:
    """Move ``src`` over ``dst``, backing off while the destination is held open."""
    delays = [_REPLACE_BACKOFF_SECONDS * step for step in range(1, _REPLACE_ATTEMPTS)]
    for delay in [*delays, None]:
        try:
            src.replace(dst)
            return
        except OSError as exc:
            if delay is None or not _is_access_denied(exc):
                raise
            logger.debug("Replacing %s was denied; retrying in %.2fs", dst, delay)
        time.sleep(delay)


def atomic_write_bytes(path: Path, content: bytes) -> Path:
    """Write ``content`` to ``path`` atomically, replacing any existing file.

    The parent directory must already exist; a missing directory surfaces as
    the ``OSError`` raised by the temp-file creation.
    """
    fd, tmp_name = tempfile.mkstemp(prefix=f"{path.name}.", suffix=".tmp", dir=str(path.parent))
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "wb") as handle:
            handle.write(content)
        with locked_path(path):
            _replace_with_retry(tmp_path, path)
    finally:
        with suppress(OSError):
            tmp_path.unlink(missing_ok=True)
    logger.debug("Wrote %d bytes to %s", len(content), path)
    return path
