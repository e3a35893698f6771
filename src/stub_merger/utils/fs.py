"""
stub-merger — filesystem utilities

File: src/stub_merger/utils/fs.py

Purpose
- Thin, deterministic wrappers over directory enumeration and creation used by
  namespace discovery, plus an atomic writer for catalog exports.

Functional requirements
- Enumeration returns direct children only, sorted by name.
- ``OSError`` from the platform propagates unchanged; callers decide how to wrap it.

Non-functional requirements
- Standard library only.
"""

from __future__ import annotations

import contextlib
import os
import tempfile
from pathlib import Path

PathLike = str | os.PathLike[str]

__all__ = [
    "atomic_write_text",
    "ensure_directory",
    "is_directory",
    "list_directories",
    "list_files",
]


def is_directory(path: PathLike) -> bool:
    """Return ``True`` if ``path`` exists and is a directory (symlinks followed)."""

    return Path(path).is_dir()


def ensure_directory(path: PathLike) -> Path:
    """
    Create ``path`` and missing parents if absent.

    An existing directory is left untouched. A non-directory item at ``path``
    raises ``FileExistsError``.
    """

    target = Path(path)
    target.mkdir(parents=True, exist_ok=True)
    return target


def list_files(directory: PathLike) -> list[Path]:
    """Return regular files directly inside ``directory``, sorted by name."""

    return sorted(
        (entry for entry in Path(directory).iterdir() if entry.is_file()),
        key=lambda entry: entry.name,
    )


def list_directories(directory: PathLike) -> list[Path]:
    """Return subdirectories directly inside ``directory``, sorted by name."""

    return sorted(
        (entry for entry in Path(directory).iterdir() if entry.is_dir()),
        key=lambda entry: entry.name,
    )


def atomic_write_text(path: PathLike, text: str, *, encoding: str = "utf-8") -> None:
    """
    Atomically write ``text`` to ``path``.

    The payload goes to a temp file in the destination directory, is flushed
    and fsynced, then moved over the target with ``os.replace``.
    """

    target = Path(path)
    target_parent = target.parent.resolve(strict=True)
    if not target_parent.is_dir():
        raise NotADirectoryError(f"{target_parent!s} is not a directory")

    fd, temp_name = tempfile.mkstemp(
        prefix=f".{target.name}.",
        suffix=".tmp",
        dir=str(target_parent),
    )
    temp_path = Path(temp_name)

    try:
        with os.fdopen(fd, "w", encoding=encoding) as file_handle:
            file_handle.write(text)
            file_handle.flush()
            os.fsync(file_handle.fileno())
        os.replace(temp_path, target)
    except BaseException:
        with contextlib.suppress(OSError):
            temp_path.unlink(missing_ok=True)
        raise
