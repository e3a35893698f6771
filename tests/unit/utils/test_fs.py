"""Unit tests for filesystem helpers."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from stub_merger.utils.fs import (
    atomic_write_text,
    ensure_directory,
    is_directory,
    list_directories,
    list_files,
)

if TYPE_CHECKING:
    from pathlib import Path


def test_listing_separates_files_and_directories_sorted(tmp_path: Path) -> None:
    (tmp_path / "b.txt").write_text("", encoding="utf-8")
    (tmp_path / "a.txt").write_text("", encoding="utf-8")
    (tmp_path / "zdir").mkdir()
    (tmp_path / "adir").mkdir()
    (tmp_path / "adir" / "nested.txt").write_text("", encoding="utf-8")

    assert [item.name for item in list_files(tmp_path)] == ["a.txt", "b.txt"]
    assert [item.name for item in list_directories(tmp_path)] == ["adir", "zdir"]


def test_listing_missing_directory_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        list_files(tmp_path / "absent")


def test_ensure_directory_creates_parents_and_is_idempotent(tmp_path: Path) -> None:
    target = tmp_path / "a" / "b"

    assert ensure_directory(target) == target
    assert ensure_directory(target) == target
    assert is_directory(target)


def test_ensure_directory_rejects_file_collision(tmp_path: Path) -> None:
    (tmp_path / "taken").write_text("", encoding="utf-8")

    with pytest.raises(FileExistsError):
        ensure_directory(tmp_path / "taken")


def test_atomic_write_text_requires_existing_parent(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        atomic_write_text(tmp_path / "missing" / "out.txt", "data")

    atomic_write_text(tmp_path / "out.txt", "data")
    assert (tmp_path / "out.txt").read_text(encoding="utf-8") == "data"
