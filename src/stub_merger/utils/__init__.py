"""Utility exports for filesystem helpers."""

from stub_merger.utils.fs import (
    atomic_write_text,
    ensure_directory,
    is_directory,
    list_directories,
    list_files,
)

__all__ = [
    "atomic_write_text",
    "ensure_directory",
    "is_directory",
    "list_directories",
    "list_files",
]
