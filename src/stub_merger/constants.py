"""Stable constants shared across the catalog, config, and CLI layers."""

from __future__ import annotations

from typing import Final

# Schema versions for persisted contracts.
CONFIG_SCHEMA_VERSION: Final[int] = 1
CATALOG_EXPORT_SCHEMA_VERSION: Final[int] = 1

# Namespace layout on disk.
WORK_IN_PROGRESS_DIR: Final[str] = "WORKINPROGRESS"

# Build-artifact folders skipped in generated roots (suffix match on the folder name).
EXCLUDED_DIR_SUFFIXES: Final[tuple[str, ...]] = ("bin", "obj", "Properties")

# Default runtime file names.
DEFAULT_CONFIG_FILE: Final[str] = "stub-merger.toml"
DEFAULT_LOG_FILENAME: Final[str] = "stub-merger.jsonl"

__all__ = [
    "CATALOG_EXPORT_SCHEMA_VERSION",
    "CONFIG_SCHEMA_VERSION",
    "DEFAULT_CONFIG_FILE",
    "DEFAULT_LOG_FILENAME",
    "EXCLUDED_DIR_SUFFIXES",
    "WORK_IN_PROGRESS_DIR",
]
