"""Catalog error taxonomy.

Each error also derives from the builtin exception a caller would naturally
catch (``FileNotFoundError``, ``OSError``, ``ValueError``).
"""

from __future__ import annotations

from pathlib import Path


class CatalogError(Exception):
    """Base class for namespace catalog failures."""


class NamespaceRootNotFoundError(CatalogError, FileNotFoundError):
    """Raised when a namespaces root directory does not exist."""

    def __init__(self, root: Path) -> None:
        self.root = root
        super().__init__(f"namespaces root not found: {root}")


class CatalogIOError(CatalogError, OSError):
    """Raised when enumerating or creating namespace folders fails."""

    def __init__(self, operation: str, path: Path, cause: OSError) -> None:
        self.operation = operation
        self.path = path
        super().__init__(f"unable to {operation} {path}: {cause.strerror or cause}")
        self.errno = cause.errno


class UnknownEntityFilterError(CatalogError, ValueError):
    """Raised when an entity filter value is outside the closed filter set."""

    def __init__(self, value: object, allowed: tuple[str, ...]) -> None:
        self.value = value
        expected = ", ".join(allowed)
        super().__init__(f"unknown entity filter {value!r}; expected one of: {expected}")


__all__ = [
    "CatalogError",
    "CatalogIOError",
    "NamespaceRootNotFoundError",
    "UnknownEntityFilterError",
]
