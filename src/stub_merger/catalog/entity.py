"""Entity and namespace-key value objects.

An :class:`Entity` is one named source unit found at one filesystem location.
It refers to its owning namespace through a :class:`NamespaceKey` handle rather
than a pointer, so entities stay plain hashable values and the namespace stays
the only owner of its entity collection.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

PathLike = str | os.PathLike[str]


def base_name(path: PathLike) -> str:
    """Return the file name with everything from its last ``.`` removed.

    ``Circle.src`` gives ``Circle``, ``Circle.`` gives ``Circle``, ``.gitkeep`` gives ``""``
    and ``Makefile`` is unchanged.
    """

    file_name = Path(path).name
    head, dot, _ = file_name.rpartition(".")
    return head if dot else file_name


@dataclass(frozen=True, slots=True)
class NamespaceKey:
    """Stable handle identifying a namespace by its root and name."""

    root: Path
    name: str

    @classmethod
    def of(cls, root: PathLike, name: str) -> NamespaceKey:
        return cls(root=Path(root), name=name)

    @property
    def full_path(self) -> Path:
        return self.root / self.name


@dataclass(frozen=True, slots=True)
class Entity:
    """A discovered source unit. Equality and hashing use ``path`` only."""

    path: Path
    name: str = field(compare=False)
    is_stub: bool = field(compare=False)
    namespace: NamespaceKey = field(compare=False)

    @classmethod
    def from_path(cls, namespace: NamespaceKey, path: PathLike, is_stub: bool) -> Entity:
        """Build an entity, deriving ``name`` from the base name without its extension."""

        resolved = Path(path)
        return cls(
            path=resolved,
            name=base_name(resolved),
            is_stub=is_stub,
            namespace=namespace,
        )

    @property
    def origin(self) -> str:
        return "stub" if self.is_stub else "implemented"

    def to_dict(self) -> dict[str, str | bool]:
        return {
            "name": self.name,
            "path": self.path.as_posix(),
            "is_stub": self.is_stub,
            "origin": self.origin,
            "namespace": self.namespace.name,
        }


__all__ = ["Entity", "NamespaceKey", "PathLike", "base_name"]
