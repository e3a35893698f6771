"""Namespace model: a frozen set of entities plus origin-aware lookups."""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from stub_merger.catalog.entity import Entity, NamespaceKey, PathLike
from stub_merger.catalog.filters import EntityFilter, coerce_filter, matches_origin


class Namespace:
    """A named grouping directory and the entities discovered in it.

    The entity set is fixed at construction; rescanning the filesystem builds a
    new instance. Every entity must carry this namespace's :attr:`key`.
    """

    __slots__ = ("_entities", "_key")

    def __init__(self, root: PathLike, name: str, entities: Iterable[Entity] = ()) -> None:
        self._key = NamespaceKey.of(root, name)
        collected: set[Entity] = set()
        for entity in entities:
            if entity.namespace != self._key:
                raise ValueError(
                    f"entity {entity.path} belongs to namespace {entity.namespace.name!r}, "
                    f"not {name!r}"
                )
            collected.add(entity)
        self._entities = frozenset(collected)

    def __repr__(self) -> str:
        return (
            f"Namespace(name={self.name!r}, full_path={str(self.full_path)!r}, "
            f"entities={len(self._entities)})"
        )

    @property
    def key(self) -> NamespaceKey:
        return self._key

    @property
    def name(self) -> str:
        return self._key.name

    @property
    def root(self) -> Path:
        return self._key.root

    @property
    def full_path(self) -> Path:
        return self._key.full_path

    @property
    def entities(self) -> frozenset[Entity]:
        return self._entities

    @property
    def stubs(self) -> frozenset[Entity]:
        return self._select(None, EntityFilter.STUB_ONLY)

    @property
    def implemented(self) -> frozenset[Entity]:
        return self._select(None, EntityFilter.IMPLEMENTED_ONLY)

    def owns(self, entity: Entity) -> bool:
        return entity.namespace == self._key and entity in self._entities

    def contains_entity_named(
        self, name: str, entity_filter: EntityFilter | str = EntityFilter.ANY
    ) -> bool:
        """Return ``True`` if an entity called ``name`` passes ``entity_filter``."""

        selected = coerce_filter(entity_filter)
        return any(
            entity.name == name and matches_origin(entity, selected) for entity in self._entities
        )

    def entities_named(
        self, name: str, entity_filter: EntityFilter | str = EntityFilter.ANY
    ) -> frozenset[Entity]:
        """Return every entity called ``name`` that passes ``entity_filter``."""

        return self._select(name, coerce_filter(entity_filter))

    def entity_names(self, entity_filter: EntityFilter | str = EntityFilter.ANY) -> tuple[str, ...]:
        selected = coerce_filter(entity_filter)
        return tuple(sorted({entity.name for entity in self._select(None, selected)}))

    def name_counts(self, entity_filter: EntityFilter | str = EntityFilter.ANY) -> dict[str, int]:
        selected = coerce_filter(entity_filter)
        counts = Counter(entity.name for entity in self._select(None, selected))
        return dict(sorted(counts.items()))

    def ambiguous_names(self) -> dict[str, int]:
        """Names held by more than one entity of the same origin, with the larger count.

        Collisions are reported, never resolved here: picking a merge target is
        left to the caller.
        """

        stub_counts = self.name_counts(EntityFilter.STUB_ONLY)
        implemented_counts = self.name_counts(EntityFilter.IMPLEMENTED_ONLY)
        ambiguous: dict[str, int] = {}
        for name in sorted(set(stub_counts) | set(implemented_counts)):
            count = max(stub_counts.get(name, 0), implemented_counts.get(name, 0))
            if count > 1:
                ambiguous[name] = count
        return ambiguous

    def sorted_entities(self) -> tuple[Entity, ...]:
        return tuple(sorted(self._entities, key=lambda entity: entity.path.as_posix()))

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "full_path": self.full_path.as_posix(),
            "entities": [entity.to_dict() for entity in self.sorted_entities()],
            "ambiguous_names": self.ambiguous_names(),
        }

    def _select(self, name: str | None, entity_filter: EntityFilter) -> frozenset[Entity]:
        return frozenset(
            entity
            for entity in self._entities
            if (name is None or entity.name == name) and matches_origin(entity, entity_filter)
        )


__all__ = ["Namespace"]
