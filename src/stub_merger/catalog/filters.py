"""Closed set of origin filters used by namespace lookups."""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING, assert_never

from stub_merger.catalog.errors import UnknownEntityFilterError

if TYPE_CHECKING:
    from stub_merger.catalog.entity import Entity


class EntityFilter(StrEnum):
    ANY = "any"
    STUB_ONLY = "stub_only"
    IMPLEMENTED_ONLY = "implemented_only"


FILTER_VALUES: tuple[str, ...] = tuple(item.value for item in EntityFilter)


def coerce_filter(value: EntityFilter | str) -> EntityFilter:
    """Return ``value`` as an :class:`EntityFilter` or raise ``UnknownEntityFilterError``."""

    if isinstance(value, EntityFilter):
        return value
    if isinstance(value, str):
        normalized = value.strip().lower().replace("-", "_")
        if normalized in FILTER_VALUES:
            return EntityFilter(normalized)
    raise UnknownEntityFilterError(value, FILTER_VALUES)


def matches_origin(entity: Entity, entity_filter: EntityFilter) -> bool:
    match entity_filter:
        case EntityFilter.ANY:
            return True
        case EntityFilter.STUB_ONLY:
            return entity.is_stub
        case EntityFilter.IMPLEMENTED_ONLY:
            return not entity.is_stub
        case _:
            assert_never(entity_filter)


__all__ = ["FILTER_VALUES", "EntityFilter", "coerce_filter", "matches_origin"]
