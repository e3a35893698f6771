"""Namespace catalog: entity model, discovery, lookups, and merge planning."""

from stub_merger.catalog.discovery import (
    discover_for_merge,
    discover_generated,
    ensure_layout,
    is_excluded_directory,
    namespace_exists,
)
from stub_merger.catalog.entity import Entity, NamespaceKey
from stub_merger.catalog.errors import (
    CatalogError,
    CatalogIOError,
    NamespaceRootNotFoundError,
    UnknownEntityFilterError,
)
from stub_merger.catalog.filters import EntityFilter, coerce_filter
from stub_merger.catalog.namespace import Namespace
from stub_merger.catalog.plan import (
    MergeAction,
    MergePlan,
    NamespacePlan,
    PlanItem,
    plan_merge,
    plan_namespace,
)

__all__ = [
    "CatalogError",
    "CatalogIOError",
    "Entity",
    "EntityFilter",
    "MergeAction",
    "MergePlan",
    "Namespace",
    "NamespaceKey",
    "NamespacePlan",
    "NamespaceRootNotFoundError",
    "PlanItem",
    "UnknownEntityFilterError",
    "coerce_filter",
    "discover_for_merge",
    "discover_generated",
    "ensure_layout",
    "is_excluded_directory",
    "namespace_exists",
    "plan_merge",
    "plan_namespace",
]
