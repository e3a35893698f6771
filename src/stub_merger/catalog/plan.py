"""
stub-merger — merge planning

File: src/stub_merger/catalog/plan.py

Purpose
- Decide, per entity name, what the downstream merge step must do with a
  generated stub namespace and its existing counterpart. Read-only: no file
  content is inspected or rewritten here.

Actions
- ``merge``: a generated stub meets an existing implemented entity.
- ``copy``: a generated stub has no implemented counterpart (the existing side
  holds only a work-in-progress stub, or nothing).
- ``none``: the name exists only on the existing side.

Ambiguity
- When the existing side has several implemented entities for one name, the
  item records ``conflict_count`` instead of choosing a target.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from stub_merger.catalog.discovery import discover_for_merge, discover_generated
from stub_merger.catalog.entity import Entity, PathLike
from stub_merger.catalog.filters import EntityFilter
from stub_merger.catalog.namespace import Namespace
from stub_merger.constants import EXCLUDED_DIR_SUFFIXES, WORK_IN_PROGRESS_DIR
from stub_merger.observability.logging import get_event_logger


class MergeAction(StrEnum):
    MERGE = "merge"
    COPY = "copy"
    NONE = "none"


@dataclass(frozen=True, slots=True)
class PlanItem:
    name: str
    action: MergeAction
    generated: tuple[Entity, ...]
    existing: tuple[Entity, ...]
    conflict_count: int = 0

    @property
    def is_conflict(self) -> bool:
        return self.conflict_count > 1

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "action": self.action.value,
            "generated": [entity.path.as_posix() for entity in self.generated],
            "existing": [
                {"path": entity.path.as_posix(), "origin": entity.origin}
                for entity in self.existing
            ],
            "conflict_count": self.conflict_count,
        }


@dataclass(frozen=True, slots=True)
class NamespacePlan:
    namespace: str
    items: tuple[PlanItem, ...]

    def items_for(self, action: MergeAction) -> tuple[PlanItem, ...]:
        return tuple(item for item in self.items if item.action is action)

    def to_dict(self) -> dict[str, Any]:
        return {
            "namespace": self.namespace,
            "items": [item.to_dict() for item in self.items],
        }


@dataclass(frozen=True, slots=True)
class MergePlan:
    namespaces: tuple[NamespacePlan, ...]

    def counts(self) -> dict[str, int]:
        tally: Counter[str] = Counter({action.value: 0 for action in MergeAction})
        for namespace_plan in self.namespaces:
            tally.update(item.action.value for item in namespace_plan.items)
        return dict(sorted(tally.items()))

    def conflicts(self) -> tuple[tuple[str, PlanItem], ...]:
        return tuple(
            (namespace_plan.namespace, item)
            for namespace_plan in self.namespaces
            for item in namespace_plan.items
            if item.is_conflict
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "counts": self.counts(),
            "namespaces": [namespace_plan.to_dict() for namespace_plan in self.namespaces],
        }


def plan_namespace(generated: Namespace, existing: Namespace) -> NamespacePlan:
    """Classify every entity name seen in ``generated`` or ``existing``."""

    names = set(generated.entity_names()) | set(existing.entity_names())
    items: list[PlanItem] = []
    for name in sorted(names):
        generated_stubs = _sorted(generated.entities_named(name, EntityFilter.STUB_ONLY))
        existing_entities = _sorted(existing.entities_named(name, EntityFilter.ANY))
        implemented = existing.entities_named(name, EntityFilter.IMPLEMENTED_ONLY)

        if not generated_stubs:
            action = MergeAction.NONE
        elif implemented:
            action = MergeAction.MERGE
        else:
            action = MergeAction.COPY

        items.append(
            PlanItem(
                name=name,
                action=action,
                generated=generated_stubs,
                existing=existing_entities,
                conflict_count=len(implemented) if len(implemented) > 1 else 0,
            )
        )
    return NamespacePlan(namespace=generated.name, items=tuple(items))


def plan_merge(
    generated_root: PathLike,
    namespaces_root: PathLike,
    *,
    work_in_progress_dir: str = WORK_IN_PROGRESS_DIR,
    excluded_dir_suffixes: Iterable[str] = EXCLUDED_DIR_SUFFIXES,
    logger: Any | None = None,
) -> MergePlan:
    """Discover a generated root and plan each namespace against ``namespaces_root``.

    Existing namespaces are discovered in merging mode, so a namespace that is
    missing under ``namespaces_root`` is created empty.
    """

    log = logger if logger is not None else get_event_logger(__name__)
    generated_namespaces = discover_generated(
        generated_root,
        excluded_dir_suffixes=tuple(excluded_dir_suffixes),
        logger=log,
    )

    plans: list[NamespacePlan] = []
    for generated in sorted(generated_namespaces, key=lambda item: item.name):
        existing = discover_for_merge(
            namespaces_root,
            generated.name,
            work_in_progress_dir=work_in_progress_dir,
            logger=log,
        )
        plans.append(plan_namespace(generated, existing))

    plan = MergePlan(namespaces=tuple(plans))
    log.info(
        "catalog_merge_planned",
        namespace_count=len(plan.namespaces),
        counts=plan.counts(),
        conflict_count=len(plan.conflicts()),
    )
    return plan


def _sorted(entities: Iterable[Entity]) -> tuple[Entity, ...]:
    return tuple(sorted(entities, key=lambda entity: entity.path.as_posix()))


__all__ = [
    "MergeAction",
    "MergePlan",
    "NamespacePlan",
    "PlanItem",
    "plan_merge",
    "plan_namespace",
]
