"""Unit tests for per-name merge planning."""

from __future__ import annotations

from pathlib import Path

import pytest
from structlog.testing import capture_logs

from stub_merger.catalog.entity import Entity, NamespaceKey
from stub_merger.catalog.errors import NamespaceRootNotFoundError
from stub_merger.catalog.namespace import Namespace
from stub_merger.catalog.plan import MergeAction, plan_merge, plan_namespace


def _write(path: Path, content: str = "") -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def _namespace(root: str, name: str, files: dict[str, bool]) -> Namespace:
    key = NamespaceKey.of(root, name)
    entities = [
        Entity.from_path(
            key,
            key.full_path / ("WORKINPROGRESS" if is_stub else "") / filename,
            is_stub=is_stub,
        )
        for filename, is_stub in files.items()
    ]
    return Namespace(root, name, entities)


def test_plan_namespace_classifies_each_name() -> None:
    generated = _namespace(
        "/gen", "Shapes", {"Circle.src": True, "Square.src": True, "Hex.src": True}
    )
    existing = _namespace(
        "/src",
        "Shapes",
        {"Circle.src": False, "Square.src": True, "Legacy.src": False},
    )

    plan = plan_namespace(generated, existing)

    actions = {item.name: item.action for item in plan.items}
    assert actions == {
        "Circle": MergeAction.MERGE,
        "Hex": MergeAction.COPY,
        "Legacy": MergeAction.NONE,
        "Square": MergeAction.COPY,
    }
    assert [item.name for item in plan.items] == ["Circle", "Hex", "Legacy", "Square"]
    assert plan.namespace == "Shapes"
    assert [item.name for item in plan.items_for(MergeAction.COPY)] == ["Hex", "Square"]


def test_plan_namespace_surfaces_ambiguous_merge_targets() -> None:
    generated = _namespace("/gen", "Shapes", {"Circle.src": True})
    existing = _namespace("/src", "Shapes", {"Circle.src": False, "Circle.old": False})

    (item,) = plan_namespace(generated, existing).items

    assert item.action is MergeAction.MERGE
    assert item.conflict_count == 2
    assert item.is_conflict
    assert [entity.path.name for entity in item.existing] == ["Circle.old", "Circle.src"]


def test_plan_merge_discovers_both_sides(tmp_path: Path) -> None:
    generated_root = tmp_path / "generated"
    namespaces_root = tmp_path / "src"
    _write(generated_root / "Shapes" / "Circle.src")
    _write(generated_root / "Shapes" / "Square.src")
    _write(generated_root / "Widgets" / "Button.src")
    (generated_root / "bin").mkdir()
    _write(namespaces_root / "Shapes" / "Circle.src")
    _write(namespaces_root / "Shapes" / "Circle.cs")

    with capture_logs() as logs:
        plan = plan_merge(generated_root, namespaces_root)

    assert [item.namespace for item in plan.namespaces] == ["Shapes", "Widgets"]
    assert plan.counts() == {"copy": 2, "merge": 1, "none": 0}
    assert [(name, item.name) for name, item in plan.conflicts()] == [("Shapes", "Circle")]
    assert (namespaces_root / "Widgets" / "WORKINPROGRESS").is_dir()
    assert any(entry["event"] == "catalog_merge_planned" for entry in logs)


def test_plan_merge_requires_namespaces_root(tmp_path: Path) -> None:
    (tmp_path / "generated" / "Shapes").mkdir(parents=True)

    with pytest.raises(NamespaceRootNotFoundError):
        plan_merge(tmp_path / "generated", tmp_path / "absent")


def test_plan_to_dict_is_json_ready() -> None:
    generated = _namespace("/gen", "Shapes", {"Circle.src": True})
    existing = _namespace("/src", "Shapes", {"Circle.src": False})

    payload = plan_namespace(generated, existing).to_dict()

    assert payload == {
        "namespace": "Shapes",
        "items": [
            {
                "name": "Circle",
                "action": "merge",
                "generated": ["/gen/Shapes/WORKINPROGRESS/Circle.src"],
                "existing": [{"path": "/src/Shapes/Circle.src", "origin": "implemented"}],
                "conflict_count": 0,
            }
        ],
    }
