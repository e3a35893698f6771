"""Deterministic JSON/YAML rendering of catalogs and merge plans."""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any, Final, Literal

import yaml

from stub_merger.catalog.namespace import Namespace
from stub_merger.catalog.plan import MergePlan
from stub_merger.constants import CATALOG_EXPORT_SCHEMA_VERSION
from stub_merger.utils.fs import atomic_write_text

ExportFormat = Literal["json", "yaml"]
EXPORT_FORMATS: Final[tuple[str, ...]] = ("json", "yaml")


def namespace_payload(namespaces: Namespace | Iterable[Namespace]) -> dict[str, Any]:
    items = [namespaces] if isinstance(namespaces, Namespace) else list(namespaces)
    ordered = sorted(items, key=lambda item: (item.name, item.full_path.as_posix()))
    return {
        "schema_version": CATALOG_EXPORT_SCHEMA_VERSION,
        "kind": "catalog",
        "namespaces": [item.to_dict() for item in ordered],
    }


def plan_payload(plan: MergePlan) -> dict[str, Any]:
    return {
        "schema_version": CATALOG_EXPORT_SCHEMA_VERSION,
        "kind": "merge_plan",
        **plan.to_dict(),
    }


def render_payload(payload: Mapping[str, Any], fmt: str = "json") -> str:
    """Render ``payload`` as canonical JSON or block-style YAML, newline-terminated."""

    if fmt == "json":
        return json.dumps(payload, sort_keys=True, indent=2, ensure_ascii=False) + "\n"
    if fmt == "yaml":
        rendered = yaml.safe_dump(
            dict(payload),
            sort_keys=True,
            default_flow_style=False,
            allow_unicode=True,
            width=120,
        )
        if not rendered.endswith("\n"):
            rendered = rendered + "\n"
        return rendered
    expected = ", ".join(EXPORT_FORMATS)
    raise ValueError(f"unsupported export format {fmt!r}; expected one of: {expected}")


def write_payload(path: str | Path, payload: Mapping[str, Any], fmt: str = "json") -> Path:
    destination = Path(path)
    atomic_write_text(destination, render_payload(payload, fmt))
    return destination


__all__ = [
    "EXPORT_FORMATS",
    "ExportFormat",
    "namespace_payload",
    "plan_payload",
    "render_payload",
    "write_payload",
]
