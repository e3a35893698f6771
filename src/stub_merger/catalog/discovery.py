"""
stub-merger — namespace discovery

File: src/stub_merger/catalog/discovery.py

Purpose
- Scan namespace folders on disk and build :class:`Namespace` snapshots.

Layouts
- Merging mode: ``<root>/<namespace>/*`` are implemented entities and
  ``<root>/<namespace>/WORKINPROGRESS/*`` are stubs. A missing namespace is
  bootstrapped (both folders created) and comes back empty.
- Generation-only mode: every ``<root>/<namespace>/*`` file is a stub. Folders
  whose name ends with a build-artifact suffix (``bin``, ``obj``,
  ``Properties``) are skipped. The match is a plain suffix test, so
  ``Widgets.Properties`` and ``Cabin`` are skipped as well.

Functional requirements
- A missing namespaces root raises ``NamespaceRootNotFoundError``.
- Platform ``OSError`` during creation or enumeration is re-raised as
  ``CatalogIOError`` with the original error chained. Nothing is retried.
- Enumeration is sorted so repeated scans of an unchanged tree are identical.
- Events go to the injected ``logger`` or to ``get_event_logger(__name__)``, which
  falls back to stdlib ``logging`` while structlog is unconfigured.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Any

from stub_merger.catalog.entity import Entity, NamespaceKey, PathLike
from stub_merger.catalog.errors import CatalogIOError, NamespaceRootNotFoundError
from stub_merger.catalog.namespace import Namespace
from stub_merger.constants import EXCLUDED_DIR_SUFFIXES, WORK_IN_PROGRESS_DIR
from stub_merger.observability.logging import get_event_logger
from stub_merger.utils.fs import ensure_directory, is_directory, list_directories, list_files


def namespace_exists(namespaces_root: PathLike, namespace_name: str) -> bool:
    """Return ``True`` if ``<namespaces_root>/<namespace_name>`` is a directory."""

    return is_directory(Path(namespaces_root) / namespace_name)


def ensure_layout(
    namespace_path: PathLike,
    *,
    work_in_progress_dir: str = WORK_IN_PROGRESS_DIR,
    logger: Any | None = None,
) -> Path:
    """Create the namespace folder and its work-in-progress subfolder when absent.

    Idempotent. Returns the work-in-progress folder path.
    """

    log = _resolve_logger(logger)
    namespace_dir = Path(namespace_path)
    wip_dir = namespace_dir / work_in_progress_dir
    bootstrapped = not is_directory(wip_dir)
    for target in (namespace_dir, wip_dir):
        try:
            ensure_directory(target)
        except OSError as exc:
            raise CatalogIOError("create directory", target, exc) from exc

    log.debug(
        "catalog_layout_ensured",
        namespace_path=namespace_dir.as_posix(),
        work_in_progress_path=wip_dir.as_posix(),
        bootstrapped=bootstrapped,
    )
    return wip_dir


def discover_for_merge(
    namespaces_root: PathLike,
    namespace_name: str,
    *,
    work_in_progress_dir: str = WORK_IN_PROGRESS_DIR,
    logger: Any | None = None,
) -> Namespace:
    """Scan an existing namespace: root files are implemented, work-in-progress files are stubs."""

    log = _resolve_logger(logger)
    root = _require_root(namespaces_root)
    key = NamespaceKey.of(root, namespace_name)

    wip_dir = ensure_layout(key.full_path, work_in_progress_dir=work_in_progress_dir, logger=log)

    entities: list[Entity] = [
        Entity.from_path(key, path, is_stub=False) for path in _scan_files(key.full_path)
    ]
    entities.extend(Entity.from_path(key, path, is_stub=True) for path in _scan_files(wip_dir))

    namespace = Namespace(root, namespace_name, entities)
    log.info(
        "catalog_namespace_discovered",
        mode="merge",
        namespace=namespace.name,
        full_path=namespace.full_path.as_posix(),
        implemented_count=len(namespace.implemented),
        stub_count=len(namespace.stubs),
    )
    ambiguous = namespace.ambiguous_names()
    if ambiguous:
        log.warning(
            "catalog_ambiguous_entity_names",
            namespace=namespace.name,
            ambiguous_names=ambiguous,
        )
    return namespace


def discover_generated(
    namespaces_root: PathLike,
    *,
    excluded_dir_suffixes: Sequence[str] = EXCLUDED_DIR_SUFFIXES,
    logger: Any | None = None,
) -> frozenset[Namespace]:
    """Scan a generated-stub root: one namespace per non-excluded folder, every file a stub."""

    log = _resolve_logger(logger)
    root = _require_root(namespaces_root)
    suffixes = tuple(excluded_dir_suffixes)

    try:
        candidates = list_directories(root)
    except OSError as exc:
        raise CatalogIOError("enumerate directories in", root, exc) from exc

    namespaces: set[Namespace] = set()
    for directory in candidates:
        if is_excluded_directory(directory.name, suffixes):
            log.debug(
                "catalog_generated_directory_skipped",
                directory=directory.as_posix(),
            )
            continue

        key = NamespaceKey.of(root, directory.name)
        entities = [Entity.from_path(key, path, is_stub=True) for path in _scan_files(directory)]
        namespaces.add(Namespace(root, directory.name, entities))

    log.info(
        "catalog_generated_root_discovered",
        root=root.as_posix(),
        namespace_count=len(namespaces),
        stub_count=sum(len(item.entities) for item in namespaces),
    )
    return frozenset(namespaces)


def is_excluded_directory(directory_name: str, suffixes: Sequence[str]) -> bool:
    return any(directory_name.endswith(suffix) for suffix in suffixes)


def _require_root(namespaces_root: PathLike) -> Path:
    root = Path(namespaces_root)
    if not is_directory(root):
        raise NamespaceRootNotFoundError(root)
    return root


def _scan_files(directory: Path) -> list[Path]:
    try:
        return list_files(directory)
    except OSError as exc:
        raise CatalogIOError("enumerate files in", directory, exc) from exc


def _resolve_logger(logger: Any | None) -> Any:
    return logger if logger is not None else get_event_logger(__name__)


__all__ = [
    "discover_for_merge",
    "discover_generated",
    "ensure_layout",
    "is_excluded_directory",
    "namespace_exists",
]
