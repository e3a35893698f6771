"""Command-line interface router for stub-merger."""

from __future__ import annotations

import argparse
import sys
import time
from collections.abc import Iterator, Mapping, Sequence
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Final
from uuid import uuid4

from stub_merger.catalog import (
    CatalogIOError,
    EntityFilter,
    Namespace,
    NamespaceRootNotFoundError,
    UnknownEntityFilterError,
    coerce_filter,
    discover_for_merge,
    discover_generated,
    plan_merge,
)
from stub_merger.catalog.export import (
    EXPORT_FORMATS,
    namespace_payload,
    plan_payload,
    render_payload,
    write_payload,
)
from stub_merger.catalog.plan import MergePlan
from stub_merger.config import (
    ConfigLoadError,
    ConfigValidationError,
    dump_effective_config,
    load_config,
)
from stub_merger.main import ExitCode
from stub_merger.observability import (
    LoggingConfig,
    correlation_scope,
    setup_structured_logging,
    shutdown_logging,
)
from stub_merger.ui.render import CLIRenderer, create_renderer

OUTPUT_FORMATS: Final[tuple[str, ...]] = ("text", *EXPORT_FORMATS)


class CLIError(Exception):
    """Typed CLI failure with an explicit process exit code."""

    def __init__(self, message: str, exit_code: int = int(ExitCode.USAGE_ERROR)) -> None:
        super().__init__(message)
        self.message = message
        self.exit_code = exit_code

    def __str__(self) -> str:
        return self.message


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse command router."""

    parser = argparse.ArgumentParser(
        prog="stub-merger",
        description=(
            "stub-merger — catalog stub and implemented source units per namespace.\n\n"
            "Common workflows:\n"
            "  stub-merger scan ROOT NAMESPACE        List implemented and stub entities\n"
            "  stub-merger generated GENERATED_ROOT   List namespaces in a generated tree\n"
            "  stub-merger plan GENERATED_ROOT ROOT   Classify names as merge/copy/none\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--config",
        dest="config_path",
        default=None,
        help="Path to stub-merger TOML config (default: ./stub-merger.toml if present).",
    )
    common.add_argument(
        "--log-dir",
        default=None,
        help="Directory for JSON-lines run logs (overrides observability.log_dir).",
    )
    common.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        default=False,
        help="Log at DEBUG level and mirror log lines to stderr.",
    )

    output = argparse.ArgumentParser(add_help=False)
    output.add_argument(
        "--format",
        dest="output_format",
        choices=OUTPUT_FORMATS,
        default="text",
        help="Output format (default: text).",
    )
    output.add_argument(
        "--output",
        "-o",
        default=None,
        help="Write a json/yaml export to this file instead of stdout.",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    scan_parser = subparsers.add_parser(
        "scan",
        parents=[common, output],
        help="Discover one namespace (implemented root + work-in-progress stubs).",
    )
    scan_parser.add_argument("namespaces_root", help="Root folder holding namespace folders.")
    scan_parser.add_argument("namespace", help="Namespace folder name; created if missing.")
    scan_parser.add_argument(
        "--name",
        dest="entity_name",
        default=None,
        help="Only show entities with this name; exit 1 when none match.",
    )
    scan_parser.add_argument(
        "--filter",
        dest="entity_filter",
        default=EntityFilter.ANY.value,
        help="Origin filter: any, stub_only, implemented_only (default: any).",
    )
    scan_parser.set_defaults(handler=_cmd_scan)

    generated_parser = subparsers.add_parser(
        "generated",
        parents=[common, output],
        help="Discover every namespace under a generated-stub root.",
    )
    generated_parser.add_argument("generated_root", help="Root of the generated stub tree.")
    generated_parser.set_defaults(handler=_cmd_generated)

    plan_parser = subparsers.add_parser(
        "plan",
        parents=[common, output],
        help="Plan merge/copy actions for generated stubs against existing namespaces.",
    )
    plan_parser.add_argument("generated_root", help="Root of the generated stub tree.")
    plan_parser.add_argument("namespaces_root", help="Root folder holding existing namespaces.")
    plan_parser.add_argument(
        "--fail-on-conflict",
        action="store_true",
        default=False,
        help="Exit 1 when a name has more than one implemented merge target.",
    )
    plan_parser.set_defaults(handler=_cmd_plan)

    config_parser = subparsers.add_parser(
        "config",
        parents=[common],
        help="Print the effective configuration as JSON.",
    )
    config_parser.set_defaults(handler=_cmd_config)

    return parser


def run_cli(argv: Sequence[str] | None = None) -> int:
    """Parse argv, route to a command handler, and return process exit code."""

    parser = build_parser()
    namespace = parser.parse_args(list(argv) if argv is not None else None)
    handler = getattr(namespace, "handler", None)
    if not callable(handler):
        parser.print_help(sys.stderr)
        return int(ExitCode.USAGE_ERROR)

    try:
        result = handler(namespace)
    except CLIError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return exc.exit_code
    return int(result)


# ---------------------------------------------------------------------------
# Command handlers
# ---------------------------------------------------------------------------


def _cmd_scan(args: argparse.Namespace) -> int:
    config = _load_effective_config(args)
    catalog_cfg = config["catalog"]
    renderer = create_renderer()
    entity_name: str | None = args.entity_name

    try:
        entity_filter = coerce_filter(args.entity_filter)
    except UnknownEntityFilterError as exc:
        raise CLIError(str(exc)) from exc

    with _logging_session(args, config), correlation_scope(namespace=args.namespace):
        with _catalog_errors():
            namespace = discover_for_merge(
                args.namespaces_root,
                args.namespace,
                work_in_progress_dir=catalog_cfg["work_in_progress_dir"],
            )

    if entity_name is not None:
        selected = namespace.entities_named(entity_name, entity_filter)
        namespace = Namespace(namespace.root, namespace.name, selected)
    elif entity_filter is not EntityFilter.ANY:
        namespace = Namespace(
            namespace.root,
            namespace.name,
            namespace.stubs if entity_filter is EntityFilter.STUB_ONLY else namespace.implemented,
        )

    if args.output_format == "text":
        _require_no_output_file(args)
        _render_namespace(renderer, namespace)
    else:
        _emit_payload(args, renderer, namespace_payload(namespace))

    if entity_name is not None and not namespace.entities:
        return int(ExitCode.FINDINGS)
    return int(ExitCode.SUCCESS)


def _cmd_generated(args: argparse.Namespace) -> int:
    config = _load_effective_config(args)
    renderer = create_renderer()

    with _logging_session(args, config), _catalog_errors():
        namespaces = discover_generated(
            args.generated_root,
            excluded_dir_suffixes=config["catalog"]["excluded_dir_suffixes"],
        )

    if args.output_format == "text":
        _require_no_output_file(args)
        ordered = sorted(namespaces, key=lambda item: item.name)
        renderer.kv("Generated root", Path(args.generated_root).as_posix())
        renderer.kv("Namespaces", len(ordered))
        for item in ordered:
            renderer.section(f"{item.name} ({len(item.entities)} stubs)")
            for entity_name in item.entity_names():
                renderer.text(f"  - {entity_name}")
    else:
        _emit_payload(args, renderer, namespace_payload(namespaces))
    return int(ExitCode.SUCCESS)


def _cmd_plan(args: argparse.Namespace) -> int:
    config = _load_effective_config(args)
    catalog_cfg = config["catalog"]
    renderer = create_renderer()

    with _logging_session(args, config), _catalog_errors():
        plan = plan_merge(
            args.generated_root,
            args.namespaces_root,
            work_in_progress_dir=catalog_cfg["work_in_progress_dir"],
            excluded_dir_suffixes=catalog_cfg["excluded_dir_suffixes"],
        )

    if args.output_format == "text":
        _require_no_output_file(args)
        _render_plan(renderer, plan)
    else:
        _emit_payload(args, renderer, plan_payload(plan))

    if args.fail_on_conflict and plan.conflicts():
        return int(ExitCode.FINDINGS)
    return int(ExitCode.SUCCESS)


def _cmd_config(args: argparse.Namespace) -> int:
    config = _load_effective_config(args)
    create_renderer().text(dump_effective_config(config))
    return int(ExitCode.SUCCESS)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _load_effective_config(args: argparse.Namespace) -> dict[str, Any]:
    overrides: dict[str, object] = {"observability.log_dir": getattr(args, "log_dir", None)}
    if getattr(args, "verbose", False):
        overrides["observability.log_level"] = "DEBUG"
        overrides["observability.log_to_stderr"] = True
    try:
        return load_config(getattr(args, "config_path", None), cli_overrides=overrides)
    except (ConfigLoadError, ConfigValidationError) as exc:
        raise CLIError(str(exc), exit_code=int(ExitCode.USAGE_ERROR)) from exc


@contextmanager
def _logging_session(args: argparse.Namespace, config: Mapping[str, Any]) -> Iterator[None]:
    observability = config["observability"]
    handle = setup_structured_logging(
        LoggingConfig(
            run_id=_new_run_id(),
            base_log_dir=observability["log_dir"],
            level=observability["log_level"],
            log_to_stderr=observability["log_to_stderr"],
        )
    )
    try:
        with correlation_scope(command=str(args.command)):
            yield
    finally:
        shutdown_logging(handle)


@contextmanager
def _catalog_errors() -> Iterator[None]:
    try:
        yield
    except NamespaceRootNotFoundError as exc:
        raise CLIError(str(exc), exit_code=int(ExitCode.NOT_FOUND)) from exc
    except CatalogIOError as exc:
        raise CLIError(str(exc), exit_code=int(ExitCode.IO_ERROR)) from exc


def _new_run_id() -> str:
    stamp = time.strftime("%Y%m%dT%H%M%SZ", time.gmtime())
    return f"{stamp}-{uuid4().hex[:8]}"


def _require_no_output_file(args: argparse.Namespace) -> None:
    if args.output is not None:
        raise CLIError("--output requires --format json or --format yaml")


def _emit_payload(
    args: argparse.Namespace, renderer: CLIRenderer, payload: Mapping[str, Any]
) -> None:
    if args.output is None:
        renderer.text(render_payload(payload, args.output_format))
        return
    try:
        destination = write_payload(args.output, payload, args.output_format)
    except OSError as exc:
        raise CLIError(
            f"unable to write {args.output}: {exc}", exit_code=int(ExitCode.IO_ERROR)
        ) from exc
    renderer.kv("Wrote", destination.as_posix())


def _render_namespace(renderer: CLIRenderer, namespace: Namespace) -> None:
    renderer.heading(f"Namespace {namespace.name}")
    renderer.kv("Path", namespace.full_path.as_posix())
    renderer.kv("Implemented", len(namespace.implemented))
    renderer.kv("Stubs", len(namespace.stubs))
    renderer.table(
        ("NAME", "ORIGIN", "PATH"),
        [
            (entity.name, entity.origin, entity.path.as_posix())
            for entity in namespace.sorted_entities()
        ],
        title="Entities:",
    )
    for entity_name, count in namespace.ambiguous_names().items():
        renderer.warning(f"{entity_name!r} has {count} entities of the same origin")


def _render_plan(renderer: CLIRenderer, plan: MergePlan) -> None:
    renderer.heading("Merge plan")
    for action, count in plan.counts().items():
        renderer.kv(f"  {action}", count)
    rows = [
        (
            namespace_plan.namespace,
            item.name,
            item.action.value,
            str(item.conflict_count) if item.is_conflict else "",
        )
        for namespace_plan in plan.namespaces
        for item in namespace_plan.items
    ]
    renderer.table(("NAMESPACE", "NAME", "ACTION", "CONFLICTS"), rows, title="Items:")
    for namespace_name, item in plan.conflicts():
        renderer.warning(
            f"{namespace_name}.{item.name} has {item.conflict_count} implemented merge targets"
        )


__all__ = ["CLIError", "OUTPUT_FORMATS", "build_parser", "run_cli"]
