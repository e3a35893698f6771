"""
stub-merger — CLI smoke contracts

File: tests/integration/test_cli_smoke.py

Purpose
- Enforce CLI behavior for `scan`, `generated`, `plan`, and `config`.
- Verify exit codes, rendered output, exports, and on-disk side effects.
"""

from __future__ import annotations

import json
import os
import subprocess
import sys
from pathlib import Path

import pytest
import yaml

from stub_merger.main import ExitCode, cli_entrypoint

PROJECT_ROOT = Path(__file__).resolve().parents[2]
SRC_PATH = PROJECT_ROOT / "src"


@pytest.fixture(autouse=True)
def _isolated_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    for name in list(os.environ):
        if name.startswith("STUB_MERGER_"):
            monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)


def _write(path: Path, contents: str = "") -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(contents, encoding="utf-8")


def _seed_namespaces(root: Path) -> None:
    _write(root / "Shapes" / "Circle.src")
    _write(root / "Shapes" / "Circle.cs")
    _write(root / "Shapes" / "WORKINPROGRESS" / "Square.src")


def _seed_generated(root: Path) -> None:
    _write(root / "Shapes" / "Circle.src")
    _write(root / "Shapes" / "Square.src")
    _write(root / "Widgets" / "Button.src")
    _write(root / "Widgets.Tests.bin" / "Ignored.src")


def _cli(tmp_path: Path, *args: str) -> int:
    return cli_entrypoint([*args, "--log-dir", str(tmp_path / "logs")])


def _run_module(cwd: Path, *args: str) -> subprocess.CompletedProcess[str]:
    env = os.environ.copy()
    existing_pythonpath = env.get("PYTHONPATH")
    src_pythonpath = str(SRC_PATH)
    env["PYTHONPATH"] = (
        src_pythonpath if not existing_pythonpath else f"{src_pythonpath}:{existing_pythonpath}"
    )
    return subprocess.run(
        [sys.executable, "-m", "stub_merger", *args],
        cwd=cwd,
        text=True,
        capture_output=True,
        check=False,
        env=env,
    )


def test_scan_text_lists_entities_and_writes_run_log(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    root = tmp_path / "src"
    _seed_namespaces(root)

    exit_code = _cli(tmp_path, "scan", str(root), "Shapes")

    out = capsys.readouterr().out
    assert exit_code == ExitCode.SUCCESS
    assert "Namespace Shapes" in out
    assert "Implemented: 2" in out
    assert "Stubs: 1" in out
    assert "Square" in out
    assert "'Circle' has 2 entities of the same origin" in out

    (log_file,) = (tmp_path / "logs").glob("*/stub-merger.jsonl")
    events = [json.loads(line) for line in log_file.read_text(encoding="utf-8").splitlines()]
    discovered = [item for item in events if item["event"] == "catalog_namespace_discovered"]
    assert discovered
    assert discovered[0]["command"] == "scan"
    assert discovered[0]["namespace"] == "Shapes"


def test_scan_bootstraps_a_missing_namespace(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    root = tmp_path / "src"
    root.mkdir()

    exit_code = _cli(tmp_path, "scan", str(root), "Fresh", "--format", "json")

    payload = json.loads(capsys.readouterr().out)
    assert exit_code == ExitCode.SUCCESS
    assert payload["kind"] == "catalog"
    assert payload["namespaces"][0]["entities"] == []
    assert (root / "Fresh" / "WORKINPROGRESS").is_dir()


def test_scan_name_and_filter_select_entities(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    root = tmp_path / "src"
    _seed_namespaces(root)

    exit_code = _cli(
        tmp_path,
        "scan",
        str(root),
        "Shapes",
        "--name",
        "Square",
        "--filter",
        "stub-only",
        "--format",
        "json",
    )

    payload = json.loads(capsys.readouterr().out)
    assert exit_code == ExitCode.SUCCESS
    (namespace,) = payload["namespaces"]
    assert [(item["name"], item["origin"]) for item in namespace["entities"]] == [
        ("Square", "stub")
    ]


def test_scan_name_without_match_exits_with_findings(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    root = tmp_path / "src"
    _seed_namespaces(root)

    exit_code = _cli(
        tmp_path, "scan", str(root), "Shapes", "--name", "Circle", "--filter", "stub_only"
    )

    assert exit_code == ExitCode.FINDINGS
    assert "(none)" in capsys.readouterr().out


def test_scan_unknown_filter_is_a_usage_error(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    root = tmp_path / "src"
    _seed_namespaces(root)

    exit_code = _cli(tmp_path, "scan", str(root), "Shapes", "--filter", "partial")

    assert exit_code == ExitCode.USAGE_ERROR
    assert "unknown entity filter 'partial'" in capsys.readouterr().err


def test_scan_missing_root_is_not_found(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    exit_code = _cli(tmp_path, "scan", str(tmp_path / "absent"), "Shapes")

    assert exit_code == ExitCode.NOT_FOUND
    assert "namespaces root not found" in capsys.readouterr().err
    assert not (tmp_path / "absent").exists()


def test_generated_yaml_export_skips_denylisted_directories(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    generated = tmp_path / "generated"
    _seed_generated(generated)
    destination = tmp_path / "out" / "catalog.yaml"
    destination.parent.mkdir()

    exit_code = _cli(
        tmp_path, "generated", str(generated), "--format", "yaml", "--output", str(destination)
    )

    assert exit_code == ExitCode.SUCCESS
    assert f"Wrote: {destination.as_posix()}" in capsys.readouterr().out
    payload = yaml.safe_load(destination.read_text(encoding="utf-8"))
    assert [item["name"] for item in payload["namespaces"]] == ["Shapes", "Widgets"]
    assert all(entity["is_stub"] for item in payload["namespaces"] for entity in item["entities"])


def test_output_file_requires_structured_format(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    generated = tmp_path / "generated"
    _seed_generated(generated)

    exit_code = _cli(tmp_path, "generated", str(generated), "--output", "catalog.txt")

    assert exit_code == ExitCode.USAGE_ERROR
    assert "--output requires" in capsys.readouterr().err


def test_plan_reports_actions_and_conflicts(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    generated = tmp_path / "generated"
    root = tmp_path / "src"
    _seed_generated(generated)
    _seed_namespaces(root)

    relaxed = _cli(tmp_path, "plan", str(generated), str(root))
    relaxed_out = capsys.readouterr().out
    strict = _cli(tmp_path, "plan", str(generated), str(root), "--fail-on-conflict")
    capsys.readouterr()

    assert relaxed == ExitCode.SUCCESS
    assert strict == ExitCode.FINDINGS
    assert "Merge plan" in relaxed_out
    assert "Shapes.Circle has 2 implemented merge targets" in relaxed_out
    assert (root / "Widgets" / "WORKINPROGRESS").is_dir()


def test_plan_json_counts(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    generated = tmp_path / "generated"
    root = tmp_path / "src"
    _seed_generated(generated)
    _seed_namespaces(root)

    exit_code = _cli(tmp_path, "plan", str(generated), str(root), "--format", "json")

    payload = json.loads(capsys.readouterr().out)
    assert exit_code == ExitCode.SUCCESS
    assert payload["kind"] == "merge_plan"
    assert payload["counts"] == {"copy": 2, "merge": 1, "none": 0}


def test_config_command_reflects_file_and_env(
    tmp_path: Path, capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch
) -> None:
    _write(tmp_path / "stub-merger.toml", '[catalog]\nwork_in_progress_dir = "drafts"\n')
    monkeypatch.setenv("STUB_MERGER_CATALOG_EXCLUDED_DIR_SUFFIXES", "bin,dist")

    exit_code = cli_entrypoint(["config"])

    payload = json.loads(capsys.readouterr().out)
    assert exit_code == ExitCode.SUCCESS
    assert payload["catalog"] == {
        "excluded_dir_suffixes": ["bin", "dist"],
        "work_in_progress_dir": "drafts",
    }


def test_invalid_config_file_is_a_usage_error(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    _write(tmp_path / "bad.toml", "[observability]\nlog_level = \"TRACE\"\n")

    exit_code = cli_entrypoint(["config", "--config", str(tmp_path / "bad.toml")])

    assert exit_code == ExitCode.USAGE_ERROR
    assert "observability.log_level" in capsys.readouterr().err


def test_unknown_subcommand_exits_with_usage_error(capsys: pytest.CaptureFixture[str]) -> None:
    assert cli_entrypoint(["merge"]) == ExitCode.USAGE_ERROR
    assert "invalid choice" in capsys.readouterr().err


def test_module_entrypoint_runs_scan(tmp_path: Path) -> None:
    root = tmp_path / "src"
    _seed_namespaces(root)

    completed = _run_module(
        tmp_path, "scan", str(root), "Shapes", "--format", "json", "--log-dir", "logs"
    )

    assert completed.returncode == 0, completed.stderr
    payload = json.loads(completed.stdout)
    assert payload["namespaces"][0]["name"] == "Shapes"
    assert list((tmp_path / "logs").glob("*/stub-merger.jsonl"))
