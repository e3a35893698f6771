"""Unit tests for config schema validation and merge helpers."""

from __future__ import annotations

import pytest

from stub_merger.config.schema import (
    ConfigValidationError,
    assert_valid_config,
    default_config,
    merge_config,
    migration_guidance,
    validate_config,
)


def test_default_config_is_valid_and_copied() -> None:
    first = default_config()
    first["catalog"]["excluded_dir_suffixes"].append("dist")

    assert validate_config(default_config()).is_valid
    assert default_config()["catalog"]["excluded_dir_suffixes"] == ["bin", "obj", "Properties"]


@pytest.mark.parametrize(
    ("overlay", "path", "message"),
    [
        ({"catalog": {"work_in_progress_dir": "a/b"}}, "catalog.work_in_progress_dir", "single"),
        ({"catalog": {"work_in_progress_dir": ".."}}, "catalog.work_in_progress_dir", "single"),
        ({"catalog": {"excluded_dir_suffixes": "bin"}}, "catalog.excluded_dir_suffixes", "list"),
        (
            {"catalog": {"excluded_dir_suffixes": ["bin", ""]}},
            "catalog.excluded_dir_suffixes[1]",
            "empty",
        ),
        ({"observability": {"log_level": "TRACE"}}, "observability.log_level", "expected one of"),
        ({"observability": {"log_to_stderr": "yes"}}, "observability.log_to_stderr", "boolean"),
        ({"meta": {"schema_version": 2}}, "meta.schema_version", "newer than supported"),
    ],
)
def test_invalid_values_report_field_paths(
    overlay: dict[str, object], path: str, message: str
) -> None:
    result = validate_config(merge_config(default_config(), overlay))

    assert not result.is_valid
    assert result.config is None
    assert [issue.path for issue in result.issues] == [path]
    assert message in result.issues[0].message


def test_missing_section_is_reported() -> None:
    config = dict(default_config())
    del config["observability"]

    with pytest.raises(ConfigValidationError, match="observability: missing required field"):
        assert_valid_config(config)


def test_merge_config_replaces_lists_and_merges_mappings() -> None:
    merged = merge_config(default_config(), {"catalog": {"excluded_dir_suffixes": ["dist"]}})

    assert merged["catalog"] == {
        "excluded_dir_suffixes": ["dist"],
        "work_in_progress_dir": "WORKINPROGRESS",
    }


def test_migration_guidance_mentions_direction() -> None:
    assert "older" in migration_guidance(0)
    assert "current" in migration_guidance(1)
