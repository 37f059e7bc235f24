"""Tests for shipit.core.config."""

from __future__ import annotations

from pathlib import Path

from shipit.core.config import (
    CONFIG_FILENAME,
    Settings,
    load_config,
    load_config_or_default,
)
from shipit.core.result import Err, Ok


class TestDefaults:
    def test_defaults_match_conventional_layout(self) -> None:
        s = Settings()
        assert s.tags.prefix == "v"
        assert s.tags.pattern == "v*"
        assert s.tags.floating == "latest"
        assert s.git.remote == "origin"
        assert s.git.workflows_dir == ".github/workflows"
        assert s.workflow.file == "release.yml"
        assert s.workflow.bump_input == "bump"
        assert s.workflow.repo is None
        assert s.workflow.ref is None
        assert s.wait.settle_seconds == 3.0

    def test_empty_mapping_gives_defaults(self) -> None:
        assert Settings.from_dict({}) == Settings()


class TestFromDict:
    def test_overrides(self) -> None:
        s = Settings.from_dict(
            {
                "tags": {"prefix": "release-", "floating": "stable"},
                "git": {"remote": "upstream", "workflows_dir": "ci/flows/"},
                "workflow": {"file": "ship.yml", "bump_input": "level", "repo": "acme/app"},
                "wait": {"settle_seconds": 0, "poll_interval_seconds": 1, "timeout_seconds": 5.5},
            }
        )
        assert s.tags.pattern == "release-*"
        assert s.tags.floating == "stable"
        assert s.git.remote == "upstream"
        assert s.git.workflows_dir == "ci/flows"
        assert s.workflow.file == "ship.yml"
        assert s.workflow.bump_input == "level"
        assert s.workflow.repo == "acme/app"
        assert s.workflow.ref is None
        assert s.wait.settle_seconds == 0.0
        assert s.wait.poll_interval_seconds == 1.0
        assert s.wait.timeout_seconds == 5.5

    def test_wrong_types_fall_back_to_defaults(self) -> None:
        s = Settings.from_dict({"tags": {"prefix": 3}, "wait": {"timeout_seconds": True}})
        assert s.tags.prefix == "v"
        assert s.wait.timeout_seconds == 60.0


class TestLoadConfig:
    def test_valid_file(self, tmp_path: Path) -> None:
        path = tmp_path / CONFIG_FILENAME
        path.write_text('[workflow]\nfile = "publish.yml"\n', encoding="utf-8")

        result = load_config(path)

        assert isinstance(result, Ok)
        assert result.value.workflow.file == "publish.yml"

    def test_missing_file(self, tmp_path: Path) -> None:
        result = load_config(tmp_path / "nope.toml")
        assert isinstance(result, Err)
        assert "not found" in result.error.message

    def test_invalid_toml(self, tmp_path: Path) -> None:
        path = tmp_path / CONFIG_FILENAME
        path.write_text("[workflow\n", encoding="utf-8")

        result = load_config(path)

        assert isinstance(result, Err)
        assert "Invalid TOML" in result.error.message
        assert result.error.path == path

    def test_negative_timing_rejected(self, tmp_path: Path) -> None:
        path = tmp_path / CONFIG_FILENAME
        path.write_text("[wait]\nsettle_seconds = -1\n", encoding="utf-8")

        result = load_config(path)

        assert isinstance(result, Err)
        assert "settle_seconds" in result.error.message


class TestLoadConfigOrDefault:
    def test_absent_file_gives_defaults(self, tmp_path: Path) -> None:
        assert load_config_or_default(tmp_path) == Ok(Settings())

    def test_present_invalid_file_is_error(self, tmp_path: Path) -> None:
        (tmp_path / CONFIG_FILENAME).write_text("not = [valid", encoding="utf-8")
        assert isinstance(load_config_or_default(tmp_path), Err)
