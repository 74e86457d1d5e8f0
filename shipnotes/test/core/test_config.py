"""Tests for shipnotes.core.config."""

from __future__ import annotations

from pathlib import Path

import pytest

from shipnotes.core.config import (
    REPOS_ROOT_ENV,
    Config,
    default_repos_root,
    load_config,
    load_config_or_default,
)
from shipnotes.core.result import Err, Ok


class TestConfigFromDict:
    def test_defaults(self) -> None:
        config = Config.from_dict({})
        assert config.github.owner == "PowerShell"
        assert config.paths.repos_root is None
        assert config.paths.changelog == "CHANGELOG.md"
        assert config.git.remote == "origin"

    def test_values(self) -> None:
        config = Config.from_dict(
            {
                "github": {"owner": "MyFork"},
                "paths": {"repos_root": "/src", "changelog": "docs/CHANGELOG.md"},
                "git": {"remote": "upstream"},
            }
        )
        assert config.github.owner == "MyFork"
        assert config.paths.repos_root == Path("/src")
        assert config.paths.changelog == "docs/CHANGELOG.md"
        assert config.git.remote == "upstream"

    def test_wrong_types_fall_back(self) -> None:
        config = Config.from_dict({"github": {"owner": 3}, "git": "origin"})
        assert config.github.owner == "PowerShell"
        assert config.git.remote == "origin"


class TestReposRoot:
    def test_override_wins(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        monkeypatch.setenv(REPOS_ROOT_ENV, "/from/env")
        assert Config().resolve_repos_root(tmp_path) == tmp_path

    def test_env_before_config(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(REPOS_ROOT_ENV, "/from/env")
        config = Config.from_dict({"paths": {"repos_root": "/from/config"}})
        assert config.resolve_repos_root() == Path("/from/env")

    def test_config_before_default(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv(REPOS_ROOT_ENV, raising=False)
        config = Config.from_dict({"paths": {"repos_root": "/from/config"}})
        assert config.resolve_repos_root() == Path("/from/config")

    def test_default_is_sibling_directory(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv(REPOS_ROOT_ENV, raising=False)
        assert Config().resolve_repos_root() == default_repos_root()
        package_dir = Path(__file__).resolve().parents[2]
        assert default_repos_root() == package_dir.parent.parent


class TestLoadConfig:
    def test_load_valid(self, tmp_path: Path) -> None:
        path = tmp_path / "shipnotes.toml"
        path.write_text('[github]\nowner = "Contoso"\n', encoding="utf-8")
        result = load_config(path)
        assert isinstance(result, Ok)
        assert result.value.github.owner == "Contoso"

    def test_missing_file(self, tmp_path: Path) -> None:
        result = load_config(tmp_path / "nope.toml")
        assert isinstance(result, Err)
        assert "not found" in result.error.message

    def test_invalid_toml(self, tmp_path: Path) -> None:
        path = tmp_path / "shipnotes.toml"
        path.write_text("[github\n", encoding="utf-8")
        result = load_config(path)
        assert isinstance(result, Err)
        assert "Invalid TOML" in result.error.message

    def test_or_default_missing_file(self, tmp_path: Path) -> None:
        assert load_config_or_default(tmp_path / "nope.toml") == Ok(Config())

    def test_or_default_keeps_parse_errors(self, tmp_path: Path) -> None:
        path = tmp_path / "shipnotes.toml"
        path.write_text("not = [valid", encoding="utf-8")
        assert isinstance(load_config_or_default(path), Err)
