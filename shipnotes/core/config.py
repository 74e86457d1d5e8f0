"""Typed configuration loading and access.

Configuration is optional. Without a `shipnotes.toml` every value falls back
to the defaults below, which match the PowerShell organisation layout where
the editor repositories are checked out next to this tool.

Example `shipnotes.toml`:

    [github]
    owner = "PowerShell"

    [paths]
    repos_root = "~/src"
    changelog = "CHANGELOG.md"

    [git]
    remote = "origin"
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_str, get_table

__all__ = [
    "Config",
    "ConfigError",
    "GitConfig",
    "GithubConfig",
    "PathsConfig",
    "CONFIG_FILE_NAME",
    "REPOS_ROOT_ENV",
    "default_config_path",
    "default_repos_root",
    "load_config",
    "load_config_or_default",
]

CONFIG_FILE_NAME = "shipnotes.toml"
REPOS_ROOT_ENV = "SHIPNOTES_REPOS_ROOT"

DEFAULT_OWNER = "PowerShell"
DEFAULT_CHANGELOG = "CHANGELOG.md"
DEFAULT_REMOTE = "origin"


def _tool_checkout_root() -> Path:
    return Path(__file__).resolve().parents[2]


def default_repos_root() -> Path:
    """Directory holding the sibling checkouts (parent of this tool's checkout)."""
    return _tool_checkout_root().parent


def default_config_path() -> Path:
    return _tool_checkout_root() / CONFIG_FILE_NAME


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when config cannot be loaded or parsed."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class GithubConfig:
    owner: str = DEFAULT_OWNER


@dataclass(frozen=True, slots=True)
class PathsConfig:
    """Filesystem locations.

    `repos_root` is None when not configured; callers resolve it with
    `Config.resolve_repos_root()`.
    """

    repos_root: Path | None = None
    changelog: str = DEFAULT_CHANGELOG


@dataclass(frozen=True, slots=True)
class GitConfig:
    remote: str = DEFAULT_REMOTE


@dataclass(frozen=True, slots=True)
class Config:
    """Main configuration container."""

    github: GithubConfig = field(default_factory=GithubConfig)
    paths: PathsConfig = field(default_factory=PathsConfig)
    git: GitConfig = field(default_factory=GitConfig)

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> Config:
        """Create Config from a mapping (parsed TOML)."""
        github: StrDict = get_table(data, "github") or {}
        paths: StrDict = get_table(data, "paths") or {}
        git: StrDict = get_table(data, "git") or {}

        repos_root = get_str(paths, "repos_root")
        return cls(
            github=GithubConfig(owner=get_str(github, "owner") or DEFAULT_OWNER),
            paths=PathsConfig(
                repos_root=Path(repos_root).expanduser() if repos_root else None,
                changelog=get_str(paths, "changelog") or DEFAULT_CHANGELOG,
            ),
            git=GitConfig(remote=get_str(git, "remote") or DEFAULT_REMOTE),
        )

    def resolve_repos_root(self, override: Path | None = None) -> Path:
        """Pick the repos root: explicit override, then env, then config, then default."""
        if override is not None:
            return override.expanduser()
        env = os.environ.get(REPOS_ROOT_ENV)
        if env:
            return Path(env).expanduser()
        if self.paths.repos_root is not None:
            return self.paths.repos_root
        return default_repos_root()


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    """Parse a TOML file, handling read and parse errors."""
    import tomllib

    try:
        content = path.read_bytes()
        data_obj: object = tomllib.loads(content.decode("utf-8"))
        data = as_str_dict(data_obj)
        if data is None:
            return Err(ConfigError("Config root must be a TOML table", path=path))
        return Ok(data)
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))


def load_config(path: Path) -> Result[Config, ConfigError]:
    """Load and parse configuration from a TOML file.

    Args:
        path: Path to shipnotes.toml

    Returns:
        Ok(Config) on success, Err(ConfigError) on failure
    """
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result

    try:
        return Ok(Config.from_dict(result.value))
    except (KeyError, TypeError, ValueError) as e:
        return Err(ConfigError(f"Invalid config structure: {e}", path=path))


def load_config_or_default(path: Path) -> Result[Config, ConfigError]:
    """Load config from `path`; a missing file yields the defaults.

    A file that exists but cannot be parsed is still an error.
    """
    if not path.exists():
        return Ok(Config())
    return load_config(path)
