from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import typer

from shipnotes.core.config import Config, default_config_path, load_config_or_default
from shipnotes.core.errors import ErrorCode
from shipnotes.core.result import Err
from shipnotes.output.console import ConsoleProtocol, RichConsole


@dataclass(frozen=True, slots=True)
class CLIContext:
    config: Config
    repos_root: Path
    console: ConsoleProtocol


def build_context(
    *, config_path: Path | None = None, repos_root: Path | None = None
) -> CLIContext:
    path = config_path if config_path is not None else default_config_path()
    if config_path is not None and not config_path.exists():
        typer.echo(f"error: config file not found: {config_path}", err=True)
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    config_result = load_config_or_default(path)
    if isinstance(config_result, Err):
        typer.echo(f"error: {config_result.error.message}", err=True)
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    config = config_result.value
    return CLIContext(
        config=config,
        repos_root=config.resolve_repos_root(repos_root),
        console=RichConsole(),
    )
