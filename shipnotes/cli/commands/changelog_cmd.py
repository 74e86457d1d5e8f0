"""Changelog commands - update CHANGELOG.md and draft the GitHub release."""

from __future__ import annotations

from datetime import date
from enum import StrEnum
from pathlib import Path

import typer

from shipnotes.cli.commands.common import exit_changelog_error
from shipnotes.cli.context import build_context
from shipnotes.core.errors import ErrorCode
from shipnotes.core.result import Err
from shipnotes.output.console import Style
from shipnotes.services.changelog.config import DEFAULT_RULES
from shipnotes.services.changelog.service import (
    ConfirmFn,
    preview_changelog,
    update_changelog_and_draft_release,
    validate_version,
)


class RepoName(StrEnum):
    vscode_powershell = "vscode-powershell"
    powershell_editor_services = "PowerShellEditorServices"


def _confirm_fn(*, yes: bool, no_commit: bool) -> ConfirmFn:
    if no_commit:
        return lambda _prompt: False
    if yes:
        return lambda _prompt: True
    return lambda prompt: typer.confirm(prompt, default=False)


def update(
    repository: RepoName = typer.Argument(..., help="Repository to release"),
    version: str = typer.Argument(..., help="New version tag, e.g. v2023.5.0"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Commit and push without asking"),
    no_commit: bool = typer.Option(
        False, "--no-commit", help="Leave CHANGELOG.md uncommitted (release is still drafted)"
    ),
    dry_run: bool = typer.Option(
        False, "--dry-run", help="Print git commands instead of running them"
    ),
    repos_root: Path | None = typer.Option(
        None, "--repos-root", help="Directory holding the checkouts", show_default=False
    ),
    config: Path | None = typer.Option(
        None, "--config", help="Path to shipnotes.toml", show_default=False
    ),
) -> None:
    """Add a version section to CHANGELOG.md and draft the GitHub release."""
    if yes and no_commit:
        typer.echo("error: --yes and --no-commit are mutually exclusive", err=True)
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    checked = validate_version(version)
    if isinstance(checked, Err):
        exit_changelog_error(checked.error)

    ctx = build_context(config_path=config, repos_root=repos_root)
    result = update_changelog_and_draft_release(
        name=repository.value,
        version=checked.value,
        config=ctx.config,
        repos_root=ctx.repos_root,
        rules=DEFAULT_RULES,
        console=ctx.console,
        confirm=_confirm_fn(yes=yes, no_commit=no_commit),
        dry_run=dry_run,
        today=date.today(),
    )
    if isinstance(result, Err):
        exit_changelog_error(result.error)


def preview(
    repository: RepoName = typer.Argument(..., help="Repository to inspect"),
    repos_root: Path | None = typer.Option(
        None, "--repos-root", help="Directory holding the checkouts", show_default=False
    ),
    config: Path | None = typer.Option(
        None, "--config", help="Path to shipnotes.toml", show_default=False
    ),
) -> None:
    """Print the bullets the next release would get, without changing anything."""
    ctx = build_context(config_path=config, repos_root=repos_root)
    result = preview_changelog(
        name=repository.value,
        config=ctx.config,
        repos_root=ctx.repos_root,
        rules=DEFAULT_RULES,
        console=ctx.console,
    )
    if isinstance(result, Err):
        exit_changelog_error(result.error)

    merged = result.value.merged
    since = merged.baseline.tag if merged.baseline is not None else "the first commit"
    ctx.console.header(f"{repository.value} since {since}")
    ctx.console.print(f"{merged.commit_count} commits, {len(merged.pulls)} pull requests", Style.DIM)
    for bullet in result.value.bullets:
        ctx.console.print(bullet)
