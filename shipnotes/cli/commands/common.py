from __future__ import annotations

from typing import NoReturn

import typer

from shipnotes.core.errors import ErrorCode
from shipnotes.services.changelog.errors import ChangelogError


def changelog_error_code(kind: str) -> ErrorCode:
    if kind in {"gh_missing", "gh_auth_required", "repo_missing"}:
        return ErrorCode.ENV_ERROR
    if kind == "api_failed":
        return ErrorCode.NETWORK_ERROR
    if kind == "malformed_issue_reference":
        return ErrorCode.DATA_ERROR
    if kind in {"git_failed", "changelog_failed"}:
        return ErrorCode.IO_ERROR
    return ErrorCode.USER_ERROR


def exit_changelog_error(error: ChangelogError) -> NoReturn:
    typer.echo(f"error: {error.message}", err=True)
    if error.hint:
        typer.echo(f"hint: {error.hint}", err=True)
    raise typer.Exit(code=int(changelog_error_code(error.kind)))
