from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import date
from pathlib import Path

from shipnotes.core.config import Config
from shipnotes.core.result import Err, Ok, Result
from shipnotes.output.console import ConsoleProtocol, Style
from shipnotes.services.changelog.collector import MergedPulls, collect_merged_pulls
from shipnotes.services.changelog.config import ChangelogRules
from shipnotes.services.changelog.errors import ChangelogError
from shipnotes.services.changelog.formatter import format_bullets
from shipnotes.services.changelog.publisher import commit_changelog, draft_release
from shipnotes.services.changelog.resolver import ResolvedRepository, resolve_repository
from shipnotes.services.changelog.writer import update_changelog

ConfirmFn = Callable[[str], bool]


@dataclass(frozen=True, slots=True)
class ChangelogPreview:
    repo: ResolvedRepository
    merged: MergedPulls
    bullets: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class UpdateOutcome:
    changelog: Path
    body: str
    bullet_count: int
    branch: str | None
    release_url: str | None


def validate_version(version: str) -> Result[str, ChangelogError]:
    v = version.strip()
    if not v.startswith("v") or len(v) < 2:
        return Err(
            ChangelogError(
                kind="invalid_input",
                message=f"version must start with 'v': {version!r}",
                hint="Example: v2023.5.0",
            )
        )
    return Ok(v)


def preview_changelog(
    *,
    name: str,
    config: Config,
    repos_root: Path,
    rules: ChangelogRules,
    console: ConsoleProtocol,
) -> Result[ChangelogPreview, ChangelogError]:
    """Resolve, collect and format; no file, git or release side effects."""
    repo = resolve_repository(
        name=name,
        owner=config.github.owner,
        repos_root=repos_root,
        console=console,
    )
    if isinstance(repo, Err):
        return repo

    merged = collect_merged_pulls(repo=repo.value, rules=rules, console=console)
    if isinstance(merged, Err):
        return merged

    bullets = format_bullets(merged.value.pulls, repo_name=name, rules=rules)
    if isinstance(bullets, Err):
        return bullets

    return Ok(ChangelogPreview(repo=repo.value, merged=merged.value, bullets=tuple(bullets.value)))


def update_changelog_and_draft_release(
    *,
    name: str,
    version: str,
    config: Config,
    repos_root: Path,
    rules: ChangelogRules,
    console: ConsoleProtocol,
    confirm: ConfirmFn,
    dry_run: bool,
    today: date,
) -> Result[UpdateOutcome, ChangelogError]:
    """Run the whole release-notes pipeline.

    Stops at the first failure. The changelog file may already be modified
    (but not committed) when a later step fails.
    """
    checked = validate_version(version)
    if isinstance(checked, Err):
        return checked
    version = checked.value

    preview = preview_changelog(
        name=name,
        config=config,
        repos_root=repos_root,
        rules=rules,
        console=console,
    )
    if isinstance(preview, Err):
        return preview
    repo = preview.value.repo
    bullets = preview.value.bullets
    if not bullets:
        console.warning("no merged pull requests since the last release")

    console.header(f"{name} {version}")
    for bullet in bullets:
        console.print(bullet)

    changelog = repo.root / config.paths.changelog
    update = update_changelog(path=changelog, version=version, bullets=bullets, today=today)
    if isinstance(update, Err):
        return update
    console.success(f"updated {changelog}")

    branch: str | None = None
    if confirm(f"Commit and push {changelog.name} for {version}?"):
        committed = commit_changelog(
            repo=repo.local,
            changelog=changelog,
            version=version,
            remote=config.git.remote,
            console=console,
            dry_run=dry_run,
        )
        if isinstance(committed, Err):
            return committed
        branch = committed.value
        if not dry_run:
            console.success(f"pushed {branch}")
    else:
        console.print("skipping commit and push", Style.DIM)

    release = draft_release(
        cwd=repo.root,
        slug=repo.remote.slug,
        version=version,
        body=update.value.body,
        console=console,
    )
    if isinstance(release, Err):
        return release
    console.success(f"drafted release {release.value.tag}")
    if release.value.html_url:
        console.print(release.value.html_url, Style.DIM)

    return Ok(
        UpdateOutcome(
            changelog=changelog,
            body=update.value.body,
            bullet_count=len(bullets),
            branch=branch,
            release_url=release.value.html_url,
        )
    )
