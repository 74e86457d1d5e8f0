from __future__ import annotations

from pathlib import Path

from shipnotes.core.result import Err, Ok, Result
from shipnotes.git.repository import GitError, Repository
from shipnotes.output.console import ConsoleProtocol, Style
from shipnotes.services.changelog.config import PRERELEASE_MARKER, RELEASE_BRANCH_PREFIX
from shipnotes.services.changelog.errors import ChangelogError
from shipnotes.services.changelog.gh import create_release
from shipnotes.services.changelog.model import NewRelease, Release


def branch_for_version(version: str) -> str:
    return f"{RELEASE_BRANCH_PREFIX}{version}"


def commit_message(version: str) -> str:
    return f"Update CHANGELOG for `{version}`"


def is_prerelease(version: str) -> bool:
    return PRERELEASE_MARKER in version


def _git_failed(e: GitError) -> Err[ChangelogError]:
    return Err(
        ChangelogError(
            kind="git_failed",
            message=f"git {e.command} failed",
            hint=e.message,
        )
    )


def commit_changelog(
    *,
    repo: Repository,
    changelog: Path,
    version: str,
    remote: str,
    console: ConsoleProtocol,
    dry_run: bool,
) -> Result[str, ChangelogError]:
    """Commit the changelog on `release/<version>` and push it.

    Returns the branch name.
    """
    branch = branch_for_version(version)
    switch = repo.current_branch() != branch
    message = commit_message(version)

    if switch:
        console.print(f"git checkout -b {branch}", Style.DIM)
    console.print(f"git add {changelog.name}", Style.DIM)
    console.print(f"git commit -m {message}", Style.DIM)
    console.print(f"git push --set-upstream {remote} {branch}", Style.DIM)
    if dry_run:
        return Ok(branch)

    if switch:
        checkout = repo.checkout_new_branch(branch)
        if isinstance(checkout, Err):
            return _git_failed(checkout.error)

    add = repo.add([changelog])
    if isinstance(add, Err):
        return _git_failed(add.error)

    commit = repo.commit(message)
    if isinstance(commit, Err):
        return _git_failed(commit.error)

    push = repo.push(remote, branch)
    if isinstance(push, Err):
        return _git_failed(push.error)

    return Ok(branch)


def draft_release(
    *,
    cwd: Path,
    slug: str,
    version: str,
    body: str,
    console: ConsoleProtocol,
) -> Result[Release, ChangelogError]:
    release = NewRelease(
        tag=version,
        name=version,
        body=body,
        draft=True,
        prerelease=is_prerelease(version),
    )
    kind = "pre-release" if release.prerelease else "release"
    console.print(f"gh api --method POST repos/{slug}/releases ({kind} {version})", Style.DIM)
    return create_release(cwd=cwd, slug=slug, release=release)
