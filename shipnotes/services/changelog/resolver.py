from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from shipnotes.core.result import Err, Ok, Result
from shipnotes.git.repository import Repository
from shipnotes.output.console import ConsoleProtocol, Style
from shipnotes.services.changelog.config import REPO_NAMES
from shipnotes.services.changelog.errors import ChangelogError
from shipnotes.services.changelog.gh import ensure_gh_auth, ensure_gh_available, get_repository
from shipnotes.services.changelog.model import RemoteRepository


@dataclass(frozen=True, slots=True)
class ResolvedRepository:
    name: str
    local: Repository
    remote: RemoteRepository

    @property
    def root(self) -> Path:
        return self.local.path


def resolve_local_repository(
    *,
    name: str,
    repos_root: Path,
    known: tuple[str, ...] = REPO_NAMES,
) -> Result[Repository, ChangelogError]:
    """Find the sibling checkout for `name`; no network access."""
    if name not in known:
        return Err(
            ChangelogError(
                kind="invalid_input",
                message=f"unknown repository: {name}",
                hint=f"Expected one of: {', '.join(known)}",
            )
        )

    path = (repos_root / name).resolve()
    if not path.is_dir():
        return Err(
            ChangelogError(
                kind="repo_missing",
                message=f"checkout not found: {path}",
                hint=f"Clone {name} next to this tool or pass --repos-root.",
            )
        )

    repo = Repository(path)
    if not repo.is_work_tree():
        return Err(
            ChangelogError(
                kind="repo_missing",
                message=f"not a git working tree: {path}",
            )
        )
    return Ok(repo)


def resolve_repository(
    *,
    name: str,
    owner: str,
    repos_root: Path,
    console: ConsoleProtocol,
) -> Result[ResolvedRepository, ChangelogError]:
    local = resolve_local_repository(name=name, repos_root=repos_root)
    if isinstance(local, Err):
        return local
    console.print(f"checkout: {local.value.path}", Style.DIM)

    ok = ensure_gh_available()
    if isinstance(ok, Err):
        return ok
    ok = ensure_gh_auth(cwd=local.value.path)
    if isinstance(ok, Err):
        return ok

    slug = f"{owner}/{name}"
    remote = get_repository(cwd=local.value.path, slug=slug)
    if isinstance(remote, Err):
        return remote
    console.print(f"remote: {remote.value.html_url}", Style.DIM)

    return Ok(ResolvedRepository(name=name, local=local.value, remote=remote.value))
