"""Git repository abstraction.

`Repository` wraps the handful of git commands the changelog workflow needs.
Every command runs as `git -C <path> ...`, so callers never depend on the
process working directory.

Usage:
    repo = Repository(Path("~/src/vscode-powershell").expanduser())

    match repo.rev_list("v2023.4.0..HEAD"):
        case Ok(shas):
            print(f"{len(shas)} commits since v2023.4.0")
        case Err(e):
            print(f"Error: {e.message}")
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from shipnotes.core.result import Err, Ok, Result
from shipnotes.platform.process import ProcessError
from shipnotes.platform.process import run as run_process

_GIT_TIMEOUT_SECONDS = 30.0
_GIT_NETWORK_TIMEOUT_SECONDS = 3 * 60.0

__all__ = [
    "GitError",
    "Repository",
]


@dataclass(frozen=True, slots=True)
class GitError:
    """Error from a git operation.

    Attributes:
        command: The git command that failed
        message: Error message
        returncode: Process return code
    """

    command: str
    message: str
    returncode: int = 1


def _git_error(command: str, e: ProcessError, fallback: str) -> Err[GitError]:
    return Err(
        GitError(
            command=command,
            message=e.stderr.strip() or e.stdout.strip() or fallback,
            returncode=e.returncode,
        )
    )


class Repository:
    """A local git working tree.

    Attributes:
        path: Path to the repository root
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    def exists(self) -> bool:
        """Check for a `.git` directory or file (worktrees and submodules use a file)."""
        return (self.path / ".git").exists()

    def is_work_tree(self) -> bool:
        """Check that git itself accepts the path as a working tree."""
        if not self.path.is_dir() or not self.exists():
            return False
        result = self._run(["rev-parse", "--is-inside-work-tree"])
        match result:
            case Ok(stdout):
                return stdout.strip() == "true"
            case Err(_):
                return False

    def rev_list(self, revision_range: str) -> Result[list[str], GitError]:
        """List full commit hashes for a revision range (e.g. `v1.0..HEAD`)."""
        result = self._run(["rev-list", revision_range])
        match result:
            case Err(e):
                return _git_error(f"rev-list {revision_range}", e, "git rev-list failed")
            case Ok(stdout):
                return Ok([line.strip() for line in stdout.splitlines() if line.strip()])

    def current_branch(self) -> str | None:
        """Get current branch name.

        Returns None if detached HEAD or error.
        """
        result = self._run(["rev-parse", "--abbrev-ref", "HEAD"])
        match result:
            case Ok(stdout):
                branch = stdout.strip()
                return None if branch == "HEAD" else branch
            case Err(_):
                return None

    def checkout_new_branch(self, branch: str) -> Result[None, GitError]:
        result = self._run(["checkout", "-b", branch])
        if isinstance(result, Err):
            return _git_error(f"checkout -b {branch}", result.error, "git checkout failed")
        return Ok(None)

    def add(self, paths: list[Path]) -> Result[None, GitError]:
        rels: list[str] = []
        for p in paths:
            if not p.is_absolute():
                rels.append(str(p))
                continue
            try:
                rels.append(str(p.relative_to(self.path)))
            except ValueError:
                return Err(GitError(command="add", message=f"{p} is outside {self.path}"))

        result = self._run(["add", "--", *rels])
        if isinstance(result, Err):
            return _git_error("add", result.error, "git add failed")
        return Ok(None)

    def commit(self, message: str) -> Result[None, GitError]:
        result = self._run(["commit", "-m", message])
        if isinstance(result, Err):
            e = result.error
            if not (e.stderr.strip() or e.stdout.strip()):
                return Err(
                    GitError(
                        command="commit",
                        message="git commit failed (is git user.name/user.email configured?)",
                        returncode=e.returncode,
                    )
                )
            return _git_error("commit", e, "git commit failed")
        return Ok(None)

    def push(self, remote: str, branch: str) -> Result[str, GitError]:
        """Push `branch` to `remote` and set it as upstream."""
        result = self._run(["push", "--set-upstream", remote, branch])
        match result:
            case Err(e):
                return _git_error(f"push {remote} {branch}", e, "git push failed")
            case Ok(stdout):
                return Ok(stdout.strip())

    def _run(self, args: list[str]) -> Result[str, ProcessError]:
        """Run a git command in this repository."""
        command = args[0] if args else ""
        timeout = (
            _GIT_NETWORK_TIMEOUT_SECONDS
            if command in {"fetch", "pull", "push"}
            else _GIT_TIMEOUT_SECONDS
        )
        return run_process(["git", "-C", str(self.path), *args], cwd=self.path, timeout=timeout)
