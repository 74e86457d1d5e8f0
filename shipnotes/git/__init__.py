"""Git operations used by the changelog workflow.

Usage:
    from shipnotes.git import Repository

    repo = Repository(Path("/path/to/repo"))
    branch = repo.current_branch()
"""

from shipnotes.git.repository import GitError, Repository

__all__ = [
    "GitError",
    "Repository",
]
