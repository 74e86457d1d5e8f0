from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class RemoteRepository:
    """A GitHub repository as returned by `repos/{owner}/{name}`."""

    slug: str  # owner/name
    name: str
    html_url: str
    default_branch: str


@dataclass(frozen=True, slots=True)
class PullRequest:
    number: int
    title: str
    body: str
    author: str
    html_url: str
    state: str
    merge_commit_sha: str | None = None
    merged: bool = False
    labels: frozenset[str] = field(default_factory=frozenset)


@dataclass(frozen=True, slots=True)
class Release:
    tag: str
    name: str
    draft: bool
    prerelease: bool
    body: str = ""
    html_url: str | None = None


@dataclass(frozen=True, slots=True)
class NewRelease:
    """Payload for `POST repos/{slug}/releases`."""

    tag: str
    name: str
    body: str
    draft: bool = True
    prerelease: bool = False
