from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from shipnotes.core.result import Err, Ok, Result
from shipnotes.output.console import ConsoleProtocol, Style
from shipnotes.services.changelog.config import ChangelogRules
from shipnotes.services.changelog.errors import ChangelogError
from shipnotes.services.changelog.gh import list_closed_pulls, list_releases
from shipnotes.services.changelog.model import PullRequest, Release
from shipnotes.services.changelog.resolver import ResolvedRepository


@dataclass(frozen=True, slots=True)
class MergedPulls:
    baseline: Release | None
    commit_count: int
    pulls: tuple[PullRequest, ...]


def pick_baseline(releases: Sequence[Release]) -> Release | None:
    """Most recent published release; the API lists newest first."""
    for release in releases:
        if not release.draft:
            return release
    return None


def revision_range(baseline: Release | None) -> str:
    if baseline is None:
        return "HEAD"
    return f"{baseline.tag}..HEAD"


def is_bot(author: str, rules: ChangelogRules) -> bool:
    return author.endswith(rules.bot_suffix)


def filter_pulls(
    pulls: Iterable[PullRequest],
    *,
    commits: frozenset[str],
    rules: ChangelogRules,
) -> tuple[PullRequest, ...]:
    """Keep PRs merged in range, not bot-authored, not labelled to be ignored.

    Input order is preserved.
    """
    kept: list[PullRequest] = []
    for pr in pulls:
        if pr.merge_commit_sha is None or pr.merge_commit_sha not in commits:
            continue
        if is_bot(pr.author, rules):
            continue
        if rules.ignore_label in pr.labels:
            continue
        kept.append(pr)
    return tuple(kept)


def collect_merged_pulls(
    *,
    repo: ResolvedRepository,
    rules: ChangelogRules,
    console: ConsoleProtocol,
) -> Result[MergedPulls, ChangelogError]:
    releases = list_releases(cwd=repo.root, slug=repo.remote.slug)
    if isinstance(releases, Err):
        return releases

    baseline = pick_baseline(releases.value)
    if baseline is None:
        console.warning(f"no published release on {repo.remote.slug}; using all of history")
    else:
        console.print(f"baseline release: {baseline.tag}", Style.DIM)

    rev_range = revision_range(baseline)
    console.print(f"git rev-list {rev_range}", Style.DIM)
    commits = repo.local.rev_list(rev_range)
    if isinstance(commits, Err):
        e = commits.error
        return Err(
            ChangelogError(
                kind="git_failed",
                message=f"git {e.command} failed",
                hint=e.message,
            )
        )

    pulls = list_closed_pulls(cwd=repo.root, slug=repo.remote.slug)
    if isinstance(pulls, Err):
        return pulls
    console.print(f"closed pull requests: {len(pulls.value)}", Style.DIM)

    kept = filter_pulls(pulls.value, commits=frozenset(commits.value), rules=rules)
    return Ok(MergedPulls(baseline=baseline, commit_count=len(commits.value), pulls=kept))
