"""Turn merged pull requests into changelog bullets.

A bullet looks like:

    - 🐛 [vscode-powershell #42](https://github.com/.../pull/43) - Fix the thing. (Thanks @someuser!)

Everything here is pure: the tables come in through `ChangelogRules` and the
output only depends on the PR, the repository name and those rules.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass
from functools import lru_cache

from shipnotes.core.result import Err, Ok, Result
from shipnotes.services.changelog.config import ChangelogRules
from shipnotes.services.changelog.errors import ChangelogError
from shipnotes.services.changelog.model import PullRequest


@dataclass(frozen=True, slots=True)
class IssueRef:
    repo: str
    number: int

    @property
    def text(self) -> str:
        return f"{self.repo} #{self.number}"


@lru_cache(maxsize=8)
def _issue_pattern(keywords: tuple[str, ...]) -> re.Pattern[str]:
    # Longest first so "fixes" wins over "fix".
    alternation = "|".join(re.escape(k) for k in sorted(keywords, key=len, reverse=True))
    return re.compile(
        rf"\b(?:{alternation})\b:?\s+"
        r"(?:https?://github\.com/)?(?:[\w.-]+/)?(?P<repo>[\w.-]*)(?:#|/issues/|/pull/)"
        r"(?P<number>\d*)",
        re.IGNORECASE,
    )


def emoji_for(labels: Iterable[str], rules: ChangelogRules) -> str:
    present = set(labels)
    glyphs = [glyph for label, glyph in rules.label_emoji.items() if label in present]
    if not glyphs:
        return rules.placeholder_emoji
    return "".join(glyphs)


def _repo_in_ref(repo: str, *, default: str, rules: ChangelogRules) -> str | None:
    # A bare `#N` is the current repo; a repo outside `repo_names` gives None
    # and the bullet falls back to the PR's own number.
    if not repo:
        return default
    for name in rules.repo_names:
        if name.lower() == repo.lower():
            return name
    return None


def find_issue_ref(
    pr: PullRequest, *, repo_name: str, rules: ChangelogRules
) -> Result[IssueRef | None, ChangelogError]:
    """Find the issue a PR closes.

    Returns Ok(None) when the body has no closing keyword or the issue lives in
    a repository outside `rules.repo_names`, and an error when a keyword is
    followed by a reference without a number.
    """
    match = _issue_pattern(rules.close_keywords).search(pr.body)
    if match is None:
        return Ok(None)

    digits = match.group("number")
    if not digits:
        return Err(
            ChangelogError(
                kind="malformed_issue_reference",
                message=f"PR #{pr.number} closes an issue without a number: {match.group(0)!r}",
                hint=pr.html_url,
            )
        )

    repo = _repo_in_ref(match.group("repo"), default=repo_name, rules=rules)
    if repo is None:
        return Ok(None)
    return Ok(IssueRef(repo=repo, number=int(digits)))


def thanks_for(author: str, rules: ChangelogRules) -> str | None:
    if author in rules.skip_thanks:
        return None
    return f"(Thanks @{author}!)"


def format_bullet(
    pr: PullRequest, *, repo_name: str, rules: ChangelogRules
) -> Result[str, ChangelogError]:
    issue = find_issue_ref(pr, repo_name=repo_name, rules=rules)
    if isinstance(issue, Err):
        return issue

    link_text = issue.value.text if issue.value is not None else f"{repo_name} #{pr.number}"
    title = pr.title if pr.title.endswith(".") else f"{pr.title}."

    parts = [
        "-",
        emoji_for(pr.labels, rules),
        f"[{link_text}]({pr.html_url})",
        "-",
        title,
        thanks_for(pr.author, rules),
    ]
    return Ok(" ".join(p for p in parts if p))


def format_bullets(
    pulls: Iterable[PullRequest], *, repo_name: str, rules: ChangelogRules
) -> Result[list[str], ChangelogError]:
    """Format every PR; the first malformed reference aborts the batch."""
    bullets: list[str] = []
    for pr in pulls:
        bullet = format_bullet(pr, repo_name=repo_name, rules=rules)
        if isinstance(bullet, Err):
            return bullet
        bullets.append(bullet.value)
    return Ok(bullets)
