from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

ChangelogErrorKind = Literal[
    "gh_missing",
    "gh_auth_required",
    "invalid_input",
    "repo_missing",
    "api_failed",
    "git_failed",
    "malformed_issue_reference",
    "changelog_failed",
]


@dataclass(frozen=True, slots=True)
class ChangelogError:
    kind: ChangelogErrorKind
    message: str
    hint: str | None = None
