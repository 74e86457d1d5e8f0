from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

REPO_NAMES: tuple[str, ...] = ("vscode-powershell", "PowerShellEditorServices")

CHANGELOG_HEADER: tuple[str, ...] = ("# PowerShell Extension Release History", "")

RELEASE_BRANCH_PREFIX = "release/"
PRERELEASE_MARKER = "-preview"

IGNORE_LABEL = "Ignore"
BOT_SUFFIX = "[bot]"

# Shown when none of a PR's labels has an emoji.
PLACEHOLDER_EMOJI = "#️⃣ 🙏"

CLOSE_KEYWORDS: tuple[str, ...] = (
    "close",
    "closes",
    "closed",
    "fix",
    "fixes",
    "fixed",
    "resolve",
    "resolves",
    "resolved",
)

# Order matters: a PR with several matching labels gets its glyphs in this order.
LABEL_EMOJI: Mapping[str, str] = MappingProxyType(
    {
        "Issue-Enhancement": "✨",
        "Issue-Bug": "🐛",
        "Issue-Performance": "⚡️",
        "Area-Build & Release": "👷",
        "Area-Code Formatting": "💎",
        "Area-Configuration": "🔧",
        "Area-Debugging": "🔍",
        "Area-Documentation": "📖",
        "Area-Engine": "🚂",
        "Area-Folding": "📚",
        "Area-Extension Terminal": "📺",
        "Area-IntelliSense": "🧠",
        "Area-Logging": "💭",
        "Area-Pester": "🐢",
        "Area-Script Analysis": "🕵️",
        "Area-Snippets": "✂️",
        "Area-Startup": "🛫",
        "Area-Symbols & References": "🔗",
        "Area-Tasks": "✅",
        "Area-Test": "🚨",
        "Area-Threading": "⏱️",
        "Area-UI": "📺",
        "Area-Workspaces": "📁",
    }
)

# Maintainers; their PRs get no "(Thanks @...!)".
SKIP_THANKS: frozenset[str] = frozenset(
    {
        "andschwa",
        "daxian-dbw",
        "PaulHigin",
        "SeeminglyScience",
        "SydneyhSmith",
        "TylerLeonhardt",
    }
)


@dataclass(frozen=True, slots=True)
class ChangelogRules:
    """Static tables the collector and formatter work from.

    Passed explicitly so tests can swap in small tables.
    """

    label_emoji: Mapping[str, str] = field(default_factory=lambda: LABEL_EMOJI)
    skip_thanks: frozenset[str] = SKIP_THANKS
    close_keywords: tuple[str, ...] = CLOSE_KEYWORDS
    repo_names: tuple[str, ...] = REPO_NAMES
    placeholder_emoji: str = PLACEHOLDER_EMOJI
    ignore_label: str = IGNORE_LABEL
    bot_suffix: str = BOT_SUFFIX


DEFAULT_RULES = ChangelogRules()
