from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date
from pathlib import Path

from shipnotes.core.result import Err, Ok, Result
from shipnotes.services.changelog.config import CHANGELOG_HEADER
from shipnotes.services.changelog.errors import ChangelogError

# Lines kept above every version section: the title and the blank line after it.
HEADER_LINES = 2


@dataclass(frozen=True, slots=True)
class ChangelogUpdate:
    path: Path
    section: tuple[str, ...]

    @property
    def body(self) -> str:
        """Section as release-body markdown, without the trailing blank line."""
        return "\n".join(self.section).rstrip() + "\n"


def long_date(day: date) -> str:
    """`Tuesday, May 16, 2023`; no zero padding on the day."""
    return f"{day:%A, %B} {day.day}, {day.year}"


def build_section(version: str, bullets: Sequence[str], today: date) -> list[str]:
    return [f"## {version}", f"### {long_date(today)}", "", *bullets, ""]


def split_lines(text: str) -> list[str]:
    """Split on `\\n` only; every line keeps its own terminator (`\\n` or `\\r\\n`)."""
    lines = text.split("\n")
    tail = lines.pop()
    return [f"{line}\n" for line in lines] + ([tail] if tail else [])


def splice(lines: Sequence[str], section: Sequence[str], newline: str = "\n") -> list[str]:
    """Insert `section` right after the header; every original line is kept once.

    `lines` carry their own terminators and are not rewritten. `newline` ends
    the section lines and any header lines a short file is padded with.
    """
    head = list(lines[:HEADER_LINES])
    if head and not head[-1].endswith("\n"):
        head[-1] += newline
    head.extend(f"{line}{newline}" for line in CHANGELOG_HEADER[len(head) : HEADER_LINES])
    return [*head, *(f"{line}{newline}" for line in section), *lines[HEADER_LINES:]]


def update_changelog(
    *,
    path: Path,
    version: str,
    bullets: Sequence[str],
    today: date,
) -> Result[ChangelogUpdate, ChangelogError]:
    try:
        # utf-8-sig drops a BOM if an editor added one; it is not written back.
        text = path.read_bytes().decode("utf-8-sig")
    except FileNotFoundError:
        return Err(
            ChangelogError(
                kind="changelog_failed",
                message=f"changelog not found: {path}",
            )
        )
    except (OSError, UnicodeDecodeError) as e:
        return Err(
            ChangelogError(
                kind="changelog_failed",
                message=f"failed to read changelog: {e}",
                hint=str(path),
            )
        )

    lines = split_lines(text)
    # New lines follow the header's line ending.
    newline = "\r\n" if lines and lines[0].endswith("\r\n") else "\n"
    section = build_section(version, bullets, today)

    try:
        path.write_bytes("".join(splice(lines, section, newline)).encode("utf-8"))
    except OSError as e:
        return Err(
            ChangelogError(
                kind="changelog_failed",
                message=f"failed to write changelog: {e}",
                hint=str(path),
            )
        )

    return Ok(ChangelogUpdate(path=path, section=tuple(section)))
