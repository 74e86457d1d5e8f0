from __future__ import annotations

import json
import shutil
from pathlib import Path

from shipnotes.core.result import Err, Ok, Result
from shipnotes.core.structured import (
    StrDict,
    as_obj_list,
    as_str_dict,
    get_bool,
    get_int,
    get_str,
    get_table,
    get_text,
)
from shipnotes.platform.process import run as run_process
from shipnotes.services.changelog.errors import ChangelogError
from shipnotes.services.changelog.model import NewRelease, PullRequest, Release, RemoteRepository
from shipnotes.services.changelog.timeouts import GH_PAGINATE_TIMEOUT_SECONDS, GH_TIMEOUT_SECONDS


def run_gh(
    *,
    cwd: Path,
    cmd: list[str],
    message: str,
    hint: str | None = None,
    timeout: float = GH_TIMEOUT_SECONDS,
) -> Result[str, ChangelogError]:
    # No retries: a failed call aborts the run.
    result = run_process(cmd, cwd=cwd, timeout=timeout)
    if isinstance(result, Err):
        error = result.error
        return Err(
            ChangelogError(
                kind="api_failed",
                message=message,
                hint=error.stderr.strip() or hint,
            )
        )
    return result


def ensure_gh_available() -> Result[None, ChangelogError]:
    if shutil.which("gh") is None:
        return Err(
            ChangelogError(
                kind="gh_missing",
                message="gh: missing",
                hint="Install GitHub CLI: https://cli.github.com/",
            )
        )
    return Ok(None)


def ensure_gh_auth(*, cwd: Path) -> Result[None, ChangelogError]:
    result = run_process(["gh", "auth", "status"], cwd=cwd, timeout=GH_TIMEOUT_SECONDS)
    if isinstance(result, Err):
        return Err(
            ChangelogError(
                kind="gh_auth_required",
                message="gh auth required",
                hint="Run: gh auth login",
            )
        )
    return Ok(None)


def gh_api_json(*, cwd: Path, endpoint: str) -> Result[object, ChangelogError]:
    result = run_gh(
        cwd=cwd,
        cmd=["gh", "api", endpoint],
        message=f"gh api failed: {endpoint}",
        hint=endpoint,
    )
    if isinstance(result, Err):
        return result

    try:
        obj: object = json.loads(result.value)
    except json.JSONDecodeError as e:
        return Err(
            ChangelogError(
                kind="api_failed",
                message=f"gh api returned invalid JSON: {e}",
                hint=endpoint,
            )
        )
    return Ok(obj)


def gh_api_items(*, cwd: Path, endpoint: str) -> Result[list[object], ChangelogError]:
    """Fetch every page of a list endpoint.

    `--jq '.[]'` makes gh print one compact JSON document per line, which
    sidesteps the concatenated-arrays output of plain `--paginate`.
    """
    result = run_gh(
        cwd=cwd,
        cmd=["gh", "api", "--paginate", "--jq", ".[]", endpoint],
        message=f"gh api failed: {endpoint}",
        hint=endpoint,
        timeout=GH_PAGINATE_TIMEOUT_SECONDS,
    )
    if isinstance(result, Err):
        return result

    items: list[object] = []
    for n, line in enumerate(result.value.splitlines(), start=1):
        if not line.strip():
            continue
        try:
            items.append(json.loads(line))
        except json.JSONDecodeError as e:
            return Err(
                ChangelogError(
                    kind="api_failed",
                    message=f"gh api returned invalid JSON on line {n}: {e}",
                    hint=endpoint,
                )
            )
    return Ok(items)


def get_repository(*, cwd: Path, slug: str) -> Result[RemoteRepository, ChangelogError]:
    obj = gh_api_json(cwd=cwd, endpoint=f"repos/{slug}")
    if isinstance(obj, Err):
        return obj

    data = as_str_dict(obj.value)
    if data is None:
        return Err(ChangelogError(kind="api_failed", message=f"unexpected repo payload: {slug}"))

    full_name = get_str(data, "full_name")
    name = get_str(data, "name")
    html_url = get_str(data, "html_url")
    if full_name is None or name is None or html_url is None:
        return Err(
            ChangelogError(kind="api_failed", message=f"incomplete repo payload: {slug}")
        )

    return Ok(
        RemoteRepository(
            slug=full_name,
            name=name,
            html_url=html_url,
            default_branch=get_str(data, "default_branch") or "main",
        )
    )


def parse_release(data: StrDict) -> Release | None:
    tag = get_str(data, "tag_name")
    if tag is None:
        return None
    return Release(
        tag=tag,
        name=get_str(data, "name") or tag,
        draft=get_bool(data, "draft") or False,
        prerelease=get_bool(data, "prerelease") or False,
        body=get_text(data, "body"),
        html_url=get_str(data, "html_url"),
    )


def parse_pull_request(data: StrDict) -> PullRequest | None:
    number = get_int(data, "number")
    html_url = get_str(data, "html_url")
    if number is None or html_url is None:
        return None

    user = get_table(data, "user") or {}
    labels: set[str] = set()
    for item in as_obj_list(data.get("labels")) or []:
        label = as_str_dict(item)
        if label is None:
            continue
        name = get_str(label, "name")
        if name is not None:
            labels.add(name)

    return PullRequest(
        number=number,
        title=get_text(data, "title").strip(),
        body=get_text(data, "body"),
        author=get_str(user, "login") or "",
        html_url=html_url,
        state=get_str(data, "state") or "closed",
        merge_commit_sha=get_str(data, "merge_commit_sha"),
        merged=get_str(data, "merged_at") is not None,
        labels=frozenset(labels),
    )


def list_releases(*, cwd: Path, slug: str) -> Result[list[Release], ChangelogError]:
    """All releases, newest first (the API's order), drafts included."""
    items = gh_api_items(cwd=cwd, endpoint=f"repos/{slug}/releases?per_page=100")
    if isinstance(items, Err):
        return items

    out: list[Release] = []
    for item in items.value:
        d = as_str_dict(item)
        if d is None:
            continue
        release = parse_release(d)
        if release is not None:
            out.append(release)
    return Ok(out)


def list_closed_pulls(*, cwd: Path, slug: str) -> Result[list[PullRequest], ChangelogError]:
    items = gh_api_items(cwd=cwd, endpoint=f"repos/{slug}/pulls?state=closed&per_page=100")
    if isinstance(items, Err):
        return items

    out: list[PullRequest] = []
    for item in items.value:
        d = as_str_dict(item)
        if d is None:
            continue
        pull = parse_pull_request(d)
        if pull is not None:
            out.append(pull)
    return Ok(out)


def create_release(
    *, cwd: Path, slug: str, release: NewRelease
) -> Result[Release, ChangelogError]:
    endpoint = f"repos/{slug}/releases"
    result = run_gh(
        cwd=cwd,
        cmd=[
            "gh",
            "api",
            "--method",
            "POST",
            endpoint,
            "-f",
            f"tag_name={release.tag}",
            "-f",
            f"name={release.name}",
            "-f",
            f"body={release.body}",
            "-F",
            f"draft={'true' if release.draft else 'false'}",
            "-F",
            f"prerelease={'true' if release.prerelease else 'false'}",
        ],
        message=f"failed to create release {release.tag} on {slug}",
        hint=endpoint,
    )
    if isinstance(result, Err):
        return result

    try:
        obj: object = json.loads(result.value)
    except json.JSONDecodeError as e:
        return Err(
            ChangelogError(
                kind="api_failed",
                message=f"invalid JSON from release creation: {e}",
                hint=endpoint,
            )
        )

    data = as_str_dict(obj)
    created = parse_release(data) if data is not None else None
    if created is None:
        return Err(
            ChangelogError(kind="api_failed", message="unexpected payload from release creation")
        )
    return Ok(created)
