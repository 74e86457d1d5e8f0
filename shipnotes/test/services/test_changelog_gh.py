from __future__ import annotations

import json
from pathlib import Path

import pytest

from shipnotes.core.result import Err, Ok
from shipnotes.platform.process import ProcessError
from shipnotes.services.changelog import gh as gh_mod
from shipnotes.services.changelog.model import NewRelease


def _err(*, stderr: str, returncode: int = 1) -> Err[ProcessError]:
    return Err(
        ProcessError(
            command=("gh", "api", "repos/PowerShell/vscode-powershell"),
            returncode=returncode,
            stdout="",
            stderr=stderr,
        )
    )


def _pull_json(number: int, **extra: object) -> dict[str, object]:
    data: dict[str, object] = {
        "number": number,
        "title": f"PR {number} ",
        "body": None,
        "state": "closed",
        "html_url": f"https://github.com/PowerShell/vscode-powershell/pull/{number}",
        "user": {"login": "someuser"},
        "labels": [{"name": "Issue-Bug"}, {"name": "Area-UI"}],
        "merge_commit_sha": "a" * 40,
        "merged_at": "2023-05-01T10:00:00Z",
    }
    data.update(extra)
    return data


def test_gh_api_json_does_not_retry(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    calls: list[list[str]] = []

    def fake_run(cmd: list[str], *, cwd: Path, timeout: float | None = None):
        del cwd
        del timeout
        calls.append(cmd)
        return _err(stderr="HTTP 503 Service Unavailable")

    monkeypatch.setattr(gh_mod, "run_process", fake_run)

    result = gh_mod.gh_api_json(cwd=tmp_path, endpoint="repos/PowerShell/vscode-powershell")
    assert isinstance(result, Err)
    assert result.error.kind == "api_failed"
    assert result.error.hint == "HTTP 503 Service Unavailable"
    assert len(calls) == 1


def test_gh_api_json_invalid_json(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setattr(gh_mod, "run_process", lambda cmd, *, cwd, timeout=None: Ok("not json"))

    result = gh_mod.gh_api_json(cwd=tmp_path, endpoint="user")
    assert isinstance(result, Err)
    assert "invalid JSON" in result.error.message


def test_gh_api_items_paginates_line_by_line(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    calls: list[list[str]] = []

    def fake_run(cmd: list[str], *, cwd: Path, timeout: float | None = None):
        del cwd
        del timeout
        calls.append(cmd)
        return Ok('{"a": 1}\n\n{"a": 2}\n')

    monkeypatch.setattr(gh_mod, "run_process", fake_run)

    result = gh_mod.gh_api_items(cwd=tmp_path, endpoint="repos/o/r/pulls")
    assert result == Ok([{"a": 1}, {"a": 2}])
    assert calls[0][:5] == ["gh", "api", "--paginate", "--jq", ".[]"]


def test_get_repository(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    payload = {
        "full_name": "PowerShell/vscode-powershell",
        "name": "vscode-powershell",
        "html_url": "https://github.com/PowerShell/vscode-powershell",
        "default_branch": "main",
    }
    monkeypatch.setattr(
        gh_mod, "run_process", lambda cmd, *, cwd, timeout=None: Ok(json.dumps(payload))
    )

    result = gh_mod.get_repository(cwd=tmp_path, slug="PowerShell/vscode-powershell")
    assert isinstance(result, Ok)
    assert result.value.slug == "PowerShell/vscode-powershell"
    assert result.value.default_branch == "main"


def test_get_repository_not_found(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setattr(
        gh_mod,
        "run_process",
        lambda cmd, *, cwd, timeout=None: _err(stderr="gh: Not Found (HTTP 404)"),
    )

    result = gh_mod.get_repository(cwd=tmp_path, slug="PowerShell/nope")
    assert isinstance(result, Err)
    assert result.error.kind == "api_failed"


def test_list_closed_pulls_parses_payload(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    lines = [
        json.dumps(_pull_json(10)),
        json.dumps(_pull_json(11, merge_commit_sha=None, merged_at=None, labels=[])),
        json.dumps({"unexpected": True}),
    ]
    monkeypatch.setattr(
        gh_mod, "run_process", lambda cmd, *, cwd, timeout=None: Ok("\n".join(lines))
    )

    result = gh_mod.list_closed_pulls(cwd=tmp_path, slug="PowerShell/vscode-powershell")
    assert isinstance(result, Ok)
    assert [p.number for p in result.value] == [10, 11]

    merged, closed = result.value
    assert merged.title == "PR 10"
    assert merged.body == ""
    assert merged.author == "someuser"
    assert merged.labels == frozenset({"Issue-Bug", "Area-UI"})
    assert merged.merged is True
    assert closed.merge_commit_sha is None
    assert closed.merged is False
    assert closed.labels == frozenset()


def test_list_releases_keeps_api_order(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    lines = [
        json.dumps({"tag_name": "v2023.6.0-preview", "draft": True, "prerelease": True}),
        json.dumps({"tag_name": "v2023.5.0", "name": "v2023.5.0", "draft": False}),
    ]
    monkeypatch.setattr(
        gh_mod, "run_process", lambda cmd, *, cwd, timeout=None: Ok("\n".join(lines))
    )

    result = gh_mod.list_releases(cwd=tmp_path, slug="PowerShell/vscode-powershell")
    assert isinstance(result, Ok)
    assert [r.tag for r in result.value] == ["v2023.6.0-preview", "v2023.5.0"]
    assert result.value[0].draft is True
    assert result.value[0].prerelease is True
    assert result.value[1].draft is False


def test_create_release_posts_draft(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    calls: list[list[str]] = []

    def fake_run(cmd: list[str], *, cwd: Path, timeout: float | None = None):
        del cwd
        del timeout
        calls.append(cmd)
        return Ok(
            json.dumps(
                {
                    "tag_name": "v2023.5.0",
                    "name": "v2023.5.0",
                    "draft": True,
                    "prerelease": False,
                    "body": "## v2023.5.0\n",
                    "html_url": "https://github.com/PowerShell/vscode-powershell/releases/tag/untagged-1",
                }
            )
        )

    monkeypatch.setattr(gh_mod, "run_process", fake_run)

    result = gh_mod.create_release(
        cwd=tmp_path,
        slug="PowerShell/vscode-powershell",
        release=NewRelease(tag="v2023.5.0", name="v2023.5.0", body="## v2023.5.0\n"),
    )
    assert isinstance(result, Ok)
    assert result.value.draft is True

    cmd = calls[0]
    assert cmd[:5] == ["gh", "api", "--method", "POST", "repos/PowerShell/vscode-powershell/releases"]
    assert "tag_name=v2023.5.0" in cmd
    assert "body=## v2023.5.0\n" in cmd
    assert "draft=true" in cmd
    assert "prerelease=false" in cmd


def test_ensure_gh_auth_failure(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setattr(
        gh_mod, "run_process", lambda cmd, *, cwd, timeout=None: _err(stderr="not logged in")
    )

    result = gh_mod.ensure_gh_auth(cwd=tmp_path)
    assert isinstance(result, Err)
    assert result.error.kind == "gh_auth_required"


def test_ensure_gh_available_missing(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(gh_mod.shutil, "which", lambda name: None)

    result = gh_mod.ensure_gh_available()
    assert isinstance(result, Err)
    assert result.error.kind == "gh_missing"
