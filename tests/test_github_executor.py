from __future__ import annotations

import logging
from unittest import mock

import pytest
from pydantic import ValidationError

from workspace_semver.executors.github import build_release_args, run_github_executor
from workspace_semver.schemas import ReleaseOptions


def test_build_args_with_only_tag() -> None:
    assert build_release_args(ReleaseOptions(tag="v1.0.0")) == ["release", "create", "v1.0.0"]


def test_build_args_full_order() -> None:
    options = ReleaseOptions.model_validate(
        {
            "tag": "a-1.2.0",
            "files": ["dist/a.whl", "dist/a.tar.gz"],
            "notes": "Release notes",
            "notesFile": "NOTES.md",
            "target": "main",
            "draft": True,
            "title": "a 1.2.0",
            "prerelease": True,
            "discussionCategory": "Announcements",
            "repo": "acme/monorepo",
            "generateNotes": True,
            "notesStartTag": "a-1.1.0",
        }
    )

    assert build_release_args(options) == [
        "release",
        "create",
        "a-1.2.0",
        "dist/a.whl",
        "dist/a.tar.gz",
        "--notes",
        "Release notes",
        "--notes-file",
        "NOTES.md",
        "--target",
        "main",
        "--draft",
        "--title",
        "a 1.2.0",
        "--prerelease",
        "--discussion-category",
        "Announcements",
        "--repo",
        "acme/monorepo",
        "--generate-notes",
        "--notes-start-tag",
        "a-1.1.0",
    ]


@pytest.mark.parametrize("draft", [False, None])
def test_draft_flag_omitted_when_not_set(draft) -> None:
    payload = {"tag": "v1"}
    if draft is not None:
        payload["draft"] = draft
    assert "--draft" not in build_release_args(ReleaseOptions.model_validate(payload))


def test_empty_values_are_skipped() -> None:
    args = build_release_args(ReleaseOptions(tag="v1", notes="", title="", repo=None))
    assert args == ["release", "create", "v1"]


def test_executor_runs_gh_once_and_succeeds() -> None:
    with mock.patch("subprocess.run") as run_mock:
        run_mock.return_value = mock.Mock(returncode=0, stdout="https://github.com/acme/repo/releases/tag/v1\n", stderr="")
        result = run_github_executor({"tag": "v1", "draft": True})

    assert result.success is True
    run_mock.assert_called_once()
    assert run_mock.call_args.args[0] == ["gh", "release", "create", "v1", "--draft"]


def test_executor_reports_non_zero_exit(caplog: pytest.LogCaptureFixture) -> None:
    with mock.patch("subprocess.run") as run_mock:
        run_mock.return_value = mock.Mock(returncode=1, stdout="", stderr="release already exists")
        with caplog.at_level(logging.ERROR):
            result = run_github_executor(ReleaseOptions(tag="v1"))

    assert result.success is False
    assert run_mock.call_count == 1
    assert "release already exists" in caplog.text


def test_executor_reports_spawn_error(caplog: pytest.LogCaptureFixture) -> None:
    with mock.patch("subprocess.run", side_effect=FileNotFoundError("gh: not found")):
        with caplog.at_level(logging.ERROR):
            result = run_github_executor(ReleaseOptions(tag="v1"))

    assert result.success is False
    assert "gh: not found" in caplog.text


def test_executor_rejects_missing_tag() -> None:
    with mock.patch("subprocess.run") as run_mock:
        result = run_github_executor({"notes": "no tag"})
    assert result.success is False
    run_mock.assert_not_called()


def test_executor_uses_configured_binary(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("WORKSPACE_SEMVER_GH_BINARY", "/opt/gh/bin/gh")
    with mock.patch("subprocess.run") as run_mock:
        run_mock.return_value = mock.Mock(returncode=0, stdout="", stderr="")
        run_github_executor(ReleaseOptions(tag="v1"))
    assert run_mock.call_args.args[0][0] == "/opt/gh/bin/gh"


def test_executor_reports_invalid_settings(monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture) -> None:
    monkeypatch.setenv("WORKSPACE_SEMVER_LOG_LEVEL", "chatty")
    with mock.patch("subprocess.run") as run_mock:
        with caplog.at_level(logging.ERROR):
            result = run_github_executor({"tag": "v1"})

    assert result.success is False
    assert "Unknown log level" in caplog.text
    run_mock.assert_not_called()


def test_release_options_are_immutable() -> None:
    options = ReleaseOptions(tag="v1")
    with pytest.raises(ValidationError):
        options.tag = "v2"  # type: ignore[misc]

