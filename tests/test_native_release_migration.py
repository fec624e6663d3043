from __future__ import annotations

import json
import logging

import pytest

from workspace_semver.migrations import NO_CONFIG_MESSAGE, SYNC_MODE_MESSAGE, detect_legacy_targets, run_migration
from workspace_semver.migrations.native_release import merge_release_config, remove_legacy_targets
from workspace_semver.schemas import WorkspaceReleaseConfig
from workspace_semver.workspace import WorkspaceTree


EXPECTED_CHANGELOG = {
    "git": {"commit": True, "tag": True},
    "workspaceChangelog": {"createRelease": "github", "file": False},
    "projectChangelogs": True,
}


def test_bails_out_on_sync_mode(tree: WorkspaceTree, add_project, caplog: pytest.LogCaptureFixture, read_json) -> None:
    path = add_project(
        ".",
        {"version": {"executor": "workspace-semver:version", "options": {"syncVersions": True}}},
        name="a",
    )

    with caplog.at_level(logging.INFO):
        report = run_migration("native-release", tree)

    assert "version" in read_json(path)["targets"]
    assert SYNC_MODE_MESSAGE in caplog.messages
    assert tree.written == []
    assert report.skipped_projects == ["a"]
    assert not tree.exists("workspace.json")


def test_bails_out_without_plugin_config(tree: WorkspaceTree, add_project, caplog: pytest.LogCaptureFixture) -> None:
    add_project(".", {"build": {"executor": "version"}}, name="a")

    with caplog.at_level(logging.INFO):
        report = run_migration("native-release", tree)

    assert NO_CONFIG_MESSAGE in caplog.messages
    assert NO_CONFIG_MESSAGE == "No workspace-semver config detected, skipping migration."
    assert tree.written == []
    assert report.logs == [NO_CONFIG_MESSAGE]


def test_configures_workspace_release(tree: WorkspaceTree, add_project, read_json) -> None:
    add_project("libs/a", {"version": {"executor": "workspace-semver:version"}}, name="a")

    run_migration("native-release", tree)

    release = read_json(tree.path("workspace.json"))["release"]
    assert release["releaseTagPattern"] == "{projectName}-{version}"
    assert release["changelog"] == EXPECTED_CHANGELOG


def test_removes_version_and_post_targets(tree: WorkspaceTree, add_project, read_json) -> None:
    path = add_project(
        "libs/a",
        {
            "version": {"executor": "workspace-semver:version", "options": {"postTargets": ["npm", "github"]}},
            "npm": {"command": "exit 0"},
            "github": {"command": "exit 0"},
            "build": {"executor": "another"},
        },
        name="a",
    )

    run_migration("native-release", tree)

    targets = read_json(path)["targets"]
    assert "version" not in targets
    assert "npm" not in targets
    assert "github" not in targets
    assert targets["build"] == {"executor": "another"}
    assert read_json(tree.path("workspace.json"))["release"]["releaseTagPattern"] == "{projectName}-{version}"


def test_workspace_document_written_once_for_many_projects(tree: WorkspaceTree, add_project) -> None:
    add_project("libs/a", {"version": {"executor": "workspace-semver:version"}}, name="a")
    add_project("libs/b", {"version": {"executor": "workspace-semver"}}, name="b")
    add_project("libs/c", {"build": {"executor": "another"}}, name="c")

    report = run_migration("native-release", tree)

    assert tree.written.count("workspace.json") == 1
    assert sorted(report.changed_files) == ["libs/a/project.json", "libs/b/project.json", "workspace.json"]
    assert "libs/c/project.json" not in tree.written


def test_sync_project_blocks_whole_workspace(
    tree: WorkspaceTree, add_project, read_json, caplog: pytest.LogCaptureFixture
) -> None:
    sync_path = add_project(
        "libs/a",
        {"version": {"executor": "workspace-semver:version", "options": {"syncVersions": True}}},
        name="a",
    )
    other_path = add_project("libs/b", {"version": {"executor": "workspace-semver:version"}}, name="b")

    with caplog.at_level(logging.INFO):
        report = run_migration("native-release", tree)

    assert tree.written == []
    assert not report.changed
    assert "version" in read_json(sync_path)["targets"]
    assert "version" in read_json(other_path)["targets"]
    assert sorted(report.skipped_projects) == ["a", "b"]
    assert caplog.messages.count(SYNC_MODE_MESSAGE) == 1
    assert not tree.exists("workspace.json")


def test_existing_workspace_settings_are_preserved(tree: WorkspaceTree, add_project, read_json) -> None:
    tree.path("workspace.json").write_text(
        json.dumps({"npmScope": "acme", "release": {"projects": ["libs/*"]}}), encoding="utf-8"
    )
    add_project("libs/a", {"version": {"executor": "workspace-semver:version"}}, name="a")

    run_migration("native-release", tree)

    workspace = read_json(tree.path("workspace.json"))
    assert workspace["npmScope"] == "acme"
    assert workspace["release"]["projects"] == ["libs/*"]
    assert workspace["release"]["changelog"] == EXPECTED_CHANGELOG


def test_second_run_is_a_no_op(tree: WorkspaceTree, add_project, caplog: pytest.LogCaptureFixture) -> None:
    add_project("libs/a", {"version": {"executor": "workspace-semver:version"}}, name="a")
    run_migration("native-release", tree)
    written = list(tree.written)

    with caplog.at_level(logging.INFO):
        run_migration("native-release", tree)

    assert tree.written == written
    assert NO_CONFIG_MESSAGE in caplog.messages


def test_detector_reports_targets_and_post_targets() -> None:
    detection = detect_legacy_targets(
        {
            "targets": {
                "release": {
                    "executor": "workspace-semver:version",
                    "options": {"postTargets": ["a:npm", "github"]},
                },
                "github": {"executor": "workspace-semver:github"},
                "lint": {"executor": "eslint"},
            }
        }
    )

    assert detection.detected
    assert detection.targets == ("release",)
    assert detection.post_targets == ("npm", "github")
    assert not detection.sync_mode


def test_detector_without_targets() -> None:
    assert not detect_legacy_targets({}).detected
    assert not detect_legacy_targets({"targets": {"build": {"command": "make"}}}).detected


def test_pure_rewrites_do_not_mutate_inputs() -> None:
    document = {"targets": {"version": {"executor": "workspace-semver"}, "npm": {}}}
    detection = detect_legacy_targets(
        {"targets": {"version": {"executor": "workspace-semver", "options": {"postTargets": ["npm"]}}}}
    )
    migrated = remove_legacy_targets(document, detection)
    assert migrated == {"targets": {}}
    assert "version" in document["targets"]

    workspace = {"release": {"projects": ["*"]}}
    merged = merge_release_config(workspace, WorkspaceReleaseConfig())
    assert workspace == {"release": {"projects": ["*"]}}
    assert merged["release"]["releaseTagPattern"] == "{projectName}-{version}"
