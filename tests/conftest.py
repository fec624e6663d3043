from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, List, Optional

import pytest

from workspace_semver import config, git
from workspace_semver.workspace import WorkspaceTree


def _write_project(root: Path, project_root: str, targets: Dict[str, Any], name: Optional[str] = None) -> Path:
    path = root / project_root / "project.json"
    path.parent.mkdir(parents=True, exist_ok=True)
    document: Dict[str, Any] = {"targets": targets}
    if name:
        document = {"name": name, "root": project_root, **document}
    path.write_text(json.dumps(document, indent=2) + "\n", encoding="utf-8")
    return path


def _read_json(path: Path) -> Dict[str, Any]:
    return json.loads(path.read_text(encoding="utf-8"))


class FakeGit:
    """Records git invocations and answers ``tag --list`` / ``log`` queries."""

    def __init__(self) -> None:
        self.calls: List[List[str]] = []
        self.tags: List[str] = []
        self.messages: List[str] = []

    def __call__(self, command, *, cwd=None, env=None) -> str:
        args = list(command[1:])
        self.calls.append(args)
        if args[:2] == ["tag", "--list"]:
            return "\n".join(self.tags)
        if args and args[0] == "log":
            return "".join(f"{message}\n\x00\n" for message in self.messages)
        return ""

    def find(self, subcommand: str) -> List[List[str]]:
        return [call for call in self.calls if call and call[0] == subcommand]


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    for name in ("WORKSPACE_SEMVER_GH_BINARY", "WORKSPACE_SEMVER_GIT_BINARY", "WORKSPACE_SEMVER_LOG_LEVEL"):
        # setenv first so teardown also removes values loaded from a workspace .env
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    config.reset_settings()
    yield
    config.reset_settings()


@pytest.fixture()
def tree(tmp_path: Path) -> WorkspaceTree:
    return WorkspaceTree(tmp_path)


@pytest.fixture()
def fake_git(monkeypatch: pytest.MonkeyPatch) -> FakeGit:
    fake = FakeGit()
    monkeypatch.setattr(git, "run_command", fake)
    return fake


@pytest.fixture()
def add_project(tmp_path: Path) -> Callable[..., Path]:
    def _add(project_root: str, targets: Dict[str, Any], name: Optional[str] = None) -> Path:
        return _write_project(tmp_path, project_root, targets, name=name)

    return _add


@pytest.fixture()
def read_json() -> Callable[[Path], Dict[str, Any]]:
    return _read_json
