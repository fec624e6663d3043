from __future__ import annotations

import re
from pathlib import Path
from typing import List, Optional, Sequence

from .config import get_settings
from .process import run_command


def _git(args: Sequence[str], *, cwd: Path) -> str:
    return run_command([get_settings().git_binary, *args], cwd=cwd)


def get_last_tag(prefix: str, *, cwd: Path) -> Optional[str]:
    """Newest ``<prefix>X.Y.Z`` tag; tags of other projects sharing the prefix are skipped."""

    pattern = re.compile(rf"^{re.escape(prefix)}\d+\.\d+\.\d+$")
    output = _git(["tag", "--list", f"{prefix}*", "--sort=-v:refname"], cwd=cwd)
    for line in output.splitlines():
        if pattern.match(line.strip()):
            return line.strip()
    return None


def get_commit_messages(since: Optional[str], path: str, *, cwd: Path) -> List[str]:
    """Full commit messages reachable from HEAD (after ``since``) touching ``path``."""

    revision = f"{since}..HEAD" if since else "HEAD"
    output = _git(["log", "--format=%B%x00", revision, "--", path], cwd=cwd)
    return [message.strip() for message in output.split("\x00") if message.strip()]


def commit(files: Sequence[str], message: str, *, no_verify: bool, cwd: Path) -> None:
    _git(["add", "--", *files], cwd=cwd)
    args = ["commit", "-m", message]
    if no_verify:
        args.append("--no-verify")
    _git(args, cwd=cwd)


def create_tag(tag: str, message: str, *, cwd: Path) -> None:
    _git(["tag", "-a", tag, "-m", message], cwd=cwd)


def push(remote: str, branch: str, *, no_verify: bool, cwd: Path) -> None:
    args = ["push", "--follow-tags"]
    if no_verify:
        args.append("--no-verify")
    args += ["--atomic", remote, branch]
    _git(args, cwd=cwd)
