"""Executors exposed by the plugin and the registry used to resolve them."""

from __future__ import annotations

from typing import Mapping

from ..models import ExecutorResult
from .github import build_release_args, run_github_executor
from .registry import (
    ExecutorContext,
    ExecutorError,
    ExecutorSpec,
    get_executor,
    interpolate_options,
    list_executors,
    register_executor,
    run_target,
)
from .version import run_version_executor


def _github_runner(context: ExecutorContext, options: Mapping[str, object]) -> ExecutorResult:
    return run_github_executor(options, log=context.log)


def _register_builtin_executors() -> None:
    register_executor(
        ExecutorSpec(
            name="version",
            description="Bump the project version, update changelogs, commit, tag and optionally push.",
            runner=run_version_executor,
        )
    )
    register_executor(
        ExecutorSpec(
            name="github",
            description="Create a GitHub release from a tag using the gh CLI.",
            runner=_github_runner,
        )
    )


_register_builtin_executors()


__all__ = [
    "ExecutorContext",
    "ExecutorError",
    "ExecutorSpec",
    "build_release_args",
    "get_executor",
    "interpolate_options",
    "list_executors",
    "register_executor",
    "run_github_executor",
    "run_target",
    "run_version_executor",
]
