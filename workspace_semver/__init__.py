"""Semantic versioning, changelog and release helpers for build-graph workspaces."""

__version__ = "3.0.0"

from .executors import (
    ExecutorContext,
    ExecutorError,
    build_release_args,
    run_github_executor,
    run_target,
    run_version_executor,
)
from .migrations import get_migration, list_migrations, run_migration
from .models import ExecutorResult, MigrationReport, VersionResult
from .schemas import ReleaseOptions, VersionOptions, WorkspaceReleaseConfig
from .workspace import WorkspaceError, WorkspaceTree

__all__ = [
    "__version__",
    "ExecutorContext",
    "ExecutorError",
    "ExecutorResult",
    "MigrationReport",
    "ReleaseOptions",
    "VersionOptions",
    "VersionResult",
    "WorkspaceError",
    "WorkspaceReleaseConfig",
    "WorkspaceTree",
    "build_release_args",
    "get_migration",
    "list_migrations",
    "run_github_executor",
    "run_migration",
    "run_target",
    "run_version_executor",
]
