"""Schema models used by workspace-semver."""

from .executors import ReleaseOptions, VersionOptions
from .workspace import RELEASE_TAG_PATTERN, TargetConfig, WorkspaceReleaseConfig

__all__ = [
    "RELEASE_TAG_PATTERN",
    "ReleaseOptions",
    "TargetConfig",
    "VersionOptions",
    "WorkspaceReleaseConfig",
]
