"""Pydantic models for workspace and project configuration documents."""

from __future__ import annotations

from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

RELEASE_TAG_PATTERN = "{projectName}-{version}"


class TargetConfig(BaseModel):
    executor: Optional[str] = None
    options: Dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(extra="allow")


class GitReleaseConfig(BaseModel):
    commit: bool = True
    tag: bool = True

    model_config = ConfigDict(extra="forbid")


class WorkspaceChangelogConfig(BaseModel):
    create_release: Literal["github", False] = "github"
    file: bool = False

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")


class ChangelogConfig(BaseModel):
    git: GitReleaseConfig = Field(default_factory=GitReleaseConfig)
    workspace_changelog: WorkspaceChangelogConfig = Field(default_factory=WorkspaceChangelogConfig)
    project_changelogs: bool = True

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")


class WorkspaceReleaseConfig(BaseModel):
    """Workspace-wide ``release`` block written by the native release migration."""

    release_tag_pattern: str = RELEASE_TAG_PATTERN
    changelog: ChangelogConfig = Field(default_factory=ChangelogConfig)

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")

    def to_document(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)
