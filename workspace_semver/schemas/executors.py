"""Pydantic models describing executor options."""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ReleaseOptions(BaseModel):
    """Options accepted by the ``github`` executor (``gh release create``)."""

    tag: str = Field(..., min_length=1, description="Git tag the release is created from.")
    files: List[str] = Field(default_factory=list, description="Assets uploaded with the release.")
    notes: Optional[str] = None
    notes_file: Optional[str] = None
    target: Optional[str] = Field(default=None, description="Branch or commit SHA the tag is created from.")
    draft: bool = False
    title: Optional[str] = None
    prerelease: bool = False
    discussion_category: Optional[str] = None
    repo: Optional[str] = Field(default=None, description="Repository in owner/name form.")
    generate_notes: bool = False
    notes_start_tag: Optional[str] = None

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True, extra="forbid")


class VersionOptions(BaseModel):
    """Options accepted by the ``version`` executor."""

    dry_run: bool = False
    no_verify: bool = False
    push: bool = False
    remote: Optional[str] = "origin"
    base_branch: Optional[str] = "main"
    sync_versions: bool = False
    skip_root_changelog: bool = False
    skip_project_changelog: bool = False
    release_as: Optional[Literal["major", "minor", "patch"]] = None
    post_targets: List[str] = Field(default_factory=list)
    commit_message_format: str = Field(
        default="chore(${projectName}): release version ${version}",
        description="Commit message template; ${projectName}, ${version} and ${tag} are substituted.",
    )

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True, extra="forbid")
