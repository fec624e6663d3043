"""``version`` executor: bump, changelog, commit, tag, push and post targets."""

from __future__ import annotations

import datetime as _dt
import logging
from dataclasses import dataclass, field
from pathlib import Path
from string import Template
from typing import List, Mapping, Optional, Union

from pydantic import ValidationError

from .. import git
from ..config import CHANGELOG_FILE
from ..models import VersionResult
from ..process import CommandError
from ..schemas import VersionOptions
from ..versioning import (
    ConventionalCommit,
    VersioningError,
    bump_version,
    find_manifest,
    read_version,
    resolve_bump,
    update_changelog,
    write_version,
)
from ..workspace import WorkspaceError
from .registry import ExecutorContext, ExecutorError, run_target

SYNC_TAG_PREFIX = "v"


@dataclass
class ReleasePlan:
    project_name: str
    tag_prefix: str
    previous_version: str
    version: str
    first_release: bool
    manifests: List[Path] = field(default_factory=list)
    changelogs: List[Path] = field(default_factory=list)
    commits: List[ConventionalCommit] = field(default_factory=list)

    @property
    def tag(self) -> str:
        return f"{self.tag_prefix}{self.version}"

    def variables(self) -> dict[str, str]:
        return {"projectName": self.project_name, "version": self.version, "tag": self.tag}


def run_version_executor(
    context: ExecutorContext,
    options: Union[VersionOptions, Mapping[str, object]],
) -> VersionResult:
    log = context.log
    try:
        opts = options if isinstance(options, VersionOptions) else VersionOptions.model_validate(options)
    except ValidationError as exc:
        log.error("Invalid version executor options: %s", exc)
        return VersionResult(success=False)

    if opts.push and not (opts.remote and opts.base_branch):
        log.error("Missing configuration for Git push. Please provide --remote and --base-branch options.")
        return VersionResult(success=False)

    try:
        plan = plan_release(context, opts)
    except (WorkspaceError, VersioningError, CommandError, ValidationError) as exc:
        log.error("%s", exc)
        return VersionResult(success=False)

    if plan is None:
        log.info("Nothing changed since last release of %s.", context.project_name)
        return VersionResult(success=True, dry_run=opts.dry_run)

    result = VersionResult(
        success=True,
        version=plan.version,
        tag=plan.tag,
        previous_version=plan.previous_version,
        dry_run=opts.dry_run,
    )
    if plan.first_release:
        log.info("First release of %s detected, tagging %s.", plan.project_name, plan.tag)
    else:
        log.info("Bumping %s from %s to %s.", plan.project_name, plan.previous_version, plan.version)
    if opts.dry_run:
        log.info("Dry run: no files written, no commit or tag created.")
        return result

    workspace_root = context.tree.root
    try:
        apply_release(plan, opts, workspace_root)
        if opts.push:
            git.push(opts.remote, opts.base_branch, no_verify=opts.no_verify, cwd=workspace_root)  # type: ignore[arg-type]
    except (VersioningError, CommandError, ValidationError, OSError) as exc:
        log.error("%s", exc)
        result.success = False
        return result

    result.success = _run_post_targets(context, opts, plan)
    return result


def plan_release(context: ExecutorContext, opts: VersionOptions) -> Optional[ReleasePlan]:
    """Work out the next version for the context project, or ``None`` if nothing changed."""

    tree = context.tree
    if not context.project_name:
        raise WorkspaceError("The version executor must run against a project.")
    project = tree.get_project(context.project_name)

    if opts.sync_versions:
        project_roots = [tree.path(entry.root) for entry in tree.get_projects().values()]
        manifests = [manifest for manifest in map(find_manifest, project_roots) if manifest is not None]
        changelogs = [] if opts.skip_root_changelog else [tree.root / CHANGELOG_FILE]
        if not opts.skip_project_changelog:
            changelogs += [root / CHANGELOG_FILE for root in project_roots if root != tree.root]
        version_source = find_manifest(tree.root) or (manifests[0] if manifests else None)
        # The workspace manifest carries the shared version even when the root is not a project.
        if version_source is not None and version_source not in manifests:
            manifests.insert(0, version_source)
        log_path = "."
        tag_prefix = SYNC_TAG_PREFIX
    else:
        project_root = tree.path(project.root)
        manifest = find_manifest(project_root)
        manifests = [manifest] if manifest else []
        changelogs = [] if opts.skip_project_changelog else [project_root / CHANGELOG_FILE]
        version_source = manifest
        log_path = project.root
        tag_prefix = f"{project.name}-"

    if version_source is None:
        raise VersioningError(f"No pyproject.toml or package.json found for project '{project.name}'.")

    current = read_version(version_source)
    last_tag = git.get_last_tag(tag_prefix, cwd=tree.root)
    # Without any changelog to inspect, a missing tag marks the first release.
    if changelogs:
        first_release = not any(path.exists() for path in changelogs)
    else:
        first_release = last_tag is None

    messages = git.get_commit_messages(None if first_release else last_tag, log_path, cwd=tree.root)
    commits = [ConventionalCommit.parse(message) for message in messages]
    if first_release:
        new_version = current
    else:
        bump = opts.release_as or resolve_bump(commits)
        if bump is None:
            return None
        new_version = bump_version(current, bump)

    return ReleasePlan(
        project_name=project.name,
        tag_prefix=tag_prefix,
        previous_version=current,
        version=new_version,
        first_release=first_release,
        manifests=manifests,
        changelogs=changelogs,
        commits=commits,
    )


def apply_release(plan: ReleasePlan, opts: VersionOptions, workspace_root: Path) -> None:
    if plan.version != plan.previous_version:
        for manifest in plan.manifests:
            write_version(manifest, plan.version)

    timestamp = _dt.datetime.now(_dt.timezone.utc)
    for changelog in plan.changelogs:
        update_changelog(changelog, plan.version, timestamp, plan.commits)

    files = sorted({path.relative_to(workspace_root).as_posix() for path in [*plan.manifests, *plan.changelogs]})
    message = Template(opts.commit_message_format).safe_substitute(plan.variables())
    if files:
        git.commit(files, message, no_verify=opts.no_verify, cwd=workspace_root)
    git.create_tag(plan.tag, message, cwd=workspace_root)


def _run_post_targets(context: ExecutorContext, opts: VersionOptions, plan: ReleasePlan) -> bool:
    runner = context.target_runner or run_target
    for target_name in opts.post_targets:
        try:
            outcome = runner(
                context.tree,
                plan.project_name,
                target_name,
                variables=plan.variables(),
                log=context.log,
            )
        except (ExecutorError, WorkspaceError, KeyError, ValidationError) as exc:
            context.log.error("Post target '%s' failed: %s", target_name, exc)
            return False
        if not outcome.success:
            context.log.error("Post target '%s' failed.", target_name)
            return False
    return True
