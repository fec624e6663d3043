"""Replace the plugin's ``version`` targets with the host tool's native release config.

Projects are inspected first. If any legacy target runs in sync mode nothing is
written; otherwise the workspace ``release`` block is written once, followed by
each rewritten project.
"""

from __future__ import annotations

import copy
import logging
from typing import Any, Dict, List, Mapping, Optional, Tuple

from ..config import WORKSPACE_CONFIG_FILE
from ..models import MigrationReport
from ..schemas import WorkspaceReleaseConfig
from ..workspace import ProjectEntry, WorkspaceTree
from .legacy import NO_CONFIG_MESSAGE, SYNC_MODE_MESSAGE, LegacyDetection, detect_legacy_targets

logger = logging.getLogger(__name__)

SLUG = "native-release"


def remove_legacy_targets(document: Mapping[str, Any], detection: LegacyDetection) -> Dict[str, Any]:
    migrated = copy.deepcopy(dict(document))
    targets = migrated.get("targets") or {}
    for name in (*detection.targets, *detection.post_targets):
        targets.pop(name, None)
    return migrated


def merge_release_config(workspace_document: Mapping[str, Any], release: WorkspaceReleaseConfig) -> Dict[str, Any]:
    merged = copy.deepcopy(dict(workspace_document))
    existing = merged.get("release")
    block = dict(existing) if isinstance(existing, Mapping) else {}
    block.update(release.to_document())
    merged["release"] = block
    return merged


def _note(report: MigrationReport, log: logging.Logger, message: str) -> None:
    log.info(message)
    report.logs.append(message)


def run(tree: WorkspaceTree, log: Optional[logging.Logger] = None) -> MigrationReport:
    log = log or logger
    report = MigrationReport(migration=SLUG)

    pending: List[Tuple[ProjectEntry, Dict[str, Any]]] = []
    for project in tree.get_projects().values():
        detection = detect_legacy_targets(project.document)
        if not detection.detected:
            continue
        if detection.sync_mode:
            report.skipped_projects.append(project.name)
            continue
        pending.append((project, remove_legacy_targets(project.document, detection)))

    # A synced workspace is migrated as a whole or not at all.
    if report.skipped_projects:
        report.skipped_projects += [project.name for project, _ in pending]
        _note(report, log, SYNC_MODE_MESSAGE)
        return report
    if not pending:
        _note(report, log, NO_CONFIG_MESSAGE)
        return report

    tree.update_workspace_config(merge_release_config(tree.read_workspace_config(), WorkspaceReleaseConfig()))
    report.changed_files.append(WORKSPACE_CONFIG_FILE)

    for project, document in pending:
        tree.update_project(project, document)
        report.changed_files.append(project.config_path)
        log.info("Removed legacy targets from %s", project.config_path)

    # TODO: drop the plugin from package.json / pyproject dependency lists once the manifest rules are settled.
    return report
