"""2.0.0: replace the ``rootChangelog`` option with ``skipRootChangelog``."""

from __future__ import annotations

import copy
import logging
from typing import Any, Dict, Mapping, Optional

from ..models import MigrationReport
from ..workspace import WorkspaceTree
from .legacy import is_legacy_executor

logger = logging.getLogger(__name__)

SLUG = "2.0.0"


def migrate_root_changelog(options: Mapping[str, Any]) -> Dict[str, Any]:
    updated = dict(options)
    if "rootChangelog" not in updated and "skipRootChangelog" in updated:
        return updated
    root_changelog = updated.pop("rootChangelog", True)
    updated["skipRootChangelog"] = not root_changelog
    return updated


def migrate_project_document(document: Mapping[str, Any]) -> Optional[Dict[str, Any]]:
    """Return the migrated document, or ``None`` when nothing had to change."""

    targets = document.get("targets")
    if not isinstance(targets, Mapping):
        return None

    migrated = copy.deepcopy(dict(document))
    changed = False
    for name, target in targets.items():
        if not isinstance(target, Mapping) or not is_legacy_executor(target.get("executor")):
            continue
        options = target.get("options") or {}
        updated = migrate_root_changelog(options)
        if updated != options:
            migrated["targets"][name]["options"] = updated
            changed = True
    return migrated if changed else None


def run(tree: WorkspaceTree, log: Optional[logging.Logger] = None) -> MigrationReport:
    log = log or logger
    report = MigrationReport(migration=SLUG)
    for project in tree.get_projects().values():
        migrated = migrate_project_document(project.document)
        if migrated is None:
            continue
        tree.update_project(project, migrated)
        report.changed_files.append(project.config_path)
        log.info("Replaced rootChangelog with skipRootChangelog in %s", project.config_path)
    return report
