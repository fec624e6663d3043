"""File-tree access to workspace and project configuration documents."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterator, List

from .config import PROJECT_CONFIG_FILE, WORKSPACE_CONFIG_FILE

logger = logging.getLogger(__name__)

_IGNORED_DIRS = {"node_modules", ".git", "dist", ".venv", "__pycache__"}


class WorkspaceError(RuntimeError):
    """Raised when the workspace tree cannot satisfy a lookup."""


@dataclass
class ProjectEntry:
    name: str
    root: str
    config_path: str
    document: Dict[str, Any]

    @property
    def targets(self) -> Dict[str, Any]:
        return self.document.get("targets") or {}


@dataclass
class WorkspaceTree:
    """Reads and writes JSON documents relative to a workspace root.

    Every write is recorded in ``written`` (workspace-relative POSIX paths).
    """

    root: Path
    written: List[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.root = Path(self.root).resolve()

    def path(self, relpath: str | Path) -> Path:
        return self.root / relpath

    def exists(self, relpath: str | Path) -> bool:
        return self.path(relpath).exists()

    def read_json(self, relpath: str | Path) -> Dict[str, Any]:
        target = self.path(relpath)
        try:
            return json.loads(target.read_text(encoding="utf-8"))
        except FileNotFoundError as exc:
            raise WorkspaceError(f"Configuration file not found: {target}") from exc
        except json.JSONDecodeError as exc:
            raise WorkspaceError(f"Invalid JSON in {target}: {exc}") from exc

    def write_json(self, relpath: str | Path, data: Dict[str, Any]) -> None:
        target = self.path(relpath)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
        rel = target.relative_to(self.root).as_posix()
        self.written.append(rel)
        logger.debug("Wrote %s", rel)

    def iter_project_files(self) -> Iterator[Path]:
        for path in sorted(self.root.rglob(PROJECT_CONFIG_FILE)):
            rel_parts = path.relative_to(self.root).parts
            if any(part in _IGNORED_DIRS for part in rel_parts):
                continue
            yield path

    def get_projects(self) -> Dict[str, ProjectEntry]:
        projects: Dict[str, ProjectEntry] = {}
        for path in self.iter_project_files():
            rel = path.relative_to(self.root)
            document = self.read_json(rel)
            project_dir = rel.parent.as_posix()
            name = document.get("name") or (path.parent.name if project_dir != "." else self.root.name)
            if name in projects:
                raise WorkspaceError(
                    f"Duplicate project name '{name}' in {projects[name].config_path} and {rel.as_posix()}"
                )
            projects[name] = ProjectEntry(
                name=name,
                root=document.get("root") or project_dir,
                config_path=rel.as_posix(),
                document=document,
            )
        return projects

    def get_project(self, name: str) -> ProjectEntry:
        projects = self.get_projects()
        try:
            return projects[name]
        except KeyError as exc:
            available = ", ".join(sorted(projects)) or "none"
            raise WorkspaceError(f"Unknown project '{name}'. Available projects: {available}.") from exc

    def update_project(self, project: ProjectEntry, document: Dict[str, Any]) -> None:
        self.write_json(project.config_path, document)
        project.document = document

    def read_workspace_config(self) -> Dict[str, Any]:
        if not self.exists(WORKSPACE_CONFIG_FILE):
            return {}
        return self.read_json(WORKSPACE_CONFIG_FILE)

    def update_workspace_config(self, document: Dict[str, Any]) -> None:
        self.write_json(WORKSPACE_CONFIG_FILE, document)
