from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional


@dataclass(slots=True)
class ExecutorResult:
    success: bool

    def to_dict(self) -> Dict[str, object]:
        return {"success": self.success}


@dataclass(slots=True)
class VersionResult(ExecutorResult):
    version: Optional[str] = None
    tag: Optional[str] = None
    previous_version: Optional[str] = None
    dry_run: bool = False

    def to_dict(self) -> Dict[str, object]:
        payload: Dict[str, object] = {"success": self.success, "dry_run": self.dry_run}
        if self.version:
            payload["version"] = self.version
        if self.tag:
            payload["tag"] = self.tag
        if self.previous_version:
            payload["previous_version"] = self.previous_version
        return payload


@dataclass(slots=True)
class MigrationReport:
    migration: str
    changed_files: List[str] = field(default_factory=list)
    skipped_projects: List[str] = field(default_factory=list)
    logs: List[str] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.changed_files)

    def to_dict(self) -> Dict[str, object]:
        return {
            "migration": self.migration,
            "changed": self.changed,
            "changed_files": self.changed_files,
            "skipped_projects": self.skipped_projects,
            "logs": self.logs,
        }
