"""Workspace configuration migrations, registered by slug."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, Optional

from ..models import MigrationReport
from ..workspace import WorkspaceTree
from . import native_release, update_2_0_0
from .legacy import (
    NO_CONFIG_MESSAGE,
    SYNC_MODE_MESSAGE,
    LegacyDetection,
    detect_legacy_targets,
    is_legacy_executor,
)


@dataclass(frozen=True)
class MigrationSpec:
    slug: str
    description: str
    runner: Callable[[WorkspaceTree, Optional[logging.Logger]], MigrationReport]

    def to_dict(self) -> dict[str, object]:
        return {"slug": self.slug, "description": self.description}


_MIGRATIONS: Dict[str, MigrationSpec] = {}


def register_migration(spec: MigrationSpec) -> None:
    if spec.slug in _MIGRATIONS:
        raise ValueError(f"Migration '{spec.slug}' already registered.")
    _MIGRATIONS[spec.slug] = spec


def get_migration(slug: str) -> MigrationSpec:
    try:
        return _MIGRATIONS[slug]
    except KeyError as exc:
        available = ", ".join(sorted(_MIGRATIONS))
        raise KeyError(f"Unknown migration '{slug}'. Available migrations: {available}.") from exc


def list_migrations() -> Iterable[MigrationSpec]:
    return _MIGRATIONS.values()


def run_migration(slug: str, tree: WorkspaceTree, log: Optional[logging.Logger] = None) -> MigrationReport:
    return get_migration(slug).runner(tree, log)


register_migration(
    MigrationSpec(
        slug=update_2_0_0.SLUG,
        description="Replace the rootChangelog option with skipRootChangelog on version targets.",
        runner=update_2_0_0.run,
    )
)
register_migration(
    MigrationSpec(
        slug=native_release.SLUG,
        description="Remove version targets and their post targets; configure native workspace release.",
        runner=native_release.run,
    )
)


__all__ = [
    "NO_CONFIG_MESSAGE",
    "SYNC_MODE_MESSAGE",
    "LegacyDetection",
    "MigrationSpec",
    "detect_legacy_targets",
    "get_migration",
    "is_legacy_executor",
    "list_migrations",
    "register_migration",
    "run_migration",
]
