"""Detection of targets that still use the plugin's legacy executors."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Tuple

from ..config import PLUGIN_NAME

VERSION_SUBCOMMAND = "version"

SYNC_MODE_MESSAGE = "Sync mode detected, skipping migration. Please migrate your workspace manually."
NO_CONFIG_MESSAGE = f"No {PLUGIN_NAME} config detected, skipping migration."


def is_legacy_executor(executor: object, subcommands: Iterable[str] = (VERSION_SUBCOMMAND,)) -> bool:
    """Match ``workspace-semver`` exactly or ``workspace-semver:<subcommand>``."""

    if not isinstance(executor, str):
        return False
    if executor == PLUGIN_NAME:
        return True
    plugin, separator, subcommand = executor.partition(":")
    return bool(separator) and plugin == PLUGIN_NAME and subcommand in tuple(subcommands)


@dataclass(frozen=True)
class LegacyDetection:
    targets: Tuple[str, ...] = ()
    post_targets: Tuple[str, ...] = ()
    sync_targets: Tuple[str, ...] = ()

    @property
    def detected(self) -> bool:
        return bool(self.targets)

    @property
    def sync_mode(self) -> bool:
        return bool(self.sync_targets)


def _options(target: Mapping[str, Any]) -> Mapping[str, Any]:
    options = target.get("options")
    return options if isinstance(options, Mapping) else {}


def detect_legacy_targets(document: Mapping[str, Any]) -> LegacyDetection:
    targets = document.get("targets")
    if not isinstance(targets, Mapping):
        return LegacyDetection()

    matched = []
    post_targets = []
    sync_targets = []
    for name, target in targets.items():
        if not isinstance(target, Mapping) or not is_legacy_executor(target.get("executor")):
            continue
        matched.append(name)
        options = _options(target)
        if options.get("syncVersions"):
            sync_targets.append(name)
        for post_target in options.get("postTargets") or []:
            # Post targets may be written as "project:target"; only the target part is local.
            local_name = str(post_target).rsplit(":", 1)[-1]
            if local_name not in post_targets:
                post_targets.append(local_name)

    return LegacyDetection(
        targets=tuple(matched),
        post_targets=tuple(post_targets),
        sync_targets=tuple(sync_targets),
    )
