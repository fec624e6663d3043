"""Plugin identity and runtime settings."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

PLUGIN_NAME = "workspace-semver"
WORKSPACE_CONFIG_FILE = "workspace.json"
PROJECT_CONFIG_FILE = "project.json"
CHANGELOG_FILE = "CHANGELOG.md"

ENV_PREFIX = "WORKSPACE_SEMVER_"


class PluginSettings(BaseModel):
    """Settings resolved from the environment (and an optional workspace ``.env``)."""

    gh_binary: str = Field(default="gh", description="Executable used to create GitHub releases.")
    git_binary: str = Field(default="git", description="Executable used for commits, tags and pushes.")
    log_level: str = "INFO"

    model_config = ConfigDict(frozen=True, extra="ignore")

    @field_validator("log_level")
    @classmethod
    def _normalize_level(cls, value: str) -> str:
        level = value.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level '{value}'")
        return level

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "PluginSettings":
        source = os.environ if environ is None else environ
        values = {}
        for name in cls.model_fields:
            raw = source.get(f"{ENV_PREFIX}{name.upper()}")
            if raw:
                values[name] = raw
        return cls(**values)


def load_workspace_env(workspace_root: str | Path) -> bool:
    """Load ``<workspace>/.env`` without overriding variables already set."""

    env_file = Path(workspace_root) / ".env"
    if not env_file.exists():
        return False
    return load_dotenv(env_file, override=False)


_settings: Optional[PluginSettings] = None


def get_settings() -> PluginSettings:
    global _settings
    if _settings is None:
        _settings = PluginSettings.from_env()
    return _settings


def reset_settings() -> None:
    global _settings
    _settings = None
