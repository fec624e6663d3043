"""Thin wrapper around ``subprocess.run`` shared by git and gh helpers."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Mapping, Optional, Sequence

logger = logging.getLogger(__name__)


class CommandError(RuntimeError):
    """Raised when an external command cannot be spawned or exits non-zero."""

    def __init__(self, command: Sequence[str], returncode: Optional[int], stderr: str = "") -> None:
        self.command = list(command)
        self.returncode = returncode
        self.stderr = stderr
        rendered = " ".join(self.command)
        if returncode is None:
            message = f"Failed to run '{rendered}': {stderr}"
        else:
            message = f"Command '{rendered}' exited with status {returncode}"
            if stderr:
                message = f"{message}: {stderr}"
        super().__init__(message)


def run_command(
    command: Sequence[str],
    *,
    cwd: Optional[str | Path] = None,
    env: Optional[Mapping[str, str]] = None,
) -> str:
    """Run ``command`` to completion and return its stripped stdout."""

    logger.debug("Executing %s", " ".join(command))
    try:
        proc = subprocess.run(
            list(command),
            cwd=str(cwd) if cwd is not None else None,
            env=dict(env) if env is not None else None,
            capture_output=True,
            text=True,
            check=False,
        )
    except OSError as exc:
        raise CommandError(command, None, str(exc)) from exc
    if proc.returncode != 0:
        raise CommandError(command, proc.returncode, (proc.stderr or "").strip())
    return (proc.stdout or "").strip()
