"""``github`` executor: create a GitHub release from an existing tag via the gh CLI."""

from __future__ import annotations

import logging
from typing import List, Mapping, Optional, Union

from pydantic import ValidationError

from ..config import get_settings
from ..models import ExecutorResult
from ..process import CommandError, run_command
from ..schemas import ReleaseOptions

logger = logging.getLogger(__name__)


def build_release_args(options: ReleaseOptions) -> List[str]:
    """Return the ``gh`` argument list for ``options`` in the documented flag order."""

    args: List[str] = ["release", "create", options.tag, *options.files]
    if options.notes:
        args += ["--notes", options.notes]
    if options.notes_file:
        args += ["--notes-file", options.notes_file]
    if options.target:
        args += ["--target", options.target]
    if options.draft:
        args.append("--draft")
    if options.title:
        args += ["--title", options.title]
    if options.prerelease:
        args.append("--prerelease")
    if options.discussion_category:
        args += ["--discussion-category", options.discussion_category]
    if options.repo:
        args += ["--repo", options.repo]
    if options.generate_notes:
        args.append("--generate-notes")
    if options.notes_start_tag:
        args += ["--notes-start-tag", options.notes_start_tag]
    return args


def run_github_executor(
    options: Union[ReleaseOptions, Mapping[str, object]],
    *,
    gh_binary: Optional[str] = None,
    log: Optional[logging.Logger] = None,
) -> ExecutorResult:
    log = log or logger
    try:
        release_options = options if isinstance(options, ReleaseOptions) else ReleaseOptions.model_validate(options)
        binary = gh_binary or get_settings().gh_binary
    except ValidationError as exc:
        log.error("Invalid github executor configuration: %s", exc)
        return ExecutorResult(success=False)

    command = [binary, *build_release_args(release_options)]
    try:
        output = run_command(command)
    except CommandError as exc:
        log.error("%s", exc)
        return ExecutorResult(success=False)

    if output:
        log.info("%s", output)
    return ExecutorResult(success=True)
