from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Dict, Mapping, Optional, Sequence

from pydantic import ValidationError

from .config import get_settings, load_workspace_env, reset_settings
from .executors import ExecutorError, list_executors, run_github_executor, run_target
from .migrations import get_migration, list_migrations
from .schemas import ReleaseOptions
from .workspace import WorkspaceError, WorkspaceTree


def _add_github_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--tag", required=True)
    parser.add_argument("--file", action="append", dest="files", default=[])
    parser.add_argument("--notes")
    parser.add_argument("--notes-file")
    parser.add_argument("--target")
    parser.add_argument("--draft", action="store_true")
    parser.add_argument("--title")
    parser.add_argument("--prerelease", action="store_true")
    parser.add_argument("--discussion-category")
    parser.add_argument("--repo")
    parser.add_argument("--generate-notes", action="store_true")
    parser.add_argument("--notes-start-tag")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="workspace-semver", description="Semantic release tooling for workspaces.")
    parser.add_argument("--workspace-root", default=".")
    parser.add_argument("--log-level", help="Overrides WORKSPACE_SEMVER_LOG_LEVEL.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    run = subparsers.add_parser("run", help="Run a project target through its executor")
    run.add_argument("target", help="Target address in project:target form")
    run.add_argument("--option", action="append", help="Option override key=value (repeatable).")

    github = subparsers.add_parser("github", help="Create a GitHub release with the gh CLI")
    _add_github_arguments(github)

    executors = subparsers.add_parser("executors", help="Inspect registered executors")
    executors_sub = executors.add_subparsers(dest="executors_command", required=True)
    executors_sub.add_parser("list", help="List registered executors")

    migrate = subparsers.add_parser("migrate", help="Workspace configuration migrations")
    migrate_sub = migrate.add_subparsers(dest="migrate_command", required=True)
    migrate_sub.add_parser("list", help="List known migrations")
    migrate_apply = migrate_sub.add_parser("apply", help="Apply a migration to the workspace")
    migrate_apply.add_argument("migration")

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    workspace_root = Path(args.workspace_root).resolve()
    load_workspace_env(workspace_root)
    reset_settings()
    try:
        settings = get_settings()
    except ValidationError as exc:
        print(str(exc), file=sys.stderr)
        return 2
    _configure_logging(args.log_level or settings.log_level)

    if args.command == "executors":
        _print_json([spec.to_dict() for spec in list_executors()])
        return 0

    if args.command == "migrate":
        if args.migrate_command == "list":
            _print_json([spec.to_dict() for spec in list_migrations()])
            return 0
        try:
            spec = get_migration(args.migration)
        except KeyError as exc:
            print(exc.args[0], file=sys.stderr)
            return 2
        report = spec.runner(WorkspaceTree(workspace_root), None)
        _print_json(report.to_dict())
        return 0

    if args.command == "github":
        try:
            options = ReleaseOptions(
                tag=args.tag,
                files=args.files,
                notes=args.notes,
                notes_file=args.notes_file,
                target=args.target,
                draft=args.draft,
                title=args.title,
                prerelease=args.prerelease,
                discussion_category=args.discussion_category,
                repo=args.repo,
                generate_notes=args.generate_notes,
                notes_start_tag=args.notes_start_tag,
            )
        except ValidationError as exc:
            print(str(exc), file=sys.stderr)
            return 2
        result = run_github_executor(options)
        _print_json(result.to_dict())
        return 0 if result.success else 1

    if args.command == "run":
        project, separator, target = args.target.partition(":")
        if not separator or not project or not target:
            print(f"Target must be project:target (got '{args.target}')", file=sys.stderr)
            return 2
        try:
            overrides = _parse_options(args.option or [])
            result = run_target(WorkspaceTree(workspace_root), project, target, overrides=overrides)
        except (ValueError, KeyError, ExecutorError, WorkspaceError) as exc:
            print(exc.args[0] if exc.args else str(exc), file=sys.stderr)
            return 2
        _print_json(result.to_dict())
        return 0 if result.success else 1

    parser.error("Unknown command")
    return 1


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _parse_options(values: Sequence[str]) -> Dict[str, object]:
    options: Dict[str, object] = {}
    for entry in values:
        if "=" not in entry:
            raise ValueError(f"Option must be key=value (got '{entry}')")
        key, raw_value = entry.split("=", 1)
        key = key.strip()
        if not key:
            raise ValueError("Option key cannot be empty.")
        options[key] = _coerce_value(raw_value.strip())
    return options


def _coerce_value(value: str) -> object:
    lowered = value.lower()
    if lowered in {"true", "false"}:
        return lowered == "true"
    if value.startswith("["):
        try:
            return json.loads(value)
        except json.JSONDecodeError:
            return value
    return value


def _print_json(payload: object) -> None:
    print(json.dumps(payload, indent=2, default=str))


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
