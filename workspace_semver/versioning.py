"""Version bump and changelog helpers used by the ``version`` executor."""

from __future__ import annotations

import datetime as _dt
import json
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Optional

try:
    import tomllib  # type: ignore[attr-defined]
except ModuleNotFoundError:  # pragma: no cover - fallback for Py<3.11
    import tomli as tomllib  # type: ignore[no-redef]


MANIFEST_FILES = ("pyproject.toml", "package.json")
BUMP_TYPES = ("major", "minor", "patch")

_PYPROJECT_VERSION_RE = re.compile(r'^version\s*=\s*"(.*)"\s*$', re.MULTILINE)
_COMMIT_HEADER_RE = re.compile(r"^(?P<type>[A-Za-z]+)(?:\((?P<scope>[^)]*)\))?(?P<breaking>!)?:\s*(?P<subject>.+)$")
_CHANGELOG_HEADER_RE = re.compile(r"^##\s+\[?([^\]\s]+)\]?\s+-\s+(.+)$", re.MULTILINE)

_SECTION_TITLES = {"feat": "Features", "fix": "Bug Fixes", "perf": "Performance Improvements"}


class VersioningError(ValueError):
    """Raised when a manifest or changelog cannot be read or updated."""


@dataclass(frozen=True)
class ConventionalCommit:
    type: str
    scope: Optional[str]
    subject: str
    breaking: bool

    @classmethod
    def parse(cls, message: str) -> "ConventionalCommit":
        header, _, body = message.strip().partition("\n")
        match = _COMMIT_HEADER_RE.match(header.strip())
        breaking = "BREAKING CHANGE" in body or "BREAKING-CHANGE" in body
        if not match:
            return cls(type="other", scope=None, subject=header.strip(), breaking=breaking)
        return cls(
            type=match.group("type").lower(),
            scope=match.group("scope") or None,
            subject=match.group("subject").strip(),
            breaking=breaking or bool(match.group("breaking")),
        )


def find_manifest(project_root: Path) -> Optional[Path]:
    for name in MANIFEST_FILES:
        candidate = project_root / name
        if candidate.exists():
            return candidate
    return None


def read_version(manifest_path: Path) -> str:
    try:
        if manifest_path.name == "package.json":
            data = json.loads(manifest_path.read_text(encoding="utf-8"))
            return str(data["version"])
        data = tomllib.loads(manifest_path.read_text(encoding="utf-8"))
        return str(data["project"]["version"])
    except KeyError as exc:
        raise VersioningError(f"Missing version field in {manifest_path}") from exc
    except (OSError, ValueError) as exc:
        raise VersioningError(f"Unable to read {manifest_path}: {exc}") from exc


def write_version(manifest_path: Path, new_version: str) -> None:
    if manifest_path.name == "package.json":
        data = json.loads(manifest_path.read_text(encoding="utf-8"))
        data["version"] = new_version
        manifest_path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
        return

    content = manifest_path.read_text(encoding="utf-8")
    if not _PYPROJECT_VERSION_RE.search(content):
        raise VersioningError(f"Unable to locate version field in {manifest_path}")
    updated = _PYPROJECT_VERSION_RE.sub(f'version = "{new_version}"', content, count=1)
    manifest_path.write_text(updated, encoding="utf-8")


def bump_version(version: str, bump: str = "patch") -> str:
    parts = version.split("-", 1)[0].split(".")
    if len(parts) != 3 or not all(part.isdigit() for part in parts):
        raise VersioningError(f"Version '{version}' is not in major.minor.patch format.")
    major, minor, patch = map(int, parts)
    bump_lower = bump.lower()
    if bump_lower == "major":
        return f"{major + 1}.0.0"
    if bump_lower == "minor":
        return f"{major}.{minor + 1}.0"
    if bump_lower == "patch":
        return f"{major}.{minor}.{patch + 1}"
    raise VersioningError(f"Unknown bump type '{bump}'. Expected patch|minor|major.")


def resolve_bump(commits: Iterable[ConventionalCommit]) -> Optional[str]:
    """Return the bump implied by ``commits`` or ``None`` when there are none."""

    bump: Optional[str] = None
    for item in commits:
        if item.breaking:
            return "major"
        if item.type == "feat":
            bump = "minor"
        elif bump is None:
            bump = "patch"
    return bump


def render_changelog_entry(
    version: str,
    timestamp: _dt.datetime,
    commits: Iterable[ConventionalCommit],
) -> str:
    sections: Dict[str, List[str]] = {}
    breaking: List[str] = []
    for item in commits:
        line = f"**{item.scope}:** {item.subject}" if item.scope else item.subject
        if item.breaking:
            breaking.append(line)
        title = _SECTION_TITLES.get(item.type)
        if title:
            sections.setdefault(title, []).append(line)

    header = f"## [{version}] - {timestamp.strftime('%Y-%m-%dT%H:%M:%SZ')}"
    blocks = [header]
    if breaking:
        blocks.append("### BREAKING CHANGES\n" + "\n".join(f"- {line}" for line in breaking))
    for title in _SECTION_TITLES.values():
        if title in sections:
            blocks.append(f"### {title}\n" + "\n".join(f"- {line}" for line in sections[title]))
    if len(blocks) == 1:
        blocks.append("- Automated release.")
    return "\n\n".join(blocks)


def update_changelog(
    changelog_path: Path,
    version: str,
    timestamp: _dt.datetime,
    commits: Iterable[ConventionalCommit] = (),
) -> str:
    """Insert an entry for ``version`` above the newest existing entry.

    Returns the entry text. An existing entry for ``version`` is left untouched.
    """

    existing = changelog_path.read_text(encoding="utf-8") if changelog_path.exists() else "# Changelog\n"
    entry = render_changelog_entry(version, timestamp, commits)
    if has_changelog_entry(existing, version):
        return entry

    heading = _CHANGELOG_HEADER_RE.search(existing)
    insert_idx = heading.start() if heading else len(existing)
    before = existing[:insert_idx].strip()
    after = existing[insert_idx:].strip()

    pieces = [piece for piece in (before, entry, after) if piece]
    changelog_path.parent.mkdir(parents=True, exist_ok=True)
    changelog_path.write_text("\n\n".join(pieces) + "\n", encoding="utf-8")
    return entry


def has_changelog_entry(content: str, version: str) -> bool:
    return any(match.group(1) == version for match in _CHANGELOG_HEADER_RE.finditer(content))
