"""Project discovery: turn base patterns into a de-duplicated project list."""

from __future__ import annotations

import os
import posixpath
from collections.abc import Iterable

from loguru import logger
from pathspec import GitIgnoreSpec

from tmuxer.errors import NoProjectBaseError, WalkError
from tmuxer.models import Config, Project
from tmuxer.patterns import glob_walk, home_dir, split_pattern


class IgnoreRules:
    """Gitignore-style rules matched against paths relative to a base dir."""

    def __init__(self, patterns: Iterable[str]) -> None:
        self.patterns = list(patterns)
        self.spec = GitIgnoreSpec.from_lines(self.patterns) if self.patterns else None

    def matches(self, rel_path: str, is_dir: bool = True) -> bool:
        if self.spec is None or rel_path in ("", "."):
            return False
        if is_dir and self.spec.match_file(rel_path + "/"):
            return True
        return self.spec.match_file(rel_path)


def expand_markers(base: str, markers: Iterable[str]) -> str:
    """Turn a base ending in ``/**`` into a marker search, e.g. ``**/{.git,.hg}``."""
    markers = list(markers)
    if posixpath.basename(base) != "**" or not markers:
        return base
    return f"{base}/{{{','.join(markers)}}}"


def _project_location(match: str, base_dir: str, is_glob: bool) -> tuple[str, str]:
    """Return (name, path relative to base_dir) for a single walk match."""
    if not is_glob:
        return match, match
    parent = posixpath.dirname(match)
    if not parent:
        # Marker sits directly in base_dir: name it after base_dir itself.
        return os.path.basename(base_dir.rstrip("/")) or base_dir, "."
    return parent, parent


def resolve_base(pattern: str, home: str, ignore: IgnoreRules | None = None) -> list[Project]:
    """Resolve one normalized base pattern. Raises WalkError on failure."""
    split = split_pattern(pattern)
    if not split.suffix:
        raise WalkError(f"Pattern has nothing to match below {split.base_dir}: {pattern}")

    prune = ignore.matches if ignore is not None and ignore.spec is not None else None
    matches = list(glob_walk(split.base_dir, split.suffix, prune=prune))

    projects: list[Project] = []
    for match in matches:
        name, rel = _project_location(match, split.base_dir, split.is_glob)
        if ignore is not None and ignore.matches(rel):
            logger.debug("Ignoring {} under {}", rel, split.base_dir)
            continue

        full_path = os.path.normpath(os.path.join(split.base_dir, rel))
        try:
            home_path = os.path.relpath(full_path, home)
        except ValueError as exc:
            logger.warning("Skipping {}: cannot make it relative to {}: {}", full_path, home, exc)
            continue

        projects.append(Project(name=name, full_path=full_path, home_path=home_path))
    return projects


def resolve_projects(config: Config, home: str | None = None) -> list[Project]:
    """Discover projects for every base in *config*.

    Each distinct full path appears once (the first base to find it wins).
    A base that fails to walk is logged and skipped.  The result is sorted
    case-insensitively by name, then by full path.
    """
    if not config.bases:
        raise NoProjectBaseError()

    if home is None:
        home = home_dir()
    ignore = IgnoreRules(config.ignore)

    found: dict[str, Project] = {}
    for base in config.bases:
        pattern = expand_markers(base, config.markers)
        try:
            projects = resolve_base(pattern, home, ignore)
        except WalkError as exc:
            logger.warning("Skipping base {!r}: {}", base, exc)
            continue
        for project in projects:
            if project.full_path in found:
                logger.debug("Duplicate project {} from {}", project.full_path, base)
                continue
            found[project.full_path] = project

    return sorted(found.values(), key=lambda p: (p.name.lower(), p.full_path))
