"""Locate report files in a workspace using ant-style patterns."""

import fnmatch
import logging
import os
from pathlib import Path

import pathspec

from boostsec.test_report_recorder.errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_EXCLUDED_DIRS = frozenset({".git", ".svn", ".hg", ".bzr", "CVS", "_darcs"})
DEFAULT_EXCLUDED_FILES = ("*~", "#*#", ".#*", "._*", ".DS_Store")


def locate(root: Path, pattern: str) -> list[Path]:
    """Find files below root matching an ant-style pattern.

    Args:
        root: Workspace directory the pattern is relative to
        pattern: One or more comma-separated patterns using ``*``, ``?`` and
            ``**`` (e.g., "**/*.trx")

    Returns:
        Sorted absolute paths of matching files, possibly empty

    Raises:
        ConfigurationError: If the pattern is empty
        FileNotFoundError: If root does not exist
        NotADirectoryError: If root is not a directory

    """
    patterns = split_patterns(pattern)
    if not patterns:
        raise ConfigurationError("Report file pattern must not be empty")

    root = Path(root)
    if not root.exists():
        raise FileNotFoundError(f"Workspace not found: {root}")
    if not root.is_dir():
        raise NotADirectoryError(f"Workspace is not a directory: {root}")
    root = root.resolve()
    spec = compile_patterns(patterns)

    matches: list[Path] = []
    # Directory symlinks are not followed, so traversal is bounded.
    for dirpath, dirnames, filenames in os.walk(root, followlinks=False):
        dirnames[:] = [d for d in dirnames if d not in DEFAULT_EXCLUDED_DIRS]
        relative_dir = Path(dirpath).relative_to(root).as_posix()
        for filename in filenames:
            if _is_default_excluded(filename):
                continue
            relative = filename if relative_dir == "." else f"{relative_dir}/{filename}"
            if spec.match_file(relative):
                matches.append(Path(dirpath) / filename)

    logger.debug(f"Pattern {pattern!r} matched {len(matches)} files under {root}")
    return sorted(matches)


def split_patterns(pattern: str) -> list[str]:
    """Split a comma-separated pattern list, dropping blank entries."""
    return [p.strip() for p in pattern.split(",") if p.strip()]


def compile_patterns(patterns: list[str]) -> pathspec.PathSpec:
    """Build a matcher for ant-style patterns.

    Each pattern is anchored at the workspace root. ``*`` and ``?`` stay
    within one path segment, ``**`` spans any number of directories and a
    trailing ``/`` matches everything below that directory.

    Args:
        patterns: Patterns relative to the workspace root (e.g., "out/**/TEST-*.xml")

    Returns:
        Spec to be used with ``match_file`` on posix relative paths

    """
    lines = []
    for pattern in patterns:
        pattern = pattern.replace("\\", "/").removeprefix("./")
        if pattern.endswith("/"):
            pattern += "**"
        lines.append("/" + pattern.lstrip("/"))
    return pathspec.PathSpec.from_lines("gitwildmatch", lines)


def _is_default_excluded(filename: str) -> bool:
    return any(fnmatch.fnmatchcase(filename, p) for p in DEFAULT_EXCLUDED_FILES)
