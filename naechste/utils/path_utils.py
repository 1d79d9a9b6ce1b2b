#!/usr/bin/env python3
"""
Path utility functions for structure linting.

Handles root-relative paths, glob matching with ``**`` support, and
directory prefix checks.
"""

import fnmatch
import logging
from functools import lru_cache
from pathlib import Path
from typing import Iterable, Optional, Tuple

logger = logging.getLogger(__name__)

_GLOBSTAR = "**"


class InvalidPatternError(ValueError):
    """Raised when a glob pattern cannot be compiled."""


@lru_cache(maxsize=512)
def compile_glob(pattern: str) -> Tuple[str, ...]:
    """Split a glob pattern into segments.

    ``**`` is only valid as a whole segment; anything like ``a**`` is rejected.
    """
    segments = tuple(pattern.split("/"))
    for segment in segments:
        if _GLOBSTAR in segment and segment != _GLOBSTAR:
            raise InvalidPatternError(f"'**' must be a whole path segment in {pattern!r}")
    return segments


@lru_cache(maxsize=512)
def _warn_invalid_pattern(pattern: str, reason: str) -> None:
    # Cached so each bad pattern is reported once per process.
    logger.warning("Ignoring invalid glob pattern %r: %s", pattern, reason)


def _match_segments(parts: Tuple[str, ...], segments: Tuple[str, ...]) -> bool:
    if not segments:
        return not parts

    head = segments[0]
    if head == _GLOBSTAR:
        # Collapse consecutive globstars, then try every split point.
        rest = segments[1:]
        while rest and rest[0] == _GLOBSTAR:
            rest = rest[1:]
        if not rest:
            return True
        return any(_match_segments(parts[i:], rest) for i in range(len(parts) + 1))

    if not parts:
        return False
    if not fnmatch.fnmatchcase(parts[0], head):
        return False
    return _match_segments(parts[1:], segments[1:])


def is_valid_glob(pattern: str) -> bool:
    """Check a glob pattern, warning once if it is invalid."""
    try:
        compile_glob(pattern)
    except InvalidPatternError as e:
        _warn_invalid_pattern(pattern, str(e))
        return False
    return True


def glob_match(path_str: str, pattern: str) -> bool:
    """Match a slash-separated path against a glob pattern.

    ``*``, ``?`` and ``[...]`` stay within one segment; a ``**`` segment
    matches zero or more segments. Invalid patterns never match.
    """
    try:
        segments = compile_glob(pattern)
    except InvalidPatternError as e:
        _warn_invalid_pattern(pattern, str(e))
        return False
    return _match_segments(tuple(path_str.split("/")), segments)


def relative_to_root(path: Path, root: Path) -> Path:
    """Return path relative to root, or the path unchanged if it lies outside."""
    try:
        return path.relative_to(root)
    except ValueError:
        return path


def to_posix(path: Path) -> str:
    return path.as_posix()


def matches_glob(path: Path, pattern: str, root: Path) -> bool:
    """Check if a file matches a glob pattern, relative to root.

    Both ``rel/path`` and ``/rel/path`` are tried so patterns work with or
    without a leading separator.
    """
    path_str = to_posix(relative_to_root(Path(path), Path(root)))
    return glob_match(path_str, pattern) or glob_match(f"/{path_str}", pattern)


def is_excluded(path: Path, exclude_patterns: Iterable[str], root: Path) -> bool:
    """Check if any exclude pattern matches the file."""
    return any(matches_glob(path, pattern, root) for pattern in exclude_patterns)


def is_under_any_prefix(path: Path, prefixes: Iterable[str], root: Path) -> bool:
    """Check if the root-relative path lives under one of the directory prefixes.

    The comparison is segment aware: ``components`` covers
    ``components/Button.tsx`` but not ``components-old/Button.tsx``.
    Leading ``./`` and surrounding slashes in a prefix are ignored.
    """
    path_str = to_posix(relative_to_root(Path(path), Path(root)))

    for prefix in prefixes:
        normalized_prefix = prefix.strip("/")
        while normalized_prefix.startswith("./"):
            normalized_prefix = normalized_prefix[2:].lstrip("/")
        if normalized_prefix in ("", "."):
            return True
        if path_str == normalized_prefix or path_str.startswith(f"{normalized_prefix}/"):
            return True
    return False


class PathHelper:
    """Helper class for path-related operations against a project root."""

    def __init__(self, project_root: Path):
        self.project_root = Path(project_root)

    def relative(self, path: Path) -> Path:
        return relative_to_root(Path(path), self.project_root)

    def matches(self, path: Path, pattern: str) -> bool:
        return matches_glob(path, pattern, self.project_root)

    def is_excluded(self, path: Path, exclude_patterns: Iterable[str]) -> bool:
        return is_excluded(path, exclude_patterns, self.project_root)

    def is_under_any_prefix(self, path: Path, prefixes: Iterable[str]) -> bool:
        return is_under_any_prefix(path, prefixes, self.project_root)

    def routing_depth(self, path: Path) -> Optional[int]:
        """Count segments after the first ``app`` (or else ``pages``) directory.

        The filename counts as a segment. Returns None for files outside both.
        """
        parts = self.relative(path).parts[:-1]
        for routing_dir in ("app", "pages"):
            if routing_dir in parts:
                index = parts.index(routing_dir)
                return len(self.relative(path).parts) - index - 1
        return None
