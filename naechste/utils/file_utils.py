#!/usr/bin/env python3
"""
File utility functions for structure linting.

Handles the project walk, file reading and caching, and sibling lookups.
"""

import fnmatch
import logging
import os
from pathlib import Path
from typing import Dict, Iterator, List

from .path_utils import is_valid_glob

logger = logging.getLogger(__name__)

SOURCE_EXTENSIONS = (".ts", ".tsx", ".js", ".jsx", ".mjs", ".cjs")

IGNORED_DIRS = frozenset({
    "node_modules",
    ".next",
    ".git",
    "dist",
    "build",
    "coverage",
    "out",
    ".turbo",
})


class LintError(RuntimeError):
    """Raised when the project root itself cannot be read."""


class FileCache:
    """Caches file contents and extracted import specifiers for one run."""

    def __init__(self):
        self.content_cache: Dict[Path, str] = {}
        self.import_cache: Dict[Path, List[str]] = {}

    def get_content(self, file_path: Path) -> str:
        """Get cached content or read and cache it."""
        if file_path not in self.content_cache:
            self.content_cache[file_path] = get_file_content(file_path)
        return self.content_cache[file_path]

    def get_imports(self, file_path: Path) -> List[str]:
        """Get cached import specifiers or extract and cache them."""
        if file_path in self.import_cache:
            return self.import_cache[file_path]

        from .import_utils import extract_imports

        imports = extract_imports(self.get_content(file_path))
        self.import_cache[file_path] = imports
        return imports


def get_file_content(file_path: Path) -> str:
    """Get file content with error handling."""
    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            return f.read()
    except (UnicodeDecodeError, OSError) as e:
        logger.debug("Could not read %s: %s", file_path, e)
        return ""


def is_relevant_file(path: Path) -> bool:
    """Check if the file has a recognized source extension."""
    return Path(path).suffix in SOURCE_EXTENSIONS


def is_test_file(file_path: Path) -> bool:
    """Check if file is a test file."""
    name = file_path.name
    return ".test." in name or ".spec." in name or "__tests__" in file_path.parts


def is_story_file(file_path: Path) -> bool:
    return ".stories." in file_path.name


def find_source_files(root: Path) -> List[Path]:
    """Find all relevant source files under root in a deterministic order."""
    root = Path(root)
    if not root.is_dir():
        raise LintError(f"Cannot read project directory: {root}")
    try:
        os.listdir(root)
    except OSError as e:
        raise LintError(f"Cannot read project directory: {root} ({e})") from e

    return list(_walk_source_files(root))


def _walk_source_files(root: Path) -> Iterator[Path]:
    for dirpath, dirnames, filenames in os.walk(root):
        # Prune in place so ignored trees are never entered.
        dirnames[:] = sorted(d for d in dirnames if d not in IGNORED_DIRS)

        current = Path(dirpath)
        for filename in sorted(filenames):
            file_path = current / filename
            if is_relevant_file(file_path) and file_path.is_file():
                yield file_path


def sibling_exists(file_path: Path, name: str) -> bool:
    """Check whether ``name`` exists next to ``file_path``."""
    return (file_path.parent / name).exists()


def find_siblings_by_glob(directory: Path, glob_pattern: str) -> List[Path]:
    """Find entries in a directory whose name matches a glob pattern.

    Invalid patterns match nothing.
    """
    if not is_valid_glob(glob_pattern):
        return []

    try:
        entries = sorted(directory.iterdir())
    except OSError as e:
        logger.debug("Could not list %s: %s", directory, e)
        return []

    return [entry for entry in entries if fnmatch.fnmatchcase(entry.name, glob_pattern)]
