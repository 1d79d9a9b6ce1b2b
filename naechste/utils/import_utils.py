#!/usr/bin/env python3
"""
Import utility functions for structure linting.

Handles lexical import extraction, specifier resolution, and the reverse
import graph used by location rules.

Extraction is regex based: specifiers inside comments or template literals
are picked up like real imports.
"""

import logging
import re
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Mapping, Optional

from .file_utils import SOURCE_EXTENSIONS, FileCache

logger = logging.getLogger(__name__)

DEFAULT_IMPORT_ALIASES: Dict[str, str] = {"@/": ""}

# import ... from '...'
_IMPORT_PATTERN = re.compile(r"""import\s+.*?\s+from\s+['"]([^'"]+)['"]""")
# require('...')
_REQUIRE_PATTERN = re.compile(r"""require\s*\(\s*['"]([^'"]+)['"]\s*\)""")
# export ... from '...'
_EXPORT_PATTERN = re.compile(r"""export\s+.*?\s+from\s+['"]([^'"]+)['"]""")

_EXTRACTION_PATTERNS = (_IMPORT_PATTERN, _REQUIRE_PATTERN, _EXPORT_PATTERN)


def extract_imports(content: str) -> List[str]:
    """Extract import specifiers from source text.

    Matches of each pattern are concatenated in pattern order: imports,
    then requires, then re-exports.
    """
    imports = []
    for pattern in _EXTRACTION_PATTERNS:
        imports.extend(match.group(1) for match in pattern.finditer(content))
    return imports


def resolve_import_path(
    import_specifier: str,
    importer_file: Path,
    project_root: Path,
    aliases: Optional[Mapping[str, str]] = None
) -> Optional[Path]:
    """Resolve an import specifier to a candidate path.

    Alias imports are joined to the project root, relative imports to the
    importer's directory. Bare specifiers (packages) resolve to None.
    The candidate is not guaranteed to exist.
    """
    if aliases is None:
        aliases = DEFAULT_IMPORT_ALIASES

    # Longest prefix wins so "@/lib/" can override "@/".
    for prefix in sorted(aliases, key=len, reverse=True):
        if prefix and import_specifier.startswith(prefix):
            remainder = import_specifier[len(prefix):]
            target_dir = aliases[prefix].strip("/")
            base = project_root / target_dir if target_dir else project_root
            return base / remainder

    if import_specifier.startswith("./") or import_specifier.startswith("../"):
        return importer_file.parent / import_specifier

    return None


def resolve_to_actual_file(candidate: Path) -> Optional[Path]:
    """Probe a candidate path for an existing source file.

    Tries the literal path, then each source extension appended, then
    ``index.<ext>`` inside the candidate when it is a directory.
    """
    for suffix in ("",) + SOURCE_EXTENSIONS:
        probe = Path(f"{candidate}{suffix}")
        if probe.is_file():
            return probe

    if candidate.is_dir():
        for ext in SOURCE_EXTENSIONS:
            probe = candidate / f"index{ext}"
            if probe.is_file():
                return probe

    return None


def canonicalize(path: Path) -> Path:
    """Resolve symlinks and ``.``/``..`` so one file has one spelling."""
    try:
        return path.resolve()
    except (OSError, RuntimeError):
        return path


class ImportGraph:
    """Reverse import index: canonical target file -> files importing it.

    Importers are kept once per target, in first-seen order.
    """

    def __init__(self):
        self._importers: Dict[Path, Dict[Path, None]] = {}

    def add(self, target: Path, importer: Path) -> None:
        self._importers.setdefault(target, {})[importer] = None

    def importers_of(self, file_path: Path) -> List[Path]:
        """Get importers of a file, canonicalizing the lookup key."""
        return list(self._importers.get(canonicalize(file_path), ()))

    def targets(self) -> Iterator[Path]:
        return iter(self._importers)

    def __contains__(self, file_path: Path) -> bool:
        return canonicalize(file_path) in self._importers

    def __len__(self) -> int:
        return len(self._importers)


def build_import_graph(
    files: Iterable[Path],
    project_root: Path,
    file_cache: Optional[FileCache] = None,
    aliases: Optional[Mapping[str, str]] = None
) -> ImportGraph:
    """Build the reverse import graph for every file in the project."""
    if file_cache is None:
        file_cache = FileCache()

    graph = ImportGraph()
    for importer in files:
        for import_spec in file_cache.get_imports(importer):
            candidate = resolve_import_path(import_spec, importer, project_root, aliases)
            if candidate is None:
                continue

            actual_file = resolve_to_actual_file(candidate)
            if actual_file is None:
                continue

            graph.add(canonicalize(actual_file), importer)

    logger.debug("Import graph built: %d imported files", len(graph))
    return graph
