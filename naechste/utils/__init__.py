"""Utility modules for structure linting."""

from .file_utils import FileCache, LintError, find_source_files, get_file_content
from .import_utils import ImportGraph, build_import_graph, extract_imports, resolve_import_path
from .path_utils import PathHelper, is_excluded, is_under_any_prefix, matches_glob

__all__ = [
    "FileCache",
    "LintError",
    "find_source_files",
    "get_file_content",
    "ImportGraph",
    "build_import_graph",
    "extract_imports",
    "resolve_import_path",
    "PathHelper",
    "is_excluded",
    "is_under_any_prefix",
    "matches_glob",
]
