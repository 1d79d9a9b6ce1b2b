#!/usr/bin/env python3
"""
Main structure checker orchestration.

Walks the project once, runs the per-file rules on every source file, then
builds the import graph and runs the file organization rules.
"""

import logging
import time
from pathlib import Path
from typing import List, Optional

from .config import Config
from .models import DiagnosticCollection
from .rules import (
    CompanionFileRuleChecker,
    FilenameStyleRuleChecker,
    NestingDepthRuleChecker,
    OrganizationRuleChecker,
    ServerExportRuleChecker,
)
from .utils import FileCache, PathHelper, build_import_graph, find_source_files

logger = logging.getLogger(__name__)


class StructureChecker:
    """Main structure checker that orchestrates all rule checking."""

    def __init__(self, project_root: Path, config: Optional[Config] = None):
        self.project_root = Path(project_root)
        self.config = config if config is not None else Config()
        self.path_helper = PathHelper(self.project_root)
        self.file_cache = FileCache()

        rules = self.config.rules
        self.server_export_checker = ServerExportRuleChecker(rules.server_side_exports, self.file_cache)
        self.nesting_checker = NestingDepthRuleChecker(rules.component_nesting_depth, self.path_helper)
        self.filename_checker = FilenameStyleRuleChecker(rules.filename_style_consistency)
        self.companion_checker = CompanionFileRuleChecker(rules.missing_companion_files)
        self.organization_checker = OrganizationRuleChecker(
            rules.file_organization, self.path_helper, self.file_cache
        )

        self.files: List[Path] = []
        self.execution_time = 0.0

    def run_all_checks(self) -> DiagnosticCollection:
        """Run all checks and return the collected diagnostics."""
        start_time = time.time()
        results = DiagnosticCollection()

        # Single walk; every rule sees the same file list.
        self.files = find_source_files(self.project_root)
        logger.debug("Found %d source files under %s", len(self.files), self.project_root)

        self._run_file_checks(results)
        self._run_organization_checks(results)

        self.execution_time = time.time() - start_time
        logger.debug("Checks completed in %.2f seconds", self.execution_time)
        return results

    def _run_file_checks(self, results: DiagnosticCollection) -> None:
        """Run single-file rules in file order."""
        for file_path in self.files:
            results.extend(self.server_export_checker.check_file(file_path))
            results.extend(self.nesting_checker.check_file(file_path))
            results.extend(self.filename_checker.check_file(file_path))
            results.extend(self.companion_checker.check_file(file_path))

    def _run_organization_checks(self, results: DiagnosticCollection) -> None:
        """Run configured file organization rules against the whole file list."""
        if not self.organization_checker.rules:
            return

        import_graph = None
        if self.organization_checker.needs_import_graph():
            import_graph = build_import_graph(
                self.files,
                self.project_root,
                file_cache=self.file_cache,
                aliases=self.config.import_aliases
            )

        results.extend(self.organization_checker.check_files(self.files, import_graph))


def lint(project_root: Path, config: Optional[Config] = None) -> DiagnosticCollection:
    """Lint a project directory and return its diagnostics."""
    return StructureChecker(project_root, config).run_all_checks()
