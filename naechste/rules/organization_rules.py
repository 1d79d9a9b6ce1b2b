#!/usr/bin/env python3
"""
File organization rules.

Evaluates user-configured organization checks. For each (check, file) pair:

1. Match: the include glob must match and no exclude glob may match.
2. Require: every sibling requirement must be met (one diagnostic per miss).
3. Placement: for location-conditional checks, if an importer matching
   ``importer_glob`` uses a specifier matching ``import_path_matches``, the
   file must live under one of the allowed prefixes. At most one location
   diagnostic is emitted per file and check.

Checks are independent; one file can trigger several of them.
"""

import logging
import re
from pathlib import Path
from typing import Dict, List, Optional, Pattern, Sequence

from ..config import (
    LocationPlacement,
    OrganizationRule,
    Requirement,
    RuleConfig,
    RuleKind,
    SiblingExact,
    SiblingGlob,
)
from ..models import Diagnostic
from ..utils.file_utils import FileCache, find_siblings_by_glob, sibling_exists
from ..utils.import_utils import ImportGraph
from ..utils.path_utils import PathHelper

logger = logging.getLogger(__name__)


def compile_import_patterns(rule: OrganizationRule) -> List[Pattern]:
    """Compile a rule's specifier regexes, dropping invalid ones with a warning."""
    if rule.placement is None:
        return []

    patterns = []
    for pattern_str in rule.placement.trigger.import_path_matches:
        try:
            patterns.append(re.compile(pattern_str))
        except re.error as e:
            logger.warning(
                "file organization check '%s': ignoring invalid import_path_matches pattern %r: %s",
                rule.id, pattern_str, e
            )
    return patterns


class OrganizationRuleChecker:
    """Checker for configured file organization rules."""

    def __init__(self, rule_config: RuleConfig, path_helper: PathHelper, file_cache: FileCache):
        self.rule_config = rule_config
        self.path_helper = path_helper
        self.file_cache = file_cache
        self.rules = rule_config.options.file_organization_checks
        self._compiled_patterns: Dict[str, List[Pattern]] = {
            rule.id: compile_import_patterns(rule) for rule in self.rules
        }

    def needs_import_graph(self) -> bool:
        return any(rule.kind == RuleKind.LOCATION_CONDITIONAL for rule in self.rules)

    def check_files(self, files: Sequence[Path], import_graph: Optional[ImportGraph] = None) -> List[Diagnostic]:
        """Run every configured check against every file."""
        diagnostics = []
        for rule in self.rules:
            for file_path in files:
                diagnostics.extend(self.check_file(rule, file_path, import_graph))
        return diagnostics

    def check_file(
        self,
        rule: OrganizationRule,
        file_path: Path,
        import_graph: Optional[ImportGraph] = None
    ) -> List[Diagnostic]:
        """Evaluate one check against one file."""
        if not self.applies_to(rule, file_path):
            return []

        diagnostics = [
            self._diagnostic(rule, file_path, message)
            for message in self._missing_requirements(rule, file_path)
        ]

        if rule.placement is not None and import_graph is not None:
            message = self._placement_violation(rule, rule.placement, file_path, import_graph)
            if message:
                diagnostics.append(self._diagnostic(rule, file_path, message))

        return diagnostics

    def applies_to(self, rule: OrganizationRule, file_path: Path) -> bool:
        """Check the include glob, then the excludes."""
        if not self.path_helper.matches(file_path, rule.match.glob):
            return False
        return not self.path_helper.is_excluded(file_path, rule.match.exclude_glob)

    def _missing_requirements(self, rule: OrganizationRule, file_path: Path) -> List[str]:
        messages = []
        for requirement in rule.require:
            if not self._requirement_met(requirement, file_path):
                messages.append(self._requirement_message(requirement, file_path))
        return messages

    def _requirement_met(self, requirement: Requirement, file_path: Path) -> bool:
        if isinstance(requirement, SiblingExact):
            return sibling_exists(file_path, requirement.name)
        return bool(find_siblings_by_glob(file_path.parent, requirement.glob))

    def _requirement_message(self, requirement: Requirement, file_path: Path) -> str:
        if isinstance(requirement, SiblingGlob):
            return f"Missing required companion file matching '{requirement.glob}' next to '{file_path}'"
        return f"Missing required companion file '{requirement.name}' next to '{file_path}'"

    def _placement_violation(
        self,
        rule: OrganizationRule,
        placement: LocationPlacement,
        file_path: Path,
        import_graph: ImportGraph
    ) -> Optional[str]:
        """Return a message for the first triggering importer, if misplaced."""
        patterns = self._compiled_patterns.get(rule.id, [])
        if not patterns:
            return None

        constraint = placement.constraint
        for importer in import_graph.importers_of(file_path):
            if not self.path_helper.matches(importer, placement.trigger.importer_glob):
                continue

            specifiers = self.file_cache.get_imports(importer)
            if not any(pattern.search(spec) for spec in specifiers for pattern in patterns):
                continue

            if self.path_helper.is_under_any_prefix(file_path, constraint.must_be_under):
                continue

            if constraint.message:
                return constraint.message
            return (
                f"File is imported by '{importer}' but is not located under any of: "
                f"{', '.join(constraint.must_be_under)}"
            )

        return None

    def _diagnostic(self, rule: OrganizationRule, file_path: Path, message: str) -> Diagnostic:
        return Diagnostic.create(
            severity=self.rule_config.severity,
            rule=rule.rule_name,
            message=message,
            file=file_path
        )
