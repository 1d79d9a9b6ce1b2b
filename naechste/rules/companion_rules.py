#!/usr/bin/env python3
"""
Missing companion file rules.

Checks that source files have their expected tests, stories, and any
configured companion files beside them.

Companion globs are instantiated per subject: ``*.test.int.ts`` for
``Button.tsx`` means ``Button.test.int.ts``.
"""

from pathlib import Path
from typing import Iterable, List

from ..config import RuleConfig
from ..models import Diagnostic
from ..utils.file_utils import find_siblings_by_glob, is_story_file, is_test_file
from .filename_rules import SPECIAL_FILE_STEMS

RULE_ID = "missing-companion-files"

_COMPONENT_EXTENSIONS = (".tsx", ".jsx")


def base_name(file_path: Path) -> str:
    """File name up to its first dot: ``Button.client.tsx`` -> ``Button``."""
    return file_path.name.split(".", 1)[0]


def is_page_file(file_path: Path) -> bool:
    return file_path.stem == "page"


def _instantiate(pattern: str, name: str) -> str:
    return pattern.replace("*", name)


class CompanionFileRuleChecker:
    """Checker for companion file presence."""

    def __init__(self, rule_config: RuleConfig):
        self.rule_config = rule_config

    def is_enabled(self) -> bool:
        options = self.rule_config.options
        return (
            options.require_test_files
            or options.require_story_files
            or not options.companion_file_patterns.is_empty()
        )

    def check_file(self, file_path: Path) -> List[Diagnostic]:
        if not self.is_enabled() or not self._is_subject(file_path):
            return []

        options = self.rule_config.options
        patterns = options.companion_file_patterns
        name = base_name(file_path)
        missing = []

        if is_page_file(file_path):
            if patterns.page_user_scenarios and not self._any_sibling_glob(file_path, patterns.page_user_scenarios):
                missing.append("user scenario")
            return [self._diagnostic(file_path, kind) for kind in missing]

        if options.require_test_files and not self._has_test_file(file_path, name):
            missing.append("test file")

        if (options.require_story_files and file_path.suffix in _COMPONENT_EXTENSIONS
                and not self._any_sibling_glob(file_path, [f"{name}.stories.*"])):
            missing.append("story file")

        if patterns.integration_tests and not self._has_instantiated(file_path, patterns.integration_tests, name):
            missing.append("integration test")

        for category in sorted(patterns.custom):
            globs = patterns.custom[category]
            if globs and not self._has_instantiated(file_path, globs, name):
                missing.append(f"{category} companion")

        return [self._diagnostic(file_path, kind) for kind in missing]

    def _is_subject(self, file_path: Path) -> bool:
        if is_test_file(file_path) or is_story_file(file_path):
            return False
        if file_path.name.endswith(".d.ts"):
            return False
        if is_page_file(file_path):
            return True
        return base_name(file_path) != "index" and file_path.stem not in SPECIAL_FILE_STEMS

    def _has_test_file(self, file_path: Path, name: str) -> bool:
        test_globs = [f"{name}.test.*", f"{name}.spec.*"]
        if self._any_sibling_glob(file_path, test_globs):
            return True
        tests_dir = file_path.parent / "__tests__"
        return any(find_siblings_by_glob(tests_dir, pattern) for pattern in test_globs)

    def _has_instantiated(self, file_path: Path, globs: Iterable[str], name: str) -> bool:
        return self._any_sibling_glob(file_path, [_instantiate(g, name) for g in globs])

    def _any_sibling_glob(self, file_path: Path, globs: Iterable[str]) -> bool:
        return any(
            sibling != file_path
            for pattern in globs
            for sibling in find_siblings_by_glob(file_path.parent, pattern)
        )

    def _diagnostic(self, file_path: Path, kind: str) -> Diagnostic:
        return Diagnostic.create(
            severity=self.rule_config.severity,
            rule=RULE_ID,
            message=f"Missing {kind} for '{file_path.name}'",
            file=file_path
        )
