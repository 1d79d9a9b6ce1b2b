#!/usr/bin/env python3
"""
Filename style consistency rules.

Checks that file stems follow the configured casing convention.
Framework-reserved names (page, layout, ...) and tool config files are skipped.
"""

import re
from pathlib import Path
from typing import List

from ..config import RuleConfig
from ..models import Diagnostic, FilenameStyle

RULE_ID = "filename-style-consistency"

# Next.js route segment files and common tool configs
SPECIAL_FILE_STEMS = frozenset({
    "page",
    "layout",
    "template",
    "loading",
    "error",
    "not-found",
    "route",
    "default",
    "middleware",
    "next.config",
    "tailwind.config",
    "postcss.config",
    "eslint.config",
    "tsconfig",
    "jsconfig",
    "vitest.config",
    "jest.config",
})

_KEBAB_CASE = re.compile(r"^[a-z][a-z0-9]*(-[a-z0-9]+)*$")
_CAMEL_CASE = re.compile(r"^[a-z][a-zA-Z0-9]*$")
_PASCAL_CASE = re.compile(r"^[A-Z][a-zA-Z0-9]*$")
_SNAKE_CASE = re.compile(r"^[a-z][a-z0-9]*(_[a-z0-9]+)*$")


def is_kebab_case(name: str) -> bool:
    return bool(_KEBAB_CASE.match(name))


def is_camel_case(name: str) -> bool:
    # Needs at least one hump, otherwise "button" would count.
    return bool(_CAMEL_CASE.match(name)) and any(c.isupper() for c in name)


def is_pascal_case(name: str) -> bool:
    return bool(_PASCAL_CASE.match(name)) and any(c.islower() for c in name)


def is_snake_case(name: str) -> bool:
    return bool(_SNAKE_CASE.match(name))


STYLE_CHECKS = {
    FilenameStyle.KEBAB_CASE: is_kebab_case,
    FilenameStyle.CAMEL_CASE: is_camel_case,
    FilenameStyle.PASCAL_CASE: is_pascal_case,
    FilenameStyle.SNAKE_CASE: is_snake_case,
}


class FilenameStyleRuleChecker:
    """Checker for filename casing."""

    def __init__(self, rule_config: RuleConfig):
        self.rule_config = rule_config

    def check_file(self, file_path: Path) -> List[Diagnostic]:
        stem = file_path.stem
        if not stem or stem in SPECIAL_FILE_STEMS:
            return []

        expected_style = self.rule_config.options.filename_style
        if STYLE_CHECKS[expected_style](stem):
            return []

        return [Diagnostic.create(
            severity=self.rule_config.severity,
            rule=RULE_ID,
            message=f"Filename '{stem}' does not match expected style: {expected_style.value}",
            file=file_path
        )]
