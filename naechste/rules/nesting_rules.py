#!/usr/bin/env python3
"""
Component nesting depth rules.

Limits how deep files may sit below the ``app`` or ``pages`` routing directory.
"""

from pathlib import Path
from typing import List

from ..config import RuleConfig
from ..models import Diagnostic
from ..utils.path_utils import PathHelper

RULE_ID = "component-nesting-depth"


class NestingDepthRuleChecker:
    """Checker for routing directory nesting depth."""

    def __init__(self, rule_config: RuleConfig, path_helper: PathHelper):
        self.rule_config = rule_config
        self.path_helper = path_helper

    def check_file(self, file_path: Path) -> List[Diagnostic]:
        depth = self.path_helper.routing_depth(file_path)
        if depth is None:
            return []

        max_depth = self.rule_config.options.max_nesting_depth
        if depth <= max_depth:
            return []

        return [Diagnostic.create(
            severity=self.rule_config.severity,
            rule=RULE_ID,
            message=f"Component nesting depth {depth} exceeds maximum of {max_depth}",
            file=file_path
        )]
