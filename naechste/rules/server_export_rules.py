#!/usr/bin/env python3
"""
Server-side export rules.

Client modules ('use client') must not export data-fetching functions that
only run on the server.
"""

import re
from pathlib import Path
from typing import List

from ..config import RuleConfig
from ..models import Diagnostic
from ..utils.file_utils import FileCache

RULE_ID = "server-side-exports"

SERVER_ONLY_EXPORTS = (
    "getServerSideProps",
    "getStaticProps",
    "getStaticPaths",
    "getInitialProps",
)

_USE_CLIENT_DIRECTIVES = ("'use client'", '"use client"')

_SERVER_EXPORT_PATTERNS = [
    (name, re.compile(rf"export\s+(?:const|function|async\s+function)\s+{name}\b"))
    for name in SERVER_ONLY_EXPORTS
]


def has_use_client_directive(content: str) -> bool:
    """Check if any line is exactly a 'use client' directive, optionally with a semicolon."""
    return any(
        line.strip().rstrip(";").rstrip() in _USE_CLIENT_DIRECTIVES
        for line in content.splitlines()
    )


class ServerExportRuleChecker:
    """Checker for server-only exports inside client components."""

    def __init__(self, rule_config: RuleConfig, file_cache: FileCache):
        self.rule_config = rule_config
        self.file_cache = file_cache

    def check_file(self, file_path: Path) -> List[Diagnostic]:
        diagnostics = []
        content = self.file_cache.get_content(file_path)
        if not content or not has_use_client_directive(content):
            return diagnostics

        for export_name, pattern in _SERVER_EXPORT_PATTERNS:
            match = pattern.search(content)
            if match:
                diagnostics.append(Diagnostic.create(
                    severity=self.rule_config.severity,
                    rule=RULE_ID,
                    message=f"Server-side export '{export_name}' found in client component",
                    file=file_path,
                    line=content.count('\n', 0, match.start()) + 1
                ))

        return diagnostics
