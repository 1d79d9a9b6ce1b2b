#!/usr/bin/env python3
"""
Structure lint reporting module.

Renders diagnostics for humans (optionally colored) or as JSON, and can write
the JSON report to a file.
"""

import json
import os
import sys
from pathlib import Path
from typing import List, Optional

from .models import Diagnostic, DiagnosticCollection, Severity

COLORS = {
    "reset": "\033[0m",
    "bold": "\033[1m",
    "dim": "\033[2m",
    "red": "\033[31m",
    "green": "\033[32m",
    "yellow": "\033[33m",
    "blue": "\033[34m",
}

SEVERITY_COLORS = {
    Severity.ERROR: "red",
    Severity.WARN: "yellow",
}


def use_color() -> bool:
    return os.environ.get("NO_COLOR") is None and sys.stdout.isatty()


def colorize(text: str, color: str, enabled: Optional[bool] = None) -> str:
    if enabled is None:
        enabled = use_color()
    if not enabled:
        return str(text)
    return f"{COLORS.get(color, '')}{text}{COLORS['reset']}"


def format_diagnostic(diagnostic: Diagnostic, color: bool = False) -> List[str]:
    """Render one diagnostic as its two output lines."""
    severity = colorize(diagnostic.severity.value, SEVERITY_COLORS[diagnostic.severity], color)
    return [
        f"{severity}: {colorize(diagnostic.message, 'bold', color)} [{diagnostic.rule}]",
        f"  {colorize('-->', 'blue', color)} {diagnostic.location}",
    ]


def format_summary(results: DiagnosticCollection, color: bool = False) -> str:
    errors = results.error_count()
    warnings = results.warning_count()

    if errors:
        return colorize(f"{errors} error(s), {warnings} warning(s) found", "red", color)
    if warnings:
        return colorize(f"{warnings} warning(s) found", "yellow", color)
    return colorize("No issues found!", "green", color)


def format_human(results: DiagnosticCollection, color: bool = False) -> str:
    """Render all diagnostics followed by the summary line."""
    lines = []
    for diagnostic in results:
        lines.extend(format_diagnostic(diagnostic, color))
        lines.append("")
    lines.append(format_summary(results, color))
    return "\n".join(lines)


def format_json(results: DiagnosticCollection) -> str:
    return json.dumps(results.to_dict(), indent=2)


class StructureReporter:
    """Handles reporting of structure lint results."""

    def __init__(self, output_file: Optional[str] = None):
        self.output_file = Path(output_file) if output_file else None

    def report_results(self, results: DiagnosticCollection, format_type: str = "human") -> bool:
        """Report results to the console and optional JSON file. Returns True if no errors."""
        if self.output_file:
            self._write_json_report(results)

        if format_type == "json":
            print(format_json(results))
        else:
            print(format_human(results, color=use_color()))

        return not results.has_errors()

    def _write_json_report(self, results: DiagnosticCollection) -> None:
        """Write the JSON report to the output file."""
        self.output_file.parent.mkdir(parents=True, exist_ok=True)

        with open(self.output_file, 'w', encoding='utf-8') as f:
            f.write(format_json(results))
            f.write("\n")
