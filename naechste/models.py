#!/usr/bin/env python3
"""
Data models for structure linting.

Contains the diagnostic types shared by every rule checker and the reporter.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional


class Severity(Enum):
    """Diagnostic severity levels."""
    WARN = "warn"
    ERROR = "error"


class FilenameStyle(Enum):
    """Supported filename casing conventions."""
    KEBAB_CASE = "kebab-case"
    CAMEL_CASE = "camel-case"
    PASCAL_CASE = "pascal-case"
    SNAKE_CASE = "snake-case"


@dataclass(frozen=True)
class Diagnostic:
    """A single rule violation."""
    severity: Severity
    rule: str
    message: str
    file: Path
    line: Optional[int] = None

    @classmethod
    def create(
        cls,
        severity: Severity,
        rule: str,
        message: str,
        file: Path,
        line: Optional[int] = None
    ) -> "Diagnostic":
        """Create a diagnostic, normalizing the file to a Path."""
        return cls(
            severity=severity,
            rule=rule,
            message=message,
            file=Path(file),
            line=line
        )

    @property
    def location(self) -> str:
        """File path with the line number appended when known."""
        if self.line is not None:
            return f"{self.file}:{self.line}"
        return str(self.file)

    def to_dict(self) -> Dict:
        """Convert diagnostic to dictionary for JSON serialization."""
        result = {
            "severity": self.severity.value,
            "rule": self.rule,
            "message": self.message,
            "file": str(self.file),
        }
        if self.line is not None:
            result["line"] = self.line
        return result


@dataclass
class DiagnosticCollection:
    """Ordered sink for the diagnostics of one linting run."""
    diagnostics: List[Diagnostic] = field(default_factory=list)

    def add(self, diagnostic: Diagnostic) -> None:
        """Append a diagnostic, keeping emission order."""
        self.diagnostics.append(diagnostic)

    def extend(self, diagnostics: List[Diagnostic]) -> None:
        for diagnostic in diagnostics:
            self.add(diagnostic)

    def has_errors(self) -> bool:
        """Check if there are any error-severity diagnostics."""
        return any(d.severity == Severity.ERROR for d in self.diagnostics)

    def error_count(self) -> int:
        return sum(1 for d in self.diagnostics if d.severity == Severity.ERROR)

    def warning_count(self) -> int:
        return sum(1 for d in self.diagnostics if d.severity == Severity.WARN)

    def get_summary_by_rule(self) -> Dict[str, int]:
        """Get count of diagnostics by rule id."""
        summary = {}
        for diagnostic in self.diagnostics:
            summary[diagnostic.rule] = summary.get(diagnostic.rule, 0) + 1
        return summary

    def __len__(self) -> int:
        return len(self.diagnostics)

    def __iter__(self):
        return iter(self.diagnostics)

    def to_dict(self) -> Dict:
        """Convert results to dictionary for JSON serialization."""
        return {
            "diagnostics": [d.to_dict() for d in self.diagnostics],
            "summary": {
                "errors": self.error_count(),
                "warnings": self.warning_count(),
                "by_rule": self.get_summary_by_rule()
            }
        }
