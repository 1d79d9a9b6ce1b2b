"""Next.js project structure linting package."""

from .checker import StructureChecker, lint
from .config import Config, ConfigError, load_config
from .models import Diagnostic, DiagnosticCollection, FilenameStyle, Severity

__all__ = [
    "StructureChecker",
    "lint",
    "Config",
    "ConfigError",
    "load_config",
    "Diagnostic",
    "DiagnosticCollection",
    "FilenameStyle",
    "Severity",
]
