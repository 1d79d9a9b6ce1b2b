"""
Shared helpers for structure lint tests.
"""

import json
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Iterator, Optional

from ..checker import StructureChecker
from ..config import Config
from ..models import DiagnosticCollection


@contextmanager
def create_test_project(files: Dict[str, str]) -> Iterator[Path]:
    """Create a temporary project with the given files and yield its root."""
    with tempfile.TemporaryDirectory() as temp_dir:
        project_path = Path(temp_dir)
        for relative_path, content in files.items():
            file_path = project_path / relative_path
            file_path.parent.mkdir(parents=True, exist_ok=True)
            file_path.write_text(content, encoding='utf-8')
        yield project_path


def run_checker(project_path: Path, config: Optional[Config] = None) -> DiagnosticCollection:
    return StructureChecker(project_path, config).run_all_checks()


def config_from(data: Dict) -> Config:
    return Config.from_dict(data)


def organization_config(checks, severity: str = "error") -> Config:
    """Config with only the given organization checks active."""
    return Config.from_dict({
        "rules": {
            "file_organization": {
                "severity": severity,
                "options": {"file_organization_checks": checks}
            }
        }
    })


def write_json(path: Path, data: Dict) -> Path:
    path.write_text(json.dumps(data), encoding='utf-8')
    return path


def messages_for(results: DiagnosticCollection, rule: str):
    return [d.message for d in results if d.rule == rule]
