#!/usr/bin/env python3
"""
Main entry point for Next.js structure linting.

Usage:
    naechste [path] [--format human|json] [--config FILE] [--output FILE] [--verbose]
    naechste init [path] [--force]
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .checker import StructureChecker
from .config import Config, ConfigError, find_config_file, load_config, write_default_config
from .reporter import StructureReporter
from .utils.file_utils import LintError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_NAME = "naechste.json"


def _configure_logging(verbose: bool) -> None:
    # Without a handler, warnings still reach stderr through logging.lastResort.
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(levelname)s %(name)s: %(message)s",
            stream=sys.stderr
        )


def _resolve_config(target_path: Path, config_path: Optional[str]) -> Config:
    """Load the explicit config, or the first one found in the project."""
    path = Path(config_path) if config_path else find_config_file(target_path)
    if path is None:
        logger.debug("No config file found in %s, using defaults", target_path)
        return Config()

    try:
        return load_config(path)
    except ConfigError as e:
        print(f"warning: {e}; using default configuration", file=sys.stderr)
        return Config()


def run_init(argv: List[str]) -> int:
    """Write a default config file into the target directory."""
    parser = argparse.ArgumentParser(
        prog="naechste init",
        description="Write a default naechste.json configuration"
    )
    parser.add_argument('target_path', nargs='?', default='.', help='Project directory (default: .)')
    parser.add_argument('--force', action='store_true', help='Overwrite an existing config file')
    args = parser.parse_args(argv)

    try:
        path = write_default_config(Path(args.target_path) / DEFAULT_CONFIG_NAME, force=args.force)
    except (ConfigError, OSError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    print(f"Created {path}")
    return 0


def run_lint(argv: List[str]) -> int:
    """Lint a project and report the diagnostics."""
    parser = argparse.ArgumentParser(
        prog="naechste",
        description="Lint the file structure of a Next.js project"
    )
    parser.add_argument('target_path', nargs='?', default='.', help='Project directory to check (default: .)')
    parser.add_argument('--format', choices=['human', 'json'], default='human', help='Output format')
    parser.add_argument('--config', '-c', help='Config file (default: discovered in the project directory)')
    parser.add_argument('--output', '-o', help='Also write the JSON report to this file')
    parser.add_argument('--verbose', '-v', action='store_true', help='Enable debug logging')
    args = parser.parse_args(argv)

    _configure_logging(args.verbose)

    target_path = Path(args.target_path)
    config = _resolve_config(target_path, args.config)

    try:
        results = StructureChecker(target_path, config).run_all_checks()
    except LintError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    reporter = StructureReporter(args.output)
    success = reporter.report_results(results, format_type=args.format)
    return 0 if success else 1


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for structure linting."""
    if argv is None:
        argv = sys.argv[1:]

    if argv and argv[0] == "init":
        sys.exit(run_init(argv[1:]))

    sys.exit(run_lint(argv))


if __name__ == "__main__":
    main()
