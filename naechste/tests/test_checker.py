"""
Tests for the structure checker orchestration.
"""

import pytest

from ..checker import StructureChecker, lint
from ..config import Config
from ..utils.file_utils import LintError, find_source_files
from .helpers import config_from, create_test_project, messages_for, organization_config, run_checker


class TestSourceWalk:
    """Project walk and file selection."""

    def test_ignored_directories_are_skipped(self):
        files = {
            "app/page.tsx": "",
            "node_modules/pkg/index.js": "",
            ".next/server/chunk.js": "",
            "src/dist/bundle.js": "",
            "README.md": "",
        }
        with create_test_project(files) as root:
            assert find_source_files(root) == [root / "app/page.tsx"]

    def test_walk_is_sorted(self):
        """Files of a directory come before its subdirectories, each sorted by name."""
        files = {"b.ts": "", "a/z.ts": "", "a/b.tsx": "", "c.mjs": ""}
        with create_test_project(files) as root:
            assert find_source_files(root) == [root / "b.ts", root / "c.mjs", root / "a/b.tsx", root / "a/z.ts"]

    def test_missing_root(self):
        with create_test_project({}) as root:
            with pytest.raises(LintError):
                find_source_files(root / "missing")


class TestStructureChecker:
    """End-to-end linting with default and custom configuration."""

    def test_clean_project(self):
        files = {
            "app/page.tsx": "export default function Page() {}",
            "app/blog/page.tsx": "export default function Blog() {}",
            "components/user-card.tsx": "export function UserCard() {}",
        }
        with create_test_project(files) as root:
            assert len(lint(root)) == 0

    def test_multiple_rules_in_file_order(self):
        files = {
            "app/a/b/c/DeepThing.tsx": "'use client'\nexport const getStaticProps = () => {};",
        }
        with create_test_project(files) as root:
            rules = [d.rule for d in run_checker(root)]
            assert rules == [
                "server-side-exports",
                "component-nesting-depth",
                "filename-style-consistency",
            ]

    def test_node_modules_not_linted(self):
        files = {"node_modules/BadName/Index.tsx": "'use client'\nexport const getStaticProps = 1;"}
        with create_test_project(files) as root:
            assert len(lint(root)) == 0

    def test_error_severity(self):
        config = config_from({"rules": {"server_side_exports": {"severity": "error"}}})
        files = {"pages/index.tsx": "'use client'\nexport function getServerSideProps() {}"}
        with create_test_project(files) as root:
            results = run_checker(root, config)
            assert results.has_errors()
            assert results.error_count() == 1
            assert messages_for(results, "server-side-exports") == [
                "Server-side export 'getServerSideProps' found in client component"
            ]

    def test_idempotent(self):
        check = {
            "id": "stories",
            "match": {"glob": "**/*.tsx"},
            "require": [{"kind": "sibling_glob", "glob": "*.stories.tsx"}],
        }
        files = {
            "app/page.tsx": "import { B } from '@/components/Button';",
            "components/Button.tsx": "",
            "components/Card.tsx": "",
        }
        with create_test_project(files) as root:
            config = organization_config([check])
            first = run_checker(root, config).to_dict()
            second = run_checker(root, config).to_dict()
            assert first == second
            assert len(first["diagnostics"]) > 0

    def test_graph_only_built_for_placement_rules(self, monkeypatch):
        calls = []

        def fake_build(*args, **kwargs):
            calls.append(args)
            raise AssertionError("import graph should not be built")

        monkeypatch.setattr("naechste.checker.build_import_graph", fake_build)
        check = {"id": "docs", "match": {"glob": "*.ts"}, "require": [{"kind": "sibling_exact", "name": "x.md"}]}
        with create_test_project({"a.ts": ""}) as root:
            StructureChecker(root, organization_config([check])).run_all_checks()
        assert calls == []

    def test_default_config_used(self):
        checker = StructureChecker(".")
        assert checker.config == Config()

    def test_unreadable_root(self):
        with create_test_project({}) as root:
            with pytest.raises(LintError):
                lint(root / "nope")
