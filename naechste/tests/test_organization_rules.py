"""
Tests for configured file organization rules.

Covers match/exclude selection, sibling requirements and import-conditional
placement.
"""

import logging

from ..utils.import_utils import build_import_graph
from .helpers import create_test_project, messages_for, organization_config, run_checker

PLACEMENT_RULE = {
    "id": "components-location",
    "match": {"glob": "**/*.tsx"},
    "when_imported_by": {"importer_glob": "app/**", "import_path_matches": ["^@/lib/"]},
    "enforce_location": {"must_be_under": ["components"]},
}


def organization_diagnostics(results, rule_id):
    return [d for d in results if d.rule == f"file-organization:{rule_id}"]


class TestSiblingRequirements:
    """Sibling exact and sibling glob requirements."""

    def test_sibling_exact_missing_then_created(self):
        check = {
            "id": "user-story",
            "match": {"glob": "**/page.tsx"},
            "require": [{"kind": "sibling_exact", "name": "User-Story.us.md"}],
        }
        config = organization_config([check])
        with create_test_project({"app/dashboard/page.tsx": "export default function Page() {}"}) as root:
            diagnostics = organization_diagnostics(run_checker(root, config), "user-story")
            assert len(diagnostics) == 1
            assert "User-Story.us.md" in diagnostics[0].message
            assert diagnostics[0].file == root / "app/dashboard/page.tsx"

            (root / "app/dashboard/User-Story.us.md").write_text("# Story", encoding='utf-8')
            assert organization_diagnostics(run_checker(root, config), "user-story") == []

    def test_exclude_glob(self):
        check = {
            "id": "stories",
            "match": {"glob": "**/*.tsx", "exclude_glob": ["**/page.tsx"]},
            "require": [{"kind": "sibling_glob", "glob": "*.stories.tsx"}],
        }
        files = {"app/page.tsx": "", "app/Button.tsx": ""}
        with create_test_project(files) as root:
            diagnostics = organization_diagnostics(run_checker(root, organization_config([check])), "stories")
            assert [d.file for d in diagnostics] == [root / "app/Button.tsx"]
            assert diagnostics[0].message == (
                f"Missing required companion file matching '*.stories.tsx' next to '{root / 'app/Button.tsx'}'"
            )

    def test_one_diagnostic_per_unmet_requirement(self):
        check = {
            "id": "docs",
            "match": {"glob": "lib/*.ts"},
            "require": [
                {"kind": "sibling_exact", "name": "README.md"},
                {"kind": "sibling_glob", "glob": "*.md"},
                {"kind": "sibling_exact", "name": "CHANGELOG.md"},
            ],
        }
        files = {"lib/db.ts": "", "lib/CHANGELOG.md": ""}
        with create_test_project(files) as root:
            diagnostics = organization_diagnostics(run_checker(root, organization_config([check])), "docs")
            assert len(diagnostics) == 1
            assert "'README.md'" in diagnostics[0].message

    def test_invalid_sibling_glob_is_unmet(self, caplog):
        """A malformed glob matches no sibling, not even the file itself."""
        check = {
            "id": "bad-glob",
            "match": {"glob": "app/*.tsx"},
            "require": [{"kind": "sibling_glob", "glob": "But**"}],
        }
        with create_test_project({"app/Button.tsx": ""}) as root:
            with caplog.at_level(logging.WARNING):
                results = run_checker(root, organization_config([check]))
            diagnostics = organization_diagnostics(results, "bad-glob")
            assert len(diagnostics) == 1
            assert "But**" in diagnostics[0].message
        assert any("But**" in record.getMessage() for record in caplog.records)

    def test_unmatched_files_ignored(self):
        check = {
            "id": "docs",
            "match": {"glob": "lib/*.ts"},
            "require": [{"kind": "sibling_exact", "name": "README.md"}],
        }
        with create_test_project({"lib/nested/db.ts": "", "app/page.tsx": ""}) as root:
            assert organization_diagnostics(run_checker(root, organization_config([check])), "docs") == []

    def test_segment_aligned_suffix(self):
        check = {
            "id": "page-docs",
            "match": {"glob": "**/page.tsx"},
            "require": [{"kind": "sibling_exact", "name": "README.md"}],
        }
        files = {"app/page.tsx": "", "app/my-page.tsx": ""}
        with create_test_project(files) as root:
            diagnostics = organization_diagnostics(run_checker(root, organization_config([check])), "page-docs")
            assert [d.file for d in diagnostics] == [root / "app/page.tsx"]

    def test_severity_follows_rule_config(self):
        check = {
            "id": "docs",
            "match": {"glob": "*.ts"},
            "require": [{"kind": "sibling_exact", "name": "README.md"}],
        }
        with create_test_project({"index.ts": ""}) as root:
            results = run_checker(root, organization_config([check], severity="warn"))
            assert organization_diagnostics(results, "docs")
            assert not results.has_errors()


class TestConditionalPlacement:
    """Location enforcement for files imported in a matching way."""

    def test_misplaced_file_reported_once(self):
        files = {
            "app/page.tsx": "import { Button } from '@/lib/Button';\nimport Other from '@/lib/Button';",
            "lib/Button.tsx": "export function Button() {}",
        }
        with create_test_project(files) as root:
            diagnostics = organization_diagnostics(
                run_checker(root, organization_config([PLACEMENT_RULE])), "components-location"
            )
            assert len(diagnostics) == 1
            assert diagnostics[0].file == root / "lib/Button.tsx"
            assert diagnostics[0].message == (
                f"File is imported by '{root / 'app/page.tsx'}' but is not located under any of: components"
            )

    def test_moving_file_fixes_violation(self):
        files = {
            "app/page.tsx": "import { Button } from '@/components/Button';",
            "components/Button.tsx": "export function Button() {}",
        }
        with create_test_project(files) as root:
            results = run_checker(root, organization_config([PLACEMENT_RULE]))
            assert organization_diagnostics(results, "components-location") == []

    def test_importer_outside_glob_does_not_trigger(self):
        files = {
            "scripts/seed.tsx": "import { Button } from '@/lib/Button';",
            "lib/Button.tsx": "",
        }
        with create_test_project(files) as root:
            results = run_checker(root, organization_config([PLACEMENT_RULE]))
            assert organization_diagnostics(results, "components-location") == []

    def test_specifier_must_match(self):
        files = {
            "app/page.tsx": "import { Button } from '../lib/Button';",
            "lib/Button.tsx": "",
        }
        with create_test_project(files) as root:
            results = run_checker(root, organization_config([PLACEMENT_RULE]))
            assert organization_diagnostics(results, "components-location") == []

    def test_custom_message(self):
        rule = dict(PLACEMENT_RULE)
        rule["enforce_location"] = {"must_be_under": ["components"], "message": "UI lives in components/"}
        files = {"app/page.tsx": "import { B } from '@/lib/Button';", "lib/Button.tsx": ""}
        with create_test_project(files) as root:
            results = run_checker(root, organization_config([rule]))
            assert messages_for(results, "file-organization:components-location") == ["UI lives in components/"]

    def test_invalid_regex_never_triggers(self, caplog):
        rule = dict(PLACEMENT_RULE)
        rule["when_imported_by"] = {"importer_glob": "app/**", "import_path_matches": ["(unclosed"]}
        files = {"app/page.tsx": "import { B } from '@/lib/Button';", "lib/Button.tsx": ""}
        with create_test_project(files) as root:
            with caplog.at_level(logging.WARNING):
                results = run_checker(root, organization_config([rule]))
            assert organization_diagnostics(results, "components-location") == []
            assert any("(unclosed" in record.getMessage() for record in caplog.records)

    def test_half_configured_rule_is_inert(self):
        rule = {
            "id": "half",
            "match": {"glob": "**/*.tsx"},
            "enforce_location": {"must_be_under": ["components"]},
        }
        files = {"app/page.tsx": "import { B } from '@/lib/Button';", "lib/Button.tsx": ""}
        with create_test_project(files) as root:
            results = run_checker(root, organization_config([rule]))
            assert organization_diagnostics(results, "half") == []

    def test_rules_are_independent(self):
        sibling_rule = {
            "id": "stories",
            "match": {"glob": "lib/*.tsx"},
            "require": [{"kind": "sibling_glob", "glob": "*.stories.tsx"}],
        }
        files = {"app/page.tsx": "import { B } from '@/lib/Button';", "lib/Button.tsx": ""}
        with create_test_project(files) as root:
            results = run_checker(root, organization_config([PLACEMENT_RULE, sibling_rule]))
            rules = [d.rule for d in results if d.rule.startswith("file-organization:")]
            assert rules == ["file-organization:components-location", "file-organization:stories"]


class TestGraphCoalescing:
    """One canonical graph entry per file."""

    def test_index_shortcut_and_explicit_path(self):
        files = {
            "app/a.tsx": "import { x } from '@/lib/utils';",
            "app/b.tsx": "import { x } from '../lib/utils/index.ts';",
            "lib/utils/index.ts": "export const x = 1;",
        }
        with create_test_project(files) as root:
            graph = build_import_graph([root / "app/a.tsx", root / "app/b.tsx"], root)
            assert len(graph) == 1
            assert graph.importers_of(root / "lib/utils/index.ts") == [root / "app/a.tsx", root / "app/b.tsx"]
