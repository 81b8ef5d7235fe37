"""End-to-end pipeline tests over real temporary trees."""

import pytest

from workstream_scanner.core.config import (
    MockScanConfig,
    ModuleRuleConfig,
    RepositoryScanConfig,
    ScannerConfig,
)
from workstream_scanner.errors import ConfigurationError
from workstream_scanner.scanning.matcher import Searcher
from workstream_scanner.scanning.models import RawMatch
from workstream_scanner.pipeline import (
    DATA_ACCESS,
    ScanPipeline,
    run_data_access_scan,
    run_mock_replacement_scan,
    run_repository_scan,
    write_report,
)

SAMPLE_TREE = {
    "src/assessment/loader.ts": "const mockData = load();\nexport default mockData;\n",
    "src/auth/session.ts": "const MOCK_USER = { mock: true };\n",
    "src/auth/__tests__/session.test.ts": "const mockUser = {};\n",
    "src/results/summary.tsx": "// fetched from the database, not mock\nconst x = 1;\n",
    "src/lib/helpers.js": "export const fake = () => 1;\n",
    "node_modules/pkg/index.js": "const mock = 1;\n",
    "src/modules/assessment/api.ts": (
        "import { supabase } from '../client';\n"
        "const rows = await supabase.from('assessment.sessions').select();\n"
        "const more = await supabase.from(\"assessment.items\").select();\n"
    ),
    "src/modules/auth/users.ts": "const u = await supabase.from('auth.users').select();\n",
}


class TestMockReplacementScan:
    def test_scenario_single_file_single_rule(self, make_tree):
        root = make_tree({"src/assessment/loader.ts": "const mockData = load();\n"})
        config = ScannerConfig(mock=MockScanConfig(
            patterns=["mock"],
            module_rules=[ModuleRuleConfig(path="assessment", module="assessment")],
        ))

        outcome = run_mock_replacement_scan(root, config)
        text = outcome.report.to_markdown()

        assert "### Assessment Module" in text
        assert "#### `src/assessment/loader.ts`" in text
        assert "```\nconst mockData = load();\n```" in text
        assert outcome.file_count == 1

    def test_default_presets_exclude_tests_vendor_and_real_data(self, make_tree):
        root = make_tree(SAMPLE_TREE)
        outcome = run_mock_replacement_scan(root)

        text = outcome.report.to_markdown()
        assert "src/auth/__tests__" not in text
        assert "node_modules" not in text
        assert "src/results/summary.tsx" not in text
        assert "### Auth Module" in text
        assert "### Unknown Module" in text
        assert "`src/lib/helpers.js`" in text
        assert outcome.excluded_count >= 2

    def test_line_matched_by_two_patterns_stored_once(self, make_tree):
        root = make_tree({"src/ui/data.ts": "export const MOCK_ITEMS = mockItems;\n"})
        config = ScannerConfig(mock=MockScanConfig(patterns=["mock", "MOCK_"], detail="all"))

        outcome = run_mock_replacement_scan(root, config)

        assert outcome.match_count == 1
        assert "Context (1 match):" in outcome.report.to_markdown()

    def test_zero_findings(self, make_tree):
        root = make_tree({"src/app.ts": "const answer = 42;\n"})
        outcome = run_mock_replacement_scan(root)

        report = outcome.report
        assert not outcome.has_findings
        assert report.headings(level=3) == []
        assert "Overview" in report.headings(level=2)
        assert "No mock data usage found." in report.to_markdown()

    def test_idempotent(self, make_tree):
        root = make_tree(SAMPLE_TREE)
        first = run_mock_replacement_scan(root).report.to_markdown()
        second = run_mock_replacement_scan(root).report.to_markdown()
        assert first == second

    def test_case_insensitive_option(self, make_tree):
        root = make_tree({"src/ui/a.ts": "const Placeholder = 1;\n"})
        sensitive = run_mock_replacement_scan(root)
        insensitive = run_mock_replacement_scan(
            root, ScannerConfig(mock=MockScanConfig(case_sensitive=False))
        )
        assert sensitive.file_count == 0
        assert insensitive.file_count == 1

    def test_top_level_module_directory(self, make_tree):
        root = make_tree({"assessment/loader.ts": "const mockData = load();\n"})
        outcome = run_mock_replacement_scan(root)

        assert outcome.group_counts == [("assessment", 1)]
        assert "#### `assessment/loader.ts`" in outcome.report.to_markdown()

    def test_missing_root(self, tmp_path):
        with pytest.raises(ConfigurationError):
            run_mock_replacement_scan(tmp_path / "nope")


class TestDataAccessScan:
    def test_schema_table_sections(self, make_tree):
        root = make_tree(SAMPLE_TREE)
        outcome = run_data_access_scan(root)
        text = outcome.report.to_markdown()

        assert "### Assessment Schema" in text
        assert "#### sessions Table" in text
        assert "#### items Table" in text
        assert "### Auth Schema" in text
        assert "- `src/modules/auth/users.ts`" in text
        assert ("assessment.sessions", 1) in outcome.group_counts

    def test_table_names_with_non_word_characters(self, make_tree):
        root = make_tree({"src/a.ts": "supabase.from('item.item-banks').select()\n"})
        outcome = run_data_access_scan(root)

        assert outcome.file_count == 1
        assert outcome.group_counts == [("item.item-banks", 1)]
        assert "#### item-banks Table" in outcome.report.to_markdown()

    def test_schemas_not_configured_are_ignored(self, make_tree):
        root = make_tree({"src/a.ts": "supabase.from('billing.invoices')\n"})
        assert run_data_access_scan(root).file_count == 0

    def test_run_by_name(self, make_tree):
        root = make_tree(SAMPLE_TREE)
        assert ScanPipeline().run(DATA_ACCESS, root).scan_name == DATA_ACCESS

    def test_unknown_scan_name(self, make_tree):
        with pytest.raises(ConfigurationError, match="Unknown scan"):
            ScanPipeline().run("nope", make_tree({}))


class TestRepositoryScan:
    def test_module_statuses(self, make_tree):
        root = make_tree(SAMPLE_TREE)
        config = ScannerConfig(repository=RepositoryScanConfig(modules=["assessment", "auth", "admin"]))
        outcome = run_repository_scan(root, config)

        assessment = outcome.report.section("Assessment Module").body
        assert "- Module directory: `src/modules/assessment`" in assessment
        assert "- Has direct database access: Yes" in assessment
        assert "`src/modules/assessment/api.ts`" in assessment
        assert outcome.report.section("Admin Module").body == "- Module directory not found"
        assert outcome.group_counts == [("assessment", 1), ("auth", 1)]


class TestWriteReport:
    def test_writes_fixed_name(self, make_tree, tmp_path):
        root = make_tree(SAMPLE_TREE)
        outcome = run_mock_replacement_scan(root)
        out = tmp_path / "out"
        out.mkdir()

        path = write_report(outcome, out)

        assert path == out / "workstream-mock-replacement-report.md"
        assert path.read_text(encoding="utf-8") == outcome.report.to_markdown()
        assert [p.name for p in out.iterdir()] == [path.name]

    def test_missing_output_dir(self, make_tree, tmp_path):
        outcome = run_mock_replacement_scan(make_tree({}))
        with pytest.raises(ConfigurationError, match="Cannot write report"):
            write_report(outcome, tmp_path / "missing")


class InMemorySearcher(Searcher):
    def __init__(self, files):
        self.files = files

    def search(self, root, pattern):
        for path, lines in self.files.items():
            for line in lines:
                context = pattern.match_line(line)
                if context is not None:
                    yield RawMatch(path, context, pattern.source)


class TestInMemoryPipeline:
    def test_pipeline_runs_against_fake_tree(self, tmp_path):
        files = {
            "src/auth/login.ts": ["const fakeUser = {}", "const fakeUser = {}"],
            "src/misc/x.ts": ["const dummy = 1"],
        }
        pipeline = ScanPipeline(searcher_factory=lambda config: InMemorySearcher(files))

        outcome = pipeline.run_mock_replacement(tmp_path)

        assert outcome.group_counts == [("auth", 1), ("unknown", 1)]
        assert outcome.match_count == 2
        text = outcome.report.to_markdown()
        assert "### Auth Module" in text
        assert "### Unknown Module" in text
