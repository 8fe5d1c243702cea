"""
Integration tests for dry-run analysis and reporting.
"""

from datetime import datetime, timezone

import pytest

from linguaisync.storage import SnapshotStore
from linguaisync.sync import AnalysisReporter, format_verbose


@pytest.fixture
def reporter(settings):
    return AnalysisReporter(settings)


def snapshot_files(locales_dir):
    return sorted(p.name for p in locales_dir.rglob("*.bak"))


class TestAnalysis:

    async def test_never_writes_anything(self, reporter, write_tree, locales_dir):
        write_tree("en", {"a": "A", "b": {"c": "C"}})
        target = write_tree("fr", {"a": "fr-A"})
        before = target.read_text(encoding="utf-8")

        analyses = await reporter.analyze_languages(["fr", "de"])

        assert set(analyses) == {"fr", "de"}
        assert target.read_text(encoding="utf-8") == before
        assert not (locales_dir / "de").exists()
        assert snapshot_files(locales_dir) == []

    async def test_missing_and_changed_tasks(self, reporter, write_tree, locales_dir):
        write_tree("en", {"a": "new A", "b": "B", "c": "C"})
        write_tree("fr", {"a": "fr-A", "b": "fr-B"})
        await SnapshotStore(locales_dir, "en").save("translation.json", {"a": "A", "b": "B"})

        analysis = await reporter.analyze_language("fr")

        assert analysis.language_name == "French"
        assert analysis.task_count == 2
        assert analysis.changed_count == 1
        assert analysis.files_without_baseline == []

    async def test_files_without_baseline(self, reporter, write_tree):
        write_tree("en", {"a": "A"})

        analysis = await reporter.analyze_language("fr")

        assert analysis.files_without_baseline == ["translation.json"]
        assert analysis.changed_count == 0

    async def test_up_to_date_language_is_omitted(self, reporter, write_tree, locales_dir):
        write_tree("en", {"a": "A"})
        write_tree("fr", {"a": "fr-A"})
        write_tree("de", {})
        await SnapshotStore(locales_dir, "en").save("translation.json", {"a": "A"})

        analyses = await reporter.analyze_languages(["fr", "de"])

        assert list(analyses) == ["de"]

    async def test_missing_base_file_is_skipped(self, reporter, write_tree):
        write_tree("fr", {"a": "fr-A"})

        analysis = await reporter.analyze_language("fr")

        assert analysis.files == []
        assert analysis.task_count == 0


class TestReport:

    async def test_report_structure(self, reporter, settings, write_tree, locales_dir):
        write_tree("en", {"menu": {"save": "Save"}, "title": "Title", "days": ["Mon"]})
        write_tree("fr", {"title": "Titre"})
        await SnapshotStore(locales_dir, "en").save(
            "translation.json", {"menu": {"save": "Save"}, "title": "Old title", "days": ["Mon"]}
        )
        generated_at = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)

        report = reporter.build_report(await reporter.analyze_languages(["fr"]), generated_at)

        assert report["generatedAt"] == "2024-01-02T03:04:05+00:00"
        assert report["baseLanguage"] == "en"
        assert report["localesDir"] == str(settings.locales_dir)
        assert report["summary"] == {"totalLanguages": 1, "totalMissingTranslations": 3}

        fr = report["languages"]["fr"]
        assert fr["languageName"] == "French"
        assert fr["missingCount"] == 3
        assert fr["changedCount"] == 1
        assert fr["filesWithoutBaseline"] == []
        assert fr["missing"] == [
            {
                "path": "translation.json:menu.save",
                "englishValue": "Save",
                "isNested": True,
                "filename": "translation.json",
                "type": "missing",
            },
            {
                "path": "translation.json:days",
                "englishValue": ["Mon"],
                "isNested": False,
                "filename": "translation.json",
                "type": "missing",
            },
            {
                "path": "translation.json:title",
                "englishValue": "Title",
                "isNested": False,
                "filename": "translation.json",
                "type": "changed",
            },
        ]

    def test_empty_report(self, reporter):
        report = reporter.build_report({})

        assert report["languages"] == {}
        assert report["summary"] == {"totalLanguages": 0, "totalMissingTranslations": 0}


class TestFormatVerbose:

    def test_lists_entries(self):
        entries = [
            {"path": "translation.json:a", "englishValue": "Hello", "type": "missing"},
            {"path": "translation.json:b", "englishValue": ["x", "y"], "type": "changed"},
        ]

        output = format_verbose("fr", entries, "French")

        assert output.splitlines()[0] == "Detailed missing translations for fr:"
        assert '  1. translation.json:a' in output
        assert '     Source: "Hello"' in output
        assert "     French: [MISSING]" in output
        assert '     Source: "["x", "y"]"' in output
        assert "     French: [CHANGED]" in output

    def test_long_values_are_truncated(self):
        entries = [{"path": "f:a", "englishValue": "x" * 150, "type": "missing"}]

        output = format_verbose("de", entries, "German")

        assert f'Source: "{"x" * 97}..."' in output
        assert "x" * 98 not in output
