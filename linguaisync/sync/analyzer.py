"""
Dry-run analysis.

Computes the same task lists as a sync but never calls a provider and never
writes anything: no target files, and no snapshots, not even a first one.
"""

import json
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

import structlog

from linguaisync.config import Settings
from linguaisync.storage import SnapshotStore, TranslationFileStore
from linguaisync.tree import TranslationTask, collect_tasks

from .models import FileAnalysis, LanguageAnalysis

logger = structlog.get_logger(__name__)

MAX_DISPLAY_LENGTH = 100


class AnalysisReporter:
    """Read-only counterpart of SyncOrchestrator."""

    def __init__(
        self,
        settings: Settings,
        file_store: Optional[TranslationFileStore] = None,
        snapshot_store: Optional[SnapshotStore] = None,
    ):
        self.settings = settings
        self.file_store = file_store or TranslationFileStore(settings.locales_dir, settings.base_language)
        self.snapshot_store = snapshot_store or SnapshotStore(settings.locales_dir, settings.base_language)

    async def analyze_file(self, language: str, filename: str) -> FileAnalysis:
        base = await self.file_store.load(self.settings.base_language, filename)
        if not base:
            logger.warning("Could not load base file, skipping", language=language, file=filename)
            return FileAnalysis(filename=filename, skipped=True)

        target = await self.file_store.load(language, filename)
        snapshot = await self.snapshot_store.load(filename)
        plan = collect_tasks(base, target, snapshot)

        if plan:
            logger.info(
                "Found translations to update",
                language=language,
                file=filename,
                missing=len(plan.missing),
                changed=len(plan.changed),
            )
        else:
            logger.info("All translations are up to date", language=language, file=filename)

        return FileAnalysis(filename=filename, tasks=plan.tasks, baseline_missing=plan.baseline_missing)

    async def analyze_language(self, language: str) -> LanguageAnalysis:
        analysis = LanguageAnalysis(language=language, language_name=self.settings.language_name(language))
        files = await self.file_store.available_files(self.settings.translation_files)

        for filename in files:
            analysis.files.append(await self.analyze_file(language, filename))

        logger.info(
            "Would update translations",
            language=language,
            count=analysis.task_count,
            files=len(files),
        )
        return analysis

    async def analyze_languages(self, languages: Iterable[str]) -> Dict[str, LanguageAnalysis]:
        """Analyses for languages that have something to translate."""
        results: Dict[str, LanguageAnalysis] = {}
        for language in languages:
            analysis = await self.analyze_language(language)
            if analysis.task_count:
                results[language] = analysis
        return results

    def build_report(
        self,
        analyses: Dict[str, LanguageAnalysis],
        generated_at: Optional[datetime] = None,
    ) -> Dict[str, Any]:
        """Serializable dry-run report."""
        generated_at = generated_at or datetime.now(timezone.utc)
        languages = {
            code: {
                "languageName": analysis.language_name,
                "missingCount": analysis.task_count,
                "changedCount": analysis.changed_count,
                "filesWithoutBaseline": analysis.files_without_baseline,
                "missing": [
                    _report_entry(file_analysis.filename, task)
                    for file_analysis in analysis.files
                    for task in file_analysis.tasks
                ],
            }
            for code, analysis in analyses.items()
        }

        return {
            "generatedAt": generated_at.isoformat(),
            "baseLanguage": self.settings.base_language,
            "localesDir": str(self.settings.locales_dir),
            "languages": languages,
            "summary": {
                "totalLanguages": len(languages),
                "totalMissingTranslations": sum(entry["missingCount"] for entry in languages.values()),
            },
        }


def _report_entry(filename: str, task: TranslationTask) -> Dict[str, Any]:
    return {
        "path": f"{filename}:{task.path}",
        "englishValue": task.source_value,
        "isNested": task.is_nested,
        "filename": filename,
        "type": task.kind.value,
    }


def _display_value(value: Any) -> str:
    if isinstance(value, str):
        if len(value) > MAX_DISPLAY_LENGTH:
            return value[:MAX_DISPLAY_LENGTH - 3] + "..."
        return value
    return json.dumps(value, ensure_ascii=False)


def format_verbose(language: str, entries: List[Dict[str, Any]], language_name: str) -> str:
    """Human-readable listing of report entries for one language."""
    rule = "─" * 60
    lines = [f"Detailed missing translations for {language}:", rule]

    for index, entry in enumerate(entries, 1):
        status = "CHANGED" if entry["type"] == "changed" else "MISSING"
        lines.append(f"{index:>3}. {entry['path']}")
        lines.append(f'     Source: "{_display_value(entry["englishValue"])}"')
        lines.append(f"     {language_name}: [{status}]")
        if index < len(entries):
            lines.append("")

    lines.append(rule)
    return "\n".join(lines)
