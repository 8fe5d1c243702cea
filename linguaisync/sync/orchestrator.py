"""
Synchronization of target-language trees with the base language.

Per file: load base and target, diff against the snapshot, translate the
resulting tasks batch by batch, merge, then persist the target and a fresh
snapshot. Files, languages and batches are processed strictly one after
another; a failure in one of them is logged and recorded, never fatal to
the run.
"""

import asyncio
from typing import Any, Awaitable, Callable, Iterable, List, Optional

import structlog

from linguaisync.config import Settings
from linguaisync.provider import TranslationProvider
from linguaisync.storage import SnapshotStore, TranslationFileStore
from linguaisync.tree import (
    TranslationResult,
    apply_results,
    collect_tasks,
    create_batches,
    expected_kinds,
)

from .models import FileState, FileSyncResult, LanguageSyncResult, SyncSummary

logger = structlog.get_logger(__name__)


def _is_cancelled(cancel_event: Optional[asyncio.Event]) -> bool:
    return cancel_event is not None and cancel_event.is_set()


class SyncOrchestrator:
    """Runs translation sync for a set of languages."""

    def __init__(
        self,
        settings: Settings,
        provider: TranslationProvider,
        file_store: Optional[TranslationFileStore] = None,
        snapshot_store: Optional[SnapshotStore] = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        self.settings = settings
        self.provider = provider
        self.file_store = file_store or TranslationFileStore(settings.locales_dir, settings.base_language)
        self.snapshot_store = snapshot_store or SnapshotStore(settings.locales_dir, settings.base_language)
        self._sleep = sleep

    async def process_file(
        self,
        language: str,
        filename: str,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> FileSyncResult:
        """Synchronize one target file with its base-language counterpart."""
        result = FileSyncResult(language=language, filename=filename)
        log = logger.bind(language=language, file=filename)

        base = await self.file_store.load(self.settings.base_language, filename)
        if not base:
            result.state = FileState.FAILED
            result.error = "Base translation file is empty or unreadable"
            log.warning("Could not load base file, skipping")
            return result

        target = await self.file_store.load(language, filename)

        snapshot = await self.snapshot_store.load(filename)
        if snapshot is None:
            await self.snapshot_store.save(filename, base)
            result.baseline_missing = True
            log.info("No snapshot yet, created one; changed-key detection skipped")

        result.state = FileState.DIFFING
        plan = collect_tasks(base, target, snapshot)
        result.missing_count = len(plan.missing)
        result.changed_count = len(plan.changed)
        result.processed = True

        if not plan:
            result.state = FileState.DONE
            log.info("All translations are up to date")
            return result

        log.info("Found translations to update", missing=result.missing_count, changed=result.changed_count)

        result.state = FileState.BATCHING
        tasks = plan.tasks
        batches = create_batches(tasks, self.settings.batch_size)

        result.state = FileState.TRANSLATING
        translations = await self._translate_batches(batches, language, cancel_event, result)

        if not translations:
            result.state = FileState.DONE
            log.error("No translations received", tasks=len(tasks))
            return result

        result.state = FileState.MERGING
        updated = dict(target)
        applied_paths = apply_results(
            updated,
            translations,
            kinds=expected_kinds(tasks),
            strict=self.settings.strict_merge,
        )
        result.applied_count = len(applied_paths)
        # An unapplied Changed key is only found again against the old snapshot.
        unapplied_changed = {task.path for task in plan.changed} - set(applied_paths)

        result.state = FileState.PERSISTING
        if result.applied_count:
            try:
                await self.file_store.save(language, filename, updated)
                if result.cancelled or unapplied_changed:
                    log.warning(
                        "Keeping previous snapshot until all changed keys are translated",
                        pending=sorted(unapplied_changed),
                    )
                else:
                    await self.snapshot_store.save(filename, base)
            except OSError as e:
                result.state = FileState.FAILED
                result.error = f"Could not write translations: {e}"
                log.error("Failed to persist translations", error=str(e))
                return result

        result.state = FileState.DONE
        log.info("Applied translations", applied=result.applied_count, total=len(tasks))
        return result

    async def _translate_batches(
        self,
        batches: List[list],
        language: str,
        cancel_event: Optional[asyncio.Event],
        result: FileSyncResult,
    ) -> List[TranslationResult]:
        language_name = self.settings.language_name(language)
        translations: List[TranslationResult] = []

        for index, batch in enumerate(batches):
            if _is_cancelled(cancel_event):
                result.cancelled = True
                logger.warning(
                    "Sync cancelled, skipping remaining batches",
                    language=language,
                    file=result.filename,
                    remaining=len(batches) - index,
                )
                break

            logger.info("Translating batch", language=language, batch=index + 1, batches=len(batches), items=len(batch))
            try:
                translations.extend(await self.provider.translate(batch, language, language_name))
            except Exception as e:
                logger.error("Batch failed", language=language, batch=index + 1, error=str(e))

            if index < len(batches) - 1 and self.settings.batch_delay > 0:
                await self._sleep(self.settings.batch_delay)

        return translations

    async def process_language(
        self,
        language: str,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> LanguageSyncResult:
        language_name = self.settings.language_name(language)
        language_result = LanguageSyncResult(language=language, language_name=language_name)
        logger.info("Processing language", language=language, language_name=language_name)

        for filename in await self.file_store.available_files(self.settings.translation_files):
            if _is_cancelled(cancel_event):
                break

            try:
                file_result = await self.process_file(language, filename, cancel_event)
            except Exception as e:
                logger.exception("Unexpected error processing file", language=language, file=filename)
                file_result = FileSyncResult(
                    language=language,
                    filename=filename,
                    state=FileState.FAILED,
                    error=str(e),
                )
            language_result.add(file_result)

        if language_result.files_processed == 0:
            language_result.error = "No files could be processed"
            logger.error("No files could be processed", language=language)
        else:
            logger.info(
                "Language finished",
                language=language,
                missing=language_result.missing_count,
                changed=language_result.changed_count,
                applied=language_result.applied_count,
                files=language_result.files_processed,
            )

        return language_result

    async def sync_languages(
        self,
        languages: Iterable[str],
        cancel_event: Optional[asyncio.Event] = None,
    ) -> SyncSummary:
        """Synchronize every language in order.

        Raises:
            ConfigurationError: if the provider is missing credentials;
                raised before any file is touched
        """
        languages = list(languages)
        self.provider.ensure_ready()

        logger.info(
            "Starting translation sync",
            locales_dir=str(self.settings.locales_dir),
            base_language=self.settings.base_language,
            languages=languages,
        )

        summary = SyncSummary()
        for language in languages:
            if _is_cancelled(cancel_event):
                break

            try:
                summary.languages[language] = await self.process_language(language, cancel_event)
            except Exception as e:
                logger.exception("Unexpected error processing language", language=language)
                summary.languages[language] = LanguageSyncResult(
                    language=language,
                    language_name=self.settings.language_name(language),
                    error=str(e),
                )

        summary.cancelled = _is_cancelled(cancel_event)
        logger.info(
            "Sync completed",
            succeeded=summary.succeeded,
            languages=len(languages),
            applied=summary.total_applied,
            cancelled=summary.cancelled,
        )
        return summary
