"""Result types for sync and analysis runs."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from linguaisync.tree import TaskKind, TranslationTask


class FileState(Enum):
    """Stage a file reached while being synchronized."""
    LOADING = "loading"
    DIFFING = "diffing"
    BATCHING = "batching"
    TRANSLATING = "translating"
    MERGING = "merging"
    PERSISTING = "persisting"
    DONE = "done"
    FAILED = "failed"


@dataclass
class FileSyncResult:
    language: str
    filename: str
    state: FileState = FileState.LOADING
    missing_count: int = 0
    changed_count: int = 0
    applied_count: int = 0
    processed: bool = False
    baseline_missing: bool = False
    cancelled: bool = False
    error: Optional[str] = None

    @property
    def task_count(self) -> int:
        return self.missing_count + self.changed_count


@dataclass
class LanguageSyncResult:
    language: str
    language_name: str
    missing_count: int = 0
    changed_count: int = 0
    applied_count: int = 0
    files_processed: int = 0
    files: List[FileSyncResult] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.error is None and self.files_processed > 0

    def add(self, result: FileSyncResult) -> None:
        self.files.append(result)
        self.missing_count += result.missing_count
        self.changed_count += result.changed_count
        self.applied_count += result.applied_count
        if result.processed:
            self.files_processed += 1


@dataclass
class SyncSummary:
    languages: Dict[str, LanguageSyncResult] = field(default_factory=dict)
    cancelled: bool = False

    @property
    def succeeded(self) -> int:
        return sum(1 for result in self.languages.values() if result.succeeded)

    @property
    def total_applied(self) -> int:
        return sum(result.applied_count for result in self.languages.values())

    def to_dict(self) -> Dict[str, Any]:
        return {
            "languages": {
                code: {
                    "languageName": result.language_name,
                    "missingCount": result.missing_count,
                    "changedCount": result.changed_count,
                    "appliedCount": result.applied_count,
                    "filesProcessed": result.files_processed,
                    "error": result.error,
                }
                for code, result in self.languages.items()
            },
            "succeeded": self.succeeded,
            "cancelled": self.cancelled,
        }


@dataclass
class FileAnalysis:
    """Read-only view of what a sync would translate in one file."""
    filename: str
    tasks: List[TranslationTask] = field(default_factory=list)
    baseline_missing: bool = False
    skipped: bool = False


@dataclass
class LanguageAnalysis:
    language: str
    language_name: str
    files: List[FileAnalysis] = field(default_factory=list)

    @property
    def task_count(self) -> int:
        return sum(len(f.tasks) for f in self.files)

    @property
    def changed_count(self) -> int:
        return sum(1 for f in self.files for task in f.tasks if task.kind is TaskKind.CHANGED)

    @property
    def files_without_baseline(self) -> List[str]:
        return [f.filename for f in self.files if f.baseline_missing and not f.skipped]
