"""Units of translation work exchanged between diff, provider and merge."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List


class TaskKind(str, Enum):
    """Why a path needs translating."""
    MISSING = "missing"
    CHANGED = "changed"


@dataclass(frozen=True)
class TranslationTask:
    """One leaf path with its current base-language value."""
    path: str
    source_value: Any
    kind: TaskKind = TaskKind.MISSING

    @property
    def is_nested(self) -> bool:
        return "." in self.path


@dataclass(frozen=True)
class TranslationResult:
    """Provider output for one task; ``translated_value`` may still be raw JSON text."""
    path: str
    translated_value: Any


@dataclass
class TaskPlan:
    """Everything that needs translating in one target file."""
    missing: List[TranslationTask] = field(default_factory=list)
    changed: List[TranslationTask] = field(default_factory=list)
    baseline_missing: bool = False

    @property
    def tasks(self) -> List[TranslationTask]:
        return self.missing + self.changed

    def __len__(self) -> int:
        return len(self.missing) + len(self.changed)
