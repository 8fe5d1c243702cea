"""Translation provider contract."""

import json
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Sequence

from linguaisync.tree import TranslationResult, TranslationTask


def stringify_source(value: Any) -> str:
    """Text sent to the provider for a source value; non-strings go as JSON."""
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False)


def build_request_items(batch: Sequence[TranslationTask]) -> List[Dict[str, str]]:
    return [{"key": task.path, "english": stringify_source(task.source_value)} for task in batch]


class TranslationProvider(ABC):
    """Turns a batch of tasks into translation results.

    Implementations must never raise from ``translate``: any failure resolves
    to an empty list so the batch simply contributes nothing.
    """

    name: str = "provider"

    def ensure_ready(self) -> None:
        """Raise ConfigurationError when the provider cannot be used at all."""
        return None

    @abstractmethod
    async def translate(
        self,
        batch: Sequence[TranslationTask],
        language: str,
        language_name: str,
    ) -> List[TranslationResult]:
        """Translate ``batch`` into ``language`` (displayed as ``language_name``)."""

    async def close(self) -> None:
        return None
