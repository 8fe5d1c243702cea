"""
Pytest configuration and fixtures for linguaisync tests.
"""

import json
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence

import pytest

from linguaisync.config import Settings
from linguaisync.errors import ConfigurationError
from linguaisync.provider import TranslationProvider
from linguaisync.storage import dump_tree
from linguaisync.tree import TranslationResult, TranslationTask


class FakeProvider(TranslationProvider):
    """Provider double: answers ``<language>:<source>`` for every task.

    Batches whose 1-based number is in ``fail_batches`` return nothing,
    mimicking a failed request.
    """

    name = "fake"

    def __init__(self, fail_batches: Sequence[int] = (), ready: bool = True,
                 on_batch: Optional[Callable[[int], None]] = None):
        self.fail_batches = set(fail_batches)
        self.ready = ready
        self.on_batch = on_batch
        self.calls: List[Dict[str, Any]] = []

    def ensure_ready(self) -> None:
        if not self.ready:
            raise ConfigurationError("missing key", config_key="openai_api_key")

    def translate_value(self, language: str, value: Any) -> str:
        if isinstance(value, str):
            return f"{language}:{value}"
        if isinstance(value, list):
            return json.dumps([f"{language}:{item}" for item in value], ensure_ascii=False)
        return json.dumps(value)

    async def translate(self, batch: Sequence[TranslationTask], language: str,
                        language_name: str) -> List[TranslationResult]:
        self.calls.append({"language": language, "language_name": language_name, "paths": [t.path for t in batch]})
        batch_number = len(self.calls)
        if self.on_batch:
            self.on_batch(batch_number)
        if batch_number in self.fail_batches:
            return []
        return [TranslationResult(t.path, self.translate_value(language, t.source_value)) for t in batch]


@pytest.fixture
def locales_dir(tmp_path: Path) -> Path:
    path = tmp_path / "locales"
    path.mkdir()
    return path


@pytest.fixture
def write_tree(locales_dir: Path):
    """Helper to write a translation tree to ``<locales>/<language>/<filename>``."""
    def _write(language: str, tree: Dict[str, Any], filename: str = "translation.json") -> Path:
        path = locales_dir / language / filename
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(dump_tree(tree), encoding="utf-8")
        return path
    return _write


@pytest.fixture
def read_tree(locales_dir: Path):
    def _read(language: str, filename: str = "translation.json") -> Dict[str, Any]:
        return json.loads((locales_dir / language / filename).read_text(encoding="utf-8"))
    return _read


@pytest.fixture
def settings(locales_dir: Path) -> Settings:
    """Test configuration without pacing delay."""
    return Settings(
        locales_dir=locales_dir,
        base_language="en",
        translation_files=["translation.json"],
        batch_size=20,
        batch_delay=0,
        openai_api_key="test-key",
    )


@pytest.fixture
def fake_provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture
def sample_tree() -> Dict[str, Any]:
    return {
        "app": {"title": "My App", "tagline": "Do more"},
        "menu": {
            "items": {"save": "Save", "open": "Open"},
            "count": 3,
        },
        "days": ["Mon", "Tue"],
        "empty": None,
    }
