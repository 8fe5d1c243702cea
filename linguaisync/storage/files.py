"""Reading and writing translation trees under ``<locales_dir>/<language>/<file>``."""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import aiofiles
import aiofiles.os
import structlog

from linguaisync.errors import TreeLoadError

logger = structlog.get_logger(__name__)


def dump_tree(tree: Dict[str, Any]) -> str:
    """Serialize a tree the way it is stored on disk: 2-space indent, trailing newline."""
    return json.dumps(tree, indent=2, ensure_ascii=False) + "\n"


async def read_json_tree(path: Path) -> Optional[Dict[str, Any]]:
    """Read a JSON object from ``path``.

    Returns None when the file is absent, unreadable, not valid JSON or not
    a JSON object.
    """
    try:
        async with aiofiles.open(path, "r", encoding="utf-8") as f:
            content = await f.read()
    except FileNotFoundError:
        return None
    except OSError as e:
        logger.warning("Could not read translation file", file=str(path), error=str(e))
        return None

    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        logger.warning("Invalid JSON in translation file", file=str(path), line=e.lineno, column=e.colno)
        return None

    if not isinstance(data, dict):
        logger.warning("Translation file does not contain a JSON object", file=str(path))
        return None

    return data


async def write_json_tree(path: Path, tree: Dict[str, Any]) -> None:
    """Write ``tree`` to a temporary sibling, then move it over ``path``."""
    content = dump_tree(tree)
    await aiofiles.os.makedirs(path.parent, exist_ok=True)
    temp_path = path.with_name(f".{path.name}.tmp")
    try:
        async with aiofiles.open(temp_path, "w", encoding="utf-8") as f:
            await f.write(content)
        await aiofiles.os.replace(temp_path, path)
    except OSError:
        if await aiofiles.os.path.exists(temp_path):
            await aiofiles.os.remove(temp_path)
        raise


class TranslationFileStore:
    """Access to the per-language translation files of one locales directory."""

    def __init__(self, locales_dir: Path, base_language: str = "en"):
        self.locales_dir = Path(locales_dir)
        self.base_language = base_language

    def path_for(self, language: str, filename: str) -> Path:
        return self.locales_dir / language / filename

    async def load(self, language: str, filename: str) -> Dict[str, Any]:
        """Load a tree; a missing or broken file reads as an empty tree."""
        path = self.path_for(language, filename)
        tree = await read_json_tree(path)
        if tree is None:
            logger.warning("Could not load translation file, using empty tree", file=str(path))
            return {}
        return tree

    async def save(self, language: str, filename: str, tree: Dict[str, Any]) -> Path:
        path = self.path_for(language, filename)
        await write_json_tree(path, tree)
        logger.debug("Saved translation file", file=str(path))
        return path

    async def available_languages(self) -> List[str]:
        """Language directories under the locales dir, base language excluded.

        Raises:
            TreeLoadError: if the locales directory cannot be listed
        """
        try:
            names = sorted(await aiofiles.os.listdir(self.locales_dir))
        except OSError as e:
            raise TreeLoadError(
                f"Cannot read locales directory {self.locales_dir}: {e}",
                path=str(self.locales_dir),
                previous_error=e,
            ) from e

        return [
            name for name in names
            if name != self.base_language and await aiofiles.os.path.isdir(self.locales_dir / name)
        ]

    async def available_files(self, translation_files: Sequence[str]) -> List[str]:
        """The configured files that exist for the base language, in configured order."""
        return [
            filename for filename in translation_files
            if await aiofiles.os.path.isfile(self.path_for(self.base_language, filename))
        ]
