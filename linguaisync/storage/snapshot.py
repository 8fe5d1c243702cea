"""Snapshots of the base tree as of the last successful sync.

The snapshot is the "old" side of changed-key detection. It lives next to
the base file as ``<locales_dir>/<base_language>/<filename>.bak``.
"""

from pathlib import Path
from typing import Any, Dict, Optional

import structlog

from .files import read_json_tree, write_json_tree

logger = structlog.get_logger(__name__)

SNAPSHOT_SUFFIX = ".bak"


class SnapshotStore:
    """Per-file snapshot persistence for one base language."""

    def __init__(self, locales_dir: Path, base_language: str = "en"):
        self.locales_dir = Path(locales_dir)
        self.base_language = base_language

    def path_for(self, filename: str) -> Path:
        return self.locales_dir / self.base_language / f"{filename}{SNAPSHOT_SUFFIX}"

    def exists(self, filename: str) -> bool:
        return self.path_for(filename).is_file()

    async def load(self, filename: str) -> Optional[Dict[str, Any]]:
        """Return the stored snapshot, or None when there is no usable baseline yet."""
        return await read_json_tree(self.path_for(filename))

    async def save(self, filename: str, tree: Dict[str, Any]) -> None:
        path = self.path_for(filename)
        await write_json_tree(path, tree)
        logger.debug("Snapshot saved", file=str(path))
