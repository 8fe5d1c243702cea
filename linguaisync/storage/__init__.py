"""Filesystem persistence for translation trees and snapshots."""

from .files import TranslationFileStore, dump_tree, read_json_tree, write_json_tree
from .snapshot import SNAPSHOT_SUFFIX, SnapshotStore

__all__ = [
    "SNAPSHOT_SUFFIX",
    "SnapshotStore",
    "TranslationFileStore",
    "dump_tree",
    "read_json_tree",
    "write_json_tree",
]
