"""
Structural comparison of translation trees.

Two questions are answered here:
- which base leaves have no counterpart in a target tree (missing keys)
- which base leaves changed since the last synchronized snapshot (changed keys)

Both walks emit one task per leaf, addressed by its dotted path.
"""

import json
from typing import Any, Dict, Iterable, List, Optional

from .tasks import TaskKind, TaskPlan, TranslationTask
from .values import ValueKind, is_object, kind_of


def join_path(parent: str, key: str) -> str:
    return f"{parent}.{key}" if parent else key


def canonical(value: Any) -> str:
    """Serialize a value so that object key order does not matter."""
    return json.dumps(value, sort_keys=True, ensure_ascii=False, separators=(",", ":"))


def find_missing_keys(base: Dict[str, Any], target: Dict[str, Any], path: str = "") -> List[TranslationTask]:
    """Return a Missing task for every base leaf that has no key in ``target``.

    A missing subtree is expanded so that each of its leaves gets its own
    task. When the key exists in ``target`` and either side is not an object,
    the key counts as present, even if the value types differ.
    """
    missing: List[TranslationTask] = []

    for key, value in base.items():
        full_path = join_path(path, key)
        kind = kind_of(value)

        if key not in target:
            if kind is ValueKind.OBJECT:
                missing.extend(find_missing_keys(value, {}, full_path))
            else:
                missing.append(TranslationTask(full_path, value, TaskKind.MISSING))
        elif kind is ValueKind.OBJECT and is_object(target[key]):
            missing.extend(find_missing_keys(value, target[key], full_path))

    return missing


def find_changed_keys(old_base: Dict[str, Any], new_base: Dict[str, Any], path: str = "") -> List[TranslationTask]:
    """Return a Changed task for every leaf whose value differs from ``old_base``.

    Keys new in ``new_base`` are not changes, and keys removed from it are not
    reported at all.
    """
    changed: List[TranslationTask] = []

    for key, new_value in new_base.items():
        if key not in old_base:
            continue

        full_path = join_path(path, key)
        old_value = old_base[key]

        if is_object(new_value) and is_object(old_value):
            changed.extend(find_changed_keys(old_value, new_value, full_path))
        elif canonical(old_value) != canonical(new_value):
            changed.append(TranslationTask(full_path, new_value, TaskKind.CHANGED))

    return changed


def path_exists(tree: Dict[str, Any], path: str) -> bool:
    node: Any = tree
    for segment in path.split("."):
        if not is_object(node) or segment not in node:
            return False
        node = node[segment]
    return True


def filter_changed_against_target(
    changed: Iterable[TranslationTask],
    target: Dict[str, Any],
    missing: Iterable[TranslationTask] = (),
) -> List[TranslationTask]:
    """Keep only Changed tasks whose path already exists in ``target``.

    A changed path that the target lacks is reported by the missing-key walk
    instead, so it is never emitted twice.
    """
    missing_paths = {task.path for task in missing}
    return [
        task for task in changed
        if task.path not in missing_paths and path_exists(target, task.path)
    ]


def collect_tasks(
    base: Dict[str, Any],
    target: Dict[str, Any],
    snapshot: Optional[Dict[str, Any]],
) -> TaskPlan:
    """Compute the full task list for one target file.

    Without a snapshot there is no baseline to compare against, so changed-key
    detection is skipped and the plan is flagged ``baseline_missing``.
    """
    missing = find_missing_keys(base, target)

    if snapshot is None:
        return TaskPlan(missing=missing, changed=[], baseline_missing=True)

    changed = filter_changed_against_target(find_changed_keys(snapshot, base), target, missing)
    return TaskPlan(missing=missing, changed=changed)
