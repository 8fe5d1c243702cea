"""
Writing translated values back into a target tree.

Only the paths named by results are touched; every other key of the target
is left exactly as it was loaded.
"""

import json
from typing import Any, Dict, Iterable, List, Mapping, Optional

import structlog

from linguaisync.errors import LinguaSyncError, MergeConflictError, MergeError

from .tasks import TranslationResult, TranslationTask
from .values import ValueKind, is_object, kind_of

logger = structlog.get_logger(__name__)

_MISSING = object()


def split_path(path: str) -> List[str]:
    if not isinstance(path, str) or not path:
        raise MergeError("Empty translation path", path=str(path))

    segments = path.split(".")
    if any(not segment for segment in segments):
        raise MergeError(f"Malformed translation path '{path}'", path=path)
    return segments


def set_nested_property(tree: Dict[str, Any], path: str, value: Any, strict: bool = False) -> Dict[str, Any]:
    """Set ``value`` at dotted ``path``, creating intermediate objects.

    This is destructive: an existing non-object value sitting where an
    intermediate object is needed gets replaced by a fresh object, dropping
    the old value. Pass ``strict=True`` to raise MergeConflictError instead.

    Mutates and returns ``tree``.
    """
    segments = split_path(path)
    current = tree

    for segment in segments[:-1]:
        existing = current.get(segment, _MISSING)
        if not is_object(existing):
            if existing is not _MISSING:
                if strict:
                    raise MergeConflictError(
                        f"Cannot write '{path}': '{segment}' holds a non-object value",
                        path=path,
                        segment=segment,
                    )
                logger.warning("Overwriting non-object value with object", path=path, segment=segment)
            current[segment] = {}
        current = current[segment]

    current[segments[-1]] = value
    return tree


def get_nested_property(tree: Dict[str, Any], path: str, default: Any = None) -> Any:
    node: Any = tree
    for segment in path.split("."):
        if not is_object(node) or segment not in node:
            return default
        node = node[segment]
    return node


def _numbered_to_list(value: Dict[str, Any]) -> Any:
    keys = list(value.keys())
    if keys and keys == [str(i) for i in range(len(keys))]:
        return [value[key] for key in keys]
    return value


def parse_translated_value(raw: Any) -> Any:
    """Turn a provider translation back into a tree value.

    Strings that do not start with ``{`` or ``[`` are returned verbatim, and so
    is anything that fails to parse as JSON. Objects keyed ``"0".."N-1"`` in
    order are turned into lists, since providers sometimes answer an array
    with a numbered object.
    """
    if isinstance(raw, dict):
        return _numbered_to_list(raw)
    if not isinstance(raw, str):
        return raw

    if not raw.startswith("{") and not raw.startswith("["):
        return raw

    try:
        parsed = json.loads(raw)
    except ValueError:
        return raw

    if isinstance(parsed, dict):
        return _numbered_to_list(parsed)
    return parsed


def expected_kinds(tasks: Iterable[TranslationTask]) -> Dict[str, ValueKind]:
    """Map each task path to the shape its translation must have."""
    return {task.path: kind_of(task.source_value) for task in tasks}


def apply_results(
    tree: Dict[str, Any],
    results: Iterable[TranslationResult],
    kinds: Optional[Mapping[str, ValueKind]] = None,
    strict: bool = False,
) -> List[str]:
    """Merge ``results`` into ``tree`` and return the paths that were applied.

    With ``kinds`` given, only paths it names are written, and only when the
    parsed translation has the same kind as the source value. Results that
    are empty, unrequested, of the wrong shape or cannot be written are
    skipped with a warning.
    """
    applied: List[str] = []

    for result in results:
        if kinds is not None and result.path not in kinds:
            logger.warning("Skipping translation for unrequested key", path=result.path)
            continue

        value = parse_translated_value(result.translated_value)
        if value is None:
            logger.warning("Skipping empty translation", path=result.path)
            continue

        if kinds is not None and kind_of(value) is not kinds[result.path]:
            logger.warning(
                "Skipping translation with mismatched shape",
                path=result.path,
                expected=kinds[result.path].value,
                received=kind_of(value).value,
            )
            continue

        try:
            set_nested_property(tree, result.path, value, strict=strict)
            applied.append(result.path)
        except LinguaSyncError as e:
            logger.warning("Could not apply translation", path=result.path, error=str(e))

    return applied
