"""Translation tree diffing, batching and merging."""

from .batching import DEFAULT_BATCH_SIZE, create_batches
from .diff import (
    canonical,
    collect_tasks,
    filter_changed_against_target,
    find_changed_keys,
    find_missing_keys,
    path_exists,
)
from .merge import (
    apply_results,
    expected_kinds,
    get_nested_property,
    parse_translated_value,
    set_nested_property,
)
from .tasks import TaskKind, TaskPlan, TranslationResult, TranslationTask
from .values import ValueKind, kind_of

__all__ = [
    "DEFAULT_BATCH_SIZE",
    "TaskKind",
    "TaskPlan",
    "TranslationResult",
    "TranslationTask",
    "ValueKind",
    "apply_results",
    "canonical",
    "collect_tasks",
    "create_batches",
    "expected_kinds",
    "filter_changed_against_target",
    "find_changed_keys",
    "find_missing_keys",
    "get_nested_property",
    "kind_of",
    "parse_translated_value",
    "path_exists",
    "set_nested_property",
]
