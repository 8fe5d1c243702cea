"""Tagged classification of translation tree values."""

from enum import Enum
from typing import Any


class ValueKind(Enum):
    """Shape of a value stored in a translation tree."""
    SCALAR = "scalar"
    ARRAY = "array"
    OBJECT = "object"


def kind_of(value: Any) -> ValueKind:
    """Classify a decoded JSON value.

    ``None`` is a scalar and arrays are leaves; only mappings are walked.
    """
    if isinstance(value, dict):
        return ValueKind.OBJECT
    if isinstance(value, list):
        return ValueKind.ARRAY
    return ValueKind.SCALAR


def is_object(value: Any) -> bool:
    return kind_of(value) is ValueKind.OBJECT


def is_leaf(value: Any) -> bool:
    return kind_of(value) is not ValueKind.OBJECT
