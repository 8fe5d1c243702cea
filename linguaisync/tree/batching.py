"""Splitting task lists into provider-sized batches."""

from typing import List, Sequence, TypeVar

from linguaisync.errors import ValidationError

T = TypeVar("T")

DEFAULT_BATCH_SIZE = 20


def create_batches(items: Sequence[T], batch_size: int = DEFAULT_BATCH_SIZE) -> List[List[T]]:
    """Split ``items`` into contiguous chunks of at most ``batch_size``, keeping order."""
    if batch_size < 1:
        raise ValidationError("batch_size must be at least 1", field="batch_size", value=batch_size)

    return [list(items[i:i + batch_size]) for i in range(0, len(items), batch_size)]
