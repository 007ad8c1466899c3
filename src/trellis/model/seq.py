"""Ordered-sequence helpers over immutable tuples."""

from typing import TypeVar

T = TypeVar("T")


def clamp_index(index: int, length: int) -> int:
    """Clamp index to an insertion point in [0, length]."""
    return max(0, min(index, length))


def insert_at(seq: tuple[T, ...], index: int, item: T) -> tuple[T, ...]:
    """Return seq with item inserted at index (clamped)."""
    pos = clamp_index(index, len(seq))
    return seq[:pos] + (item,) + seq[pos:]


def remove_at(seq: tuple[T, ...], index: int) -> tuple[tuple[T, ...], T]:
    """Return (seq without the item at index, the removed item)."""
    return seq[:index] + seq[index + 1 :], seq[index]


def remove_where(seq: tuple[T, ...], predicate) -> tuple[T, ...]:
    """Return seq without the items matching predicate."""
    return tuple(item for item in seq if not predicate(item))


def replace_where(seq: tuple[T, ...], predicate, make) -> tuple[T, ...]:
    """Return seq with matching items replaced by make(item)."""
    return tuple(make(item) if predicate(item) else item for item in seq)
