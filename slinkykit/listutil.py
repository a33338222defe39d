"""Conversions between plain lists and lists of mutable references."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Iterable, List, Optional, TypeVar

T = TypeVar("T")


@dataclass
class Ref(Generic[T]):
    """A mutable box holding a single value."""

    value: T


def reference_list(items: Iterable[T]) -> List[Ref[T]]:
    """Wrap every item in its own reference."""
    return [Ref(item) for item in items]


def dereference_list(items: Iterable[Optional[Ref[T]]]) -> List[T]:
    """Unwrap references, skipping empty (None) entries."""
    return [ref.value for ref in items if ref is not None]