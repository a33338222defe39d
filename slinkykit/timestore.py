"""A thread-safe keyed store of points in time."""

from __future__ import annotations

import threading
from datetime import datetime, timezone
from typing import Callable, Dict

Evaluator = Callable[[datetime, datetime], bool]

ZERO_TIME = datetime(1, 1, 1, tzinfo=timezone.utc)


def greater(old: datetime, new: datetime) -> bool:
    """Prefer the new time when it is later."""
    return new > old


def less(old: datetime, new: datetime) -> bool:
    """Prefer the new time when it is earlier."""
    return new < old


class TimeStore:
    """Stores one time per key.

    When several times are pushed to the same key before it is popped,
    ``evaluate(old, new)`` decides whether the new one replaces the old one.
    Missing keys read as ZERO_TIME.
    """

    def __init__(self, evaluate: Evaluator) -> None:
        self._evaluate = evaluate
        self._lock = threading.Lock()
        self._values: Dict[str, datetime] = {}

    def push(self, key: str, value: datetime) -> None:
        """Store value under key, or resolve it against the stored value."""
        with self._lock:
            if key not in self._values or self._evaluate(self._values[key], value):
                self._values[key] = value

    def pop(self, key: str) -> datetime:
        """Remove and return the time under key, or ZERO_TIME when absent."""
        with self._lock:
            return self._values.pop(key, ZERO_TIME)

    def peek(self, key: str) -> datetime:
        """Return the time under key without removing it, or ZERO_TIME."""
        with self._lock:
            return self._values.get(key, ZERO_TIME)