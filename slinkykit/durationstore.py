"""A thread-safe keyed store of durations."""

from __future__ import annotations

import threading
from datetime import timedelta
from typing import Callable, Dict

Evaluator = Callable[[timedelta, timedelta], bool]


def greater(old: timedelta, new: timedelta) -> bool:
    """Prefer the new duration when it is larger."""
    return new > old


def less(old: timedelta, new: timedelta) -> bool:
    """Prefer the new duration when it is smaller."""
    return new < old


class DurationStore:
    """Stores one duration per key.

    When several durations are pushed to the same key before it is popped,
    ``evaluate(old, new)`` decides whether the new one replaces the old one.
    """

    def __init__(self, evaluate: Evaluator) -> None:
        self._evaluate = evaluate
        self._lock = threading.Lock()
        self._values: Dict[str, timedelta] = {}

    def push(self, key: str, value: timedelta) -> None:
        """Store value under key, or resolve it against the stored value."""
        with self._lock:
            if key not in self._values or self._evaluate(self._values[key], value):
                self._values[key] = value

    def pop(self, key: str) -> timedelta:
        """Remove and return the duration under key, or zero when absent."""
        with self._lock:
            return self._values.pop(key, timedelta(0))

    def peek(self, key: str) -> timedelta:
        """Return the duration under key without removing it, or zero."""
        with self._lock:
            return self._values.get(key, timedelta(0))