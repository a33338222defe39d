"""Slow-start batched execution of a fallible function."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Callable

_MAX_WORKERS = 32


class SlowStartError(Exception):
    """Raised when a call in a batch fails; carries the success count."""

    def __init__(self, successes: int, error: BaseException) -> None:
        super().__init__(str(error))
        self.successes = successes
        self.error = error


def slow_start_batch(count: int, initial_batch_size: int, fn: Callable[[int], object]) -> int:
    """Call fn(index) count times in batches that double after each success.

    Calls in a batch run concurrently. When any call in a batch raises, the
    remaining batches are skipped and SlowStartError is raised with the number
    of successful calls and the first error seen. Returns the number of
    successful calls otherwise.
    """
    remaining = count
    successes = 0
    index = 0
    batch_size = min(remaining, initial_batch_size)
    while batch_size > 0:
        errors = []
        with ThreadPoolExecutor(max_workers=min(batch_size, _MAX_WORKERS)) as pool:
            futures = [pool.submit(fn, i) for i in range(index, index + batch_size)]
            for future in as_completed(futures):
                error = future.exception()
                if error is not None:
                    errors.append(error)
        index += batch_size
        successes += batch_size - len(errors)
        if errors:
            raise SlowStartError(successes, errors[0]) from errors[0]
        remaining -= batch_size
        batch_size = min(2 * batch_size, remaining)
    return successes