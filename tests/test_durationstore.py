from datetime import timedelta

import pytest

from slinkykit.durationstore import DurationStore, greater, less

SECOND = timedelta(seconds=1)
MINUTE = timedelta(minutes=1)
HOUR = timedelta(hours=1)


@pytest.mark.parametrize(
    "key, value",
    [("foo", SECOND), ("foo", -MINUTE), ("bar", -HOUR), ("bar", MINUTE)],
)
def test_push_then_pop_returns_value(key, value):
    store = DurationStore(greater)
    store.push(key, value)
    assert store.pop(key) == value


def test_peek_sequence_keeps_greater():
    store = DurationStore(greater)
    steps = [
        ("foo", SECOND, SECOND),
        ("foo", -MINUTE, SECOND),
        ("foo", MINUTE, MINUTE),
        ("bar", -HOUR, -HOUR),
        ("bar", -MINUTE, -MINUTE),
        ("bar", -SECOND, -SECOND),
    ]
    for key, value, want in steps:
        store.push(key, value)
        assert store.peek(key) == want


def test_peek_does_not_remove():
    store = DurationStore(greater)
    store.push("foo", SECOND)
    assert store.peek("foo") == SECOND
    assert store.peek("foo") == SECOND
    assert store.pop("foo") == SECOND


def test_pop_sequence():
    store = DurationStore(greater)
    store.push("bar", MINUTE)
    store.push("baz", -HOUR)
    expected = [
        ("foo", timedelta(0)),
        ("foo", timedelta(0)),
        ("bar", MINUTE),
        ("bar", timedelta(0)),
        ("baz", -HOUR),
        ("baz", timedelta(0)),
    ]
    for key, want in expected:
        assert store.pop(key) == want


@pytest.mark.parametrize(
    "evaluate, old, new, want",
    [
        (greater, timedelta(0), SECOND, SECOND),
        (greater, SECOND, timedelta(0), SECOND),
        (less, timedelta(0), SECOND, timedelta(0)),
        (less, SECOND, timedelta(0), timedelta(0)),
    ],
)
def test_update_resolution(evaluate, old, new, want):
    store = DurationStore(evaluate)
    store.push("key", old)
    store.push("key", new)
    assert store.peek("key") == want


def test_comparators():
    assert greater(SECOND, MINUTE) is True
    assert greater(MINUTE, SECOND) is False
    assert less(MINUTE, SECOND) is True
    assert less(SECOND, MINUTE) is False