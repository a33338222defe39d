import pytest

from slinkykit.listutil import Ref, dereference_list, reference_list


@pytest.mark.parametrize(
    "items, expected",
    [
        ([], []),
        (["foo", "bar"], [Ref("foo"), Ref("bar")]),
    ],
)
def test_reference_list(items, expected):
    assert reference_list(items) == expected


@pytest.mark.parametrize(
    "items, expected",
    [
        ([], []),
        ([Ref("foo"), Ref("bar")], ["foo", "bar"]),
        ([None], []),
        ([Ref("foo"), None, Ref("bar")], ["foo", "bar"]),
    ],
)
def test_dereference_list(items, expected):
    assert dereference_list(items) == expected


def test_round_trip_preserves_items():
    items = [1, "two", (3,)]
    assert dereference_list(reference_list(items)) == items


def test_references_are_independent():
    refs = reference_list(["a", "b"])
    refs[0].value = "changed"
    assert refs[1].value == "b"
    assert dereference_list(refs) == ["changed", "b"]