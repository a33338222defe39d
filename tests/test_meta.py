import pytest

from slinkykit.meta import NamespacedName, key_func


@pytest.mark.parametrize(
    "obj, expected",
    [
        ({}, "/"),
        ({"metadata": {"name": "nodeSetTest", "namespace": "slurm"}}, "slurm/nodeSetTest"),
        ({"metadata": {"name": "foo"}}, "/foo"),
    ],
)
def test_key_func(obj, expected):
    assert key_func(obj) == expected


def test_namespaced_name_str():
    assert str(NamespacedName("default", "foo")) == "default/foo"
    assert str(NamespacedName()) == "/"


def test_namespaced_name_is_hashable_key():
    names = {NamespacedName("a", "b"): 1}
    assert names[NamespacedName("a", "b")] == 1