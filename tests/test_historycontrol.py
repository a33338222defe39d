import pytest

from slinkykit.client import NotFoundError, ObjectClient
from slinkykit.historycontrol import (
    HistoryControl,
    controller_revision_name,
    get_controller_of,
    hash_controller_revision,
)


def _replica_set():
    return {
        "kind": "ReplicaSet",
        "apiVersion": "apps/v1",
        "metadata": {"namespace": "default", "name": "foo", "labels": {"foo": "bar"}},
        "spec": {"selector": {"matchLabels": {"foo": "bar"}}},
    }


def _revision(**extra):
    rev = {
        "kind": "ControllerRevision",
        "metadata": {"namespace": "default", "name": "foo", "labels": {"foo": "bar"}},
        "revision": 1,
    }
    rev.update(extra)
    return rev


def _parent():
    return {"metadata": {"namespace": "default", "name": "FooResource", "uid": "00000"}}


def test_list_empty():
    control = HistoryControl(ObjectClient())
    assert control.list_controller_revisions(_replica_set(), {"foo": "bar"}) == []


def test_list_revisions():
    control = HistoryControl(ObjectClient(_replica_set(), _revision()))
    got = control.list_controller_revisions(_replica_set(), {"foo": "bar"})
    assert [r["metadata"]["name"] for r in got] == ["foo"]
    assert got[0]["revision"] == 1


def test_list_skips_revisions_controlled_by_others():
    owned = _revision()
    owned["metadata"]["ownerReferences"] = [{"uid": "other", "controller": True}]
    control = HistoryControl(ObjectClient(owned))
    assert control.list_controller_revisions(_replica_set(), {"foo": "bar"}) == []


def test_create_revision():
    control = HistoryControl(ObjectClient())
    created, count = control.create_controller_revision(_replica_set(), _revision(), 0)
    assert count == 0
    assert created["metadata"]["namespace"] == "default"
    assert created["metadata"]["name"] == controller_revision_name(
        "foo", hash_controller_revision(_revision(), 0)
    )


def test_create_requires_collision_count():
    with pytest.raises(ValueError):
        HistoryControl(ObjectClient()).create_controller_revision(_replica_set(), _revision(), None)


def test_create_returns_existing_with_equal_data():
    rev = _revision(data={"a": 1})
    control = HistoryControl(ObjectClient())
    first, _ = control.create_controller_revision(_replica_set(), rev, 0)
    second, count = control.create_controller_revision(_replica_set(), rev, 0)
    assert count == 0
    assert second == first


def test_create_collision_bumps_count():
    rev = _revision(data={"a": 1})
    taken = controller_revision_name("foo", hash_controller_revision(rev, 0))
    blocker = _revision(data={"a": 2})
    blocker["metadata"]["name"] = taken
    control = HistoryControl(ObjectClient(blocker))
    created, count = control.create_controller_revision(_replica_set(), rev, 0)
    assert count == 1
    assert created["metadata"]["name"] == controller_revision_name(
        "foo", hash_controller_revision(rev, 1)
    )


def test_update_revision():
    control = HistoryControl(ObjectClient(_revision()))
    updated = control.update_controller_revision(_revision(), 2)
    assert updated["revision"] == 2


def test_update_revision_missing_raises():
    with pytest.raises(NotFoundError):
        HistoryControl(ObjectClient()).update_controller_revision(_revision(), 2)


def test_delete_not_found():
    rev = {"kind": "ControllerRevision", "metadata": {"namespace": "default", "name": "foo"}}
    with pytest.raises(NotFoundError):
        HistoryControl(ObjectClient()).delete_controller_revision(rev)


def test_delete_found():
    rev = {"kind": "ControllerRevision", "metadata": {"namespace": "default", "name": "foo"}}
    client = ObjectClient(rev)
    HistoryControl(client).delete_controller_revision(rev)
    with pytest.raises(NotFoundError):
        client.get("ControllerRevision", "default", "foo")


def test_adopt_match():
    rev = {"kind": "ControllerRevision", "metadata": {"namespace": "default", "name": "foo"}}
    control = HistoryControl(ObjectClient(rev))
    got = control.adopt_controller_revision(_parent(), "foo/v1", "Foo", rev)
    assert got["metadata"] == {
        "namespace": "default",
        "name": "foo",
        "resourceVersion": "1000",
        "ownerReferences": [
            {
                "apiVersion": "foo/v1",
                "kind": "Foo",
                "name": "FooResource",
                "uid": "00000",
                "controller": True,
                "blockOwnerDeletion": True,
            }
        ],
    }


def test_adopt_already_controlled_raises():
    rev = {
        "kind": "ControllerRevision",
        "metadata": {
            "namespace": "default",
            "name": "foo",
            "ownerReferences": [{"uid": "other", "controller": True}],
        },
    }
    control = HistoryControl(ObjectClient(rev))
    with pytest.raises(ValueError):
        control.adopt_controller_revision(_parent(), "foo/v1", "Foo", rev)


def test_release_found():
    rev = {
        "kind": "ControllerRevision",
        "metadata": {"namespace": "default", "name": "foo", "resourceVersion": "1000"},
    }
    control = HistoryControl(ObjectClient(rev))
    got = control.release_controller_revision(_parent(), rev)
    assert got["metadata"] == {"namespace": "default", "name": "foo", "resourceVersion": "1001"}


def test_release_missing_returns_none():
    rev = {"kind": "ControllerRevision", "metadata": {"namespace": "default", "name": "foo"}}
    assert HistoryControl(ObjectClient()).release_controller_revision(_parent(), rev) is None


def test_hash_depends_on_probe_and_is_stable():
    rev = _revision(data={"a": 1})
    assert hash_controller_revision(rev, 0) == hash_controller_revision(rev, 0)
    assert hash_controller_revision(rev, 0) != hash_controller_revision(rev, 1)
    assert set(hash_controller_revision(rev, 7)) <= set("bcdfghjklmnpqrstvwxz2456789")


def test_controller_revision_name_truncates_prefix():
    name = controller_revision_name("x" * 300, "abc")
    assert name == "x" * 223 + "-abc"
    assert controller_revision_name("foo", "abc") == "foo-abc"


def test_get_controller_of():
    ref = {"uid": "1", "controller": True}
    obj = {"metadata": {"ownerReferences": [{"uid": "0"}, ref]}}
    assert get_controller_of(obj) == ref
    assert get_controller_of({"metadata": {}}) is None