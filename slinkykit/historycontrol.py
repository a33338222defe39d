"""Management of controller revisions stored through an ObjectClient."""

from __future__ import annotations

import copy
import json
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .client import ApiError, InvalidError, NotFoundError, ObjectClient, retry_on_conflict

Manifest = Dict[str, Any]

KIND = "ControllerRevision"
API_VERSION = "apps/v1"

_SAFE_ALPHABET = "bcdfghjklmnpqrstvwxz2456789"
_MAX_PREFIX_LENGTH = 223
_FNV32_OFFSET = 2166136261
_FNV32_PRIME = 16777619


def _fnv32(data: bytes) -> int:
    value = _FNV32_OFFSET
    for byte in data:
        value = (value * _FNV32_PRIME) & 0xFFFFFFFF
        value ^= byte
    return value


def _data_bytes(data: Any) -> bytes:
    if data is None:
        return b""
    if isinstance(data, (bytes, bytearray)):
        return bytes(data)
    if isinstance(data, str):
        return data.encode("utf-8")
    return json.dumps(data, sort_keys=True, separators=(",", ":")).encode("utf-8")


def hash_controller_revision(revision: Mapping[str, Any], probe: Optional[int] = None) -> str:
    """Hash a revision's data, salted with probe, into a name-safe string."""
    payload = _data_bytes(revision.get("data"))
    if probe is not None:
        payload += str(probe).encode("ascii")
    digits = str(_fnv32(payload))
    return "".join(_SAFE_ALPHABET[ord(ch) % len(_SAFE_ALPHABET)] for ch in digits)


def controller_revision_name(prefix: str, hash_value: str) -> str:
    """Build a revision name from a parent name and a hash."""
    return f"{prefix[:_MAX_PREFIX_LENGTH]}-{hash_value}"


def get_controller_of(obj: Mapping[str, Any]) -> Optional[Manifest]:
    """Return the owner reference marked as controller, or None."""
    meta = obj.get("metadata") or {}
    for ref in meta.get("ownerReferences") or []:
        if ref.get("controller"):
            return ref
    return None


def _as_revision(revision: Mapping[str, Any]) -> Manifest:
    clone = copy.deepcopy(dict(revision))
    clone.setdefault("kind", KIND)
    clone.setdefault("apiVersion", API_VERSION)
    if clone.get("metadata") is None:
        clone["metadata"] = {}
    return clone


def _parent_meta(parent: Mapping[str, Any]) -> Mapping[str, Any]:
    return parent.get("metadata") or {}


class HistoryControl:
    """Lists, creates, updates, adopts and releases controller revisions."""

    def __init__(self, client: ObjectClient) -> None:
        self._client = client

    def list_controller_revisions(
        self, parent: Mapping[str, Any], selector: Optional[Mapping[str, str]]
    ) -> List[Manifest]:
        """Return revisions matching selector that parent owns or nobody controls."""
        meta = _parent_meta(parent)
        revisions = self._client.list(KIND, meta.get("namespace") or "", selector)
        owned = []
        for revision in revisions:
            ref = get_controller_of(revision)
            if ref is None or ref.get("uid") == meta.get("uid"):
                owned.append(revision)
        return owned

    def create_controller_revision(
        self,
        parent: Mapping[str, Any],
        revision: Mapping[str, Any],
        collision_count: Optional[int],
    ) -> Tuple[Manifest, int]:
        """Create revision under a hashed name derived from parent.

        On a name collision with different data the collision count is
        raised and creation retried. Returns the stored revision and the
        final collision count.
        """
        if collision_count is None:
            raise ValueError("collision_count should not be None")
        meta = _parent_meta(parent)
        namespace = meta.get("namespace") or ""
        clone = _as_revision(revision)
        while True:
            hash_value = hash_controller_revision(revision, collision_count)
            clone["metadata"]["name"] = controller_revision_name(meta.get("name") or "", hash_value)
            created = copy.deepcopy(clone)
            created["metadata"]["namespace"] = namespace
            created["metadata"].pop("resourceVersion", None)
            try:
                return self._client.create(created), collision_count
            except ApiError as err:
                if err.__class__.__name__ != "AlreadyExistsError":
                    raise
            exists = self._client.get(KIND, namespace, clone["metadata"]["name"])
            if exists.get("data") == clone.get("data"):
                return exists, collision_count
            collision_count += 1

    def _refresh(self, namespace: str, name: str) -> Optional[Manifest]:
        try:
            return self._client.get(KIND, namespace, name)
        except ApiError:
            return None

    def update_controller_revision(
        self, revision: Mapping[str, Any], new_revision: int
    ) -> Manifest:
        """Set the revision number, retrying on conflicts."""
        clone = _as_revision(revision)
        namespace = clone["metadata"].get("namespace") or ""
        name = clone["metadata"].get("name") or ""

        def attempt() -> None:
            nonlocal clone
            if clone.get("revision") == new_revision:
                return
            clone["revision"] = new_revision
            try:
                clone = self._client.update(clone)
            except ApiError:
                latest = self._refresh(namespace, name)
                if latest is not None:
                    clone = latest
                raise

        retry_on_conflict(attempt)
        return clone

    def delete_controller_revision(self, revision: Mapping[str, Any]) -> None:
        """Delete the revision."""
        self._client.delete(_as_revision(revision))

    def adopt_controller_revision(
        self,
        parent: Mapping[str, Any],
        parent_api_version: str,
        parent_kind: str,
        revision: Mapping[str, Any],
    ) -> Manifest:
        """Make parent the controlling owner of an uncontrolled revision."""
        meta = _parent_meta(parent)
        clone = _as_revision(revision)
        namespace = clone["metadata"].get("namespace") or ""
        name = clone["metadata"].get("name") or ""

        def attempt() -> None:
            nonlocal clone
            owner = get_controller_of(clone)
            if owner is not None:
                raise ValueError(f"attempt to adopt revision owned by {owner}")
            rev_meta = clone["metadata"]
            rev_meta["ownerReferences"] = [
                *(rev_meta.get("ownerReferences") or []),
                {
                    "apiVersion": parent_api_version,
                    "kind": parent_kind,
                    "name": meta.get("name") or "",
                    "uid": meta.get("uid") or "",
                    "controller": True,
                    "blockOwnerDeletion": True,
                },
            ]
            try:
                clone = self._client.update(clone)
            except ApiError:
                latest = self._refresh(namespace, name)
                if latest is not None:
                    clone = latest
                raise

        retry_on_conflict(attempt)
        return clone

    def release_controller_revision(
        self, parent: Mapping[str, Any], revision: Mapping[str, Any]
    ) -> Optional[Manifest]:
        """Drop parent's owner references from revision.

        Returns None when the revision is gone or the update is invalid.
        """
        meta = _parent_meta(parent)
        clone = _as_revision(revision)
        namespace = clone["metadata"].get("namespace") or ""
        name = clone["metadata"].get("name") or ""

        def attempt() -> None:
            nonlocal clone
            owner = get_controller_of(clone)
            if owner is not None:
                raise ValueError(f"attempt to adopt revision owned by {owner}")
            rev_meta = clone["metadata"]
            owners = [
                ref
                for ref in rev_meta.get("ownerReferences") or []
                if ref.get("uid") != meta.get("uid")
            ]
            if owners:
                rev_meta["ownerReferences"] = owners
            else:
                rev_meta.pop("ownerReferences", None)
            try:
                clone = self._client.update(clone)
            except ApiError:
                latest = self._refresh(namespace, name)
                if latest is not None:
                    clone = latest
                raise

        try:
            retry_on_conflict(attempt)
        except (NotFoundError, InvalidError):
            return None
        return clone