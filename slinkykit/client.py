"""An in-memory object store with API-server style semantics."""

from __future__ import annotations

import copy
import json
import secrets
import threading
import time
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple, TypeVar, Union

Manifest = Dict[str, Any]
T = TypeVar("T")

_SEED_RESOURCE_VERSION = "999"
_FIRST_RESOURCE_VERSION = "1"
_NAME_SUFFIX_ALPHABET = "bcdfghjklmnpqrstvwxz2456789"
_NAME_SUFFIX_LENGTH = 5
_BACKOFF_DURATION = 0.01
_BACKOFF_FACTOR = 5.0


class ApiError(Exception):
    """An error reported by the object store; causes name its reasons."""

    def __init__(self, message: str, causes: Iterable[str] = ()) -> None:
        super().__init__(message)
        self.causes = tuple(causes)


class NotFoundError(ApiError):
    """The requested object does not exist."""


class AlreadyExistsError(ApiError):
    """An object with the same kind, namespace and name already exists."""


class ConflictError(ApiError):
    """The object was modified since it was read."""


class InvalidError(ApiError):
    """The request or the object in it is malformed."""


def _metadata(obj: Manifest) -> Manifest:
    meta = obj.get("metadata")
    if meta is None:
        meta = {}
        obj["metadata"] = meta
    return meta


def _key(obj: Mapping[str, Any]) -> Tuple[str, str, str]:
    kind = obj.get("kind")
    if not kind:
        raise InvalidError("object has no kind")
    meta = obj.get("metadata") or {}
    return kind, meta.get("namespace") or "", meta.get("name") or ""


def _next_version(version: Optional[str]) -> str:
    if version and version.isdigit():
        return str(int(version) + 1)
    return _FIRST_RESOURCE_VERSION


def _merge_patch(target: Any, patch: Any) -> Any:
    if not isinstance(patch, Mapping):
        return copy.deepcopy(patch)
    result = dict(target) if isinstance(target, Mapping) else {}
    for key, value in patch.items():
        if value is None:
            result.pop(key, None)
        else:
            result[key] = _merge_patch(result.get(key), value)
    return result


def _matches(labels: Mapping[str, str], selector: Optional[Mapping[str, str]]) -> bool:
    if not selector:
        return True
    return all(labels.get(key) == value for key, value in selector.items())


class ObjectClient:
    """Stores object manifests keyed by kind, namespace and name.

    Seed objects get a resource version when they have none. Every write
    bumps the stored resource version; updates that carry a stale version
    raise ConflictError.
    """

    def __init__(self, *objects: Mapping[str, Any]) -> None:
        self._lock = threading.Lock()
        self._objects: Dict[Tuple[str, str, str], Manifest] = {}
        for obj in objects:
            stored = copy.deepcopy(dict(obj))
            meta = _metadata(stored)
            key = _key(stored)
            if not key[2]:
                raise InvalidError("seed object has no name")
            if key in self._objects:
                raise AlreadyExistsError(f'{key[0]} "{key[2]}" already exists')
            if not meta.get("resourceVersion"):
                meta["resourceVersion"] = _SEED_RESOURCE_VERSION
            self._objects[key] = stored

    def _generate_name(self, kind: str, namespace: str, prefix: str) -> str:
        while True:
            suffix = "".join(
                secrets.choice(_NAME_SUFFIX_ALPHABET) for _ in range(_NAME_SUFFIX_LENGTH)
            )
            name = prefix + suffix
            if (kind, namespace, name) not in self._objects:
                return name

    def create(self, obj: Mapping[str, Any]) -> Manifest:
        """Store a new object and return it as stored."""
        stored = copy.deepcopy(dict(obj))
        meta = _metadata(stored)
        if meta.get("resourceVersion"):
            raise InvalidError("resourceVersion can not be set for Create requests")
        with self._lock:
            kind, namespace, name = _key(stored)
            if not name:
                prefix = meta.get("generateName")
                if not prefix:
                    raise InvalidError("name or generateName is required")
                name = self._generate_name(kind, namespace, prefix)
                meta["name"] = name
            key = (kind, namespace, name)
            if key in self._objects:
                raise AlreadyExistsError(f'{kind} "{name}" already exists')
            meta["resourceVersion"] = _FIRST_RESOURCE_VERSION
            self._objects[key] = stored
            return copy.deepcopy(stored)

    def get(self, kind: str, namespace: str, name: str) -> Manifest:
        """Return a copy of the stored object."""
        with self._lock:
            stored = self._objects.get((kind, namespace or "", name))
            if stored is None:
                raise NotFoundError(f'{kind} "{name}" not found')
            return copy.deepcopy(stored)

    def update(self, obj: Mapping[str, Any]) -> Manifest:
        """Replace a stored object and return it with its new resource version."""
        replacement = copy.deepcopy(dict(obj))
        meta = _metadata(replacement)
        with self._lock:
            key = _key(replacement)
            current = self._objects.get(key)
            if current is None:
                raise NotFoundError(f'{key[0]} "{key[2]}" not found')
            current_version = current["metadata"].get("resourceVersion")
            given = meta.get("resourceVersion")
            if given and given != current_version:
                raise ConflictError(
                    f'{key[0]} "{key[2]}": the object has been modified; '
                    "please apply your changes to the latest version and try again"
                )
            meta["resourceVersion"] = _next_version(current_version)
            self._objects[key] = replacement
            return copy.deepcopy(replacement)

    def delete(self, obj: Mapping[str, Any]) -> None:
        """Remove the object with the same kind, namespace and name."""
        with self._lock:
            key = _key(obj)
            if self._objects.pop(key, None) is None:
                raise NotFoundError(f'{key[0]} "{key[2]}" not found')

    def patch(
        self, kind: str, namespace: str, name: str, data: Union[bytes, str, Mapping[str, Any]]
    ) -> Manifest:
        """Apply a JSON merge patch to a stored object and return the result."""
        if isinstance(data, (bytes, bytearray)):
            data = data.decode("utf-8")
        if isinstance(data, str):
            try:
                data = json.loads(data)
            except json.JSONDecodeError as err:
                raise InvalidError(f"invalid patch: {err}") from err
        if not isinstance(data, Mapping):
            raise InvalidError("patch must be a JSON object")
        with self._lock:
            key = (kind, namespace or "", name)
            current = self._objects.get(key)
            if current is None:
                raise NotFoundError(f'{kind} "{name}" not found')
            patched = _merge_patch(current, data)
            meta = _metadata(patched)
            meta["name"] = name
            if namespace:
                meta["namespace"] = namespace
            meta["resourceVersion"] = _next_version(current["metadata"].get("resourceVersion"))
            self._objects[key] = patched
            return copy.deepcopy(patched)

    def list(
        self,
        kind: str,
        namespace: Optional[str] = None,
        selector: Optional[Mapping[str, str]] = None,
    ) -> List[Manifest]:
        """Return copies of objects of kind, ordered by namespace and name."""
        with self._lock:
            found = [
                copy.deepcopy(obj)
                for (obj_kind, obj_namespace, _), obj in sorted(self._objects.items())
                if obj_kind == kind
                and (namespace is None or obj_namespace == namespace)
                and _matches(obj["metadata"].get("labels") or {}, selector)
            ]
        return found


def retry_on_conflict(fn: Callable[[], T], attempts: int = 4) -> T:
    """Call fn, retrying with exponential backoff while it raises ConflictError."""
    if attempts < 1:
        raise ValueError("attempts must be at least 1")
    delay = _BACKOFF_DURATION
    for attempt in range(1, attempts + 1):
        try:
            return fn()
        except ConflictError:
            if attempt == attempts:
                raise
            time.sleep(delay)
            delay *= _BACKOFF_FACTOR
    raise AssertionError("unreachable")