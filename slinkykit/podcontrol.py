"""Creating, deleting and patching pods on behalf of a controller."""

from __future__ import annotations

import copy
import logging
import re
import threading
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from .client import ApiError, NotFoundError, ObjectClient

Manifest = Dict[str, Any]

logger = logging.getLogger(__name__)

EVENT_TYPE_NORMAL = "Normal"
EVENT_TYPE_WARNING = "Warning"
FAILED_CREATE_POD_REASON = "FailedCreate"
SUCCESSFUL_CREATE_POD_REASON = "SuccessfulCreate"
FAILED_DELETE_POD_REASON = "FailedDelete"
SUCCESSFUL_DELETE_POD_REASON = "SuccessfulDelete"
NAMESPACE_TERMINATING_CAUSE = "NamespaceTerminating"

_POD_KIND = "Pod"
_POD_API_VERSION = "v1"
_DNS1123_SUBDOMAIN_MAX_LENGTH = 253
_DNS1123_SUBDOMAIN_RE = re.compile(
    r"[a-z0-9]([-a-z0-9]*[a-z0-9])?(\.[a-z0-9]([-a-z0-9]*[a-z0-9])?)*"
)


class EventRecorder:
    """Collects events as (type, reason, message) tuples."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.events: List[Tuple[str, str, str]] = []

    def event(self, obj: Any, event_type: str, reason: str, message: str) -> None:
        """Record an event about obj."""
        with self._lock:
            self.events.append((event_type, reason, message))


def _is_valid_pod_name_prefix(prefix: str) -> bool:
    if len(prefix) > 1 and prefix.endswith("-"):
        prefix = prefix[:-1] + "a"
    return (
        len(prefix) <= _DNS1123_SUBDOMAIN_MAX_LENGTH
        and _DNS1123_SUBDOMAIN_RE.fullmatch(prefix) is not None
    )


def _pods_prefix(controller_name: str) -> str:
    prefix = f"{controller_name}-"
    return prefix if _is_valid_pod_name_prefix(prefix) else controller_name


def _object_meta(obj: Any) -> Optional[Mapping[str, Any]]:
    if not isinstance(obj, Mapping):
        return None
    meta = obj.get("metadata")
    return meta if isinstance(meta, Mapping) else None


def validate_controller_ref(controller_ref: Optional[Mapping[str, Any]]) -> None:
    """Raise ValueError unless controller_ref is a complete controlling reference."""
    if controller_ref is None:
        raise ValueError("controllerRef is None")
    if not controller_ref.get("apiVersion"):
        raise ValueError("controllerRef has empty APIVersion")
    if not controller_ref.get("kind"):
        raise ValueError("controllerRef has empty Kind")
    if not controller_ref.get("controller"):
        raise ValueError("controllerRef.Controller is not set to true")
    if not controller_ref.get("blockOwnerDeletion"):
        raise ValueError("controllerRef.BlockOwnerDeletion is not set")


def get_pod_from_template(
    template: Optional[Mapping[str, Any]],
    parent: Any,
    controller_ref: Optional[Mapping[str, Any]] = None,
) -> Manifest:
    """Build a pod manifest from a pod template owned by parent."""
    parent_meta = _object_meta(parent)
    if parent_meta is None:
        raise ValueError("parent object does not have metadata")
    template = template or {}
    template_meta = template.get("metadata") or {}
    metadata: Manifest = {
        "labels": dict(template_meta.get("labels") or {}),
        "annotations": dict(template_meta.get("annotations") or {}),
        "generateName": _pods_prefix(parent_meta.get("name") or ""),
        "finalizers": list(template_meta.get("finalizers") or []),
    }
    if controller_ref is not None:
        metadata["ownerReferences"] = [dict(controller_ref)]
    return {
        "kind": _POD_KIND,
        "apiVersion": _POD_API_VERSION,
        "metadata": metadata,
        "spec": copy.deepcopy(template.get("spec") or {}),
    }


class PodControl:
    """Performs pod operations through a client and records events."""

    def __init__(self, client: ObjectClient, recorder: EventRecorder) -> None:
        self._client = client
        self._recorder = recorder

    def create_pods(
        self,
        namespace: str,
        template: Optional[Mapping[str, Any]],
        obj: Any,
        controller_ref: Optional[Mapping[str, Any]],
    ) -> Manifest:
        """Create a pod from template controlled by obj."""
        return self.create_pods_with_generate_name(namespace, template, obj, controller_ref, "")

    def create_pods_with_generate_name(
        self,
        namespace: str,
        template: Optional[Mapping[str, Any]],
        obj: Any,
        controller_ref: Optional[Mapping[str, Any]],
        generate_name: str,
    ) -> Manifest:
        """Create a pod from template, optionally overriding its name prefix."""
        validate_controller_ref(controller_ref)
        pod = get_pod_from_template(template, obj, controller_ref)
        pod["metadata"]["namespace"] = namespace
        if generate_name:
            pod["metadata"]["generateName"] = generate_name
        return self._create(pod, obj)

    def create_this_pod(self, pod: Optional[Mapping[str, Any]], obj: Any) -> Manifest:
        """Create the given pod on behalf of obj."""
        if pod is None:
            raise ValueError("pod cannot be None")
        manifest = copy.deepcopy(dict(pod))
        manifest.setdefault("kind", _POD_KIND)
        manifest.setdefault("apiVersion", _POD_API_VERSION)
        return self._create(manifest, obj)

    def _create(self, pod: Manifest, obj: Any) -> Manifest:
        meta = pod.get("metadata") or {}
        if not meta.get("labels"):
            raise ValueError("unable to create pods, no labels")
        try:
            created = self._client.create(pod)
        except ApiError as err:
            if NAMESPACE_TERMINATING_CAUSE not in err.causes:
                self._recorder.event(
                    obj, EVENT_TYPE_WARNING, FAILED_CREATE_POD_REASON, f"Error creating: {err}"
                )
            raise
        parent_meta = _object_meta(obj)
        if parent_meta is None:
            logger.error("parent object does not have metadata")
            return created
        name = created["metadata"]["name"]
        logger.debug(
            "Controller %s created pod %s/%s",
            parent_meta.get("name"),
            created["metadata"].get("namespace", ""),
            name,
        )
        self._recorder.event(
            obj, EVENT_TYPE_NORMAL, SUCCESSFUL_CREATE_POD_REASON, f"Created pod: {name}"
        )
        return created

    def delete_pod(self, namespace: str, pod_name: str, obj: Any) -> None:
        """Delete a pod on behalf of obj."""
        parent_meta = _object_meta(obj)
        if parent_meta is None:
            raise ValueError("object does not have metadata")
        logger.info(
            "Controller %s deleting pod %s/%s", parent_meta.get("name"), namespace, pod_name
        )
        pod = {
            "kind": _POD_KIND,
            "apiVersion": _POD_API_VERSION,
            "metadata": {"namespace": namespace, "name": pod_name},
        }
        try:
            self._client.delete(pod)
        except NotFoundError:
            logger.debug("Pod %s/%s has already been deleted.", namespace, pod_name)
            raise
        except ApiError as err:
            self._recorder.event(
                obj, EVENT_TYPE_WARNING, FAILED_DELETE_POD_REASON, f"Error deleting: {err}"
            )
            raise ApiError(f"unable to delete pods: {err}", err.causes) from err
        self._recorder.event(
            obj, EVENT_TYPE_NORMAL, SUCCESSFUL_DELETE_POD_REASON, f"Deleted pod: {pod_name}"
        )

    def patch_pod(
        self, namespace: str, name: str, data: Union[bytes, str, Mapping[str, Any]]
    ) -> Manifest:
        """Apply a merge patch to a pod and return the patched pod."""
        return self._client.patch(_POD_KIND, namespace, name, data)