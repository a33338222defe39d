"""Predicates over pod manifests."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, Mapping, Optional

_READY = "Ready"
_TRUE = "True"


class PodPhase(str, Enum):
    """Lifecycle phase of a pod."""

    PENDING = "Pending"
    RUNNING = "Running"
    SUCCEEDED = "Succeeded"
    FAILED = "Failed"
    UNKNOWN = "Unknown"


def _status(pod: Mapping[str, Any]) -> Mapping[str, Any]:
    return pod.get("status") or {}


def _phase(pod: Mapping[str, Any]) -> str:
    return _status(pod).get("phase") or ""


def _ready_condition(pod: Mapping[str, Any]) -> Optional[Mapping[str, Any]]:
    conditions = _status(pod).get("conditions") or []
    return next((c for c in conditions if c.get("type") == _READY), None)


def is_pod_ready(pod: Mapping[str, Any]) -> bool:
    """True when the pod's Ready condition has status True."""
    condition = _ready_condition(pod)
    return condition is not None and condition.get("status") == _TRUE


def is_running_and_ready(pod: Mapping[str, Any]) -> bool:
    """True when the pod is in the Running phase and Ready."""
    return _phase(pod) == PodPhase.RUNNING and is_pod_ready(pod)


def is_running_and_available(
    pod: Mapping[str, Any], min_ready_seconds: int, now: Optional[datetime] = None
) -> bool:
    """True when the pod has been Ready for more than min_ready_seconds."""
    if not is_pod_ready(pod):
        return False
    if min_ready_seconds == 0:
        return True
    if now is None:
        now = datetime.now(timezone.utc)
    transition = _ready_condition(pod).get("lastTransitionTime")
    if transition is None:
        return False
    return transition + timedelta(seconds=min_ready_seconds) < now


def is_created(pod: Mapping[str, Any]) -> bool:
    """True when the pod has been assigned a phase by the API server."""
    return _phase(pod) != ""


def is_pending(pod: Mapping[str, Any]) -> bool:
    """True when the pod is in the Pending phase."""
    return _phase(pod) == PodPhase.PENDING


def is_failed(pod: Mapping[str, Any]) -> bool:
    """True when the pod is in the Failed phase."""
    return _phase(pod) == PodPhase.FAILED


def is_succeeded(pod: Mapping[str, Any]) -> bool:
    """True when the pod is in the Succeeded phase."""
    return _phase(pod) == PodPhase.SUCCEEDED


def is_terminating(pod: Mapping[str, Any]) -> bool:
    """True when the pod has a deletion timestamp."""
    metadata = pod.get("metadata") or {}
    return metadata.get("deletionTimestamp") is not None


def is_healthy(pod: Mapping[str, Any]) -> bool:
    """True when the pod is running, ready and not terminating."""
    return is_running_and_ready(pod) and not is_terminating(pod)