"""Identity of a pod serialised as a small JSON document."""

from __future__ import annotations

import json
from dataclasses import dataclass, replace
from typing import Optional

_FIELDS = {"namespace": "namespace", "podName": "pod_name"}


@dataclass
class PodInfo:
    """The namespace and name of a pod."""

    namespace: str = ""
    pod_name: str = ""

    def to_json(self) -> str:
        """Serialise as compact JSON with the keys namespace and podName."""
        return json.dumps(
            {"namespace": self.namespace, "podName": self.pod_name},
            separators=(",", ":"),
        )

    def __str__(self) -> str:
        return self.to_json()


def parse_pod_info(text: Optional[str], base: Optional[PodInfo] = None) -> PodInfo:
    """Parse JSON text into a PodInfo.

    Fields missing from the document keep their values from base. A None
    text is treated as empty. Raises ValueError on malformed input.
    """
    result = replace(base) if base is not None else PodInfo()
    data = json.loads(text or "")
    if data is None:
        return result
    if not isinstance(data, dict):
        raise ValueError(f"cannot parse {type(data).__name__} into PodInfo")
    for key, attr in _FIELDS.items():
        if key not in data or data[key] is None:
            continue
        value = data[key]
        if not isinstance(value, str):
            raise ValueError(f"field {key!r} must be a string, got {value!r}")
        setattr(result, attr, value)
    return result