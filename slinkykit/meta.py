"""Object identity helpers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping


@dataclass(frozen=True)
class NamespacedName:
    """A namespace and name pair identifying an object."""

    namespace: str = ""
    name: str = ""

    def __str__(self) -> str:
        return f"{self.namespace}/{self.name}"


def key_func(obj: Mapping[str, Any]) -> str:
    """Return the "namespace/name" key of an object manifest."""
    metadata = obj.get("metadata") or {}
    return str(
        NamespacedName(
            namespace=metadata.get("namespace") or "",
            name=metadata.get("name") or "",
        )
    )