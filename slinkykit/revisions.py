"""Reading and writing the controller revision hash label."""

from __future__ import annotations

from typing import MutableMapping, Optional, Mapping

CONTROLLER_REVISION_HASH_LABEL = "controller-revision-hash"


def set_revision(labels: Optional[MutableMapping[str, str]], revision: str) -> None:
    """Record a non-empty revision hash in labels, in place.

    A None labels mapping has nowhere to hold the value and is left alone.
    """
    if labels is None:
        return
    if revision:
        labels[CONTROLLER_REVISION_HASH_LABEL] = revision


def get_revision(labels: Optional[Mapping[str, str]]) -> str:
    """Return the revision hash from labels, or an empty string."""
    if labels is None:
        return ""
    return labels.get(CONTROLLER_REVISION_HASH_LABEL, "")