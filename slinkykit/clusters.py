"""A thread-safe registry of running cluster clients."""

from __future__ import annotations

import threading
from typing import Dict, Optional, Protocol

from .meta import NamespacedName


class ClusterClient(Protocol):
    """A client that can be started in the background and stopped."""

    def start(self) -> object: ...

    def stop(self) -> object: ...


class Clusters:
    """Maps namespaced names to cluster clients, starting and stopping them."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._clients: Dict[str, ClusterClient] = {}

    def __len__(self) -> int:
        with self._lock:
            return len(self._clients)

    def get(self, name: NamespacedName) -> Optional[ClusterClient]:
        """Return the client registered under name, or None."""
        with self._lock:
            return self._clients.get(str(name))

    def has(self, *args: NamespacedName) -> bool:
        """True when any of the given names is registered."""
        with self._lock:
            return any(str(name) in self._clients for name in args)

    def add(self, name: NamespacedName, client: ClusterClient) -> bool:
        """Register client under name, replacing and stopping any previous one.

        The client is started on a background thread.
        """
        with self._lock:
            self._remove(name)
            return self._add(name, client)

    def remove(self, name: NamespacedName) -> bool:
        """Stop and unregister the client under name; False when absent."""
        with self._lock:
            return self._remove(name)

    def _add(self, name: NamespacedName, client: ClusterClient) -> bool:
        key = str(name)
        if key in self._clients:
            return False
        threading.Thread(target=client.start, name=f"cluster-{key}", daemon=True).start()
        self._clients[key] = client
        return True

    def _remove(self, name: NamespacedName) -> bool:
        client = self._clients.pop(str(name), None)
        if client is None:
            return False
        client.stop()
        return True