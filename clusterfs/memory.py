"""In-memory cluster implementation."""

from __future__ import annotations

import copy
import threading
from collections.abc import Iterable
from typing import Any

from .base import GroupVersionKind, GroupVersionListing, ObjectRecord, ResourceDescriptor


class MemoryCluster:
    """Simple in-memory cluster.

    Holds discovery listings and object documents in plain containers
    and implements the ``ClusterHandle`` protocol, so the whole tree can
    be exercised without a live API server.

    Useful for testing and for demos. ``calls`` records every
    ``preferred_resources``/``list`` request in order.
    """

    def __init__(self) -> None:
        self.listings: list[GroupVersionListing] = []
        self.objects: list[dict[str, Any]] = []
        self.calls: list[tuple[str, ...]] = []
        self._error: Exception | None = None
        self._lock = threading.Lock()

    def add_group_version(
        self,
        group_version: str,
        resources: Iterable[ResourceDescriptor | tuple[str, str, bool]] = (),
    ) -> GroupVersionListing:
        """Add a discovery listing.

        Resources may be descriptors or ``(name, kind, namespaced)`` tuples.
        """
        descriptors = tuple(
            r if isinstance(r, ResourceDescriptor) else ResourceDescriptor(*r)
            for r in resources
        )
        listing = GroupVersionListing(group_version, descriptors)
        with self._lock:
            self.listings.append(listing)
        return listing

    def add_object(self, document: dict[str, Any]) -> ObjectRecord:
        """Store an object document (must carry apiVersion and kind)."""
        if not document.get("apiVersion") or not document.get("kind"):
            raise ValueError("Object needs apiVersion and kind")
        with self._lock:
            self.objects.append(copy.deepcopy(document))
        return ObjectRecord(copy.deepcopy(document))

    def remove_object(self, gvk: GroupVersionKind, name: str, namespace: str = "") -> None:
        """Delete an object; raises KeyError if it does not exist."""
        with self._lock:
            for i, document in enumerate(self.objects):
                record = ObjectRecord(document)
                if record.gvk == gvk and record.name == name and record.namespace == namespace:
                    del self.objects[i]
                    return
        raise KeyError(f"{gvk.kind} {namespace}/{name}")

    def fail_with(self, error: Exception | None) -> None:
        """Make every following request raise ``error`` (None to stop)."""
        with self._lock:
            self._error = error

    def preferred_resources(self) -> list[GroupVersionListing]:
        with self._lock:
            self.calls.append(("preferred_resources",))
            if self._error is not None:
                raise self._error
            return list(self.listings)

    def list(self, gvk: GroupVersionKind, namespace: str = "") -> list[ObjectRecord]:
        with self._lock:
            self.calls.append(("list", gvk.api_version, gvk.kind, namespace))
            if self._error is not None:
                raise self._error
            records = []
            for document in self.objects:
                record = ObjectRecord(copy.deepcopy(document))
                if record.gvk != gvk:
                    continue
                if namespace and record.namespace != namespace:
                    continue
                records.append(record)
            return records
