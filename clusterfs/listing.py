"""Listing projection: live object listings of one resource kind."""

from __future__ import annotations

import structlog

from .base import (
    ClusterHandle,
    DirectoryNode,
    Entry,
    GroupVersionKind,
    Node,
    ObjectRecord,
    ResourceDescriptor,
    dir_entries,
)
from .context import fetch
from .errors import NotFound
from .names import dedup
from .objects import ObjectDir
from .specialized import SpecializationRegistry

logger = structlog.get_logger(__name__)


def project_resource(
    cluster: ClusterHandle,
    registry: SpecializationRegistry,
    gvk: GroupVersionKind,
    resource: ResourceDescriptor,
) -> Node:
    """List a resource kind and build its directory.

    The listing is fetched once here and shared by the returned node and
    everything resolved beneath it.
    """
    records = list(fetch(f"list {resource.name}", cluster.list, gvk))
    logger.debug(
        "resource.listed",
        resource=resource.name,
        api_version=gvk.api_version,
        kind=gvk.kind,
        count=len(records),
    )
    if resource.namespaced:
        return ResourceNamespacesDir(registry, resource.name, records)
    return ResourceDir(registry, resource.name, records)


def namespaces(records: list[ObjectRecord]) -> list[str]:
    """Unique non-empty namespaces present in a listing."""
    return dedup(record.namespace for record in records if record.namespace)


class ResourceNamespacesDir(DirectoryNode):
    """Namespaces that hold at least one object of a namespaced kind."""

    def __init__(
        self,
        registry: SpecializationRegistry,
        name: str,
        records: list[ObjectRecord],
    ):
        self.registry = registry
        self.name = name
        self.records = records

    def list(self) -> list[Entry]:
        entries = namespaces(self.records)
        logger.debug("resource_namespaces_dir.list", resource=self.name, entries=entries)
        return dir_entries(entries)

    def resolve(self, name: str) -> Node:
        logger.debug("resource_namespaces_dir.resolve", resource=self.name, name=name)
        if name in namespaces(self.records):
            return ResourceDir(self.registry, self.name, self.records, namespace=name)
        raise NotFound("No such namespace", name)


class ResourceDir(DirectoryNode):
    """Objects of one kind, optionally limited to a namespace.

    An empty namespace matches every object.
    """

    def __init__(
        self,
        registry: SpecializationRegistry,
        name: str,
        records: list[ObjectRecord],
        namespace: str = "",
    ):
        self.registry = registry
        self.name = name
        self.namespace = namespace
        self.records = [
            record for record in records if not namespace or record.namespace == namespace
        ]

    def list(self) -> list[Entry]:
        names = dedup(record.name for record in self.records)
        logger.debug(
            "resource_dir.list",
            resource=self.name,
            namespace=self.namespace,
            entries=names,
        )
        return dir_entries(names)

    def resolve(self, name: str) -> Node:
        logger.debug(
            "resource_dir.resolve",
            resource=self.name,
            namespace=self.namespace,
            name=name,
        )
        for record in self.records:
            if record.name != name:
                continue
            node = self.registry.build(record)
            if node is not None:
                logger.debug("resource_dir.specialized", gvk=record.gvk, name=name)
                return node
            return ObjectDir(record)
        raise NotFound("No such object", name)
