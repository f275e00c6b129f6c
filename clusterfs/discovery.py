"""Discovery projection: groups, group versions and resource kinds.

Turns the cluster's preferred-resources catalog into the top levels of
the tree::

    <group>/[<version>/]<resource>/...

A group with a single preferred version skips the version level.
"""

from __future__ import annotations

import structlog

from .base import (
    ClusterHandle,
    DirectoryNode,
    Entry,
    GroupVersionKind,
    GroupVersionListing,
    Node,
    dir_entries,
)
from .context import fetch
from .errors import NotFound
from .listing import project_resource
from .names import dedup, group_label, matches_group
from .specialized import SpecializationRegistry

logger = structlog.get_logger(__name__)

BY_GVK_VIEW = "by-gvk"


def preferred_listings(cluster: ClusterHandle) -> list[GroupVersionListing]:
    """Fetch the discovery catalog with subresources removed.

    This is the only place subresources are filtered; every node below
    the groups level works from listings returned here.
    """
    listings = fetch("discovery", cluster.preferred_resources)
    return [
        GroupVersionListing(
            listing.group_version,
            tuple(r for r in listing.resources if not r.is_subresource),
        )
        for listing in listings
    ]


class RootDir(DirectoryNode):
    """Mount root.

    Owns the cluster handle and the specialization registry for the life
    of the mount. With ``views`` enabled the root lists the available
    views; otherwise it shows the groups directly.
    """

    name = "/"

    def __init__(
        self,
        cluster: ClusterHandle,
        registry: SpecializationRegistry,
        views: bool = False,
    ):
        self.cluster = cluster
        self.registry = registry
        self.views = views

    def _top(self) -> DirectoryNode:
        if self.views:
            return ViewsDir(self.cluster, self.registry)
        return GroupsDir(self.cluster, self.registry)

    def list(self) -> list[Entry]:
        return self._top().list()

    def resolve(self, name: str) -> Node:
        return self._top().resolve(name)


class ViewsDir(DirectoryNode):
    """Lists the available projection strategies."""

    name = "views"

    def __init__(self, cluster: ClusterHandle, registry: SpecializationRegistry):
        self.cluster = cluster
        self.registry = registry

    def list(self) -> list[Entry]:
        views = [BY_GVK_VIEW]
        logger.debug("views_dir.list", entries=views)
        return dir_entries(views)

    def resolve(self, name: str) -> Node:
        logger.debug("views_dir.resolve", name=name)
        if name == BY_GVK_VIEW:
            return GroupsDir(self.cluster, self.registry)
        raise NotFound("No such view", name)


class GroupsDir(DirectoryNode):
    """One directory per API group; the core group appears as ``v1``."""

    name = BY_GVK_VIEW

    def __init__(self, cluster: ClusterHandle, registry: SpecializationRegistry):
        self.cluster = cluster
        self.registry = registry

    def list(self) -> list[Entry]:
        listings = preferred_listings(self.cluster)
        names = dedup(group_label(listing.group_version) for listing in listings)
        logger.debug("groups_dir.list", entries=names)
        return dir_entries(names)

    def resolve(self, name: str) -> Node:
        logger.debug("groups_dir.resolve", name=name)
        listings = preferred_listings(self.cluster)
        matches = [
            listing for listing in listings if matches_group(name, listing.group_version)
        ]

        if len(matches) == 1:
            return ResourcesDir(self.cluster, self.registry, matches[0])
        if matches:
            return GroupVersionsDir(self.cluster, self.registry, name, matches)
        raise NotFound("No such API group", name)


class GroupVersionsDir(DirectoryNode):
    """Versions of a group whose name matched more than one listing.

    Works only from the listings captured when it was built.
    """

    def __init__(
        self,
        cluster: ClusterHandle,
        registry: SpecializationRegistry,
        name: str,
        listings: list[GroupVersionListing],
    ):
        self.cluster = cluster
        self.registry = registry
        self.name = name
        self.listings = [listing for listing in listings if listing.resources]

    def list(self) -> list[Entry]:
        versions = dedup(listing.version for listing in self.listings)
        logger.debug("group_versions_dir.list", group=self.name, entries=versions)
        return dir_entries(versions)

    def resolve(self, name: str) -> Node:
        logger.debug("group_versions_dir.resolve", group=self.name, name=name)
        for listing in self.listings:
            if listing.version == name:
                return ResourcesDir(self.cluster, self.registry, listing)
        raise NotFound("No such version", name)


class ResourcesDir(DirectoryNode):
    """Resource kinds of a single group/version."""

    def __init__(
        self,
        cluster: ClusterHandle,
        registry: SpecializationRegistry,
        listing: GroupVersionListing,
    ):
        self.cluster = cluster
        self.registry = registry
        self.listing = listing
        self.name = listing.group_version

    def list(self) -> list[Entry]:
        names = dedup(resource.name for resource in self.listing.resources)
        logger.debug("resources_dir.list", group_version=self.name, entries=names)
        return dir_entries(names)

    def resolve(self, name: str) -> Node:
        logger.debug("resources_dir.resolve", group_version=self.name, name=name)
        for resource in self.listing.resources:
            if resource.name == name:
                gvk = GroupVersionKind(
                    self.listing.group, self.listing.version, resource.kind
                )
                return project_resource(self.cluster, self.registry, gvk, resource)
        raise NotFound("No such resource", name)
