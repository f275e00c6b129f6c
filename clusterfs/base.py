"""Base node interface and dataclasses.

Defines the cluster data model (group/version/kind identifiers, discovery
listings, object records) and the contract shared by every virtual node.
"""

from __future__ import annotations

import errno
import os
from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any, Literal, Protocol, runtime_checkable

from .names import is_subresource, split_group_version


@dataclass(frozen=True)
class GroupVersionKind:
    """Identifies a resource type.

    The empty group with version ``"v1"`` is the core group.
    """

    group: str
    version: str
    kind: str

    @property
    def api_version(self) -> str:
        if not self.group:
            return self.version
        return f"{self.group}/{self.version}"


@dataclass(frozen=True)
class ResourceDescriptor:
    """Catalog entry for one resource kind within a group/version.

    Attributes:
        name: Plural resource name (e.g. "pods", or "pods/log" for a
            subresource).
        kind: Kind name (e.g. "Pod").
        namespaced: True if objects are partitioned by namespace.
    """

    name: str
    kind: str
    namespaced: bool = False

    @property
    def is_subresource(self) -> bool:
        return is_subresource(self.name)


@dataclass(frozen=True)
class GroupVersionListing:
    """Discovery result for a single group/version."""

    group_version: str
    resources: tuple[ResourceDescriptor, ...] = ()

    @property
    def group(self) -> str:
        return split_group_version(self.group_version)[0]

    @property
    def version(self) -> str:
        return split_group_version(self.group_version)[1]


@dataclass
class ObjectRecord:
    """A single cluster object as a plain structured document.

    Attributes:
        document: The full object (apiVersion, kind, metadata, ...).
    """

    document: dict[str, Any] = field(default_factory=dict)

    @property
    def metadata(self) -> dict[str, Any]:
        return self.document.get("metadata") or {}

    @property
    def name(self) -> str:
        return self.metadata.get("name") or ""

    @property
    def namespace(self) -> str:
        return self.metadata.get("namespace") or ""

    @property
    def gvk(self) -> GroupVersionKind:
        group, version = split_group_version(self.document.get("apiVersion", ""))
        return GroupVersionKind(group, version, self.document.get("kind", ""))


@dataclass
class NodeStat:
    """Attributes of a single node.

    Attributes:
        is_dir: True if this is a directory, False for files.
        size: Content length in bytes (0 for directories).
    """

    is_dir: bool
    size: int = 0

    # os.stat_result-compatible properties so a transport can hand the
    # result straight to the host.

    @property
    def st_size(self) -> int:
        return self.size

    @property
    def st_mode(self) -> int:
        return 0o040555 if self.is_dir else 0o100444

    @property
    def st_nlink(self) -> int:
        return 2 if self.is_dir else 1

    @property
    def st_uid(self) -> int:
        return os.getuid() if hasattr(os, "getuid") else 0

    @property
    def st_gid(self) -> int:
        return os.getgid() if hasattr(os, "getgid") else 0


@dataclass(frozen=True)
class Entry:
    """A directory entry: child name plus its kind."""

    name: str
    kind: Literal["file", "directory"] = "directory"

    @property
    def is_dir(self) -> bool:
        return self.kind == "directory"


@runtime_checkable
class Node(Protocol):
    """Operations every virtual node answers.

    Directories implement ``list`` and ``resolve``; files implement
    ``read``. The opposite operations raise ``NotADirectoryError`` or
    ``IsADirectoryError``.
    """

    def stat(self) -> NodeStat:
        """Get node attributes."""
        ...

    def list(self) -> list[Entry]:
        """List children (unordered, no duplicates)."""
        ...

    def resolve(self, name: str) -> Node:
        """Return the child called ``name`` or raise NotFound."""
        ...

    def read(self, offset: int = 0, size: int = -1) -> bytes:
        """Read a byte range from a file."""
        ...


@runtime_checkable
class ClusterHandle(Protocol):
    """Read-only access to a cluster's discovery and list APIs.

    Implementations must be safe for concurrent use; the projection
    engine shares one handle across all traversals.
    """

    def preferred_resources(self) -> Sequence[GroupVersionListing]:
        """Return the preferred version of every API group."""
        ...

    def list(self, gvk: GroupVersionKind, namespace: str = "") -> Sequence[ObjectRecord]:
        """List objects of a kind, optionally restricted to a namespace."""
        ...


class DirectoryNode(ABC):
    """Common behavior of directory nodes.

    Subclasses provide ``list`` and ``resolve``.
    """

    name = ""

    def stat(self) -> NodeStat:
        return NodeStat(is_dir=True)

    @abstractmethod
    def list(self) -> list[Entry]: ...

    @abstractmethod
    def resolve(self, name: str) -> Node: ...

    def read(self, offset: int = 0, size: int = -1) -> bytes:
        raise IsADirectoryError(errno.EISDIR, "Is a directory", self.name)


def dir_entries(names: Iterable[str]) -> list[Entry]:
    """Convert names into directory entries."""
    return [Entry(name, "directory") for name in names]


def file_entries(names: Iterable[str]) -> list[Entry]:
    """Convert names into file entries."""
    return [Entry(name, "file") for name in names]
