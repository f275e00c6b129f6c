"""clusterfs: Browse a Kubernetes cluster as a read-only filesystem."""

from .base import (
    ClusterHandle,
    Entry,
    GroupVersionKind,
    GroupVersionListing,
    Node,
    NodeStat,
    ObjectRecord,
    ResourceDescriptor,
)
from .config import ClusterFSConfig, KubernetesConfig, MemoryConfig, connect_cluster
from .context import cancel_scope
from .errors import (
    Cancelled,
    ClusterFSError,
    NotFound,
    RangeError,
    RemoteFailure,
    SerializationFailure,
)
from .memory import MemoryCluster
from .specialized import SpecializationRegistry
from .virtual import ClusterFS, errno_for
from .virtualfile import VirtualFile

__all__ = [
    "cancel_scope",
    "Cancelled",
    "ClusterFS",
    "ClusterFSConfig",
    "ClusterFSError",
    "ClusterHandle",
    "connect_cluster",
    "Entry",
    "errno_for",
    "GroupVersionKind",
    "GroupVersionListing",
    "KubernetesConfig",
    "MemoryCluster",
    "MemoryConfig",
    "Node",
    "NodeStat",
    "NotFound",
    "ObjectRecord",
    "RangeError",
    "RemoteFailure",
    "ResourceDescriptor",
    "SerializationFailure",
    "SpecializationRegistry",
    "VirtualFile",
]
