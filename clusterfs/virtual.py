"""Path-based access to the projected cluster tree.

Provides ClusterFS, the read-only filesystem facade a host transport
(FUSE, WebDAV, a shell) calls with plain paths.
"""

from __future__ import annotations

import errno
import io

import structlog

from .base import ClusterHandle, Entry, Node, NodeStat
from .config import ClusterFSConfig
from .discovery import RootDir
from .errors import ClusterFSError, NotFound
from .specialized import SpecializationRegistry

logger = structlog.get_logger(__name__)


def split_path(path: str) -> list[str]:
    """Split a path into segments, dropping empty and ``.`` parts.

    Raises:
        NotFound: If the path contains ``..``; the tree has no parent links.
    """
    parts = [part for part in path.split("/") if part and part != "."]
    if ".." in parts:
        raise NotFound("Parent references are not supported", path)
    return parts


def errno_for(exc: BaseException) -> int:
    """Map an exception raised by the tree to a host error code."""
    if isinstance(exc, ClusterFSError):
        return exc.errno_code
    if isinstance(exc, OSError) and exc.errno:
        return exc.errno
    return errno.EIO


class ClusterFS:
    """Read-only filesystem view of a cluster.

    Every call walks the tree from a freshly built root, so each call
    performs its own remote fetches and nothing is cached between calls.
    Two calls may therefore observe different cluster states.

    Example:
        >>> cluster = MemoryCluster()
        >>> cluster.add_group_version("v1", [("pods", "Pod", True)])
        >>> cfs = ClusterFS(cluster)
        >>> cfs.list("/")
        ['v1']
    """

    def __init__(
        self,
        cluster: ClusterHandle,
        registry: SpecializationRegistry | None = None,
        config: ClusterFSConfig | None = None,
    ):
        """Initialize the view.

        Args:
            cluster: Shared cluster handle (owned for the life of the mount).
            registry: Specialized views to use. Defaults to the built-in set.
            config: Tree options.
        """
        self.cluster = cluster
        self.registry = registry if registry is not None else SpecializationRegistry.default()
        self.config = config if config is not None else ClusterFSConfig()

    def root(self) -> RootDir:
        return RootDir(self.cluster, self.registry, views=self.config.views)

    def walk(self, path: str) -> Node:
        """Resolve a path to its node, one segment at a time.

        Raises:
            NotFound: If any segment does not exist.
            NotADirectoryError: If a segment other than the last is a file.
            RemoteFailure: If a fetch along the way failed.
        """
        node: Node = self.root()
        for part in split_path(path):
            node = node.resolve(part)
        return node

    def stat(self, path: str) -> NodeStat:
        """Get attributes of the node at ``path``."""
        logger.debug("cluster_fs.stat", path=path)
        return self.walk(path).stat()

    def list(self, path: str = "/") -> list[str]:
        """List directory entry names."""
        return [entry.name for entry in self.list_detailed(path)]

    def list_detailed(self, path: str = "/") -> list[Entry]:
        """List directory entries with their kinds."""
        logger.debug("cluster_fs.list", path=path)
        return self.walk(path).list()

    def read(self, path: str, offset: int = 0, size: int = -1) -> bytes:
        """Read a byte range of the file at ``path``.

        Raises:
            RangeError: If ``offset`` is past the end of the file.
            IsADirectoryError: If ``path`` is a directory.
        """
        logger.debug("cluster_fs.read", path=path, offset=offset, size=size)
        return self.walk(path).read(offset, size)

    def open(self, path: str, mode: str = "r", **kwargs: object) -> io.BytesIO | io.StringIO:
        """Open a file for reading.

        The content is materialized once at open time, so repeated reads
        through the returned handle see a stable snapshot.

        Raises:
            PermissionError: For any write, append or create mode.
        """
        if any(flag in mode for flag in "wax+"):
            raise PermissionError(errno.EROFS, "Read-only file system", path)
        content = self.read(path)
        if "b" in mode:
            return io.BytesIO(content)
        return io.StringIO(content.decode("utf-8"))

    def exists(self, path: str) -> bool:
        try:
            self.walk(path)
        except (NotFound, NotADirectoryError):
            return False
        return True

    def isdir(self, path: str) -> bool:
        try:
            return self.walk(path).stat().is_dir
        except (NotFound, NotADirectoryError):
            return False

    def isfile(self, path: str) -> bool:
        try:
            return not self.walk(path).stat().is_dir
        except (NotFound, NotADirectoryError):
            return False

    def getsize(self, path: str) -> int:
        return self.stat(path).size
