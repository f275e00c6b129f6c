"""Exceptions raised while projecting the cluster.

Every exception is an ``OSError`` carrying the errno a filesystem
transport should report to the host.
"""

from __future__ import annotations

import errno


class ClusterFSError(OSError):
    """Base class for projection errors."""

    errno_code = errno.EIO

    def __init__(self, message: str, path: str | None = None):
        if path is None:
            super().__init__(self.errno_code, message)
        else:
            super().__init__(self.errno_code, message, path)


class NotFound(ClusterFSError, FileNotFoundError):
    """No child of that name exists."""

    errno_code = errno.ENOENT


class RemoteFailure(ClusterFSError):
    """A discovery or list call against the cluster failed."""

    errno_code = errno.EIO


class SerializationFailure(ClusterFSError):
    """An object could not be marshaled or does not fit a specialized shape."""

    errno_code = errno.EIO


class RangeError(ClusterFSError):
    """A read was requested outside the file's content."""

    errno_code = errno.EINVAL


class Cancelled(ClusterFSError):
    """The caller cancelled the operation while a fetch was in flight."""

    errno_code = errno.EINTR
