"""Read-only virtual file backed by an in-memory buffer."""

from __future__ import annotations

import errno

import structlog

from .base import Entry, Node, NodeStat
from .errors import RangeError

logger = structlog.get_logger(__name__)


class VirtualFile:
    """Immutable byte buffer exposed as a file.

    The content is materialized when the node is built and never
    refetched, so ``stat().size`` always equals the number of bytes
    ``read`` can return.

    Attributes:
        name: The file name (for error messages).
    """

    def __init__(self, name: str, content: bytes):
        """Initialize a file node.

        Args:
            name: File name.
            content: The complete file content.
        """
        if not isinstance(content, bytes):
            raise TypeError(f"Expected bytes, got {type(content).__name__}")
        self.name = name
        self._content = content

    def stat(self) -> NodeStat:
        logger.debug("file.stat", name=self.name, size=len(self._content))
        return NodeStat(is_dir=False, size=len(self._content))

    def list(self) -> list[Entry]:
        raise NotADirectoryError(errno.ENOTDIR, "Not a directory", self.name)

    def resolve(self, name: str) -> Node:
        raise NotADirectoryError(errno.ENOTDIR, "Not a directory", self.name)

    def read(self, offset: int = 0, size: int = -1) -> bytes:
        """Read up to ``size`` bytes starting at ``offset``.

        Args:
            offset: Start position. ``offset == len`` reads nothing.
            size: Maximum bytes to return; -1 reads to the end.

        Returns:
            The requested bytes, truncated to the end of the buffer.

        Raises:
            RangeError: If offset is negative or past the end, or size is
                below -1.
        """
        length = len(self._content)
        if offset < 0 or offset > length:
            raise RangeError(f"offset {offset} outside 0..{length}", self.name)
        if size < -1:
            raise RangeError(f"invalid read size {size}", self.name)
        end = length if size == -1 else min(offset + size, length)
        logger.debug("file.read", name=self.name, offset=offset, size=size)
        return self._content[offset:end]

    def __len__(self) -> int:
        return len(self._content)
