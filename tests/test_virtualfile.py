"""Tests for VirtualFile range reads."""

import errno

import pytest

from clusterfs import RangeError, VirtualFile


class TestVirtualFileRead:
    """Test byte-range reads clamp to the buffer."""

    def test_stat_size_matches_content(self):
        f = VirtualFile("yaml", b"hello")
        meta = f.stat()
        assert meta.size == 5
        assert meta.is_dir is False
        assert meta.st_size == 5

    def test_read_whole_file(self):
        f = VirtualFile("yaml", b"hello")
        assert f.read() == b"hello"
        assert f.read(0, 5) == b"hello"

    def test_read_middle(self):
        f = VirtualFile("yaml", b"hello world")
        assert f.read(6, 3) == b"wor"

    def test_read_at_end_is_empty(self):
        """Reading exactly at the end returns no bytes."""
        f = VirtualFile("yaml", b"hello")
        assert f.read(5, 0) == b""
        assert f.read(5, 10) == b""

    def test_read_past_end_raises(self):
        f = VirtualFile("yaml", b"hello")
        with pytest.raises(RangeError) as exc_info:
            f.read(6, 1)
        assert exc_info.value.errno == errno.EINVAL

    def test_read_truncates_tail(self):
        f = VirtualFile("yaml", b"hello")
        assert f.read(0, 105) == b"hello"
        assert f.read(3, 100) == b"lo"

    def test_negative_offset_raises(self):
        f = VirtualFile("yaml", b"hello")
        with pytest.raises(RangeError):
            f.read(-1, 2)

    def test_invalid_size_raises(self):
        f = VirtualFile("yaml", b"hello")
        with pytest.raises(RangeError):
            f.read(0, -2)

    def test_empty_file(self):
        f = VirtualFile("empty", b"")
        assert f.stat().size == 0
        assert f.read(0, 10) == b""
        with pytest.raises(RangeError):
            f.read(1, 1)


class TestVirtualFileNotADirectory:
    def test_list_raises(self):
        with pytest.raises(NotADirectoryError):
            VirtualFile("yaml", b"x").list()

    def test_resolve_raises(self):
        with pytest.raises(NotADirectoryError):
            VirtualFile("yaml", b"x").resolve("child")

    def test_rejects_str_content(self):
        with pytest.raises(TypeError):
            VirtualFile("yaml", "text")
