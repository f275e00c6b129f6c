"""String helpers for API group/version names."""

from __future__ import annotations

from collections.abc import Iterable

CORE_VERSION = "v1"


def dedup(items: Iterable[str]) -> list[str]:
    """Return items with duplicates removed, keeping first-seen order."""
    return list(dict.fromkeys(items))


def split_group_version(group_version: str) -> tuple[str, str]:
    """Split an ``apiVersion`` string into ``(group, version)``.

    >>> split_group_version("apps/v1")
    ('apps', 'v1')
    >>> split_group_version("v1")
    ('', 'v1')
    """
    group, sep, version = group_version.partition("/")
    if not sep:
        return "", group
    return group, version


def is_subresource(name: str) -> bool:
    """True for subresource paths such as ``pods/log``."""
    return "/" in name


def group_label(group_version: str) -> str:
    """Directory name used for a group/version at the groups level.

    The group itself, or the bare version for the core group, so the
    core group shows up as ``v1``.
    """
    group, version = split_group_version(group_version)
    return group or version


def matches_group(name: str, group_version: str) -> bool:
    """True if ``group_version`` belongs under the groups-level entry ``name``.

    The core group is always reachable as ``v1``, even when a custom
    group happens to share that name.
    """
    if group_label(group_version) == name:
        return True
    group, version = split_group_version(group_version)
    return name == CORE_VERSION and not group and version == CORE_VERSION
