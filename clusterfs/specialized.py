"""Kind-specific object views and the registry that selects them.

A registry maps a GroupVersionKind to a constructor that turns a generic
record into a richer directory. It is built once at startup and handed
to the root node; nothing registers into it afterwards.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

import structlog

from .base import (
    DirectoryNode,
    Entry,
    GroupVersionKind,
    Node,
    ObjectRecord,
    dir_entries,
    file_entries,
)
from .errors import NotFound, SerializationFailure
from .objects import FORMATS, serialize
from .virtualfile import VirtualFile

logger = structlog.get_logger(__name__)

Constructor = Callable[[ObjectRecord], Node]

CONFIGMAP_GVK = GroupVersionKind("", "v1", "ConfigMap")


class SpecializationRegistry:
    """Immutable mapping from GroupVersionKind to a node constructor.

    Example:
        >>> registry = SpecializationRegistry.default()
        >>> CONFIGMAP_GVK in registry
        True
    """

    def __init__(self, constructors: Mapping[GroupVersionKind, Constructor] | None = None):
        self._constructors: Mapping[GroupVersionKind, Constructor] = MappingProxyType(
            dict(constructors or {})
        )

    @classmethod
    def default(cls) -> SpecializationRegistry:
        """Registry with every built-in specialized view."""
        return cls({CONFIGMAP_GVK: ConfigMapDir.from_record})

    def with_constructor(
        self, gvk: GroupVersionKind, constructor: Constructor
    ) -> SpecializationRegistry:
        """Return a new registry with one more entry."""
        constructors = dict(self._constructors)
        constructors[gvk] = constructor
        return SpecializationRegistry(constructors)

    def lookup(self, gvk: GroupVersionKind) -> Constructor | None:
        return self._constructors.get(gvk)

    def build(self, record: ObjectRecord) -> Node | None:
        """Build the specialized node for a record, or None if unregistered.

        Raises:
            SerializationFailure: If the record is registered but does not
                fit the specialized shape.
        """
        constructor = self.lookup(record.gvk)
        if constructor is None:
            return None
        return constructor(record)

    def __contains__(self, gvk: object) -> bool:
        return gvk in self._constructors

    def __len__(self) -> int:
        return len(self._constructors)


def _string_map(value: Any, field_name: str, object_name: str) -> dict[str, str]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise SerializationFailure(
            f"ConfigMap {field_name} must be a mapping, got {type(value).__name__}",
            object_name,
        )
    for key, item in value.items():
        if not isinstance(key, str) or not isinstance(item, str):
            raise SerializationFailure(
                f"ConfigMap {field_name} entry {key!r} is not a string",
                object_name,
            )
    return dict(value)


@dataclass
class ConfigMap:
    """Typed view of a core/v1 ConfigMap.

    Attributes:
        name: Object name.
        namespace: Object namespace.
        data: UTF-8 values keyed by file name.
        binary_data: Base64-encoded values keyed by file name.
        immutable: Whether the ConfigMap is immutable, if set.
    """

    name: str
    namespace: str = ""
    data: dict[str, str] = field(default_factory=dict)
    binary_data: dict[str, str] = field(default_factory=dict)
    immutable: bool | None = None

    @classmethod
    def from_record(cls, record: ObjectRecord) -> ConfigMap:
        """Convert a generic record.

        Raises:
            SerializationFailure: If a field has the wrong shape.
        """
        document = record.document
        if not isinstance(document.get("metadata"), Mapping):
            raise SerializationFailure("ConfigMap has no metadata", record.name)
        immutable = document.get("immutable")
        if immutable is not None and not isinstance(immutable, bool):
            raise SerializationFailure("ConfigMap immutable must be a boolean", record.name)
        return cls(
            name=record.name,
            namespace=record.namespace,
            data=_string_map(document.get("data"), "data", record.name),
            binary_data=_string_map(document.get("binaryData"), "binaryData", record.name),
            immutable=immutable,
        )


class ConfigMapDir(DirectoryNode):
    """A ConfigMap with its ``data`` keys exposed as individual files."""

    def __init__(self, record: ObjectRecord, configmap: ConfigMap):
        self.record = record
        self.configmap = configmap
        self.name = record.name

    @classmethod
    def from_record(cls, record: ObjectRecord) -> ConfigMapDir:
        return cls(record, ConfigMap.from_record(record))

    def list(self) -> list[Entry]:
        entries = file_entries(FORMATS) + dir_entries(["data"])
        logger.debug("configmap_dir.list", name=self.name, entries=[e.name for e in entries])
        return entries

    def resolve(self, name: str) -> Node:
        logger.debug("configmap_dir.resolve", configmap=self.name, name=name)
        if name == "data":
            return DataDir(self.configmap.data)
        if name in FORMATS:
            return serialize(name, self.record.document)
        raise NotFound("No such entry", name)


class DataDir(DirectoryNode):
    """Key/value map exposed as one file per key holding the raw value."""

    name = "data"

    def __init__(self, data: Mapping[str, str]):
        self.data = data

    def list(self) -> list[Entry]:
        names = list(self.data)
        logger.debug("data_dir.list", entries=names)
        return file_entries(names)

    def resolve(self, name: str) -> Node:
        logger.debug("data_dir.resolve", name=name)
        if name not in self.data:
            raise NotFound("No such key", name)
        return VirtualFile(name, self.data[name].encode("utf-8"))
