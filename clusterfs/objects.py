"""Generic object projection: full-document YAML and JSON files."""

from __future__ import annotations

import json
from typing import Any

import structlog
import yaml

from .base import DirectoryNode, Entry, Node, ObjectRecord, file_entries
from .errors import NotFound, SerializationFailure
from .virtualfile import VirtualFile

logger = structlog.get_logger(__name__)

FORMATS = ("yaml", "json")


def _check_keys(value: Any) -> None:
    if isinstance(value, dict):
        for key, item in value.items():
            if not isinstance(key, str):
                raise SerializationFailure(f"cannot encode JSON: non-string key {key!r}")
            _check_keys(item)
    elif isinstance(value, (list, tuple)):
        for item in value:
            _check_keys(item)


def to_json(document: Any) -> bytes:
    """Serialize a document as 2-space indented JSON.

    Raises:
        SerializationFailure: For non-string mapping keys or non-finite
            floats, which would not load back as the same document.
    """
    _check_keys(document)
    try:
        text = json.dumps(document, indent=2, ensure_ascii=False, allow_nan=False)
    except (TypeError, ValueError) as exc:
        raise SerializationFailure(f"cannot encode JSON: {exc}") from exc
    return (text + "\n").encode("utf-8")


def to_yaml(document: Any) -> bytes:
    """Serialize a document as block-style YAML."""
    try:
        text = yaml.safe_dump(document, allow_unicode=True)
    except yaml.YAMLError as exc:
        raise SerializationFailure(f"cannot encode YAML: {exc}") from exc
    return text.encode("utf-8")


def serialize(fmt: str, document: Any) -> VirtualFile:
    """Build the file node for one serialization format."""
    if fmt == "json":
        content = to_json(document)
    elif fmt == "yaml":
        content = to_yaml(document)
    else:
        raise NotFound("No such format", fmt)
    logger.debug("object.serialized", format=fmt, size=len(content))
    return VirtualFile(fmt, content)


class ObjectDir(DirectoryNode):
    """A single object exposed as ``yaml`` and ``json`` files."""

    def __init__(self, record: ObjectRecord):
        self.record = record
        self.name = record.name

    def list(self) -> list[Entry]:
        logger.debug("object_dir.list", name=self.name, entries=list(FORMATS))
        return file_entries(FORMATS)

    def resolve(self, name: str) -> Node:
        logger.debug("object_dir.resolve", object=self.name, name=name)
        if name not in FORMATS:
            raise NotFound("No such entry", name)
        return serialize(name, self.record.document)
