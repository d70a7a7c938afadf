"""Kernel serialization – representation kinds and serialized values."""
from __future__ import annotations

import dataclasses
import enum
from collections.abc import Mapping
from typing import Any

METADATA_TYPE_NAME = "mp_eventstore.MetaData"
"""Logical type assigned to every metadata value read back from storage."""


class RepresentationKind(enum.Enum):
    """Shape of a serialized value as held by the document store."""

    TEXT = "text"
    """UTF-8 text (JSON, XML, …) stored as a string field."""

    DOCUMENT = "document"
    """A native BSON sub-document stored as an embedded mapping."""

    @classmethod
    def of(cls, value: Any) -> "RepresentationKind":
        """Derive the kind from a value loaded from the store."""
        if isinstance(value, Mapping):
            return cls.DOCUMENT
        return cls.TEXT


@dataclasses.dataclass(frozen=True)
class SerializedType:
    """Logical type name plus optional schema revision."""

    name: str
    revision: str | None = None


@dataclasses.dataclass(frozen=True)
class SerializedObject:
    """Serialized data tagged with its representation kind and logical type."""

    data: Any
    kind: RepresentationKind
    type: SerializedType


def serialized_metadata(data: Any, kind: RepresentationKind) -> SerializedObject:
    """Wrap stored metadata.

    Metadata type information is never persisted, so the type is always
    ``METADATA_TYPE_NAME`` without revision.
    """
    return SerializedObject(data=data, kind=kind, type=SerializedType(METADATA_TYPE_NAME))


def is_serialized_metadata(serialized: SerializedObject) -> bool:
    return serialized.type.name == METADATA_TYPE_NAME


__all__ = [
    "METADATA_TYPE_NAME",
    "RepresentationKind",
    "SerializedObject",
    "SerializedType",
    "is_serialized_metadata",
    "serialized_metadata",
]
