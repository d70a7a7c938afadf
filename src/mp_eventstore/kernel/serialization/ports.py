"""Kernel serialization – collaborator ports.

These are capabilities, not base classes: any object with matching
methods can be passed to the storage strategy.
"""
from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from typing import Any, Protocol

from mp_eventstore.kernel.messaging import DomainEventMessage
from mp_eventstore.kernel.serialization.serialized import (
    RepresentationKind,
    SerializedObject,
    SerializedType,
)


class Serializer(Protocol):
    """Port: turn payloads and metadata into text or native documents and back."""

    def can_serialize_to(self, kind: RepresentationKind) -> bool: ...

    def serialize(self, obj: Any, kind: RepresentationKind) -> SerializedObject: ...

    def deserialize(self, serialized: SerializedObject) -> Any: ...

    def class_for_type(self, serialized_type: SerializedType) -> type:
        """Return the class for *serialized_type*.

        Raises :class:`~mp_eventstore.kernel.errors.UnknownSerializedTypeError`
        when the type cannot be resolved.
        """
        ...


class SerializedDomainEventData(Protocol):
    """Read contract of a stored event, as consumed by an upcaster chain."""

    @property
    def event_identifier(self) -> str: ...

    @property
    def aggregate_identifier(self) -> Any: ...

    @property
    def sequence_number(self) -> int: ...

    @property
    def timestamp(self) -> datetime: ...

    @property
    def payload(self) -> SerializedObject: ...

    @property
    def metadata(self) -> SerializedObject: ...


class UpcasterChain(Protocol):
    """Port: bring stored payloads up to date and deserialize them.

    One stored entry may yield zero messages (unknown type skipped), one
    message, or several (an upcaster split the stored shape).
    """

    def upcast_and_deserialize(
        self,
        entry: SerializedDomainEventData,
        aggregate_identifier: Any,
        serializer: Serializer,
        skip_unknown_types: bool,
    ) -> Sequence[DomainEventMessage]: ...


__all__ = ["SerializedDomainEventData", "Serializer", "UpcasterChain"]
