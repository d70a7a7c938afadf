"""MongoDB adapter — EventEntry, the one-document-per-event record mapper.

Document layout::

    aggregateIdentifier => str(aggregate identifier)
    sequenceNumber      => position of the event in the aggregate's stream
    type                => aggregate type
    timeStamp           => sortable ISO-8601 UTC string
    serializedPayload   => payload as text or as an embedded document
    payloadType         => logical payload type name
    payloadRevision     => payload revision (may be null)
    serializedMetaData  => metadata, same representation as the payload
    eventIdentifier     => unique event identifier

The logical type of the metadata is not stored.  On retrieval it is set
to ``METADATA_TYPE_NAME`` with no revision.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from datetime import datetime
from typing import Any

from mp_eventstore.kernel.errors import EventMappingError
from mp_eventstore.kernel.messaging import DomainEventMessage
from mp_eventstore.kernel.serialization import (
    RepresentationKind,
    SerializedObject,
    SerializedType,
    Serializer,
    UpcasterChain,
    serialized_metadata,
)
from mp_eventstore.kernel.time import parse_sortable_string, to_sortable_string

AGGREGATE_IDENTIFIER_PROPERTY = "aggregateIdentifier"
SEQUENCE_NUMBER_PROPERTY = "sequenceNumber"
AGGREGATE_TYPE_PROPERTY = "type"
TIME_STAMP_PROPERTY = "timeStamp"
SERIALIZED_PAYLOAD_PROPERTY = "serializedPayload"
PAYLOAD_TYPE_PROPERTY = "payloadType"
PAYLOAD_REVISION_PROPERTY = "payloadRevision"
META_DATA_PROPERTY = "serializedMetaData"
EVENT_IDENTIFIER_PROPERTY = "eventIdentifier"


@dataclasses.dataclass(frozen=True)
class EventEntry:
    """A single stored event, readable through the ``SerializedDomainEventData`` contract.

    Build one from a message with :meth:`from_message` (write path) or from a
    MongoDB document with :meth:`from_document` (read path).
    """

    aggregate_identifier: str
    aggregate_type: str | None
    sequence_number: int
    time_stamp: str
    serialized_payload: Any
    payload_type: str
    payload_revision: str | None
    serialized_metadata: Any
    event_identifier: str
    representation: RepresentationKind

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def from_message(
        cls,
        aggregate_type: str,
        message: DomainEventMessage,
        serializer: Serializer,
    ) -> "EventEntry":
        """Map *message* to an entry, preferring a native document representation."""
        kind = RepresentationKind.TEXT
        if serializer.can_serialize_to(RepresentationKind.DOCUMENT):
            kind = RepresentationKind.DOCUMENT
        payload = serializer.serialize(message.payload, kind)
        metadata = serializer.serialize(message.metadata, kind)
        return cls(
            aggregate_identifier=str(message.aggregate_identifier),
            aggregate_type=aggregate_type,
            sequence_number=message.sequence_number,
            time_stamp=to_sortable_string(message.timestamp),
            serialized_payload=payload.data,
            payload_type=payload.type.name,
            payload_revision=payload.type.revision,
            serialized_metadata=metadata.data,
            event_identifier=message.identifier,
            representation=kind,
        )

    @classmethod
    def from_document(cls, document: Mapping[str, Any]) -> "EventEntry":
        """Read an entry from a stored document.

        The representation kind is derived from the shape of the stored
        payload.  Raises :class:`EventMappingError` for missing or malformed
        required fields.
        """
        sequence_number = _sequence_number(_required(document, SEQUENCE_NUMBER_PROPERTY))

        time_stamp = _required_str(document, TIME_STAMP_PROPERTY)
        try:
            parse_sortable_string(time_stamp)
        except ValueError as exc:
            raise EventMappingError(TIME_STAMP_PROPERTY, str(exc), cause=exc) from exc

        payload = _text_or_document(_required(document, SERIALIZED_PAYLOAD_PROPERTY), SERIALIZED_PAYLOAD_PROPERTY)
        metadata = document.get(META_DATA_PROPERTY)
        if metadata is not None:
            metadata = _text_or_document(metadata, META_DATA_PROPERTY)

        return cls(
            aggregate_identifier=_required_str(document, AGGREGATE_IDENTIFIER_PROPERTY),
            aggregate_type=document.get(AGGREGATE_TYPE_PROPERTY),
            sequence_number=sequence_number,
            time_stamp=time_stamp,
            serialized_payload=payload,
            payload_type=_required_str(document, PAYLOAD_TYPE_PROPERTY),
            payload_revision=document.get(PAYLOAD_REVISION_PROPERTY),
            serialized_metadata=metadata,
            event_identifier=_required_str(document, EVENT_IDENTIFIER_PROPERTY),
            representation=RepresentationKind.of(payload),
        )

    def as_document(self) -> dict[str, Any]:
        """Return the entry as a MongoDB document."""
        return {
            AGGREGATE_IDENTIFIER_PROPERTY: self.aggregate_identifier,
            SEQUENCE_NUMBER_PROPERTY: self.sequence_number,
            SERIALIZED_PAYLOAD_PROPERTY: self.serialized_payload,
            TIME_STAMP_PROPERTY: self.time_stamp,
            AGGREGATE_TYPE_PROPERTY: self.aggregate_type,
            PAYLOAD_TYPE_PROPERTY: self.payload_type,
            PAYLOAD_REVISION_PROPERTY: self.payload_revision,
            META_DATA_PROPERTY: self.serialized_metadata,
            EVENT_IDENTIFIER_PROPERTY: self.event_identifier,
        }

    # ------------------------------------------------------------------
    # SerializedDomainEventData
    # ------------------------------------------------------------------

    @property
    def timestamp(self) -> datetime:
        return parse_sortable_string(self.time_stamp)

    @property
    def payload(self) -> SerializedObject:
        return SerializedObject(
            data=self.serialized_payload,
            kind=self.representation,
            type=SerializedType(self.payload_type, self.payload_revision),
        )

    @property
    def metadata(self) -> SerializedObject:
        return serialized_metadata(self.serialized_metadata, self.representation)

    def get_domain_events(
        self,
        aggregate_identifier: Any,
        serializer: Serializer,
        upcaster_chain: UpcasterChain,
        skip_unknown_types: bool,
    ) -> list[DomainEventMessage]:
        """Upcast and deserialize this entry into domain event messages.

        *aggregate_identifier* is the identifier instance used for the
        lookup, or ``None`` to keep the stored string.
        """
        return list(
            upcaster_chain.upcast_and_deserialize(
                self, aggregate_identifier, serializer, skip_unknown_types
            )
        )


def for_aggregate(aggregate_type: str, aggregate_identifier: str, first_sequence_number: int) -> dict[str, Any]:
    """Filter selecting one aggregate's events from *first_sequence_number* on."""
    return {
        "$and": [
            {AGGREGATE_IDENTIFIER_PROPERTY: aggregate_identifier},
            {SEQUENCE_NUMBER_PROPERTY: {"$gte": first_sequence_number}},
            {AGGREGATE_TYPE_PROPERTY: aggregate_type},
        ]
    }


def _required(document: Mapping[str, Any], field: str) -> Any:
    value = document.get(field)
    if value is None:
        raise EventMappingError(field, "field is missing")
    return value


def _sequence_number(value: Any) -> int:
    # shells and JS drivers write numbers as doubles
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, bool) or not isinstance(value, int):
        raise EventMappingError(SEQUENCE_NUMBER_PROPERTY, f"expected an integer, got {value!r}")
    return value


def _required_str(document: Mapping[str, Any], field: str) -> str:
    value = _required(document, field)
    if not isinstance(value, str):
        raise EventMappingError(field, f"expected a string, got {type(value).__name__}")
    return value


def _text_or_document(value: Any, field: str) -> Any:
    if isinstance(value, Mapping | str):
        return value
    if isinstance(value, bytes | bytearray):
        try:
            return bytes(value).decode("utf-8")
        except UnicodeDecodeError as exc:
            raise EventMappingError(field, "stored bytes are not valid UTF-8", cause=exc) from exc
    raise EventMappingError(field, f"unsupported value of type {type(value).__name__}")


__all__ = [
    "AGGREGATE_IDENTIFIER_PROPERTY",
    "AGGREGATE_TYPE_PROPERTY",
    "EVENT_IDENTIFIER_PROPERTY",
    "META_DATA_PROPERTY",
    "PAYLOAD_REVISION_PROPERTY",
    "PAYLOAD_TYPE_PROPERTY",
    "SEQUENCE_NUMBER_PROPERTY",
    "SERIALIZED_PAYLOAD_PROPERTY",
    "TIME_STAMP_PROPERTY",
    "EventEntry",
    "for_aggregate",
]
