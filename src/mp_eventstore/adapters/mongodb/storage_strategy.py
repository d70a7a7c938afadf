"""MongoDB adapter — StorageStrategy port and DocumentPerEventStorageStrategy."""

from __future__ import annotations

import abc
from collections.abc import Mapping, Sequence
from typing import Any

from pymongo import ASCENDING, DESCENDING

from mp_eventstore.adapters.mongodb import indexes
from mp_eventstore.adapters.mongodb.criteria import MongoCriteria
from mp_eventstore.adapters.mongodb.cursor import EventCursor
from mp_eventstore.adapters.mongodb.event_entry import (
    AGGREGATE_IDENTIFIER_PROPERTY,
    AGGREGATE_TYPE_PROPERTY,
    SEQUENCE_NUMBER_PROPERTY,
    TIME_STAMP_PROPERTY,
    EventEntry,
    for_aggregate,
)
from mp_eventstore.kernel.messaging import DomainEventMessage
from mp_eventstore.kernel.serialization import Serializer, UpcasterChain


class StorageStrategy(abc.ABC):
    """Port: how events are laid out in, and read back from, MongoDB.

    Only :meth:`ensure_indexes` writes to the database; inserting the
    documents produced by :meth:`create_documents` is up to the caller.
    """

    @abc.abstractmethod
    def create_documents(
        self,
        aggregate_type: str,
        serializer: Serializer,
        messages: Sequence[DomainEventMessage],
    ) -> list[dict[str, Any]]:
        """Return the documents to insert for *messages*, in the same order."""

    @abc.abstractmethod
    def find_events_for_aggregate(
        self,
        collection: Any,
        aggregate_type: str,
        aggregate_identifier: str,
        first_sequence_number: int,
    ) -> EventCursor:
        """Cursor over one aggregate's documents from *first_sequence_number*, ascending."""

    @abc.abstractmethod
    def find_events(self, collection: Any, criteria: MongoCriteria | None = None) -> EventCursor:
        """Cursor over documents matching *criteria*, by time stamp then sequence number."""

    @abc.abstractmethod
    def find_last_snapshot(
        self,
        collection: Any,
        aggregate_type: str,
        aggregate_identifier: str,
    ) -> EventCursor:
        """Cursor over at most one document: the aggregate's latest snapshot."""

    @abc.abstractmethod
    def extract_event_messages(
        self,
        document: Mapping[str, Any],
        aggregate_identifier: Any,
        serializer: Serializer,
        upcaster_chain: UpcasterChain,
        skip_unknown_types: bool,
    ) -> list[DomainEventMessage]:
        """Rebuild the event messages stored in *document*."""

    @abc.abstractmethod
    async def ensure_indexes(self, events_collection: Any, snapshots_collection: Any) -> None:
        """Create the indexes the strategy relies on.  Idempotent."""


class DocumentPerEventStorageStrategy(StorageStrategy):
    """Stores each event as a separate document.

    Events are easy to query individually, but a batch of events is not
    stored atomically: every document is an independent insert.  See
    :mod:`mp_eventstore.adapters.mongodb.event_entry` for the layout.
    """

    def create_documents(
        self,
        aggregate_type: str,
        serializer: Serializer,
        messages: Sequence[DomainEventMessage],
    ) -> list[dict[str, Any]]:
        return [
            EventEntry.from_message(aggregate_type, message, serializer).as_document()
            for message in messages
        ]

    def find_events_for_aggregate(
        self,
        collection: Any,
        aggregate_type: str,
        aggregate_identifier: str,
        first_sequence_number: int,
    ) -> EventCursor:
        return EventCursor(
            collection.find(
                for_aggregate(aggregate_type, aggregate_identifier, first_sequence_number),
                sort=[(SEQUENCE_NUMBER_PROPERTY, ASCENDING)],
            )
        )

    def find_events(self, collection: Any, criteria: MongoCriteria | None = None) -> EventCursor:
        query = criteria.as_filter() if criteria is not None else {}
        return EventCursor(
            collection.find(
                query,
                sort=[(TIME_STAMP_PROPERTY, ASCENDING), (SEQUENCE_NUMBER_PROPERTY, ASCENDING)],
            )
        )

    def find_last_snapshot(
        self,
        collection: Any,
        aggregate_type: str,
        aggregate_identifier: str,
    ) -> EventCursor:
        return EventCursor(
            collection.find(
                {
                    "$and": [
                        {AGGREGATE_IDENTIFIER_PROPERTY: aggregate_identifier},
                        {AGGREGATE_TYPE_PROPERTY: aggregate_type},
                    ]
                },
                sort=[(SEQUENCE_NUMBER_PROPERTY, DESCENDING)],
                limit=1,
            )
        )

    def extract_event_messages(
        self,
        document: Mapping[str, Any],
        aggregate_identifier: Any,
        serializer: Serializer,
        upcaster_chain: UpcasterChain,
        skip_unknown_types: bool,
    ) -> list[DomainEventMessage]:
        return EventEntry.from_document(document).get_domain_events(
            aggregate_identifier, serializer, upcaster_chain, skip_unknown_types
        )

    async def ensure_indexes(self, events_collection: Any, snapshots_collection: Any) -> None:
        await indexes.ensure_indexes(events_collection, snapshots_collection)


__all__ = ["DocumentPerEventStorageStrategy", "StorageStrategy"]
