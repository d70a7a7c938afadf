"""MongoDB adapter — MongoEventStore."""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable, Sequence
from typing import Any, NoReturn

from pymongo.errors import BulkWriteError, DuplicateKeyError

from mp_eventstore.adapters.mongodb.criteria import MongoCriteria
from mp_eventstore.adapters.mongodb.event_entry import SEQUENCE_NUMBER_PROPERTY
from mp_eventstore.adapters.mongodb.settings import MongoEventStoreSettings
from mp_eventstore.adapters.mongodb.storage_strategy import (
    DocumentPerEventStorageStrategy,
    StorageStrategy,
)
from mp_eventstore.kernel.errors import (
    ConcurrencyConflictError,
    EventStreamNotFoundError,
    SerializationError,
)
from mp_eventstore.kernel.messaging import DomainEventMessage
from mp_eventstore.kernel.serialization import Serializer, UpcasterChain
from mp_eventstore.observability.logging import get_logger

logger = get_logger(__name__)

_DUPLICATE_KEY = 11000

type EventVisitor = Callable[[DomainEventMessage], Awaitable[None] | None]


class MongoEventStore:
    """Append-only event store on top of a :class:`StorageStrategy`.

    Events and snapshots live in two collections (motor or pymongo async).
    The unique ``(aggregateIdentifier, type, sequenceNumber)`` index is the
    optimistic-concurrency guard: a racing append fails with a duplicate key
    error, re-raised as :class:`ConcurrencyConflictError`.

    Call :meth:`ensure_indexes` once on startup before the first append.

    Events of one append are inserted as independent documents.  If a
    conflict interrupts the batch, the documents before it stay written.
    """

    def __init__(
        self,
        events_collection: Any,
        snapshots_collection: Any,
        serializer: Serializer,
        upcaster_chain: UpcasterChain,
        *,
        storage_strategy: StorageStrategy | None = None,
        skip_unknown_types: bool = False,
    ) -> None:
        self._events = events_collection
        self._snapshots = snapshots_collection
        self._serializer = serializer
        self._upcaster_chain = upcaster_chain
        self._strategy = storage_strategy or DocumentPerEventStorageStrategy()
        self._skip_unknown_types = skip_unknown_types

    @classmethod
    def from_settings(
        cls,
        database: Any,
        settings: MongoEventStoreSettings,
        serializer: Serializer,
        upcaster_chain: UpcasterChain,
        *,
        storage_strategy: StorageStrategy | None = None,
    ) -> "MongoEventStore":
        """Build a store from a database handle and :class:`MongoEventStoreSettings`."""
        return cls(
            database[settings.events_collection],
            database[settings.snapshots_collection],
            serializer,
            upcaster_chain,
            storage_strategy=storage_strategy,
            skip_unknown_types=settings.skip_unknown_types,
        )

    # ------------------------------------------------------------------
    # Setup
    # ------------------------------------------------------------------

    async def ensure_indexes(self) -> None:
        """Create the strategy's indexes.  Safe to call repeatedly."""
        await self._strategy.ensure_indexes(self._events, self._snapshots)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def append_events(self, aggregate_type: str, messages: Sequence[DomainEventMessage]) -> None:
        """Insert *messages* for one aggregate, in order."""
        if not messages:
            return
        documents = self._strategy.create_documents(aggregate_type, self._serializer, messages)
        try:
            await self._events.insert_many(documents, ordered=True)
        except BulkWriteError as exc:
            failed = _first_duplicate(exc)
            if failed is None:
                raise
            self._conflict(aggregate_type, messages[failed], exc)
        logger.debug(
            "eventstore.append",
            aggregate_type=aggregate_type,
            aggregate_identifier=str(messages[0].aggregate_identifier),
            first_sequence_number=messages[0].sequence_number,
            count=len(messages),
        )

    async def append_snapshot_event(self, aggregate_type: str, snapshot_event: DomainEventMessage) -> None:
        """Store *snapshot_event* as the aggregate's state at its sequence number."""
        (document,) = self._strategy.create_documents(aggregate_type, self._serializer, [snapshot_event])
        try:
            await self._snapshots.insert_one(document)
        except DuplicateKeyError as exc:
            self._conflict(aggregate_type, snapshot_event, exc)
        logger.debug(
            "eventstore.snapshot.append",
            aggregate_type=aggregate_type,
            aggregate_identifier=str(snapshot_event.aggregate_identifier),
            sequence_number=snapshot_event.sequence_number,
        )

    def _conflict(self, aggregate_type: str, message: DomainEventMessage, exc: Exception) -> NoReturn:
        error = ConcurrencyConflictError(
            aggregate_type,
            str(message.aggregate_identifier),
            message.sequence_number,
            cause=exc,
        )
        logger.warning("eventstore.conflict", **error.detail)
        raise error from exc

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def load_last_snapshot(
        self, aggregate_type: str, aggregate_identifier: Any
    ) -> DomainEventMessage | None:
        """Return the most recent snapshot event, or ``None``.

        A snapshot that cannot be deserialized is logged and ignored so the
        aggregate can still be rebuilt from its full event stream.
        """
        async with self._strategy.find_last_snapshot(
            self._snapshots, aggregate_type, str(aggregate_identifier)
        ) as cursor:
            async for document in cursor:
                try:
                    messages = self._extract(document, aggregate_identifier)
                except SerializationError as exc:
                    logger.warning(
                        "eventstore.snapshot.unreadable",
                        aggregate_type=aggregate_type,
                        aggregate_identifier=str(aggregate_identifier),
                        error=exc.to_dict(),
                    )
                    return None
                return messages[0] if messages else None
        return None

    async def read_events(self, aggregate_type: str, aggregate_identifier: Any) -> list[DomainEventMessage]:
        """Return the latest snapshot (if any) followed by every later event.

        Raises :class:`EventStreamNotFoundError` when neither exists.
        """
        events: list[DomainEventMessage] = []
        first_sequence_number = 0
        snapshot = await self.load_last_snapshot(aggregate_type, aggregate_identifier)
        if snapshot is not None:
            events.append(snapshot)
            first_sequence_number = snapshot.sequence_number + 1
        events.extend(
            await self.read_events_range(aggregate_type, aggregate_identifier, first_sequence_number)
        )
        if not events:
            raise EventStreamNotFoundError(aggregate_type, aggregate_identifier)
        return events

    async def read_events_range(
        self,
        aggregate_type: str,
        aggregate_identifier: Any,
        first_sequence_number: int,
        last_sequence_number: int | None = None,
    ) -> list[DomainEventMessage]:
        """Return events with ``first <= sequence number <= last`` (``last`` open when ``None``)."""
        events: list[DomainEventMessage] = []
        async with self._strategy.find_events_for_aggregate(
            self._events, aggregate_type, str(aggregate_identifier), first_sequence_number
        ) as cursor:
            async for document in cursor:
                if last_sequence_number is not None and document[SEQUENCE_NUMBER_PROPERTY] > last_sequence_number:
                    break
                events.extend(self._extract(document, aggregate_identifier))
        return events

    async def visit_events(self, visitor: EventVisitor, criteria: MongoCriteria | None = None) -> None:
        """Feed every event matching *criteria* to *visitor*, oldest first.

        *visitor* may be a plain function or a coroutine function.
        """
        async with self._strategy.find_events(self._events, criteria) as cursor:
            async for document in cursor:
                for message in self._extract(document, None):
                    result = visitor(message)
                    if inspect.isawaitable(result):
                        await result

    def _extract(self, document: Any, aggregate_identifier: Any) -> list[DomainEventMessage]:
        return self._strategy.extract_event_messages(
            document,
            aggregate_identifier,
            self._serializer,
            self._upcaster_chain,
            self._skip_unknown_types,
        )


def _first_duplicate(exc: BulkWriteError) -> int | None:
    """Index of the first document rejected by a unique index, if any."""
    for error in exc.details.get("writeErrors", []):
        if error.get("code") == _DUPLICATE_KEY:
            return int(error.get("index", 0))
    return None


__all__ = ["EventVisitor", "MongoEventStore"]
