"""Integration tests for the MongoDB event store.

Run with::

    pytest -m integration tests/integration/test_mongodb.py -v

Requires Docker (used automatically via ``testcontainers``).
"""

from __future__ import annotations

import asyncio
import dataclasses
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime, timedelta, timezone
from typing import Any

import pytest
from testcontainers.mongodb import MongoDbContainer

from mp_eventstore.adapters.mongodb import (
    DocumentPerEventStorageStrategy,
    MongoCriteriaBuilder,
    MongoEventStore,
    MongoEventStoreSettings,
)
from mp_eventstore.adapters.mongodb.indexes import ORDERED_EVENT_STREAM_INDEX, UNIQUE_AGGREGATE_INDEX
from mp_eventstore.kernel.errors import ConcurrencyConflictError, EventStreamNotFoundError
from mp_eventstore.kernel.messaging import DomainEventMessage
from mp_eventstore.testing.fakes import FakeSerializer, FakeUpcasterChain


# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------


def _run(coro: Any) -> Any:
    return asyncio.run(coro)


@dataclasses.dataclass(frozen=True)
class ItemReserved:
    sku: str
    quantity: int


@dataclasses.dataclass(frozen=True)
class StockSnapshot:
    sku: str
    on_hand: int


T0 = datetime(2024, 6, 1, tzinfo=UTC)


def _serializer(*, documents: bool = True) -> FakeSerializer:
    serializer = FakeSerializer(supports_documents=documents)
    serializer.register(ItemReserved, name="ItemReserved")
    serializer.register(StockSnapshot, name="StockSnapshot")
    return serializer


def _reserved(sku: str, seq: int, at: datetime | None = None) -> DomainEventMessage:
    return DomainEventMessage(
        aggregate_identifier=sku,
        sequence_number=seq,
        payload=ItemReserved(sku=sku, quantity=seq + 1),
        metadata={"correlation_id": f"c-{seq}"},
        timestamp=at or T0 + timedelta(seconds=seq),
    )


# ---------------------------------------------------------------------------
# MongoDB fixture (one container per module)
# ---------------------------------------------------------------------------


@pytest.fixture(scope="module")
def mongo_uri() -> str:  # type: ignore[return]
    with MongoDbContainer("mongo:7.0") as mongo:
        yield mongo.get_connection_url()


@pytest.fixture()
def with_store(mongo_uri: str, request: Any) -> Callable[..., Any]:
    """Run ``body(store, database)`` against a fresh database for this test.

    The motor client is created inside the running loop and closed after.
    """
    safe_name = request.node.nodeid.replace("/", "_").replace("::", "_").replace(".", "_")
    db_name = safe_name[-63:]  # MongoDB DB name limit

    def run(body: Callable[[MongoEventStore, Any], Awaitable[Any]], *, documents: bool = True) -> Any:
        async def main() -> Any:
            import motor.motor_asyncio as motor_async  # type: ignore[import]

            client = motor_async.AsyncIOMotorClient(mongo_uri)
            try:
                database = client[db_name]
                settings = MongoEventStoreSettings(database_name=db_name)
                store = MongoEventStore.from_settings(
                    database, settings, _serializer(documents=documents), FakeUpcasterChain()
                )
                await store.ensure_indexes()
                return await body(store, database)
            finally:
                client.close()

        return _run(main())

    return run


# ---------------------------------------------------------------------------
# Indexes
# ---------------------------------------------------------------------------


@pytest.mark.integration
class TestIndexes:
    def test_indexes_created(self, with_store: Callable[..., Any]) -> None:
        async def body(store: MongoEventStore, db: Any) -> tuple[dict[str, Any], dict[str, Any]]:
            return await db.domainevents.index_information(), await db.snapshotevents.index_information()

        events, snapshots = with_store(body)
        assert events[UNIQUE_AGGREGATE_INDEX]["unique"] is True
        assert events[UNIQUE_AGGREGATE_INDEX]["key"] == [
            ("aggregateIdentifier", 1),
            ("type", 1),
            ("sequenceNumber", 1),
        ]
        assert events[ORDERED_EVENT_STREAM_INDEX]["key"] == [("timeStamp", 1), ("sequenceNumber", 1)]
        assert not events[ORDERED_EVENT_STREAM_INDEX].get("unique", False)
        assert set(snapshots) == {"_id_", UNIQUE_AGGREGATE_INDEX}

    def test_ensure_indexes_idempotent(self, with_store: Callable[..., Any]) -> None:
        async def body(store: MongoEventStore, db: Any) -> int:
            await store.ensure_indexes()
            await store.ensure_indexes()
            return len(await db.domainevents.index_information())

        assert with_store(body) == 3


# ---------------------------------------------------------------------------
# Event store
# ---------------------------------------------------------------------------


@pytest.mark.integration
class TestMongoEventStore:
    @pytest.mark.parametrize("documents", [True, False])
    def test_append_and_read(self, with_store: Callable[..., Any], documents: bool) -> None:
        messages = [_reserved("sku-1", n) for n in range(3)]

        async def body(store: MongoEventStore, db: Any) -> list[DomainEventMessage]:
            await store.append_events("Stock", messages)
            return await store.read_events("Stock", "sku-1")

        events = with_store(body, documents=documents)
        assert [e.identifier for e in events] == [m.identifier for m in messages]
        assert [e.payload for e in events] == [m.payload for m in messages]
        assert [e.metadata for e in events] == [m.metadata for m in messages]
        assert [e.timestamp for e in events] == [m.timestamp for m in messages]

    def test_stored_document_layout(self, with_store: Callable[..., Any]) -> None:
        async def body(store: MongoEventStore, db: Any) -> dict[str, Any]:
            await store.append_events("Stock", [_reserved("sku-1", 0)])
            return await db.domainevents.find_one({}, {"_id": 0})

        doc = with_store(body)
        assert doc["aggregateIdentifier"] == "sku-1"
        assert doc["type"] == "Stock"
        assert doc["timeStamp"] == "2024-06-01T00:00:00.000000+00:00"
        assert doc["serializedPayload"] == {"sku": "sku-1", "quantity": 1}
        assert doc["payloadType"] == "ItemReserved"
        assert doc["payloadRevision"] is None
        assert doc["serializedMetaData"] == {"correlation_id": "c-0"}

    def test_concurrent_append_conflicts(self, with_store: Callable[..., Any]) -> None:
        async def body(store: MongoEventStore, db: Any) -> None:
            await store.append_events("Stock", [_reserved("sku-1", 0)])
            await store.append_events("Stock", [_reserved("sku-1", 0)])

        with pytest.raises(ConcurrencyConflictError):
            with_store(body)

    def test_racing_writers_one_wins(self, with_store: Callable[..., Any]) -> None:
        async def body(store: MongoEventStore, db: Any) -> tuple[list[Any], int]:
            results = await asyncio.gather(
                store.append_events("Stock", [_reserved("sku-1", 5)]),
                store.append_events("Stock", [_reserved("sku-1", 5)]),
                return_exceptions=True,
            )
            return results, await db.domainevents.count_documents({})

        results, stored = with_store(body)
        assert stored == 1
        assert sum(isinstance(r, ConcurrencyConflictError) for r in results) == 1

    def test_snapshot_shortens_stream(self, with_store: Callable[..., Any]) -> None:
        async def body(store: MongoEventStore, db: Any) -> list[DomainEventMessage]:
            await store.append_events("Stock", [_reserved("sku-1", n) for n in range(6)])
            for seq in (1, 3):
                await store.append_snapshot_event(
                    "Stock", DomainEventMessage("sku-1", seq, StockSnapshot("sku-1", seq), timestamp=T0)
                )
            return await store.read_events("Stock", "sku-1")

        events = with_store(body)
        assert [e.sequence_number for e in events] == [3, 4, 5]
        assert events[0].payload == StockSnapshot("sku-1", 3)

    def test_missing_stream(self, with_store: Callable[..., Any]) -> None:
        async def body(store: MongoEventStore, db: Any) -> None:
            await store.read_events("Stock", "nope")

        with pytest.raises(EventStreamNotFoundError):
            with_store(body)

    def test_read_range(self, with_store: Callable[..., Any]) -> None:
        async def body(store: MongoEventStore, db: Any) -> list[int]:
            await store.append_events("Stock", [_reserved("sku-1", n) for n in range(10)])
            events = await store.read_events_range("Stock", "sku-1", 2, 5)
            return [e.sequence_number for e in events]

        assert with_store(body) == [2, 3, 4, 5]

    def test_visit_events_in_time_order(self, with_store: Callable[..., Any]) -> None:
        plus_two = timezone(timedelta(hours=2))

        async def body(store: MongoEventStore, db: Any) -> list[tuple[str, int]]:
            await store.append_events("Stock", [_reserved("b", 0, T0 + timedelta(minutes=10))])
            # 01:00+02:00 is 23:00 UTC on the previous day
            await store.append_events("Stock", [_reserved("a", 0, datetime(2024, 6, 1, 1, tzinfo=plus_two))])
            await store.append_events("Stock", [_reserved("c", 0, T0)])
            seen: list[tuple[str, int]] = []
            await store.visit_events(lambda e: seen.append((e.aggregate_identifier, e.sequence_number)))
            return seen

        assert with_store(body) == [("a", 0), ("c", 0), ("b", 0)]

    def test_visit_events_with_criteria(self, with_store: Callable[..., Any]) -> None:
        builder = MongoCriteriaBuilder()

        async def body(store: MongoEventStore, db: Any) -> list[int]:
            await store.append_events("Stock", [_reserved("sku-1", n) for n in range(5)])
            criteria = builder.property("timeStamp").greater_than_equals(T0 + timedelta(seconds=3))
            seen: list[int] = []
            await store.visit_events(lambda e: seen.append(e.sequence_number), criteria)
            return seen

        assert with_store(body) == [3, 4]


# ---------------------------------------------------------------------------
# Storage strategy on a live server
# ---------------------------------------------------------------------------


@pytest.mark.integration
class TestDocumentPerEventStorageStrategy:
    def test_last_snapshot_is_single_document(self, with_store: Callable[..., Any]) -> None:
        strategy = DocumentPerEventStorageStrategy()

        async def body(store: MongoEventStore, db: Any) -> list[int]:
            docs = strategy.create_documents("Stock", _serializer(), [_reserved("sku-1", n) for n in (0, 3, 6)])
            await db.snapshotevents.insert_many(docs)
            async with strategy.find_last_snapshot(db.snapshotevents, "Stock", "sku-1") as cursor:
                return [d["sequenceNumber"] async for d in cursor]

        assert with_store(body) == [6]
