"""MongoDB adapter — index policy for the events and snapshots collections."""

from __future__ import annotations

import dataclasses
from typing import Any

from pymongo import ASCENDING, IndexModel

from mp_eventstore.adapters.mongodb.event_entry import (
    AGGREGATE_IDENTIFIER_PROPERTY,
    AGGREGATE_TYPE_PROPERTY,
    SEQUENCE_NUMBER_PROPERTY,
    TIME_STAMP_PROPERTY,
)
from mp_eventstore.observability.logging import get_logger

logger = get_logger(__name__)

UNIQUE_AGGREGATE_INDEX = "uniqueAggregateIndex"
ORDERED_EVENT_STREAM_INDEX = "orderedEventStreamIndex"


@dataclasses.dataclass(frozen=True)
class IndexSpec:
    """Declarative index definition; ``name`` identifies it on re-creation."""

    name: str
    keys: tuple[tuple[str, int], ...]
    unique: bool = False

    def to_model(self) -> IndexModel:
        return IndexModel(list(self.keys), name=self.name, unique=self.unique)


_AGGREGATE_KEYS = (
    (AGGREGATE_IDENTIFIER_PROPERTY, ASCENDING),
    (AGGREGATE_TYPE_PROPERTY, ASCENDING),
    (SEQUENCE_NUMBER_PROPERTY, ASCENDING),
)

EVENT_INDEXES: tuple[IndexSpec, ...] = (
    # guards against two writers appending at the same sequence number
    IndexSpec(UNIQUE_AGGREGATE_INDEX, _AGGREGATE_KEYS, unique=True),
    IndexSpec(
        ORDERED_EVENT_STREAM_INDEX,
        ((TIME_STAMP_PROPERTY, ASCENDING), (SEQUENCE_NUMBER_PROPERTY, ASCENDING)),
    ),
)

SNAPSHOT_INDEXES: tuple[IndexSpec, ...] = (
    IndexSpec(UNIQUE_AGGREGATE_INDEX, _AGGREGATE_KEYS, unique=True),
)


async def apply_indexes(collection: Any, specs: tuple[IndexSpec, ...]) -> list[str]:
    """Create *specs* on *collection*.

    Idempotent: MongoDB treats re-creating an identical index as a no-op.
    """
    return await collection.create_indexes([spec.to_model() for spec in specs])


async def ensure_indexes(events_collection: Any, snapshots_collection: Any) -> None:
    """Apply :data:`EVENT_INDEXES` and :data:`SNAPSHOT_INDEXES`.  Safe on every startup."""
    await apply_indexes(events_collection, EVENT_INDEXES)
    await apply_indexes(snapshots_collection, SNAPSHOT_INDEXES)
    logger.info(
        "eventstore.indexes.ensured",
        events=[spec.name for spec in EVENT_INDEXES],
        snapshots=[spec.name for spec in SNAPSHOT_INDEXES],
    )


__all__ = [
    "EVENT_INDEXES",
    "ORDERED_EVENT_STREAM_INDEX",
    "SNAPSHOT_INDEXES",
    "UNIQUE_AGGREGATE_INDEX",
    "IndexSpec",
    "apply_indexes",
    "ensure_indexes",
]
