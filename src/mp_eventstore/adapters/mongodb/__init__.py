"""MongoDB adapter — record mapping, storage strategy, indexes, event store.

Works with a motor (or pymongo async) database handle.
"""

from mp_eventstore.adapters.mongodb.criteria import MongoCriteria, MongoCriteriaBuilder, Property
from mp_eventstore.adapters.mongodb.cursor import EventCursor
from mp_eventstore.adapters.mongodb.event_entry import EventEntry
from mp_eventstore.adapters.mongodb.event_store import MongoEventStore
from mp_eventstore.adapters.mongodb.indexes import (
    EVENT_INDEXES,
    SNAPSHOT_INDEXES,
    IndexSpec,
    ensure_indexes,
)
from mp_eventstore.adapters.mongodb.settings import MongoEventStoreSettings
from mp_eventstore.adapters.mongodb.storage_strategy import (
    DocumentPerEventStorageStrategy,
    StorageStrategy,
)

__all__ = [
    "EVENT_INDEXES",
    "SNAPSHOT_INDEXES",
    "DocumentPerEventStorageStrategy",
    "EventCursor",
    "EventEntry",
    "IndexSpec",
    "MongoCriteria",
    "MongoCriteriaBuilder",
    "MongoEventStore",
    "MongoEventStoreSettings",
    "Property",
    "StorageStrategy",
    "ensure_indexes",
]
