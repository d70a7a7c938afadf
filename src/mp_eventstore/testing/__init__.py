"""Testing support – in-memory doubles for the event store's collaborators."""

from mp_eventstore.testing.fakes import (
    FakeSerializer,
    FakeUpcasterChain,
    InMemoryCursor,
    InMemoryMongoCollection,
)

__all__ = [
    "FakeSerializer",
    "FakeUpcasterChain",
    "InMemoryCursor",
    "InMemoryMongoCollection",
]
