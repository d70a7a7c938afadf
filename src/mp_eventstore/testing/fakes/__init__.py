"""Testing fakes – serializer, upcaster chain and collection doubles."""
from mp_eventstore.testing.fakes.mongo import InMemoryCursor, InMemoryMongoCollection
from mp_eventstore.testing.fakes.serializer import FakeSerializer
from mp_eventstore.testing.fakes.upcasting import FakeUpcasterChain, Upcaster

__all__ = [
    "FakeSerializer",
    "FakeUpcasterChain",
    "InMemoryCursor",
    "InMemoryMongoCollection",
    "Upcaster",
]
