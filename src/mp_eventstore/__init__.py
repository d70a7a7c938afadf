"""
mp_eventstore – MongoDB persistence mapping for event-sourced aggregates.

Import path convention::

    from mp_eventstore.kernel.messaging import DomainEventMessage
    from mp_eventstore.kernel.serialization import RepresentationKind, Serializer
    from mp_eventstore.adapters.mongodb import DocumentPerEventStorageStrategy, MongoEventStore
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
