"""Kernel serialization – serialized values and serializer / upcaster ports."""
from mp_eventstore.kernel.serialization.ports import (
    SerializedDomainEventData,
    Serializer,
    UpcasterChain,
)
from mp_eventstore.kernel.serialization.serialized import (
    METADATA_TYPE_NAME,
    RepresentationKind,
    SerializedObject,
    SerializedType,
    is_serialized_metadata,
    serialized_metadata,
)

__all__ = [
    "METADATA_TYPE_NAME",
    "RepresentationKind",
    "SerializedDomainEventData",
    "SerializedObject",
    "SerializedType",
    "Serializer",
    "UpcasterChain",
    "is_serialized_metadata",
    "serialized_metadata",
]
