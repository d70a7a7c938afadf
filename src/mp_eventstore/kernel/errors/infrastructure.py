"""Infrastructure errors — (de)serialization and document mapping failures."""

from __future__ import annotations

from typing import Any

from mp_eventstore.kernel.errors.base import BaseError


class InfrastructureError(BaseError):
    """Infrastructure / I/O failure that is not a business rule violation."""

    default_code = "infrastructure_error"


class SerializationError(InfrastructureError):
    """Failed to serialize or deserialize a payload."""

    default_code = "serialization_error"

    def __init__(
        self,
        message: str,
        *,
        payload_type: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.payload_type = payload_type


class UnknownSerializedTypeError(SerializationError):
    """The serializer has no class registered for a stored payload type."""

    default_code = "unknown_serialized_type"

    def __init__(self, type_name: str, revision: str | None = None, **kwargs: Any) -> None:
        label = type_name if revision is None else f"{type_name} (revision {revision})"
        super().__init__(
            f"Unknown serialized type {label}",
            payload_type=type_name,
            detail={"type": type_name, "revision": revision},
            **kwargs,
        )
        self.revision = revision


class EventMappingError(SerializationError):
    """A stored event document is missing a field or holds a malformed value."""

    default_code = "event_mapping_error"

    def __init__(self, field: str, reason: str, **kwargs: Any) -> None:
        super().__init__(f"Cannot read '{field}' from event document: {reason}", **kwargs)
        self.detail.setdefault("field", field)
        self.field = field


__all__ = [
    "EventMappingError",
    "InfrastructureError",
    "SerializationError",
    "UnknownSerializedTypeError",
]
