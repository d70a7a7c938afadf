"""Domain errors — conflicts and missing aggregate streams."""

from __future__ import annotations

from typing import Any

from mp_eventstore.kernel.errors.base import BaseError


class DomainError(BaseError):
    """Raised when an event-sourcing rule is violated."""

    default_code = "domain_error"


class NotFoundError(DomainError):
    """The requested resource does not exist."""

    default_code = "not_found"

    def __init__(
        self,
        resource: str,
        identifier: Any = None,
        **kwargs: Any,
    ) -> None:
        msg = f"{resource} not found"
        if identifier is not None:
            msg = f"{resource} '{identifier}' not found"
        super().__init__(msg, **kwargs)
        self.resource = resource
        self.identifier = identifier


class EventStreamNotFoundError(NotFoundError):
    """Neither a snapshot nor any event exists for the aggregate."""

    default_code = "event_stream_not_found"

    def __init__(self, aggregate_type: str, aggregate_identifier: Any, **kwargs: Any) -> None:
        super().__init__(
            f"{aggregate_type} event stream",
            aggregate_identifier,
            detail={"aggregate_type": aggregate_type, "aggregate_identifier": str(aggregate_identifier)},
            **kwargs,
        )
        self.aggregate_type = aggregate_type


class ConflictError(DomainError):
    """The operation conflicts with existing state."""

    default_code = "conflict"


class ConcurrencyConflictError(ConflictError):
    """Another writer already appended an event at the same sequence number.

    Raised when an insert violates the unique
    ``(aggregateIdentifier, type, sequenceNumber)`` index.  Callers usually
    reload the aggregate and retry.
    """

    default_code = "concurrency_conflict"

    def __init__(
        self,
        aggregate_type: str,
        aggregate_identifier: str,
        sequence_number: int | None = None,
        **kwargs: Any,
    ) -> None:
        msg = f"Concurrent modification of {aggregate_type} '{aggregate_identifier}'"
        if sequence_number is not None:
            msg += f" at sequence number {sequence_number}"
        super().__init__(
            msg,
            detail={
                "aggregate_type": aggregate_type,
                "aggregate_identifier": aggregate_identifier,
                "sequence_number": sequence_number,
            },
            **kwargs,
        )
        self.aggregate_type = aggregate_type
        self.aggregate_identifier = aggregate_identifier
        self.sequence_number = sequence_number


__all__ = [
    "ConcurrencyConflictError",
    "ConflictError",
    "DomainError",
    "EventStreamNotFoundError",
    "NotFoundError",
]
