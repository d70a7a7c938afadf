"""Kernel messaging – DomainEventMessage."""
from __future__ import annotations

import dataclasses
from datetime import datetime
from typing import Any
from uuid import uuid4

from mp_eventstore.kernel.time import utc_now

type MetaData = dict[str, Any]
type MessageId = str


@dataclasses.dataclass(frozen=True)
class DomainEventMessage:
    """An immutable fact about an aggregate, positioned in its history.

    ``sequence_number`` is the zero-based position of the event within the
    aggregate's stream.  ``metadata`` carries auxiliary key/value data
    (correlation id, user, …) next to the payload.  ``timestamp`` must be
    timezone-aware; naive datetimes are rejected with :class:`ValueError`.

    Example::

        DomainEventMessage(
            aggregate_identifier="order-1",
            sequence_number=0,
            payload=OrderPlaced(order_id="order-1"),
        )
    """

    aggregate_identifier: Any
    sequence_number: int
    payload: Any
    metadata: MetaData = dataclasses.field(default_factory=dict)
    identifier: MessageId = dataclasses.field(default_factory=lambda: str(uuid4()))
    timestamp: datetime = dataclasses.field(default_factory=utc_now)

    def __post_init__(self) -> None:
        if self.timestamp.tzinfo is None or self.timestamp.utcoffset() is None:
            raise ValueError(f"timestamp must be timezone-aware, got {self.timestamp!r}")

    @property
    def payload_type(self) -> type:
        return type(self.payload)

    def with_metadata(self, metadata: MetaData) -> "DomainEventMessage":
        """Return a copy with *metadata* replacing the current metadata."""
        return dataclasses.replace(self, metadata=dict(metadata))

    def and_metadata(self, additional: MetaData) -> "DomainEventMessage":
        """Return a copy with *additional* merged over the current metadata."""
        return dataclasses.replace(self, metadata={**self.metadata, **additional})


__all__ = ["DomainEventMessage", "MessageId", "MetaData"]
