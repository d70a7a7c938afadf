"""Kernel error hierarchy — public re-export surface.

Hierarchy::

    BaseError
    ├── DomainError              (domain.py)
    │   ├── NotFoundError
    │   │   └── EventStreamNotFoundError
    │   └── ConflictError
    │       └── ConcurrencyConflictError
    └── InfrastructureError      (infrastructure.py)
        └── SerializationError
            ├── UnknownSerializedTypeError
            └── EventMappingError
"""

from mp_eventstore.kernel.errors.base import BaseError
from mp_eventstore.kernel.errors.domain import (
    ConcurrencyConflictError,
    ConflictError,
    DomainError,
    EventStreamNotFoundError,
    NotFoundError,
)
from mp_eventstore.kernel.errors.infrastructure import (
    EventMappingError,
    InfrastructureError,
    SerializationError,
    UnknownSerializedTypeError,
)

__all__ = [
    "BaseError",
    "ConcurrencyConflictError",
    "ConflictError",
    "DomainError",
    "EventMappingError",
    "EventStreamNotFoundError",
    "InfrastructureError",
    "NotFoundError",
    "SerializationError",
    "UnknownSerializedTypeError",
]
