"""Kernel messaging – domain event messages."""
from mp_eventstore.kernel.messaging.message import DomainEventMessage, MessageId, MetaData

__all__ = ["DomainEventMessage", "MessageId", "MetaData"]
