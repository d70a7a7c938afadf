"""Observability – structlog configuration and logger helper."""
from mp_eventstore.observability.logging.factory import JsonLoggerFactory
from mp_eventstore.observability.logging.processors import get_logger

__all__ = ["JsonLoggerFactory", "get_logger"]
