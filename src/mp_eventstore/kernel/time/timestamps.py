"""Kernel time – UTC clock helper and sortable timestamp encoding.

Event documents store their timestamp as text.  To keep lexical order
equal to chronological order every value is normalised to UTC and written
with a fixed width::

    2024-03-01T12:00:00.000000+00:00
"""
from __future__ import annotations

from datetime import UTC, datetime


def utc_now() -> datetime:
    """Shorthand for ``datetime.now(UTC)``."""
    return datetime.now(UTC)


def to_sortable_string(moment: datetime) -> str:
    """Render *moment* as a fixed-width UTC ISO-8601 string.

    Naive datetimes are taken to be UTC already.
    """
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    return moment.astimezone(UTC).isoformat(timespec="microseconds")


def parse_sortable_string(value: str) -> datetime:
    """Inverse of :func:`to_sortable_string`; always returns an aware datetime."""
    moment = datetime.fromisoformat(value)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    return moment


__all__ = ["parse_sortable_string", "to_sortable_string", "utc_now"]
