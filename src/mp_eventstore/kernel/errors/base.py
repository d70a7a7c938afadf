"""Root error class for the mp-eventstore error hierarchy.

Every error the event store raises on purpose derives from :class:`BaseError`,
from concurrency conflicts down to configuration problems.  ``detail``
holds the aggregate, sequence number or document field involved, and
``to_dict()`` is what the store passes to structlog (for example on
``eventstore.snapshot.unreadable``).
"""

from __future__ import annotations

import json
from typing import Any


class BaseError(Exception):
    """Base event store error.

    Args:
        message: Human-readable description.
        code: Stable slug such as ``concurrency_conflict`` (defaults to ``default_code``).
        detail: JSON-safe context, e.g. ``{"aggregate_type": ..., "sequence_number": ...}``.
        cause: Driver or serializer exception being translated; also set as ``__cause__``.
    """

    default_code: str = "base_error"

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        detail: dict[str, Any] | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.detail: dict[str, Any] = detail or {}
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause

    def __str__(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, default=str)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r})"

    def to_dict(self) -> dict[str, Any]:
        """Serialise to a plain dict, safe to hand to a structured logger."""
        payload: dict[str, Any] = {
            "code": self.code,
            "message": self.message,
            "detail": self.detail,
        }
        if self.cause is not None:
            payload["cause"] = repr(self.cause)
        return payload


__all__ = ["BaseError"]
