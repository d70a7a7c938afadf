"""MongoDB adapter — EventCursor."""

from __future__ import annotations

import inspect
from types import TracebackType
from typing import Any


class EventCursor:
    """Forward-only, single-pass view over a driver cursor.

    Use it as an async context manager so the server-side cursor is released
    on every exit path, including exceptions and an early ``break``::

        async with strategy.find_events(collection) as cursor:
            async for document in cursor:
                ...

    Works with motor's ``AsyncIOMotorCursor`` and pymongo's ``AsyncCursor``.
    Once exhausted or closed it yields nothing further.
    """

    def __init__(self, cursor: Any) -> None:
        self._cursor = cursor
        self._iterator: Any = None
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    async def __aenter__(self) -> "EventCursor":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.close()

    def __aiter__(self) -> "EventCursor":
        return self

    async def __anext__(self) -> dict[str, Any]:
        if self._closed:
            raise StopAsyncIteration
        if self._iterator is None:
            self._iterator = self._cursor.__aiter__()
        try:
            return await anext(self._iterator)
        except StopAsyncIteration:
            await self.close()
            raise

    async def close(self) -> None:
        """Release the underlying cursor.  Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        result = self._cursor.close()
        if inspect.isawaitable(result):
            await result


__all__ = ["EventCursor"]
