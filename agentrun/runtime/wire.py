"""
Wire - event channel for one subscriber of a run.

The RunController owns the writing side: each event of a run is written
to every open wire of that run, and the wires are closed right after the
terminal event. Subscribers only read.

Usage:
    wire = Wire(maxsize=100)
    wire.write(event)      # controller side
    wire.close()

    async for event in wire.read():
        ...
"""

import asyncio
from typing import TYPE_CHECKING, AsyncIterator

if TYPE_CHECKING:
    from agentrun.domain import RunEvent


class Wire:
    """
    Non-blocking event channel for run events.

    - write(): enqueue an event, or drop it when closed or full
    - read(): async iterate until the wire is closed
    - close(): end the stream after the already written events
    """

    _SENTINEL = object()

    def __init__(self, maxsize: int = 0):
        """
        Args:
            maxsize: Pending events allowed before writes are dropped (0 = unlimited)
        """
        # Unbounded so close() can always enqueue the sentinel
        self._queue: asyncio.Queue = asyncio.Queue()
        self._maxsize = maxsize
        self._closed = False

    def write(self, event: "RunEvent", *, force: bool = False) -> bool:
        """
        Enqueue an event without blocking the writer.

        Args:
            event: Event to enqueue
            force: Enqueue even when the wire is full (terminal events)

        Returns:
            False if the wire is closed or full and the event was dropped
        """
        if self._closed:
            return False
        if not force and self._maxsize and self._queue.qsize() >= self._maxsize:
            return False
        self._queue.put_nowait(event)
        return True

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._queue.put_nowait(self._SENTINEL)

    async def read(self) -> AsyncIterator["RunEvent"]:
        while True:
            item = await self._queue.get()
            if item is self._SENTINEL:
                break
            yield item

    @property
    def closed(self) -> bool:
        return self._closed

    def __repr__(self) -> str:
        return f"Wire(closed={self._closed}, pending={self._queue.qsize()})"


__all__ = ["Wire"]
