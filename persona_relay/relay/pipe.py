# Bounded, ordered handoff between the upstream reader and the HTTP writer.

from __future__ import annotations
import asyncio
from typing import TYPE_CHECKING, AsyncIterator, Optional

from persona_relay.errors import RelayPipeClosed

if TYPE_CHECKING:
    from persona_relay.generate.types import RelayMessage

DEFAULT_CAPACITY = 20


class RelayPipe:
    """
    Single-producer / single-consumer channel over an ``asyncio.Queue``.

    - ``send`` suspends while the queue is full (backpressure).
    - ``close`` is called by the producer once it has sent its terminal
      message; ``receive`` returns None when closed and drained.
    - ``cancel`` is called by the consumer when the client goes away; any
      pending or later ``send`` raises ``RelayPipeClosed``.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY):
        if capacity < 1:
            raise ValueError("capacity must be >= 1")
        self.capacity = capacity
        self._queue: asyncio.Queue = asyncio.Queue(maxsize=capacity)
        self._closed = asyncio.Event()
        self._cancelled = asyncio.Event()

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def qsize(self) -> int:
        return self._queue.qsize()

    # -------------------------
    # Producer side
    # -------------------------
    async def send(self, message: RelayMessage) -> None:
        if self._cancelled.is_set():
            raise RelayPipeClosed("consumer has gone away")
        if self._closed.is_set():
            raise RelayPipeClosed("pipe already closed by producer")
        if not self._queue.full():
            self._queue.put_nowait(message)
            return

        put = asyncio.ensure_future(self._queue.put(message))
        gone = asyncio.ensure_future(self._cancelled.wait())
        try:
            await asyncio.wait({put, gone}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            for waiter in (put, gone):
                if not waiter.done():
                    waiter.cancel()
        if not (put.done() and not put.cancelled()):
            raise RelayPipeClosed("consumer has gone away")

    def close(self) -> None:
        self._closed.set()

    # -------------------------
    # Consumer side
    # -------------------------
    async def receive(self) -> Optional[RelayMessage]:
        while True:
            if not self._queue.empty():
                return self._queue.get_nowait()
            if self._closed.is_set() or self._cancelled.is_set():
                return None

            get = asyncio.ensure_future(self._queue.get())
            closed = asyncio.ensure_future(self._closed.wait())
            try:
                await asyncio.wait({get, closed}, return_when=asyncio.FIRST_COMPLETED)
            finally:
                for waiter in (get, closed):
                    if not waiter.done():
                        waiter.cancel()
            if get.done() and not get.cancelled():
                return get.result()

    def cancel(self) -> None:
        self._cancelled.set()

    def __aiter__(self) -> AsyncIterator[RelayMessage]:
        return self._iterate()

    async def _iterate(self) -> AsyncIterator[RelayMessage]:
        while True:
            message = await self.receive()
            if message is None:
                return
            yield message
