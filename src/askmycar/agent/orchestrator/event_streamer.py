"""
Event Streamer for server-sent chat events.

Owns the outbound channel of one chat request. Events are serialized as
``data: <JSON>\\n\\n`` frames and queued immediately; the HTTP response
drains the queue. The channel is closed exactly once, whichever way the
agent loop ends.
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import AsyncIterator, Awaitable, Callable, Optional

from ...exceptions import ChannelClosedError
from ..domain.entities import ChatEvent

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "Something went wrong. Please try again."
KEEPALIVE_FRAME = ": keep-alive\n\n"

# Queue sentinel marking the end of the stream
_CLOSED = object()


def format_sse(event: ChatEvent) -> str:
    """Serialize one event as a server-sent event frame."""
    return f"data: {json.dumps(event.to_dict())}\n\n"


class EventStreamer:
    """One outbound server-sent event channel.

    Usage:
        streamer = EventStreamer(correlation_id=request_id)

        task = asyncio.create_task(streamer.pump(orchestrator.chat(vehicle, messages)))
        async for frame in streamer.frames(request.is_disconnected):
            yield frame
    """

    def __init__(
        self,
        correlation_id: Optional[str] = None,
        on_close: Optional[Callable[[], None]] = None,
        error_message: str = GENERIC_ERROR_MESSAGE,
    ):
        """Initialize the event streamer.

        Args:
            correlation_id: Request ID used in log lines
            on_close: Called once when the channel closes
            error_message: Message of the error frame emitted by pump()
        """
        self.correlation_id = correlation_id
        self.error_message = error_message
        self._on_close = on_close
        self._queue: asyncio.Queue = asyncio.Queue()
        self._closed = False
        self._sequence = 0

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def sequence(self) -> int:
        """Number of events sent so far."""
        return self._sequence

    async def send(self, event: ChatEvent) -> None:
        """Queue one event frame for the client.

        Raises:
            ChannelClosedError: The channel was already closed
        """
        if self._closed:
            raise ChannelClosedError(
                details={"event_type": event.type.value, "correlation_id": self.correlation_id}
            )
        self._sequence += 1
        await self._queue.put(format_sse(event))

    def close(self) -> bool:
        """Close the channel.

        Returns:
            True if this call closed it, False if it was already closed
        """
        if self._closed:
            return False
        self._closed = True
        self._queue.put_nowait(_CLOSED)
        logger.debug(
            f"Chat stream {self.correlation_id} closed after {self._sequence} events"
        )
        if self._on_close is not None:
            self._on_close()
        return True

    async def pump(self, events: AsyncIterator[ChatEvent]) -> None:
        """Forward an event iterator into the channel, then close it.

        An exception escaping the iterator becomes a single error frame.
        Cancellation propagates; the channel is closed either way.
        """
        try:
            async for event in events:
                await self.send(event)
        except Exception as e:
            logger.exception(f"Chat stream {self.correlation_id} failed: {e}")
            if not self._closed:
                await self.send(ChatEvent.error(self.error_message))
        finally:
            self.close()

    async def frames(
        self,
        is_disconnected: Optional[Callable[[], Awaitable[bool]]] = None,
        keepalive_seconds: float = 10.0,
    ) -> AsyncIterator[str]:
        """Yield queued frames until the channel closes.

        Args:
            is_disconnected: Async check for a gone client; stops the stream
            keepalive_seconds: Idle time before a keep-alive comment is sent
        """
        while True:
            if is_disconnected is not None and await is_disconnected():
                logger.info(f"Client disconnected from chat stream {self.correlation_id}")
                return

            try:
                frame = await asyncio.wait_for(self._queue.get(), timeout=keepalive_seconds)
            except asyncio.TimeoutError:
                yield KEEPALIVE_FRAME
                continue

            if frame is _CLOSED:
                return
            yield frame
