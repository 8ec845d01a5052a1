"""
Tests for the server-sent event channel.

Tests cover:
    - Frame serialization
    - Closing exactly once on every path
    - Sending after close
    - Draining frames and keep-alive comments
"""

import asyncio
import json

import pytest

from src.askmycar.agent.domain.entities import ChatEvent
from src.askmycar.agent.orchestrator.event_streamer import (
    GENERIC_ERROR_MESSAGE,
    KEEPALIVE_FRAME,
    EventStreamer,
    format_sse,
)
from src.askmycar.exceptions import ChannelClosedError


async def events_from(*events, fail_with=None):
    for event in events:
        yield event
    if fail_with is not None:
        raise fail_with


async def drain(streamer):
    return [frame async for frame in streamer.frames(keepalive_seconds=1.0)]


class TestFormatSSE:
    """Tests for frame serialization."""

    def test_text_frame(self):
        frame = format_sse(ChatEvent.text("32 psi"))

        assert frame.startswith("data: ")
        assert frame.endswith("\n\n")
        assert json.loads(frame[len("data: "):]) == {"type": "text", "content": "32 psi"}

    def test_done_frames(self):
        assert format_sse(ChatEvent.done()) == 'data: {"type": "done"}\n\n'
        assert json.loads(format_sse(ChatEvent.done("round_limit"))[6:]) == {
            "type": "done",
            "reason": "round_limit",
        }

    def test_tool_and_error_frames(self):
        assert json.loads(format_sse(ChatEvent.tool("web_search"))[6:]) == {
            "type": "tool",
            "name": "web_search",
        }
        assert json.loads(format_sse(ChatEvent.error("nope"))[6:]) == {
            "type": "error",
            "message": "nope",
        }


class TestEventStreamerClose:
    """Tests that the channel closes exactly once."""

    @pytest.mark.asyncio
    async def test_natural_completion_closes_once(self):
        closes = []
        streamer = EventStreamer(on_close=lambda: closes.append(1))

        await streamer.pump(events_from(ChatEvent.text("hi"), ChatEvent.done()))
        frames = await drain(streamer)

        assert closes == [1]
        assert streamer.closed
        assert len(frames) == 2
        assert streamer.sequence == 2

    @pytest.mark.asyncio
    async def test_round_limit_closes_once(self):
        closes = []
        streamer = EventStreamer(on_close=lambda: closes.append(1))

        await streamer.pump(
            events_from(ChatEvent.tool("web_search"), ChatEvent.done("round_limit"))
        )

        assert closes == [1]

    @pytest.mark.asyncio
    async def test_exception_sends_error_and_closes_once(self):
        closes = []
        streamer = EventStreamer(on_close=lambda: closes.append(1))

        await streamer.pump(
            events_from(ChatEvent.tool("fetch_manual"), fail_with=RuntimeError("boom"))
        )
        frames = await drain(streamer)

        assert closes == [1]
        assert json.loads(frames[-1][6:]) == {
            "type": "error",
            "message": GENERIC_ERROR_MESSAGE,
        }

    @pytest.mark.asyncio
    async def test_cancellation_closes_and_propagates(self):
        closes = []
        streamer = EventStreamer(on_close=lambda: closes.append(1))
        started = asyncio.Event()

        async def slow_events():
            yield ChatEvent.tool("web_search")
            started.set()
            await asyncio.sleep(60)
            yield ChatEvent.done()

        task = asyncio.create_task(streamer.pump(slow_events()))
        await started.wait()
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task
        assert closes == [1]

    def test_close_is_idempotent(self):
        closes = []
        streamer = EventStreamer(on_close=lambda: closes.append(1))

        assert streamer.close() is True
        assert streamer.close() is False
        assert closes == [1]

    @pytest.mark.asyncio
    async def test_send_after_close_raises(self):
        streamer = EventStreamer()
        streamer.close()

        with pytest.raises(ChannelClosedError):
            await streamer.send(ChatEvent.done())


class TestEventStreamerFrames:
    """Tests for draining the channel."""

    @pytest.mark.asyncio
    async def test_keepalive_while_idle(self):
        streamer = EventStreamer()

        async def close_later():
            await asyncio.sleep(0.05)
            await streamer.send(ChatEvent.done())
            streamer.close()

        closer = asyncio.create_task(close_later())
        frames = [frame async for frame in streamer.frames(keepalive_seconds=0.01)]
        await closer

        assert KEEPALIVE_FRAME in frames
        assert frames[-1] == 'data: {"type": "done"}\n\n'

    @pytest.mark.asyncio
    async def test_stops_when_client_disconnects(self):
        streamer = EventStreamer()
        await streamer.send(ChatEvent.tool("fetch_manual"))

        async def disconnected():
            return True

        frames = [frame async for frame in streamer.frames(disconnected)]

        assert frames == []
