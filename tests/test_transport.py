# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""Unit tests for the SSE transport"""

import asyncio
import json

import pytest

from openapi_mcp_server.core.errors import TransportClosedError
from openapi_mcp_server.mcp.transport import SseTransport, format_sse_event


def test_format_sse_event():
    assert format_sse_event("message", '{"a": 1}') == 'event: message\ndata: {"a": 1}\n\n'


def test_format_sse_event_multiline():
    assert format_sse_event("x", "one\ntwo") == "event: x\ndata: one\ndata: two\n\n"


async def test_first_event_announces_message_endpoint():
    transport = SseTransport(message_path="/messages")
    outbound = transport.open("abc")

    first = await asyncio.wait_for(outbound.__anext__(), 1)

    assert first == "event: endpoint\ndata: /messages?sessionId=abc\n\n"
    await transport.close()


async def test_send_pushes_message_events_in_order():
    transport = SseTransport()
    outbound = transport.open("abc")
    await outbound.__anext__()

    await transport.send({"jsonrpc": "2.0", "id": 1, "result": {}})
    await transport.send({"jsonrpc": "2.0", "id": 2, "result": {}})

    events = [await outbound.__anext__(), await outbound.__anext__()]
    ids = [json.loads(e.split("data: ", 1)[1])["id"] for e in events]
    assert ids == [1, 2]
    assert all(e.startswith("event: message\n") for e in events)
    await transport.close()


async def test_close_ends_stream_and_runs_handlers_once():
    transport = SseTransport()
    calls = []
    transport.on_close(lambda: calls.append("sync"))

    async def async_handler():
        calls.append("async")

    transport.on_close(async_handler)
    outbound = transport.open("abc")

    await transport.close()
    await transport.close()

    received = [item async for item in outbound]
    assert len(received) == 1  # endpoint event only
    assert transport.closed
    assert calls == ["sync", "async"]


async def test_send_after_close_is_dropped():
    transport = SseTransport()
    transport.open("abc")
    await transport.close()

    assert await transport.send({"jsonrpc": "2.0", "id": 1, "result": {}}) is False


async def test_receive_forwards_to_inbound_handler():
    transport = SseTransport()
    received = []
    transport.on_inbound_message(received.append)
    transport.open("abc")

    transport.receive({"method": "ping"})

    assert received == [{"method": "ping"}]
    await transport.close()


async def test_receive_after_close_raises():
    transport = SseTransport()
    transport.on_inbound_message(lambda message: None)
    transport.open("abc")
    await transport.close()

    with pytest.raises(TransportClosedError):
        transport.receive({"method": "ping"})


async def test_stream_cancellation_marks_transport_closed():
    """Test a client disconnect (task cancellation) closes the transport"""
    transport = SseTransport()
    closed = asyncio.Event()
    transport.on_close(closed.set)
    outbound = transport.open("abc")

    async def consume():
        async for _ in outbound:
            pass

    task = asyncio.create_task(consume())
    await asyncio.sleep(0.01)
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task

    await asyncio.wait_for(closed.wait(), 1)
    assert transport.closed
