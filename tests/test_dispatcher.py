# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""Unit tests for JSON-RPC message shapes and MCP method dispatch"""

import json
from unittest.mock import AsyncMock

import pytest
from pydantic import ValidationError

from openapi_mcp_server.core.errors import INTERNAL_ERROR, INVALID_PARAMS, METHOD_NOT_FOUND
from openapi_mcp_server.mcp.dispatcher import DEFAULT_PROTOCOL_VERSION, MessageDispatcher
from openapi_mcp_server.mcp.jsonrpc import (
    JSONRPCMessage,
    build_error_response,
    build_result_response,
)
from openapi_mcp_server.mcp.proxy import ToolProxy


@pytest.fixture
def dispatcher():
    return MessageDispatcher("test-server", "9.9.9")


@pytest.fixture
async def proxy(document, connection, upstream):
    tool_proxy = ToolProxy(document, connection, transport=upstream.transport)
    yield tool_proxy
    await tool_proxy.aclose()


def _message(**fields):
    return JSONRPCMessage.model_validate({"jsonrpc": "2.0", **fields})


def test_build_result_response():
    response = build_result_response(1, {"tools": []})
    assert response == {"jsonrpc": "2.0", "id": 1, "result": {"tools": []}}


def test_build_error_response_with_data():
    error = build_error_response("a", -32602, "Invalid params", {"expected": "string"})

    assert error["id"] == "a"
    assert error["error"] == {"code": -32602, "message": "Invalid params", "data": {"expected": "string"}}


def test_message_rejects_wrong_version():
    with pytest.raises(ValidationError):
        JSONRPCMessage.model_validate({"jsonrpc": "1.0", "method": "ping", "id": 1})


def test_message_without_id_is_notification():
    assert _message(method="notifications/initialized").is_notification
    assert not _message(method="ping", id=None).is_notification


async def test_initialize_echoes_supported_version(dispatcher, proxy):
    response = await dispatcher.dispatch(
        proxy,
        _message(id=1, method="initialize", params={"protocolVersion": "2025-03-26", "clientInfo": {"name": "t"}}),
    )

    result = response["result"]
    assert result["protocolVersion"] == "2025-03-26"
    assert result["serverInfo"] == {"name": "test-server", "version": "9.9.9"}
    assert "tools" in result["capabilities"]


async def test_initialize_falls_back_to_default_version(dispatcher, proxy):
    response = await dispatcher.dispatch(
        proxy, _message(id=1, method="initialize", params={"protocolVersion": "1999-01-01"})
    )
    assert response["result"]["protocolVersion"] == DEFAULT_PROTOCOL_VERSION


async def test_ping(dispatcher, proxy):
    assert await dispatcher.dispatch(proxy, _message(id=7, method="ping")) == {
        "jsonrpc": "2.0", "id": 7, "result": {}
    }


async def test_tools_list(dispatcher, proxy):
    response = await dispatcher.dispatch(proxy, _message(id=2, method="tools/list"))

    tools = response["result"]["tools"]
    assert len(tools) == 5
    assert tools[0]["name"] == "API-retrieve-a-page"
    assert "inputSchema" in tools[0]


async def test_tools_call(dispatcher, proxy, upstream):
    response = await dispatcher.dispatch(
        proxy,
        _message(id="c1", method="tools/call", params={"name": "API-retrieve-a-page", "arguments": {"id": "42"}}),
    )

    assert response["id"] == "c1"
    assert json.loads(response["result"]["content"][0]["text"])["path"] == "/pages/42"


async def test_tools_call_unknown_tool_is_protocol_error(dispatcher, proxy):
    response = await dispatcher.dispatch(
        proxy, _message(id=3, method="tools/call", params={"name": "does-not-exist", "arguments": {}})
    )

    assert response["error"]["code"] == INVALID_PARAMS
    assert "does-not-exist" in response["error"]["message"]


async def test_tools_call_missing_name(dispatcher, proxy):
    response = await dispatcher.dispatch(proxy, _message(id=4, method="tools/call", params={}))
    assert response["error"]["code"] == INVALID_PARAMS


async def test_tools_call_upstream_failure_is_success_result(dispatcher, proxy, upstream):
    upstream.respond("GET", "/pages/42", status_code=404, json={"code": "object_not_found"})

    response = await dispatcher.dispatch(
        proxy,
        _message(id=5, method="tools/call", params={"name": "API-retrieve-a-page", "arguments": {"id": "42"}}),
    )

    assert "error" not in response
    assert json.loads(response["result"]["content"][0]["text"])["status"] == "error"


async def test_unknown_method(dispatcher, proxy):
    response = await dispatcher.dispatch(proxy, _message(id=6, method="resources/list"))
    assert response["error"]["code"] == METHOD_NOT_FOUND


async def test_notifications_get_no_response(dispatcher, proxy):
    assert await dispatcher.dispatch(proxy, _message(method="notifications/initialized")) is None
    assert await dispatcher.dispatch(proxy, _message(method="notifications/cancelled", params={"requestId": 1})) is None


async def test_unexpected_error_does_not_leak_internals(dispatcher):
    broken = AsyncMock(spec=ToolProxy)
    broken.call_tool.side_effect = RuntimeError("secret internal detail")

    response = await dispatcher.dispatch(
        broken, _message(id=8, method="tools/call", params={"name": "x", "arguments": {}})
    )

    assert response["error"] == {"code": INTERNAL_ERROR, "message": "Internal error"}
