from __future__ import annotations

import asyncio

import pytest

from linerpc.client import JsonRpcChannel, MCPClientSession, text_of
from linerpc.jsonrpc import INVALID_PARAMS, ChannelClosedError, JsonRpcCallError
from linerpc.server import MCPProtocolHandler, MethodRegistry, Dispatcher, ToolCatalog, default_tools, serve_transport
from linerpc.transports import InMemoryLineTransport


def run_async(coro):
    return asyncio.run(coro)


def test_session_runs_handshake_listing_and_tool_calls_in_process():
    async def scenario() -> None:
        client_end, server_end = InMemoryLineTransport.pair()
        handler = MCPProtocolHandler(tools=ToolCatalog(default_tools()))
        dispatcher = Dispatcher(handler.install(MethodRegistry()))
        server = asyncio.create_task(serve_transport(dispatcher, server_end))

        async with MCPClientSession(JsonRpcChannel(client_end, name="demo")) as session:
            init = await session.initialize("2025-06-18")
            assert init["protocolVersion"] == "2025-06-18"
            assert session.server_info == init

            assert await session.ping() == {}
            tools = await session.list_tools()
            assert [tool["name"] for tool in tools] == ["math_add", "echo"]

            added, echoed = await asyncio.gather(
                session.call_tool("math_add", {"a": 7, "b": 35}),
                session.call_tool("echo", {"text": "hello"}),
            )
            assert text_of(added) == "42"
            assert text_of(echoed) == "hello"

            with pytest.raises(JsonRpcCallError) as exc_info:
                await session.call_tool("math_add", {"a": "x", "b": 2})
            assert exc_info.value.code == INVALID_PARAMS
            assert exc_info.value.data["arguments"] == {"a": "x", "b": 2}

        handled = await asyncio.wait_for(server, 1.0)
        # initialize, initialized notification, ping, list, three calls
        assert handled == 7
        assert handler.initialized

    run_async(scenario())


def test_text_of_handles_missing_and_mixed_content():
    assert text_of({"content": [{"type": "text", "text": "a"}, {"type": "image"}, {"type": "text", "text": "b"}]}) == "a\nb"
    assert text_of({"content": []}) is None
    assert text_of({}) is None
    assert text_of("plain") is None


def test_session_still_closes_transport_after_server_went_away():
    async def scenario() -> None:
        client_end, server_end = InMemoryLineTransport.pair()
        channel = JsonRpcChannel(client_end, name="gone")
        await channel.start()

        await server_end.close()
        for _ in range(10):
            if channel.closed:
                break
            await asyncio.sleep(0)
        assert channel.closed

        async with MCPClientSession(channel) as session:
            with pytest.raises(ChannelClosedError):
                await session.ping()
        assert client_end.closed

    run_async(scenario())
