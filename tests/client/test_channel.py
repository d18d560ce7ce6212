from __future__ import annotations

import asyncio
import json

import pytest

from linerpc.client import JsonRpcChannel
from linerpc.jsonrpc import (
    INVALID_PARAMS,
    ChannelClosedError,
    JsonRpcCallError,
    JsonRpcTimeoutError,
)
from linerpc.transports import InMemoryLineTransport


def run_async(coro):
    return asyncio.run(coro)


async def _next_request(peer: InMemoryLineTransport) -> dict:
    line = await asyncio.wait_for(peer.read_line(), 1.0)
    assert line is not None
    return json.loads(line)


async def _respond(peer: InMemoryLineTransport, request_id, result) -> None:
    await peer.write_line(json.dumps({"jsonrpc": "2.0", "id": request_id, "result": result}))


def test_ids_start_at_one_and_increase_and_params_are_omitted_when_absent():
    async def scenario() -> None:
        client_end, server_end = InMemoryLineTransport.pair()
        async with JsonRpcChannel(client_end) as channel:
            first = asyncio.create_task(channel.call("ping"))
            second = asyncio.create_task(channel.call("tools/list", {"cursor": None}))

            req1 = await _next_request(server_end)
            req2 = await _next_request(server_end)
            assert req1 == {"jsonrpc": "2.0", "id": 1, "method": "ping"}
            assert req2["id"] == 2
            assert req2["params"] == {"cursor": None}

            await _respond(server_end, 1, {})
            await _respond(server_end, 2, {"tools": []})
            assert await first == {}
            assert await second == {"tools": []}

        for line in client_end.sent:
            assert "\n" not in line

    run_async(scenario())


def test_concurrent_calls_answered_in_reverse_order_are_routed_by_id():
    async def scenario() -> None:
        client_end, server_end = InMemoryLineTransport.pair()
        async with JsonRpcChannel(client_end) as channel:
            calls = [
                asyncio.create_task(channel.call("work", {"n": n})) for n in range(10)
            ]
            requests = [await _next_request(server_end) for _ in calls]
            assert channel.pending_count == 10

            for request in reversed(requests):
                await _respond(server_end, request["id"], {"n": request["params"]["n"]})

            results = await asyncio.gather(*calls)

        assert results == [{"n": n} for n in range(10)]
        assert channel.pending_count == 0

    run_async(scenario())


def test_error_response_rejects_call_with_code_message_and_data():
    async def scenario() -> None:
        client_end, server_end = InMemoryLineTransport.pair()
        async with JsonRpcChannel(client_end) as channel:
            call = asyncio.create_task(channel.call("tools/call", {"name": "math_add"}))
            request = await _next_request(server_end)
            await server_end.write_line(
                json.dumps(
                    {
                        "jsonrpc": "2.0",
                        "id": request["id"],
                        "error": {
                            "code": INVALID_PARAMS,
                            "message": "bad args",
                            "data": {"name": "math_add"},
                        },
                    }
                )
            )
            with pytest.raises(JsonRpcCallError) as exc_info:
                await call

        err = exc_info.value
        assert err.code == INVALID_PARAMS
        assert err.message == "bad args"
        assert err.data == {"name": "math_add"}
        assert err.method == "tools/call"

    run_async(scenario())


def test_unknown_id_and_garbage_lines_do_not_disturb_pending_calls():
    async def scenario() -> None:
        client_end, _server_end = InMemoryLineTransport.pair()
        channel = JsonRpcChannel(client_end)
        call = asyncio.create_task(channel.call("slow"))
        await asyncio.sleep(0)
        assert channel.pending_ids() == [1]

        assert channel.feed_line('{"jsonrpc":"2.0","id":99,"result":"late"}') is False
        assert channel.feed_line("this is not json") is False
        assert channel.feed_line("") is False
        assert channel.feed_line('{"jsonrpc":"2.0","method":"notifications/progress"}') is False
        assert channel.feed_line('[1, 2, 3]') is False
        assert channel.pending_ids() == [1]
        assert not call.done()

        assert channel.feed_line('{"jsonrpc":"2.0","id":1,"result":"ok"}') is True
        assert await call == "ok"
        await channel.close()

    run_async(scenario())


def test_duplicate_response_is_ignored():
    async def scenario() -> None:
        client_end, _server_end = InMemoryLineTransport.pair()
        channel = JsonRpcChannel(client_end)
        call = asyncio.create_task(channel.call("once"))
        await asyncio.sleep(0)

        assert channel.feed_line('{"jsonrpc":"2.0","id":1,"result":"first"}') is True
        assert channel.feed_line('{"jsonrpc":"2.0","id":1,"result":"second"}') is False
        assert await call == "first"
        await channel.close()

    run_async(scenario())


def test_notify_writes_message_without_id_and_registers_nothing():
    async def scenario() -> None:
        client_end, server_end = InMemoryLineTransport.pair()
        channel = JsonRpcChannel(client_end)
        await channel.notify("notifications/initialized")

        message = await _next_request(server_end)
        assert message == {"jsonrpc": "2.0", "method": "notifications/initialized"}
        assert channel.pending_count == 0
        await channel.close()

    run_async(scenario())


def test_close_rejects_pending_calls():
    async def scenario() -> None:
        client_end, _server_end = InMemoryLineTransport.pair()
        channel = JsonRpcChannel(client_end)
        await channel.start()
        call = asyncio.create_task(channel.call("never"))
        await asyncio.sleep(0)

        await channel.close()
        with pytest.raises(ChannelClosedError):
            await call
        with pytest.raises(ChannelClosedError):
            await channel.call("after-close")

    run_async(scenario())


def test_peer_eof_rejects_pending_calls():
    async def scenario() -> None:
        client_end, server_end = InMemoryLineTransport.pair()
        channel = JsonRpcChannel(client_end)
        await channel.start()
        call = asyncio.create_task(channel.call("never"))
        await _next_request(server_end)

        await server_end.close()
        with pytest.raises(ChannelClosedError):
            await asyncio.wait_for(call, 1.0)
        assert channel.closed
        await channel.close()

    run_async(scenario())


def test_timeout_raises_and_late_response_is_dropped():
    async def scenario() -> None:
        client_end, server_end = InMemoryLineTransport.pair()
        async with JsonRpcChannel(client_end) as channel:
            with pytest.raises(JsonRpcTimeoutError):
                await channel.call("slow", timeout=0.05)
            assert channel.pending_count == 0

            assert channel.feed_line('{"jsonrpc":"2.0","id":1,"result":"late"}') is False

            call = asyncio.create_task(channel.call("fast", timeout=1.0))
            request = await _next_request(server_end)
            request = await _next_request(server_end)
            assert request["id"] == 2
            await _respond(server_end, 2, "done")
            assert await call == "done"

    run_async(scenario())
