from __future__ import annotations

import asyncio
import io

import pytest

from linerpc.jsonrpc import ChannelClosedError
from linerpc.server import create_dispatcher, serve_transport
from linerpc.transports import InMemoryLineTransport, LineTransport, StdioTransport


def run_async(coro):
    return asyncio.run(coro)


def test_in_memory_pair_delivers_lines_and_eof():
    async def scenario() -> None:
        left, right = InMemoryLineTransport.pair()
        assert isinstance(left, LineTransport)

        await left.write_line("one")
        await right.write_line("two")
        assert await right.read_line() == "one"
        assert await left.read_line() == "two"

        await left.close()
        assert await right.read_line() is None
        with pytest.raises(ChannelClosedError):
            await left.write_line("three")
        with pytest.raises(ValueError):
            await right.write_line("a\nb")

    run_async(scenario())


def test_stdio_transport_serves_requests_until_eof():
    stdin = io.BytesIO(
        b'{"jsonrpc":"2.0","id":1,"method":"ping"}\n'
        b"\n"
        b"not json\r\n"
        b'{"jsonrpc":"2.0","method":"notifications/initialized"}\n'
        b'{"jsonrpc":"2.0","id":2,"method":"tools/call","params":{"name":"echo","arguments":{"text":"hi"}}}\n'
    )
    stdout = io.BytesIO()
    transport = StdioTransport(stdin=stdin, stdout=stdout)

    handled = run_async(serve_transport(create_dispatcher(), transport))

    lines = stdout.getvalue().decode("utf-8").splitlines()
    assert handled == 5
    assert len(lines) == 3
    assert lines[0] == '{"jsonrpc":"2.0","id":1,"result":{}}'
    assert '"id":null' in lines[1] and "-32700" in lines[1]
    assert lines[2] == '{"jsonrpc":"2.0","id":2,"result":{"content":[{"type":"text","text":"hi"}]}}'


def test_stdio_transport_concurrent_writes_stay_whole_lines():
    stdout = io.BytesIO()
    transport = StdioTransport(stdin=io.BytesIO(b""), stdout=stdout)

    async def scenario() -> None:
        await asyncio.gather(*(transport.write_line(f"line-{n}" * 50) for n in range(20)))
        assert await transport.read_line() is None
        await transport.close()

    run_async(scenario())

    lines = stdout.getvalue().decode("utf-8").splitlines()
    assert sorted(lines) == sorted(f"line-{n}" * 50 for n in range(20))
