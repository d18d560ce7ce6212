"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Line-oriented JSON-RPC 2.0 channel with a minimal MCP tool server and client.

Quick start::

    import asyncio
    from linerpc import JsonRpcChannel, InMemoryLineTransport, create_dispatcher, serve_transport

    async def main():
        client_end, server_end = InMemoryLineTransport.pair()
        server = asyncio.create_task(serve_transport(create_dispatcher(), server_end))
        async with JsonRpcChannel(client_end) as channel:
            result = await channel.call(
                "tools/call", {"name": "math_add", "arguments": {"a": 7, "b": 35}}
            )
            print(result["content"][0]["text"])  # 42
        await server

    asyncio.run(main())
"""

from .client import JsonRpcChannel, MCPClientSession, text_of
from .config import LineRpcSettings, MCPConfigFile, MCPServerEntry, load_config
from .jsonrpc import (
    ChannelClosedError,
    JsonRpcCallError,
    JsonRpcError,
    JsonRpcTimeoutError,
    LineRpcError,
)
from .server import Dispatcher, MethodRegistry, ServerConfig, create_dispatcher, serve_stdio, serve_transport
from .transports import InMemoryLineTransport, LineTransport, ProcessTransport, StdioTransport, StreamTransport

__version__ = "0.1.0"

__all__ = [
    "JsonRpcChannel",
    "MCPClientSession",
    "text_of",
    "Dispatcher",
    "MethodRegistry",
    "ServerConfig",
    "create_dispatcher",
    "serve_stdio",
    "serve_transport",
    "LineTransport",
    "InMemoryLineTransport",
    "StreamTransport",
    "ProcessTransport",
    "StdioTransport",
    "LineRpcSettings",
    "MCPConfigFile",
    "MCPServerEntry",
    "load_config",
    "LineRpcError",
    "JsonRpcError",
    "JsonRpcCallError",
    "JsonRpcTimeoutError",
    "ChannelClosedError",
]
