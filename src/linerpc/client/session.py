"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

MCP client session over a ``JsonRpcChannel``.
"""

from __future__ import annotations

import logging
from typing import Any

from ..config import LineRpcSettings, MCPServerEntry
from ..jsonrpc import LineRpcError
from ..transports import ProcessTransport
from .channel import JsonRpcChannel

logger = logging.getLogger("linerpc.client")

DEFAULT_CLIENT_INFO = {"name": "linerpc-demo-client", "version": "0.1.0"}


class MCPProtocolError(LineRpcError):
    """Raised when a server result does not have the expected MCP shape."""


def text_of(result: Any) -> str | None:
    """Join the ``text`` items of a ``tools/call`` result, ``None`` if there are none."""
    content = result.get("content") if isinstance(result, dict) else None
    if not isinstance(content, list):
        return None
    chunks = [
        item["text"]
        for item in content
        if isinstance(item, dict) and isinstance(item.get("text"), str)
    ]
    if not chunks:
        return None
    return "\n".join(chunks)


class MCPClientSession:
    """
    Thin MCP method wrapper: handshake, tool discovery and tool calls.

    The session does not own process lifecycle beyond closing the channel;
    ``spawn`` is a convenience that starts a configured server first.
    """

    def __init__(self, channel: JsonRpcChannel) -> None:
        self._channel = channel
        self._server_info: dict[str, Any] | None = None

    @classmethod
    async def spawn(
        cls,
        entry: MCPServerEntry,
        *,
        name: str = "server",
        settings: LineRpcSettings | None = None,
    ) -> "MCPClientSession":
        """Start the configured server process and open a channel to it."""
        settings = settings or LineRpcSettings.from_env()
        transport = await ProcessTransport.spawn(
            entry.command,
            entry.args,
            env=entry.env,
            cwd=entry.cwd,
            name=name,
            shutdown_grace_s=settings.shutdown_grace_s,
        )
        channel = JsonRpcChannel(
            transport,
            name=name,
            default_timeout_s=settings.call_timeout_s,
        )
        await channel.start()
        return cls(channel)

    @property
    def channel(self) -> JsonRpcChannel:
        return self._channel

    @property
    def server_info(self) -> dict[str, Any] | None:
        """Result of the last ``initialize`` call."""
        return self._server_info

    async def __aenter__(self) -> "MCPClientSession":
        await self._channel.start()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def initialize(
        self,
        protocol_version: str,
        *,
        capabilities: dict[str, Any] | None = None,
        client_info: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        result = await self._channel.call(
            "initialize",
            {
                "protocolVersion": protocol_version,
                "capabilities": capabilities if capabilities is not None else {"tools": {}},
                "clientInfo": client_info or DEFAULT_CLIENT_INFO,
            },
        )
        if not isinstance(result, dict):
            raise MCPProtocolError(f"Invalid initialize result: {result!r}")
        negotiated = result.get("protocolVersion")
        if negotiated != protocol_version:
            logger.warning(
                "Server negotiated protocol %s (requested %s)", negotiated, protocol_version
            )
        self._server_info = result
        await self._channel.notify("notifications/initialized")
        return result

    async def ping(self) -> Any:
        return await self._channel.call("ping")

    async def list_tools(self) -> list[dict[str, Any]]:
        result = await self._channel.call("tools/list")
        tools = result.get("tools") if isinstance(result, dict) else None
        if not isinstance(tools, list):
            raise MCPProtocolError(f"Invalid tools/list result: {result!r}")
        return tools

    async def call_tool(self, name: str, arguments: dict[str, Any] | None = None) -> dict[str, Any]:
        result = await self._channel.call(
            "tools/call",
            {"name": name, "arguments": arguments or {}},
        )
        if not isinstance(result, dict):
            raise MCPProtocolError(f"Invalid tools/call result for '{name}': {result!r}")
        return result

    async def close(self) -> None:
        await self._channel.close()
