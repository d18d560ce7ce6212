"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

MCP methods served over the JSON-RPC dispatcher.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError

from ..config import DEFAULT_PROTOCOL_VERSION
from ..jsonrpc import InvalidParamsError, MethodNotFoundError, RequestId
from .dispatcher import Dispatcher, MethodRegistry
from .tools import ToolCatalog, default_tools

logger = logging.getLogger("linerpc.server")


# ---------------------------------------------------------------------------
# Server configuration
# ---------------------------------------------------------------------------


@dataclass
class ServerConfig:
    """
    Configuration for the MCP tool server.

    Attributes:
        name: Server name advertised during ``initialize``.
        version: Server version string.
        protocol_version: Version used when the client does not request one.
        instructions: Optional instructions describing the server's purpose.
        host: Bind host for the HTTP transport.
        port: Bind port for the HTTP transport.
        mcp_path: JSON-RPC endpoint path for the HTTP transport.
        health_path: Health endpoint path.
        enable_health: Whether to expose the health endpoint.
        allow_batch_requests: Whether JSON-RPC batch requests are accepted over HTTP.
    """

    name: str = "linerpc-demo-server"
    version: str = "0.1.0"
    protocol_version: str = DEFAULT_PROTOCOL_VERSION
    instructions: str | None = None
    host: str = "127.0.0.1"
    port: int = 8000
    mcp_path: str = "/mcp"
    health_path: str = "/health"
    enable_health: bool = True
    allow_batch_requests: bool = True


class MCPProtocolHandler:
    """
    Implements ``initialize``, ``ping``, ``tools/list`` and ``tools/call``.

    Methods are installed into a ``MethodRegistry`` rather than branched on,
    so transports only ever see a ``Dispatcher``.
    """

    def __init__(
        self,
        *,
        tools: ToolCatalog,
        config: ServerConfig | None = None,
    ) -> None:
        self._tools = tools
        self._config = config or ServerConfig()
        self._initialized = False

    @property
    def initialized(self) -> bool:
        """Whether the client sent ``notifications/initialized``."""
        return self._initialized

    def install(self, registry: MethodRegistry) -> MethodRegistry:
        registry.register("initialize", self.handle_initialize)
        registry.register("ping", self.handle_ping)
        registry.register("notifications/initialized", self.handle_initialized)
        registry.register("tools/list", self.handle_tools_list)
        registry.register("tools/call", self.handle_tools_call)
        return registry

    def handle_initialize(self, request_id: RequestId | None, params: Any) -> dict[str, Any]:
        """Echo the client's protocol version, or fall back to ours."""
        _ = request_id
        requested = params.get("protocolVersion") if isinstance(params, dict) else None
        negotiated = requested if isinstance(requested, str) else self._config.protocol_version
        return {
            "protocolVersion": negotiated,
            "capabilities": {
                "tools": {
                    "listChanged": False,
                },
            },
            "serverInfo": {
                "name": self._config.name,
                "version": self._config.version,
            },
            **({"instructions": self._config.instructions} if self._config.instructions else {}),
        }

    def handle_ping(self, request_id: RequestId | None, params: Any) -> dict[str, Any]:
        _ = request_id, params
        return {}

    def handle_initialized(self, request_id: RequestId | None, params: Any) -> None:
        _ = request_id, params
        self._initialized = True
        logger.info("Client completed initialization")

    def handle_tools_list(self, request_id: RequestId | None, params: Any) -> dict[str, Any]:
        _ = request_id, params
        return {
            "tools": [
                {
                    "name": tool.spec.name,
                    "description": tool.spec.description,
                    "inputSchema": tool.input_schema(),
                }
                for tool in self._tools.list()
            ]
        }

    async def handle_tools_call(self, request_id: RequestId | None, params: Any) -> dict[str, Any]:
        _ = request_id
        if not isinstance(params, dict):
            raise InvalidParamsError("tools/call params must be an object")

        tool_name = params.get("name")
        arguments = params.get("arguments")
        if arguments is None:
            arguments = {}
        if not isinstance(tool_name, str) or not tool_name:
            raise InvalidParamsError(
                "Missing 'name' in tools/call params",
                data={"name": tool_name, "arguments": arguments},
            )

        tool = self._tools.get(tool_name)
        if tool is None:
            raise MethodNotFoundError(
                f"Unknown tool: {tool_name}",
                data={"name": tool_name, "arguments": arguments},
            )
        if not isinstance(arguments, dict):
            raise InvalidParamsError(
                f"Invalid arguments for tool '{tool_name}': arguments must be an object",
                data={"name": tool_name, "arguments": arguments},
            )

        try:
            args = tool.args_model.model_validate(arguments)
        except ValidationError as exc:
            raise InvalidParamsError(
                f"Invalid arguments for tool '{tool_name}'",
                data={
                    "name": tool_name,
                    "arguments": arguments,
                    "errors": exc.errors(include_url=False, include_context=False),
                },
            ) from exc

        output = await tool.invoke(args)
        return {"content": self._result_content(output)}

    def _result_content(self, output: Any) -> list[dict[str, Any]]:
        if isinstance(output, str):
            return [{"type": "text", "text": output}]
        if output is None:
            return [{"type": "text", "text": ""}]
        return [
            {
                "type": "text",
                "text": json.dumps(output, default=str),
            }
        ]


def create_dispatcher(
    *,
    config: ServerConfig | None = None,
    tools: ToolCatalog | None = None,
) -> Dispatcher:
    """Build a dispatcher serving the MCP methods over the given tools."""
    catalog = tools if tools is not None else ToolCatalog(default_tools())
    handler = MCPProtocolHandler(tools=catalog, config=config)
    return Dispatcher(handler.install(MethodRegistry()))
