"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Command-line entry points.

``linerpc-demo`` reads an ``mcp.config.json`` style file, spawns the chosen
server over stdio, runs the MCP handshake, lists tools and calls
``math_add`` and ``echo``. ``linerpc-server`` runs the demo tool server on
stdio (default) or HTTP.
"""

from __future__ import annotations

import argparse
import asyncio
import dataclasses
import json
import logging
import sys
from collections.abc import Sequence
from typing import Any

from .client import MCPClientSession
from .config import ConfigError, LineRpcSettings, load_config
from .jsonrpc import LineRpcError
from .server import ServerConfig, create_dispatcher, serve_stdio

logger = logging.getLogger("linerpc.cli")


def configure_logging(level: str) -> None:
    # stdout is the wire for the stdio server; logs always go to stderr.
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _dump(label: str, value: Any) -> None:
    print(f"[MCP] {label}:", json.dumps(value, ensure_ascii=False, indent=2))


async def run_demo(
    settings: LineRpcSettings,
    *,
    server_name: str | None = None,
) -> None:
    config = load_config(settings.config_path)
    name, entry = config.pick(server_name)
    print(f"[MCP] config: {settings.config_path}")
    print(f"[MCP] starting server {name!r}: {entry.command} {' '.join(entry.args)}")

    session = await MCPClientSession.spawn(entry, name=name, settings=settings)
    try:
        _dump(
            "initialize result",
            await session.initialize(settings.protocol_version),
        )
        _dump("tools/list result", {"tools": await session.list_tools()})
        _dump(
            "tools/call math_add",
            await session.call_tool("math_add", {"a": 7, "b": 35}),
        )
        _dump(
            "tools/call echo",
            await session.call_tool("echo", {"text": "hello, MCP"}),
        )
    finally:
        await session.close()


def demo_main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="linerpc-demo",
        description="Spawn a configured stdio MCP server and exercise its tools.",
    )
    parser.add_argument("--config", help="Path to mcp.config.json (default: $LINERPC_CONFIG, $MCP_CONFIG, ./mcp.config.json)")
    parser.add_argument("--server", help="Server name under mcpServers (default: first)")
    parser.add_argument("--timeout", type=float, help="Per-call timeout in seconds")
    args = parser.parse_args(argv)

    settings = LineRpcSettings.from_env()
    overrides: dict[str, Any] = {}
    if args.config:
        overrides["config_path"] = args.config
    if args.timeout is not None:
        overrides["call_timeout_s"] = args.timeout
    if overrides:
        settings = dataclasses.replace(settings, **overrides)

    configure_logging(settings.log_level)
    try:
        asyncio.run(run_demo(settings, server_name=args.server))
    except ConfigError as e:
        logger.error("%s", e)
        return 2
    except LineRpcError as e:
        logger.error("Demo failed: %s", e)
        return 1
    return 0


def server_main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="linerpc-server",
        description="Run the demo MCP tool server.",
    )
    parser.add_argument("--http", action="store_true", help="Serve over HTTP instead of stdio")
    parser.add_argument("--host", default=None)
    parser.add_argument("--port", type=int, default=None)
    args = parser.parse_args(argv)

    settings = LineRpcSettings.from_env()
    configure_logging(settings.log_level)

    config = ServerConfig(protocol_version=settings.protocol_version)
    if args.host:
        config.host = args.host
    if args.port:
        config.port = args.port
    dispatcher = create_dispatcher(config=config)

    if args.http:
        from .server.http import run_http

        run_http(dispatcher, config)
        return 0

    try:
        asyncio.run(serve_stdio(dispatcher))
    except KeyboardInterrupt:
        logger.info("Interrupted")
    return 0
