"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Serve loop: read request lines from a transport, write one response line each.
"""

from __future__ import annotations

import logging

from ..jsonrpc import encode_message
from ..transports import LineTransport, StdioTransport
from .dispatcher import Dispatcher

logger = logging.getLogger("linerpc.server")


async def serve_transport(dispatcher: Dispatcher, transport: LineTransport) -> int:
    """
    Process lines strictly in arrival order until end of stream.

    Returns the number of lines handled. Only stream closure ends the loop;
    malformed input is answered, never fatal.
    """
    handled = 0
    while True:
        line = await transport.read_line()
        if line is None:
            break
        handled += 1
        response = await dispatcher.handle_line(line)
        if response is not None:
            await transport.write_line(encode_message(response))
    logger.info("Input closed after %d line(s)", handled)
    return handled


async def serve_stdio(dispatcher: Dispatcher) -> None:
    """Serve on this process's stdin/stdout; logging must go to stderr."""
    transport = StdioTransport()
    logger.info("Serving %d method(s) on stdio", len(dispatcher.registry))
    try:
        await serve_transport(dispatcher, transport)
    finally:
        await transport.close()
