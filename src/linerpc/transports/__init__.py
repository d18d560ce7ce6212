"""
Line transports.

In-memory pairs for tests and in-process wiring, asyncio streams and child
processes for the client, stdin/stdout for the server.
"""

from .base import InMemoryLineTransport, LineTransport
from .stdio import StdioTransport
from .streams import DEFAULT_STREAM_LIMIT, ProcessTransport, StreamTransport, resolve_command

__all__ = [
    "LineTransport",
    "InMemoryLineTransport",
    "StreamTransport",
    "ProcessTransport",
    "StdioTransport",
    "DEFAULT_STREAM_LIMIT",
    "resolve_command",
]
