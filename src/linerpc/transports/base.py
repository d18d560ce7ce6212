"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Line transport contract and the in-memory implementation.
"""

from __future__ import annotations

import asyncio
from typing import Protocol, runtime_checkable

from ..jsonrpc import ChannelClosedError


@runtime_checkable
class LineTransport(Protocol):
    """
    Duplex text stream carrying one message per line.

    ``write_line`` takes a line without its trailing newline. ``read_line``
    returns the next line without the newline, or ``None`` at end of stream.
    """

    async def write_line(self, line: str) -> None:
        """Write one complete line."""

    async def read_line(self) -> str | None:
        """Read one line, ``None`` on EOF."""

    async def close(self) -> None:
        """Release the underlying stream."""


class InMemoryLineTransport:
    """Queue-backed transport; ``pair()`` returns two connected ends."""

    def __init__(
        self,
        inbound: asyncio.Queue[str | None],
        outbound: asyncio.Queue[str | None],
    ) -> None:
        self._inbound = inbound
        self._outbound = outbound
        self._closed = False
        self.sent: list[str] = []

    @classmethod
    def pair(cls) -> tuple["InMemoryLineTransport", "InMemoryLineTransport"]:
        left_to_right: asyncio.Queue[str | None] = asyncio.Queue()
        right_to_left: asyncio.Queue[str | None] = asyncio.Queue()
        left = cls(inbound=right_to_left, outbound=left_to_right)
        right = cls(inbound=left_to_right, outbound=right_to_left)
        return left, right

    @property
    def closed(self) -> bool:
        return self._closed

    async def write_line(self, line: str) -> None:
        if self._closed:
            raise ChannelClosedError("Transport is closed")
        if "\n" in line:
            raise ValueError("A line must not contain a newline")
        self.sent.append(line)
        await self._outbound.put(line)

    async def read_line(self) -> str | None:
        if self._closed and self._inbound.empty():
            return None
        return await self._inbound.get()

    def feed_eof(self) -> None:
        """Signal end of stream to this end's reader."""
        self._inbound.put_nowait(None)

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        # The peer reads EOF; our own pending reader is released too.
        self._outbound.put_nowait(None)
        self._inbound.put_nowait(None)
