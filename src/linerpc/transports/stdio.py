"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Transport over this process's own stdin/stdout, used by the stdio server.
"""

from __future__ import annotations

import asyncio
import sys
import threading
from typing import BinaryIO


class StdioTransport:
    """
    Line transport over binary stdin/stdout.

    Reads and writes run in worker threads so the event loop never blocks
    on the pipes. Writes are serialized and flushed per line.
    """

    def __init__(
        self,
        stdin: BinaryIO | None = None,
        stdout: BinaryIO | None = None,
    ) -> None:
        self._stdin = stdin if stdin is not None else sys.stdin.buffer
        self._stdout = stdout if stdout is not None else sys.stdout.buffer
        self._write_lock = threading.Lock()
        self._closed = False

    async def read_line(self) -> str | None:
        if self._closed:
            return None
        data = await asyncio.to_thread(self._stdin.readline)
        if not data:
            return None
        return data.decode("utf-8", errors="replace").rstrip("\r\n")

    async def write_line(self, line: str) -> None:
        await asyncio.to_thread(self._write, (line + "\n").encode("utf-8"))

    def _write(self, data: bytes) -> None:
        with self._write_lock:
            self._stdout.write(data)
            self._stdout.flush()

    async def close(self) -> None:
        self._closed = True
        await asyncio.to_thread(self._flush)

    def _flush(self) -> None:
        with self._write_lock:
            self._stdout.flush()
