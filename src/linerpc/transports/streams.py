"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

asyncio stream transports, including the child-process stdio transport used
by the client to talk to a spawned server.
"""

from __future__ import annotations

import asyncio
import logging
import os
import shutil
import sys
from collections.abc import Mapping, Sequence

from ..jsonrpc import ChannelClosedError

logger = logging.getLogger("linerpc.transport")

# asyncio's default 64 KiB line limit is too small for tool payloads.
DEFAULT_STREAM_LIMIT = 16 * 1024 * 1024


class StreamTransport:
    """Line transport over an ``asyncio.StreamReader``/``StreamWriter`` pair."""

    def __init__(
        self,
        reader: asyncio.StreamReader,
        writer: asyncio.StreamWriter,
    ) -> None:
        self._reader = reader
        self._writer = writer
        self._closed = False

    async def write_line(self, line: str) -> None:
        if self._closed or self._writer.is_closing():
            raise ChannelClosedError("Stream is closed")
        self._writer.write((line + "\n").encode("utf-8"))
        try:
            await self._writer.drain()
        except ConnectionError as exc:
            raise ChannelClosedError(f"Stream closed while writing: {exc}") from exc

    async def read_line(self) -> str | None:
        data = await self._reader.readline()
        if not data:
            return None
        return data.decode("utf-8", errors="replace").rstrip("\r\n")

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._writer.close()
        try:
            await self._writer.wait_closed()
        except ConnectionError as exc:
            logger.debug("Ignoring error while closing stream: %s", exc)


def resolve_command(command: str) -> str:
    """
    Resolve the executable for a configured server command.

    Paths are used as-is; ``python``/``python3`` map to the running
    interpreter so spawned servers share the caller's environment; anything
    else is looked up on ``PATH``.
    """
    if os.sep in command or (os.altsep and os.altsep in command):
        return command
    if command in {"python", "python3"}:
        return sys.executable
    return shutil.which(command) or command


class ProcessTransport(StreamTransport):
    """
    Transport over the stdin/stdout pipes of a spawned child process.

    Child stderr is forwarded to the ``linerpc.transport`` logger. Closing
    shuts stdin (the child sees EOF), waits ``shutdown_grace_s`` and then
    terminates/kills the child if it is still running.
    """

    def __init__(
        self,
        process: asyncio.subprocess.Process,
        *,
        name: str = "server",
        shutdown_grace_s: float = 2.0,
    ) -> None:
        if process.stdout is None or process.stdin is None:
            raise ValueError("ProcessTransport needs a process started with piped stdin and stdout")
        super().__init__(process.stdout, process.stdin)
        self._process = process
        self._name = name
        self._shutdown_grace_s = shutdown_grace_s
        self._stderr_task: asyncio.Task[None] | None = None
        if process.stderr is not None:
            self._stderr_task = asyncio.create_task(
                self._forward_stderr(process.stderr),
                name=f"linerpc-stderr-{name}",
            )

    @classmethod
    async def spawn(
        cls,
        command: str,
        args: Sequence[str] = (),
        *,
        env: Mapping[str, str] | None = None,
        cwd: str | None = None,
        name: str = "server",
        shutdown_grace_s: float = 2.0,
        limit: int = DEFAULT_STREAM_LIMIT,
    ) -> "ProcessTransport":
        executable = resolve_command(command)
        try:
            process = await asyncio.create_subprocess_exec(
                executable,
                *args,
                stdin=asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                env={**os.environ, **dict(env or {})},
                cwd=cwd,
                limit=limit,
            )
        except OSError as exc:
            logger.error("Failed to start server %r (%s): %s", name, executable, exc)
            raise ChannelClosedError(
                f"Could not start server '{name}': {exc}"
            ) from exc

        logger.info(
            "Started server %r: %s %s (pid=%s)",
            name,
            executable,
            " ".join(args),
            process.pid,
        )
        return cls(process, name=name, shutdown_grace_s=shutdown_grace_s)

    @property
    def pid(self) -> int:
        return self._process.pid

    @property
    def returncode(self) -> int | None:
        return self._process.returncode

    async def _forward_stderr(self, stream: asyncio.StreamReader) -> None:
        while True:
            data = await stream.readline()
            if not data:
                return
            text = data.decode("utf-8", errors="replace").rstrip()
            if text:
                logger.info("[%s:stderr] %s", self._name, text)

    async def close(self) -> None:
        await super().close()
        process = self._process
        if process.returncode is None:
            try:
                await asyncio.wait_for(process.wait(), self._shutdown_grace_s)
            except asyncio.TimeoutError:
                logger.warning("Server %r did not exit after EOF, terminating", self._name)
                process.terminate()
                try:
                    await asyncio.wait_for(process.wait(), self._shutdown_grace_s)
                except asyncio.TimeoutError:
                    process.kill()
                    await process.wait()
        if self._stderr_task is not None:
            await self._stderr_task
            self._stderr_task = None
        logger.info("Server %r exited: code=%s", self._name, process.returncode)
