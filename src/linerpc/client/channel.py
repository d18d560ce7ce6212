"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Caller side of the line-oriented JSON-RPC channel.

Each ``call`` gets the next integer id and a pending future keyed by that id.
A single reader task consumes inbound lines in arrival order and fulfils the
matching future; responses are routed by id only, never by position.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from ..jsonrpc import (
    ChannelClosedError,
    JsonRpcCallError,
    JsonRpcTimeoutError,
    Notification,
    ParseError,
    Request,
    RequestId,
    decode_line,
    encode_message,
    parse_response,
)
from ..transports import LineTransport

logger = logging.getLogger("linerpc.client")

_DEFAULT = object()


class JsonRpcChannel:
    """
    Correlates outgoing calls with responses arriving on a ``LineTransport``.

    The pending-call table belongs to the instance and is only touched from
    the event loop thread, so it needs no lock.

    Usage::

        async with JsonRpcChannel(transport) as channel:
            tools = await channel.call("tools/list")
    """

    def __init__(
        self,
        transport: LineTransport,
        *,
        name: str = "channel",
        default_timeout_s: float | None = None,
    ) -> None:
        self._transport = transport
        self._name = name
        self._default_timeout_s = default_timeout_s
        self._pending: dict[RequestId, asyncio.Future[Any]] = {}
        self._methods: dict[RequestId, str] = {}
        self._next_id = 1
        self._reader_task: asyncio.Task[None] | None = None
        self._closed = False

    @property
    def name(self) -> str:
        return self._name

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def pending_ids(self) -> list[RequestId]:
        return list(self._pending)

    async def start(self) -> "JsonRpcChannel":
        """
        Start the background reader. Safe to call more than once.

        Once started, later calls return the channel even if the peer has
        already gone away; only a channel that was never started or was
        explicitly closed refuses to start.
        """
        if self._reader_task is not None:
            return self
        if self._closed:
            raise ChannelClosedError(f"Channel '{self._name}' is closed")
        if self._reader_task is None:
            self._reader_task = asyncio.create_task(
                self._read_loop(),
                name=f"linerpc-reader-{self._name}",
            )
        return self

    async def __aenter__(self) -> "JsonRpcChannel":
        return await self.start()

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    def _allocate_id(self) -> int:
        request_id = self._next_id
        self._next_id += 1
        return request_id

    async def call(
        self,
        method: str,
        params: Any = None,
        *,
        timeout: Any = _DEFAULT,
    ) -> Any:
        """
        Send a request and wait for its response.

        Returns the response ``result``. Raises ``JsonRpcCallError`` for an
        error response, ``JsonRpcTimeoutError`` when ``timeout`` (seconds,
        ``None`` waits forever) elapses, and ``ChannelClosedError`` when the
        channel closes first.
        """
        if self._closed:
            raise ChannelClosedError(f"Channel '{self._name}' is closed")

        request = Request(id=self._allocate_id(), method=method, params=params)
        future: asyncio.Future[Any] = asyncio.get_running_loop().create_future()
        # Register before writing so a fast response can never miss its entry.
        self._pending[request.id] = future
        self._methods[request.id] = method

        timeout_s = self._default_timeout_s if timeout is _DEFAULT else timeout
        try:
            await self._transport.write_line(encode_message(request.to_dict()))
            logger.debug("-> %s #%s %s", self._name, request.id, method)
            return await asyncio.wait_for(future, timeout_s)
        except asyncio.TimeoutError as exc:
            logger.warning(
                "Call %s #%s on %s timed out after %ss",
                method,
                request.id,
                self._name,
                timeout_s,
            )
            raise JsonRpcTimeoutError(
                f"{method} (id={request.id}) timed out after {timeout_s}s"
            ) from exc
        finally:
            self._pending.pop(request.id, None)
            self._methods.pop(request.id, None)

    async def notify(self, method: str, params: Any = None) -> None:
        """Send a notification. Nothing is registered and no reply is expected."""
        if self._closed:
            raise ChannelClosedError(f"Channel '{self._name}' is closed")
        notification = Notification(method=method, params=params)
        await self._transport.write_line(encode_message(notification.to_dict()))
        logger.debug("-> %s notification %s", self._name, method)

    def feed_line(self, line: str) -> bool:
        """
        Handle one inbound line.

        Returns ``True`` when the line fulfilled a pending call. Malformed
        lines, non-responses, unknown ids and duplicates are dropped.
        """
        text = line.strip()
        if not text:
            return False

        try:
            message = decode_line(text)
        except ParseError:
            logger.warning("Dropping non-JSON line from %s: %.200s", self._name, text)
            return False

        response = parse_response(message)
        if response is None:
            logger.debug("Dropping non-response message from %s: %.200s", self._name, text)
            return False

        future = self._pending.pop(response.id, None)
        method = self._methods.pop(response.id, None)
        if future is None:
            logger.debug("Dropping response with unknown id %r from %s", response.id, self._name)
            return False
        if future.done():
            return False

        if response.error is not None:
            future.set_exception(
                JsonRpcCallError(
                    response.error.code,
                    response.error.message,
                    response.error.data,
                    method=method,
                )
            )
        else:
            future.set_result(response.result)
        logger.debug("<- %s #%s", self._name, response.id)
        return True

    async def _read_loop(self) -> None:
        try:
            while True:
                line = await self._transport.read_line()
                if line is None:
                    logger.info("Channel %s reached end of stream", self._name)
                    break
                self.feed_line(line)
        except ChannelClosedError as exc:
            logger.info("Channel %s transport closed: %s", self._name, exc)
        except Exception:
            logger.exception("Reader for channel %s failed", self._name)
        finally:
            self._closed = True
            self._fail_pending(f"Channel '{self._name}' closed")

    def _fail_pending(self, reason: str) -> None:
        pending = list(self._pending.items())
        self._pending.clear()
        self._methods.clear()
        for request_id, future in pending:
            if not future.done():
                future.set_exception(
                    ChannelClosedError(f"{reason} before response to id={request_id}")
                )

    async def close(self) -> None:
        """Stop reading, close the transport and reject calls still pending."""
        if self._closed and self._reader_task is None:
            return
        self._closed = True
        if self._reader_task is not None:
            task = self._reader_task
            self._reader_task = None
            if not task.done():
                task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
        await self._transport.close()
        self._fail_pending(f"Channel '{self._name}' closed")
