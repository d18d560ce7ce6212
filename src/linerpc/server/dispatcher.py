"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Callee side of the channel: method registry and JSON-RPC dispatch.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable
from typing import Any, Union

from ..jsonrpc import (
    INTERNAL_ERROR,
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
    InvalidRequestError,
    JsonRpcError,
    MethodAlreadyRegisteredError,
    Notification,
    ParseError,
    RequestId,
    decode_line,
    encode_message,
    jsonrpc_error,
    jsonrpc_response,
    parse_incoming,
)

logger = logging.getLogger("linerpc.server")

# Handlers receive (request id, params); the id is None for notifications.
MethodHandler = Callable[[Union[RequestId, None], Any], Union[Any, Awaitable[Any]]]


class MethodRegistry:
    """Mapping of method name to handler, used for dispatch."""

    def __init__(self) -> None:
        self._methods: dict[str, MethodHandler] = {}

    def register(
        self,
        name: str,
        handler: MethodHandler,
        *,
        overwrite: bool = False,
    ) -> None:
        if not overwrite and name in self._methods:
            raise MethodAlreadyRegisteredError(f"Method already registered: {name}")
        self._methods[name] = handler

    def method(
        self, name: str, *, overwrite: bool = False
    ) -> Callable[[MethodHandler], MethodHandler]:
        """Decorator form of ``register``."""

        def decorator(handler: MethodHandler) -> MethodHandler:
            self.register(name, handler, overwrite=overwrite)
            return handler

        return decorator

    def unregister(self, name: str) -> None:
        self._methods.pop(name, None)

    def get(self, name: str) -> MethodHandler | None:
        return self._methods.get(name)

    def names(self) -> list[str]:
        return list(self._methods.keys())

    def has(self, name: str) -> bool:
        return name in self._methods

    def __contains__(self, name: object) -> bool:
        return name in self._methods

    def __len__(self) -> int:
        return len(self._methods)


class Dispatcher:
    """
    Turns inbound lines/messages into at most one response each.

    Never raises for bad input: parse failures, envelope problems, unknown
    methods, handler exceptions and unencodable results all become error
    responses (or nothing, for notifications). Transport code owns reading
    and writing.
    """

    def __init__(self, registry: MethodRegistry | None = None) -> None:
        self._registry = registry or MethodRegistry()

    @property
    def registry(self) -> MethodRegistry:
        return self._registry

    async def handle_line(self, line: str) -> dict[str, Any] | None:
        """Handle one raw line; blank lines produce nothing."""
        text = line.strip()
        if not text:
            return None
        try:
            message = decode_line(text)
        except ParseError as exc:
            logger.warning("Unparseable request line: %.200s", text)
            return jsonrpc_error(None, exc.code, exc.message, exc.data)
        return await self.handle_message(message)

    async def handle_message(self, message: Any) -> dict[str, Any] | None:
        """Route one decoded JSON-RPC message to its handler."""
        if not isinstance(message, dict):
            return jsonrpc_error(None, INVALID_REQUEST, "Invalid Request")

        try:
            incoming = parse_incoming(message)
        except InvalidRequestError as exc:
            if exc.request_id is None and message.get("id") is None:
                logger.debug("Ignoring invalid notification: %s", exc.message)
                return None
            return jsonrpc_error(exc.request_id, exc.code, exc.message, exc.data)

        is_notification = isinstance(incoming, Notification)
        request_id = None if is_notification else incoming.id
        method = incoming.method

        handler = self._registry.get(method)
        if handler is None:
            if is_notification:
                logger.debug("Ignoring notification for unknown method %s", method)
                return None
            return jsonrpc_error(
                request_id,
                METHOD_NOT_FOUND,
                f"Method not found: {method}",
                {"method": method},
            )

        try:
            result = handler(request_id, incoming.params)
            if inspect.isawaitable(result):
                result = await result
        except JsonRpcError as exc:
            if is_notification:
                logger.warning("Notification %s failed: %s", method, exc.message)
                return None
            response = jsonrpc_error(request_id, exc.code, exc.message, exc.data)
        except Exception as exc:
            logger.exception("Error handling method %s", method)
            if is_notification:
                return None
            return jsonrpc_error(request_id, INTERNAL_ERROR, "Internal error", str(exc))
        else:
            if is_notification:
                return None
            response = jsonrpc_response(request_id, result)

        return self._ensure_encodable(response, request_id, method)

    def _ensure_encodable(
        self,
        response: dict[str, Any],
        request_id: RequestId,
        method: str,
    ) -> dict[str, Any]:
        # Handler output (results and error data) must survive the wire codec.
        try:
            encode_message(response)
        except (TypeError, ValueError) as exc:
            logger.error("Response to %s is not valid JSON: %s", method, exc)
            return jsonrpc_error(request_id, INTERNAL_ERROR, "Internal error", str(exc))
        return response
