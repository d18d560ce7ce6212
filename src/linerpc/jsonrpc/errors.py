"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Error hierarchy for the line-oriented JSON-RPC channel.
"""

from __future__ import annotations

from typing import Any

# Standard JSON-RPC error codes
PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603


class LineRpcError(RuntimeError):
    """Base linerpc error."""


class JsonRpcError(LineRpcError):
    """
    Error that maps onto a JSON-RPC error object.

    Handlers raise subclasses of this to answer with a specific error code;
    the dispatcher turns them into ``{"code", "message", "data"}`` responses.
    """

    code: int = INTERNAL_ERROR
    default_message: str = "Internal error"

    def __init__(
        self,
        message: str | None = None,
        *,
        data: Any = None,
        code: int | None = None,
    ) -> None:
        self.message = message or self.default_message
        self.data = data
        if code is not None:
            self.code = code
        super().__init__(self.message)

    def to_error_object(self) -> dict[str, Any]:
        error: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.data is not None:
            error["data"] = self.data
        return error


class ParseError(JsonRpcError):
    code = PARSE_ERROR
    default_message = "Parse error"


class InvalidRequestError(JsonRpcError):
    code = INVALID_REQUEST
    default_message = "Invalid Request"

    def __init__(
        self,
        message: str | None = None,
        *,
        data: Any = None,
        request_id: int | str | None = None,
    ) -> None:
        super().__init__(message, data=data)
        self.request_id = request_id


class MethodNotFoundError(JsonRpcError):
    code = METHOD_NOT_FOUND
    default_message = "Method not found"


class InvalidParamsError(JsonRpcError):
    code = INVALID_PARAMS
    default_message = "Invalid params"


class InternalError(JsonRpcError):
    code = INTERNAL_ERROR
    default_message = "Internal error"


class JsonRpcCallError(JsonRpcError):
    """Raised on the calling side when the peer answered with an error object."""

    def __init__(
        self,
        code: int,
        message: str,
        data: Any = None,
        *,
        method: str | None = None,
    ) -> None:
        super().__init__(message, data=data, code=code)
        self.method = method

    def __str__(self) -> str:
        prefix = f"{self.method}: " if self.method else ""
        return f"{prefix}[{self.code}] {self.message}"


class MethodAlreadyRegisteredError(LineRpcError):
    """Raised when a method name is registered twice without ``overwrite``."""


class ChannelError(LineRpcError):
    """Base error for transport/channel failures."""


class ChannelClosedError(ChannelError):
    """Raised when the channel is closed before a call completes."""


class JsonRpcTimeoutError(ChannelError):
    """Raised when a call does not receive its response in time."""
