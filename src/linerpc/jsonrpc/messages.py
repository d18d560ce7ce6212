"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

JSON-RPC 2.0 message model and the one-message-per-line codec.
"""

from __future__ import annotations

import json
import math
from dataclasses import dataclass
from typing import Any, Union

from .errors import INTERNAL_ERROR, InvalidRequestError, ParseError

JSONRPC_VERSION = "2.0"

RequestId = Union[int, str]


def is_valid_request_id(value: Any) -> bool:
    """Return ``True`` for ids a call may carry (``bool`` is not an integer here)."""
    return isinstance(value, (int, str)) and not isinstance(value, bool)


def jsonrpc_response(id: Any, result: Any) -> dict[str, Any]:
    """Build a JSON-RPC 2.0 success response."""
    return {"jsonrpc": JSONRPC_VERSION, "id": id, "result": result}


def jsonrpc_error(
    id: Any,
    code: int,
    message: str,
    data: Any = None,
) -> dict[str, Any]:
    """Build a JSON-RPC 2.0 error response."""
    error: dict[str, Any] = {"code": code, "message": message}
    if data is not None:
        error["data"] = data
    return {"jsonrpc": JSONRPC_VERSION, "id": id, "error": error}


@dataclass(frozen=True, slots=True)
class Request:
    """A call that expects exactly one response carrying the same ``id``."""

    id: RequestId
    method: str
    params: Any = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "jsonrpc": JSONRPC_VERSION,
            "id": self.id,
            "method": self.method,
        }
        if self.params is not None:
            payload["params"] = self.params
        return payload


@dataclass(frozen=True, slots=True)
class Notification:
    """A fire-and-forget message; it has no ``id`` and never gets a response."""

    method: str
    params: Any = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"jsonrpc": JSONRPC_VERSION, "method": self.method}
        if self.params is not None:
            payload["params"] = self.params
        return payload


@dataclass(frozen=True, slots=True)
class ErrorObject:
    code: int
    message: str
    data: Any = None

    def to_dict(self) -> dict[str, Any]:
        error: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.data is not None:
            error["data"] = self.data
        return error


@dataclass(frozen=True, slots=True)
class Response:
    """
    Response envelope. Exactly one of ``result``/``error`` is meaningful;
    ``error`` being set marks the failure variant.
    """

    id: RequestId | None
    result: Any = None
    error: ErrorObject | None = None

    @property
    def is_error(self) -> bool:
        return self.error is not None

    def to_dict(self) -> dict[str, Any]:
        if self.error is not None:
            return {
                "jsonrpc": JSONRPC_VERSION,
                "id": self.id,
                "error": self.error.to_dict(),
            }
        return jsonrpc_response(self.id, self.result)


IncomingCall = Union[Request, Notification]


def parse_incoming(message: dict[str, Any]) -> IncomingCall:
    """
    Validate an inbound request envelope.

    Returns a ``Request`` when the message carries an id and a
    ``Notification`` when it does not (absent or ``null``). Raises
    ``InvalidRequestError`` whose ``request_id`` is the id to answer with,
    or ``None`` when nobody should be answered.
    """
    raw_id = message.get("id")
    request_id = raw_id if is_valid_request_id(raw_id) else None

    if raw_id is not None and request_id is None:
        # Unusable id: answer with null as for an unparseable request.
        raise InvalidRequestError("Invalid request id", data={"id": raw_id})

    if message.get("jsonrpc") != JSONRPC_VERSION:
        raise InvalidRequestError(
            "Invalid JSON-RPC version",
            request_id=request_id,
        )

    method = message.get("method")
    if not isinstance(method, str) or not method:
        raise InvalidRequestError("Missing method", request_id=request_id)

    params = message.get("params")
    if request_id is None:
        return Notification(method=method, params=params)
    return Request(id=request_id, method=method, params=params)


def parse_response(message: Any) -> Response | None:
    """
    Interpret an inbound message as a response.

    Returns ``None`` for anything that is not a response with a usable id.
    """
    if not isinstance(message, dict):
        return None
    if "result" not in message and "error" not in message:
        return None
    request_id = message.get("id")
    if not is_valid_request_id(request_id):
        return None
    if "error" in message:
        raw = message["error"]
        if not isinstance(raw, dict):
            error = ErrorObject(INTERNAL_ERROR, f"Malformed error object: {raw!r}")
            return Response(id=request_id, error=error)
        code = raw.get("code")
        if isinstance(code, bool) or not isinstance(code, int):
            code = INTERNAL_ERROR
        text = raw.get("message")
        error = ErrorObject(
            code=code,
            message=text if isinstance(text, str) else str(text or ""),
            data=raw.get("data"),
        )
        return Response(id=request_id, error=error)
    return Response(id=request_id, result=message.get("result"))


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not a valid JSON value")


def _parse_finite_float(text: str) -> float:
    value = float(text)
    if not math.isfinite(value):
        raise ValueError(f"Number out of range: {text}")
    return value


def encode_message(payload: Any) -> str:
    """
    Serialize one message to a single line of text (without the newline).

    ``json.dumps`` escapes control characters, so the output never contains
    a raw newline. Non-finite floats raise ``ValueError`` instead of being
    written as ``NaN``/``Infinity``.
    """
    return json.dumps(payload, ensure_ascii=False, separators=(",", ":"), allow_nan=False)


def decode_line(line: str) -> Any:
    """
    Parse one line of text into a JSON value, raising ``ParseError``.

    ``NaN``/``Infinity`` literals and numbers that overflow a float are
    rejected, so every accepted value can be written back out.
    """
    try:
        return json.loads(
            line,
            parse_constant=_reject_constant,
            parse_float=_parse_finite_float,
        )
    except ValueError as exc:
        raise ParseError("Parse error", data=str(exc)) from exc
