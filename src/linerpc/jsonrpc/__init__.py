"""
JSON-RPC 2.0 protocol layer.

Message model, error codes and hierarchy, and the one-JSON-value-per-line codec.
"""

from .errors import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
    PARSE_ERROR,
    ChannelClosedError,
    ChannelError,
    InternalError,
    InvalidParamsError,
    InvalidRequestError,
    JsonRpcCallError,
    JsonRpcError,
    JsonRpcTimeoutError,
    LineRpcError,
    MethodAlreadyRegisteredError,
    MethodNotFoundError,
    ParseError,
)
from .messages import (
    JSONRPC_VERSION,
    ErrorObject,
    IncomingCall,
    Notification,
    Request,
    RequestId,
    Response,
    decode_line,
    encode_message,
    is_valid_request_id,
    jsonrpc_error,
    jsonrpc_response,
    parse_incoming,
    parse_response,
)

__all__ = [
    "JSONRPC_VERSION",
    "PARSE_ERROR",
    "INVALID_REQUEST",
    "METHOD_NOT_FOUND",
    "INVALID_PARAMS",
    "INTERNAL_ERROR",
    "LineRpcError",
    "JsonRpcError",
    "ParseError",
    "InvalidRequestError",
    "MethodNotFoundError",
    "InvalidParamsError",
    "InternalError",
    "JsonRpcCallError",
    "MethodAlreadyRegisteredError",
    "ChannelError",
    "ChannelClosedError",
    "JsonRpcTimeoutError",
    "Request",
    "Notification",
    "Response",
    "ErrorObject",
    "IncomingCall",
    "RequestId",
    "decode_line",
    "encode_message",
    "is_valid_request_id",
    "jsonrpc_error",
    "jsonrpc_response",
    "parse_incoming",
    "parse_response",
]
