"""
Caller side: request correlation channel and the MCP client session.
"""

from .channel import JsonRpcChannel
from .session import DEFAULT_CLIENT_INFO, MCPClientSession, MCPProtocolError, text_of

__all__ = [
    "JsonRpcChannel",
    "MCPClientSession",
    "MCPProtocolError",
    "DEFAULT_CLIENT_INFO",
    "text_of",
]
