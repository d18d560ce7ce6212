"""
Callee side: method registry, dispatcher, MCP demo methods and serve loops.
"""

from .dispatcher import Dispatcher, MethodHandler, MethodRegistry
from .protocol import MCPProtocolHandler, ServerConfig, create_dispatcher
from .stdio import serve_stdio, serve_transport
from .tools import (
    ECHO_TOOL,
    MATH_ADD_TOOL,
    EchoArgs,
    MathAddArgs,
    Tool,
    ToolCatalog,
    ToolSpec,
    default_tools,
    format_number,
)

__all__ = [
    "Dispatcher",
    "MethodHandler",
    "MethodRegistry",
    "MCPProtocolHandler",
    "ServerConfig",
    "create_dispatcher",
    "serve_stdio",
    "serve_transport",
    "Tool",
    "ToolSpec",
    "ToolCatalog",
    "MathAddArgs",
    "EchoArgs",
    "MATH_ADD_TOOL",
    "ECHO_TOOL",
    "default_tools",
    "format_number",
]
