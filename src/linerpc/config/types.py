"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Config-file models and error hierarchy.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from ..jsonrpc import LineRpcError


class ConfigError(LineRpcError):
    """Base configuration error."""


class ConfigNotFoundError(ConfigError):
    """Raised when the config file does not exist."""


class InvalidConfigError(ConfigError):
    """Raised when the config file is not valid JSON or has the wrong shape."""


class ServerNotConfiguredError(ConfigError):
    """Raised when a requested server name is missing from ``mcpServers``."""


class MCPServerEntry(BaseModel):
    """
    How to launch one stdio server.

    Attributes:
        command: Executable name or path.
        args: Command-line arguments.
        env: Extra environment variables merged over the caller's environment.
        cwd: Optional working directory for the child process.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    command: str = Field(min_length=1)
    args: list[str] = Field(default_factory=list)
    env: dict[str, str] = Field(default_factory=dict)
    cwd: str | None = None


class MCPConfigFile(BaseModel):
    """Top-level ``mcp.config.json`` document (``{"mcpServers": {...}}``)."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    mcp_servers: dict[str, MCPServerEntry] = Field(alias="mcpServers")

    def names(self) -> list[str]:
        return list(self.mcp_servers)

    def pick(self, name: str | None = None) -> tuple[str, MCPServerEntry]:
        """Return the named server, or the first one declared."""
        if name is not None:
            try:
                return name, self.mcp_servers[name]
            except KeyError as e:
                raise ServerNotConfiguredError(
                    f"Server '{name}' not found in mcpServers (have: {', '.join(self.names()) or 'none'})"
                ) from e
        if not self.mcp_servers:
            raise ServerNotConfiguredError("No servers configured in mcpServers")
        first = next(iter(self.mcp_servers))
        return first, self.mcp_servers[first]
