"""
Configuration: environment settings and server config files.
"""

from .loader import load_config, parse_config
from .settings import DEFAULT_CONFIG_FILENAME, DEFAULT_PROTOCOL_VERSION, LineRpcSettings
from .types import (
    ConfigError,
    ConfigNotFoundError,
    InvalidConfigError,
    MCPConfigFile,
    MCPServerEntry,
    ServerNotConfiguredError,
)

__all__ = [
    "LineRpcSettings",
    "DEFAULT_CONFIG_FILENAME",
    "DEFAULT_PROTOCOL_VERSION",
    "MCPConfigFile",
    "MCPServerEntry",
    "ConfigError",
    "ConfigNotFoundError",
    "InvalidConfigError",
    "ServerNotConfiguredError",
    "load_config",
    "parse_config",
]
