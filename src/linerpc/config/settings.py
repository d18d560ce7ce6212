"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Runtime settings and explicit environment loading.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_PROTOCOL_VERSION = "2025-06-18"
DEFAULT_CONFIG_FILENAME = "mcp.config.json"


def _optional_float(value: str | None) -> float | None:
    if value is None or not value.strip():
        return None
    return float(value)


@dataclass(frozen=True, slots=True)
class LineRpcSettings:
    """Explicit settings used by the client, server and CLIs."""

    config_path: str = DEFAULT_CONFIG_FILENAME
    call_timeout_s: float | None = None
    shutdown_grace_s: float = 2.0
    protocol_version: str = DEFAULT_PROTOCOL_VERSION
    log_level: str = "INFO"

    @staticmethod
    def from_env() -> "LineRpcSettings":
        """Load settings from environment variables."""
        config_path = (
            os.getenv("LINERPC_CONFIG")
            or os.getenv("MCP_CONFIG")
            or os.path.join(os.getcwd(), DEFAULT_CONFIG_FILENAME)
        )
        return LineRpcSettings(
            config_path=config_path,
            call_timeout_s=_optional_float(os.getenv("LINERPC_CALL_TIMEOUT_S")),
            shutdown_grace_s=float(os.getenv("LINERPC_SHUTDOWN_GRACE_S", "2")),
            protocol_version=os.getenv(
                "LINERPC_PROTOCOL_VERSION", DEFAULT_PROTOCOL_VERSION
            ),
            log_level=os.getenv("LINERPC_LOG_LEVEL", "INFO").upper(),
        )
