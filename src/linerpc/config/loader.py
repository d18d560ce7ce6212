"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Loading of ``mcp.config.json`` style server configuration.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from .types import ConfigNotFoundError, InvalidConfigError, MCPConfigFile


def parse_config(raw: Any, *, source: str = "<memory>") -> MCPConfigFile:
    """Validate an already-decoded config document."""
    if not isinstance(raw, dict) or not isinstance(raw.get("mcpServers"), dict):
        raise InvalidConfigError(
            f'Config must be an object with a top-level "mcpServers" object: {source}'
        )
    try:
        return MCPConfigFile.model_validate(raw)
    except ValidationError as e:
        raise InvalidConfigError(f"Invalid server config in {source}: {e}") from e


def load_config(path: str | Path) -> MCPConfigFile:
    """Read and validate a config file."""
    config_path = Path(path).expanduser()
    if not config_path.is_file():
        raise ConfigNotFoundError(f"Config file not found: {config_path}")
    try:
        raw = json.loads(config_path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise InvalidConfigError(f"Could not read config {config_path}: {e}") from e
    return parse_config(raw, source=str(config_path))
