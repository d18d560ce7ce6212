from __future__ import annotations

import json

import pytest

from linerpc.config import (
    DEFAULT_PROTOCOL_VERSION,
    ConfigNotFoundError,
    InvalidConfigError,
    LineRpcSettings,
    ServerNotConfiguredError,
    load_config,
    parse_config,
)


def write_config(tmp_path, payload) -> str:
    path = tmp_path / "mcp.config.json"
    path.write_text(json.dumps(payload), encoding="utf-8")
    return str(path)


def test_load_config_and_pick_first_or_named_server(tmp_path):
    path = write_config(
        tmp_path,
        {
            "mcpServers": {
                "calc": {"command": "python", "args": ["-m", "linerpc.server"], "env": {"A": "1"}},
                "other": {"command": "node"},
            }
        },
    )

    config = load_config(path)
    name, entry = config.pick()
    assert name == "calc"
    assert entry.args == ["-m", "linerpc.server"]
    assert entry.env == {"A": "1"}

    name, entry = config.pick("other")
    assert name == "other"
    assert entry.args == []
    assert entry.env == {}


def test_missing_named_server_and_empty_config(tmp_path):
    config = load_config(write_config(tmp_path, {"mcpServers": {"a": {"command": "x"}}}))
    with pytest.raises(ServerNotConfiguredError):
        config.pick("b")

    with pytest.raises(ServerNotConfiguredError):
        parse_config({"mcpServers": {}}).pick()


def test_config_errors(tmp_path):
    with pytest.raises(ConfigNotFoundError):
        load_config(tmp_path / "missing.json")

    broken = tmp_path / "broken.json"
    broken.write_text("{nope", encoding="utf-8")
    with pytest.raises(InvalidConfigError):
        load_config(broken)

    with pytest.raises(InvalidConfigError):
        parse_config({"servers": {}})
    with pytest.raises(InvalidConfigError):
        parse_config({"mcpServers": {"a": {"args": ["x"]}}})
    with pytest.raises(InvalidConfigError):
        parse_config({"mcpServers": {"a": {"command": "x", "env": {"K": 1}}}})


def test_settings_from_env(monkeypatch):
    monkeypatch.setenv("LINERPC_CONFIG", "/tmp/custom.json")
    monkeypatch.setenv("MCP_CONFIG", "/tmp/ignored.json")
    monkeypatch.setenv("LINERPC_CALL_TIMEOUT_S", "2.5")
    monkeypatch.setenv("LINERPC_LOG_LEVEL", "debug")
    monkeypatch.delenv("LINERPC_PROTOCOL_VERSION", raising=False)

    settings = LineRpcSettings.from_env()

    assert settings.config_path == "/tmp/custom.json"
    assert settings.call_timeout_s == 2.5
    assert settings.log_level == "DEBUG"
    assert settings.protocol_version == DEFAULT_PROTOCOL_VERSION


def test_settings_fall_back_to_mcp_config_and_no_timeout(monkeypatch, tmp_path):
    monkeypatch.delenv("LINERPC_CONFIG", raising=False)
    monkeypatch.setenv("MCP_CONFIG", "/tmp/mcp.json")
    monkeypatch.setenv("LINERPC_CALL_TIMEOUT_S", "")

    settings = LineRpcSettings.from_env()
    assert settings.config_path == "/tmp/mcp.json"
    assert settings.call_timeout_s is None

    monkeypatch.delenv("MCP_CONFIG")
    monkeypatch.chdir(tmp_path)
    assert LineRpcSettings.from_env().config_path == str(tmp_path / "mcp.config.json")
