"""Tests for config.py: server configuration files and client settings."""
import json

import pytest

from mcpconductor.config import (
    ClientSettings,
    ServerDescriptor,
    create_default_config,
    load_server_config,
    parse_server_config,
)
from mcpconductor.errors import ConfigurationError


def write_config(tmp_path, payload, name="servers.json"):
    path = tmp_path / name
    path.write_text(payload if isinstance(payload, str) else json.dumps(payload))
    return str(path)


class TestLoadServerConfig:
    def test_mcp_servers_layout(self, tmp_path):
        path = write_config(tmp_path, {
            "mcpServers": {
                "weather": {"command": "python", "args": ["weather.py"]},
                "files": {"command": "npx", "args": ["-y", "files-server"], "env": {"ROOT": "/tmp"}},
            }
        })
        descriptors = load_server_config(path)

        assert [d.name for d in descriptors] == ["weather", "files"]
        assert descriptors[0].command == "python"
        assert descriptors[0].args == ["weather.py"]
        assert descriptors[0].env is None
        assert descriptors[1].env == {"ROOT": "/tmp"}

    def test_bare_mapping(self, tmp_path):
        path = write_config(tmp_path, {"weather": {"command": "python"}})
        (descriptor,) = load_server_config(path)
        assert descriptor.name == "weather"
        assert descriptor.args == []

    def test_file_order_preserved(self, tmp_path):
        names = ["zeta", "alpha", "mid", "beta"]
        path = write_config(tmp_path, {"mcpServers": {n: {"command": "x"} for n in names}})
        assert [d.name for d in load_server_config(path)] == names

    def test_empty_servers(self, tmp_path):
        path = write_config(tmp_path, {"mcpServers": {}})
        assert load_server_config(path) == []

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError):
            load_server_config(str(tmp_path / "missing.json"))

    def test_malformed_json(self, tmp_path):
        path = write_config(tmp_path, "{not json")
        with pytest.raises(ConfigurationError) as exc_info:
            load_server_config(path)
        assert isinstance(exc_info.value.__cause__, ValueError)

    def test_missing_command(self, tmp_path):
        path = write_config(tmp_path, {"mcpServers": {"weather": {"args": []}}})
        with pytest.raises(ConfigurationError, match="weather"):
            load_server_config(path)

    def test_server_not_object(self, tmp_path):
        path = write_config(tmp_path, {"mcpServers": {"weather": "python"}})
        with pytest.raises(ConfigurationError):
            load_server_config(path)

    def test_top_level_not_object(self):
        with pytest.raises(ConfigurationError):
            parse_server_config(["python"])


class TestServerDescriptor:
    def test_frozen(self):
        descriptor = ServerDescriptor(name="a", command="python")
        with pytest.raises(Exception):
            descriptor.command = "node"


class TestCreateDefaultConfig:
    def test_writes_loadable_file(self, tmp_path):
        path = str(tmp_path / "config" / "servers.json")
        config = create_default_config(path)

        assert "weather" in config["mcpServers"]
        (descriptor,) = load_server_config(path)
        assert descriptor.name == "weather"


class TestClientSettings:
    @pytest.fixture(autouse=True)
    def clean_env(self, monkeypatch):
        for key in ("LLM_PROVIDER", "LLM_MODEL", "OPENAI_API_KEY", "OPENAI_BASE_URL",
                    "OLLAMA_BASE_URL", "MAX_OUTPUT_TOKENS", "MCP_SERVER_CONFIG",
                    "SYSTEM_PROMPT", "LLM_TIMEOUT", "LOG_LEVEL"):
            monkeypatch.delenv(key, raising=False)

    def test_defaults(self):
        settings = ClientSettings.from_env()
        assert settings.provider == "openai"
        assert settings.model == "gpt-4o-mini"
        assert settings.max_tokens == 1000
        assert settings.max_tool_rounds == 1
        assert settings.api_key is None

    def test_environment(self, monkeypatch):
        monkeypatch.setenv("LLM_PROVIDER", "ollama")
        monkeypatch.setenv("OLLAMA_BASE_URL", "http://gpu-box:11434")
        monkeypatch.setenv("MAX_OUTPUT_TOKENS", "256")
        monkeypatch.setenv("SYSTEM_PROMPT", "Be brief.")

        settings = ClientSettings.from_env()
        assert settings.provider == "ollama"
        assert settings.api_base == "http://gpu-box:11434"
        assert settings.max_tokens == 256
        assert settings.system_prompt == "Be brief."

    def test_overrides_win_unless_none(self, monkeypatch):
        monkeypatch.setenv("LLM_MODEL", "gpt-4o")
        settings = ClientSettings.from_env(model=None, max_tokens=50)
        assert settings.model == "gpt-4o"
        assert settings.max_tokens == 50

    def test_provider_override_picks_matching_base_url(self, monkeypatch):
        monkeypatch.setenv("OPENAI_BASE_URL", "https://api.openai.com/v1")
        monkeypatch.setenv("OLLAMA_BASE_URL", "http://gpu-box:11434")

        settings = ClientSettings.from_env(provider="ollama")
        assert settings.provider == "ollama"
        assert settings.api_base == "http://gpu-box:11434"

    def test_provider_override_to_openai(self, monkeypatch):
        monkeypatch.setenv("LLM_PROVIDER", "ollama")
        monkeypatch.setenv("OPENAI_BASE_URL", "https://api.openai.com/v1")
        monkeypatch.setenv("OLLAMA_BASE_URL", "http://gpu-box:11434")

        settings = ClientSettings.from_env(provider="openai")
        assert settings.api_base == "https://api.openai.com/v1"
