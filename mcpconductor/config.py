"""
Configuration

Server descriptors come from a JSON file in the common "mcpServers" layout;
client settings come from environment variables with CLI overrides.
"""
import json
import logging
import os
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from mcpconductor.errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "config/mcp_servers.json"


class ServerDescriptor(BaseModel):
    """How to launch one tool server"""
    model_config = ConfigDict(frozen=True)

    name: str
    command: str
    args: List[str] = Field(default_factory=list)
    env: Optional[Dict[str, str]] = None


class ClientSettings(BaseModel):
    provider: str = "openai"
    model: str = "gpt-4o-mini"
    api_key: Optional[str] = None
    api_base: Optional[str] = None
    max_tokens: int = 1000
    temperature: Optional[float] = None
    timeout: float = 120.0
    server_config_path: str = DEFAULT_CONFIG_PATH
    system_prompt: str = ""
    max_tool_rounds: int = 1
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, **overrides: Any) -> "ClientSettings":
        """Build settings from the environment; non-None overrides win."""
        provider = overrides.get("provider") or os.getenv("LLM_PROVIDER", "openai")
        api_base = os.getenv("OPENAI_BASE_URL") if provider == "openai" else os.getenv("OLLAMA_BASE_URL")
        values: Dict[str, Any] = {
            "provider": provider,
            "model": os.getenv("LLM_MODEL", "gpt-4o-mini"),
            "api_key": os.getenv("OPENAI_API_KEY") or None,
            "api_base": api_base or None,
            "max_tokens": int(os.getenv("MAX_OUTPUT_TOKENS", "1000")),
            "timeout": float(os.getenv("LLM_TIMEOUT", "120")),
            "server_config_path": os.getenv("MCP_SERVER_CONFIG", DEFAULT_CONFIG_PATH),
            "system_prompt": os.getenv("SYSTEM_PROMPT", ""),
            "log_level": os.getenv("LOG_LEVEL", "INFO"),
        }
        values.update({key: value for key, value in overrides.items() if value is not None})
        return cls(**values)


def parse_server_config(config: Any) -> List[ServerDescriptor]:
    """
    Turn a decoded configuration document into server descriptors.

    Args:
        config: Either {"mcpServers": {...}} or the bare name -> server mapping

    Returns:
        Descriptors in document order
    """
    if isinstance(config, dict) and "mcpServers" in config:
        config = config["mcpServers"]
    if not isinstance(config, dict):
        raise ConfigurationError("Server configuration must be a JSON object")

    descriptors = []
    for name, server in config.items():
        if not isinstance(server, dict):
            raise ConfigurationError(f"Server {name} must be a JSON object")
        try:
            descriptors.append(ServerDescriptor(name=name, **server))
        except (ValidationError, TypeError) as e:
            raise ConfigurationError(f"Invalid configuration for server {name}: {e}") from e
    return descriptors


def load_server_config(config_path: str) -> List[ServerDescriptor]:
    """
    Load server configuration from a JSON file.

    Args:
        config_path: Path to the configuration file

    Returns:
        List of server descriptors in file order
    """
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            config = json.load(f)
    except (OSError, ValueError) as e:
        raise ConfigurationError(f"Failed to read configuration file {config_path}: {e}") from e

    descriptors = parse_server_config(config)
    logger.info(f"Loaded {len(descriptors)} server descriptors from {config_path}")
    return descriptors


def create_default_config(config_path: str) -> Dict[str, Any]:
    """
    Create a default configuration file if none exists.

    Args:
        config_path: Path to create the configuration file

    Returns:
        Default configuration dictionary
    """
    default_config = {
        "mcpServers": {
            "weather": {
                "command": "python",
                "args": ["examples/servers/weather_server.py"],
                "env": {}
            }
        }
    }

    directory = os.path.dirname(config_path)
    if directory:
        os.makedirs(directory, exist_ok=True)

    with open(config_path, "w", encoding="utf-8") as f:
        json.dump(default_config, f, indent=2)

    return default_config
