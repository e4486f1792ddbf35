"""
MCP Conductor

Connects a language model to the tools of multiple MCP servers.
"""
from mcpconductor.client import MCPClient
from mcpconductor.config import ClientSettings, ServerDescriptor, load_server_config
from mcpconductor.errors import (
    ArgumentParseError,
    ConductorError,
    ConfigurationError,
    ModelBackendError,
    QueryProcessingError,
    ServerConnectionError,
    SessionStateError,
    ToolInvocationError,
    ToolNotFoundError,
)

__version__ = "0.1.0"

__all__ = [
    "ArgumentParseError",
    "ClientSettings",
    "ConductorError",
    "ConfigurationError",
    "MCPClient",
    "ModelBackendError",
    "QueryProcessingError",
    "ServerConnectionError",
    "ServerDescriptor",
    "SessionStateError",
    "ToolInvocationError",
    "ToolNotFoundError",
    "load_server_config",
]
