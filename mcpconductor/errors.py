"""
Error Taxonomy

Startup errors (configuration, server connection) abort the connect phase.
Per-query errors abort a single query and reach the caller wrapped in a
QueryProcessingError. Cleanup never raises.
"""
from typing import Optional


class ConductorError(Exception):
    """Base class for all errors raised by the client."""


class ConfigurationError(ConductorError):
    """The server configuration file is unreadable or malformed."""


class SessionStateError(ConductorError):
    """An operation was attempted in the wrong lifecycle state."""


class ServerConnectionError(ConductorError):
    """Launching, handshaking with or listing tools of a server failed."""

    def __init__(self, server_name: str, cause: Optional[BaseException] = None):
        self.server_name = server_name
        self.cause = cause
        message = f"Failed to connect to server {server_name}"
        if cause is not None:
            message += f": {cause}"
        super().__init__(message)


class ToolNotFoundError(ConductorError):
    """The model requested a tool that no connected server exposes."""

    def __init__(self, tool_name: str):
        self.tool_name = tool_name
        super().__init__(f"Tool {tool_name} not found in any connected server")


class ToolInvocationError(ConductorError):
    """A tool server raised or reported an error while executing a tool."""

    def __init__(self, tool_name: str, cause: Optional[BaseException] = None):
        self.tool_name = tool_name
        self.cause = cause
        message = f"Tool {tool_name} failed"
        if cause is not None:
            message += f": {cause}"
        super().__init__(message)


class ArgumentParseError(ConductorError):
    """A tool-call argument payload is not a JSON object."""

    def __init__(self, tool_name: str, raw: str, cause: Optional[BaseException] = None):
        self.tool_name = tool_name
        self.raw = raw
        self.cause = cause
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"Invalid arguments for tool {tool_name}{detail}")


class ModelBackendError(ConductorError):
    """Submitting messages to the model backend failed."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        self.cause = cause
        super().__init__(message)


class QueryProcessingError(ConductorError):
    """Wraps any failure raised while processing a single query."""

    def __init__(self, cause: BaseException):
        self.cause = cause
        super().__init__(f"Error processing query: {cause}")
