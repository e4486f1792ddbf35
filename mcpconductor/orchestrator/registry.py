"""Tool registry: connected servers, their tools, and tool name -> server lookup."""
import logging
from contextlib import AsyncExitStack
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from mcpconductor.errors import ServerConnectionError
from mcpconductor.llm.models import ToolSchema

logger = logging.getLogger(__name__)


@dataclass
class ServerConnection:
    server_name: str
    session: Any
    tools: List[ToolSchema] = field(default_factory=list)
    exit_stack: Optional[AsyncExitStack] = field(default=None, repr=False)
    closed: bool = False

    def owns(self, tool_name: str) -> bool:
        return any(tool.name == tool_name for tool in self.tools)


class ToolRegistry:
    """
    Ordered collection of server connections.

    Tool names are not required to be unique across servers. Lookups resolve
    to the first connection registered that owns the name.
    """

    def __init__(self):
        self._connections: Dict[str, ServerConnection] = {}
        self._tools: List[ToolSchema] = []

    def register(self, server_name: str, session: Any, tools: List[ToolSchema],
                 exit_stack: Optional[AsyncExitStack] = None) -> ServerConnection:
        return self.add(ServerConnection(server_name, session, list(tools), exit_stack))

    def add(self, connection: ServerConnection) -> ServerConnection:
        if connection.server_name in self._connections:
            raise ServerConnectionError(
                connection.server_name, ValueError("server name already registered")
            )

        self._connections[connection.server_name] = connection
        self._tools.extend(connection.tools)
        logger.info(f"Registered {connection.server_name} with {len(connection.tools)} tools")
        return connection

    def find_owner(self, tool_name: str) -> Optional[ServerConnection]:
        for connection in self._connections.values():
            if connection.owns(tool_name):
                return connection
        return None

    def get(self, server_name: str) -> Optional[ServerConnection]:
        return self._connections.get(server_name)

    def all_tools(self) -> List[ToolSchema]:
        return list(self._tools)

    def openai_tools(self) -> List[Dict[str, Any]]:
        """The aggregate tool list in function-tool wire format."""
        return [tool.to_openai() for tool in self._tools]

    def connections(self) -> List[ServerConnection]:
        return list(self._connections.values())

    def duplicate_tool_names(self) -> Dict[str, List[str]]:
        """Map each tool name exposed by more than one server to its owners."""
        owners: Dict[str, List[str]] = {}
        for connection in self._connections.values():
            for tool in connection.tools:
                servers = owners.setdefault(tool.name, [])
                if connection.server_name not in servers:
                    servers.append(connection.server_name)
        return {name: servers for name, servers in owners.items() if len(servers) > 1}

    def clear(self):
        self._connections.clear()
        self._tools.clear()

    def __len__(self) -> int:
        return len(self._connections)

    def __contains__(self, server_name: str) -> bool:
        return server_name in self._connections
