"""
Session Lifecycle Manager

Connects every configured server at startup and closes them all at shutdown.
The state tag guards queries against running before connect has finished.
"""
import logging
from enum import Enum
from typing import List, Optional

from mcpconductor.config import ServerDescriptor, load_server_config
from mcpconductor.errors import ServerConnectionError, SessionStateError
from mcpconductor.orchestrator.connector import ServerConnector
from mcpconductor.orchestrator.registry import ServerConnection, ToolRegistry

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    IDLE = "idle"
    CONNECTING = "connecting"
    READY = "ready"
    FAILED = "failed"
    CLOSED = "closed"


class SessionLifecycleManager:
    """
    Owns the connect and close phases of a client session.

    A failed connect leaves the servers connected before the failure open
    (state FAILED) unless rollback_on_failure is set, in which case they are
    closed and the registry is cleared. Either way close_all releases
    whatever is still registered.
    """

    def __init__(
        self,
        registry: Optional[ToolRegistry] = None,
        connector: Optional[ServerConnector] = None,
        rollback_on_failure: bool = False,
    ):
        self.registry = registry if registry is not None else ToolRegistry()
        self.connector = connector or ServerConnector()
        self.rollback_on_failure = rollback_on_failure
        self.state = SessionState.IDLE

    async def connect_all(self, config_path: str) -> List[ServerConnection]:
        """
        Connect to every server listed in a configuration file, in file order.

        Args:
            config_path: Path to the JSON server configuration

        Returns:
            The registered connections
        """
        self._check_can_connect()
        descriptors = load_server_config(config_path)
        return await self.connect_descriptors(descriptors)

    async def connect_descriptors(self, descriptors: List[ServerDescriptor]) -> List[ServerConnection]:
        self._check_can_connect()
        self.state = SessionState.CONNECTING

        for descriptor in descriptors:
            try:
                connection = await self.connector.connect(descriptor)
            except ServerConnectionError:
                await self._abort_connect()
                raise

            try:
                self.registry.add(connection)
            except ServerConnectionError:
                await self.connector.close(connection)
                await self._abort_connect()
                raise

        for tool_name, servers in self.registry.duplicate_tool_names().items():
            logger.warning(
                f"Tool {tool_name} is exposed by several servers ({', '.join(servers)}); "
                f"calls resolve to {servers[0]}"
            )

        self.state = SessionState.READY
        logger.info(
            f"Connected to {len(self.registry)} servers with "
            f"{len(self.registry.all_tools())} tools"
        )
        return self.registry.connections()

    async def close_all(self):
        """Close every registered connection, best effort, then clear the registry."""
        for connection in self.registry.connections():
            try:
                await self.connector.close(connection)
            except Exception as e:
                logger.warning(f"Error disconnecting from {connection.server_name}: {str(e)}")
        self.registry.clear()
        self.state = SessionState.CLOSED

    def require_ready(self):
        if self.state != SessionState.READY:
            raise SessionStateError(
                f"Client is not connected (state: {self.state.value}); call connect_to_servers() first"
            )

    def _check_can_connect(self):
        if self.state in (SessionState.CONNECTING, SessionState.READY):
            raise SessionStateError(f"Cannot connect while {self.state.value}")
        if len(self.registry):
            raise SessionStateError("Close the remaining connections before reconnecting")

    async def _abort_connect(self):
        if self.rollback_on_failure:
            logger.info(f"Rolling back {len(self.registry)} connected servers")
            await self.close_all()
        self.state = SessionState.FAILED
