"""
Server Connector

Launches tool servers over the MCP stdio transport, fetches their tool
catalogs and forwards tool calls. Each connection owns an AsyncExitStack
holding its transport and session contexts.
"""
import asyncio
import json
import logging
from contextlib import AsyncExitStack
from typing import Any, Dict, List, Optional

from mcp import ClientSession, StdioServerParameters
from mcp.client.stdio import stdio_client

from mcpconductor.config import ServerDescriptor
from mcpconductor.errors import ServerConnectionError, ToolInvocationError
from mcpconductor.llm.models import ToolSchema
from mcpconductor.orchestrator.registry import ServerConnection

logger = logging.getLogger(__name__)


class ServerConnector:
    """
    Opens, uses and closes MCP client sessions.

    No operation here is retried: failures propagate to the caller wrapped
    in ServerConnectionError or ToolInvocationError.
    """

    def __init__(self, init_timeout: Optional[float] = None):
        """
        Args:
            init_timeout: Optional limit in seconds for the initialize handshake
        """
        self.init_timeout = init_timeout

    async def connect(self, descriptor: ServerDescriptor) -> ServerConnection:
        """
        Connect to an MCP server using stdio transport.

        Args:
            descriptor: Launch command, arguments and environment of the server

        Returns:
            A connection holding the initialized session and its tool catalog
        """
        logger.info(
            f"Connecting to server {descriptor.name} with command: "
            f"{descriptor.command} {' '.join(descriptor.args)}"
        )

        exit_stack = AsyncExitStack()
        try:
            session = await self._open_session(descriptor, exit_stack)

            if self.init_timeout:
                await asyncio.wait_for(session.initialize(), timeout=self.init_timeout)
            else:
                await session.initialize()

            tools_result = await session.list_tools()
            tools = [self._to_schema(tool) for tool in tools_result.tools]
        except Exception as e:
            logger.error(f"Failed to connect to server {descriptor.name}: {str(e)}")
            await self._release(descriptor.name, exit_stack)
            raise ServerConnectionError(descriptor.name, e) from e

        logger.info(
            f"Successfully connected to {descriptor.name}: "
            f"{len(tools)} tools ({', '.join(tool.name for tool in tools)})"
        )
        return ServerConnection(
            server_name=descriptor.name,
            session=session,
            tools=tools,
            exit_stack=exit_stack,
        )

    async def invoke(self, connection: ServerConnection, tool_name: str,
                     arguments: Dict[str, Any]) -> str:
        """
        Call a tool on a connected server.

        Args:
            connection: The server owning the tool
            tool_name: The name of the tool to call
            arguments: Decoded argument object

        Returns:
            The tool result rendered as text
        """
        if connection.closed:
            raise ToolInvocationError(
                tool_name, RuntimeError(f"connection to {connection.server_name} is closed")
            )

        logger.info(f"Calling {tool_name} on {connection.server_name} with arguments: {arguments}")
        try:
            result = await connection.session.call_tool(tool_name, arguments)
        except Exception as e:
            logger.error(f"Error executing tool call {tool_name} on {connection.server_name}: {str(e)}")
            raise ToolInvocationError(tool_name, e) from e

        text = render_tool_result(result)
        if result.isError:
            raise ToolInvocationError(tool_name, RuntimeError(text or "tool reported an error"))
        return text

    async def close(self, connection: ServerConnection):
        """Release the session. Safe to call more than once; never raises."""
        if connection.closed:
            return
        connection.closed = True
        if connection.exit_stack is not None:
            await self._release(connection.server_name, connection.exit_stack)
        logger.info(f"Disconnected from {connection.server_name}")

    async def _open_session(self, descriptor: ServerDescriptor,
                            exit_stack: AsyncExitStack) -> ClientSession:
        params = StdioServerParameters(
            command=descriptor.command,
            args=list(descriptor.args),
            env=descriptor.env or None,
        )
        read_stream, write_stream = await exit_stack.enter_async_context(stdio_client(params))
        return await exit_stack.enter_async_context(ClientSession(read_stream, write_stream))

    @staticmethod
    async def _release(server_name: str, exit_stack: AsyncExitStack):
        try:
            await exit_stack.aclose()
        except Exception as e:
            logger.warning(f"Error disconnecting from {server_name}: {str(e)}")

    @staticmethod
    def _to_schema(tool: Any) -> ToolSchema:
        schema = ToolSchema(name=tool.name, description=tool.description or "")
        if tool.inputSchema:
            schema.input_schema = dict(tool.inputSchema)
        return schema


def render_tool_result(result: Any) -> str:
    """
    Flatten a call_tool result into the text sent back to the model.

    Text blocks are joined with newlines, other blocks are serialized to JSON.
    Structured content is used when the result carries no content blocks.
    """
    parts: List[str] = []
    for block in result.content:
        if getattr(block, "type", None) == "text":
            parts.append(block.text)
        elif hasattr(block, "model_dump"):
            parts.append(json.dumps(block.model_dump(mode="json")))
        else:
            parts.append(str(block))

    if not parts:
        structured = getattr(result, "structuredContent", None)
        if structured is not None:
            return json.dumps(structured)
    return "\n".join(parts)
