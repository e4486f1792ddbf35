"""
MCP Client

Public entry point: connect to the configured tool servers, answer queries
with the model and their tools, and release everything on cleanup.
"""
import logging
from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from mcpconductor.config import ClientSettings
from mcpconductor.errors import QueryProcessingError, SessionStateError
from mcpconductor.llm.base_client import BaseLLMClient
from mcpconductor.llm.llm_client import LLMClient
from mcpconductor.orchestrator.connector import ServerConnector
from mcpconductor.orchestrator.conversation import ConversationOrchestrator
from mcpconductor.orchestrator.dispatch import ToolDispatcher
from mcpconductor.orchestrator.lifecycle import SessionLifecycleManager, SessionState
from mcpconductor.orchestrator.registry import ToolRegistry

logger = logging.getLogger(__name__)


class MCPClient:
    """
    Connects one model session to any number of MCP tool servers.

    Usage:
        async with MCPClient(llm_client, "config/mcp_servers.json") as client:
            print(await client.process_query("What's the weather in Sacramento?"))
    """

    def __init__(
        self,
        llm_client: BaseLLMClient,
        server_config_path: str,
        system_prompt: str = "",
        max_tool_rounds: int = 1,
        dispatcher: Optional[ToolDispatcher] = None,
        rollback_on_failure: bool = False,
        connector: Optional[ServerConnector] = None,
        console: Optional[Console] = None,
    ):
        """
        Initialize the client.

        Args:
            llm_client: Model backend
            server_config_path: Path to the server configuration file (json)
            system_prompt: Optional system prompt sent with every query
            max_tool_rounds: Tool rounds allowed per query, 1 keeps the single round-trip
            dispatcher: Tool execution strategy, sequential by default
            rollback_on_failure: Close already connected servers when one fails to connect
            connector: Server connector, a stdio connector by default
            console: Console used by chat_loop
        """
        self.server_config_path = server_config_path
        self.registry = ToolRegistry()
        self.lifecycle = SessionLifecycleManager(
            self.registry, connector or ServerConnector(), rollback_on_failure
        )
        self.orchestrator = ConversationOrchestrator(
            llm_client,
            self.registry,
            self.lifecycle.connector,
            system_prompt=system_prompt,
            dispatcher=dispatcher,
            max_tool_rounds=max_tool_rounds,
        )
        self.console = console or Console()

    @classmethod
    def from_settings(cls, settings: ClientSettings, **kwargs) -> "MCPClient":
        llm_client = LLMClient.create(
            provider=settings.provider,
            model=settings.model,
            api_base=settings.api_base,
            api_key=settings.api_key,
            temperature=settings.temperature,
            max_tokens=settings.max_tokens,
            timeout=settings.timeout,
        )
        return cls(
            llm_client,
            settings.server_config_path,
            system_prompt=settings.system_prompt,
            max_tool_rounds=settings.max_tool_rounds,
            **kwargs,
        )

    @property
    def state(self) -> SessionState:
        return self.lifecycle.state

    async def connect_to_servers(self):
        """Connect to every server in the configuration file."""
        await self.lifecycle.connect_all(self.server_config_path)

    async def process_query(self, query: str) -> str:
        """
        Process a query using the model and the tools of all connected servers.

        Args:
            query: The user's input query

        Returns:
            Processed response as a string
        """
        try:
            self.lifecycle.require_ready()
        except SessionStateError as e:
            raise QueryProcessingError(e) from e
        return await self.orchestrator.process_query(query)

    async def chat_loop(self):
        """Run an interactive chat loop until the user types 'quit'."""
        self.console.print(
            Panel.fit(
                "Type your queries or [bold green]'quit'[/bold green] to exit.\n"
                "Type [bold green]'help'[/bold green] for available commands",
                title="Chat started!",
            )
        )

        while True:
            try:
                message = self.console.input("\n[bold yellow]Query:[/bold yellow] ").strip()
            except (EOFError, KeyboardInterrupt):
                break

            if message.lower() == "quit":
                break
            if not message:
                continue
            if message.lower() == "help":
                self._print_help()
                continue
            if message.lower() == "servers":
                self._print_servers()
                continue
            if message.lower() == "tools":
                self._print_tools()
                continue

            try:
                with self.console.status("[bold green]Thinking...[/bold green]"):
                    response = await self.process_query(message)
                self.console.print(Panel(Text(response), title="Response", title_align="left"))
            except Exception as e:
                self.console.print(f"[bold red]Error:[/bold red] {str(e)}")

    async def cleanup(self):
        """Clean up all connections. Calling it again is a no-op."""
        if self.state == SessionState.CLOSED and not len(self.registry):
            return
        await self.lifecycle.close_all()

    async def __aenter__(self) -> "MCPClient":
        try:
            await self.connect_to_servers()
        except Exception:
            await self.cleanup()
            raise
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.cleanup()

    def _print_help(self):
        self.console.print(
            Panel.fit(
                "help                      - Show this help message\n"
                "servers                   - List connected servers\n"
                "tools                     - List available tools\n"
                "quit                      - Exit the chat",
                title="Available Commands",
            )
        )

    def _print_servers(self):
        self.console.print("\n[bold]Connected servers:[/bold]")
        for connection in self.registry.connections():
            self.console.print(f"- {connection.server_name} ({len(connection.tools)} tools)")

    def _print_tools(self):
        self.console.print("\n[bold]Available tools:[/bold]")
        for connection in self.registry.connections():
            for tool in connection.tools:
                self.console.print(f"- {tool.name} [dim]({connection.server_name})[/dim]: {tool.description}")
