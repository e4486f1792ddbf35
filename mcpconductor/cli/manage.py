#!/usr/bin/env python3
"""
MCP Conductor Command Line

Connects to the configured MCP servers and answers a single query, or runs
an interactive chat when no query is given.
"""

import argparse
import asyncio
import logging
import os
import sys
from typing import List, Optional

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from mcpconductor.cli.helper_functions import configure_logging, save_results_to_file
from mcpconductor.client import MCPClient
from mcpconductor.config import ClientSettings, create_default_config
from mcpconductor.llm.llm_client import PROVIDERS
from mcpconductor.orchestrator.dispatch import ConcurrentDispatcher

logger = logging.getLogger(__name__)

console = Console()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mcp-conductor",
        description="Chat with an LLM that can call tools from multiple MCP servers",
    )
    parser.add_argument(
        "query", nargs="?", help="The query to answer (omit for interactive mode)"
    )
    parser.add_argument(
        "--config", "-c", help="Path to server configuration file (env: MCP_SERVER_CONFIG)"
    )
    parser.add_argument("--output", "-o", help="Save the query and response to a JSON file")
    parser.add_argument(
        "--init-config",
        action="store_true",
        help="Write a default server configuration and exit",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument("--log-file", help="Also write logs to this file")

    # LLM provider and model arguments
    llm_group = parser.add_argument_group("LLM Options")
    llm_group.add_argument(
        "--provider", choices=PROVIDERS, help="LLM provider to use (env: LLM_PROVIDER, default: openai)"
    )
    llm_group.add_argument("--model", help="Model name (env: LLM_MODEL, default: gpt-4o-mini)")
    llm_group.add_argument("--api-base", help="Base URL for the API (for local/custom endpoints)")
    llm_group.add_argument("--api-key", help="API key if needed by the provider")
    llm_group.add_argument("--temperature", type=float, help="Sampling temperature")
    llm_group.add_argument(
        "--max-tokens", type=int, help="Maximum output tokens per model call (env: MAX_OUTPUT_TOKENS)"
    )
    llm_group.add_argument("--system-prompt", help="System prompt sent with every query")

    # Tool round options
    tool_group = parser.add_argument_group("Tool Options")
    tool_group.add_argument(
        "--max-tool-rounds",
        type=int,
        help="Tool rounds allowed per query (default: 1, a single tool round-trip)",
    )
    tool_group.add_argument(
        "--concurrent-tools",
        action="store_true",
        help="Invoke the tools requested in one turn concurrently",
    )
    tool_group.add_argument(
        "--rollback",
        action="store_true",
        help="Close already connected servers when one server fails to connect",
    )
    return parser


async def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the command line client."""
    args = build_parser().parse_args(argv)

    settings = ClientSettings.from_env(
        provider=args.provider,
        model=args.model,
        api_base=args.api_base,
        api_key=args.api_key,
        temperature=args.temperature,
        max_tokens=args.max_tokens,
        server_config_path=args.config,
        system_prompt=args.system_prompt,
        max_tool_rounds=args.max_tool_rounds,
    )
    configure_logging("DEBUG" if args.debug else settings.log_level, args.log_file)

    if args.init_config:
        create_default_config(settings.server_config_path)
        console.print(f"[green]Default configuration written to {settings.server_config_path}[/green]")
        return 0

    if not os.path.exists(settings.server_config_path):
        console.print(
            f"[bold red]Configuration file not found:[/bold red] {settings.server_config_path}\n"
            "Run with --init-config to create one."
        )
        return 1

    try:
        client = MCPClient.from_settings(
            settings,
            dispatcher=ConcurrentDispatcher() if args.concurrent_tools else None,
            rollback_on_failure=args.rollback,
        )
    except Exception as e:
        console.print(f"[bold red]Error initializing client:[/bold red] {str(e)}")
        return 1

    try:
        console.print("[bold]Connecting to MCP servers...[/bold]")
        await client.connect_to_servers()

        if args.query:
            console.print(f"[bold]Processing query:[/bold] {args.query}")

            with console.status("[bold green]Thinking...[/bold green]"):
                response = await client.process_query(args.query)

            console.print(Panel(Text(response), title="Response", title_align="left"))

            if args.output:
                file_path = save_results_to_file(
                    {"query": args.query, "response": response}, args.output
                )
                console.print(f"[green]Results saved to {file_path}[/green]")
        else:
            await client.chat_loop()

    except Exception as e:
        logger.error(f"Error: {str(e)}")
        console.print(f"[bold red]Error:[/bold red] {str(e)}")
        return 1
    finally:
        await client.cleanup()

    return 0


def run():
    try:
        sys.exit(asyncio.run(main()))
    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled by user.[/yellow]")
        sys.exit(1)


if __name__ == "__main__":
    run()
