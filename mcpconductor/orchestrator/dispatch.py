"""
Tool Dispatch

Turns the tool calls of one assistant message into tool results. Every call
is parsed and resolved before any is invoked, so a malformed payload or an
unknown tool aborts the round without running anything. Dispatchers return
results in the order the calls were requested.
"""
import abc
import asyncio
import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, List

from mcpconductor.errors import ArgumentParseError, ToolNotFoundError
from mcpconductor.llm.models import ToolCall
from mcpconductor.orchestrator.connector import ServerConnector
from mcpconductor.orchestrator.registry import ServerConnection, ToolRegistry

logger = logging.getLogger(__name__)


@dataclass
class PreparedCall:
    call: ToolCall
    connection: ServerConnection
    arguments: Dict[str, Any]


def parse_arguments(call: ToolCall) -> Dict[str, Any]:
    """Decode a raw argument string; it must be a JSON object (empty means {})."""
    raw = call.arguments.strip() if call.arguments else ""
    if not raw:
        return {}
    try:
        value = json.loads(raw)
    except ValueError as e:
        raise ArgumentParseError(call.name, call.arguments, e) from e
    if not isinstance(value, dict):
        raise ArgumentParseError(
            call.name, call.arguments,
            TypeError(f"expected a JSON object, got {type(value).__name__}"),
        )
    return value


def prepare_calls(tool_calls: List[ToolCall], registry: ToolRegistry) -> List[PreparedCall]:
    prepared = []
    for call in tool_calls:
        arguments = parse_arguments(call)
        owner = registry.find_owner(call.name)
        if owner is None:
            raise ToolNotFoundError(call.name)
        prepared.append(PreparedCall(call, owner, arguments))
    return prepared


class ToolDispatcher(abc.ABC):
    """Strategy for executing one round of prepared tool calls."""

    @abc.abstractmethod
    async def dispatch(self, calls: List[PreparedCall], connector: ServerConnector) -> List[str]:
        """Return one result per call, in request order."""


class SequentialDispatcher(ToolDispatcher):
    """Invoke tools one after another; the first failure stops the round."""

    async def dispatch(self, calls: List[PreparedCall], connector: ServerConnector) -> List[str]:
        results = []
        for prepared in calls:
            results.append(
                await connector.invoke(prepared.connection, prepared.call.name, prepared.arguments)
            )
        return results


class ConcurrentDispatcher(ToolDispatcher):
    """Invoke all tools of a round at once; results keep request order."""

    async def dispatch(self, calls: List[PreparedCall], connector: ServerConnector) -> List[str]:
        tasks = [
            asyncio.ensure_future(
                connector.invoke(prepared.connection, prepared.call.name, prepared.arguments)
            )
            for prepared in calls
        ]
        try:
            return list(await asyncio.gather(*tasks))
        except Exception:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise
