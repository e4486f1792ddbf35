"""Shared fixtures: stubbed model backend, connector and a weather registry."""
from typing import List, Optional
from unittest.mock import AsyncMock, MagicMock

import pytest

from mcpconductor.llm.base_client import BaseLLMClient
from mcpconductor.llm.models import (
    AssistantReply,
    FinishReason,
    Message,
    TokenUsage,
    ToolCall,
    ToolSchema,
)
from mcpconductor.orchestrator.connector import ServerConnector
from mcpconductor.orchestrator.registry import ServerConnection, ToolRegistry


def make_reply(
    content: Optional[str] = None,
    tool_calls: Optional[List[ToolCall]] = None,
    finish_reason: FinishReason = FinishReason.STOP,
    usage: Optional[TokenUsage] = None,
) -> AssistantReply:
    return AssistantReply(
        message=Message.assistant(content, tool_calls),
        finish_reason=finish_reason,
        usage=usage,
    )


def make_tool(name: str, description: str = "") -> ToolSchema:
    return ToolSchema(
        name=name,
        description=description or f"{name} tool",
        input_schema={"type": "object", "properties": {"city": {"type": "string"}}},
    )


@pytest.fixture
def weather_tool():
    return make_tool("get_weather", "Get the current weather for a city")


@pytest.fixture
def weather_connection(weather_tool):
    return ServerConnection(server_name="weather", session=MagicMock(), tools=[weather_tool])


@pytest.fixture
def registry(weather_connection):
    registry = ToolRegistry()
    registry.add(weather_connection)
    return registry


@pytest.fixture
def llm_client():
    client = MagicMock(spec=BaseLLMClient)
    client.submit = AsyncMock()
    return client


@pytest.fixture
def connector():
    connector = MagicMock(spec=ServerConnector)
    connector.connect = AsyncMock()
    connector.invoke = AsyncMock()
    connector.close = AsyncMock()
    return connector
