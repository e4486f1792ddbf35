"""
Orchestration core: tool registry, server connector, dispatch strategies,
conversation protocol and session lifecycle
"""
from mcpconductor.orchestrator.connector import ServerConnector, render_tool_result
from mcpconductor.orchestrator.conversation import ConversationOrchestrator
from mcpconductor.orchestrator.dispatch import (
    ConcurrentDispatcher,
    SequentialDispatcher,
    ToolDispatcher,
)
from mcpconductor.orchestrator.lifecycle import SessionLifecycleManager, SessionState
from mcpconductor.orchestrator.registry import ServerConnection, ToolRegistry

__all__ = [
    "ConcurrentDispatcher",
    "ConversationOrchestrator",
    "SequentialDispatcher",
    "ServerConnection",
    "ServerConnector",
    "SessionLifecycleManager",
    "SessionState",
    "ToolDispatcher",
    "ToolRegistry",
    "render_tool_result",
]
