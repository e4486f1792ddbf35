"""
Conversation Orchestrator

Runs one query through the model: submit the transcript with the aggregated
tool schema, dispatch the tool calls the model asks for, append the results
and ask again without tools for the final answer.
"""
import logging
from typing import Any, Dict, List, Optional

from mcpconductor.errors import QueryProcessingError
from mcpconductor.llm.base_client import BaseLLMClient
from mcpconductor.llm.models import (
    AssistantReply,
    FinishReason,
    Message,
    ToolCall,
    TruncationNotice,
)
from mcpconductor.orchestrator.connector import ServerConnector
from mcpconductor.orchestrator.dispatch import (
    SequentialDispatcher,
    ToolDispatcher,
    prepare_calls,
)
from mcpconductor.orchestrator.registry import ToolRegistry

logger = logging.getLogger(__name__)


class ConversationOrchestrator:
    """
    Mediates the request -> tool execution -> follow-up protocol.

    With the default max_tool_rounds of 1 a query makes at most two model
    submissions and the second one never offers tools. Raising the limit lets
    follow-up submissions offer tools again until the limit is reached; the
    last submission never does.
    """

    def __init__(
        self,
        llm_client: BaseLLMClient,
        registry: ToolRegistry,
        connector: ServerConnector,
        system_prompt: str = "",
        dispatcher: Optional[ToolDispatcher] = None,
        max_tool_rounds: int = 1,
    ):
        """
        Initialize the orchestrator.

        Args:
            llm_client: Model backend used for every submission
            registry: Source of the tool schema and tool owners
            connector: Used to invoke tools on their servers
            system_prompt: Prepended as a system message when non-empty
            dispatcher: Tool execution strategy, sequential by default
            max_tool_rounds: Number of tool rounds allowed per query (>= 1)
        """
        if max_tool_rounds < 1:
            raise ValueError("max_tool_rounds must be at least 1")

        self.llm_client = llm_client
        self.registry = registry
        self.connector = connector
        self.system_prompt = system_prompt
        self.dispatcher = dispatcher or SequentialDispatcher()
        self.max_tool_rounds = max_tool_rounds

    async def process_query(self, query: str) -> str:
        """
        Process a query using the model and the tools of all connected servers.

        Args:
            query: The user's input query

        Returns:
            The final answer, or a JSON truncation notice when the final
            answer was cut off by the token limit
        """
        logger.info(f"Processing query: {query}")

        try:
            return await self._run(query)
        except Exception as e:
            logger.error(f"Error processing query: {str(e)}")
            raise QueryProcessingError(e) from e

    async def _run(self, query: str) -> str:
        messages: List[Message] = []
        if self.system_prompt:
            messages.append(Message.system(self.system_prompt))
        messages.append(Message.user(query))

        tools = self.registry.openai_tools() or None

        reply = await self._submit(messages, tools)
        if not reply.tool_calls:
            return reply.content

        for round_number in range(1, self.max_tool_rounds + 1):
            messages.append(reply.message)
            messages.extend(await self._run_tools(reply.tool_calls))

            offered = tools if round_number < self.max_tool_rounds else None
            reply = await self._submit(messages, offered)
            if offered is None or not reply.tool_calls:
                break

        return self._conclude(reply)

    async def _submit(self, messages: List[Message],
                      tools: Optional[List[Dict[str, Any]]]) -> AssistantReply:
        # The backend gets a snapshot; the transcript keeps growing after this call
        return await self.llm_client.submit(list(messages), tools)

    async def _run_tools(self, tool_calls: List[ToolCall]) -> List[Message]:
        logger.info(f"Model requested {len(tool_calls)} tool calls")

        prepared = prepare_calls(tool_calls, self.registry)
        results = await self.dispatcher.dispatch(prepared, self.connector)

        return [
            Message.tool_result(item.call.id, result)
            for item, result in zip(prepared, results)
        ]

    @staticmethod
    def _conclude(reply: AssistantReply) -> str:
        if reply.finish_reason == FinishReason.LENGTH:
            logger.warning("Final response truncated by the token limit")
            return TruncationNotice(usage=reply.usage).model_dump_json()
        return reply.content
