"""
OpenAI Chat Completions Client

Talks to the OpenAI API (or any server exposing the same chat-completions
surface) with native function-tool calling.
"""
import logging
from typing import Any, Dict, List, Optional

from openai import AsyncOpenAI

from mcpconductor.errors import ModelBackendError
from mcpconductor.llm.base_client import BaseLLMClient
from mcpconductor.llm.models import (
    AssistantReply,
    FinishReason,
    Message,
    TokenUsage,
    ToolCall,
)

logger = logging.getLogger(__name__)


class OpenAIClient(BaseLLMClient):
    """
    Client for the OpenAI chat-completions API.

    Tools are sent with tool_choice "auto" whenever a non-empty tool list is
    given; otherwise neither field is sent.
    """
    def __init__(
        self,
        model: str = "gpt-4o-mini",
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        max_tokens: int = 1000,
        temperature: Optional[float] = None,
        timeout: float = 120.0,
        client: Optional[AsyncOpenAI] = None,
    ):
        """
        Initialize the OpenAI client.

        Args:
            model: Chat model name
            api_key: API key, the SDK reads OPENAI_API_KEY when None
            base_url: Optional base URL for OpenAI-compatible endpoints
            max_tokens: Maximum completion tokens per submission
            temperature: Sampling temperature, provider default if None
            timeout: Request timeout in seconds
            client: Preconfigured AsyncOpenAI instance (mainly for tests)
        """
        super().__init__(model, max_tokens, temperature)
        self.client = client or AsyncOpenAI(api_key=api_key, base_url=base_url, timeout=timeout)

    async def _call_llm(
        self,
        messages: List[Message],
        tools: Optional[List[Dict[str, Any]]],
    ) -> AssistantReply:
        request: Dict[str, Any] = {
            "model": self.model,
            "max_completion_tokens": self.max_tokens,
            "messages": [message.to_openai() for message in messages],
        }
        if tools:
            request["tools"] = tools
            request["tool_choice"] = "auto"
        if self.temperature is not None:
            request["temperature"] = self.temperature

        response = await self.client.chat.completions.create(**request)

        if not response.choices:
            raise ModelBackendError("No response from model")

        choice = response.choices[0]
        raw_message = choice.message
        if raw_message is None:
            raise ModelBackendError("No response from model")

        tool_calls = [
            ToolCall(
                id=call.id,
                name=call.function.name,
                arguments=call.function.arguments or "{}",
            )
            for call in (raw_message.tool_calls or [])
        ]

        usage = None
        if response.usage is not None:
            usage = TokenUsage(
                prompt_tokens=response.usage.prompt_tokens,
                completion_tokens=response.usage.completion_tokens,
                total_tokens=response.usage.total_tokens,
            )

        return AssistantReply(
            message=Message.assistant(raw_message.content, tool_calls),
            finish_reason=FinishReason.from_raw(choice.finish_reason),
            usage=usage,
        )
