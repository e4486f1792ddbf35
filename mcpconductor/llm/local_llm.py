"""
Local LLM Clients

This module provides the client for locally served models:
- OllamaClient: For interfacing with Ollama's chat API with tool calling
"""
import json
import logging
from typing import Any, Dict, List, Optional

import httpx

from mcpconductor.errors import ModelBackendError
from mcpconductor.llm.base_client import BaseLLMClient
from mcpconductor.llm.models import (
    AssistantReply,
    FinishReason,
    Message,
    Role,
    TokenUsage,
    ToolCall,
)

logger = logging.getLogger(__name__)


class OllamaClient(BaseLLMClient):
    """
    Client for running models using Ollama

    This client interfaces with the Ollama service to run models.
    Requires Ollama to be installed and running, and a model that supports
    tool calling when tools are offered.
    """
    def __init__(
        self,
        model_name: str = "llama3.1",
        base_url: str = "http://localhost:11434",
        max_tokens: int = 1000,
        temperature: Optional[float] = None,
        timeout: float = 120.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the Ollama client.

        Args:
            model_name: Name of the model in Ollama
            base_url: URL of the Ollama API server
            max_tokens: Maximum number of tokens to generate
            temperature: Controls randomness in response generation
            timeout: Timeout for API requests in seconds
            transport: Optional httpx transport (used to stub the server in tests)
        """
        super().__init__(model_name, max_tokens, temperature)

        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    async def _call_llm(
        self,
        messages: List[Message],
        tools: Optional[List[Dict[str, Any]]],
    ) -> AssistantReply:
        """
        Call the Ollama API to generate a reply.

        Args:
            messages: List of messages representing the conversation
            tools: Function-tool definitions, or None

        Returns:
            The parsed assistant reply
        """
        url = f"{self.base_url}/api/chat"

        options: Dict[str, Any] = {"num_predict": self.max_tokens}
        if self.temperature is not None:
            options["temperature"] = self.temperature

        payload: Dict[str, Any] = {
            "model": self.model,
            "messages": [self._to_ollama(message) for message in messages],
            "options": options,
            "stream": False,
        }
        if tools:
            payload["tools"] = tools

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(
                    url,
                    json=payload,
                    headers={"Content-Type": "application/json"}
                )
                response.raise_for_status()
                result = response.json()
        except httpx.HTTPStatusError as e:
            logger.error(f"HTTP error calling Ollama: {e.response.status_code} - {e.response.text}")
            raise ModelBackendError(f"Ollama returned HTTP {e.response.status_code}", e) from e

        raw_message = result.get("message")
        if not raw_message:
            raise ModelBackendError("No response from model")

        return AssistantReply(
            message=Message.assistant(
                raw_message.get("content") or None,
                self._parse_tool_calls(raw_message.get("tool_calls") or []),
            ),
            finish_reason=FinishReason.from_raw(result.get("done_reason")),
            usage=TokenUsage(
                prompt_tokens=result.get("prompt_eval_count", 0),
                completion_tokens=result.get("eval_count", 0),
                total_tokens=result.get("prompt_eval_count", 0) + result.get("eval_count", 0),
            ),
        )

    @staticmethod
    def _parse_tool_calls(raw_calls: List[Dict[str, Any]]) -> List[ToolCall]:
        # Ollama sends arguments as an object and may omit call ids
        tool_calls = []
        for index, raw_call in enumerate(raw_calls):
            function = raw_call.get("function", {})
            arguments = function.get("arguments", {})
            if not isinstance(arguments, str):
                arguments = json.dumps(arguments)
            tool_calls.append(ToolCall(
                id=raw_call.get("id") or f"call_{index}",
                name=function.get("name", ""),
                arguments=arguments,
            ))
        return tool_calls

    @staticmethod
    def _to_ollama(message: Message) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"role": message.role.value, "content": message.content or ""}
        if message.tool_calls:
            calls = []
            for call in message.tool_calls:
                try:
                    arguments = json.loads(call.arguments)
                except ValueError:
                    arguments = call.arguments
                calls.append({"function": {"name": call.name, "arguments": arguments}})
            payload["tool_calls"] = calls
        if message.role == Role.TOOL:
            payload["tool_call_id"] = message.tool_call_id
        return payload
