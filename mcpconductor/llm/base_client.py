"""
Base LLM Client Interface

This module defines the abstract base class for model backends. A backend
takes a transcript plus an optional tool schema and returns one assistant
reply; it never keeps conversation state of its own.
"""
import abc
import logging
from typing import Any, Dict, List, Optional

from mcpconductor.errors import ModelBackendError
from mcpconductor.llm.models import AssistantReply, Message

logger = logging.getLogger(__name__)


class BaseLLMClient(abc.ABC):
    """
    Abstract base class for LLM clients.

    Implementations provide `_call_llm` for a specific provider. `submit`
    wraps every provider failure in a ModelBackendError.
    """
    def __init__(
        self,
        model: str,
        max_tokens: int = 1000,
        temperature: Optional[float] = None,
    ):
        """
        Initialize the base LLM client.

        Args:
            model: The model identifier to use
            max_tokens: Maximum number of output tokens per submission
            temperature: Controls randomness in response generation, provider default if None
        """
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature

    async def submit(
        self,
        messages: List[Message],
        tools: Optional[List[Dict[str, Any]]] = None,
    ) -> AssistantReply:
        """
        Submit a transcript to the model.

        Args:
            messages: The conversation so far
            tools: Function-tool definitions to offer, or None to offer no tools

        Returns:
            The assistant reply with finish reason and token usage
        """
        logger.debug(
            f"Submitting {len(messages)} messages to {self.model} "
            f"({len(tools) if tools else 0} tools offered)"
        )
        try:
            return await self._call_llm(messages, tools)
        except ModelBackendError:
            raise
        except Exception as e:
            logger.error(f"Error calling {self.provider_name}: {str(e)}")
            raise ModelBackendError(f"{self.provider_name} request failed: {e}", e) from e

    @property
    def provider_name(self) -> str:
        return type(self).__name__

    @abc.abstractmethod
    async def _call_llm(
        self,
        messages: List[Message],
        tools: Optional[List[Dict[str, Any]]],
    ) -> AssistantReply:
        """
        Call the LLM to generate a reply. Must be implemented by subclasses.

        Args:
            messages: List of messages representing the conversation
            tools: Function-tool definitions, or None

        Returns:
            The parsed assistant reply
        """
        pass
