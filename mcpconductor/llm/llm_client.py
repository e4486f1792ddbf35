"""
LLM Client Factory Module

This module provides a unified interface for creating model backends
for the supported providers.
"""
import logging
from typing import Optional

from mcpconductor.errors import ConfigurationError
from mcpconductor.llm.base_client import BaseLLMClient
from mcpconductor.llm.local_llm import OllamaClient
from mcpconductor.llm.openai_client import OpenAIClient

logger = logging.getLogger(__name__)

PROVIDERS = ("openai", "ollama")


class LLMClient:
    """
    Factory class for creating LLM clients based on the selected provider.

    This class provides a unified interface for working with different LLM providers.
    """

    @staticmethod
    def create(
        provider: str = "openai",
        model: str = "gpt-4o-mini",
        api_base: Optional[str] = None,
        api_key: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: int = 1000,
        timeout: float = 120.0,
    ) -> BaseLLMClient:
        """
        Create an LLM client for the specified provider.

        Args:
            provider: The LLM provider to use ('openai', 'ollama')
            model: The model to use
            api_base: Base URL for the API (for local/custom endpoints)
            api_key: API key for the provider (if needed)
            temperature: Controls randomness in response generation
            max_tokens: Maximum number of tokens to generate
            timeout: Request timeout in seconds

        Returns:
            An instance of BaseLLMClient for the specified provider
        """
        logger.info(f"Creating {provider} client for model {model}")

        if provider.lower() == "openai":
            return OpenAIClient(
                model=model,
                api_key=api_key,
                base_url=api_base,
                max_tokens=max_tokens,
                temperature=temperature,
                timeout=timeout,
            )

        elif provider.lower() == "ollama":
            return OllamaClient(
                model_name=model,
                base_url=api_base or "http://localhost:11434",
                max_tokens=max_tokens,
                temperature=temperature,
                timeout=timeout,
            )

        else:
            raise ConfigurationError(f"Unsupported LLM provider: {provider}")
