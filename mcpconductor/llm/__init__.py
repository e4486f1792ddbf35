"""
Model backends and the message types exchanged with them
"""
from mcpconductor.llm.base_client import BaseLLMClient
from mcpconductor.llm.llm_client import PROVIDERS, LLMClient
from mcpconductor.llm.local_llm import OllamaClient
from mcpconductor.llm.models import (
    AssistantReply,
    FinishReason,
    Message,
    Role,
    TokenUsage,
    ToolCall,
    ToolSchema,
    TruncationNotice,
)
from mcpconductor.llm.openai_client import OpenAIClient

__all__ = [
    "AssistantReply",
    "BaseLLMClient",
    "FinishReason",
    "LLMClient",
    "Message",
    "OllamaClient",
    "OpenAIClient",
    "PROVIDERS",
    "Role",
    "TokenUsage",
    "ToolCall",
    "ToolSchema",
    "TruncationNotice",
]
