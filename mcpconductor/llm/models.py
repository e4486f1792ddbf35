"""
LLM Client Data Models

This module defines the data models exchanged with the model backends:
conversation messages, tool-call requests, tool schemas and replies.
"""
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

TRUNCATION_DESCRIPTION = "The maximum number of tokens specified in the request was reached."


class Role(str, Enum):
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"
    TOOL = "tool"


class FinishReason(str, Enum):
    """Why the backend stopped generating."""
    STOP = "stop"
    LENGTH = "length"
    TOOL_CALLS = "tool_calls"
    CONTENT_FILTER = "content_filter"
    OTHER = "other"

    @classmethod
    def from_raw(cls, value: Optional[str]) -> "FinishReason":
        if value is None:
            return cls.STOP
        try:
            return cls(value)
        except ValueError:
            return cls.OTHER


class ToolCall(BaseModel):
    """Represents a tool call requested by the model"""
    id: str
    name: str
    arguments: str = "{}"

    def to_openai(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": "function",
            "function": {"name": self.name, "arguments": self.arguments},
        }


class Message(BaseModel):
    """Represents a message in the conversation with the LLM"""
    role: Role
    content: Optional[str] = None
    tool_calls: List[ToolCall] = Field(default_factory=list)
    tool_call_id: Optional[str] = None

    @classmethod
    def system(cls, content: str) -> "Message":
        return cls(role=Role.SYSTEM, content=content)

    @classmethod
    def user(cls, content: str) -> "Message":
        return cls(role=Role.USER, content=content)

    @classmethod
    def assistant(cls, content: Optional[str] = None,
                  tool_calls: Optional[List[ToolCall]] = None) -> "Message":
        return cls(role=Role.ASSISTANT, content=content, tool_calls=tool_calls or [])

    @classmethod
    def tool_result(cls, tool_call_id: str, content: str) -> "Message":
        return cls(role=Role.TOOL, content=content, tool_call_id=tool_call_id)

    def to_openai(self) -> Dict[str, Any]:
        """Render the message in the chat-completions wire format."""
        payload: Dict[str, Any] = {"role": self.role.value, "content": self.content}
        if self.tool_calls:
            payload["tool_calls"] = [call.to_openai() for call in self.tool_calls]
        if self.role == Role.TOOL:
            payload["tool_call_id"] = self.tool_call_id
        return payload


class ToolSchema(BaseModel):
    """A tool advertised by a connected server"""
    name: str
    description: str = ""
    input_schema: Dict[str, Any] = Field(
        default_factory=lambda: {"type": "object", "properties": {}}
    )

    def to_openai(self) -> Dict[str, Any]:
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.input_schema,
            },
        }


class TokenUsage(BaseModel):
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


class AssistantReply(BaseModel):
    """The assistant message returned by one backend submission"""
    message: Message
    finish_reason: FinishReason = FinishReason.STOP
    usage: Optional[TokenUsage] = None

    @property
    def content(self) -> str:
        return self.message.content or ""

    @property
    def tool_calls(self) -> List[ToolCall]:
        return self.message.tool_calls


class TruncationNotice(BaseModel):
    """Returned instead of partial text when output hit the token ceiling"""
    finish_reason: FinishReason = FinishReason.LENGTH
    description: str = TRUNCATION_DESCRIPTION
    usage: Optional[TokenUsage] = None
