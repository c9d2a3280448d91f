"""
Conversation data model.

Messages and tool calls mirror the OpenAI chat-completions wire format,
which most providers accept unchanged. Instances are frozen: once a
message is appended to a conversation it is never modified.
"""

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Protocol, Sequence, Tuple


# ============================================================================
# MESSAGES
# ============================================================================

class Role(str, Enum):
    """Author of a message."""
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"
    TOOL = "tool"


@dataclass(frozen=True)
class ToolCall:
    """
    A request from the model to invoke one tool.

    Attributes:
        id: Identifier unique within the assistant turn
        name: Registry name of the tool
        arguments: JSON-encoded argument object, decoded by the tool itself
    """
    id: str
    name: str
    arguments: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": "function",
            "function": {"name": self.name, "arguments": self.arguments},
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ToolCall":
        function = data.get("function") or {}
        arguments = function.get("arguments", "")
        # Some OpenAI-compatible servers (Ollama) send an object here
        if not isinstance(arguments, str):
            arguments = json.dumps(arguments)
        return cls(
            id=data.get("id", ""),
            name=function.get("name", ""),
            arguments=arguments,
        )


@dataclass(frozen=True)
class Message:
    """
    One turn in the conversation.

    `tool_calls` is only set on assistant turns, `tool_call_id` only on
    tool turns.
    """
    role: Role
    content: Optional[str] = None
    tool_calls: Tuple[ToolCall, ...] = ()
    tool_call_id: Optional[str] = None

    @classmethod
    def system(cls, content: str) -> "Message":
        return cls(role=Role.SYSTEM, content=content)

    @classmethod
    def user(cls, content: str) -> "Message":
        return cls(role=Role.USER, content=content)

    @classmethod
    def assistant(cls, content: Optional[str], tool_calls: Sequence[ToolCall] = ()) -> "Message":
        return cls(role=Role.ASSISTANT, content=content, tool_calls=tuple(tool_calls))

    @classmethod
    def tool(cls, tool_call_id: str, content: str) -> "Message":
        return cls(role=Role.TOOL, content=content, tool_call_id=tool_call_id)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the chat-completions request format."""
        data: Dict[str, Any] = {"role": self.role.value, "content": self.content}
        if self.tool_calls:
            data["tool_calls"] = [call.to_dict() for call in self.tool_calls]
        if self.tool_call_id is not None:
            data["tool_call_id"] = self.tool_call_id
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Message":
        """Parse a message from a chat-completions response choice."""
        return cls(
            role=Role(data.get("role", Role.ASSISTANT.value)),
            content=data.get("content"),
            tool_calls=tuple(ToolCall.from_dict(tc) for tc in data.get("tool_calls") or []),
            tool_call_id=data.get("tool_call_id"),
        )


# ============================================================================
# MODEL CLIENT CONTRACT
# ============================================================================

@dataclass(frozen=True)
class UsageCounters:
    """Token counts reported for a single model call."""
    input_tokens: int = 0
    output_tokens: int = 0
    cached_tokens: int = 0


@dataclass(frozen=True)
class ModelResponse:
    """
    Result of one model call.

    Attributes:
        messages: Assistant turns returned (normally exactly one, may be empty)
        usage: Token counters, when the endpoint reports them
    """
    messages: List[Message] = field(default_factory=list)
    usage: Optional[UsageCounters] = None


class ModelClient(Protocol):
    """
    Sends a conversation plus tool catalog to a model endpoint.

    Implementations raise ProviderError on failure, with a sanitized body,
    and hold no per-call mutable state so one client can serve several
    conversations at once.
    """

    async def complete(
        self,
        messages: Sequence[Message],
        tools: Sequence[Dict[str, Any]],
    ) -> ModelResponse:
        ...
