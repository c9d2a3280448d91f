"""
Core Agent Logic Module

This module contains the brain of RawAgent:
- Router: picks the conversational profile for a request
- Conversation loop: drives model calls and tool dispatch
- Data model: messages, tool calls, profiles, tool registry contract

Everything that talks to the outside world (model endpoints, the tools
themselves, storage) lives elsewhere and is handed in through constructors.
"""

from .errors import (
    ProviderError,
    NoResponseError,
    ToolError,
    ToolArgumentDecodeError,
    UnknownToolError,
    ToolExecutionError,
)

from .messages import (
    Role,
    Message,
    ToolCall,
    UsageCounters,
    ModelResponse,
    ModelClient,
)

from .tool_registry import (
    Tool,
    ToolRegistry,
)

from .router import (
    ProfileKey,
    Router,
    route,
    get_profile_description,
)

from .profiles import (
    Profile,
    build_profiles,
)

from .orchestrator import (
    ConversationLoop,
    ChatTelemetry,
    UsageStats,
    ToolResult,
    run_agent_loop,
    EMPTY_ANSWER,
    MAX_ITERATIONS_REACHED,
)

__all__ = [
    # Errors
    "ProviderError",
    "NoResponseError",
    "ToolError",
    "ToolArgumentDecodeError",
    "UnknownToolError",
    "ToolExecutionError",

    # Messages
    "Role",
    "Message",
    "ToolCall",
    "UsageCounters",
    "ModelResponse",
    "ModelClient",

    # Tools
    "Tool",
    "ToolRegistry",

    # Router
    "ProfileKey",
    "Router",
    "route",
    "get_profile_description",

    # Profiles
    "Profile",
    "build_profiles",

    # Orchestrator
    "ConversationLoop",
    "ChatTelemetry",
    "UsageStats",
    "ToolResult",
    "run_agent_loop",
    "EMPTY_ANSWER",
    "MAX_ITERATIONS_REACHED",
]
