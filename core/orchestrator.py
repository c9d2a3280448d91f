"""
Conversation Loop - Main Agent Loop

Implements the tool-calling workflow:
1. Send the conversation and the tool catalog to the model
2. If the model asks for tools, run them in order and append their results
3. If the model answers with plain content, that is the final answer
4. Repeat, bounded by a safety cap on model round trips

The model decides when to stop; the cap only guarantees termination.
Tool failures of any kind are turned into `tool` messages so the model
can react to them. Only model-endpoint failures reach the caller.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from config import CHAT_MAX_ITERATIONS, ONESHOT_MAX_ITERATIONS
from .errors import NoResponseError, ToolError, ToolExecutionError, UnknownToolError
from .messages import Message, ModelClient, ToolCall, UsageCounters
from .tool_registry import ToolRegistry

logger = logging.getLogger(__name__)

EMPTY_ANSWER = "No response"
MAX_ITERATIONS_REACHED = "Reached max iterations."


# ============================================================================
# DATA STRUCTURES
# ============================================================================

@dataclass
class UsageStats:
    """Token totals across the iterations of one chat() call."""
    input_tokens: int = 0
    output_tokens: int = 0
    cached_tokens: int = 0

    def add(self, counters: Optional[UsageCounters]) -> None:
        if counters is None:
            return
        self.input_tokens += counters.input_tokens
        self.output_tokens += counters.output_tokens
        self.cached_tokens += counters.cached_tokens

    @property
    def cache_rate(self) -> float:
        """Share of input tokens served from the provider's cache (0-100)."""
        if self.input_tokens <= 0:
            return 0.0
        return self.cached_tokens / self.input_tokens * 100


@dataclass
class ToolResult:
    """
    Outcome of one tool call.

    Attributes:
        tool_name: Name the model asked for
        call_id: Id of the originating ToolCall
        success: False when the content is an error fed back to the model
        content: Text appended as the tool message
        execution_time: Seconds spent dispatching (telemetry only)
    """
    tool_name: str
    call_id: str
    success: bool
    content: str
    execution_time: float = 0.0


@dataclass
class ChatTelemetry:
    """What happened during the last chat() call."""
    iterations: int = 0
    usage: UsageStats = field(default_factory=UsageStats)
    tool_results: List[ToolResult] = field(default_factory=list)
    total_time: float = 0.0
    hit_limit: bool = False

    def get_summary(self) -> Dict[str, Any]:
        return {
            "iterations": self.iterations,
            "num_tool_calls": len(self.tool_results),
            "tools_used": sorted({tr.tool_name for tr in self.tool_results}),
            "had_errors": any(not tr.success for tr in self.tool_results),
            "input_tokens": self.usage.input_tokens,
            "output_tokens": self.usage.output_tokens,
            "cached_tokens": self.usage.cached_tokens,
            "total_time": self.total_time,
            "hit_limit": self.hit_limit,
        }


# ============================================================================
# CONVERSATION LOOP
# ============================================================================

class ConversationLoop:
    """
    Owns one conversation and drives it through the model and the tools.

    The same instance can be used for a multi-turn session (call chat()
    repeatedly) or for a single shot. Tool calls within a turn run strictly
    one after another, in the order the model listed them.
    """

    def __init__(
        self,
        client: ModelClient,
        system_prompt: str,
        tool_registry: ToolRegistry,
        max_iterations: int = CHAT_MAX_ITERATIONS,
        name: str = "agent",
    ):
        """
        Initialize the loop.

        Args:
            client: Model client for this conversation's backend
            system_prompt: Content of the leading system message
            tool_registry: Tools available to the model, fixed for the session
            max_iterations: Maximum model round trips per chat() call
            name: Label used in log lines
        """
        if max_iterations < 1:
            raise ValueError("max_iterations must be at least 1")

        self.client = client
        self.tool_registry = tool_registry
        self.max_iterations = max_iterations
        self.name = name

        self._tool_descriptors = tool_registry.descriptors()
        self._messages: List[Message] = [Message.system(system_prompt)]
        self.last_telemetry = ChatTelemetry()

    @property
    def messages(self) -> Tuple[Message, ...]:
        """Read-only snapshot of the conversation."""
        return tuple(self._messages)

    async def chat(self, user_message: str) -> str:
        """
        Run one user turn to completion.

        Args:
            user_message: The user's input

        Returns:
            The model's final answer, the empty-answer placeholder, or the
            max-iterations sentinel

        Raises:
            ProviderError: The model endpoint failed
            NoResponseError: The model endpoint returned no turn
        """
        self._messages.append(Message.user(user_message))

        telemetry = ChatTelemetry()
        self.last_telemetry = telemetry
        start_time = time.perf_counter()

        for iteration in range(1, self.max_iterations + 1):
            telemetry.iterations = iteration
            logger.info(f"● [{self.name}] Step {iteration}")

            response = await self.client.complete(self.messages, self._tool_descriptors)
            telemetry.usage.add(response.usage)
            if response.usage:
                logger.info(_format_usage(response.usage))

            if not response.messages:
                raise NoResponseError()

            assistant_message = response.messages[0]
            self._messages.append(assistant_message)

            if not assistant_message.tool_calls:
                telemetry.total_time = time.perf_counter() - start_time
                logger.info(
                    f"✅ [{self.name}] Done in {iteration} steps ({telemetry.total_time:.1f}s) | "
                    f"Total: {telemetry.usage.input_tokens:,} in, "
                    f"{telemetry.usage.output_tokens:,} out, "
                    f"{telemetry.usage.cache_rate:.0f}% cached"
                )
                return assistant_message.content or EMPTY_ANSWER

            for tool_call in assistant_message.tool_calls:
                result = await self._execute_tool(tool_call)
                telemetry.tool_results.append(result)
                self._messages.append(Message.tool(tool_call.id, result.content))

        telemetry.total_time = time.perf_counter() - start_time
        telemetry.hit_limit = True
        logger.warning(f"⚠️  [{self.name}] Reached max iterations ({self.max_iterations})")
        return MAX_ITERATIONS_REACHED

    async def _execute_tool(self, tool_call: ToolCall) -> ToolResult:
        """
        Dispatch one tool call, converting every failure into text.

        Args:
            tool_call: The call requested by the model

        Returns:
            ToolResult whose content becomes the tool message
        """
        start_time = time.perf_counter()
        logger.info(f"🔧 {tool_call.name}({tool_call.arguments})")

        try:
            tool = self.tool_registry.get(tool_call.name)
            if tool is None:
                raise UnknownToolError(tool_call.name)

            args = tool.decode(tool_call.arguments)
            try:
                content = await tool.invoke(args)
            except Exception as e:
                logger.error(f"Tool {tool_call.name} execution failed: {e}", exc_info=True)
                raise ToolExecutionError(tool_call.name, e) from e

        except ToolError as e:
            elapsed = time.perf_counter() - start_time
            logger.warning(f"   ✗ {e}")
            return ToolResult(
                tool_name=tool_call.name,
                call_id=tool_call.id,
                success=False,
                content=str(e),
                execution_time=elapsed,
            )

        elapsed = time.perf_counter() - start_time
        logger.info(f"   ✓ {elapsed:.2f}s")

        return ToolResult(
            tool_name=tool_call.name,
            call_id=tool_call.id,
            success=True,
            content=str(content),
            execution_time=elapsed,
        )


def _format_usage(usage: UsageCounters) -> str:
    cache_rate = usage.cached_tokens / usage.input_tokens * 100 if usage.input_tokens else 0
    return (
        f"   📊 {usage.input_tokens:,} in | {usage.output_tokens:,} out | "
        f"{cache_rate:.0f}% cached"
    )


# ============================================================================
# CONVENIENCE FUNCTION
# ============================================================================

async def run_agent_loop(
    user_message: str,
    client: ModelClient,
    system_prompt: str,
    tool_registry: ToolRegistry,
    max_iterations: int = ONESHOT_MAX_ITERATIONS,
) -> str:
    """
    Single-shot run: a fresh conversation, one user message, one answer.

    Args:
        user_message: The task
        client: Model client
        system_prompt: System prompt for the run
        tool_registry: Tools available to the model
        max_iterations: Safety cap, lower than the interactive default

    Returns:
        Final answer text (or the max-iterations sentinel)
    """
    loop = ConversationLoop(
        client=client,
        system_prompt=system_prompt,
        tool_registry=tool_registry,
        max_iterations=max_iterations,
        name="oneshot",
    )
    return await loop.chat(user_message)
