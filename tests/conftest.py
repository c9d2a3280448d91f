"""
Shared fixtures: a scripted model client and small tool registries.
"""

import json
import os
from typing import Any, Dict, List, Sequence, Tuple

import pytest
from pydantic import BaseModel

from core import Message, ModelResponse, Tool, ToolCall, ToolRegistry, UsageCounters


class FakeModelClient:
    """
    Model client that replays scripted responses.

    Every call records a snapshot of the conversation and the tool
    descriptors it was given. When the script runs out, the last
    response is repeated.
    """

    def __init__(self, responses: Sequence[ModelResponse]):
        self.responses = list(responses)
        self.calls: List[Tuple[Tuple[Message, ...], List[Dict[str, Any]]]] = []

    async def complete(self, messages, tools) -> ModelResponse:
        self.calls.append((tuple(messages), list(tools)))
        index = min(len(self.calls) - 1, len(self.responses) - 1)
        return self.responses[index]

    @property
    def call_count(self) -> int:
        return len(self.calls)


def answer(content, usage=None) -> ModelResponse:
    """Response with a final assistant answer."""
    return ModelResponse(messages=[Message.assistant(content)], usage=usage)


def tool_calls(*calls: Tuple[str, str, Any], usage=None) -> ModelResponse:
    """Response asking for tools: each call is (id, name, arguments)."""
    parsed = [
        ToolCall(id=call_id, name=name, arguments=args if isinstance(args, str) else json.dumps(args))
        for call_id, name, args in calls
    ]
    return ModelResponse(messages=[Message.assistant(None, parsed)], usage=usage)


def usage(input_tokens=0, output_tokens=0, cached_tokens=0) -> UsageCounters:
    return UsageCounters(input_tokens=input_tokens, output_tokens=output_tokens, cached_tokens=cached_tokens)


class EchoArgs(BaseModel):
    text: str


class CountArgs(BaseModel):
    n: int


async def _echo(args: EchoArgs) -> str:
    return f"echo: {args.text}"


async def _count(args: CountArgs) -> str:
    return " ".join(str(i) for i in range(1, args.n + 1))


async def _explode(args: EchoArgs) -> str:
    raise RuntimeError(f"boom ({args.text})")


ECHO_TOOL = Tool(name="echo", description="Echo text back", args_model=EchoArgs, handler=_echo)
COUNT_TOOL = Tool(name="count", description="Count from 1 to n", args_model=CountArgs, handler=_count)
EXPLODE_TOOL = Tool(name="explode", description="Always fails", args_model=EchoArgs, handler=_explode)


@pytest.fixture
def registry() -> ToolRegistry:
    """Registry with echo, count and explode."""
    return ToolRegistry([ECHO_TOOL, COUNT_TOOL, EXPLODE_TOOL])


def pytest_collection_modifyitems(config, items):
    """Skip integration tests unless RUN_INTEGRATION=1."""
    if os.getenv("RUN_INTEGRATION") == "1":
        return
    skip = pytest.mark.skip(reason="integration test (set RUN_INTEGRATION=1 to run)")
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip)
