"""
Unit Tests for the OpenAI-compatible Client

HTTP is faked with httpx.MockTransport.
"""

import json
from unittest.mock import AsyncMock, patch

import httpx
import pytest

from ai.openai_client import OpenAICompatibleClient, parse_chat_response
from config import Backend, BACKEND_KIND_OPENAI, load_backends
from core import Message, ProviderError, Role, ToolCall


BACKEND = Backend(
    name="DeepSeek",
    kind=BACKEND_KIND_OPENAI,
    base_url="https://api.example.com/v1/",
    api_key="sk-test1234567890",
    model="test-model",
    temperature=0.3,
)

TOOLS = [{"type": "function", "function": {"name": "think", "description": "", "parameters": {"type": "object"}}}]


def make_client(handler, backend=BACKEND):
    return OpenAICompatibleClient(backend, transport=httpx.MockTransport(handler))


def completion(message, usage=None):
    body = {"choices": [{"index": 0, "message": message, "finish_reason": "stop"}]}
    if usage:
        body["usage"] = usage
    return body


@pytest.fixture
def no_sleep():
    with patch("ai.llm_service.asyncio.sleep", new=AsyncMock()) as mock_sleep:
        yield mock_sleep


class TestRequest:
    """Test what the client sends."""

    @pytest.mark.asyncio
    async def test_request_payload(self):
        """Test URL, headers and body of a request."""
        seen = {}

        def handler(request: httpx.Request):
            seen["url"] = str(request.url)
            seen["auth"] = request.headers["Authorization"]
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json=completion({"role": "assistant", "content": "hi"}))

        messages = [Message.system("sys"), Message.user("hello")]
        await make_client(handler).complete(messages, TOOLS)

        assert seen["url"] == "https://api.example.com/v1/chat/completions"
        assert seen["auth"] == "Bearer sk-test1234567890"
        body = seen["body"]
        assert body["model"] == "test-model"
        assert body["temperature"] == 0.3
        assert body["messages"] == [
            {"role": "system", "content": "sys"},
            {"role": "user", "content": "hello"},
        ]
        assert body["tools"] == TOOLS
        assert body["tool_choice"] == "auto"

    def test_no_tools_omits_tool_fields(self):
        """Test an empty catalog sends neither tools nor tool_choice."""
        payload = OpenAICompatibleClient(BACKEND).build_payload([Message.user("x")], [])
        assert "tools" not in payload
        assert "tool_choice" not in payload

    def test_tool_messages_serialized(self):
        """Test assistant tool calls and tool results use the wire format."""
        call = ToolCall(id="c1", name="think", arguments='{"thought": "x"}')
        payload = OpenAICompatibleClient(BACKEND).build_payload(
            [Message.assistant(None, [call]), Message.tool("c1", "noted")], []
        )

        assistant, tool = payload["messages"]
        assert assistant["tool_calls"][0] == {
            "id": "c1",
            "type": "function",
            "function": {"name": "think", "arguments": '{"thought": "x"}'},
        }
        assert tool == {"role": "tool", "content": "noted", "tool_call_id": "c1"}


class TestResponse:
    """Test response handling."""

    @pytest.mark.asyncio
    async def test_tool_call_response(self):
        """Test tool calls are parsed from the response."""
        message = {
            "role": "assistant",
            "content": None,
            "tool_calls": [{
                "id": "call_1",
                "type": "function",
                "function": {"name": "think", "arguments": '{"thought": "plan"}'},
            }],
        }

        def handler(request):
            return httpx.Response(200, json=completion(message))

        response = await make_client(handler).complete([Message.user("x")], TOOLS)

        assert len(response.messages) == 1
        turn = response.messages[0]
        assert turn.role == Role.ASSISTANT
        assert turn.tool_calls == (ToolCall(id="call_1", name="think", arguments='{"thought": "plan"}'),)

    def test_usage_with_deepseek_cache(self):
        """Test DeepSeek cache hit counters."""
        data = completion(
            {"role": "assistant", "content": "ok"},
            usage={"prompt_tokens": 1000, "completion_tokens": 50, "prompt_cache_hit_tokens": 800},
        )
        usage = parse_chat_response(data).usage
        assert (usage.input_tokens, usage.output_tokens, usage.cached_tokens) == (1000, 50, 800)

    def test_usage_with_openai_cache(self):
        """Test OpenAI cached token details."""
        data = completion(
            {"role": "assistant", "content": "ok"},
            usage={"prompt_tokens": 10, "completion_tokens": 5, "prompt_tokens_details": {"cached_tokens": 4}},
        )
        assert parse_chat_response(data).usage.cached_tokens == 4

    def test_no_choices(self):
        """Test a body without choices gives no messages."""
        assert parse_chat_response({"choices": []}).messages == []

    def test_object_arguments(self):
        """Test object-valued arguments are re-encoded as JSON."""
        data = completion({
            "role": "assistant",
            "content": None,
            "tool_calls": [{"id": "1", "function": {"name": "calculator", "arguments": {"expression": "1+1"}}}],
        })
        call = parse_chat_response(data).messages[0].tool_calls[0]
        assert json.loads(call.arguments) == {"expression": "1+1"}


class TestErrors:
    """Test failures become ProviderError with sanitized text."""

    @pytest.mark.asyncio
    async def test_http_error_status_sanitized(self):
        """Test non-2xx responses carry status and a scrubbed body."""
        def handler(request):
            return httpx.Response(401, text="Invalid key sk-live-abcdef123456 " + "x" * 500)

        with pytest.raises(ProviderError) as exc_info:
            await make_client(handler).complete([Message.user("x")], [])

        error = exc_info.value
        assert error.status == 401
        assert "abcdef123456" not in error.message
        assert len(error.message) <= 200

    @pytest.mark.asyncio
    async def test_server_error_retried(self, no_sleep):
        """Test 5xx responses are retried before giving up."""
        calls = []

        def handler(request):
            calls.append(1)
            return httpx.Response(503, text="overloaded")

        with pytest.raises(ProviderError) as exc_info:
            await make_client(handler).complete([Message.user("x")], [])

        assert exc_info.value.status == 503
        assert len(calls) > 1

    @pytest.mark.asyncio
    async def test_transport_error(self, no_sleep):
        """Test connection failures are status 0."""
        def handler(request):
            raise httpx.ConnectError("connection refused")

        with pytest.raises(ProviderError) as exc_info:
            await make_client(handler).complete([Message.user("x")], [])

        assert exc_info.value.status == 0

    @pytest.mark.asyncio
    async def test_invalid_json(self):
        """Test an unparseable body is a ProviderError."""
        def handler(request):
            return httpx.Response(200, text="<html>gateway</html>")

        with pytest.raises(ProviderError):
            await make_client(handler).complete([Message.user("x")], [])

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", [
        [],
        {"choices": ["oops"]},
        {"choices": [{"message": {"role": "model", "content": "hi"}}]},
        {"choices": [{"message": {"role": "assistant", "tool_calls": ["bad"]}}]},
        {"choices": [], "usage": "lots"},
    ])
    async def test_unexpected_shape(self, body):
        """Test valid JSON of the wrong shape is a ProviderError."""
        def handler(request):
            return httpx.Response(200, json=body)

        with pytest.raises(ProviderError) as exc_info:
            await make_client(handler).complete([Message.user("x")], [])

        assert exc_info.value.status == 200
        assert "Unexpected response shape" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_missing_api_key(self):
        """Test a backend without a key fails with 401 before any request."""
        def handler(request):
            raise AssertionError("no request expected")

        backend = Backend(name="Groq", kind=BACKEND_KIND_OPENAI, base_url="http://x", api_key="", model="m")

        with pytest.raises(ProviderError) as exc_info:
            await make_client(handler, backend).complete([Message.user("x")], [])

        assert exc_info.value.status == 401


@pytest.mark.integration
class TestLiveEndpoint:
    """Calls the configured DeepSeek endpoint."""

    @pytest.mark.asyncio
    async def test_simple_completion(self):
        """Test a real round trip."""
        backend = load_backends()["deepseek"]
        if not backend.api_key:
            pytest.skip("DEEPSEEK_API_KEY not set")

        response = await OpenAICompatibleClient(backend).complete([Message.user("Reply with OK")], [])

        assert response.messages[0].content
