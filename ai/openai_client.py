"""
OpenAI-compatible chat completions client.

Most providers (DeepSeek, MiniMax, Mistral, Groq, OpenAI, Ollama) accept
the same request and return the same response shape, so one client covers
them all; only the base URL, key and model change.
"""

import logging
import time
from typing import Any, Dict, Optional, Sequence

import httpx

from config import Backend, MAX_TOKENS, TIMEOUT
from core.errors import ProviderError
from core.messages import Message, ModelResponse, UsageCounters
from .llm_service import report_generation, retry_on_error, sanitize_error, trace_llm_call

logger = logging.getLogger(__name__)


class OpenAICompatibleClient:
    """
    Model client for /chat/completions endpoints.

    An HTTP connection is opened per call, so a single instance can be
    shared by concurrent conversations.
    """

    def __init__(
        self,
        backend: Backend,
        timeout: float = TIMEOUT,
        max_tokens: int = MAX_TOKENS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            backend: Endpoint configuration
            timeout: Request timeout in seconds
            max_tokens: Upper bound on generated tokens
            transport: Custom httpx transport (tests use httpx.MockTransport)
        """
        self.backend = backend
        self.timeout = timeout
        self.max_tokens = max_tokens
        self._transport = transport

    @property
    def url(self) -> str:
        return f"{self.backend.base_url.rstrip('/')}/chat/completions"

    def build_payload(
        self,
        messages: Sequence[Message],
        tools: Sequence[Dict[str, Any]],
    ) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "model": self.backend.model,
            "messages": [message.to_dict() for message in messages],
            "temperature": self.backend.temperature,
            "max_tokens": self.max_tokens,
        }
        if tools:
            payload["tools"] = list(tools)
            payload["tool_choice"] = "auto"  # Let the model decide when to use tools
        return payload

    @trace_llm_call("chat_completion")
    @retry_on_error()
    async def complete(
        self,
        messages: Sequence[Message],
        tools: Sequence[Dict[str, Any]],
    ) -> ModelResponse:
        """
        Send the conversation and return the assistant turn(s).

        Raises:
            ProviderError: On transport failure, non-2xx status, missing
                API key, an unparseable body or a body of the wrong shape
        """
        if not self.backend.api_key:
            raise ProviderError(401, f"No API key configured for {self.backend.name}")

        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.backend.api_key}",
        }

        start_time = time.perf_counter()
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(
                    self.url,
                    headers=headers,
                    json=self.build_payload(messages, tools),
                )
        except httpx.HTTPError as e:
            raise ProviderError(0, sanitize_error(f"{type(e).__name__}: {e}")) from e

        latency = time.perf_counter() - start_time

        if response.is_error:
            raise ProviderError(response.status_code, sanitize_error(response.text))

        try:
            data = response.json()
        except ValueError as e:
            raise ProviderError(response.status_code, sanitize_error(f"Invalid JSON: {response.text}")) from e

        try:
            result = parse_chat_response(data)
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise ProviderError(
                response.status_code,
                sanitize_error(f"Unexpected response shape: {type(e).__name__}: {e}"),
            ) from e

        report_generation(self.backend.model, result.usage)
        logger.debug(f"⏱️  {self.backend.name} responded in {latency:.2f}s")
        return result


def parse_chat_response(data: Dict[str, Any]) -> ModelResponse:
    """
    Convert a chat-completions JSON body into a ModelResponse.

    Cache hits are read from DeepSeek's `prompt_cache_hit_tokens` or from
    OpenAI's `prompt_tokens_details.cached_tokens`.
    """
    messages = [
        Message.from_dict(choice["message"])
        for choice in data.get("choices") or []
        if choice.get("message")
    ]

    usage = None
    raw_usage = data.get("usage")
    if raw_usage:
        cached = raw_usage.get("prompt_cache_hit_tokens")
        if cached is None:
            cached = (raw_usage.get("prompt_tokens_details") or {}).get("cached_tokens", 0)
        usage = UsageCounters(
            input_tokens=raw_usage.get("prompt_tokens", 0) or 0,
            output_tokens=raw_usage.get("completion_tokens", 0) or 0,
            cached_tokens=cached or 0,
        )

    return ModelResponse(messages=messages, usage=usage)
