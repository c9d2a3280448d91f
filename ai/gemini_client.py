"""
Gemini client - Google Generative AI wrapper

Translates the chat-completions conversation into Gemini contents and
function declarations, and the Gemini candidate back into an assistant
Message. Gemini does not assign ids to function calls, so ids are
generated here and mapped back to function names when tool results are
sent on the next call.
"""

import asyncio
import json
import logging
import time
import uuid
from collections.abc import Mapping, Sequence
from typing import Any, Dict, List, Optional, Tuple

import google.generativeai as genai
from google.api_core import exceptions as google_exceptions
from google.generativeai.types import GenerationConfig

from config import Backend, MAX_TOKENS, TIMEOUT
from core.errors import ProviderError
from core.messages import Message, ModelResponse, Role, ToolCall, UsageCounters
from .llm_service import report_generation, retry_on_error, sanitize_error, trace_llm_call

logger = logging.getLogger(__name__)

# Schema keys Gemini's function declarations understand
_SCHEMA_KEYS = {"type", "description", "properties", "required", "items", "enum", "format"}


class GeminiClient:
    """Model client for Google Gemini via google-generativeai."""

    def __init__(
        self,
        backend: Backend,
        timeout: float = TIMEOUT,
        max_tokens: int = MAX_TOKENS,
    ):
        self.backend = backend
        self.timeout = timeout
        self.max_tokens = max_tokens

        if backend.api_key:
            genai.configure(api_key=backend.api_key)

    @trace_llm_call("gemini_generate")
    @retry_on_error()
    async def complete(
        self,
        messages: Sequence[Message],
        tools: Sequence[Dict[str, Any]],
    ) -> ModelResponse:
        """
        Send the conversation to Gemini.

        The SDK call is blocking, so it runs in a worker thread.

        Raises:
            ProviderError: On API failure or missing API key
        """
        if not self.backend.api_key:
            raise ProviderError(401, f"No API key configured for {self.backend.name}")

        system_instruction, contents = to_gemini_contents(messages)
        declarations = to_gemini_tools(tools)

        model = genai.GenerativeModel(
            model_name=self.backend.model,
            generation_config=GenerationConfig(
                temperature=self.backend.temperature,
                max_output_tokens=self.max_tokens,
            ),
            system_instruction=system_instruction or None,
            tools=declarations or None,
        )

        start_time = time.perf_counter()
        try:
            response = await asyncio.to_thread(
                model.generate_content,
                contents,
                request_options={"timeout": self.timeout},
            )
        except google_exceptions.GoogleAPIError as e:
            status = getattr(e, "code", None) or 500
            raise ProviderError(int(status), sanitize_error(str(e))) from e

        latency = time.perf_counter() - start_time

        try:
            result = parse_gemini_response(response)
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise ProviderError(200, sanitize_error(f"Unexpected response shape: {type(e).__name__}: {e}")) from e

        report_generation(self.backend.model, result.usage)
        logger.debug(f"⏱️  Gemini responded in {latency:.2f}s")
        return result


# ============================================================================
# REQUEST CONVERSION
# ============================================================================

def to_gemini_contents(messages: Sequence[Message]) -> Tuple[str, List[Dict[str, Any]]]:
    """
    Convert messages to (system_instruction, contents).

    Consecutive tool results are grouped into one user turn, which is how
    Gemini expects the answers to a multi-call model turn.
    """
    system_parts: List[str] = []
    contents: List[Dict[str, Any]] = []
    call_names: Dict[str, str] = {}

    for message in messages:
        if message.role == Role.SYSTEM:
            system_parts.append(message.content or "")

        elif message.role == Role.USER:
            contents.append({"role": "user", "parts": [{"text": message.content or ""}]})

        elif message.role == Role.ASSISTANT:
            parts: List[Dict[str, Any]] = []
            if message.content:
                parts.append({"text": message.content})
            for call in message.tool_calls:
                call_names[call.id] = call.name
                parts.append({"function_call": {"name": call.name, "args": _decode_arguments(call.arguments)}})
            contents.append({"role": "model", "parts": parts or [{"text": ""}]})

        elif message.role == Role.TOOL:
            part = {
                "function_response": {
                    "name": call_names.get(message.tool_call_id or "", "unknown"),
                    "response": {"result": message.content or ""},
                }
            }
            previous = contents[-1] if contents else None
            if previous and previous["role"] == "user" and "function_response" in previous["parts"][0]:
                previous["parts"].append(part)
            else:
                contents.append({"role": "user", "parts": [part]})

    return "\n\n".join(system_parts), contents


def to_gemini_tools(tools: Sequence[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Convert chat-completions tool descriptors into Gemini function declarations."""
    if not tools:
        return []

    declarations = []
    for tool in tools:
        function = tool.get("function", tool)
        declarations.append({
            "name": function["name"],
            "description": function.get("description", ""),
            "parameters": _to_gemini_schema(function.get("parameters", {"type": "object"})),
        })
    return [{"function_declarations": declarations}]


def _to_gemini_schema(schema: Dict[str, Any]) -> Dict[str, Any]:
    converted: Dict[str, Any] = {}
    for key, value in schema.items():
        if key not in _SCHEMA_KEYS:
            continue
        if key == "type":
            converted["type"] = str(value).upper()
        elif key == "properties":
            converted["properties"] = {name: _to_gemini_schema(prop) for name, prop in value.items()}
        elif key == "items":
            converted["items"] = _to_gemini_schema(value)
        else:
            converted[key] = value
    return converted


def _decode_arguments(arguments: str) -> Dict[str, Any]:
    try:
        decoded = json.loads(arguments) if arguments else {}
    except ValueError:
        return {"raw": arguments}
    return decoded if isinstance(decoded, dict) else {"value": decoded}


# ============================================================================
# RESPONSE CONVERSION
# ============================================================================

def parse_gemini_response(response: Any) -> ModelResponse:
    """Convert a GenerateContentResponse into a ModelResponse."""
    usage = _parse_usage(getattr(response, "usage_metadata", None))

    if not response.candidates:
        return ModelResponse(messages=[], usage=usage)

    candidate = response.candidates[0]
    texts: List[str] = []
    calls: List[ToolCall] = []

    content = getattr(candidate, "content", None)
    for part in getattr(content, "parts", None) or []:
        function_call = getattr(part, "function_call", None)
        if function_call and function_call.name:
            calls.append(ToolCall(
                id=f"call_{uuid.uuid4().hex[:12]}",
                name=function_call.name,
                arguments=json.dumps(_to_plain(function_call.args or {})),
            ))
        elif getattr(part, "text", None):
            texts.append(part.text)

    message = Message.assistant("".join(texts) or None, calls)
    return ModelResponse(messages=[message], usage=usage)


def _parse_usage(metadata: Any) -> Optional[UsageCounters]:
    if metadata is None:
        return None
    return UsageCounters(
        input_tokens=getattr(metadata, "prompt_token_count", 0) or 0,
        output_tokens=getattr(metadata, "candidates_token_count", 0) or 0,
        cached_tokens=getattr(metadata, "cached_content_token_count", 0) or 0,
    )


def _to_plain(value: Any) -> Any:
    """Turn protobuf map/repeated containers into dicts and lists."""
    if isinstance(value, Mapping):
        return {key: _to_plain(item) for key, item in value.items()}
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes)):
        return [_to_plain(item) for item in value]
    return value
