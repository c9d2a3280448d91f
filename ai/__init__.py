"""
AI Infrastructure Module

This module provides the model clients for RawAgent:
- OpenAI-compatible chat completions client (httpx)
- Gemini client (google-generativeai)
- Retry with exponential backoff
- Error sanitization
- Langfuse observability integration

All model calls should go through this module to ensure consistent
observability, error handling, and configuration.
"""

from .llm_service import (
    # Factory
    create_model_client,

    # Error handling
    sanitize_error,
    retry_on_error,

    # Observability
    get_langfuse_client,
    trace_llm_call,
)

from .openai_client import (
    OpenAICompatibleClient,
    parse_chat_response,
)

from .gemini_client import (
    GeminiClient,
    parse_gemini_response,
)

__all__ = [
    "create_model_client",
    "sanitize_error",
    "retry_on_error",
    "get_langfuse_client",
    "trace_llm_call",
    "OpenAICompatibleClient",
    "parse_chat_response",
    "GeminiClient",
    "parse_gemini_response",
]
