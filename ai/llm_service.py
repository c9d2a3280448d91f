"""
LLM Service - shared plumbing for model clients

Provides what every backend client needs:
- Error sanitization (no credential ever reaches a log line or the UI)
- Retry with exponential backoff for transient failures
- Langfuse tracing of model calls
- A factory that builds the right client for a configured Backend

The clients themselves live in openai_client.py and gemini_client.py.
"""

import asyncio
import logging
import re
from functools import wraps
from typing import Any, Optional

from langfuse import Langfuse, observe, get_client

from config import (
    Backend,
    BACKEND_KIND_GEMINI,
    BACKEND_KIND_OPENAI,
    MAX_RETRIES,
    RETRY_DELAY,
    LANGFUSE_PUBLIC_KEY,
    LANGFUSE_SECRET_KEY,
    LANGFUSE_HOST,
    LANGFUSE_ENABLED,
)
from core.errors import ProviderError
from core.messages import ModelClient, UsageCounters

logger = logging.getLogger(__name__)

# ============================================================================
# LANGFUSE INITIALIZATION
# ============================================================================

_langfuse_client: Optional[Langfuse] = None

if LANGFUSE_ENABLED:
    try:
        _langfuse_client = Langfuse(
            public_key=LANGFUSE_PUBLIC_KEY,
            secret_key=LANGFUSE_SECRET_KEY,
            host=LANGFUSE_HOST,
        )
        logger.info("✅ Langfuse observability initialized")
    except Exception as e:
        logger.warning(f"⚠️  Langfuse initialization failed: {e}. Continuing without tracing.")
        _langfuse_client = None
else:
    logger.info("ℹ️  Langfuse observability disabled")


def get_langfuse_client() -> Optional[Langfuse]:
    """Get the Langfuse client instance."""
    return _langfuse_client


def trace_llm_call(name: str):
    """
    Decorator tracing a model call as a Langfuse generation.

    No-op when Langfuse is disabled.
    """
    def decorator(func):
        if not _langfuse_client:
            return func
        return observe(name=name, as_type="generation")(func)
    return decorator


def report_generation(model: str, usage: Optional[UsageCounters]) -> None:
    """Attach model name and token usage to the current Langfuse generation."""
    if not _langfuse_client:
        return
    details = {}
    if usage:
        details = {
            "input": usage.input_tokens,
            "output": usage.output_tokens,
            "cache_read_input_tokens": usage.cached_tokens,
        }
    get_client().update_current_generation(model=model, usage_details=details)


# ============================================================================
# ERROR SANITIZATION
# ============================================================================

MAX_ERROR_LENGTH = 200

_SECRET_PATTERNS = [
    (re.compile(r"sk-[a-zA-Z0-9_\-]+"), "sk-***"),
    (re.compile(r"AIza[0-9A-Za-z_\-]+"), "AIza***"),
    (re.compile(r"tvly-[a-zA-Z0-9_\-]+"), "tvly-***"),
    (re.compile(r"Bearer\s+[^\s\"']+", re.IGNORECASE), "Bearer ***"),
    (re.compile(r"\"api_key\"\s*:\s*\"[^\"]*\""), '"api_key": "***"'),
    (re.compile(r"([?&]key=)[^&\s\"']+"), r"\1***"),
]


def sanitize_error(text: str, max_length: int = MAX_ERROR_LENGTH) -> str:
    """
    Strip credential-shaped substrings from an error body and truncate it.

    Args:
        text: Raw error text from an endpoint or transport
        max_length: Maximum length of the returned text

    Returns:
        Text safe to log and show to a user
    """
    for pattern, replacement in _SECRET_PATTERNS:
        text = pattern.sub(replacement, text)
    return text[:max_length]


# ============================================================================
# RETRY DECORATOR
# ============================================================================

RETRYABLE_STATUS = {0, 408, 429, 500, 502, 503, 504}


def retry_on_error(max_retries: int = MAX_RETRIES, delay: float = RETRY_DELAY):
    """
    Decorator to retry a coroutine on transient ProviderErrors.
    Implements exponential backoff.

    Status 0 (transport failure), 408, 429 and 5xx are retried; anything
    else is raised immediately.

    Args:
        max_retries: Maximum number of attempts
        delay: Initial delay between attempts (seconds)
    """
    def decorator(func):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            attempt = 0
            current_delay = delay

            while True:
                attempt += 1
                try:
                    return await func(*args, **kwargs)

                except ProviderError as e:
                    if e.status not in RETRYABLE_STATUS or attempt >= max_retries:
                        logger.error(f"❌ {func.__name__} failed: {e}")
                        raise

                    logger.warning(
                        f"⚠️  {func.__name__} failed (attempt {attempt}/{max_retries}): "
                        f"status {e.status}. Retrying in {current_delay}s..."
                    )
                    await asyncio.sleep(current_delay)
                    current_delay *= 2  # Exponential backoff

        return wrapper
    return decorator


# ============================================================================
# CLIENT FACTORY
# ============================================================================

def create_model_client(backend: Backend, **kwargs: Any) -> ModelClient:
    """
    Build the client matching a backend's wire protocol.

    Args:
        backend: Configured endpoint
        **kwargs: Passed through to the client constructor

    Returns:
        A ModelClient

    Raises:
        ValueError: If the backend kind is not supported
    """
    if backend.kind == BACKEND_KIND_OPENAI:
        from .openai_client import OpenAICompatibleClient
        return OpenAICompatibleClient(backend, **kwargs)

    if backend.kind == BACKEND_KIND_GEMINI:
        from .gemini_client import GeminiClient
        return GeminiClient(backend, **kwargs)

    raise ValueError(f"Unsupported backend kind: {backend.kind}")
