"""
Configuration module for RawAgent.

This module provides centralized configuration management including:
- Application settings (backends, API keys, paths, loop limits)
- Prompt templates and system instructions

All configurable values should be imported from this module to ensure
consistency across the application.
"""

from .settings import (
    # Paths
    LOCAL_DIR,
    MEMORY_FILE,
    REFERENCE_FILE,
    RESEARCH_DB,

    # LLM Settings
    TEMPERATURE,
    MAX_TOKENS,
    MAX_RETRIES,
    RETRY_DELAY,
    TIMEOUT,
    CHAT_MAX_ITERATIONS,
    ONESHOT_MAX_ITERATIONS,

    # Backends
    Backend,
    BACKEND_KIND_OPENAI,
    BACKEND_KIND_GEMINI,
    load_backends,
    CODE_BACKEND,
    RESEARCH_BACKEND,
    REASONING_BACKEND,
    GENERAL_BACKEND,

    # Tools
    TAVILY_API_KEY,
    SEARCH_MAX_RESULTS,
    FETCH_MAX_CHARS,
    READ_MAX_CHARS,

    # Langfuse Settings
    LANGFUSE_PUBLIC_KEY,
    LANGFUSE_SECRET_KEY,
    LANGFUSE_HOST,
    LANGFUSE_ENABLED,

    # Debug
    DEBUG,
    LOG_LEVEL,
    get_log_level,
)

from .prompts import (
    # System Prompts
    RESEARCH_PROMPT,
    CODE_PROMPT,
    REASONING_PROMPT,
    GENERAL_PROMPT,

    # Utilities
    format_prompt,
    build_system_prompt,
)

__all__ = [
    # Settings
    "LOCAL_DIR",
    "MEMORY_FILE",
    "REFERENCE_FILE",
    "RESEARCH_DB",
    "TEMPERATURE",
    "MAX_TOKENS",
    "MAX_RETRIES",
    "RETRY_DELAY",
    "TIMEOUT",
    "CHAT_MAX_ITERATIONS",
    "ONESHOT_MAX_ITERATIONS",
    "Backend",
    "BACKEND_KIND_OPENAI",
    "BACKEND_KIND_GEMINI",
    "load_backends",
    "CODE_BACKEND",
    "RESEARCH_BACKEND",
    "REASONING_BACKEND",
    "GENERAL_BACKEND",
    "TAVILY_API_KEY",
    "SEARCH_MAX_RESULTS",
    "FETCH_MAX_CHARS",
    "READ_MAX_CHARS",
    "LANGFUSE_PUBLIC_KEY",
    "LANGFUSE_SECRET_KEY",
    "LANGFUSE_HOST",
    "LANGFUSE_ENABLED",
    "DEBUG",
    "LOG_LEVEL",
    "get_log_level",

    # Prompts
    "RESEARCH_PROMPT",
    "CODE_PROMPT",
    "REASONING_PROMPT",
    "GENERAL_PROMPT",
    "format_prompt",
    "build_system_prompt",
]
