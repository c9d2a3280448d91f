"""
Application settings and configuration values.

This module centralizes all configuration values including:
- File paths
- Model backends (endpoints, API keys, models)
- Loop limits and model parameters
- Tracing settings

Environment variables are loaded via python-dotenv. Nothing here fails on
import when a key is missing; the model client reports it at call time.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Optional
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# ============================================================================
# PATHS
# ============================================================================

LOCAL_DIR = Path(os.getenv("LOCAL_DIR", "local"))
MEMORY_FILE = Path(os.getenv("MEMORY_FILE", str(LOCAL_DIR / "memory.md")))
REFERENCE_FILE = Path(os.getenv("REFERENCE_FILE", "docs/reference.md"))
RESEARCH_DB = Path(os.getenv("RESEARCH_DB", "research.db"))

# ============================================================================
# MODEL PARAMETERS
# ============================================================================

TEMPERATURE = float(os.getenv("TEMPERATURE", "0.3"))
MAX_TOKENS = int(os.getenv("MAX_TOKENS", "8192"))

# Retry and Timeout Settings
MAX_RETRIES = int(os.getenv("MAX_RETRIES", "3"))
RETRY_DELAY = float(os.getenv("RETRY_DELAY", "1.0"))  # seconds
TIMEOUT = int(os.getenv("TIMEOUT", "60"))  # seconds

# Iteration caps (safety limits, the model decides when to stop)
CHAT_MAX_ITERATIONS = int(os.getenv("CHAT_MAX_ITERATIONS", "25"))
ONESHOT_MAX_ITERATIONS = int(os.getenv("ONESHOT_MAX_ITERATIONS", "10"))

# ============================================================================
# BACKENDS
# ============================================================================

BACKEND_KIND_OPENAI = "openai"
BACKEND_KIND_GEMINI = "gemini"


@dataclass(frozen=True)
class Backend:
    """
    A configured model endpoint.

    Attributes:
        name: Human-readable provider name (e.g. "DeepSeek")
        kind: Wire protocol, "openai" (chat completions) or "gemini"
        base_url: Endpoint root, unused for Gemini
        api_key: Credential sent with every request
        model: Model identifier
        temperature: Sampling temperature
    """
    name: str
    kind: str
    base_url: str
    api_key: str
    model: str
    temperature: float = TEMPERATURE


def load_backends() -> Mapping[str, Backend]:
    """
    Build the backend table from the environment.

    Called once at start-up; the returned mapping is read-only.

    Returns:
        Mapping of backend id (e.g. "deepseek") to Backend
    """
    backends = {
        "deepseek": Backend(
            name="DeepSeek",
            kind=BACKEND_KIND_OPENAI,
            base_url=os.getenv("DEEPSEEK_BASE_URL", "https://api.deepseek.com"),
            api_key=os.getenv("DEEPSEEK_API_KEY", ""),
            model=os.getenv("DEEPSEEK_MODEL", "deepseek-chat"),
        ),
        "minimax": Backend(
            name="MiniMax",
            kind=BACKEND_KIND_OPENAI,
            base_url=os.getenv("MINIMAX_BASE_URL", "https://api.minimax.io/v1"),
            api_key=os.getenv("MINIMAX_API_KEY", ""),
            model=os.getenv("MINIMAX_MODEL", "MiniMax-M1"),
        ),
        "mistral": Backend(
            name="Mistral",
            kind=BACKEND_KIND_OPENAI,
            base_url="https://api.mistral.ai/v1",
            api_key=os.getenv("MISTRAL_API_KEY", ""),
            model=os.getenv("MISTRAL_MODEL", "mistral-large-latest"),
        ),
        "groq": Backend(
            name="Groq",
            kind=BACKEND_KIND_OPENAI,
            base_url="https://api.groq.com/openai/v1",
            api_key=os.getenv("GROQ_API_KEY", ""),
            model=os.getenv("GROQ_MODEL", "llama-3.3-70b-versatile"),
        ),
        "openai": Backend(
            name="OpenAI",
            kind=BACKEND_KIND_OPENAI,
            base_url="https://api.openai.com/v1",
            api_key=os.getenv("OPENAI_API_KEY", ""),
            model=os.getenv("OPENAI_MODEL", "gpt-4o"),
        ),
        # Local models via Ollama (no API key, the field is still sent)
        "ollama": Backend(
            name="Ollama",
            kind=BACKEND_KIND_OPENAI,
            base_url=os.getenv("OLLAMA_BASE_URL", "http://localhost:11434/v1"),
            api_key="ollama",
            model=os.getenv("OLLAMA_MODEL", "llama3.1:8b"),
        ),
        "gemini": Backend(
            name="Gemini",
            kind=BACKEND_KIND_GEMINI,
            base_url="",
            api_key=os.getenv("GOOGLE_API_KEY", ""),
            model=os.getenv("GEMINI_MODEL", "gemini-2.5-flash"),
        ),
    }
    return MappingProxyType(backends)


# Backend assignment per profile (resolved once by build_profiles)
CODE_BACKEND = os.getenv("CODE_BACKEND", "minimax")
RESEARCH_BACKEND = os.getenv("RESEARCH_BACKEND", "deepseek")
REASONING_BACKEND = os.getenv("REASONING_BACKEND", "gemini")
GENERAL_BACKEND = os.getenv("GENERAL_BACKEND", "deepseek")

# ============================================================================
# TOOL SETTINGS
# ============================================================================

TAVILY_API_KEY: Optional[str] = os.getenv("TAVILY_API_KEY")
SEARCH_MAX_RESULTS = int(os.getenv("SEARCH_MAX_RESULTS", "5"))
FETCH_MAX_CHARS = int(os.getenv("FETCH_MAX_CHARS", "8000"))
READ_MAX_CHARS = int(os.getenv("READ_MAX_CHARS", "50000"))

# ============================================================================
# LANGFUSE OBSERVABILITY
# ============================================================================

LANGFUSE_PUBLIC_KEY = os.getenv("LANGFUSE_PUBLIC_KEY")
LANGFUSE_SECRET_KEY = os.getenv("LANGFUSE_SECRET_KEY")
LANGFUSE_HOST = os.getenv("LANGFUSE_HOST", "https://cloud.langfuse.com")

# Enable/disable Langfuse tracing
LANGFUSE_ENABLED = os.getenv("LANGFUSE_ENABLED", "false").lower() == "true"

if LANGFUSE_ENABLED and (not LANGFUSE_PUBLIC_KEY or not LANGFUSE_SECRET_KEY):
    LANGFUSE_ENABLED = False

# ============================================================================
# DEVELOPMENT / DEBUG SETTINGS
# ============================================================================

DEBUG = os.getenv("DEBUG", "false").lower() == "true"
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


def get_log_level(debug: Optional[bool] = None, level_name: Optional[str] = None) -> int:
    """Logging level for the entry point: DEBUG wins over LOG_LEVEL."""
    debug = DEBUG if debug is None else debug
    level_name = LOG_LEVEL if level_name is None else level_name
    if debug:
        return logging.DEBUG
    return getattr(logging, level_name.upper(), logging.INFO)
