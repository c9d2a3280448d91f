"""
Services Module

- Chat service: main coordinator between the UI, the router and the
  per-profile conversation loops
"""

from .chat_service import (
    ChatService,
    ChatResponse,
)

__all__ = [
    "ChatService",
    "ChatResponse",
]
