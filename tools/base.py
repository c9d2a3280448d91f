"""
Shared helpers for tool handlers.
"""

import asyncio
import logging
from functools import wraps

logger = logging.getLogger(__name__)


# ============================================================================
# ERROR HANDLING DECORATOR
# ============================================================================

def retry_on_failure(max_retries: int = 0, delay: float = 1.0):
    """
    Decorator to retry an async tool handler and turn a final failure into text.

    The model sees the error string as the tool result, so a failing tool
    never interrupts the conversation.

    Args:
        max_retries: Extra attempts after the first one
        delay: Seconds to wait before the first retry, grows linearly
    """
    def decorator(func):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            last_error = None

            for attempt in range(max_retries + 1):
                try:
                    return await func(*args, **kwargs)
                except Exception as e:
                    last_error = e
                    if attempt < max_retries:
                        logger.warning(
                            f"⚠️  {func.__name__} failed (attempt {attempt + 1}/{max_retries + 1}): {e}"
                        )
                        await asyncio.sleep(delay * (attempt + 1))
                    else:
                        logger.error(f"❌ {func.__name__} failed after {max_retries + 1} attempts: {e}")

            return f"Error: {func.__name__} failed: {last_error}"

        return wrapper
    return decorator


def truncate(text: str, max_chars: int) -> str:
    """Cut text to max_chars, noting how much was dropped."""
    if len(text) <= max_chars:
        return text
    return text[:max_chars] + f"\n\n[... truncated {len(text) - max_chars} characters]"
