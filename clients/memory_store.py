"""
Memory Store - long-term notes and reference docs on disk

The memory file is a markdown list of notes the agent chose to keep
between sessions; it is injected into system prompts at start-up. The
reference file holds verified local documentation and is read-only.
"""

import logging
from datetime import date
from pathlib import Path
from typing import Union

logger = logging.getLogger(__name__)


def read_text_if_exists(path: Union[str, Path]) -> str:
    """Contents of a text file, or "" when it does not exist."""
    path = Path(path)
    if not path.is_file():
        return ""
    return path.read_text(encoding="utf-8")


def load_memory(path: Union[str, Path]) -> str:
    memory = read_text_if_exists(path)
    if memory:
        logger.info(f"🧠 Loaded {len(memory)} characters of memory from {path}")
    return memory


def load_reference(path: Union[str, Path]) -> str:
    return read_text_if_exists(path)


def append_memory(note: str, path: Union[str, Path]) -> str:
    """
    Append a dated bullet to the memory file, creating it if needed.

    Args:
        note: Text to remember, stored verbatim
        path: Memory file location

    Returns:
        The line that was written
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    line = f"- [{date.today().isoformat()}] {note.strip()}\n"
    with open(path, "a", encoding="utf-8") as f:
        f.write(line)

    logger.info(f"🧠 Saved memory note ({len(note)} chars)")
    return line
