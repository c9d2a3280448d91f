"""
Memory Tools

Long-term memory (a markdown file injected into future system prompts)
and the research log (SQLite) the research profile uses to reuse past
work.
"""

import asyncio
import logging
from typing import Optional

from pydantic import BaseModel, Field

from clients.memory_store import append_memory
from clients.research_store import ResearchStore
from config import MEMORY_FILE, RESEARCH_DB
from core.tool_registry import Tool
from .base import retry_on_failure

logger = logging.getLogger(__name__)

CREDIBILITY_LEVELS = ("high", "medium", "low")

_research_store: Optional[ResearchStore] = None


def get_research_store() -> ResearchStore:
    """Shared ResearchStore for the configured database, created on first use."""
    global _research_store
    if _research_store is None:
        _research_store = ResearchStore(RESEARCH_DB)
    return _research_store


# ============================================================================
# SAVE MEMORY
# ============================================================================

class SaveMemoryArgs(BaseModel):
    note: str = Field(description="The exact text to remember across sessions")


@retry_on_failure()
async def save_memory(args: SaveMemoryArgs) -> str:
    if not args.note.strip():
        return "Error: note is empty, nothing saved"
    await asyncio.to_thread(append_memory, args.note, MEMORY_FILE)
    return "Saved to memory. It will be available in future sessions."


# ============================================================================
# RESEARCH LOG
# ============================================================================

class SaveResearchArgs(BaseModel):
    query: str = Field(description="The research question")
    answer: str = Field(description="The final answer or findings")
    credibility: str = Field(default="medium", description="Confidence in the findings: high, medium or low")
    sources: str = Field(default="", description="Comma-separated source URLs")


@retry_on_failure()
async def save_research(args: SaveResearchArgs) -> str:
    credibility = args.credibility.lower().strip()
    if credibility not in CREDIBILITY_LEVELS:
        return f"Error: credibility must be one of {', '.join(CREDIBILITY_LEVELS)}"

    entry_id = await get_research_store().save(args.query, args.answer, credibility, args.sources)
    return f"Research saved with id {entry_id}."


class GetResearchArgs(BaseModel):
    id: int = Field(description="Id of the research entry")


@retry_on_failure()
async def get_research(args: GetResearchArgs) -> str:
    entry = await get_research_store().get(args.id)
    if entry is None:
        return f"No research entry with id {args.id}."
    return entry.format()


class SearchHistoryArgs(BaseModel):
    keyword: str = Field(description="Keyword to look for in past questions and answers")


@retry_on_failure()
async def search_history(args: SearchHistoryArgs) -> str:
    entries = await get_research_store().search(args.keyword)
    if not entries:
        return "No matching research found."
    return "\n\n".join(entry.format(preview=True) for entry in entries)


# ============================================================================
# TOOL DEFINITIONS
# ============================================================================

SAVE_MEMORY_TOOL = Tool(
    name="save_memory",
    description=(
        "Save a note to long-term memory (user preferences, key facts, research shortcuts). "
        "When the user dictates the text, pass their exact words."
    ),
    args_model=SaveMemoryArgs,
    handler=save_memory,
)

SAVE_RESEARCH_TOOL = Tool(
    name="save_research",
    description="Save finished research (question, answer, credibility, sources) to the research database.",
    args_model=SaveResearchArgs,
    handler=save_research,
)

GET_RESEARCH_TOOL = Tool(
    name="get_research",
    description="Get the full text of a saved research entry by its id.",
    args_model=GetResearchArgs,
    handler=get_research,
)

SEARCH_HISTORY_TOOL = Tool(
    name="search_history",
    description="Search past research by keyword. Returns the 5 most recent matches with truncated answers.",
    args_model=SearchHistoryArgs,
    handler=search_history,
)
