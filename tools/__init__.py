"""
Function Calling Tools Module

This module contains all tools the model can invoke through function
calling. Each tool:
- Has a clear, single purpose
- Declares its arguments as a pydantic model
- Returns text, with failures reported as "Error..." strings
- Is independently testable

Tools are collected in the registry; profiles take subsets of it.
"""

from core.tool_registry import ToolRegistry

from .reasoning_tools import (
    THINK_TOOL,
    CALCULATOR_TOOL,
    evaluate_expression,
)

from .file_tools import (
    READ_FILE_TOOL,
    WRITE_FILE_TOOL,
    APPEND_FILE_TOOL,
    LIST_FILES_TOOL,
)

from .web_tools import (
    WEB_SEARCH_TOOL,
    FETCH_URL_TOOL,
)

from .memory_tools import (
    SAVE_MEMORY_TOOL,
    SAVE_RESEARCH_TOOL,
    GET_RESEARCH_TOOL,
    SEARCH_HISTORY_TOOL,
)


ALL_TOOLS = [
    # Reasoning tools
    THINK_TOOL,
    CALCULATOR_TOOL,

    # Web tools
    WEB_SEARCH_TOOL,
    FETCH_URL_TOOL,

    # File tools
    READ_FILE_TOOL,
    WRITE_FILE_TOOL,
    APPEND_FILE_TOOL,
    LIST_FILES_TOOL,

    # Memory tools
    SAVE_MEMORY_TOOL,
    SAVE_RESEARCH_TOOL,
    GET_RESEARCH_TOOL,
    SEARCH_HISTORY_TOOL,
]


def get_tool_registry() -> ToolRegistry:
    """
    Get the complete registry of available tools.

    Returns:
        ToolRegistry mapping tool names to Tool objects
    """
    return ToolRegistry(ALL_TOOLS)


__all__ = [
    "THINK_TOOL",
    "CALCULATOR_TOOL",
    "READ_FILE_TOOL",
    "WRITE_FILE_TOOL",
    "APPEND_FILE_TOOL",
    "LIST_FILES_TOOL",
    "WEB_SEARCH_TOOL",
    "FETCH_URL_TOOL",
    "SAVE_MEMORY_TOOL",
    "SAVE_RESEARCH_TOOL",
    "GET_RESEARCH_TOOL",
    "SEARCH_HISTORY_TOOL",
    "ALL_TOOLS",
    "evaluate_expression",
    "get_tool_registry",
]
