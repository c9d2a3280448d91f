"""
Utility Clients Module

This module contains low-level clients for storage and file processing.
They hold no agent logic and are used by the tools and the chat service.

Clients:
- PDF Client: Extract text from PDF files using pdfplumber
- Research Store: SQLite research log (aiosqlite)
- Memory Store: Long-term memory and reference files
"""

from .pdf_client import (
    is_pdf,
    extract_text_from_pdf,
    clean_extracted_text,
)

from .research_store import (
    ResearchStore,
    ResearchEntry,
)

from .memory_store import (
    load_memory,
    load_reference,
    append_memory,
)

__all__ = [
    "is_pdf",
    "extract_text_from_pdf",
    "clean_extracted_text",
    "ResearchStore",
    "ResearchEntry",
    "load_memory",
    "load_reference",
    "append_memory",
]
