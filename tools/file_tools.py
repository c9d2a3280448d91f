"""
File Tools

Read, write, append and list local files. Blocking filesystem work runs
in a worker thread so the event loop stays free for other sessions.
PDF files are read through pdfplumber.
"""

import asyncio
import logging
from pathlib import Path

from pydantic import BaseModel, Field

from clients.pdf_client import extract_text_from_pdf, is_pdf
from config import READ_MAX_CHARS
from core.tool_registry import Tool
from .base import retry_on_failure, truncate

logger = logging.getLogger(__name__)


# ============================================================================
# ARGUMENT MODELS
# ============================================================================

class ReadFileArgs(BaseModel):
    path: str = Field(description="The file path to read")


class WriteFileArgs(BaseModel):
    path: str = Field(description="The file path to write, e.g. local/index.html")
    content: str = Field(description="The full content of the file")


class AppendFileArgs(BaseModel):
    path: str = Field(description="The file path to append to")
    content: str = Field(description="The content to append")


class ListFilesArgs(BaseModel):
    path: str = Field(default=".", description="Directory to list (defaults to the current directory)")


# ============================================================================
# HANDLERS
# ============================================================================

def _read(path: Path) -> str:
    if is_pdf(path):
        return extract_text_from_pdf(path)
    return path.read_text(encoding="utf-8", errors="replace")


@retry_on_failure()
async def read_file(args: ReadFileArgs) -> str:
    """
    Read a local text or PDF file.

    Returns:
        File content (truncated to READ_MAX_CHARS), or an error string
    """
    path = Path(args.path).expanduser()
    logger.info(f"📄 Reading file: {path}")

    if not path.exists():
        return f"Error reading file: {args.path} does not exist"
    if path.is_dir():
        return f"Error reading file: {args.path} is a directory, use list_files"

    content = await asyncio.to_thread(_read, path)
    if not content:
        return f"{args.path} is empty (or has no extractable text)"
    return truncate(content, READ_MAX_CHARS)


def _write(path: Path, content: str, mode: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, mode, encoding="utf-8") as f:
        f.write(content)


@retry_on_failure()
async def write_file(args: WriteFileArgs) -> str:
    path = Path(args.path).expanduser()
    logger.info(f"✏️  Writing file: {path}")
    await asyncio.to_thread(_write, path, args.content, "w")
    return f"Wrote {len(args.content)} characters to {args.path}"


@retry_on_failure()
async def append_file(args: AppendFileArgs) -> str:
    path = Path(args.path).expanduser()
    logger.info(f"✏️  Appending to file: {path}")
    await asyncio.to_thread(_write, path, args.content, "a")
    return f"Appended {len(args.content)} characters to {args.path}"


def _list(path: Path) -> str:
    entries = sorted(path.iterdir(), key=lambda p: (not p.is_dir(), p.name.lower()))
    lines = [f"{entry.name}/" if entry.is_dir() else entry.name for entry in entries]
    return "\n".join(lines)


@retry_on_failure()
async def list_files(args: ListFilesArgs) -> str:
    """
    List a directory; sub-directories are suffixed with "/".
    """
    path = Path(args.path).expanduser()
    logger.info(f"📁 Listing: {path}")

    if not path.exists():
        return f"Error: directory {args.path} does not exist"
    if not path.is_dir():
        return f"Error: {args.path} is not a directory"

    listing = await asyncio.to_thread(_list, path)
    return listing or f"{args.path} is empty"


# ============================================================================
# TOOL DEFINITIONS
# ============================================================================

READ_FILE_TOOL = Tool(
    name="read_file",
    description="Read the contents of a local file (text files and PDFs).",
    args_model=ReadFileArgs,
    handler=read_file,
)

WRITE_FILE_TOOL = Tool(
    name="write_file",
    description="Write content to a file, creating it (and parent directories) or replacing it.",
    args_model=WriteFileArgs,
    handler=write_file,
)

APPEND_FILE_TOOL = Tool(
    name="append_file",
    description="Append content to the end of a file, creating it if it does not exist.",
    args_model=AppendFileArgs,
    handler=append_file,
)

LIST_FILES_TOOL = Tool(
    name="list_files",
    description="List the files and directories in a directory.",
    args_model=ListFilesArgs,
    handler=list_files,
)
