"""
Web Tools

- web_search: Tavily search API, returns a summary and the top results
- fetch_url: download a page and reduce it to readable text
"""

import html
import logging
import re

import httpx
from pydantic import BaseModel, Field

from ai.llm_service import sanitize_error
from config import FETCH_MAX_CHARS, SEARCH_MAX_RESULTS, TAVILY_API_KEY, TIMEOUT
from core.tool_registry import Tool
from .base import retry_on_failure, truncate

logger = logging.getLogger(__name__)

TAVILY_URL = "https://api.tavily.com/search"
SNIPPET_CHARS = 300
USER_AGENT = "Mozilla/5.0 (compatible; RawAgent/0.1)"

_SCRIPT_STYLE = re.compile(r"<(script|style|noscript|svg)[^>]*>.*?</\1>", re.IGNORECASE | re.DOTALL)
_BLOCK_TAGS = re.compile(r"</?(p|div|br|li|h[1-6]|tr|section|article|header|footer)[^>]*>", re.IGNORECASE)
_TAGS = re.compile(r"<[^>]+>")
_BLANK_LINES = re.compile(r"\n\s*\n+")
_SPACES = re.compile(r"[ \t\r\f\v]+")


def _http_client() -> httpx.AsyncClient:
    return httpx.AsyncClient(
        timeout=TIMEOUT,
        follow_redirects=True,
        headers={"User-Agent": USER_AGENT},
    )


# ============================================================================
# WEB SEARCH
# ============================================================================

class WebSearchArgs(BaseModel):
    query: str = Field(description="The search query, be specific and targeted")


@retry_on_failure(max_retries=1)
async def web_search(args: WebSearchArgs) -> str:
    """
    Search the web through Tavily.

    Returns:
        "Summary: ..." followed by title/URL/snippet blocks, or an error string
    """
    logger.info(f"🔍 Searching: \"{args.query}\"")

    if not TAVILY_API_KEY:
        return "Error: TAVILY_API_KEY not set in .env"

    async with _http_client() as client:
        response = await client.post(
            TAVILY_URL,
            json={
                "api_key": TAVILY_API_KEY,
                "query": args.query,
                "max_results": SEARCH_MAX_RESULTS,
                "include_answer": True,
            },
        )

    if response.is_error:
        return f"Search error ({response.status_code}): {sanitize_error(response.text)}"

    return format_search_results(response.json())


def format_search_results(data: dict) -> str:
    output = ""
    if data.get("answer"):
        output += f"Summary: {data['answer']}\n\n"

    for result in data.get("results", []):
        content = result.get("content", "")
        snippet = content[:SNIPPET_CHARS] + "..." if len(content) > SNIPPET_CHARS else content
        output += f"Title: {result.get('title', '')}\n"
        output += f"URL: {result.get('url', '')}\n"
        output += f"{snippet}\n\n"

    return output.strip() or "No results found."


# ============================================================================
# FETCH URL
# ============================================================================

class FetchUrlArgs(BaseModel):
    url: str = Field(description="Full URL of the page to read, including https://")


def html_to_text(markup: str) -> str:
    """Drop scripts, styles and tags; keep paragraph breaks."""
    text = _SCRIPT_STYLE.sub(" ", markup)
    text = _BLOCK_TAGS.sub("\n", text)
    text = _TAGS.sub(" ", text)
    text = html.unescape(text)
    text = _SPACES.sub(" ", text)
    text = "\n".join(line.strip() for line in text.splitlines())
    return _BLANK_LINES.sub("\n\n", text).strip()


@retry_on_failure(max_retries=1)
async def fetch_url(args: FetchUrlArgs) -> str:
    logger.info(f"🌐 Fetching: {args.url}")

    if not args.url.startswith(("http://", "https://")):
        return f"Error: only http(s) URLs can be fetched, got {args.url}"

    async with _http_client() as client:
        response = await client.get(args.url)

    if response.is_error:
        return f"Fetch error ({response.status_code}) for {args.url}"

    content_type = response.headers.get("content-type", "")
    text = html_to_text(response.text) if "html" in content_type else response.text
    return truncate(text, FETCH_MAX_CHARS) or f"{args.url} returned no readable text"


# ============================================================================
# TOOL DEFINITIONS
# ============================================================================

WEB_SEARCH_TOOL = Tool(
    name="web_search",
    description="Search the web for current information. Use this when you need up-to-date facts, news, or data.",
    args_model=WebSearchArgs,
    handler=web_search,
)

FETCH_URL_TOOL = Tool(
    name="fetch_url",
    description=(
        "Read a web page in full as plain text. Use it when search snippets are not enough; "
        "don't use it for local files."
    ),
    args_model=FetchUrlArgs,
    handler=fetch_url,
)
