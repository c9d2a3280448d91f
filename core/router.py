"""
Profile Router

Decides which conversational profile should own a request before the
conversation loop starts. Routing is keyword based: pattern sets are
checked in a fixed priority order (most specific first) and the first
category with a match wins. There is no scoring and no model call, so
routing is deterministic and free; the price is precision when a query
matches several categories.

Profiles:
- code: building websites, writing programs, working with files
- research: looking facts and news up
- reasoning: analysis, comparisons, planning
- general: everything else (default, has no patterns)
"""

import logging
import re
from enum import Enum
from typing import Dict, Iterable, Optional, Pattern, Sequence, Tuple

logger = logging.getLogger(__name__)


# ============================================================================
# PROFILE KEYS
# ============================================================================

class ProfileKey(str, Enum):
    """Closed set of profiles the router can select."""

    CODE = "code"
    RESEARCH = "research"
    REASONING = "reasoning"
    GENERAL = "general"


# ============================================================================
# ROUTING TABLE
# ============================================================================

RouteRule = Tuple[ProfileKey, Tuple[Pattern[str], ...]]


def _compile(*patterns: str) -> Tuple[Pattern[str], ...]:
    return tuple(re.compile(pattern, re.IGNORECASE) for pattern in patterns)


# Priority order matters: first match wins
DEFAULT_RULES: Tuple[RouteRule, ...] = (
    (ProfileKey.CODE, _compile(
        r"build|create|make|write",
        r"website|web site|html|css|javascript|typescript",
        r"code|program|app|application",
        r"\.(html|css|js|ts|tsx|jsx)$",
        r"file.*\.(html|css|js|ts)",
        r"frontend|backend|fullstack",
    )),
    (ProfileKey.RESEARCH, _compile(
        r"research|find|search",
        r"what is|who is|when did|where is",
        r"latest|news|recent",
        r"explain|describe|define",
        r"history|background|overview",
        r"information|facts|details",
    )),
    (ProfileKey.REASONING, _compile(
        r"analyze|analysis",
        r"compare|contrast",
        r"explain why|reason",
        r"plan|strategy",
        r"think about|consider",
        r"advantage|disadvantage|pros|cons",
    )),
    (ProfileKey.GENERAL, ()),
)


# ============================================================================
# ROUTER
# ============================================================================

class Router:
    """
    Fixed-priority, first-match-wins keyword router.

    A category with no patterns can never match directly; the last such
    category (or the explicit default) is returned when nothing matches.
    """

    def __init__(
        self,
        rules: Sequence[RouteRule] = DEFAULT_RULES,
        default: ProfileKey = ProfileKey.GENERAL,
    ):
        self._rules: Tuple[RouteRule, ...] = tuple(
            (key, tuple(patterns)) for key, patterns in rules
        )
        self._default = default

    def route(self, query: str) -> ProfileKey:
        """
        Pick the profile for a request.

        Args:
            query: Raw user text

        Returns:
            The first profile in priority order with a matching pattern,
            otherwise the default profile

        Example:
            >>> Router().route("build me a website with html and css")
            <ProfileKey.CODE: 'code'>
        """
        for key, patterns in self._rules:
            match = _first_match(patterns, query)
            if match is not None:
                logger.debug(f"🧭 Routed to {key.value} (pattern: {match.pattern})")
                return key

        logger.debug(f"🧭 No pattern matched, using {self._default.value}")
        return self._default


def _first_match(patterns: Iterable[Pattern[str]], query: str) -> Optional[Pattern[str]]:
    for pattern in patterns:
        if pattern.search(query):
            return pattern
    return None


_default_router = Router()


def route(query: str) -> ProfileKey:
    """Route with the default rule table."""
    return _default_router.route(query)


# ============================================================================
# HELPER FUNCTIONS
# ============================================================================

def get_profile_description(key: ProfileKey) -> str:
    """
    Get a human-readable description of a profile.

    Args:
        key: The profile key

    Returns:
        Description string
    """
    descriptions: Dict[ProfileKey, str] = {
        ProfileKey.CODE: "Building websites and coding",
        ProfileKey.RESEARCH: "Research and information gathering",
        ProfileKey.REASONING: "Analysis and deep thinking",
        ProfileKey.GENERAL: "General purpose assistant",
    }
    return descriptions.get(key, "Processing your message")
