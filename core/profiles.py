"""
Conversational profiles.

A profile bundles a system prompt, a subset of the tool catalog and a
backend. Profiles are configured data: they are built once at start-up
and handed to the chat service, which never looks a backend up by name.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

from config import (
    Backend,
    load_backends,
    build_system_prompt,
    CODE_BACKEND,
    RESEARCH_BACKEND,
    REASONING_BACKEND,
    GENERAL_BACKEND,
    CODE_PROMPT,
    RESEARCH_PROMPT,
    REASONING_PROMPT,
    GENERAL_PROMPT,
)
from .router import ProfileKey, get_profile_description

# ============================================================================
# TOOL SUBSETS
# ============================================================================

FILE_TOOLS = ("read_file", "write_file", "append_file", "list_files", "calculator")
RESEARCH_TOOLS = (
    "think", "web_search", "fetch_url", "read_file", "save_memory",
    "save_research", "get_research", "search_history", "calculator",
)
MINIMAL_TOOLS = ("think", "calculator")
ALL_TOOLS = (
    "think", "calculator", "web_search", "fetch_url", "read_file", "write_file",
    "append_file", "list_files", "save_memory", "save_research", "get_research",
    "search_history",
)


@dataclass(frozen=True)
class Profile:
    """
    Immutable description of a conversational profile.

    Attributes:
        key: Router key
        name: Display name
        system_prompt: Base prompt, before memory/reference injection
        tool_names: Names of the tools this profile may call
        backend: Model endpoint serving this profile
        description: One-line summary for listings
    """
    key: ProfileKey
    name: str
    system_prompt: str
    tool_names: Tuple[str, ...]
    backend: Backend
    description: str

    def render_system_prompt(self, memory: str = "", reference: str = "") -> str:
        """System prompt with memory and reference sections injected."""
        return build_system_prompt(self.system_prompt, memory=memory, reference=reference)


def build_profiles(backends: Optional[Mapping[str, Backend]] = None) -> Mapping[ProfileKey, Profile]:
    """
    Build the profile table.

    Args:
        backends: Backend table, defaults to load_backends()

    Returns:
        Read-only mapping of ProfileKey to Profile

    Raises:
        ValueError: If a configured backend id does not exist
    """
    backends = backends if backends is not None else load_backends()

    def backend(backend_id: str) -> Backend:
        if backend_id not in backends:
            raise ValueError(
                f"Unknown backend '{backend_id}'. Available: {sorted(backends)}"
            )
        return backends[backend_id]

    profiles = {
        ProfileKey.RESEARCH: Profile(
            key=ProfileKey.RESEARCH,
            name="Research Agent",
            system_prompt=RESEARCH_PROMPT,
            tool_names=RESEARCH_TOOLS,
            backend=backend(RESEARCH_BACKEND),
            description=get_profile_description(ProfileKey.RESEARCH),
        ),
        ProfileKey.CODE: Profile(
            key=ProfileKey.CODE,
            name="Code Agent",
            system_prompt=CODE_PROMPT,
            tool_names=FILE_TOOLS,
            backend=backend(CODE_BACKEND),
            description=get_profile_description(ProfileKey.CODE),
        ),
        ProfileKey.REASONING: Profile(
            key=ProfileKey.REASONING,
            name="Reasoning Agent",
            system_prompt=REASONING_PROMPT,
            tool_names=MINIMAL_TOOLS,
            backend=backend(REASONING_BACKEND),
            description=get_profile_description(ProfileKey.REASONING),
        ),
        ProfileKey.GENERAL: Profile(
            key=ProfileKey.GENERAL,
            name="General Agent",
            system_prompt=GENERAL_PROMPT,
            tool_names=ALL_TOOLS,
            backend=backend(GENERAL_BACKEND),
            description=get_profile_description(ProfileKey.GENERAL),
        ),
    }
    return MappingProxyType(profiles)
