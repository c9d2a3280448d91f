"""
Chat Service - Main Coordinator

Orchestrates the entire user interaction flow:
1. Receives the user message (and an optional forced profile)
2. Routes it to a profile
3. Runs the profile's conversation loop
4. Keeps one conversation per profile so follow-ups keep their context
5. Returns the answer with usage and tool telemetry

This is the main entry point for the Streamlit UI.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional

from config import (
    Backend,
    CHAT_MAX_ITERATIONS,
    ONESHOT_MAX_ITERATIONS,
    MEMORY_FILE,
    REFERENCE_FILE,
)
from core import (
    ConversationLoop,
    ModelClient,
    Profile,
    ProfileKey,
    Router,
    ToolRegistry,
    build_profiles,
)
from ai import create_model_client
from clients.memory_store import load_memory, load_reference

logger = logging.getLogger(__name__)

ClientFactory = Callable[[Backend], ModelClient]


# ============================================================================
# DATA STRUCTURES
# ============================================================================

@dataclass
class ChatResponse:
    """
    Response from the chat service.

    Attributes:
        message: The response text to display to the user
        success: False when the turn stopped at the iteration cap
        profile: Profile that handled the message
        usage: Token totals for the turn (input, output, cached)
        tool_calls: Names of the tools called, in order
        metadata: Telemetry summary of the turn
    """
    message: str
    success: bool
    profile: ProfileKey
    usage: Dict[str, int] = field(default_factory=dict)
    tool_calls: List[str] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)


# ============================================================================
# CHAT SERVICE
# ============================================================================

class ChatService:
    """
    Main chat service coordinator.

    Owns the per-profile conversations. Profiles, the tool registry and the
    client factory are resolved once here and handed to each loop.
    """

    def __init__(
        self,
        profiles: Optional[Mapping[ProfileKey, Profile]] = None,
        tool_registry: Optional[ToolRegistry] = None,
        client_factory: ClientFactory = create_model_client,
        router: Optional[Router] = None,
        use_context: bool = True,
        max_iterations: int = CHAT_MAX_ITERATIONS,
        oneshot_max_iterations: int = ONESHOT_MAX_ITERATIONS,
        memory_file=MEMORY_FILE,
        reference_file=REFERENCE_FILE,
    ):
        """
        Initialize the chat service.

        Args:
            profiles: Profile table, defaults to build_profiles()
            tool_registry: Full tool catalog, defaults to get_tool_registry()
            client_factory: Builds a ModelClient for a Backend
            router: Profile router, defaults to the fixed-priority rules
            use_context: Keep per-profile history between messages
            max_iterations: Cap for session conversations
            oneshot_max_iterations: Cap when use_context is off
            memory_file: Long-term memory injected into system prompts
            reference_file: Reference documentation injected into system prompts
        """
        if tool_registry is None:
            from tools import get_tool_registry
            tool_registry = get_tool_registry()

        self.profiles = profiles if profiles is not None else build_profiles()
        self.tool_registry = tool_registry
        self.client_factory = client_factory
        self.router = router or Router()
        self.use_context = use_context
        self.max_iterations = max_iterations
        self.oneshot_max_iterations = oneshot_max_iterations
        self.memory_file = memory_file
        self.reference_file = reference_file

        self._clients: Dict[str, ModelClient] = {}
        self._loops: Dict[ProfileKey, ConversationLoop] = {}

        logger.info(f"✅ ChatService initialized ({len(self.profiles)} profiles, {len(tool_registry)} tools)")

    # ------------------------------------------------------------------
    # Routing
    # ------------------------------------------------------------------

    def select_profile(self, text: str, forced_profile: Optional[ProfileKey] = None) -> Profile:
        """Forced profile when given, otherwise the router's pick."""
        key = ProfileKey(forced_profile) if forced_profile else self.router.route(text)
        return self.profiles[key]

    # ------------------------------------------------------------------
    # Conversations
    # ------------------------------------------------------------------

    def _client_for(self, backend: Backend) -> ModelClient:
        if backend.name not in self._clients:
            self._clients[backend.name] = self.client_factory(backend)
        return self._clients[backend.name]

    def _new_loop(self, profile: Profile, max_iterations: int) -> ConversationLoop:
        system_prompt = profile.render_system_prompt(
            memory=load_memory(self.memory_file),
            reference=load_reference(self.reference_file),
        )
        return ConversationLoop(
            client=self._client_for(profile.backend),
            system_prompt=system_prompt,
            tool_registry=self.tool_registry.subset(profile.tool_names),
            max_iterations=max_iterations,
            name=profile.key.value,
        )

    def get_loop(self, profile: Profile) -> ConversationLoop:
        """The session conversation for a profile, created on first use."""
        if profile.key not in self._loops:
            logger.info(f"🆕 Starting {profile.name} conversation ({profile.backend.name}: {profile.backend.model})")
            self._loops[profile.key] = self._new_loop(profile, self.max_iterations)
        return self._loops[profile.key]

    async def process_message(
        self,
        text: str,
        forced_profile: Optional[ProfileKey] = None,
    ) -> ChatResponse:
        """
        Process a user message and generate a response.

        Args:
            text: The user's input text
            forced_profile: Skip routing and use this profile

        Returns:
            ChatResponse with the agent's reply and telemetry

        Raises:
            ProviderError: The profile's model endpoint failed
            NoResponseError: The model endpoint returned no turn
        """
        profile = self.select_profile(text, forced_profile)
        logger.info(f"💬 [{profile.name}] {text[:50]}{'...' if len(text) > 50 else ''}")

        if self.use_context:
            loop = self.get_loop(profile)
        else:
            loop = self._new_loop(profile, self.oneshot_max_iterations)

        answer = await loop.chat(text)
        telemetry = loop.last_telemetry

        return ChatResponse(
            message=answer,
            success=not telemetry.hit_limit,
            profile=profile.key,
            usage={
                "input_tokens": telemetry.usage.input_tokens,
                "output_tokens": telemetry.usage.output_tokens,
                "cached_tokens": telemetry.usage.cached_tokens,
            },
            tool_calls=[tr.tool_name for tr in telemetry.tool_results],
            metadata=telemetry.get_summary(),
        )

    def reset(self) -> None:
        """Forget every conversation. Clients are kept."""
        self._loops.clear()
        logger.info("🔄 Conversations cleared")

    # ------------------------------------------------------------------
    # Listings
    # ------------------------------------------------------------------

    def list_profiles(self) -> List[Dict[str, Any]]:
        return [
            {
                "key": profile.key.value,
                "name": profile.name,
                "description": profile.description,
                "backend": profile.backend.name,
                "model": profile.backend.model,
                "tools": list(profile.tool_names),
                "active": profile.key in self._loops,
            }
            for profile in self.profiles.values()
        ]

    def list_tools(self) -> List[Dict[str, str]]:
        return [
            {"name": tool.name, "description": tool.description}
            for tool in self.tool_registry.values()
        ]
