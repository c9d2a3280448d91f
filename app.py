"""
RawAgent - Multi-profile tool-calling assistant
Streamlit Web Application

Entry point for the chat interface. Messages are routed to a profile
(code, research, reasoning, general) unless one is forced from the
sidebar, and each profile keeps its own conversation.
"""

import asyncio
import logging
import time
from typing import Any, Dict, Optional

import streamlit as st

from config import get_log_level
from core import NoResponseError, ProviderError, ProfileKey
from services.chat_service import ChatService, ChatResponse

# Configure logging
logging.basicConfig(level=get_log_level())
logger = logging.getLogger(__name__)

AUTO_PROFILE = "Auto"

PROFILE_AVATARS = {
    ProfileKey.CODE.value: "💻",
    ProfileKey.RESEARCH.value: "🔎",
    ProfileKey.REASONING.value: "🧠",
    ProfileKey.GENERAL.value: "🤖",
}

# ============================================================================
# PAGE CONFIGURATION
# ============================================================================

st.set_page_config(
    page_title="RawAgent",
    page_icon="🤖",
    layout="wide",
    initial_sidebar_state="expanded",
)

st.markdown("""
<style>
    .block-container {
        padding-top: 2rem;
        padding-bottom: 2rem;
    }

    [data-testid="stChatMessage"] {
        border-radius: 16px;
        padding: 16px;
        margin: 10px 0;
    }

    #MainMenu {visibility: hidden;}
    footer {visibility: hidden;}
</style>
""", unsafe_allow_html=True)

# ============================================================================
# SESSION STATE INITIALIZATION
# ============================================================================

def initialize_session_state():
    """Initialize Streamlit session state variables."""

    if "chat_service" not in st.session_state:
        st.session_state.chat_service = ChatService()

    if "messages" not in st.session_state:
        st.session_state.messages = []

    if "forced_profile" not in st.session_state:
        st.session_state.forced_profile = AUTO_PROFILE

    if "use_context" not in st.session_state:
        st.session_state.use_context = True


# ============================================================================
# HELPER FUNCTIONS
# ============================================================================

def add_message(role: str, content: str, metadata: Optional[Dict] = None):
    """Add a message to the conversation history."""
    st.session_state.messages.append({
        "role": role,
        "content": content,
        "metadata": metadata or {},
        "timestamp": time.time(),
    })


def render_chat_message(message: Dict[str, Any]):
    """Render a single chat message with its telemetry."""
    role = message["role"]
    content = message["content"]
    metadata = message.get("metadata", {})

    if role == "user":
        with st.chat_message("user", avatar="👤"):
            st.markdown(content)
        return

    avatar = PROFILE_AVATARS.get(metadata.get("profile"), "🤖")
    with st.chat_message("assistant", avatar=avatar):
        st.markdown(content)

        if metadata.get("profile"):
            with st.expander("ℹ️ Message Details", expanded=False):
                st.caption(f"**Profile:** {metadata['profile']}")
                st.caption(f"**Steps:** {metadata.get('iterations', 0)}")
                if metadata.get("tool_calls"):
                    st.caption(f"**Tools Used:** {', '.join(metadata['tool_calls'])}")
                usage = metadata.get("usage", {})
                if usage:
                    st.caption(
                        f"**Tokens:** {usage.get('input_tokens', 0):,} in | "
                        f"{usage.get('output_tokens', 0):,} out | "
                        f"{usage.get('cached_tokens', 0):,} cached"
                    )


def friendly_error(error: Exception) -> str:
    """Map a model-endpoint failure to a message for the user."""
    if isinstance(error, NoResponseError):
        return "🤷 The model returned no response. Please try again."

    if isinstance(error, ProviderError):
        if error.status in (401, 403):
            return "🔑 There's an issue with the API configuration. Please check the API key for this profile's backend."
        if error.status == 429:
            return "⏳ The model is rate limited right now. Please wait a moment and try again."
        if error.status in (0, 408):
            return "⏱️ The model endpoint could not be reached or timed out. Please try again."
        if error.status >= 500:
            return "🛠️ The model provider is having trouble. Please try again shortly."

    return "😅 I ran into a small hiccup processing your request. Could you try rephrasing your question?"


def handle_user_input(user_message: str):
    """Process user input and get the assistant's response."""

    add_message("user", user_message)

    service: ChatService = st.session_state.chat_service
    service.use_context = st.session_state.use_context

    forced = st.session_state.forced_profile
    forced_profile = None if forced == AUTO_PROFILE else ProfileKey(forced)

    with st.spinner("🤔 Thinking..."):
        try:
            response: ChatResponse = asyncio.run(
                service.process_message(user_message, forced_profile=forced_profile)
            )

            add_message(
                "assistant",
                response.message,
                metadata={
                    "profile": response.profile.value,
                    "tool_calls": response.tool_calls,
                    "usage": response.usage,
                    "iterations": response.metadata.get("iterations", 0),
                },
            )

        except (ProviderError, NoResponseError) as e:
            logger.error(f"Error processing message: {e}")
            add_message("assistant", friendly_error(e), metadata={"error": True})


# ============================================================================
# SIDEBAR
# ============================================================================

def render_sidebar():
    """Render sidebar with profile controls and listings."""

    service: ChatService = st.session_state.chat_service

    with st.sidebar:
        st.markdown("### 🧭 Profile")

        options = [AUTO_PROFILE] + [profile["key"] for profile in service.list_profiles()]
        st.selectbox(
            "Route messages to",
            options,
            key="forced_profile",
            help="Auto picks a profile from the message text",
        )

        st.toggle(
            "Keep conversation context",
            key="use_context",
            help="When off, every message starts a fresh conversation",
        )

        st.divider()

        with st.expander("🤖 Profiles", expanded=False):
            for profile in service.list_profiles():
                status = " (active)" if profile["active"] else ""
                st.markdown(f"**{profile['name']}**{status}")
                st.caption(f"{profile['description']} · {profile['backend']}: {profile['model']}")
                st.caption(f"Tools: {', '.join(profile['tools'])}")

        with st.expander("🔧 Tools", expanded=False):
            for tool in service.list_tools():
                st.markdown(f"**{tool['name']}**")
                st.caption(tool["description"])

        st.divider()

        if st.button("🔄 Clear Conversation", use_container_width=True):
            st.session_state.messages = []
            service.reset()
            st.rerun()

        st.markdown("---")
        st.caption("🤖 RawAgent")


# ============================================================================
# MAIN APP
# ============================================================================

def main():
    """Main application entry point."""

    initialize_session_state()
    render_sidebar()

    st.title("RawAgent")
    st.markdown("#### Code, research and reasoning agents with tools")

    for message in st.session_state.messages:
        render_chat_message(message)

    user_input = st.chat_input("Type your message here...", key="chat_input")

    if user_input:
        handle_user_input(user_input)
        st.rerun()


# ============================================================================
# ERROR HANDLING & ENTRY POINT
# ============================================================================

if __name__ == "__main__":
    try:
        main()
    except Exception as e:
        logger.error(f"Application error: {e}", exc_info=True)
        st.error(f"""
        ❌ **Application Error**

        An unexpected error occurred: {str(e)}

        Please refresh the page if the issue persists.
        """)
