"""
Unit Tests for Profiles and Prompts

Tests the profile table and system prompt assembly.
"""

import pytest

from config import Backend, BACKEND_KIND_OPENAI, build_system_prompt, format_prompt, load_backends
from core import ProfileKey, build_profiles
from tools import get_tool_registry


def fake_backends(*names):
    return {
        name: Backend(name=name, kind=BACKEND_KIND_OPENAI, base_url="http://x", api_key="k", model=f"{name}-model")
        for name in names
    }


class TestBuildProfiles:
    """Test build_profiles."""

    def test_all_profiles_built(self):
        """Test every router key has a profile."""
        profiles = build_profiles(load_backends())
        assert set(profiles) == set(ProfileKey)

    def test_tool_subsets_exist_in_registry(self):
        """Test every profile's tools are registered."""
        registry = get_tool_registry()
        for profile in build_profiles(load_backends()).values():
            assert len(registry.subset(profile.tool_names)) == len(profile.tool_names)

    def test_tool_subsets(self):
        """Test the tool subset of each profile."""
        profiles = build_profiles(load_backends())

        assert profiles[ProfileKey.REASONING].tool_names == ("think", "calculator")
        assert "web_search" not in profiles[ProfileKey.CODE].tool_names
        assert "write_file" not in profiles[ProfileKey.RESEARCH].tool_names
        assert len(profiles[ProfileKey.GENERAL].tool_names) == len(get_tool_registry())

    def test_unknown_backend(self):
        """Test a profile pointing at a missing backend fails at build time."""
        with pytest.raises(ValueError, match="Unknown backend"):
            build_profiles(fake_backends("deepseek"))

    def test_profiles_read_only(self):
        """Test the profile table cannot be modified."""
        profiles = build_profiles(load_backends())
        with pytest.raises(TypeError):
            profiles[ProfileKey.CODE] = None


class TestSystemPrompt:
    """Test prompt assembly."""

    def test_no_sections_when_blank(self):
        """Test blank memory and reference add nothing."""
        assert build_system_prompt("Base.", memory="  \n", reference="") == "Base."

    def test_memory_section(self):
        """Test memory is injected under its heading."""
        prompt = build_system_prompt("Base.", memory="- [2025-01-01] likes tea")

        assert prompt.startswith("Base.")
        assert "## Your Memory (from previous sessions)" in prompt
        assert "likes tea" in prompt
        assert "Reference Documentation" not in prompt

    def test_reference_section(self):
        """Test reference docs are injected under their heading."""
        prompt = build_system_prompt("Base.", reference="API v2 notes")

        assert "Reference Documentation" in prompt
        assert "API v2 notes" in prompt

    def test_profile_render(self):
        """Test Profile.render_system_prompt uses the profile's base prompt."""
        profile = build_profiles(load_backends())[ProfileKey.REASONING]
        prompt = profile.render_system_prompt(memory="remember me")

        assert prompt.startswith(profile.system_prompt)
        assert "remember me" in prompt

    def test_format_prompt_missing_variable(self):
        """Test format_prompt reports missing variables."""
        with pytest.raises(ValueError):
            format_prompt("Hello {name}")
