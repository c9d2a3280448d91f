"""
Unit Tests for the Profile Router

Tests fixed-priority keyword routing.
"""

import re

import pytest

from core.router import DEFAULT_RULES, ProfileKey, Router, get_profile_description, route


class TestRouting:
    """Test the default routing table."""

    @pytest.mark.parametrize("query, expected", [
        ("build me a website with html and css", ProfileKey.CODE),
        ("what is the capital of France", ProfileKey.RESEARCH),
        ("compare the pros and cons of X vs Y", ProfileKey.REASONING),
        ("hello there", ProfileKey.GENERAL),
        ("search for the latest Python release", ProfileKey.RESEARCH),
        ("fix index.html", ProfileKey.CODE),
        ("let's plan the week", ProfileKey.REASONING),
    ])
    def test_route(self, query, expected):
        """Test representative queries land on the expected profile."""
        assert route(query) == expected

    def test_code_beats_research(self):
        """Test the higher-priority category wins when both match."""
        assert route("write an article explaining the latest AI news") == ProfileKey.CODE

    def test_case_insensitive(self):
        """Test matching ignores case."""
        assert route("WHAT IS a monad") == ProfileKey.RESEARCH

    def test_empty_query(self):
        """Test an empty query falls back to general."""
        assert route("") == ProfileKey.GENERAL

    def test_idempotent(self):
        """Test routing the same text twice gives the same answer."""
        query = "analyze the pros of remote work"
        assert route(query) == route(query)

    def test_priority_order(self):
        """Test the default table is ordered code, research, reasoning, general."""
        assert [key for key, _ in DEFAULT_RULES] == [
            ProfileKey.CODE,
            ProfileKey.RESEARCH,
            ProfileKey.REASONING,
            ProfileKey.GENERAL,
        ]


class TestCustomRouter:
    """Test routers built with their own rules."""

    def test_custom_rules_and_default(self):
        """Test custom rules and default are honoured."""
        router = Router(
            rules=[(ProfileKey.REASONING, (re.compile("ponder"),))],
            default=ProfileKey.RESEARCH,
        )

        assert router.route("ponder this") == ProfileKey.REASONING
        assert router.route("anything else") == ProfileKey.RESEARCH


class TestProfileDescriptions:
    """Test profile descriptions."""

    def test_every_profile_has_description(self):
        """Test each key has a specific description."""
        for key in ProfileKey:
            assert get_profile_description(key) != "Processing your message"
