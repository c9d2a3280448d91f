"""
Unit Tests for Settings

Tests the entry point's logging level selection.
"""

import logging

from config import get_log_level


class TestLogLevel:
    """Test get_log_level."""

    def test_debug_wins(self):
        """Test DEBUG forces the DEBUG level whatever LOG_LEVEL says."""
        assert get_log_level(debug=True, level_name="WARNING") == logging.DEBUG

    def test_named_level(self):
        """Test LOG_LEVEL is used when DEBUG is off."""
        assert get_log_level(debug=False, level_name="warning") == logging.WARNING

    def test_unknown_level_falls_back(self):
        """Test an unknown level name gives INFO."""
        assert get_log_level(debug=False, level_name="LOUD") == logging.INFO
