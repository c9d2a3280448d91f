"""
Unit Tests for the Tool Registry

Tests argument decoding, descriptors and registry subsets.
"""

import pytest

from core import Tool, ToolArgumentDecodeError, ToolRegistry
from tests.conftest import COUNT_TOOL, ECHO_TOOL, EXPLODE_TOOL, CountArgs


class TestDecode:
    """Test Tool.decode."""

    def test_decode_valid(self):
        """Test valid JSON gives a typed value."""
        args = COUNT_TOOL.decode('{"n": 4}')
        assert isinstance(args, CountArgs)
        assert args.n == 4

    def test_decode_invalid_json(self):
        """Test invalid JSON raises ToolArgumentDecodeError."""
        with pytest.raises(ToolArgumentDecodeError) as exc_info:
            COUNT_TOOL.decode("{n: 4")
        assert exc_info.value.tool_name == "count"

    def test_decode_missing_field(self):
        """Test a missing required field is an error."""
        with pytest.raises(ToolArgumentDecodeError, match="n: Field required"):
            COUNT_TOOL.decode("{}")

    def test_decode_empty_string(self):
        """Test an empty payload is an error, not an empty object."""
        with pytest.raises(ToolArgumentDecodeError):
            ECHO_TOOL.decode("")


class TestDescriptor:
    """Test Tool.descriptor."""

    def test_descriptor_shape(self):
        """Test the chat-completions function descriptor."""
        descriptor = COUNT_TOOL.descriptor()

        assert descriptor["type"] == "function"
        function = descriptor["function"]
        assert function["name"] == "count"
        assert function["description"] == "Count from 1 to n"
        assert function["parameters"]["type"] == "object"
        assert function["parameters"]["properties"] == {"n": {"type": "integer"}}
        assert function["parameters"]["required"] == ["n"]


class TestToolRegistry:
    """Test ToolRegistry."""

    def test_mapping_interface(self):
        """Test lookup, iteration order and length."""
        registry = ToolRegistry([ECHO_TOOL, COUNT_TOOL])

        assert registry["echo"] is ECHO_TOOL
        assert list(registry) == ["echo", "count"]
        assert len(registry) == 2
        assert registry.get("missing") is None

    def test_duplicate_names_rejected(self):
        """Test two tools with one name are rejected."""
        with pytest.raises(ValueError, match="Duplicate"):
            ToolRegistry([ECHO_TOOL, ECHO_TOOL])

    def test_subset(self):
        """Test subsets keep the requested order."""
        registry = ToolRegistry([ECHO_TOOL, COUNT_TOOL, EXPLODE_TOOL])

        subset = registry.subset(name for name in ["explode", "echo"])

        assert list(subset) == ["explode", "echo"]

    def test_subset_unknown_name(self):
        """Test subsets with unregistered names fail loudly."""
        registry = ToolRegistry([ECHO_TOOL])

        with pytest.raises(KeyError):
            registry.subset(["echo", "count"])

    def test_descriptors(self):
        """Test descriptors follow registration order."""
        registry = ToolRegistry([COUNT_TOOL, ECHO_TOOL])
        assert [d["function"]["name"] for d in registry.descriptors()] == ["count", "echo"]

    def test_read_only(self):
        """Test the registry cannot be modified."""
        registry = ToolRegistry([ECHO_TOOL])
        with pytest.raises(TypeError):
            registry["count"] = COUNT_TOOL

    def test_tool_is_frozen(self):
        """Test tools are immutable."""
        with pytest.raises(Exception):
            ECHO_TOOL.name = "other"  # type: ignore[misc]


class TestInvoke:
    """Test Tool.invoke."""

    @pytest.mark.asyncio
    async def test_invoke(self):
        """Test invoke runs the handler with decoded args."""
        tool = Tool(name="c", description="", args_model=CountArgs, handler=COUNT_TOOL.handler)
        assert await tool.invoke(tool.decode('{"n": 3}')) == "1 2 3"
