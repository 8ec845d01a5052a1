"""
Tests for tool definitions and dispatch.
"""

import pytest

from conftest import RecordingTool
from src.askmycar.agent.domain.entities import (
    FetchManualInput,
    ToolCall,
    ToolKind,
    WebSearchInput,
)
from src.askmycar.agent.tools.registry import (
    FETCH_MANUAL_TOOL,
    WEB_SEARCH_TOOL,
    ToolRegistry,
)
from src.askmycar.exceptions import ConfigurationError


class TestToolDefinitions:
    """Tests for tool schemas sent to providers."""

    def test_fetch_manual_schema(self):
        schema = FETCH_MANUAL_TOOL.parameters

        assert schema["type"] == "object"
        assert schema["required"] == ["topic"]
        assert schema["properties"]["topic"]["type"] == "string"
        assert "title" not in schema

    def test_web_search_schema(self):
        schema = WEB_SEARCH_TOOL.parameters

        assert schema["required"] == ["query"]
        assert schema["properties"]["query"]["type"] == "string"

    def test_anthropic_format(self):
        formatted = FETCH_MANUAL_TOOL.to_anthropic_format()

        assert formatted["name"] == "fetch_manual"
        assert formatted["input_schema"]["required"] == ["topic"]
        assert "owner's manual" in formatted["description"]

    def test_openai_format(self):
        formatted = WEB_SEARCH_TOOL.to_openai_format()

        assert formatted["type"] == "function"
        assert formatted["function"]["name"] == "web_search"
        assert formatted["function"]["parameters"]["required"] == ["query"]


class TestToolRegistry:
    """Tests for ToolRegistry dispatch."""

    def test_missing_handler_fails_at_construction(self):
        with pytest.raises(ConfigurationError) as exc_info:
            ToolRegistry({ToolKind.FETCH_MANUAL: RecordingTool("x")})

        assert "web_search" in str(exc_info.value)

    def test_tools_in_stable_order(self, tool_registry):
        assert [t.name for t in tool_registry.get_all_tools()] == [
            "fetch_manual",
            "web_search",
        ]

    @pytest.mark.asyncio
    async def test_dispatches_validated_input(self, tool_registry, manual_tool, camry):
        result = await tool_registry.execute_tool_call(
            ToolCall(id="t1", name="fetch_manual", arguments={"topic": "oil"}), camry
        )

        assert result.tool_call_id == "t1"
        assert result.content == "Manual: 32 psi front and rear."
        assert manual_tool.calls == [FetchManualInput(topic="oil")]

    @pytest.mark.asyncio
    async def test_web_search_dispatch(self, tool_registry, search_tool, camry):
        await tool_registry.execute_tool_call(
            ToolCall(id="t2", name="web_search", arguments={"query": "recalls"}), camry
        )

        assert search_tool.calls == [WebSearchInput(query="recalls")]

    @pytest.mark.asyncio
    async def test_unknown_tool(self, tool_registry, camry):
        result = await tool_registry.execute_tool_call(
            ToolCall(id="t3", name="delete_car", arguments={}), camry
        )

        assert result.tool_call_id == "t3"
        assert result.content == 'Tool "delete_car" is not available.'

    @pytest.mark.asyncio
    async def test_invalid_input(self, tool_registry, manual_tool, camry):
        result = await tool_registry.execute_tool_call(
            ToolCall(id="t4", name="fetch_manual", arguments={"subject": "oil"}), camry
        )

        assert result.content.startswith("Invalid input for fetch_manual: topic")
        assert manual_tool.calls == []
