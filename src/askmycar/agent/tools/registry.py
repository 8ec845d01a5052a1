"""
Tool Registry.

Holds the definitions of the assistant's tools and routes each tool call
to the handler registered for its ToolKind.
"""

from __future__ import annotations

import logging
from typing import Optional

from pydantic import ValidationError

from ...exceptions import ConfigurationError
from ..domain.entities import (
    FetchManualInput,
    ToolCall,
    ToolDefinition,
    ToolKind,
    ToolResult,
    Vehicle,
    WebSearchInput,
)
from ..domain.ports import IToolHandler

logger = logging.getLogger(__name__)


FETCH_MANUAL_TOOL = ToolDefinition(
    kind=ToolKind.FETCH_MANUAL,
    description=(
        "Fetch the owner's manual for the user's vehicle to answer specific "
        "questions about their car. Use this for warning lights, maintenance "
        "schedules, specifications, features, and any question where the "
        "manual would have the answer."
    ),
    input_model=FetchManualInput,
)

WEB_SEARCH_TOOL = ToolDefinition(
    kind=ToolKind.WEB_SEARCH,
    description=(
        "Search the web for current information about this vehicle: recalls, "
        "technical service bulletins (TSBs), common issues, parts, pricing, or "
        "anything the manual wouldn't cover."
    ),
    input_model=WebSearchInput,
)

DEFAULT_TOOL_DEFINITIONS = {
    ToolKind.FETCH_MANUAL: FETCH_MANUAL_TOOL,
    ToolKind.WEB_SEARCH: WEB_SEARCH_TOOL,
}


def _describe_validation_error(error: ValidationError) -> str:
    parts = []
    for item in error.errors():
        location = ".".join(str(p) for p in item.get("loc", ())) or "input"
        parts.append(f"{location}: {item.get('msg', 'invalid')}")
    return "; ".join(parts)


class ToolRegistry:
    """Registry of the assistant's tools.

    Every ToolKind must have both a definition and a handler; a registry
    missing one fails at construction rather than at call time.

    Usage:
        registry = ToolRegistry({
            ToolKind.FETCH_MANUAL: ManualLookupTool(api_key),
            ToolKind.WEB_SEARCH: WebSearchTool(api_key),
        })

        tools = registry.get_all_tools()
        result = await registry.execute_tool_call(tool_call, vehicle)
    """

    def __init__(
        self,
        handlers: dict[ToolKind, IToolHandler],
        definitions: Optional[dict[ToolKind, ToolDefinition]] = None,
    ):
        """Initialize the tool registry.

        Args:
            handlers: Handler per tool kind
            definitions: Definition per tool kind (defaults to the built-ins)

        Raises:
            ConfigurationError: A tool kind has no handler or definition
        """
        self.definitions = dict(definitions or DEFAULT_TOOL_DEFINITIONS)
        self.handlers = dict(handlers)

        missing = [
            kind.value
            for kind in ToolKind
            if kind not in self.handlers or kind not in self.definitions
        ]
        if missing:
            raise ConfigurationError(
                f"No handler or definition registered for tools: {', '.join(missing)}",
                details={"tools": missing},
            )

    def get_all_tools(self) -> list[ToolDefinition]:
        """Get all tool definitions, in ToolKind order."""
        return [self.definitions[kind] for kind in ToolKind]

    async def execute_tool_call(
        self,
        tool_call: ToolCall,
        vehicle: Vehicle,
    ) -> ToolResult:
        """Validate a tool call's input and run its handler.

        Unknown tools and invalid input become explanatory result text so
        the model can recover on the next round.

        Args:
            tool_call: Tool call from the model
            vehicle: Vehicle the conversation is about

        Returns:
            ToolResult paired with the call id
        """
        kind = tool_call.kind
        if kind is None:
            logger.warning(f"Model requested unknown tool: {tool_call.name}")
            return ToolResult(
                tool_call_id=tool_call.id,
                content=f'Tool "{tool_call.name}" is not available.',
            )

        definition = self.definitions[kind]
        try:
            params = definition.input_model.model_validate(tool_call.arguments)
        except ValidationError as e:
            problem = _describe_validation_error(e)
            logger.warning(f"Invalid input for {kind.value}: {problem}")
            return ToolResult(
                tool_call_id=tool_call.id,
                content=f"Invalid input for {kind.value}: {problem}",
            )

        content = await self.handlers[kind].run(params, vehicle)
        return ToolResult(tool_call_id=tool_call.id, content=content)
