"""
Tool Executor.

Runs tool calls through the ToolRegistry, one at a time, with logging and
latency tracking.
"""

from __future__ import annotations

import logging
import time

from ..domain.entities import ToolCall, ToolResult, Vehicle
from ..tools.registry import ToolRegistry

logger = logging.getLogger(__name__)


class ToolExecutor:
    """Executes tool calls for one chat round.

    Tools absorb their own upstream failures, so anything that escapes a
    handler is a real fault and propagates to the orchestrator, which ends
    the stream with an error event.

    Usage:
        executor = ToolExecutor(tool_registry)

        result = await executor.execute_tool_call(tool_call, vehicle)
    """

    def __init__(self, tool_registry: ToolRegistry):
        """Initialize the tool executor.

        Args:
            tool_registry: Registry for tool definitions and dispatch
        """
        self.tools = tool_registry

    async def execute_tool_call(
        self,
        tool_call: ToolCall,
        vehicle: Vehicle,
    ) -> ToolResult:
        """Execute a single tool call.

        Args:
            tool_call: Tool call to execute
            vehicle: Vehicle the conversation is about

        Returns:
            ToolResult with latency populated
        """
        logger.info(f"Executing tool: {tool_call.name}")
        started = time.monotonic()

        result = await self.tools.execute_tool_call(tool_call, vehicle)

        result.latency_ms = int((time.monotonic() - started) * 1000)
        logger.debug(
            f"Tool {tool_call.name} finished in {result.latency_ms}ms: "
            f"{result.content[:200]}"
        )
        return result
