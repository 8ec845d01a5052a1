"""Shared fixtures for the AskMyCar tests."""

from typing import Optional
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.askmycar.agent.domain.entities import (
    Completion,
    Message,
    MessageRole,
    StopReason,
    TextBlock,
    ToolDefinition,
    ToolKind,
    ToolUseBlock,
    Vehicle,
)
from src.askmycar.agent.domain.ports import ILLMProvider, IToolHandler
from src.askmycar.agent.tools.registry import ToolRegistry


class ScriptedProvider(ILLMProvider):
    """LLM provider that replays a fixed list of completions.

    Every call records a snapshot of the conversation it was given. Once
    the script runs out, the last completion is repeated.
    """

    def __init__(self, completions: list[Completion]):
        self.completions = list(completions)
        self.calls: list[dict] = []

    @property
    def model_name(self) -> str:
        return "scripted"

    async def complete(
        self,
        messages: list[Message],
        tools: Optional[list[ToolDefinition]] = None,
        system_prompt: Optional[str] = None,
        max_tokens: Optional[int] = None,
    ) -> Completion:
        self.calls.append({
            "messages": list(messages),
            "tools": tools,
            "system_prompt": system_prompt,
            "max_tokens": max_tokens,
        })
        index = min(len(self.calls) - 1, len(self.completions) - 1)
        return self.completions[index]


class RecordingTool(IToolHandler):
    """Tool handler that returns fixed text and records its calls."""

    def __init__(self, result: str, log: Optional[list] = None):
        self.result = result
        self.calls = []
        self.log = log if log is not None else []

    async def run(self, params, vehicle: Vehicle) -> str:
        self.calls.append(params)
        self.log.append(("run", params))
        return self.result


def text_completion(text: str) -> Completion:
    return Completion(stop_reason=StopReason.END_TURN, content=[TextBlock(text=text)])


def tool_completion(*calls: tuple[str, str, dict]) -> Completion:
    return Completion(
        stop_reason=StopReason.TOOL_USE,
        content=[ToolUseBlock(id=call_id, name=name, input=args) for call_id, name, args in calls],
    )


@pytest.fixture
def camry():
    return Vehicle(year=2019, make="Toyota", model="Camry")


@pytest.fixture
def user_question():
    return [Message(role=MessageRole.USER, content="What's my tire pressure?")]


@pytest.fixture
def manual_tool():
    return RecordingTool("Manual: 32 psi front and rear.")


@pytest.fixture
def search_tool():
    return RecordingTool("**Recall 19V-123**\nFuel pump\nSource: https://nhtsa.gov")


@pytest.fixture
def tool_registry(manual_tool, search_tool):
    return ToolRegistry({
        ToolKind.FETCH_MANUAL: manual_tool,
        ToolKind.WEB_SEARCH: search_tool,
    })


@pytest.fixture
def mock_http():
    """HTTPClient stand-in with an async get_json."""
    http = MagicMock()
    http.get_json = AsyncMock()
    http.close = AsyncMock()
    return http
