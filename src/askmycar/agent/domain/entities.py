"""
Domain entities for the AskMyCar agent.

These are pure domain objects with no infrastructure dependencies.
They define the core data structures used throughout the agent module.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Union

from pydantic import BaseModel, Field

# ============================================
# Vehicle Context
# ============================================


@dataclass(frozen=True)
class Vehicle:
    """The vehicle a chat is about.

    Attributes:
        year: Model year
        make: Manufacturer (e.g., "Toyota")
        model: Model name (e.g., "Camry")
        trim: Optional trim level
        engine: Optional engine description
        vin: Optional 17-character VIN
    """

    year: int
    make: str
    model: str
    trim: Optional[str] = None
    engine: Optional[str] = None
    vin: Optional[str] = None

    def __post_init__(self):
        if not self.make:
            raise ValueError("make is required")
        if not self.model:
            raise ValueError("model is required")

    @property
    def display_name(self) -> str:
        """Year, make and model, e.g. "2019 Toyota Camry"."""
        return f"{self.year} {self.make} {self.model}"


# ============================================
# Message Types
# ============================================


class MessageRole(str, Enum):
    """Role of a turn in a conversation."""

    USER = "user"
    ASSISTANT = "assistant"


@dataclass
class TextBlock:
    """Plain text content."""

    text: str

    def to_dict(self) -> dict[str, Any]:
        return {"type": "text", "text": self.text}


@dataclass
class ToolUseBlock:
    """A tool invocation requested by the model."""

    id: str
    name: str
    input: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {"type": "tool_use", "id": self.id, "name": self.name, "input": self.input}


@dataclass
class ToolResultBlock:
    """The text result of a tool invocation, keyed by the call id."""

    tool_use_id: str
    content: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": "tool_result",
            "tool_use_id": self.tool_use_id,
            "content": self.content,
        }


ContentBlock = Union[TextBlock, ToolUseBlock, ToolResultBlock]


def content_block_from_dict(data: dict[str, Any]) -> ContentBlock:
    """Parse a wire-format content block.

    Raises:
        ValueError: Unknown block type or missing fields
    """
    block_type = data.get("type")
    try:
        if block_type == "text":
            return TextBlock(text=str(data["text"]))
        if block_type == "tool_use":
            tool_input = data.get("input")
            if tool_input is None:
                tool_input = {}
            if not isinstance(tool_input, dict):
                raise ValueError("tool_use block input must be an object")
            return ToolUseBlock(
                id=str(data["id"]),
                name=str(data["name"]),
                input=dict(tool_input),
            )
        if block_type == "tool_result":
            content = data.get("content", "")
            if isinstance(content, list):
                # Anthropic also allows a list of text blocks here
                content = "".join(
                    part.get("text", "") for part in content if isinstance(part, dict)
                )
            return ToolResultBlock(
                tool_use_id=str(data["tool_use_id"]),
                content=str(content),
            )
    except KeyError as e:
        raise ValueError(f"{block_type} block is missing field {e.args[0]!r}") from e

    raise ValueError(f"Unsupported content block type: {block_type!r}")


@dataclass
class Message:
    """A single turn in a conversation.

    Attributes:
        role: user or assistant
        content: Plain text or an ordered list of content blocks
    """

    role: MessageRole
    content: Union[str, list[ContentBlock]]

    @property
    def text(self) -> str:
        """Concatenated text of the turn, ignoring tool blocks."""
        if isinstance(self.content, str):
            return self.content
        return "".join(b.text for b in self.content if isinstance(b, TextBlock))

    @property
    def tool_uses(self) -> list[ToolUseBlock]:
        if isinstance(self.content, str):
            return []
        return [b for b in self.content if isinstance(b, ToolUseBlock)]

    @property
    def tool_results(self) -> list[ToolResultBlock]:
        if isinstance(self.content, str):
            return []
        return [b for b in self.content if isinstance(b, ToolResultBlock)]


# ============================================
# Tool System
# ============================================


class ToolKind(str, Enum):
    """The closed set of tools the assistant can call."""

    FETCH_MANUAL = "fetch_manual"
    WEB_SEARCH = "web_search"

    @classmethod
    def from_name(cls, name: str) -> Optional[ToolKind]:
        """Resolve a tool name, or None for names we don't provide."""
        try:
            return cls(name)
        except ValueError:
            return None


class FetchManualInput(BaseModel):
    """Input for the fetch_manual tool."""

    topic: str = Field(
        ...,
        description=(
            "What topic or section to look up in the manual "
            '(e.g., "oil change interval", "warning lights", "tire pressure")'
        ),
    )


class WebSearchInput(BaseModel):
    """Input for the web_search tool."""

    query: str = Field(
        ...,
        description="The search query. Always include the year, make, and model.",
    )


@dataclass
class ToolDefinition:
    """Definition of an available tool.

    Attributes:
        kind: Which tool this is
        description: Description shown to the model
        input_model: Pydantic model validating (and describing) the input
    """

    kind: ToolKind
    description: str
    input_model: type[BaseModel]

    @property
    def name(self) -> str:
        return self.kind.value

    @property
    def parameters(self) -> dict[str, Any]:
        """JSON Schema for the tool input."""
        schema = self.input_model.model_json_schema()
        schema.pop("title", None)
        for prop in schema.get("properties", {}).values():
            prop.pop("title", None)
        return schema

    def to_anthropic_format(self) -> dict[str, Any]:
        """Convert to Anthropic tool use format."""
        return {
            "name": self.name,
            "description": self.description,
            "input_schema": self.parameters,
        }

    def to_openai_format(self) -> dict[str, Any]:
        """Convert to OpenAI function calling format."""
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.parameters,
            },
        }


@dataclass
class ToolCall:
    """A tool call made by the model.

    Attributes:
        id: Tool call identifier (pairs the call with its result)
        name: Tool name as requested by the model
        arguments: Raw input object
    """

    name: str
    arguments: dict[str, Any]
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    @property
    def kind(self) -> Optional[ToolKind]:
        return ToolKind.from_name(self.name)

    @classmethod
    def from_block(cls, block: ToolUseBlock) -> ToolCall:
        return cls(id=block.id, name=block.name, arguments=dict(block.input))


@dataclass
class ToolResult:
    """Result from a tool execution.

    Attributes:
        tool_call_id: ID of the tool call this is a result for
        content: Text fed back to the model
        latency_ms: Execution time in milliseconds
    """

    tool_call_id: str
    content: str
    latency_ms: Optional[int] = None

    def to_block(self) -> ToolResultBlock:
        return ToolResultBlock(tool_use_id=self.tool_call_id, content=self.content)


# ============================================
# Completions
# ============================================


class StopReason(str, Enum):
    """Why a completion round ended."""

    END_TURN = "end_turn"
    TOOL_USE = "tool_use"
    MAX_TOKENS = "max_tokens"
    STOP_SEQUENCE = "stop_sequence"
    OTHER = "other"

    @classmethod
    def parse(cls, value: Optional[str]) -> StopReason:
        try:
            return cls(value)
        except ValueError:
            return cls.OTHER


@dataclass
class Completion:
    """One model response.

    Attributes:
        stop_reason: Provider stop condition, normalized
        content: Ordered text and tool-use blocks
        model: Model that produced the response
    """

    stop_reason: StopReason
    content: list[ContentBlock] = field(default_factory=list)
    model: Optional[str] = None

    @property
    def first_text(self) -> Optional[str]:
        for block in self.content:
            if isinstance(block, TextBlock):
                return block.text
        return None

    @property
    def tool_uses(self) -> list[ToolUseBlock]:
        return [b for b in self.content if isinstance(b, ToolUseBlock)]


# ============================================
# Streaming Events
# ============================================


class ChatEventType(str, Enum):
    """Types of streaming chat events."""

    TOOL = "tool"  # Tool about to run
    TEXT = "text"  # Full answer so far
    DONE = "done"  # Stream finished
    ERROR = "error"  # Error occurred


class ErrorType(str, Enum):
    """Types of provider errors."""

    RECOVERABLE = "recoverable"
    FATAL = "fatal"
    TIMEOUT = "timeout"
    RATE_LIMIT = "rate_limit"


ROUND_LIMIT_REASON = "round_limit"


@dataclass
class ChatEvent:
    """A streaming chat event.

    Attributes:
        type: Event type
        name: Tool name (TOOL)
        content: Full answer text (TEXT)
        message: User-facing error message (ERROR)
        reason: Why the stream finished, when it wasn't a natural end (DONE)
    """

    type: ChatEventType
    name: Optional[str] = None
    content: Optional[str] = None
    message: Optional[str] = None
    reason: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to the wire frame payload."""
        result: dict[str, Any] = {"type": self.type.value}
        if self.type == ChatEventType.TOOL:
            result["name"] = self.name
        elif self.type == ChatEventType.TEXT:
            result["content"] = self.content or ""
        elif self.type == ChatEventType.ERROR:
            result["message"] = self.message or ""
        elif self.reason is not None:
            result["reason"] = self.reason
        return result

    @classmethod
    def tool(cls, name: str) -> ChatEvent:
        return cls(type=ChatEventType.TOOL, name=name)

    @classmethod
    def text(cls, content: str) -> ChatEvent:
        return cls(type=ChatEventType.TEXT, content=content)

    @classmethod
    def done(cls, reason: Optional[str] = None) -> ChatEvent:
        return cls(type=ChatEventType.DONE, reason=reason)

    @classmethod
    def error(cls, message: str) -> ChatEvent:
        return cls(type=ChatEventType.ERROR, message=message)
