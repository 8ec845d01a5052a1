"""Domain entities and port interfaces for the agent module."""

from .entities import (
    ROUND_LIMIT_REASON,
    ChatEvent,
    ChatEventType,
    Completion,
    ContentBlock,
    ErrorType,
    FetchManualInput,
    Message,
    MessageRole,
    StopReason,
    TextBlock,
    ToolCall,
    ToolDefinition,
    ToolKind,
    ToolResult,
    ToolResultBlock,
    ToolUseBlock,
    Vehicle,
    WebSearchInput,
    content_block_from_dict,
)
from .ports import ILLMProvider, IToolHandler

__all__ = [
    # Entities
    "ROUND_LIMIT_REASON",
    "ChatEvent",
    "ChatEventType",
    "Completion",
    "ContentBlock",
    "ErrorType",
    "FetchManualInput",
    "Message",
    "MessageRole",
    "StopReason",
    "TextBlock",
    "ToolCall",
    "ToolDefinition",
    "ToolKind",
    "ToolResult",
    "ToolResultBlock",
    "ToolUseBlock",
    "Vehicle",
    "WebSearchInput",
    "content_block_from_dict",
    # Ports
    "ILLMProvider",
    "IToolHandler",
]
