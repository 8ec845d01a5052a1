"""
AskMyCar Chat Agent Module.

An AI assistant that answers questions about one specific vehicle.

Architecture:
- Domain: Core entities and port interfaces
- Providers: LLM provider implementations (Claude, GPT)
- Tools: Owner's manual lookup and web search
- Orchestrator: Bounded tool-use loop and event streaming
- API: FastAPI router streaming server-sent events

Key Features:
- Anthropic as the primary provider, OpenAI as the fallback
- At most five completion rounds per question
- Tool progress events sent before each tool runs
- Tools never fail the chat; they fall back to explanatory text
"""

# Domain entities
from .domain.entities import (
    ChatEvent,
    ChatEventType,
    ErrorType,
    Message,
    MessageRole,
    ToolCall,
    ToolDefinition,
    ToolKind,
    Vehicle,
)

# Orchestrator
from .orchestrator import AgentOrchestrator, AgentConfig, EventStreamer

# Providers
from .providers import (
    AnthropicProvider,
    LLMProviderConfig,
    LLMProviderError,
    OpenAIProvider,
)

# Tools
from .tools import ManualLookupTool, ToolRegistry, WebSearchTool

__all__ = [
    # Domain
    "ChatEvent",
    "ChatEventType",
    "ErrorType",
    "Message",
    "MessageRole",
    "ToolCall",
    "ToolDefinition",
    "ToolKind",
    "Vehicle",
    # Orchestrator
    "AgentOrchestrator",
    "AgentConfig",
    "EventStreamer",
    # Providers
    "AnthropicProvider",
    "LLMProviderConfig",
    "LLMProviderError",
    "OpenAIProvider",
    # Tools
    "ManualLookupTool",
    "ToolRegistry",
    "WebSearchTool",
]
