"""Agent Orchestrator.

The orchestrator coordinates the assistant's components:
- LLM provider for completions
- Tool registry and executor for manual lookup and web search
- Prompt builder for the vehicle-specific system prompt
- Event streamer for the server-sent event channel
"""

from .agent import AgentOrchestrator, AgentConfig
from .event_streamer import EventStreamer, GENERIC_ERROR_MESSAGE, format_sse
from .prompt_builder import PromptBuilder
from .tool_executor import ToolExecutor

__all__ = [
    # Main orchestrator
    "AgentOrchestrator",
    "AgentConfig",
    # Components
    "EventStreamer",
    "GENERIC_ERROR_MESSAGE",
    "format_sse",
    "PromptBuilder",
    "ToolExecutor",
]
