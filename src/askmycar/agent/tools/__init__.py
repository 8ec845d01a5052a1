"""Tool system for the AskMyCar assistant.

Provides:
- Owner's manual lookup (vehicledatabases.com)
- Web search (Brave Search)
- Tool registry and definitions
"""

from .manual import ManualLookupTool
from .registry import (
    DEFAULT_TOOL_DEFINITIONS,
    FETCH_MANUAL_TOOL,
    WEB_SEARCH_TOOL,
    ToolRegistry,
)
from .web_search import WebSearchTool

__all__ = [
    "ManualLookupTool",
    "WebSearchTool",
    "ToolRegistry",
    "DEFAULT_TOOL_DEFINITIONS",
    "FETCH_MANUAL_TOOL",
    "WEB_SEARCH_TOOL",
]
