"""
Base LLM Provider Implementation.

Provides common functionality for all LLM providers.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional

from ..domain.entities import (
    Completion,
    ErrorType,
    Message,
    ToolDefinition,
)
from ..domain.ports import ILLMProvider

logger = logging.getLogger(__name__)


class LLMProviderError(Exception):
    """Base exception for LLM provider errors."""

    def __init__(
        self,
        message: str,
        error_type: ErrorType = ErrorType.RECOVERABLE,
        original_error: Optional[Exception] = None,
    ):
        super().__init__(message)
        self.error_type = error_type
        self.original_error = original_error


@dataclass
class LLMProviderConfig:
    """Configuration for LLM providers.

    Attributes:
        api_key: API key for the provider
        model: Model name to use
        base_url: Optional custom base URL
        timeout: Request timeout in seconds
        max_retries: SDK retry attempts (0 - the agent loop never retries)
        max_tokens: Default max tokens
    """

    api_key: str
    model: str
    base_url: Optional[str] = None
    timeout: float = 60.0
    max_retries: int = 0
    max_tokens: int = 1024


class BaseLLMProvider(ILLMProvider, ABC):
    """Base class for LLM provider implementations.

    Subclasses implement the message/tool formatting and the API call
    for a specific vendor.
    """

    def __init__(self, config: LLMProviderConfig):
        """Initialize the provider.

        Args:
            config: Provider configuration
        """
        self.config = config

    @property
    def model_name(self) -> str:
        """Return the model name."""
        return self.config.model

    def _format_tools_for_api(
        self, tools: list[ToolDefinition]
    ) -> list[dict[str, Any]]:
        """Convert tool definitions to API format.

        Subclasses should override for provider-specific formatting.
        """
        raise NotImplementedError("Subclass must implement _format_tools_for_api")

    @abstractmethod
    async def complete(
        self,
        messages: list[Message],
        tools: Optional[list[ToolDefinition]] = None,
        system_prompt: Optional[str] = None,
        max_tokens: Optional[int] = None,
    ) -> Completion:
        """Generate a response. Must be implemented by subclasses."""
        pass

    async def close(self) -> None:
        """Release the underlying client."""

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()
