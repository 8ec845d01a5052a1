"""
Port interfaces (abstract base classes) for the agent module.

These define the contracts that adapters must implement.
Following the Ports & Adapters (Hexagonal) architecture pattern.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from pydantic import BaseModel

    from .entities import Completion, Message, ToolDefinition, Vehicle


# ============================================
# LLM Provider Interface
# ============================================


class ILLMProvider(ABC):
    """Interface for LLM providers (Claude, GPT).

    Implementations handle the specifics of each LLM API while
    providing a consistent interface to the orchestrator.
    """

    @property
    @abstractmethod
    def model_name(self) -> str:
        """Return the model identifier."""
        pass

    @abstractmethod
    async def complete(
        self,
        messages: list[Message],
        tools: Optional[list[ToolDefinition]] = None,
        system_prompt: Optional[str] = None,
        max_tokens: Optional[int] = None,
    ) -> Completion:
        """Request one completion for the conversation.

        Args:
            messages: Conversation history
            tools: Tools the model may call
            system_prompt: System instructions
            max_tokens: Output token cap

        Returns:
            The normalized completion

        Raises:
            LLMProviderError: On any provider failure
        """
        pass


# ============================================
# Tool Handler Interface
# ============================================


class IToolHandler(ABC):
    """Executes one kind of tool.

    Handlers never raise for upstream failures; they return text the
    model can use instead.
    """

    @abstractmethod
    async def run(self, params: BaseModel, vehicle: Vehicle) -> str:
        """Run the tool with validated input for the given vehicle."""
        pass

    async def close(self) -> None:
        """Release any resources held by the handler."""
        pass
