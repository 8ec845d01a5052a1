"""
Agent Orchestrator.

Main orchestration logic for the AskMyCar assistant. Coordinates:
- One LLM completion per round, up to a fixed round budget
- Tool execution and splicing tool results back into the conversation
- Chat events for the client (tool progress, final text, done, error)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import AsyncIterator, Optional

from ..domain.entities import (
    ROUND_LIMIT_REASON,
    ChatEvent,
    Message,
    MessageRole,
    StopReason,
    ToolCall,
    Vehicle,
)
from ..domain.ports import ILLMProvider
from .event_streamer import GENERIC_ERROR_MESSAGE
from .prompt_builder import PromptBuilder
from .tool_executor import ToolExecutor
from ..tools.registry import ToolRegistry

logger = logging.getLogger(__name__)


@dataclass
class AgentConfig:
    """Configuration for the agent orchestrator.

    Attributes:
        max_rounds: Completion rounds allowed before the loop is cut off
        max_tokens: Maximum output tokens per completion
        error_message: User-facing message of the error event
    """

    max_rounds: int = 5
    max_tokens: int = 1024
    error_message: str = GENERIC_ERROR_MESSAGE


class AgentOrchestrator:
    """Main agent orchestration logic.

    Manages the conversation loop:
    1. Build the system prompt from the vehicle
    2. Call the LLM with the conversation and tools
    3. On a natural end, send the answer and finish
    4. On tool use, run each tool (announcing it first), append the
       assistant turn and the tool results, and loop
    5. Stop after max_rounds completions

    Usage:
        orchestrator = AgentOrchestrator(
            llm_provider=anthropic_provider,
            tool_registry=registry,
        )

        async for event in orchestrator.chat(vehicle, messages):
            await streamer.send(event)
    """

    def __init__(
        self,
        llm_provider: ILLMProvider,
        tool_registry: ToolRegistry,
        prompt_builder: Optional[PromptBuilder] = None,
        config: Optional[AgentConfig] = None,
    ):
        """Initialize the agent orchestrator.

        Args:
            llm_provider: LLM provider for completions
            tool_registry: Tool registry for manual lookup and web search
            prompt_builder: System prompt builder
            config: Agent configuration
        """
        self.llm = llm_provider
        self.tools = tool_registry
        self.tool_executor = ToolExecutor(tool_registry)
        self.prompt_builder = prompt_builder or PromptBuilder()
        self.config = config or AgentConfig()

    async def chat(
        self,
        vehicle: Vehicle,
        messages: list[Message],
    ) -> AsyncIterator[ChatEvent]:
        """Answer the latest user turn and stream events.

        The caller's message list is copied, never modified.

        Args:
            vehicle: Vehicle the conversation is about
            messages: Conversation history, oldest first

        Yields:
            ChatEvent objects for streaming to the client
        """
        conversation = list(messages)
        system_prompt = self.prompt_builder.build(vehicle)
        available_tools = self.tools.get_all_tools()
        rounds_left = self.config.max_rounds

        try:
            while rounds_left > 0:
                rounds_left -= 1
                round_number = self.config.max_rounds - rounds_left

                completion = await self.llm.complete(
                    messages=conversation,
                    tools=available_tools,
                    system_prompt=system_prompt,
                    max_tokens=self.config.max_tokens,
                )
                logger.debug(
                    f"Round {round_number}: stop_reason={completion.stop_reason.value}"
                )

                if completion.stop_reason == StopReason.END_TURN:
                    text = completion.first_text
                    if text is not None:
                        yield ChatEvent.text(text)
                    yield ChatEvent.done()
                    return

                if (
                    completion.stop_reason != StopReason.TOOL_USE
                    or not completion.tool_uses
                ):
                    logger.warning(
                        f"Completion stopped with {completion.stop_reason.value} "
                        f"for {vehicle.display_name}"
                    )
                    yield ChatEvent.done(reason=completion.stop_reason.value)
                    return

                results = []
                for block in completion.tool_uses:
                    # Announce before running so the client can show progress
                    yield ChatEvent.tool(block.name)
                    result = await self.tool_executor.execute_tool_call(
                        ToolCall.from_block(block), vehicle
                    )
                    results.append(result.to_block())

                conversation.append(
                    Message(role=MessageRole.ASSISTANT, content=list(completion.content))
                )
                conversation.append(Message(role=MessageRole.USER, content=results))

            logger.warning(
                f"Round limit ({self.config.max_rounds}) reached for {vehicle.display_name}"
            )
            yield ChatEvent.done(reason=ROUND_LIMIT_REASON)

        except Exception as e:
            logger.exception(f"Chat error: {e}")
            yield ChatEvent.error(self.config.error_message)
