"""
Anthropic Claude LLM Provider.

Implements the ILLMProvider interface for Anthropic's Claude models.
One non-streaming Messages API call per completion round, with tool use.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Union

import anthropic
from anthropic import AsyncAnthropic

from ..domain.entities import (
    Completion,
    ContentBlock,
    ErrorType,
    Message,
    StopReason,
    TextBlock,
    ToolDefinition,
    ToolUseBlock,
)
from .base import BaseLLMProvider, LLMProviderConfig, LLMProviderError

logger = logging.getLogger(__name__)


class AnthropicProvider(BaseLLMProvider):
    """Anthropic Claude provider implementation.

    Usage:
        config = LLMProviderConfig(
            api_key="sk-ant-...",
            model="claude-sonnet-4-6",
        )
        provider = AnthropicProvider(config)

        completion = await provider.complete(messages, tools, system_prompt)
    """

    DEFAULT_MODEL = "claude-sonnet-4-6"

    def __init__(self, config: LLMProviderConfig):
        """Initialize the Anthropic provider.

        Args:
            config: Provider configuration
        """
        super().__init__(config)

        self.client = AsyncAnthropic(
            api_key=config.api_key,
            base_url=config.base_url,
            timeout=config.timeout,
            max_retries=config.max_retries,
        )

    def _format_messages_for_api(
        self, messages: list[Message]
    ) -> list[dict[str, Any]]:
        """Convert messages to Anthropic format.

        Block content maps one-to-one onto Anthropic content blocks.
        """
        api_messages = []
        for msg in messages:
            content: Union[str, list[dict[str, Any]]]
            if isinstance(msg.content, str):
                content = msg.content
            else:
                content = [block.to_dict() for block in msg.content]
            api_messages.append({"role": msg.role.value, "content": content})
        return api_messages

    def _format_tools_for_api(
        self, tools: list[ToolDefinition]
    ) -> list[dict[str, Any]]:
        """Convert tools to Anthropic format."""
        return [tool.to_anthropic_format() for tool in tools]

    @staticmethod
    def _parse_content(blocks: list[Any]) -> list[ContentBlock]:
        """Keep text and tool_use blocks; drop anything else (e.g. thinking)."""
        content: list[ContentBlock] = []
        for block in blocks:
            block_type = getattr(block, "type", None)
            if block_type == "text":
                content.append(TextBlock(text=block.text))
            elif block_type == "tool_use":
                content.append(
                    ToolUseBlock(
                        id=block.id,
                        name=block.name,
                        input=dict(block.input or {}),
                    )
                )
        return content

    async def complete(
        self,
        messages: list[Message],
        tools: Optional[list[ToolDefinition]] = None,
        system_prompt: Optional[str] = None,
        max_tokens: Optional[int] = None,
    ) -> Completion:
        """Request one completion from Claude.

        Args:
            messages: Conversation history
            tools: Available tools
            system_prompt: System prompt
            max_tokens: Maximum tokens to generate

        Returns:
            Normalized completion

        Raises:
            LLMProviderError: On any API failure
        """
        kwargs: dict[str, Any] = {
            "model": self.config.model,
            "max_tokens": max_tokens or self.config.max_tokens,
            "messages": self._format_messages_for_api(messages),
        }
        if system_prompt:
            kwargs["system"] = system_prompt
        if tools:
            kwargs["tools"] = self._format_tools_for_api(tools)

        try:
            response = await self.client.messages.create(**kwargs)

        except anthropic.RateLimitError as e:
            logger.warning(f"Rate limited by Anthropic: {e}")
            raise LLMProviderError(
                f"Rate limited: {e}", ErrorType.RATE_LIMIT, e
            ) from e
        except anthropic.APITimeoutError as e:
            logger.error(f"Anthropic API timeout: {e}")
            raise LLMProviderError(
                f"Request timed out: {e}", ErrorType.TIMEOUT, e
            ) from e
        except anthropic.AuthenticationError as e:
            logger.error(f"Anthropic authentication failed: {e}")
            raise LLMProviderError(
                f"Authentication failed: {e}", ErrorType.FATAL, e
            ) from e
        except anthropic.APIError as e:
            logger.error(f"Anthropic API error: {e}")
            raise LLMProviderError(
                f"API error: {e}", ErrorType.RECOVERABLE, e
            ) from e

        completion = Completion(
            stop_reason=StopReason.parse(response.stop_reason),
            content=self._parse_content(response.content),
            model=getattr(response, "model", self.config.model),
        )
        logger.debug(
            f"Claude completion: stop_reason={completion.stop_reason.value} "
            f"blocks={len(completion.content)}"
        )
        return completion

    async def close(self) -> None:
        """Close the client."""
        await self.client.close()
