"""
OpenAI GPT LLM Provider.

Implements the ILLMProvider interface for OpenAI chat models. Used as the
fallback when no Anthropic key is configured. Conversation turns are kept
in Anthropic-style content blocks, so this adapter translates tool_use and
tool_result blocks into OpenAI tool_calls and tool messages.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Optional

import openai
from openai import AsyncOpenAI

from ..domain.entities import (
    Completion,
    ContentBlock,
    ErrorType,
    Message,
    MessageRole,
    StopReason,
    TextBlock,
    ToolDefinition,
    ToolUseBlock,
)
from .base import BaseLLMProvider, LLMProviderConfig, LLMProviderError

logger = logging.getLogger(__name__)

# OpenAI finish_reason -> normalized stop reason
FINISH_REASONS = {
    "stop": StopReason.END_TURN,
    "tool_calls": StopReason.TOOL_USE,
    "function_call": StopReason.TOOL_USE,
    "length": StopReason.MAX_TOKENS,
}


class OpenAIProvider(BaseLLMProvider):
    """OpenAI GPT provider implementation.

    Usage:
        config = LLMProviderConfig(api_key="sk-...", model="gpt-4o")
        provider = OpenAIProvider(config)

        completion = await provider.complete(messages, tools, system_prompt)
    """

    DEFAULT_MODEL = "gpt-4o"

    def __init__(self, config: LLMProviderConfig):
        """Initialize the OpenAI provider.

        Args:
            config: Provider configuration
        """
        super().__init__(config)

        self.client = AsyncOpenAI(
            api_key=config.api_key,
            base_url=config.base_url,
            timeout=config.timeout,
            max_retries=config.max_retries,
        )

    def _format_messages_for_api(
        self, messages: list[Message], system_prompt: Optional[str] = None
    ) -> list[dict[str, Any]]:
        """Convert messages to OpenAI format.

        OpenAI includes system messages in the messages array, and each
        tool result becomes its own "tool" role message.
        """
        api_messages: list[dict[str, Any]] = []

        if system_prompt:
            api_messages.append({"role": "system", "content": system_prompt})

        for msg in messages:
            if isinstance(msg.content, str):
                api_messages.append({"role": msg.role.value, "content": msg.content})
                continue

            if msg.role == MessageRole.ASSISTANT:
                api_msg: dict[str, Any] = {
                    "role": "assistant",
                    "content": msg.text or None,
                }
                if msg.tool_uses:
                    api_msg["tool_calls"] = [
                        {
                            "id": tu.id,
                            "type": "function",
                            "function": {
                                "name": tu.name,
                                "arguments": json.dumps(tu.input),
                            },
                        }
                        for tu in msg.tool_uses
                    ]
                api_messages.append(api_msg)
                continue

            for result in msg.tool_results:
                api_messages.append({
                    "role": "tool",
                    "tool_call_id": result.tool_use_id,
                    "content": result.content,
                })
            if msg.text:
                api_messages.append({"role": "user", "content": msg.text})

        return api_messages

    def _format_tools_for_api(
        self, tools: list[ToolDefinition]
    ) -> list[dict[str, Any]]:
        """Convert tools to OpenAI format."""
        return [tool.to_openai_format() for tool in tools]

    @staticmethod
    def _parse_message(message: Any) -> list[ContentBlock]:
        content: list[ContentBlock] = []
        if message.content:
            content.append(TextBlock(text=message.content))
        for tc in message.tool_calls or []:
            raw = tc.function.arguments or ""
            try:
                arguments = json.loads(raw) if raw else {}
            except json.JSONDecodeError:
                arguments = {"raw": raw}
            if not isinstance(arguments, dict):
                arguments = {"raw": raw}
            content.append(ToolUseBlock(id=tc.id, name=tc.function.name, input=arguments))
        return content

    async def complete(
        self,
        messages: list[Message],
        tools: Optional[list[ToolDefinition]] = None,
        system_prompt: Optional[str] = None,
        max_tokens: Optional[int] = None,
    ) -> Completion:
        """Request one completion from OpenAI.

        Raises:
            LLMProviderError: On any API failure or an empty response
        """
        kwargs: dict[str, Any] = {
            "model": self.config.model,
            "messages": self._format_messages_for_api(messages, system_prompt),
            "max_tokens": max_tokens or self.config.max_tokens,
        }
        if tools:
            kwargs["tools"] = self._format_tools_for_api(tools)

        try:
            response = await self.client.chat.completions.create(**kwargs)

        except openai.RateLimitError as e:
            logger.warning(f"Rate limited by OpenAI: {e}")
            raise LLMProviderError(
                f"Rate limited: {e}", ErrorType.RATE_LIMIT, e
            ) from e
        except openai.APITimeoutError as e:
            logger.error(f"OpenAI API timeout: {e}")
            raise LLMProviderError(
                f"Request timed out: {e}", ErrorType.TIMEOUT, e
            ) from e
        except openai.AuthenticationError as e:
            logger.error(f"OpenAI authentication failed: {e}")
            raise LLMProviderError(
                f"Authentication failed: {e}", ErrorType.FATAL, e
            ) from e
        except openai.APIError as e:
            logger.error(f"OpenAI API error: {e}")
            raise LLMProviderError(
                f"API error: {e}", ErrorType.RECOVERABLE, e
            ) from e

        if not response.choices:
            raise LLMProviderError("OpenAI returned no choices", ErrorType.RECOVERABLE)

        choice = response.choices[0]
        return Completion(
            stop_reason=FINISH_REASONS.get(choice.finish_reason, StopReason.OTHER),
            content=self._parse_message(choice.message),
            model=getattr(response, "model", self.config.model),
        )

    async def close(self) -> None:
        """Close the client."""
        await self.client.close()
