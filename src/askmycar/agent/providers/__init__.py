"""LLM provider implementations."""

from .base import BaseLLMProvider, LLMProviderError, LLMProviderConfig
from .anthropic import AnthropicProvider
from .openai import OpenAIProvider

__all__ = [
    "BaseLLMProvider",
    "LLMProviderError",
    "LLMProviderConfig",
    "AnthropicProvider",
    "OpenAIProvider",
]
