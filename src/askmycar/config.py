"""Application settings.

Settings are read from environment variables. A local ``.env`` file is
loaded first when present so development setups don't need exported
variables.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Optional

from dotenv import load_dotenv

DEFAULT_ANTHROPIC_MODEL = "claude-sonnet-4-6"
DEFAULT_OPENAI_MODEL = "gpt-4o"


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    return int(value)


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    return float(value)


def _env_str(name: str) -> Optional[str]:
    value = os.getenv(name)
    if value is None:
        return None
    value = value.strip()
    return value or None


@dataclass(frozen=True)
class Settings:
    """Runtime configuration for the AskMyCar service.

    Attributes:
        anthropic_api_key: Key for the primary LLM provider
        anthropic_model: Claude model used for chat
        openai_api_key: Key for the fallback LLM provider
        openai_model: OpenAI model used when Anthropic is not configured
        vehicle_db_api_key: vehicledatabases.com key for manual lookups
        brave_search_api_key: Brave Search key for web and image search
        agent_max_rounds: Completion rounds allowed per chat request
        agent_max_tokens: Output token cap per completion round
        tool_timeout_seconds: Timeout for each external lookup
        image_cache_max_entries: Capacity of the image URL cache
        image_cache_ttl_seconds: Lifetime of an image cache entry
        cors_origins: Allowed browser origins
        port: Port the uvicorn entry point binds
        log_level: Root log level name
    """

    anthropic_api_key: Optional[str] = None
    anthropic_model: str = DEFAULT_ANTHROPIC_MODEL
    openai_api_key: Optional[str] = None
    openai_model: str = DEFAULT_OPENAI_MODEL
    vehicle_db_api_key: Optional[str] = None
    brave_search_api_key: Optional[str] = None
    agent_max_rounds: int = 5
    agent_max_tokens: int = 1024
    tool_timeout_seconds: float = 4.0
    image_cache_max_entries: int = 512
    image_cache_ttl_seconds: float = 86400.0
    cors_origins: list[str] = field(
        default_factory=lambda: ["http://localhost:3000", "http://localhost:5173"]
    )
    port: int = 8000
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, dotenv: bool = True) -> Settings:
        """Build settings from the process environment.

        Args:
            dotenv: Load a ``.env`` file first (existing variables win)
        """
        if dotenv:
            load_dotenv()

        cors = os.getenv("CORS_ORIGINS")
        cors_origins = (
            [origin.strip() for origin in cors.split(",") if origin.strip()]
            if cors
            else cls().cors_origins
        )

        return cls(
            anthropic_api_key=_env_str("ANTHROPIC_API_KEY"),
            anthropic_model=os.getenv("ANTHROPIC_MODEL", DEFAULT_ANTHROPIC_MODEL),
            openai_api_key=_env_str("OPENAI_API_KEY"),
            openai_model=os.getenv("OPENAI_MODEL", DEFAULT_OPENAI_MODEL),
            vehicle_db_api_key=_env_str("VEHICLE_DB_API_KEY"),
            brave_search_api_key=_env_str("BRAVE_SEARCH_API_KEY"),
            agent_max_rounds=_env_int("AGENT_MAX_ROUNDS", 5),
            agent_max_tokens=_env_int("AGENT_MAX_TOKENS", 1024),
            tool_timeout_seconds=_env_float("TOOL_TIMEOUT_SECONDS", 4.0),
            image_cache_max_entries=_env_int("IMAGE_CACHE_MAX_ENTRIES", 512),
            image_cache_ttl_seconds=_env_float("IMAGE_CACHE_TTL_SECONDS", 86400.0),
            cors_origins=cors_origins,
            port=_env_int("PORT", 8000),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )

    @property
    def chatbot_enabled(self) -> bool:
        """True when at least one LLM provider can be configured."""
        return bool(self.anthropic_api_key or self.openai_api_key)

    @property
    def web_search_enabled(self) -> bool:
        return self.brave_search_api_key is not None
