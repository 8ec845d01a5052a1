"""
FastAPI application for AskMyCar.

Mounts the streaming chat router and the vehicle lookup router, and wires
providers, tools and services together at startup.

Run with:
    uvicorn src.askmycar.app:app --reload
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .agent.api import create_agent_dependencies
from .agent.api import router as chat_router
from .agent.domain.entities import ToolKind
from .agent.orchestrator import AgentConfig, AgentOrchestrator
from .agent.providers import (
    AnthropicProvider,
    BaseLLMProvider,
    LLMProviderConfig,
    OpenAIProvider,
)
from .agent.tools import ManualLookupTool, ToolRegistry, WebSearchTool
from .config import Settings
from .vehicles import (
    CarImageService,
    TTLCache,
    VINDecoder,
    create_vehicle_dependencies,
)
from .vehicles import router as vehicles_router

settings = Settings.from_env()

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Chatbot availability flag (set during init)
_chatbot_enabled = False


def _init_llm_provider(settings: Settings) -> Optional[BaseLLMProvider]:
    """Create the LLM provider, preferring Anthropic over OpenAI."""
    if not settings.chatbot_enabled:
        logger.warning("No LLM API keys configured (ANTHROPIC_API_KEY or OPENAI_API_KEY)")
        return None

    if settings.anthropic_api_key:
        try:
            config = LLMProviderConfig(
                api_key=settings.anthropic_api_key,
                model=settings.anthropic_model,
                max_tokens=settings.agent_max_tokens,
            )
            provider = AnthropicProvider(config)
            logger.info(f"Using Anthropic provider with model: {config.model}")
            return provider
        except Exception as e:
            logger.warning(f"Failed to initialize Anthropic provider: {e}")

    if settings.openai_api_key:
        try:
            config = LLMProviderConfig(
                api_key=settings.openai_api_key,
                model=settings.openai_model,
                max_tokens=settings.agent_max_tokens,
            )
            provider = OpenAIProvider(config)
            logger.info(f"Using OpenAI provider with model: {config.model}")
            return provider
        except Exception as e:
            logger.warning(f"Failed to initialize OpenAI provider: {e}")

    logger.warning("No LLM provider could be initialized - chatbot will be unavailable")
    return None


def build_tool_registry(settings: Settings) -> ToolRegistry:
    return ToolRegistry(
        {
            ToolKind.FETCH_MANUAL: ManualLookupTool(
                api_key=settings.vehicle_db_api_key,
                timeout_seconds=settings.tool_timeout_seconds,
            ),
            ToolKind.WEB_SEARCH: WebSearchTool(
                api_key=settings.brave_search_api_key,
                timeout_seconds=settings.tool_timeout_seconds,
            ),
        }
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager.

    Handles startup and shutdown events:
    - Startup: Create the LLM provider, tools, orchestrator and vehicle services
    - Shutdown: Close provider and HTTP sessions
    """
    global _chatbot_enabled

    logger.info("Starting AskMyCar API...")

    llm_provider = _init_llm_provider(settings)
    tool_registry = build_tool_registry(settings)

    if llm_provider is not None:
        orchestrator = AgentOrchestrator(
            llm_provider=llm_provider,
            tool_registry=tool_registry,
            config=AgentConfig(
                max_rounds=settings.agent_max_rounds,
                max_tokens=settings.agent_max_tokens,
            ),
        )
        create_agent_dependencies(orchestrator)
        _chatbot_enabled = True
        logger.info("Agent orchestrator initialized successfully")
    else:
        create_agent_dependencies(None)

    if not settings.web_search_enabled:
        logger.warning("BRAVE_SEARCH_API_KEY not configured - web search will use fallback text")

    image_cache: TTLCache[str] = TTLCache(
        max_entries=settings.image_cache_max_entries,
        ttl_seconds=settings.image_cache_ttl_seconds,
    )
    vin_decoder = VINDecoder()
    image_service = CarImageService(
        cache=image_cache,
        brave_api_key=settings.brave_search_api_key,
        timeout_seconds=settings.tool_timeout_seconds,
    )
    create_vehicle_dependencies(vin_decoder, image_service)

    yield

    # Shutdown (reverse order of initialization)
    logger.info("Shutting down AskMyCar API...")

    await image_service.close()
    await vin_decoder.close()
    logger.info(f"Image cache stats: {image_cache.stats.to_dict()}")

    for handler in tool_registry.handlers.values():
        await handler.close()

    if llm_provider is not None:
        await llm_provider.close()
        logger.info("LLM provider closed")

    _chatbot_enabled = False


# Create FastAPI application
app = FastAPI(
    title="AskMyCar API",
    description="""
    Backend for a vehicle-specific chat assistant.

    ## Features

    - **Chat**: Ask about your car; answers stream back as server-sent events
    - **VIN Decode**: Turn a VIN into year, make, model and details
    - **Car Image**: Find a photo of a year/make/model
    """,
    version=__version__,
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "Accept"],
)

# Include routers
app.include_router(chat_router)
app.include_router(vehicles_router)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "name": "AskMyCar API",
        "version": __version__,
        "docs": "/docs",
        "health": "/health",
    }


@app.get("/health")
async def health():
    """Global health check."""
    return {"status": "healthy"}


@app.get("/api/config")
async def get_config():
    """Get frontend configuration.

    Returns feature flags and settings for the frontend.
    """
    return {
        "chatbot_enabled": _chatbot_enabled,
        "web_search_enabled": settings.web_search_enabled,
        "version": __version__,
    }


# Entry point for running with uvicorn
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "src.askmycar.app:app",
        host="0.0.0.0",
        port=settings.port,
        reload=True,
    )
