"""Chat API layer.

Provides the FastAPI router for the streaming chat endpoint.
"""

from .router import router, create_agent_dependencies, get_orchestrator
from .schemas import ChatMessageSchema, ChatRequest, VehicleSchema

__all__ = [
    "router",
    "create_agent_dependencies",
    "get_orchestrator",
    "ChatMessageSchema",
    "ChatRequest",
    "VehicleSchema",
]
