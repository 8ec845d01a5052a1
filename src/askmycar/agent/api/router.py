"""
FastAPI Router for the AskMyCar chat.

POST /api/chat answers one user turn about a vehicle and streams the
agent's progress back as server-sent events.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import uuid
from typing import Any, Optional

from fastapi import APIRouter, HTTPException, Request, status
from fastapi.responses import StreamingResponse
from pydantic import ValidationError

from ..orchestrator import AgentOrchestrator, EventStreamer
from .schemas import ChatRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["chat"])

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",  # Disable Nginx buffering
}

MISSING_FIELDS_DETAIL = "Missing vehicle or messages"


# =============================================================================
# Dependencies
# =============================================================================


class AgentDependencies:
    """Container for chat dependencies.

    Injected at application startup.
    """

    orchestrator: Optional[AgentOrchestrator] = None
    keepalive_seconds: float = 10.0


_deps = AgentDependencies()


def create_agent_dependencies(
    orchestrator: Optional[AgentOrchestrator],
    keepalive_seconds: float = 10.0,
) -> None:
    """Initialize chat dependencies.

    Call this at application startup. Passing None disables the chat.

    Args:
        orchestrator: The agent orchestrator
        keepalive_seconds: Idle time before a keep-alive comment is streamed
    """
    _deps.orchestrator = orchestrator
    _deps.keepalive_seconds = keepalive_seconds


def get_orchestrator() -> AgentOrchestrator:
    """Get the agent orchestrator dependency."""
    if not _deps.orchestrator:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Chat is not configured",
        )
    return _deps.orchestrator


def _describe_validation_error(error: ValidationError) -> str:
    errors = error.errors()
    if any(
        err["type"] == "missing" and len(err["loc"]) == 1 for err in errors
    ):
        return MISSING_FIELDS_DETAIL

    parts = []
    for err in errors[:3]:
        location = ".".join(str(part) for part in err["loc"])
        parts.append(f"{location}: {err['msg']}")
    return "Invalid request: " + "; ".join(parts)


async def _parse_chat_request(request: Request) -> ChatRequest:
    try:
        payload: Any = await request.json()
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Request body must be JSON",
        )

    if not isinstance(payload, dict):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=MISSING_FIELDS_DETAIL,
        )

    try:
        return ChatRequest.model_validate(payload)
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=_describe_validation_error(e),
        )


# =============================================================================
# Endpoints
# =============================================================================


@router.post("/chat")
async def chat(request: Request) -> StreamingResponse:
    """Stream the assistant's answer for the latest user turn.

    Frames are ``data: <JSON>`` events of type tool, text, done or error.
    The agent loop is cancelled when the client disconnects.
    """
    body = await _parse_chat_request(request)
    orchestrator = get_orchestrator()

    vehicle = body.vehicle.to_entity()
    messages = body.to_messages()
    request_id = uuid.uuid4().hex[:12]

    logger.info(
        f"Chat {request_id} for {vehicle.display_name} "
        f"({len(messages)} messages)"
    )

    streamer = EventStreamer(
        correlation_id=request_id,
        error_message=orchestrator.config.error_message,
    )

    async def event_generator():
        """Generate SSE frames from the streamer queue."""
        task = asyncio.create_task(
            streamer.pump(orchestrator.chat(vehicle, messages))
        )

        try:
            async for frame in streamer.frames(
                request.is_disconnected,
                keepalive_seconds=_deps.keepalive_seconds,
            ):
                yield frame

        except asyncio.CancelledError:
            logger.info(f"Chat {request_id} stream cancelled")
            raise
        finally:
            # Stop the agent loop if the client went away mid-answer
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task
            streamer.close()

    return StreamingResponse(
        event_generator(),
        media_type="text/event-stream",
        headers=SSE_HEADERS,
    )
