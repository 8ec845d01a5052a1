"""
Pydantic schemas for the chat API.

Defines the request model for POST /api/chat and its conversion into
domain entities.
"""

from __future__ import annotations

from typing import Any, Literal, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from ..domain.entities import (
    Message,
    MessageRole,
    Vehicle,
    content_block_from_dict,
)

# =============================================================================
# Constants
# =============================================================================

MAX_MESSAGES = 100
MAX_MESSAGE_LENGTH = 20000


# =============================================================================
# Chat Schemas
# =============================================================================


class VehicleSchema(BaseModel):
    """The vehicle a chat is about.

    Extra fields the browser keeps on its car records (id, nickname,
    imageUrl, ...) are ignored.
    """

    year: int = Field(..., ge=1886, le=2100)
    make: str = Field(..., min_length=1, max_length=100)
    model: str = Field(..., min_length=1, max_length=100)
    trim: Optional[str] = Field(default=None, max_length=100)
    engine: Optional[str] = Field(default=None, max_length=100)
    vin: Optional[str] = Field(default=None, max_length=17)

    model_config = ConfigDict(
        str_strip_whitespace=True,
        json_schema_extra={
            "example": {"year": 2019, "make": "Toyota", "model": "Camry"}
        },
    )

    def to_entity(self) -> Vehicle:
        return Vehicle(
            year=self.year,
            make=self.make,
            model=self.model,
            trim=self.trim or None,
            engine=self.engine or None,
            vin=self.vin.upper() if self.vin else None,
        )


class ChatMessageSchema(BaseModel):
    """One conversation turn: plain text or a list of content blocks."""

    role: Literal["user", "assistant"]
    content: Union[str, list[dict[str, Any]]]

    @field_validator("content")
    @classmethod
    def validate_content(cls, value: Union[str, list[dict[str, Any]]]):
        if isinstance(value, str):
            if len(value) > MAX_MESSAGE_LENGTH:
                raise ValueError(
                    f"String should have at most {MAX_MESSAGE_LENGTH} characters"
                )
            return value
        for block in value:
            content_block_from_dict(block)
        return value

    def to_entity(self) -> Message:
        content = self.content
        if not isinstance(content, str):
            content = [content_block_from_dict(block) for block in content]
        return Message(role=MessageRole(self.role), content=content)


class ChatRequest(BaseModel):
    """Request to chat about a vehicle.

    ``car``/``vehicleContext`` and ``conversation`` are accepted as
    aliases of ``vehicle`` and ``messages``.
    """

    vehicle: VehicleSchema = Field(
        ...,
        validation_alias=AliasChoices("vehicle", "car", "vehicleContext"),
    )
    messages: list[ChatMessageSchema] = Field(
        ...,
        min_length=1,
        max_length=MAX_MESSAGES,
        validation_alias=AliasChoices("messages", "conversation"),
    )

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "vehicle": {"year": 2019, "make": "Toyota", "model": "Camry"},
                "messages": [{"role": "user", "content": "What's my tire pressure?"}],
            }
        },
    )

    def to_messages(self) -> list[Message]:
        return [m.to_entity() for m in self.messages]

