"""Response schemas for the vehicle endpoints."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .nhtsa import DecodedVehicle


class VINDecodeResponse(BaseModel):
    """Decoded VIN, serialized with the camelCase keys the browser stores."""

    make: str
    model: str
    year: int
    trim: str = ""
    engine: str = ""
    body_style: str = ""
    drive_type: str = ""
    fuel_type: str = ""
    manufacturer: str = ""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    @classmethod
    def from_decoded(cls, vehicle: DecodedVehicle) -> VINDecodeResponse:
        return cls(**vehicle.to_dict())


class CarImageResponse(BaseModel):
    url: Optional[str] = Field(default=None, description="Image URL, null when none was found")


class ErrorResponse(BaseModel):
    error: str
