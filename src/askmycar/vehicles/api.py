"""
FastAPI Router for vehicle lookups.

GET /api/vin decodes a VIN through NHTSA vPIC and GET /api/car-image
finds a photo for a year/make/model.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Query, status
from fastapi.responses import JSONResponse

from ..exceptions import AskMyCarError, VINDecodeError
from .images import CarImageService
from .nhtsa import VIN_LENGTH, VINDecoder
from .schemas import CarImageResponse, ErrorResponse, VINDecodeResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["vehicles"])


# =============================================================================
# Dependencies
# =============================================================================


class VehicleDependencies:
    """Container for vehicle service dependencies.

    Injected at application startup.
    """

    vin_decoder: Optional[VINDecoder] = None
    image_service: Optional[CarImageService] = None


_deps = VehicleDependencies()


def create_vehicle_dependencies(
    vin_decoder: VINDecoder,
    image_service: CarImageService,
) -> None:
    """Initialize vehicle dependencies.

    Call this at application startup.
    """
    _deps.vin_decoder = vin_decoder
    _deps.image_service = image_service


def get_vin_decoder() -> VINDecoder:
    if not _deps.vin_decoder:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="VIN decoder not initialized",
        )
    return _deps.vin_decoder


def get_image_service() -> CarImageService:
    if not _deps.image_service:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Image service not initialized",
        )
    return _deps.image_service


def _error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=message).model_dump(),
    )


# =============================================================================
# Endpoints
# =============================================================================


@router.get(
    "/vin",
    response_model=VINDecodeResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def decode_vin(vin: Optional[str] = Query(default=None)):
    """Decode a 17-character VIN into year, make, model and details."""
    if not vin or len(vin) != VIN_LENGTH:
        return _error("VIN must be 17 characters", status.HTTP_400_BAD_REQUEST)

    decoder = get_vin_decoder()
    try:
        vehicle = await decoder.decode(vin)
    except VINDecodeError:
        return _error(
            "Could not decode VIN — check the number and try again",
            status.HTTP_400_BAD_REQUEST,
        )
    except AskMyCarError as e:
        logger.error(f"VIN decode error: {e}")
        return _error("Failed to decode VIN", status.HTTP_500_INTERNAL_SERVER_ERROR)

    return VINDecodeResponse.from_decoded(vehicle)


@router.get(
    "/car-image",
    response_model=CarImageResponse,
    responses={400: {"model": ErrorResponse}},
)
async def car_image(
    year: Optional[str] = Query(default=None),
    make: Optional[str] = Query(default=None),
    model: Optional[str] = Query(default=None),
):
    """Find a photo of the vehicle; ``url`` is null when none was found."""
    try:
        year_number = int(year or 0)
    except ValueError:
        year_number = 0

    if not year_number or not make or not model:
        return _error("Missing year, make, or model", status.HTTP_400_BAD_REQUEST)

    service = get_image_service()
    url = await service.lookup(year_number, make, model)
    return CarImageResponse(url=url)
