"""
NHTSA vPIC VIN decoder.

Turns a 17-character VIN into the year/make/model record the browser
stores for a car. The vPIC DecodeVin endpoint returns a flat list of
``{"Variable": ..., "Value": ...}`` rows; only a handful are kept.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from datetime import date
from typing import Any, Optional

from ..exceptions import UpstreamError, VINDecodeError
from ..http import HTTPClient

logger = logging.getLogger(__name__)

NHTSA_BASE_URL = "https://vpic.nhtsa.dot.gov/api/vehicles"
VIN_LENGTH = 17


@dataclass(frozen=True)
class DecodedVehicle:
    """Vehicle attributes decoded from a VIN.

    Empty strings mean vPIC had no value for the field.
    """

    make: str
    model: str
    year: int
    trim: str = ""
    engine: str = ""
    body_style: str = ""
    drive_type: str = ""
    fuel_type: str = ""
    manufacturer: str = ""

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def _extract(results: list[dict[str, Any]], variable: str) -> str:
    for row in results:
        if row.get("Variable") == variable:
            return (row.get("Value") or "").strip()
    return ""


def _parse_year(value: str) -> int:
    try:
        return int(value)
    except ValueError:
        return date.today().year


def parse_decode_results(results: list[dict[str, Any]]) -> DecodedVehicle:
    """Build a DecodedVehicle from vPIC DecodeVin rows."""
    displacement = _extract(results, "Displacement (L)")
    cylinders = _extract(results, "Engine Number of Cylinders")
    engine_parts = []
    if displacement:
        engine_parts.append(f"{displacement}L")
    if cylinders:
        engine_parts.append(f"{cylinders}-cyl")

    return DecodedVehicle(
        make=_extract(results, "Make"),
        model=_extract(results, "Model"),
        year=_parse_year(_extract(results, "Model Year")),
        trim=_extract(results, "Trim") or _extract(results, "Series"),
        engine=" ".join(engine_parts),
        body_style=_extract(results, "Body Class"),
        drive_type=_extract(results, "Drive Type"),
        fuel_type=_extract(results, "Fuel Type - Primary"),
        manufacturer=_extract(results, "Manufacturer Name"),
    )


class VINDecoder:
    """Client for the vPIC DecodeVin endpoint.

    Usage:
        decoder = VINDecoder()
        vehicle = await decoder.decode("4T1B11HK5KU123456")
    """

    def __init__(
        self,
        http_client: Optional[HTTPClient] = None,
        base_url: str = NHTSA_BASE_URL,
        timeout_seconds: float = 10.0,
    ):
        self.http = http_client or HTTPClient("nhtsa", timeout_seconds=timeout_seconds)
        self.base_url = base_url.rstrip("/")

    async def decode(self, vin: str) -> DecodedVehicle:
        """Decode a VIN.

        Raises:
            VINDecodeError: vPIC could not resolve a make and model
            UpstreamError: The request failed or the payload was malformed
        """
        vin = vin.strip().upper()
        data = await self.http.get_json(
            f"{self.base_url}/DecodeVin/{vin}",
            params={"format": "json"},
        )

        results = data.get("Results") if isinstance(data, dict) else None
        if not isinstance(results, list):
            raise UpstreamError("nhtsa returned no Results", service="nhtsa")

        vehicle = parse_decode_results([r for r in results if isinstance(r, dict)])
        if not vehicle.make or not vehicle.model:
            raise VINDecodeError(vin)

        logger.info(f"Decoded VIN {vin}: {vehicle.year} {vehicle.make} {vehicle.model}")
        return vehicle

    async def close(self) -> None:
        await self.http.close()
