"""
Owner's manual lookup tool.

Looks the vehicle up in the vehicledatabases.com manual registry (by VIN
when known, otherwise by year/make/model). The model gets a reference to
the manual when one is found and is told to rely on its own knowledge of
the manual otherwise. Never raises for lookup problems.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from ...http import HTTPClient
from ..domain.entities import FetchManualInput, Vehicle
from ..domain.ports import IToolHandler

logger = logging.getLogger(__name__)

VEHICLE_MANUALS_URL = "https://api.vehicledatabases.com/vehicle-manuals"


def _extract_manual_url(data: Any) -> Optional[str]:
    """Pull the manual URL out of a registry response (data.manualUrl or url)."""
    if not isinstance(data, dict):
        return None
    nested = data.get("data")
    if isinstance(nested, dict) and nested.get("manualUrl"):
        return str(nested["manualUrl"])
    if data.get("url"):
        return str(data["url"])
    return None


class ManualLookupTool(IToolHandler):
    """Handler for the fetch_manual tool.

    Attributes:
        api_key: vehicledatabases.com key; lookups are skipped without it
        http: HTTP client for the registry
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        http_client: Optional[HTTPClient] = None,
        timeout_seconds: float = 4.0,
    ):
        self.api_key = api_key
        self.http = http_client or HTTPClient(
            "vehicledatabases", timeout_seconds=timeout_seconds
        )

    @staticmethod
    def _lookup_params(vehicle: Vehicle) -> dict[str, str]:
        if vehicle.vin:
            return {"vin": vehicle.vin}
        return {
            "year": str(vehicle.year),
            "make": vehicle.make,
            "model": vehicle.model,
        }

    async def find_manual_url(self, vehicle: Vehicle) -> Optional[str]:
        """Query the registry for the vehicle's manual.

        Raises:
            UpstreamError: Registry unreachable or returned an error status
        """
        data = await self.http.get_json(
            VEHICLE_MANUALS_URL,
            params=self._lookup_params(vehicle),
            headers={"x-AuthKey": self.api_key or ""},
        )
        return _extract_manual_url(data)

    async def run(self, params: FetchManualInput, vehicle: Vehicle) -> str:
        topic = params.topic
        name = vehicle.display_name

        if self.api_key:
            try:
                manual_url = await self.find_manual_url(vehicle)
                if manual_url:
                    logger.info(f"Manual found for {name}: {manual_url}")
                    return (
                        f'Manual found at {manual_url}. Topic requested: "{topic}". '
                        f"Note: I'll use my knowledge of the {name} owner's manual "
                        f'to answer about "{topic}".'
                    )
                logger.info(f"No manual listed for {name}")
            except Exception as e:
                logger.warning(f"Manual lookup failed for {name}: {e}")
        else:
            logger.debug("VEHICLE_DB_API_KEY not set, using built-in manual knowledge")

        return (
            f'Using built-in knowledge of the {name} owner\'s manual for topic: "{topic}". '
            "I'll provide accurate information based on this vehicle's specifications."
        )

    async def close(self) -> None:
        await self.http.close()
