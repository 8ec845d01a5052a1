"""
Integration tests for GET /api/vin and GET /api/car-image.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from src.askmycar.exceptions import UpstreamError, VINDecodeError
from src.askmycar.vehicles import create_vehicle_dependencies, router
from src.askmycar.vehicles.nhtsa import DecodedVehicle

VIN = "4T1B11HK5KU123456"


@pytest.fixture
def decoder():
    decoder = MagicMock()
    decoder.decode = AsyncMock()
    return decoder


@pytest.fixture
def image_service():
    service = MagicMock()
    service.lookup = AsyncMock()
    return service


@pytest.fixture
def client(decoder, image_service):
    app = FastAPI()
    app.include_router(router)
    create_vehicle_dependencies(decoder, image_service)
    return TestClient(app)


class TestDecodeVIN:
    def test_decoded_vehicle(self, client, decoder):
        decoder.decode.return_value = DecodedVehicle(
            make="TOYOTA",
            model="Camry",
            year=2019,
            trim="SE",
            engine="2.5L 4-cyl",
            body_style="Sedan/Saloon",
            drive_type="FWD/Front-Wheel Drive",
            fuel_type="Gasoline",
            manufacturer="TOYOTA MOTOR MANUFACTURING, KENTUCKY, INC.",
        )

        response = client.get("/api/vin", params={"vin": VIN})

        assert response.status_code == 200
        body = response.json()
        assert body["make"] == "TOYOTA"
        assert body["year"] == 2019
        assert body["bodyStyle"] == "Sedan/Saloon"
        assert body["driveType"] == "FWD/Front-Wheel Drive"
        assert body["fuelType"] == "Gasoline"
        decoder.decode.assert_awaited_once_with(VIN)

    @pytest.mark.parametrize("params", [{}, {"vin": "123"}, {"vin": VIN + "X"}])
    def test_vin_length(self, client, decoder, params):
        response = client.get("/api/vin", params=params)

        assert response.status_code == 400
        assert response.json() == {"error": "VIN must be 17 characters"}
        decoder.decode.assert_not_called()

    def test_undecodable_vin(self, client, decoder):
        decoder.decode.side_effect = VINDecodeError(VIN)

        response = client.get("/api/vin", params={"vin": VIN})

        assert response.status_code == 400
        assert response.json()["error"].startswith("Could not decode VIN")

    def test_upstream_failure(self, client, decoder):
        decoder.decode.side_effect = UpstreamError("nhtsa returned HTTP 503", service="nhtsa", status_code=503)

        response = client.get("/api/vin", params={"vin": VIN})

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to decode VIN"}


class TestCarImage:
    def test_found(self, client, image_service):
        image_service.lookup.return_value = "https://upload.wikimedia.org/camry.jpg"

        response = client.get(
            "/api/car-image", params={"year": "2019", "make": "Toyota", "model": "Camry"}
        )

        assert response.status_code == 200
        assert response.json() == {"url": "https://upload.wikimedia.org/camry.jpg"}
        image_service.lookup.assert_awaited_once_with(2019, "Toyota", "Camry")

    def test_not_found(self, client, image_service):
        image_service.lookup.return_value = None

        response = client.get(
            "/api/car-image", params={"year": "2019", "make": "Toyota", "model": "Camry"}
        )

        assert response.json() == {"url": None}

    @pytest.mark.parametrize(
        "params",
        [
            {"make": "Toyota", "model": "Camry"},
            {"year": "2019", "model": "Camry"},
            {"year": "2019", "make": "Toyota"},
            {"year": "abc", "make": "Toyota", "model": "Camry"},
        ],
    )
    def test_missing_parameters(self, client, image_service, params):
        response = client.get("/api/car-image", params=params)

        assert response.status_code == 400
        assert response.json() == {"error": "Missing year, make, or model"}
        image_service.lookup.assert_not_called()
