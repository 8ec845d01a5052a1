"""Vehicle lookups: VIN decoding, car images and the image cache."""

from .api import router, create_vehicle_dependencies
from .cache import CacheStats, TTLCache
from .images import CarImageService, wiki_titles
from .nhtsa import DecodedVehicle, VINDecoder

__all__ = [
    "router",
    "create_vehicle_dependencies",
    "CacheStats",
    "TTLCache",
    "CarImageService",
    "wiki_titles",
    "DecodedVehicle",
    "VINDecoder",
]
