"""
Vehicle image lookup.

Finds a representative photo for a year/make/model: Wikipedia page images
first, Brave image search as the fallback. Hits are cached; misses are
not, so a later request can still find an image.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Optional

from ..exceptions import UpstreamError
from ..http import HTTPClient
from .cache import TTLCache

logger = logging.getLogger(__name__)

WIKIPEDIA_API_URL = "https://en.wikipedia.org/w/api.php"
BRAVE_IMAGE_SEARCH_URL = "https://api.search.brave.com/res/v1/images/search"
USER_AGENT = "AskMyCar/1.0 (automotive assistant; contact@askmycar.app)"
THUMBNAIL_SIZE = 800

MAKE_NAMES = {
    "ram": "Ram",
    "gmc": "GMC",
    "bmw": "BMW",
    "mercedes-benz": "Mercedes-Benz",
    "mercedes benz": "Mercedes-Benz",
}


def normalize_make(make: str) -> str:
    make = make.strip()
    mapped = MAKE_NAMES.get(make.lower())
    if mapped:
        return mapped
    return make[:1].upper() + make[1:]


def _slug(value: str) -> str:
    return re.sub(r"\s+", "_", value)


def wiki_titles(make: str, model: str) -> list[str]:
    """Candidate Wikipedia article titles, most likely first.

    >>> wiki_titles("toyota", "Camry")[:2]
    ['Toyota_Camry', 'Toyota_Camry_(automobile)']
    """
    brand = _slug(normalize_make(make))
    model = model.strip()
    name = _slug(model)
    first_word = _slug(model.split(" ")[0])

    return [
        f"{brand}_{name}",
        f"{brand}_{name}_(automobile)",
        f"{brand}_{first_word}",
        f"{brand}_{name}_pickup",
        f"{brand}_pickup",
        f"{brand}_{name}_truck",
    ]


def cache_key(year: int, make: str, model: str) -> str:
    return f"{year}-{make}-{model}".lower()


def _page_thumbnail(data: Any) -> Optional[str]:
    query = data.get("query") if isinstance(data, dict) else None
    pages = query.get("pages") if isinstance(query, dict) else None
    if not isinstance(pages, dict) or not pages:
        return None

    page = next(iter(pages.values()))
    if not isinstance(page, dict) or page.get("pageid", -1) == -1 or "missing" in page:
        return None

    thumbnail = page.get("thumbnail")
    source = thumbnail.get("source") if isinstance(thumbnail, dict) else None
    if isinstance(source, str) and source:
        return source
    return None


def _first_https_image(data: Any) -> Optional[str]:
    results = data.get("results") if isinstance(data, dict) else None
    if not isinstance(results, list):
        return None

    for result in results:
        if not isinstance(result, dict):
            continue
        src = None
        for key in ("thumbnail", "image"):
            source = result.get(key)
            if isinstance(source, dict) and source.get("src"):
                src = source["src"]
                break
        if isinstance(src, str) and src.startswith("https"):
            return src
    return None


class CarImageService:
    """Looks up and caches car photos.

    Usage:
        service = CarImageService(cache=TTLCache(max_entries=512))
        url = await service.lookup(2019, "Toyota", "Camry")
    """

    def __init__(
        self,
        cache: TTLCache[str],
        brave_api_key: Optional[str] = None,
        wikipedia_client: Optional[HTTPClient] = None,
        brave_client: Optional[HTTPClient] = None,
        timeout_seconds: float = 4.0,
    ):
        """Initialize the image service.

        Args:
            cache: Shared cache of image URLs keyed by year/make/model
            brave_api_key: Brave subscription token; fallback disabled without it
            wikipedia_client: HTTP client for the MediaWiki API
            brave_client: HTTP client for Brave image search
            timeout_seconds: Timeout for each upstream request
        """
        self.cache = cache
        self.brave_api_key = brave_api_key
        self.wikipedia = wikipedia_client or HTTPClient(
            "wikipedia",
            timeout_seconds=timeout_seconds,
            headers={"User-Agent": USER_AGENT},
        )
        self.brave = brave_client or HTTPClient("brave", timeout_seconds=timeout_seconds)

    async def fetch_wikipedia_image(self, make: str, model: str) -> Optional[str]:
        """Try each candidate title until one has a page thumbnail."""
        for title in wiki_titles(make, model):
            try:
                data = await self.wikipedia.get_json(
                    WIKIPEDIA_API_URL,
                    params={
                        "action": "query",
                        "titles": title,
                        "prop": "pageimages",
                        "format": "json",
                        "pithumbsize": str(THUMBNAIL_SIZE),
                        "piprop": "thumbnail",
                    },
                )
            except UpstreamError as e:
                logger.debug(f"Wikipedia lookup for {title} failed: {e}")
                continue

            thumbnail = _page_thumbnail(data)
            if thumbnail:
                logger.debug(f"Wikipedia image for {title}: {thumbnail}")
                return thumbnail
        return None

    async def fetch_brave_image(self, year: int, make: str, model: str) -> Optional[str]:
        if not self.brave_api_key:
            return None

        try:
            data = await self.brave.get_json(
                BRAVE_IMAGE_SEARCH_URL,
                params={
                    "q": f"{year} {make} {model} car",
                    "count": "5",
                    "safesearch": "strict",
                },
                headers={
                    "X-Subscription-Token": self.brave_api_key,
                    "Accept": "application/json",
                },
            )
        except UpstreamError as e:
            logger.warning(f"Brave image search failed for {year} {make} {model}: {e}")
            return None

        return _first_https_image(data)

    async def lookup(self, year: int, make: str, model: str) -> Optional[str]:
        """Return an image URL for the vehicle, or None if nothing was found."""
        key = cache_key(year, make, model)
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        url = await self.fetch_wikipedia_image(make, model)
        if url is None:
            url = await self.fetch_brave_image(year, make, model)

        if url:
            self.cache.set(key, url)
        else:
            logger.info(f"No image found for {year} {make} {model}")
        return url

    async def close(self) -> None:
        await self.wikipedia.close()
        await self.brave.close()
