"""
Web search tool backed by the Brave Search API.

Used for recalls, TSBs, common issues and anything else a manual would not
cover. Always returns text: a formatted result list, "No results found.",
or a fallback sentence naming the query.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from ...http import HTTPClient
from ..domain.entities import Vehicle, WebSearchInput
from ..domain.ports import IToolHandler

logger = logging.getLogger(__name__)

BRAVE_WEB_SEARCH_URL = "https://api.search.brave.com/res/v1/web/search"
MAX_RESULTS = 4
NO_RESULTS = "No results found."


def format_results(results: list[dict[str, Any]]) -> str:
    """Render search hits as title/description/source triples."""
    return "\n\n".join(
        f"**{r.get('title', '')}**\n{r.get('description', '')}\nSource: {r.get('url', '')}"
        for r in results
    )


class WebSearchTool(IToolHandler):
    """Handler for the web_search tool.

    Attributes:
        api_key: Brave subscription token; search is disabled without it
        http: HTTP client with a short total timeout
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        http_client: Optional[HTTPClient] = None,
        timeout_seconds: float = 4.0,
    ):
        self.api_key = api_key
        self.http = http_client or HTTPClient("brave", timeout_seconds=timeout_seconds)

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    async def search(self, query: str) -> list[dict[str, Any]]:
        """Run a Brave web search and return at most MAX_RESULTS hits.

        Raises:
            UpstreamError: Request failed or returned an error status
        """
        data = await self.http.get_json(
            BRAVE_WEB_SEARCH_URL,
            params={"q": query, "count": "5", "freshness": "py"},
            headers={
                "X-Subscription-Token": self.api_key or "",
                "Accept": "application/json",
            },
        )
        web = data.get("web") if isinstance(data, dict) else None
        results = web.get("results") if isinstance(web, dict) else None
        if not isinstance(results, list):
            return []
        return [r for r in results if isinstance(r, dict)][:MAX_RESULTS]

    async def run(self, params: WebSearchInput, vehicle: Vehicle) -> str:
        query = params.query

        if not self.enabled:
            return (
                "Web search unavailable. I'll answer based on my training "
                f"knowledge about: {query}"
            )

        try:
            results = await self.search(query)
        except Exception as e:
            logger.warning(f"Web search failed for {query!r}: {e}")
            return f"Search failed. Answering from training knowledge about: {query}"

        logger.info(f"Web search returned {len(results)} results for {query!r}")
        if not results:
            return NO_RESULTS
        return format_results(results)

    async def close(self) -> None:
        await self.http.close()
