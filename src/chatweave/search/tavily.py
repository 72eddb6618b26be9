"""Tavily search provider integration."""

import logging

import httpx

from .base import WebSearchBackend
from .models import WebSearchResult

logger = logging.getLogger(__name__)

TAVILY_SEARCH_URL = "https://api.tavily.com/search"
MAX_SNIPPET_CHARS = 500


class TavilyWebSearch(WebSearchBackend):
    """Web search through the Tavily REST API."""

    def __init__(
        self,
        api_key: str,
        max_results: int = 5,
        search_depth: str = "basic",
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None
    ):
        """Initialize the backend.

        Args:
            api_key: Tavily API key
            max_results: Maximum results returned (1-20)
            search_depth: "basic" or "advanced"
            timeout: Request timeout in seconds
            client: Optional shared httpx client
        """
        super().__init__(max_results=max_results)
        self._api_key = api_key
        self._search_depth = search_depth
        self._timeout = timeout
        self._client = client
        self._owns_client = client is None

    @property
    def name(self) -> str:
        return "tavily"

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)
        return self._client

    async def _search(self, query: str) -> list[WebSearchResult]:
        payload = {
            "query": query,
            "max_results": self.max_results,
            "search_depth": self._search_depth,
            "include_answer": False,
        }
        response = await self._get_client().post(
            TAVILY_SEARCH_URL,
            json=payload,
            headers={
                "Authorization": f"Bearer {self._api_key}",
                "Content-Type": "application/json",
            },
        )
        logger.info("Tavily API response status: %s", response.status_code)
        response.raise_for_status()

        data = response.json()
        results = []
        for item in data.get("results") or []:
            link = item.get("url")
            if not link:
                continue
            results.append(WebSearchResult(
                title=item.get("title") or link,
                link=link,
                snippet=(item.get("content") or "")[:MAX_SNIPPET_CHARS],
            ))
        if not results:
            logger.warning("Tavily returned empty results for query '%s'", query)
        return results

    async def close(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None
