"""Web search answered by a chat model.

The model is asked to return ranked results as JSON. Works with any
LLMProvider; OpenAI-compatible endpoints (Groq by default) can be put in
JSON mode through ``request_kwargs``.
"""

import logging
from typing import Any
from urllib.parse import quote_plus

from ..errors import ToolParseError
from ..llm import ChatMessage, LLMProvider
from ..parsing import extract_json_object
from ..prompts import load_prompt, render_prompt
from .base import WebSearchBackend
from .models import WebSearchResult

logger = logging.getLogger(__name__)


class LLMWebSearch(WebSearchBackend):
    """Search backend that asks an LLM for results."""

    def __init__(
        self,
        llm: LLMProvider,
        max_results: int = 5,
        request_kwargs: dict[str, Any] | None = None,
        owns_llm: bool = False
    ):
        """Initialize the backend.

        Args:
            llm: Provider used to produce results
            max_results: Maximum results returned
            request_kwargs: Extra provider parameters (e.g. response_format)
            owns_llm: Close the provider together with this backend
        """
        super().__init__(max_results=max_results)
        self._llm = llm
        self._request_kwargs = request_kwargs or {}
        self._owns_llm = owns_llm

    @property
    def name(self) -> str:
        return f"llm:{self._llm.model}"

    def cancel(self) -> bool:
        return self._llm.cancel()

    async def close(self) -> None:
        if self._owns_llm:
            await self._llm.close()

    async def _search(self, query: str) -> list[WebSearchResult]:
        messages = [
            ChatMessage(role="system", content=load_prompt("web_search_system").strip()),
            ChatMessage(
                role="user",
                content=render_prompt("web_search", query=query, max_results=str(self.max_results)),
            ),
        ]
        response = await self._llm.generate(
            messages,
            temperature=0.2,
            max_tokens=1024,
            **self._request_kwargs
        )

        data = extract_json_object(response.content)
        raw_results = data.get("results")
        if not isinstance(raw_results, list):
            raise ToolParseError("Unexpected response format: missing 'results' list")

        results = []
        for item in raw_results:
            if not isinstance(item, dict):
                continue
            results.append(WebSearchResult(
                title=str(item.get("title") or f"Search result for {query}"),
                link=str(item.get("link") or item.get("url") or f"https://www.google.com/search?q={quote_plus(query)}"),
                snippet=str(item.get("description") or item.get("snippet") or "No description available"),
            ))
        logger.debug("LLM search returned %d results", len(results))
        return results
