import logging

from ..errors import GenerationCancelled
from ..llm import ChatMessage, LLMProvider
from ..prompts import load_prompt, render_prompt
from .models import WebSearchResult

logger = logging.getLogger(__name__)


def format_results_for_prompt(results: list[WebSearchResult]) -> str:
    """Render results as numbered plain-text blocks for the summary prompt."""
    return "\n".join(
        f"Result {index}:\nTitle: {result.title}\nURL: {result.link}\nDescription: {result.snippet}\n"
        for index, result in enumerate(results, 1)
    )


def fallback_summary(results: list[WebSearchResult], query: str) -> str:
    """Markdown summary assembled locally from the results."""
    header = (
        f'# Search Results for "{query}"\n\n'
        f"Here's a summary of the top {len(results)} search results:\n\n"
    )
    body = "\n\n".join(
        f"## {index}. {result.title}\n{result.snippet}\n[View Source]({result.link})"
        for index, result in enumerate(results, 1)
    )
    return header + body


class ResultSummarizer:
    """Turns a list of search results into a markdown answer.

    ``summarize`` returns text unless the LLM call is cancelled: if the call
    fails, or no LLM is configured, the summary is built locally from the
    same results.
    """

    def __init__(self, llm: LLMProvider | None, owns_llm: bool = False):
        self._llm = llm
        self._owns_llm = owns_llm

    def cancel(self) -> bool:
        if self._llm is None:
            return False
        return self._llm.cancel()

    async def close(self) -> None:
        if self._owns_llm and self._llm is not None:
            await self._llm.close()

    async def summarize(self, results: list[WebSearchResult], query: str) -> str:
        if self._llm is None:
            return fallback_summary(results, query)

        messages = [
            ChatMessage(role="system", content=load_prompt("search_summary_system").strip()),
            ChatMessage(
                role="user",
                content=render_prompt(
                    "search_summary",
                    query=query,
                    results=format_results_for_prompt(results),
                ),
            ),
        ]
        try:
            response = await self._llm.generate(messages, temperature=0.3, max_tokens=1024)
        except GenerationCancelled:
            raise
        except Exception as e:
            logger.warning("Error generating search summary, using local fallback: %s", e)
            return fallback_summary(results, query)

        return response.content.strip() or fallback_summary(results, query)
