from typing import Any

from ..llm import LLMProvider
from .base import WebSearchBackend
from .llm_search import LLMWebSearch
from .tavily import TavilyWebSearch


def create_web_search(
    provider: str,
    llm: LLMProvider | None = None,
    **config: Any
) -> WebSearchBackend:
    """Create a web search backend.

    This factory function hides the instantiation logic for search backends.

    Args:
        provider: Backend type ('llm', 'tavily')
        llm: LLM provider answering queries (required for 'llm')
        **config: Backend-specific configuration
            For llm:
                - max_results: int (default: 5)
                - request_kwargs: dict | None
                - owns_llm: bool (default: False)
            For tavily:
                - api_key: str (required)
                - max_results: int (default: 5)
                - search_depth: str (default: 'basic')

    Returns:
        Initialized web search backend

    Raises:
        ValueError: If backend type is not supported
        TypeError: If required configuration is missing

    Examples:
        >>> search = create_web_search("tavily", api_key="tvly-...")

        >>> search = create_web_search(
        ...     "llm",
        ...     llm=groq_provider,
        ...     request_kwargs={"response_format": {"type": "json_object"}}
        ... )
    """
    provider_lower = provider.lower()

    if provider_lower == "llm":
        if llm is None:
            raise TypeError("LLM web search requires an 'llm' provider")
        return LLMWebSearch(llm, **config)

    if provider_lower == "tavily":
        if "api_key" not in config:
            raise TypeError("Tavily web search requires 'api_key' in config")
        return TavilyWebSearch(**config)

    raise ValueError(
        f"Unsupported web search provider: {provider}. "
        f"Supported providers: 'llm', 'tavily'"
    )
