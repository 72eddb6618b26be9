from .base import WebSearchBackend
from .factory import create_web_search
from .llm_search import LLMWebSearch
from .models import WebSearchResult, fallback_results
from .summarizer import ResultSummarizer, fallback_summary
from .tavily import TavilyWebSearch

__all__ = [
    "WebSearchBackend",
    "create_web_search",
    "LLMWebSearch",
    "TavilyWebSearch",
    "WebSearchResult",
    "fallback_results",
    "ResultSummarizer",
    "fallback_summary",
]
