import logging
from abc import ABC, abstractmethod

from ..errors import GenerationCancelled
from .models import WebSearchResult, fallback_results

logger = logging.getLogger(__name__)


class WebSearchBackend(ABC):
    """Abstract web search backend.

    Hides which search service answers the query. ``search`` only raises
    GenerationCancelled: other backend failures are logged and replaced by
    placeholder results.
    """

    def __init__(self, max_results: int = 5):
        self._max_results = max_results

    @property
    def max_results(self) -> int:
        return self._max_results

    @property
    @abstractmethod
    def name(self) -> str:
        """Short identifier used in logs."""

    @abstractmethod
    async def _search(self, query: str) -> list[WebSearchResult]:
        """Query the backend.

        Raises:
            Exception: Any backend failure; handled by ``search``
        """

    async def search(self, query: str) -> list[WebSearchResult]:
        """Search the web for a query.

        Args:
            query: Free-text query

        Returns:
            At most ``max_results`` results, or placeholder results if the
            backend failed

        Raises:
            GenerationCancelled: If the backend call was cancelled
        """
        logger.info("Searching (%s) for: %s", self.name, query)
        try:
            results = await self._search(query)
        except GenerationCancelled:
            raise
        except Exception as e:
            logger.warning("Web search via %s failed, using placeholder results: %s", self.name, e)
            return fallback_results(query)[: self._max_results]
        return results[: self._max_results]

    def cancel(self) -> bool:
        """Abort an in-flight backend call, if the backend supports it."""
        return False

    async def close(self) -> None:
        """Release backend resources."""
