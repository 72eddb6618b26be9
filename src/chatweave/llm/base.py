import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Any

from ..errors import GenerationCancelled, GenerationError, TransportError
from .models import ChatMessage, LLMResponse

logger = logging.getLogger(__name__)


class LLMProvider(ABC):
    """Abstract base class for text-generation providers.

    This module hides the design decision of which LLM backend to use.
    Implementations must handle provider-specific details like:
    - API client setup and authentication
    - Request/response format conversion
    - Mapping SDK errors onto the GenerationError hierarchy

    Callers go through ``generate``, which owns a single-slot cancellation
    token: at most one call is in flight per instance, starting a new call
    cancels the previous one, and ``cancel()`` aborts the current one.

    Supports async context manager protocol for proper resource cleanup:
        async with provider:
            response = await provider.generate(messages)
    """

    _inflight: asyncio.Task | None = None

    @property
    @abstractmethod
    def model(self) -> str:
        """Get the default model name."""

    @abstractmethod
    async def chat_completion(
        self,
        messages: list[ChatMessage],
        model: str | None = None,
        temperature: float = 0.7,
        max_tokens: int | None = None,
        **kwargs: Any
    ) -> LLMResponse:
        """Generate a chat completion.

        Args:
            messages: List of chat messages forming the conversation history
            model: Model to use (None uses provider's default)
            temperature: Sampling temperature (0.0 to 2.0)
            max_tokens: Maximum tokens to generate
            **kwargs: Provider-specific parameters

        Returns:
            LLMResponse containing generated content and metadata

        Raises:
            BlockedError: The backend refused the prompt
            EmptyResponseError: No candidate text was returned
            TransportError: Network or API failure
        """

    async def generate(self, messages: list[ChatMessage], **kwargs: Any) -> LLMResponse:
        """Run ``chat_completion`` in the cancellable slot.

        Raises:
            GenerationCancelled: The call was cancelled via ``cancel()`` or
                superseded by a newer call
            GenerationError: Any other backend failure
        """
        self.cancel()
        task = asyncio.ensure_future(self.chat_completion(messages, **kwargs))
        self._inflight = task
        try:
            return await task
        except asyncio.CancelledError:
            current = asyncio.current_task()
            if current is not None and current.cancelling():
                # The caller itself is being cancelled; let it unwind.
                raise
            logger.info("Generation cancelled (%s)", self.model)
            raise GenerationCancelled() from None
        except GenerationError:
            raise
        except Exception as e:
            logger.exception("Unexpected error from %s", self.model)
            raise TransportError(str(e) or type(e).__name__) from e
        finally:
            if self._inflight is task:
                self._inflight = None

    def cancel(self) -> bool:
        """Abort the in-flight call, if any.

        Returns:
            True if a call was cancelled
        """
        task = self._inflight
        self._inflight = None
        if task is not None and not task.done():
            task.cancel()
            return True
        return False

    @property
    def busy(self) -> bool:
        """Whether a call is currently in flight."""
        return self._inflight is not None and not self._inflight.done()

    async def close(self) -> None:
        """Close any open connections or resources."""
        self.cancel()

    async def __aenter__(self) -> "LLMProvider":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit with automatic cleanup.

        Note: Suppresses "Event loop is closed" errors during cleanup.
        This is a known harmless race condition in httpx/anyio cleanup:
        https://github.com/encode/httpx/issues/914
        """
        try:
            await self.close()
        except RuntimeError as e:
            # Suppress harmless cleanup errors from httpx/anyio
            if "Event loop is closed" not in str(e):
                raise
