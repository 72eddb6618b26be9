"""Fake backends shared by the tests."""
import asyncio
import base64
from collections.abc import Awaitable, Callable
from typing import Any

from chatweave.images import ImageGenerationOptions, ImageGenerator
from chatweave.llm import ChatMessage, LLMProvider, LLMResponse
from chatweave.search import WebSearchBackend, WebSearchResult

# A 1x1 transparent PNG
PNG_BYTES = base64.b64decode(
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAQAAAC1HAwCAAAAC0lEQVR42mNkYAAAAAYAAjCB0C8AAAAASUVORK5CYII="
)
PNG_DATA_URL = "data:image/png;base64," + base64.b64encode(PNG_BYTES).decode("ascii")

Script = str | Exception | Callable[[list[ChatMessage]], Awaitable[str]]


async def hang(messages: list[ChatMessage]) -> str:
    """Scripted response that never completes on its own."""
    await asyncio.Event().wait()
    return ""


class FakeLLMProvider(LLMProvider):
    """LLM provider that replays scripted responses and records requests.

    Each call consumes the next script entry: a string is returned as the
    content, an exception is raised, and an async callable is awaited with
    the request messages. When the script runs out, ``default`` is returned.
    """

    def __init__(self, *script: Script, default: str = "fake reply"):
        self.script = list(script)
        self.default = default
        self.calls: list[list[ChatMessage]] = []
        self.kwargs: list[dict[str, Any]] = []
        self.closed = False

    @property
    def model(self) -> str:
        return "fake-model"

    async def chat_completion(
        self,
        messages: list[ChatMessage],
        model: str | None = None,
        temperature: float = 0.7,
        max_tokens: int | None = None,
        **kwargs: Any
    ) -> LLMResponse:
        self.calls.append(list(messages))
        self.kwargs.append({"temperature": temperature, "max_tokens": max_tokens, **kwargs})

        entry = self.script.pop(0) if self.script else self.default
        if isinstance(entry, Exception):
            raise entry
        if callable(entry):
            entry = await entry(messages)
        return LLMResponse(content=entry, model=model or self.model)

    async def close(self) -> None:
        await super().close()
        self.closed = True

    @property
    def prompts(self) -> list[str]:
        """Text of the last turn of every recorded call."""
        return [call[-1].content for call in self.calls]


class FakeWebSearch(WebSearchBackend):
    """Search backend returning canned results, or failing on demand."""

    def __init__(self, results: list[WebSearchResult] | None = None, error: Exception | None = None):
        super().__init__(max_results=5)
        self.results = results if results is not None else []
        self.error = error
        self.queries: list[str] = []

    @property
    def name(self) -> str:
        return "fake"

    async def _search(self, query: str) -> list[WebSearchResult]:
        self.queries.append(query)
        if self.error is not None:
            raise self.error
        return list(self.results)


class FakeImageGenerator(ImageGenerator):
    """Image backend returning a fixed reference, or failing on demand."""

    def __init__(self, reference: str | None = "https://images.example/cat.png", error: Exception | None = None):
        self.reference = reference
        self.error = error
        self.prompts: list[str] = []

    @property
    def name(self) -> str:
        return "fake"

    async def _generate(self, prompt: str, options: ImageGenerationOptions) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.reference or ""


