"""Pytest configuration and shared fixtures."""
from typing import Any

import pytest

from chatweave.memory import InMemoryConversationStore
from chatweave.pipeline import EnrichmentPipeline
from chatweave.search import WebSearchResult

from fakes import FakeLLMProvider

_UNSET = object()


@pytest.fixture
def sample_results():
    """Return three web search results."""
    return [
        WebSearchResult(title="Python", link="https://python.org", snippet="The Python language"),
        WebSearchResult(title="PyPI", link="https://pypi.org", snippet="Package index"),
        WebSearchResult(title="Docs", link="https://docs.python.org", snippet="Documentation"),
    ]


@pytest.fixture
def store():
    """Return an empty in-memory conversation store."""
    return InMemoryConversationStore()


@pytest.fixture
def make_pipeline(store):
    """Return a factory building a pipeline around fake backends."""
    def _make(llm: Any = _UNSET, **kwargs: Any) -> EnrichmentPipeline:
        if llm is _UNSET:
            llm = FakeLLMProvider()
        return EnrichmentPipeline(llm=llm, store=store, **kwargs)
    return _make
