"""Unit tests for the web search module."""
import json

import httpx
import pytest
from hypothesis import given
from hypothesis import strategies as st

from chatweave.errors import GenerationCancelled, TransportError
from chatweave.search import (
    LLMWebSearch,
    ResultSummarizer,
    TavilyWebSearch,
    WebSearchBackend,
    WebSearchResult,
    create_web_search,
    fallback_results,
    fallback_summary,
)
from chatweave.search.tavily import TAVILY_SEARCH_URL

from fakes import FakeLLMProvider, FakeWebSearch


class TestWebSearchBackend:
    """Tests for the WebSearchBackend interface."""

    def test_backend_is_abstract(self):
        """Test that WebSearchBackend cannot be instantiated directly."""
        with pytest.raises(TypeError):
            WebSearchBackend()  # type: ignore

    @pytest.mark.asyncio
    async def test_failure_returns_placeholder_results(self):
        """Test that a failing backend yields the fallback results."""
        backend = FakeWebSearch(error=RuntimeError("boom"))
        results = await backend.search("rust async")

        assert results == fallback_results("rust async")

    @pytest.mark.asyncio
    async def test_results_truncated_to_max(self):
        """Test that at most max_results are returned."""
        many = [WebSearchResult(title=str(i), link=f"https://example.com/{i}") for i in range(9)]
        results = await FakeWebSearch(results=many).search("anything")

        assert len(results) == 5
        assert [r.title for r in results] == ["0", "1", "2", "3", "4"]

    @pytest.mark.asyncio
    async def test_empty_results_pass_through(self):
        """Test that an empty result list is not replaced by placeholders."""
        assert await FakeWebSearch(results=[]).search("nothing") == []

    @pytest.mark.asyncio
    async def test_cancellation_is_not_replaced(self):
        """Test that a cancelled search propagates instead of yielding placeholders."""
        with pytest.raises(GenerationCancelled):
            await FakeWebSearch(error=GenerationCancelled()).search("rust async")

    def test_base_cancel_is_noop(self):
        """Test that backends without a model have nothing to cancel."""
        assert FakeWebSearch().cancel() is False


class TestFallbackResults:
    """Tests for the deterministic placeholder results."""

    def test_five_results(self):
        """Test the number and sources of placeholder results."""
        results = fallback_results("quantum computing")

        assert len(results) == 5
        assert results[0].link == "https://www.google.com/search?q=quantum+computing"
        assert results[1].link == "https://en.wikipedia.org/wiki/quantum%20computing"
        assert results[0].title == "quantum computing - Latest Information"

    @given(st.text(max_size=50))
    def test_deterministic(self, query: str):
        """Property test: the same query always yields the same results."""
        assert fallback_results(query) == fallback_results(query)


class TestLLMWebSearch:
    """Tests for the LLM-backed search backend."""

    @pytest.mark.asyncio
    async def test_parses_results(self):
        """Test that the JSON results are mapped onto WebSearchResult."""
        llm = FakeLLMProvider(json.dumps({"results": [
            {"title": "Asyncio docs", "link": "https://docs.python.org/3/library/asyncio.html",
             "description": "Asynchronous I/O"},
            {"title": "Real Python", "url": "https://realpython.com/async-io-python/", "snippet": "Walkthrough"},
        ]}))
        search = LLMWebSearch(llm, request_kwargs={"response_format": {"type": "json_object"}})

        results = await search.search("python asyncio")

        assert [r.link for r in results] == [
            "https://docs.python.org/3/library/asyncio.html",
            "https://realpython.com/async-io-python/",
        ]
        assert results[1].snippet == "Walkthrough"
        assert llm.kwargs[0]["response_format"] == {"type": "json_object"}
        assert "python asyncio" in llm.prompts[0]

    @pytest.mark.asyncio
    async def test_missing_fields_get_defaults(self):
        """Test that results without links point at a search page."""
        llm = FakeLLMProvider('{"results": [{"title": "Only a title"}]}')
        results = await LLMWebSearch(llm).search("tide tables")

        assert results[0].link == "https://www.google.com/search?q=tide+tables"
        assert results[0].snippet == "No description available"

    @pytest.mark.asyncio
    async def test_malformed_response_uses_fallback(self):
        """Test that an unparseable response yields placeholder results."""
        llm = FakeLLMProvider("Sorry, I cannot browse the web.")
        results = await LLMWebSearch(llm).search("tide tables")

        assert results == fallback_results("tide tables")

    @pytest.mark.asyncio
    async def test_backend_error_uses_fallback(self):
        """Test that a provider failure yields placeholder results."""
        llm = FakeLLMProvider(TransportError("rate limited"))
        results = await LLMWebSearch(llm, max_results=3).search("tide tables")

        assert results == fallback_results("tide tables")[:3]

    @pytest.mark.asyncio
    async def test_cancelled_call_propagates(self):
        """Test that a cancelled provider call ends the search."""
        llm = FakeLLMProvider(GenerationCancelled())

        with pytest.raises(GenerationCancelled):
            await LLMWebSearch(llm).search("tide tables")

    @pytest.mark.asyncio
    async def test_close_only_owned_provider(self):
        """Test that the provider is closed only when the backend owns it."""
        shared = FakeLLMProvider()
        owned = FakeLLMProvider()

        await LLMWebSearch(shared).close()
        await LLMWebSearch(owned, owns_llm=True).close()

        assert shared.closed is False
        assert owned.closed is True


class TestTavilyWebSearch:
    """Tests for the Tavily backend."""

    @pytest.mark.asyncio
    async def test_maps_response(self):
        """Test that Tavily results are mapped and the key is sent."""
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"results": [
                {"title": "Tide", "url": "https://tides.example", "content": "x" * 600},
                {"title": "No url"},
            ]})

        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        search = TavilyWebSearch(api_key="tvly-test", client=client)

        results = await search.search("tide tables")

        assert len(results) == 1
        assert results[0].link == "https://tides.example"
        assert len(results[0].snippet) == 500
        assert str(seen[0].url) == TAVILY_SEARCH_URL
        assert seen[0].headers["Authorization"] == "Bearer tvly-test"
        assert json.loads(seen[0].content)["query"] == "tide tables"

        await search.close()
        assert not client.is_closed
        await client.aclose()

    @pytest.mark.asyncio
    async def test_http_error_uses_fallback(self):
        """Test that an HTTP error yields placeholder results."""
        client = httpx.AsyncClient(transport=httpx.MockTransport(lambda request: httpx.Response(401)))
        search = TavilyWebSearch(api_key="bad", client=client)

        assert await search.search("tide tables") == fallback_results("tide tables")
        await client.aclose()


class TestResultSummarizer:
    """Tests for search result summaries."""

    def test_fallback_summary_format(self, sample_results):
        """Test the locally assembled markdown summary."""
        summary = fallback_summary(sample_results, "python")

        assert summary.startswith('# Search Results for "python"\n\n')
        assert "Here's a summary of the top 3 search results:" in summary
        assert "## 1. Python\nThe Python language\n[View Source](https://python.org)" in summary
        assert "## 3. Docs" in summary

    @pytest.mark.asyncio
    async def test_uses_llm_summary(self, sample_results):
        """Test that the LLM summary is returned when available."""
        llm = FakeLLMProvider("  Python is a language [1].  ")
        summary = await ResultSummarizer(llm).summarize(sample_results, "python")

        assert summary == "Python is a language [1]."
        assert "https://pypi.org" in llm.prompts[0]

    @pytest.mark.asyncio
    async def test_llm_failure_uses_fallback(self, sample_results):
        """Test that a failed summary call falls back to the local summary."""
        llm = FakeLLMProvider(TransportError("down"))
        summary = await ResultSummarizer(llm).summarize(sample_results, "python")

        assert summary == fallback_summary(sample_results, "python")

    @pytest.mark.asyncio
    async def test_without_llm(self, sample_results):
        """Test that no provider means the local summary."""
        summary = await ResultSummarizer(None).summarize(sample_results, "python")
        assert summary == fallback_summary(sample_results, "python")

    @pytest.mark.asyncio
    async def test_cancelled_call_propagates(self, sample_results):
        """Test that a cancelled summary call is not replaced by the local summary."""
        llm = FakeLLMProvider(GenerationCancelled())

        with pytest.raises(GenerationCancelled):
            await ResultSummarizer(llm).summarize(sample_results, "python")

    @pytest.mark.asyncio
    async def test_close_only_owned_provider(self):
        """Test that the summarizer closes its provider only when it owns it."""
        shared = FakeLLMProvider()
        owned = FakeLLMProvider()

        await ResultSummarizer(shared).close()
        await ResultSummarizer(owned, owns_llm=True).close()
        await ResultSummarizer(None, owns_llm=True).close()

        assert shared.closed is False
        assert owned.closed is True


class TestSearchFactory:
    """Tests for the web search factory."""

    def test_create_llm_search(self):
        """Test creating the LLM backend."""
        assert isinstance(create_web_search("llm", llm=FakeLLMProvider()), LLMWebSearch)

    def test_llm_search_requires_provider(self):
        """Test that the LLM backend needs a provider."""
        with pytest.raises(TypeError):
            create_web_search("llm")

    def test_create_tavily(self):
        """Test creating the Tavily backend."""
        assert isinstance(create_web_search("TAVILY", api_key="k"), TavilyWebSearch)

    def test_unknown_provider(self):
        """Test that unknown backends are rejected."""
        with pytest.raises(ValueError):
            create_web_search("bing")
