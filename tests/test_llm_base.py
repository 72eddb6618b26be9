"""Unit tests for the LLM provider base class and message models."""
import asyncio
import base64

import pytest

from chatweave.errors import (
    BlockedError,
    EmptyResponseError,
    GenerationCancelled,
    TransportError,
)
from chatweave.llm import ChatMessage, InlineImage, LLMProvider

from fakes import PNG_BYTES, PNG_DATA_URL, FakeLLMProvider, hang


async def _wait_for_calls(provider: FakeLLMProvider, count: int = 1) -> None:
    for _ in range(100):
        if provider.busy and len(provider.calls) >= count:
            return
        await asyncio.sleep(0)
    raise AssertionError("provider never started the call")


class TestLLMProvider:
    """Tests for the LLMProvider interface."""

    def test_provider_is_abstract(self):
        """Test that LLMProvider cannot be instantiated directly."""
        with pytest.raises(TypeError):
            LLMProvider()  # type: ignore

    @pytest.mark.asyncio
    async def test_generate_returns_response(self):
        """Test that generate returns the provider's response."""
        provider = FakeLLMProvider("hello")
        response = await provider.generate([ChatMessage(role="user", content="hi")])

        assert response.content == "hello"
        assert response.model == "fake-model"
        assert not provider.busy

    @pytest.mark.asyncio
    async def test_generation_errors_pass_through(self):
        """Test that GenerationError subclasses are raised unchanged."""
        provider = FakeLLMProvider(BlockedError("SAFETY"), EmptyResponseError())

        with pytest.raises(BlockedError, match="Content blocked: SAFETY"):
            await provider.generate([ChatMessage(role="user", content="hi")])
        with pytest.raises(EmptyResponseError):
            await provider.generate([ChatMessage(role="user", content="hi")])

    @pytest.mark.asyncio
    async def test_unexpected_errors_become_transport_errors(self):
        """Test that other exceptions are wrapped in TransportError."""
        provider = FakeLLMProvider(ConnectionError("connection reset"))

        with pytest.raises(TransportError, match="connection reset"):
            await provider.generate([ChatMessage(role="user", content="hi")])

    @pytest.mark.asyncio
    async def test_cancel_aborts_inflight_call(self):
        """Test that cancel() turns the in-flight call into GenerationCancelled."""
        provider = FakeLLMProvider(hang)
        task = asyncio.ensure_future(provider.generate([ChatMessage(role="user", content="hi")]))
        await _wait_for_calls(provider)

        assert provider.cancel() is True
        with pytest.raises(GenerationCancelled, match="Request cancelled"):
            await task
        assert not provider.busy

    @pytest.mark.asyncio
    async def test_new_call_supersedes_previous(self):
        """Test that starting a call cancels the one already in flight."""
        provider = FakeLLMProvider(hang, "second")
        first = asyncio.ensure_future(provider.generate([ChatMessage(role="user", content="one")]))
        await _wait_for_calls(provider)

        response = await provider.generate([ChatMessage(role="user", content="two")])

        assert response.content == "second"
        with pytest.raises(GenerationCancelled):
            await first

    def test_cancel_without_inflight_call(self):
        """Test that cancel() reports nothing to cancel when idle."""
        assert FakeLLMProvider().cancel() is False

    @pytest.mark.asyncio
    async def test_caller_cancellation_propagates(self):
        """Test that cancelling the caller raises CancelledError, not GenerationCancelled."""
        provider = FakeLLMProvider(hang)
        task = asyncio.ensure_future(provider.generate([ChatMessage(role="user", content="hi")]))
        await _wait_for_calls(provider)

        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

    @pytest.mark.asyncio
    async def test_context_manager_cancels_on_exit(self):
        """Test that leaving the context cancels any in-flight call."""
        provider = FakeLLMProvider(hang)
        async with provider:
            task = asyncio.ensure_future(provider.generate([ChatMessage(role="user", content="hi")]))
            await _wait_for_calls(provider)

        with pytest.raises(GenerationCancelled):
            await task


class TestInlineImage:
    """Tests for InlineImage data-URL handling."""

    def test_from_data_url(self):
        """Test decoding a base64 data URL."""
        image = InlineImage.from_data_url(PNG_DATA_URL)

        assert image.media_type == "image/png"
        assert image.data == PNG_BYTES
        assert image.to_data_url() == PNG_DATA_URL

    @pytest.mark.parametrize("value", [
        "https://example.com/cat.png",
        "data:image/png,rawbytes",
        "data:image/png;base64,@@not-base64@@",
    ])
    def test_rejects_invalid_urls(self, value: str):
        """Test that non data URLs raise ValueError."""
        with pytest.raises(ValueError):
            InlineImage.from_data_url(value)

    def test_base64_payload(self):
        """Test that to_base64 matches the standard encoding."""
        image = InlineImage(media_type="image/jpeg", data=b"\xff\xd8\xff")
        assert image.to_base64() == base64.b64encode(b"\xff\xd8\xff").decode("ascii")
