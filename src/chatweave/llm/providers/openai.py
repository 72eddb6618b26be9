import logging
from typing import Any

import openai
from openai import AsyncOpenAI

from ...errors import BlockedError, EmptyResponseError, TransportError
from ..base import LLMProvider
from ..models import ChatMessage, LLMResponse

logger = logging.getLogger(__name__)


def _to_openai_message(msg: ChatMessage) -> dict[str, Any]:
    """Convert a chat message to Chat Completions format.

    User turns with images use the multi-part content form with data URLs.
    """
    role = msg.role if msg.role in ("system", "user", "assistant") else "user"
    if role != "user" or not msg.images:
        return {"role": role, "content": msg.content}

    parts: list[dict[str, Any]] = [
        {"type": "image_url", "image_url": {"url": image.to_data_url()}}
        for image in msg.images
    ]
    if msg.content.strip():
        parts.append({"type": "text", "text": msg.content})
    return {"role": role, "content": parts}


class OpenAIProvider(LLMProvider):
    """OpenAI-compatible LLM provider implementation.

    Also serves any OpenAI-compatible endpoint (Groq, local servers)
    through ``base_url``.

    Hidden design decisions:
    - OpenAI API client initialization
    - Message format conversion
    - Mapping of API errors and content filtering
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o-mini",
        base_url: str | None = None,
        organization: str | None = None,
        **client_kwargs: Any
    ):
        """Initialize OpenAI provider.

        Args:
            api_key: API key for the endpoint
            model: Default model to use
            base_url: Optional custom API base URL
            organization: Optional organization ID
            **client_kwargs: Additional kwargs for AsyncOpenAI client
        """
        self._model = model
        self._client = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            organization=organization,
            **client_kwargs
        )

    @property
    def model(self) -> str:
        """Get the default model name."""
        return self._model

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
            messages: Conversation history
            model: Model to use (overrides default)
            temperature: Sampling temperature
            max_tokens: Maximum tokens to generate
            **kwargs: Additional parameters (e.g. response_format)

        Returns:
            LLMResponse with generated content
        """
        model_to_use = model or self._model

        # Build request params, only including max_tokens if set
        request_params: dict[str, Any] = {
            "model": model_to_use,
            "messages": [_to_openai_message(msg) for msg in messages],
            "temperature": temperature,
            **kwargs
        }
        if max_tokens is not None:
            request_params["max_tokens"] = max_tokens

        try:
            completion = await self._client.chat.completions.create(**request_params)
        except openai.APIError as e:
            logger.warning("OpenAI-compatible API error (%s): %s", model_to_use, e)
            raise TransportError(str(e)) from e

        if not completion.choices:
            raise EmptyResponseError()

        choice = completion.choices[0]
        content = choice.message.content or ""
        if not content:
            if choice.finish_reason == "content_filter":
                raise BlockedError("content_filter")
            raise EmptyResponseError()

        usage = None
        if completion.usage:
            usage = {
                "prompt_tokens": completion.usage.prompt_tokens,
                "completion_tokens": completion.usage.completion_tokens,
                "total_tokens": completion.usage.total_tokens
            }

        return LLMResponse(
            content=content,
            model=completion.model,
            usage=usage
        )

    async def close(self) -> None:
        """Close the OpenAI client."""
        await super().close()
        await self._client.close()
