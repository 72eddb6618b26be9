"""Google Gemini LLM provider implementation.

Uses the official Google GenAI SDK for async chat completions.
Reference: https://github.com/googleapis/python-genai

Note: Gemini reports safety blocks either as prompt feedback (no candidates)
or as a candidate with a safety finish reason and no text. Both surface as
BlockedError so the pipeline can show the reason to the user.
"""

import logging
from typing import Any

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from ...errors import BlockedError, EmptyResponseError, TransportError
from ..base import LLMProvider
from ..models import ChatMessage, LLMResponse

logger = logging.getLogger(__name__)

# Finish reasons that mean the candidate was withheld on policy grounds
BLOCKING_FINISH_REASONS = {"SAFETY", "PROHIBITED_CONTENT", "BLOCKLIST", "SPII", "RECITATION"}


def _enum_name(value: Any) -> str:
    """Return the bare name of an SDK enum or string value."""
    if value is None:
        return ""
    return getattr(value, "name", None) or str(value)


class GeminiProvider(LLMProvider):
    """Google Gemini LLM provider implementation.

    Hidden design decisions:
    - Google GenAI client initialization
    - Message format conversion (assistant -> "model", inline image parts)
    - Block / empty response detection
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-2.0-flash",
        top_k: int = 40,
        top_p: float = 0.95,
        max_output_tokens: int = 8192,
        **client_kwargs: Any
    ):
        """Initialize Gemini provider.

        Args:
            api_key: Google AI API key
            model: Default model (gemini-2.0-flash, gemini-2.5-flash, ...)
            top_k: Top-k sampling parameter
            top_p: Nucleus sampling parameter
            max_output_tokens: Default output token limit
            **client_kwargs: Additional kwargs for Client
        """
        self._model = model
        self._top_k = top_k
        self._top_p = top_p
        self._max_output_tokens = max_output_tokens
        self._client = genai.Client(api_key=api_key, **client_kwargs)

    @property
    def model(self) -> str:
        """Get the default model name."""
        return self._model

    def _convert_messages(self, messages: list[ChatMessage]) -> tuple[str | None, list[types.Content]]:
        """Convert ChatMessage list to Gemini format.

        Images are only forwarded on user turns, ahead of the text part.
        Turns with neither text nor images are dropped.

        Args:
            messages: List of chat messages

        Returns:
            Tuple of (system_instruction, contents)
        """
        system_instruction = None
        contents = []

        for msg in messages:
            if msg.role == "system":
                system_instruction = msg.content
                continue

            parts: list[types.Part] = []
            if msg.role == "user":
                for image in msg.images:
                    parts.append(types.Part.from_bytes(data=image.data, mime_type=image.media_type))
            if msg.content.strip():
                parts.append(types.Part(text=msg.content))
            if not parts:
                continue

            role = "model" if msg.role == "assistant" else "user"
            contents.append(types.Content(role=role, parts=parts))

        return system_instruction, contents

    def _extract_content(self, response: types.GenerateContentResponse) -> str:
        """Extract text from the first candidate.

        Raises:
            BlockedError: Prompt or candidate was blocked
            EmptyResponseError: No candidate or no text
        """
        feedback = response.prompt_feedback
        if feedback is not None and feedback.block_reason:
            raise BlockedError(_enum_name(feedback.block_reason))

        if not response.candidates:
            raise EmptyResponseError()

        candidate = response.candidates[0]
        texts: list[str] = []
        if candidate.content and candidate.content.parts:
            texts = [part.text for part in candidate.content.parts if part.text]
        if texts:
            return "".join(texts)

        finish_reason = _enum_name(candidate.finish_reason)
        if finish_reason in BLOCKING_FINISH_REASONS:
            raise BlockedError(finish_reason)
        raise EmptyResponseError()

    async def chat_completion(
        self,
        messages: list[ChatMessage],
        model: str | None = None,
        temperature: float = 0.7,
        max_tokens: int | None = None,
        **kwargs: Any
    ) -> LLMResponse:
        """Generate a chat completion using Google Gemini.

        Args:
            messages: Conversation history
            model: Model to use (overrides default)
            temperature: Sampling temperature
            max_tokens: Maximum tokens to generate
            **kwargs: Additional Gemini-specific parameters

        Returns:
            LLMResponse with generated content
        """
        model_to_use = model or self._model
        system_instruction, contents = self._convert_messages(messages)
        if not contents:
            raise EmptyResponseError("Nothing to send to the model")

        config = types.GenerateContentConfig(
            temperature=temperature,
            top_k=self._top_k,
            top_p=self._top_p,
            max_output_tokens=max_tokens or self._max_output_tokens,
            system_instruction=system_instruction,
            **kwargs
        )

        logger.debug("Gemini request: model=%s turns=%d", model_to_use, len(contents))
        try:
            response = await self._client.aio.models.generate_content(
                model=model_to_use,
                contents=contents,
                config=config
            )
        except genai_errors.APIError as e:
            logger.warning("Gemini API error %s: %s", e.code, e.message)
            raise TransportError(e.message or f"Gemini API error {e.code}") from e
        except httpx.HTTPError as e:
            logger.warning("Gemini transport error: %s", e)
            raise TransportError(str(e) or "Failed to reach Gemini") from e

        content = self._extract_content(response)

        usage = None
        if response.usage_metadata:
            usage = {
                "prompt_tokens": response.usage_metadata.prompt_token_count or 0,
                "completion_tokens": response.usage_metadata.candidates_token_count or 0,
                "total_tokens": response.usage_metadata.total_token_count or 0
            }

        return LLMResponse(
            content=content,
            model=model_to_use,
            usage=usage
        )
