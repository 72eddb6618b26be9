from typing import Any

from ..config import GROQ_BASE_URL, GROQ_DEFAULT_MODEL
from .base import LLMProvider
from .providers import GeminiProvider, OpenAIProvider


def create_llm_provider(provider: str, **config: Any) -> LLMProvider:
    """Create an LLM provider instance.

    This factory function hides the instantiation logic for different providers.

    Args:
        provider: Provider type ('gemini', 'openai', 'groq')
        **config: Provider-specific configuration
            For Gemini:
                - api_key: str (required)
                - model: str (default: 'gemini-2.0-flash')
            For OpenAI:
                - api_key: str (required)
                - model: str (default: 'gpt-4o-mini')
                - base_url: str | None
                - organization: str | None
            For Groq (OpenAI-compatible):
                - api_key: str (required)
                - model: str
                - base_url: str (default: Groq endpoint)

    Returns:
        Initialized LLM provider instance

    Raises:
        ValueError: If provider type is not supported
        TypeError: If required configuration is missing

    Examples:
        >>> provider = create_llm_provider(
        ...     "gemini",
        ...     api_key="...",
        ...     model="gemini-2.0-flash"
        ... )

        >>> provider = create_llm_provider(
        ...     "groq",
        ...     api_key="gsk_...",
        ...     model="llama-3.3-70b-versatile"
        ... )
    """
    provider_lower = provider.lower()

    if provider_lower == "gemini":
        if "api_key" not in config:
            raise TypeError("Gemini provider requires 'api_key' in config")
        return GeminiProvider(**config)

    if provider_lower == "openai":
        if "api_key" not in config:
            raise TypeError("OpenAI provider requires 'api_key' in config")
        return OpenAIProvider(**config)

    if provider_lower == "groq":
        if "api_key" not in config:
            raise TypeError("Groq provider requires 'api_key' in config")
        config.setdefault("base_url", GROQ_BASE_URL)
        config.setdefault("model", GROQ_DEFAULT_MODEL)
        return OpenAIProvider(**config)

    raise ValueError(
        f"Unsupported provider: {provider}. "
        f"Supported providers: 'gemini', 'openai', 'groq'"
    )
