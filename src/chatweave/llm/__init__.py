from .base import LLMProvider
from .factory import create_llm_provider
from .models import ChatMessage, InlineImage, LLMResponse
from .providers import GeminiProvider, OpenAIProvider

__all__ = [
    "LLMProvider",
    "create_llm_provider",
    "ChatMessage",
    "InlineImage",
    "LLMResponse",
    "GeminiProvider",
    "OpenAIProvider",
]
