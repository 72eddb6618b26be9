"""Runtime configuration.

All credentials and tunables live in one explicit value that is handed to
the factory functions. Nothing else in the package reads the environment.
"""

import os

from pydantic import BaseModel, Field

DEFAULT_CONVERSATION_TITLE = "New chat"
DEFAULT_HISTORY_WINDOW = 100
DEFAULT_TITLE_MAX_LENGTH = 30

GROQ_BASE_URL = "https://api.groq.com/openai/v1"
GROQ_DEFAULT_MODEL = "llama-3.3-70b-versatile"


class ChatweaveConfig(BaseModel):
    """Credentials and settings for every backend adapter."""

    # Text generation
    llm_provider: str = Field(default="gemini", description="gemini or openai")
    gemini_api_key: str | None = Field(default=None, repr=False)
    gemini_model: str = "gemini-2.0-flash"
    openai_api_key: str | None = Field(default=None, repr=False)
    openai_base_url: str | None = None
    openai_model: str = "gpt-4o-mini"

    # Web search and result summarization
    search_provider: str = Field(default="llm", description="llm or tavily")
    groq_api_key: str | None = Field(default=None, repr=False)
    groq_model: str = GROQ_DEFAULT_MODEL
    tavily_api_key: str | None = Field(default=None, repr=False)
    search_max_results: int = Field(default=5, ge=1, le=20)

    # Image generation
    image_provider: str = Field(default="gradio", description="gradio or imagen")
    image_space: str = "Rooc/FLUX-Fast"
    hf_token: str | None = Field(default=None, repr=False)
    imagen_model: str = "imagen-3.0-generate-002"

    # Conversation behaviour
    history_window: int = Field(default=DEFAULT_HISTORY_WINDOW, ge=0)
    title_max_length: int = Field(default=DEFAULT_TITLE_MAX_LENGTH, ge=1)

    @classmethod
    def from_env(cls) -> "ChatweaveConfig":
        """Build a config from environment variables.

        Environment variables:
            LLM_PROVIDER: Text backend (gemini, openai; default: gemini)
            GEMINI_API_KEY / GEMINI_MODEL
            OPENAI_API_KEY / OPENAI_BASE_URL / OPENAI_CHAT_MODEL
            SEARCH_PROVIDER: llm or tavily (default: llm)
            GROQ_API_KEY / GROQ_MODEL: LLM used for search and summaries
            TAVILY_API_KEY
            IMAGE_PROVIDER: gradio or imagen (default: gradio)
            IMAGE_SPACE / HF_TOKEN / IMAGEN_MODEL
            HISTORY_WINDOW: Prior messages sent with each turn (default: 100)
            TITLE_MAX_LENGTH: Conversation title length (default: 30)
        """
        defaults = cls()
        return cls(
            llm_provider=os.getenv("LLM_PROVIDER", defaults.llm_provider).lower(),
            gemini_api_key=os.getenv("GEMINI_API_KEY") or None,
            gemini_model=os.getenv("GEMINI_MODEL", defaults.gemini_model),
            openai_api_key=os.getenv("OPENAI_API_KEY") or None,
            openai_base_url=os.getenv("OPENAI_BASE_URL") or None,
            openai_model=os.getenv("OPENAI_CHAT_MODEL", defaults.openai_model),
            search_provider=os.getenv("SEARCH_PROVIDER", defaults.search_provider).lower(),
            groq_api_key=os.getenv("GROQ_API_KEY") or None,
            groq_model=os.getenv("GROQ_MODEL", defaults.groq_model),
            tavily_api_key=os.getenv("TAVILY_API_KEY") or None,
            image_provider=os.getenv("IMAGE_PROVIDER", defaults.image_provider).lower(),
            image_space=os.getenv("IMAGE_SPACE", defaults.image_space),
            hf_token=os.getenv("HF_TOKEN") or None,
            imagen_model=os.getenv("IMAGEN_MODEL", defaults.imagen_model),
            history_window=int(os.getenv("HISTORY_WINDOW", str(defaults.history_window))),
            title_max_length=int(os.getenv("TITLE_MAX_LENGTH", str(defaults.title_max_length))),
        )
