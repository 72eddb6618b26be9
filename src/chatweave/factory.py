"""Builds adapters and the pipeline from a ChatweaveConfig.

Hides which concrete backend answers each capability. Missing credentials
produce ``None`` adapters; the pipeline reports them to the user instead
of failing at construction time.
"""

import logging

from .config import ChatweaveConfig
from .images import ImageGenerator, create_image_generator
from .llm import LLMProvider, create_llm_provider
from .memory import ConversationStore, create_conversation_store
from .pipeline import EnrichmentPipeline
from .search import ResultSummarizer, WebSearchBackend, create_web_search
from .tools import ToolDispatcher

logger = logging.getLogger(__name__)

JSON_MODE = {"response_format": {"type": "json_object"}}


def build_text_provider(config: ChatweaveConfig) -> LLMProvider | None:
    """Create the main text-generation provider, or None without a key."""
    if config.llm_provider == "gemini":
        if not config.gemini_api_key:
            logger.warning("GEMINI_API_KEY not set, text generation disabled")
            return None
        return create_llm_provider("gemini", api_key=config.gemini_api_key, model=config.gemini_model)

    if config.llm_provider == "openai":
        if not config.openai_api_key:
            logger.warning("OPENAI_API_KEY not set, text generation disabled")
            return None
        return create_llm_provider(
            "openai",
            api_key=config.openai_api_key,
            model=config.openai_model,
            base_url=config.openai_base_url,
        )

    raise ValueError(f"Unknown LLM provider: {config.llm_provider}")


def build_search_provider(config: ChatweaveConfig) -> LLMProvider | None:
    """Create the LLM used for web search and summaries.

    Uses Groq when a key is configured, otherwise shares nothing and
    returns None so callers can fall back to the main provider.
    """
    if config.groq_api_key:
        return create_llm_provider("groq", api_key=config.groq_api_key, model=config.groq_model)
    return None


def build_web_search(
    config: ChatweaveConfig,
    search_llm: LLMProvider | None,
    fallback_llm: LLMProvider | None
) -> WebSearchBackend | None:
    if config.search_provider == "tavily":
        if not config.tavily_api_key:
            logger.warning("TAVILY_API_KEY not set, web search disabled")
            return None
        return create_web_search(
            "tavily",
            api_key=config.tavily_api_key,
            max_results=config.search_max_results,
        )

    if config.search_provider == "llm":
        if search_llm is not None:
            return create_web_search(
                "llm",
                llm=search_llm,
                max_results=config.search_max_results,
                request_kwargs=JSON_MODE,
            )
        if fallback_llm is not None:
            return create_web_search("llm", llm=fallback_llm, max_results=config.search_max_results)
        logger.warning("No LLM available for web search, web search disabled")
        return None

    raise ValueError(f"Unknown search provider: {config.search_provider}")


def build_image_generator(config: ChatweaveConfig) -> ImageGenerator | None:
    if config.image_provider == "gradio":
        return create_image_generator("gradio", space=config.image_space, hf_token=config.hf_token)

    if config.image_provider == "imagen":
        if not config.gemini_api_key:
            logger.warning("GEMINI_API_KEY not set, image generation disabled")
            return None
        return create_image_generator("imagen", api_key=config.gemini_api_key, model=config.imagen_model)

    if config.image_provider == "none":
        return None

    raise ValueError(f"Unknown image provider: {config.image_provider}")


def create_pipeline(
    config: ChatweaveConfig,
    store: ConversationStore | None = None
) -> EnrichmentPipeline:
    """Create a fully wired EnrichmentPipeline.

    Args:
        config: Credentials and settings
        store: Conversation store (defaults to in-memory)

    Returns:
        EnrichmentPipeline ready to process messages
    """
    llm = build_text_provider(config)
    search_llm = build_search_provider(config)

    return EnrichmentPipeline(
        llm=llm,
        store=store or create_conversation_store("memory"),
        web_search=build_web_search(config, search_llm, llm),
        summarizer=ResultSummarizer(search_llm or llm, owns_llm=search_llm is not None),
        image_generator=build_image_generator(config),
        tools=ToolDispatcher(llm),
        history_window=config.history_window,
        title_max_length=config.title_max_length,
    )
