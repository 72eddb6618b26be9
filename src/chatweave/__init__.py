"""
Chatweave: a conversational assistant that enriches each message with
web search, tools, image generation and multi-step text generation.

This package follows Parnas's information hiding principles,
where each module hides a specific design decision.
"""

__version__ = "0.1.0"

from .config import ChatweaveConfig
from .errors import (
    BlockedError,
    ChatweaveError,
    ConversationBusyError,
    ConversationNotFoundError,
    CredentialMissingError,
    GenerationCancelled,
    GenerationError,
)
from .factory import create_pipeline
from .images import is_image_intent
from .memory import Conversation, Message, Role
from .pipeline import EnrichmentOptions, EnrichmentPipeline, ExchangeResult
from .tools import ToolDispatcher, ToolResult

__all__ = [
    "ChatweaveConfig",
    "BlockedError",
    "ChatweaveError",
    "ConversationBusyError",
    "ConversationNotFoundError",
    "CredentialMissingError",
    "GenerationCancelled",
    "GenerationError",
    "create_pipeline",
    "is_image_intent",
    "Conversation",
    "Message",
    "Role",
    "EnrichmentOptions",
    "EnrichmentPipeline",
    "ExchangeResult",
    "ToolDispatcher",
    "ToolResult",
]
