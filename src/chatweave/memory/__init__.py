"""Conversation state module for chatweave.

Holds the ordered messages of each conversation and its metadata.
"""

from .base import ConversationStore
from .factory import create_conversation_store
from .in_memory import InMemoryConversationStore
from .models import (
    DEFAULT_ROLES,
    Conversation,
    Message,
    MessageRole,
    Role,
    ToolUsage,
    WebSearchRecord,
    WebSearchResult,
    make_title,
)

__all__ = [
    "DEFAULT_ROLES",
    "Conversation",
    "ConversationStore",
    "Message",
    "MessageRole",
    "Role",
    "ToolUsage",
    "WebSearchRecord",
    "WebSearchResult",
    "InMemoryConversationStore",
    "create_conversation_store",
    "make_title",
]
