"""Data models for conversation state.

These models define the structure of messages and conversations,
independent of the storage backend used.
"""

from datetime import datetime, timezone
from enum import Enum
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

from ..config import DEFAULT_CONVERSATION_TITLE
from ..search.models import WebSearchResult


def _new_id() -> str:
    return str(uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class MessageRole(str, Enum):
    """Who authored a message."""

    USER = "user"
    ASSISTANT = "assistant"


class WebSearchRecord(BaseModel):
    """Query and results attached to a message answered from the web."""

    model_config = ConfigDict(frozen=True)

    query: str
    results: list[WebSearchResult] = Field(default_factory=list)


class ToolUsage(BaseModel):
    """Tool invocation attached to a message answered by a tool."""

    model_config = ConfigDict(frozen=True)

    tool_type: str
    result: str
    explanation: str | None = None


class Message(BaseModel):
    """A single chat message.

    Messages are frozen. The loading placeholder is replaced (by id) exactly
    once with its final version; final messages are never touched again.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=_new_id)
    role: MessageRole
    content: str = ""
    timestamp: datetime = Field(default_factory=_utcnow)
    images: list[str] | None = Field(default=None, description="Image references (URLs or data URLs)")
    is_loading: bool = False
    reasoning: str | None = None
    thinking: str | None = None
    web_search: WebSearchRecord | None = None
    tools_used: ToolUsage | None = None


class Conversation(BaseModel):
    """Conversation metadata and its ordered messages."""

    id: str = Field(default_factory=_new_id)
    title: str = DEFAULT_CONVERSATION_TITLE
    created_at: datetime = Field(default_factory=_utcnow)
    messages: list[Message] = Field(default_factory=list)

    @property
    def has_default_title(self) -> bool:
        return self.title == DEFAULT_CONVERSATION_TITLE

    @property
    def pending_message(self) -> Message | None:
        """The loading placeholder, if a request is in flight."""
        for message in reversed(self.messages):
            if message.is_loading:
                return message
        return None


class Role(BaseModel):
    """Persona injected as a leading turn of every prompt."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=_new_id)
    name: str
    description: str
    is_custom: bool = False

    def to_prompt(self) -> str:
        return f"You are acting as {self.name}. {self.description}\n\n"


DEFAULT_ROLES: list[Role] = [
    Role(
        id="default",
        name="Assistant",
        description="A helpful, harmless, and honest AI assistant that provides information and assistance.",
    ),
    Role(
        id="coder",
        name="Code Assistant",
        description="An AI specialized in helping with programming tasks, debugging, and software development.",
    ),
    Role(
        id="tutor",
        name="Learning Tutor",
        description="An AI focused on education, explaining concepts clearly and helping users learn new topics.",
    ),
    Role(
        id="creative",
        name="Creative Writer",
        description="An AI focused on creative writing, storytelling, and generating imaginative content.",
    ),
]


def make_title(text: str, max_length: int) -> str:
    """Derive a conversation title from the first user message."""
    text = text.strip()
    if len(text) > max_length:
        return f"{text[:max_length]}..."
    return text
