"""Abstract base class for conversation stores.

This module defines the interface for conversation state storage.
The abstraction hides:
- Storage format
- Persistence mechanism
- How the loading-placeholder invariant is enforced
"""

from abc import ABC, abstractmethod

from .models import Conversation, Message


class ConversationStore(ABC):
    """Abstract conversation store.

    Owns the ordered message list of every conversation and its metadata.
    The pipeline is the only writer: it appends the user message and the
    loading placeholder, then replaces the placeholder once it settles.
    """

    @abstractmethod
    async def create_conversation(self) -> Conversation:
        """Create an empty conversation with the default title."""

    @abstractmethod
    async def get_conversation(self, conversation_id: str) -> Conversation:
        """Return a snapshot of a conversation.

        Raises:
            ConversationNotFoundError: If the id is unknown
        """

    @abstractmethod
    async def list_conversations(self) -> list[Conversation]:
        """Return snapshots of all conversations, oldest first."""

    @abstractmethod
    async def get_messages(self, conversation_id: str) -> list[Message]:
        """Return the ordered messages of a conversation."""

    @abstractmethod
    async def append_message(self, conversation_id: str, message: Message) -> None:
        """Append a message to a conversation."""

    @abstractmethod
    async def replace_message(self, conversation_id: str, message: Message) -> Message:
        """Replace a loading message (matched by id) with its final version.

        Raises:
            MessageFinalizedError: If the stored message is not loading
            KeyError: If no message has that id
        """

    @abstractmethod
    async def set_title(self, conversation_id: str, title: str) -> bool:
        """Set the title if it is still the default.

        Returns:
            True if the title was changed
        """

    @property
    @abstractmethod
    def backend_type(self) -> str:
        """Get the backend type identifier."""
