"""In-memory conversation store.

Simple dict-based storage for session-only state.
Data is lost when the application exits.
"""

from ..errors import ConversationNotFoundError, MessageFinalizedError
from .base import ConversationStore
from .models import Conversation, Message


class InMemoryConversationStore(ConversationStore):
    """In-memory conversation store (session-only)."""

    def __init__(self) -> None:
        self._conversations: dict[str, Conversation] = {}

    def _get(self, conversation_id: str) -> Conversation:
        try:
            return self._conversations[conversation_id]
        except KeyError:
            raise ConversationNotFoundError(conversation_id) from None

    async def create_conversation(self) -> Conversation:
        conversation = Conversation()
        self._conversations[conversation.id] = conversation
        return conversation.model_copy(update={"messages": list(conversation.messages)})

    async def get_conversation(self, conversation_id: str) -> Conversation:
        conversation = self._get(conversation_id)
        return conversation.model_copy(update={"messages": list(conversation.messages)})

    async def list_conversations(self) -> list[Conversation]:
        return [
            conv.model_copy(update={"messages": list(conv.messages)})
            for conv in self._conversations.values()
        ]

    async def get_messages(self, conversation_id: str) -> list[Message]:
        return list(self._get(conversation_id).messages)

    async def append_message(self, conversation_id: str, message: Message) -> None:
        self._get(conversation_id).messages.append(message)

    async def replace_message(self, conversation_id: str, message: Message) -> Message:
        messages = self._get(conversation_id).messages
        for index, existing in enumerate(messages):
            if existing.id != message.id:
                continue
            if not existing.is_loading:
                raise MessageFinalizedError(message.id)
            messages[index] = message
            return message
        raise KeyError(message.id)

    async def set_title(self, conversation_id: str, title: str) -> bool:
        conversation = self._get(conversation_id)
        if not conversation.has_default_title or not title:
            return False
        conversation.title = title
        return True

    @property
    def backend_type(self) -> str:
        return "memory"
