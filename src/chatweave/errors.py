"""Exception hierarchy for chatweave.

Backend adapters raise GenerationError subclasses; the pipeline converts
them into message content at the settle boundary. The remaining errors
guard the conversation store and the pipeline entry point.
"""


class ChatweaveError(Exception):
    """Base class for all chatweave errors."""


class GenerationError(ChatweaveError):
    """A text-generation call did not produce text."""


class BlockedError(GenerationError):
    """The backend refused the request on policy grounds.

    The message is shown to the user verbatim.
    """

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Content blocked: {reason}")


class EmptyResponseError(GenerationError):
    """The backend returned no candidate or no text."""

    def __init__(self, message: str = "No response generated"):
        super().__init__(message)


class GenerationCancelled(GenerationError):
    """The in-flight call was aborted by the caller."""

    def __init__(self, message: str = "Request cancelled"):
        super().__init__(message)


class TransportError(GenerationError):
    """Network, HTTP or SDK level failure."""


class ToolParseError(ChatweaveError):
    """A tool response did not contain a usable JSON object."""


class CredentialMissingError(ChatweaveError):
    """No API credential is configured for a backend."""


class ConversationNotFoundError(ChatweaveError):
    """The requested conversation id is unknown."""

    def __init__(self, conversation_id: str):
        self.conversation_id = conversation_id
        super().__init__(f"Conversation not found: {conversation_id}")


class ConversationBusyError(ChatweaveError):
    """A request is already in flight for the conversation."""

    def __init__(self, conversation_id: str):
        self.conversation_id = conversation_id
        super().__init__(
            f"Conversation {conversation_id} already has a pending message"
        )


class MessageFinalizedError(ChatweaveError):
    """Attempted to modify a message that is no longer loading."""

    def __init__(self, message_id: str):
        self.message_id = message_id
        super().__init__(f"Message {message_id} is already final")
