"""Data structures for the enrichment pipeline."""

from dataclasses import dataclass, field
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from ..llm import InlineImage
from ..memory import Message, ToolUsage, WebSearchRecord


class PipelineStage(str, Enum):
    """States of one request, in execution order."""

    START = "start"
    WEB_SEARCH = "web_search"
    TOOL = "tool"
    IMAGE = "image"
    TEXT = "text"
    SETTLE = "settle"


class EnrichmentOptions(BaseModel):
    """Caller-supplied toggles for one request."""

    model_config = ConfigDict(frozen=True)

    images: list[str] = Field(default_factory=list, description="Attached images as data URLs")
    use_reasoning: bool = False
    use_web_search: bool = False
    use_thinking: bool = False
    tool: str | None = Field(default=None, description="Tool to run instead of a plain answer")


class ExchangeResult(BaseModel):
    """Outcome of ``process_message``.

    ``error`` is a notification-level description for the host (toast,
    log line); the assistant message already carries user-facing content.
    """

    model_config = ConfigDict(frozen=True)

    conversation_id: str
    user_message: Message
    assistant_message: Message
    error: str | None = None
    stages: list[PipelineStage] = Field(default_factory=list, description="Stages that ran")


@dataclass
class PipelineRequest:
    """Inputs shared by every stage of one run."""

    conversation_id: str
    text: str
    options: EnrichmentOptions
    history: list[Message]
    attachments: list[InlineImage] = field(default_factory=list)


@dataclass
class MessageDraft:
    """Accumulates stage outputs until the placeholder is settled."""

    content: str = ""
    images: list[str] | None = None
    reasoning: str | None = None
    thinking: str | None = None
    web_search: WebSearchRecord | None = None
    tools_used: ToolUsage | None = None
    caveat: str | None = None
    stages: list[PipelineStage] = field(default_factory=list)

    @property
    def settled(self) -> bool:
        """A stage has produced content; later stages are skipped."""
        return bool(self.content)

    def final_content(self) -> str:
        if self.caveat:
            return f"{self.content}\n\n{self.caveat}"
        return self.content
