"""Enrichment pipeline: turns one user utterance into one assistant message.

Stages run strictly in order, each awaiting the previous one:

    START -> WEB_SEARCH? -> TOOL? -> (IMAGE | TEXT) -> SETTLE

The first stage that produces content short-circuits the rest. Whatever
happens in between, SETTLE replaces the loading placeholder exactly once.
"""

import asyncio
import logging
from collections.abc import Callable

from ..config import DEFAULT_HISTORY_WINDOW, DEFAULT_TITLE_MAX_LENGTH
from ..errors import (
    BlockedError,
    ConversationBusyError,
    CredentialMissingError,
    GenerationCancelled,
)
from ..images import PIPELINE_IMAGE_OPTIONS, ImageGenerator, is_image_intent
from ..llm import ChatMessage, InlineImage, LLMProvider
from ..memory import (
    DEFAULT_ROLES,
    Conversation,
    ConversationStore,
    Message,
    MessageRole,
    Role,
    ToolUsage,
    WebSearchRecord,
    make_title,
)
from ..prompts import render_prompt
from ..search import ResultSummarizer, WebSearchBackend
from ..tools import ToolDispatcher
from .models import (
    EnrichmentOptions,
    ExchangeResult,
    MessageDraft,
    PipelineRequest,
    PipelineStage,
)

logger = logging.getLogger(__name__)

ERROR_CONTENT = "I'm sorry, I encountered an error processing your request. Please try again."
CANCELLED_CONTENT = "Request cancelled."
MISSING_CREDENTIAL_CONTENT = (
    "I can't answer yet because no API key is configured for the text-generation backend. "
    "Please add one and try again."
)
IMAGE_FALLBACK_CAVEAT = (
    "*Note: I tried to generate an image but encountered an error. "
    "I've provided a text response instead.*"
)

UpdateCallback = Callable[[str, Message], None]


class EnrichmentPipeline:
    """Orchestrates the enrichment stages for each user message.

    Hidden design decisions:
    - Stage precedence and short-circuit rules
    - Prompt composition (persona turn, history window, recap prompts)
    - Mapping of backend failures onto final message content
    - Placeholder lifecycle in the conversation store
    """

    def __init__(
        self,
        llm: LLMProvider | None,
        store: ConversationStore,
        web_search: WebSearchBackend | None = None,
        summarizer: ResultSummarizer | None = None,
        image_generator: ImageGenerator | None = None,
        tools: ToolDispatcher | None = None,
        history_window: int = DEFAULT_HISTORY_WINDOW,
        title_max_length: int = DEFAULT_TITLE_MAX_LENGTH
    ):
        """Initialize the pipeline.

        Args:
            llm: Text-generation provider for the text path (None when no
                credential is configured)
            store: Conversation state holder
            web_search: Search backend (web search toggle is ignored without it)
            summarizer: Turns search results into an answer
            image_generator: Image backend (image requests fall back to text without it)
            tools: Tool dispatcher (defaults to one using ``llm``)
            history_window: Number of prior messages sent with each turn
            title_max_length: Characters kept when deriving a conversation title
        """
        self._llm = llm
        self._store = store
        self._web_search = web_search
        self._summarizer = summarizer or ResultSummarizer(llm)
        self._image_generator = image_generator
        self._tools = tools or ToolDispatcher(llm)
        self._history_window = history_window
        self._title_max_length = title_max_length

        self._active_conversation_id: str | None = None
        self._roles: list[Role] = list(DEFAULT_ROLES)
        self._active_role: Role | None = None
        self._update_callback: UpdateCallback | None = None

    def set_update_callback(self, callback: UpdateCallback | None) -> None:
        """Set a callback notified whenever a message is appended or settled.

        Args:
            callback: Callable(conversation_id: str, message: Message)
        """
        self._update_callback = callback

    def _notify(self, conversation_id: str, message: Message) -> None:
        if self._update_callback is None:
            return
        try:
            self._update_callback(conversation_id, message)
        except Exception:
            logger.exception("Update callback failed for message %s", message.id)

    @property
    def tools(self) -> ToolDispatcher:
        return self._tools

    @property
    def roles(self) -> list[Role]:
        return list(self._roles)

    @property
    def active_role(self) -> Role | None:
        return self._active_role

    def set_role(self, role: Role | str | None) -> Role | None:
        """Activate a persona for subsequent messages.

        Args:
            role: A Role, the id or name of a known role, or None to clear

        Raises:
            ValueError: If no known role matches the given id or name
        """
        if role is None or isinstance(role, Role):
            self._active_role = role
            return role

        wanted = role.strip().lower()
        for candidate in self._roles:
            if wanted in (candidate.id.lower(), candidate.name.lower()):
                self._active_role = candidate
                return candidate
        raise ValueError(f"Unknown role: {role}")

    def add_custom_role(self, name: str, description: str) -> Role:
        """Register and activate a custom persona."""
        if not name.strip() or not description.strip():
            raise ValueError("Custom roles need a name and a description")
        role = Role(name=name.strip(), description=description.strip(), is_custom=True)
        self._roles.append(role)
        self._active_role = role
        return role

    @property
    def active_conversation_id(self) -> str | None:
        return self._active_conversation_id

    async def new_conversation(self) -> Conversation:
        """Create a conversation and make it the active one."""
        conversation = await self._store.create_conversation()
        self._active_conversation_id = conversation.id
        logger.info("Started conversation %s", conversation.id)
        return conversation

    async def switch_conversation(self, conversation_id: str) -> Conversation:
        """Make an existing conversation the active one.

        Raises:
            ConversationNotFoundError: If the id is unknown
        """
        conversation = await self._store.get_conversation(conversation_id)
        self._active_conversation_id = conversation.id
        return conversation

    async def list_conversations(self) -> list[Conversation]:
        return await self._store.list_conversations()

    async def get_messages(self, conversation_id: str | None = None) -> list[Message]:
        conversation_id = conversation_id or self._active_conversation_id
        if conversation_id is None:
            return []
        return await self._store.get_messages(conversation_id)

    def cancel(self) -> bool:
        """Abort the in-flight generation call, if any.

        Covers the text provider and the search and summary models, which
        may be a separate provider.
        """
        cancelled = self._summarizer.cancel()
        if self._web_search is not None:
            cancelled = self._web_search.cancel() or cancelled
        if self._llm is not None:
            cancelled = self._llm.cancel() or cancelled
        return cancelled

    async def close(self) -> None:
        """Close every backend the pipeline was given."""
        if self._web_search is not None:
            await self._web_search.close()
        await self._summarizer.close()
        if self._image_generator is not None:
            await self._image_generator.close()
        if self._llm is not None:
            await self._llm.close()

    async def process_message(
        self,
        text: str,
        options: EnrichmentOptions | None = None,
        conversation_id: str | None = None
    ) -> ExchangeResult:
        """Process one user message through the enrichment stages.

        Args:
            text: The user's message
            options: Enrichment toggles and attachments
            conversation_id: Target conversation (defaults to the active one,
                created on first use)

        Returns:
            ExchangeResult with the settled assistant message

        Raises:
            ConversationNotFoundError: If ``conversation_id`` is unknown
            ConversationBusyError: If the conversation already has a pending message
        """
        options = options or EnrichmentOptions()
        if conversation_id is None:
            conversation_id = self._active_conversation_id
        if conversation_id is None:
            conversation_id = (await self.new_conversation()).id

        conversation = await self._store.get_conversation(conversation_id)
        if conversation.pending_message is not None:
            raise ConversationBusyError(conversation_id)

        request = PipelineRequest(
            conversation_id=conversation_id,
            text=text,
            options=options,
            history=conversation.messages,
            attachments=_decode_attachments(options.images),
        )
        user_message, placeholder = await self._start(request)

        draft = MessageDraft(stages=[PipelineStage.START])
        error: str | None = None
        try:
            await self._run_stages(request, draft)
            final = _finalize(placeholder, draft)
        except BlockedError as e:
            logger.info("Generation blocked: %s", e)
            final = _finalize(placeholder, MessageDraft(content=str(e)))
        except CredentialMissingError as e:
            logger.warning("Cannot process message: %s", e)
            error = str(e)
            final = _finalize(placeholder, MessageDraft(content=MISSING_CREDENTIAL_CONTENT))
        except GenerationCancelled:
            final = _finalize(placeholder, MessageDraft(content=CANCELLED_CONTENT))
        except asyncio.CancelledError:
            await self._settle(request, _finalize(placeholder, MessageDraft(content=CANCELLED_CONTENT)))
            raise
        except Exception as e:
            logger.exception("Error processing message in conversation %s", conversation_id)
            error = str(e) or type(e).__name__
            final = _finalize(placeholder, MessageDraft(content=ERROR_CONTENT))

        final = await self._settle(request, final)
        draft.stages.append(PipelineStage.SETTLE)
        return ExchangeResult(
            conversation_id=conversation_id,
            user_message=user_message,
            assistant_message=final,
            error=error,
            stages=draft.stages,
        )

    async def _start(self, request: PipelineRequest) -> tuple[Message, Message]:
        """Append the user message and the loading placeholder."""
        user_message = Message(
            role=MessageRole.USER,
            content=request.text,
            images=list(request.options.images) or None,
        )
        placeholder = Message(role=MessageRole.ASSISTANT, is_loading=True)

        await self._store.append_message(request.conversation_id, user_message)
        self._notify(request.conversation_id, user_message)
        await self._store.append_message(request.conversation_id, placeholder)
        self._notify(request.conversation_id, placeholder)
        return user_message, placeholder

    async def _run_stages(self, request: PipelineRequest, draft: MessageDraft) -> None:
        stages = (
            (PipelineStage.WEB_SEARCH, self._web_search_stage),
            (PipelineStage.TOOL, self._tool_stage),
            (PipelineStage.IMAGE, self._image_stage),
            (PipelineStage.TEXT, self._text_stage),
        )
        for stage, run in stages:
            if draft.settled:
                logger.debug("Content settled, skipping %s", stage.value)
                break
            if await run(request, draft):
                draft.stages.append(stage)

    async def _settle(self, request: PipelineRequest, final: Message) -> Message:
        """Replace the placeholder and derive the title on the first exchange."""
        settled = await self._store.replace_message(request.conversation_id, final)
        self._notify(request.conversation_id, settled)

        if not request.history:
            title = make_title(request.text, self._title_max_length)
            if await self._store.set_title(request.conversation_id, title):
                logger.info("Conversation %s titled %r", request.conversation_id, title)
        return settled

    async def _web_search_stage(self, request: PipelineRequest, draft: MessageDraft) -> bool:
        if not request.options.use_web_search:
            return False
        if self._web_search is None:
            logger.warning("Web search requested but no search backend is configured")
            return False

        results = await self._web_search.search(request.text)
        if not results:
            logger.info("Web search returned no results, continuing without it")
            return True

        summary = await self._summarizer.summarize(results, request.text)
        if summary.strip():
            draft.content = summary
            draft.web_search = WebSearchRecord(query=request.text, results=results)
        return True

    async def _tool_stage(self, request: PipelineRequest, draft: MessageDraft) -> bool:
        tool_name = request.options.tool
        if not tool_name:
            return False

        outcome = await self._tools.run_tool(request.text, tool_name)
        draft.content = outcome.result
        draft.tools_used = ToolUsage(
            tool_type=tool_name,
            result=outcome.result,
            explanation=outcome.explanation,
        )
        return True

    async def _image_stage(self, request: PipelineRequest, draft: MessageDraft) -> bool:
        if not is_image_intent(request.text):
            return False
        if self._image_generator is None:
            logger.info("Image request detected but no image backend is configured")
            return False

        result = await self._image_generator.generate(request.text, PIPELINE_IMAGE_OPTIONS)
        if result.success and result.data:
            draft.images = [result.data]
            draft.content = f"Here's the image I generated based on your request:\n\n*{request.text}*"
        else:
            logger.warning("Image generation failed, falling back to text: %s", result.message)
            draft.caveat = IMAGE_FALLBACK_CAVEAT
        return True

    async def _text_stage(self, request: PipelineRequest, draft: MessageDraft) -> bool:
        options = request.options
        llm = self._require_llm()
        persona = self._persona_turns()
        history = self._history_turns(request.history)

        if options.use_thinking:
            draft.thinking = await self._side_call("thinking", request.text, persona)

        if options.use_reasoning:
            draft.reasoning = await self._side_call("reasoning", request.text, persona)
            final_turn = self._recap_turn("final_from_reasoning", draft.reasoning, request)
        elif options.use_thinking:
            final_turn = self._recap_turn("final_from_thinking", draft.thinking or "", request)
        else:
            final_turn = ChatMessage(role="user", content=request.text, images=request.attachments)

        response = await llm.generate([*persona, *history, final_turn])
        draft.content = response.content
        return True

    def _persona_turns(self) -> list[ChatMessage]:
        if self._active_role is None:
            return []
        return [ChatMessage(role="user", content=self._active_role.to_prompt())]

    def _history_turns(self, history: list[Message]) -> list[ChatMessage]:
        if self._history_window <= 0:
            return []

        turns = []
        for message in history[-self._history_window:]:
            if message.is_loading:
                continue
            images = []
            if message.role == MessageRole.USER and message.images:
                images = _decode_attachments(message.images)
            turns.append(ChatMessage(role=message.role.value, content=message.content, images=images))
        return turns

    def _recap_turn(self, prompt_name: str, transcript: str, request: PipelineRequest) -> ChatMessage:
        return ChatMessage(
            role="user",
            content=render_prompt(prompt_name, transcript=transcript, user_message=request.text),
            images=request.attachments,
        )

    def _require_llm(self) -> LLMProvider:
        if self._llm is None:
            raise CredentialMissingError("No API key configured for text generation")
        return self._llm

    async def _side_call(self, prompt_name: str, text: str, persona: list[ChatMessage]) -> str:
        """Produce a thinking or reasoning transcript from the user text alone."""
        prompt = ChatMessage(role="user", content=render_prompt(prompt_name, user_message=text))
        response = await self._require_llm().generate([*persona, prompt])
        return response.content


def _decode_attachments(images: list[str]) -> list[InlineImage]:
    """Decode data-URL attachments, skipping anything that is not one."""
    decoded = []
    for image in images:
        try:
            decoded.append(InlineImage.from_data_url(image))
        except ValueError:
            logger.debug("Skipping non data-URL image reference")
    return decoded


def _finalize(placeholder: Message, draft: MessageDraft) -> Message:
    """Build the final version of the placeholder from a draft."""
    return placeholder.model_copy(update={
        "content": draft.final_content(),
        "is_loading": False,
        "images": draft.images,
        "reasoning": draft.reasoning,
        "thinking": draft.thinking,
        "web_search": draft.web_search,
        "tools_used": draft.tools_used,
    })
