"""Tool dispatcher.

Routes a free-form request to a tool-specific prompt, asks the text
backend for a JSON payload and formats it for display. Every failure
except cancellation is turned into a ToolResult.
"""

import logging
from datetime import datetime, timezone

from pydantic import ValidationError

from ..errors import CredentialMissingError, GenerationCancelled, GenerationError, ToolParseError
from ..llm import ChatMessage, LLMProvider
from ..parsing import extract_json_object
from ..prompts import render_prompt
from .results import KNOWN_TOOLS, CustomToolResult, ToolPayload, ToolResult

logger = logging.getLogger(__name__)


def normalize_tool_name(tool_name: str) -> str:
    """Lower-case a tool name and use dashes as separators."""
    return "-".join(tool_name.strip().lower().replace("_", " ").split())


class ToolDispatcher:
    """Runs named tools through the text-generation backend."""

    def __init__(self, llm: LLMProvider | None):
        """Initialize the dispatcher.

        Args:
            llm: Provider used to run tools; None when no credential is
                configured, in which case every tool reports that it could
                not run
        """
        self._llm = llm

    @staticmethod
    def known_tools() -> list[str]:
        return list(KNOWN_TOOLS)

    async def run_tool(self, user_message: str, tool_name: str) -> ToolResult:
        """Execute a request with the named tool.

        Args:
            user_message: Free-text request
            tool_name: Known tool name or any custom name

        Returns:
            ToolResult describing the outcome or the failure

        Raises:
            GenerationCancelled: If the backend call was cancelled
        """
        name = normalize_tool_name(tool_name)
        payload_type = KNOWN_TOOLS.get(name)
        logger.info("Executing tool request: %s", name or tool_name)

        try:
            if payload_type is None:
                return await self._run_custom(user_message, tool_name.strip() or "custom")
            return await self._run_known(user_message, payload_type)
        except GenerationCancelled:
            logger.info("Tool %s cancelled", name)
            raise
        except Exception as e:
            logger.exception("Tool %s failed unexpectedly", name)
            return ToolResult(
                result=f"I tried to use the {tool_name} tool, but encountered an error.",
                explanation=str(e) or type(e).__name__,
                needs_additional_processing=True,
            )

    async def _ask(self, prompt: str) -> str:
        if self._llm is None:
            raise CredentialMissingError("No API key configured for tool execution")
        response = await self._llm.generate([ChatMessage(role="user", content=prompt)])
        return response.content

    def _parse(self, payload_type: type[ToolPayload], raw: str) -> ToolPayload:
        try:
            payload = payload_type.model_validate(extract_json_object(raw))
        except ValidationError as e:
            raise ToolParseError(f"Unexpected {payload_type.tool_name} payload: {e}") from e
        if not payload.is_complete():
            raise ToolParseError(f"Incomplete {payload_type.tool_name} payload")
        return payload

    async def _run_known(self, user_message: str, payload_type: type[ToolPayload]) -> ToolResult:
        prompt = render_prompt(
            payload_type.prompt_name,
            user_message=user_message,
            current_time=datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC"),
        )
        label = payload_type.label

        try:
            raw = await self._ask(prompt)
        except GenerationCancelled:
            raise
        except CredentialMissingError:
            logger.warning("API key not available for %s", label)
            return ToolResult(
                result=(
                    f"I tried to use a {label} to {payload_type.purpose}, "
                    f"but couldn't access the API key needed to process it."
                ),
                explanation=f"The {label} couldn't be used due to missing API key.",
                needs_additional_processing=True,
            )
        except GenerationError as e:
            logger.error("Error executing %s: %s", label, e)
            return ToolResult(
                result=f"I tried to use a {label} to {payload_type.purpose}, but encountered an error.",
                explanation=str(e),
                needs_additional_processing=True,
            )

        try:
            payload = self._parse(payload_type, raw)
        except ToolParseError as e:
            logger.warning("Error parsing %s response: %s", label, e)
            return ToolResult(
                result=f"I used a {label} to {payload_type.purpose}. Here's what I found:\n\n{raw}",
                explanation="The tool's structured output could not be parsed, so the raw response is shown.",
                needs_additional_processing=False,
            )

        return ToolResult(result=payload.format(), needs_additional_processing=False)

    async def _run_custom(self, user_message: str, tool_name: str) -> ToolResult:
        logger.info("Building custom tool for: %s", tool_name)
        prompt = render_prompt("tool_custom", tool_name=tool_name, user_message=user_message)

        try:
            raw = await self._ask(prompt)
        except GenerationCancelled:
            raise
        except CredentialMissingError:
            return ToolResult(
                result=(
                    f"I wanted to create a specialized {tool_name} tool to handle your request, "
                    f"but I couldn't access the API key needed to build it."
                ),
                explanation="The tool creation process failed due to missing API key.",
                needs_additional_processing=True,
            )
        except GenerationError as e:
            logger.error("Error building custom tool %s: %s", tool_name, e)
            return ToolResult(
                result=f"I attempted to build a specialized tool for {tool_name}, but encountered an error.",
                explanation="The tool creation process failed.",
                needs_additional_processing=True,
            )

        try:
            payload = self._parse(CustomToolResult, raw)
        except ToolParseError as e:
            logger.warning("Error parsing custom tool response: %s", e)
            return ToolResult(
                result=(
                    f"I attempted to build a specialized tool for {tool_name} based on your request, "
                    f"but encountered an issue. Here's what I can tell you based on your request:\n\n{raw}"
                ),
                explanation=f"I tried to create a {tool_name} tool but couldn't fully implement it.",
                needs_additional_processing=True,
            )

        note = payload.explanation or payload.tool_design or ""
        return ToolResult(
            result=payload.format(),
            explanation=f"Note: I created a virtual {tool_name} tool to handle your request. {note}".strip(),
            needs_additional_processing=True,
        )
