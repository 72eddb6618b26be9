"""Structured tool payloads parsed out of model responses.

Each known tool has its own variant. Every field is optional because the
model decides what it returns; ``is_complete`` says whether enough came
back to format a proper answer, otherwise the dispatcher falls back to
the raw response text.
"""

import json
from typing import Annotated, Any, ClassVar

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field


def _as_text(value: Any) -> str | None:
    """Coerce loosely typed JSON values into display text."""
    if value is None:
        return None
    if isinstance(value, str):
        return value.strip() or None
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, list):
        lines = [text for text in (_as_text(item) for item in value) if text]
        return "\n".join(f"- {line}" for line in lines) or None
    return json.dumps(value, ensure_ascii=False, indent=2)


Text = Annotated[str | None, BeforeValidator(_as_text)]


class ToolResult(BaseModel):
    """Outcome of a tool run.

    ``needs_additional_processing`` is advisory: the text is a sketch that
    a generative pass could re-synthesize before showing it.
    """

    model_config = ConfigDict(frozen=True)

    result: str
    explanation: str | None = None
    needs_additional_processing: bool = False


class ToolPayload(BaseModel):
    """Base class for per-tool JSON payloads."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    tool_name: ClassVar[str]
    prompt_name: ClassVar[str]
    # Used in the user-facing fallback and error sentences
    label: ClassVar[str]
    purpose: ClassVar[str]

    def is_complete(self) -> bool:
        raise NotImplementedError

    def format(self) -> str:
        raise NotImplementedError


class CalculatorResult(ToolPayload):
    tool_name = "calculator"
    prompt_name = "tool_calculator"
    label = "calculator tool"
    purpose = "solve your problem"

    expression: Text = None
    calculation: Text = None
    result: Text = None

    def is_complete(self) -> bool:
        return self.result is not None

    def format(self) -> str:
        lines = [f'I calculated the result for "{self.expression or "your request"}":']
        if self.calculation:
            lines.append(self.calculation)
        lines.append(f"Result: {self.result}")
        return "\n\n".join(lines)


class CodeResult(ToolPayload):
    tool_name = "code-executor"
    prompt_name = "tool_code_executor"
    label = "code execution tool"
    purpose = "solve your problem"

    task: Text = None
    language: Text = None
    code: Text = None
    explanation: Text = None
    output: Text = None

    def is_complete(self) -> bool:
        return self.code is not None or self.output is not None

    def format(self) -> str:
        sections = [f'I wrote and executed code for: "{self.task or "your request"}"']
        if self.code:
            sections.append(f"```{self.language or ''}\n{self.code}\n```")
        if self.output:
            sections.append(f"**Execution Output:**\n```\n{self.output}\n```")
        if self.explanation:
            sections.append(f"**Explanation:**\n{self.explanation}")
        return "\n\n".join(sections)


class TranslationResult(ToolPayload):
    tool_name = "translator"
    prompt_name = "tool_translator"
    label = "translation tool"
    purpose = "process your request"

    original_text: Text = Field(default=None, alias="originalText")
    source_language: Text = Field(default=None, alias="sourceLanguage")
    target_language: Text = Field(default=None, alias="targetLanguage")
    translation: Text = None

    def is_complete(self) -> bool:
        return self.translation is not None

    def format(self) -> str:
        source = self.source_language or "the source language"
        target = self.target_language or "the target language"
        sections = [f"I translated from {source} to {target}:"]
        if self.original_text:
            sections.append(f"**Original ({source}):**\n{self.original_text}")
        sections.append(f"**Translation ({target}):**\n{self.translation}")
        return "\n\n".join(sections)


class DataAnalysisResult(ToolPayload):
    tool_name = "data-analysis"
    prompt_name = "tool_data_analysis"
    label = "data analysis tool"
    purpose = "process your request"

    data_description: Text = Field(default=None, alias="dataDescription")
    analysis: Text = None
    visualizations: Text = None
    insights: Text = None
    recommendations: Text = None

    def is_complete(self) -> bool:
        return self.analysis is not None

    def format(self) -> str:
        sections = ["# Data Analysis Report"]
        for heading, body in (
            ("Data Analyzed", self.data_description),
            ("Analysis", self.analysis),
            ("Visualizations", self.visualizations),
            ("Key Insights", self.insights),
            ("Recommendations", self.recommendations),
        ):
            if body:
                sections.append(f"## {heading}\n{body}")
        return "\n\n".join(sections)


class SummaryResult(ToolPayload):
    tool_name = "summarizer"
    prompt_name = "tool_summarizer"
    label = "text summarization tool"
    purpose = "process your request"

    original_text_description: Text = Field(default=None, alias="originalTextDescription")
    bullet_points: Text = Field(default=None, alias="bulletPoints")
    short_summary: Text = Field(default=None, alias="shortSummary")
    medium_summary: Text = Field(default=None, alias="mediumSummary")

    def is_complete(self) -> bool:
        return self.short_summary is not None or self.bullet_points is not None

    def format(self) -> str:
        sections = ["# Summary"]
        if self.original_text_description:
            sections.append(f"**Original Content:** {self.original_text_description}")
        for heading, body in (
            ("Brief Summary", self.short_summary),
            ("Key Points", self.bullet_points),
            ("Detailed Summary", self.medium_summary),
        ):
            if body:
                sections.append(f"## {heading}\n{body}")
        return "\n\n".join(sections)


class TimeResult(ToolPayload):
    tool_name = "time-service"
    prompt_name = "tool_time_service"
    label = "time service tool"
    purpose = "answer your question"

    location: Text = None
    timezone: Text = None
    current_time: Text = Field(default=None, alias="currentTime")
    answer: Text = None
    explanation: Text = None

    def is_complete(self) -> bool:
        return self.current_time is not None or self.answer is not None

    def format(self) -> str:
        sections = []
        if self.current_time:
            place = self.location or self.timezone or "the requested location"
            zone = f" ({self.timezone})" if self.timezone and self.timezone != place else ""
            sections.append(f"The current time in {place}{zone} is {self.current_time}.")
        if self.answer:
            sections.append(self.answer)
        if self.explanation:
            sections.append(f"*{self.explanation}*")
        return "\n\n".join(sections)


class CustomToolResult(ToolPayload):
    """Payload of a tool the model designs and simulates on the fly."""

    tool_name = "custom"
    prompt_name = "tool_custom"
    label = "custom tool"
    purpose = "handle your request"

    tool_design: Text = Field(default=None, alias="toolDesign")
    result: Text = None
    explanation: Text = None

    def is_complete(self) -> bool:
        return self.result is not None

    def format(self) -> str:
        return self.result or ""


KNOWN_TOOLS: dict[str, type[ToolPayload]] = {
    payload.tool_name: payload
    for payload in (
        CalculatorResult,
        CodeResult,
        TranslationResult,
        DataAnalysisResult,
        SummaryResult,
        TimeResult,
    )
}
