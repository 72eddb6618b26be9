"""Tool execution through the text-generation backend."""

from .dispatcher import ToolDispatcher, normalize_tool_name
from .results import (
    KNOWN_TOOLS,
    CalculatorResult,
    CodeResult,
    CustomToolResult,
    DataAnalysisResult,
    SummaryResult,
    TimeResult,
    ToolPayload,
    ToolResult,
    TranslationResult,
)

__all__ = [
    "ToolDispatcher",
    "normalize_tool_name",
    "KNOWN_TOOLS",
    "CalculatorResult",
    "CodeResult",
    "CustomToolResult",
    "DataAnalysisResult",
    "SummaryResult",
    "TimeResult",
    "ToolPayload",
    "ToolResult",
    "TranslationResult",
]
