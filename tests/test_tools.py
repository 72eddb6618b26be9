"""Unit tests for the tool dispatcher and tool payloads."""
import pytest
from hypothesis import given
from hypothesis import strategies as st

from chatweave.errors import GenerationCancelled, TransportError
from chatweave.tools import ToolDispatcher, normalize_tool_name
from chatweave.tools.results import (
    KNOWN_TOOLS,
    CalculatorResult,
    SummaryResult,
    TranslationResult,
)

from fakes import FakeLLMProvider


class TestNormalizeToolName:
    """Tests for tool name normalisation."""

    @pytest.mark.parametrize("raw,expected", [
        ("calculator", "calculator"),
        ("Code_Executor", "code-executor"),
        ("  Data Analysis ", "data-analysis"),
        ("time-service", "time-service"),
    ])
    def test_normalize(self, raw: str, expected: str):
        """Test that names are lower-cased and dash separated."""
        assert normalize_tool_name(raw) == expected

    def test_known_tools(self):
        """Test that the fixed tool set is exposed."""
        assert set(ToolDispatcher.known_tools()) == {
            "calculator",
            "code-executor",
            "translator",
            "data-analysis",
            "summarizer",
            "time-service",
        }


class TestToolPayloads:
    """Tests for per-tool payload parsing and formatting."""

    def test_calculator_accepts_numeric_result(self):
        """Test that numbers are coerced to display text."""
        payload = CalculatorResult.model_validate({"expression": "2+2", "calculation": "2 + 2 = 4", "result": 4})

        assert payload.result == "4"
        assert payload.is_complete()
        assert payload.format() == 'I calculated the result for "2+2":\n\n2 + 2 = 4\n\nResult: 4'

    def test_translation_uses_camel_case_fields(self):
        """Test that camelCase JSON keys populate the payload."""
        payload = TranslationResult.model_validate({
            "originalText": "Hello",
            "sourceLanguage": "English",
            "targetLanguage": "Spanish",
            "translation": "Hola",
        })

        assert payload.is_complete()
        assert "**Translation (Spanish):**\nHola" in payload.format()

    def test_list_fields_become_bullets(self):
        """Test that list values are rendered as bullet points."""
        payload = SummaryResult.model_validate({"bulletPoints": ["one", "two"]})

        assert payload.bullet_points == "- one\n- two"
        assert "## Key Points\n- one\n- two" in payload.format()

    def test_empty_payload_is_incomplete(self):
        """Test that a payload without its key field is incomplete."""
        for payload_type in KNOWN_TOOLS.values():
            assert not payload_type.model_validate({}).is_complete()


class TestToolDispatcher:
    """Tests for ToolDispatcher.run_tool."""

    @pytest.mark.asyncio
    async def test_calculator(self):
        """Test that the calculator formats the parsed result."""
        llm = FakeLLMProvider(
            'Here you go:\n```json\n{"expression": "2+2", "calculation": "2 + 2", "result": "4"}\n```'
        )
        result = await ToolDispatcher(llm).run_tool("What is 2+2?", "calculator")

        assert "4" in result.result
        assert result.result.startswith('I calculated the result for "2+2"')
        assert result.needs_additional_processing is False
        assert "What is 2+2?" in llm.prompts[0]

    @pytest.mark.asyncio
    async def test_known_tool_unparseable_response(self):
        """Test that a response without JSON falls back to the raw text."""
        llm = FakeLLMProvider("The answer is four.")
        result = await ToolDispatcher(llm).run_tool("What is 2+2?", "calculator")

        assert result.result.endswith("The answer is four.")
        assert result.explanation
        assert result.needs_additional_processing is False

    @pytest.mark.asyncio
    async def test_known_tool_incomplete_payload(self):
        """Test that JSON missing the key field is treated as unparseable."""
        llm = FakeLLMProvider('{"sourceLanguage": "English"}')
        result = await ToolDispatcher(llm).run_tool("Translate hello to Spanish", "translator")

        assert "Here's what I found" in result.result
        assert '{"sourceLanguage": "English"}' in result.result

    @pytest.mark.asyncio
    async def test_known_tool_backend_error(self):
        """Test that a backend failure is reported as a ToolResult."""
        llm = FakeLLMProvider(TransportError("503 Service Unavailable"))
        result = await ToolDispatcher(llm).run_tool("Translate hello", "translator")

        assert "encountered an error" in result.result
        assert result.explanation == "503 Service Unavailable"
        assert result.needs_additional_processing is True

    @pytest.mark.asyncio
    @pytest.mark.parametrize("tool_name", ["calculator", "weather-lookup"])
    async def test_cancelled_call_propagates(self, tool_name: str):
        """Test that a cancelled backend call is not turned into a ToolResult."""
        llm = FakeLLMProvider(GenerationCancelled())

        with pytest.raises(GenerationCancelled):
            await ToolDispatcher(llm).run_tool("What is 2+2?", tool_name)

    @pytest.mark.asyncio
    async def test_known_tool_without_credentials(self):
        """Test that a missing provider is reported as a ToolResult."""
        result = await ToolDispatcher(None).run_tool("What is 2+2?", "calculator")

        assert "API key" in result.result
        assert result.needs_additional_processing is True

    @pytest.mark.asyncio
    async def test_time_service_receives_current_time(self):
        """Test that the time prompt is given the current UTC time."""
        llm = FakeLLMProvider('{"location": "Tokyo", "timezone": "Asia/Tokyo", "currentTime": "09:00"}')
        result = await ToolDispatcher(llm).run_tool("What time is it in Tokyo?", "time-service")

        assert "UTC" in llm.prompts[0]
        assert "09:00" in result.result
        assert "Tokyo" in result.result

    @pytest.mark.asyncio
    async def test_custom_tool(self):
        """Test that an unknown tool name builds a virtual tool."""
        llm = FakeLLMProvider(
            '{"toolDesign": "Looks up forecasts", "result": "Sunny, 24C", "explanation": "Simulated forecast."}'
        )
        result = await ToolDispatcher(llm).run_tool("Weather in Paris?", "weather-lookup")

        assert result.result == "Sunny, 24C"
        assert "virtual weather-lookup tool" in result.explanation
        assert "weather-lookup" in llm.prompts[0]
        assert result.needs_additional_processing is True

    @pytest.mark.asyncio
    async def test_custom_tool_invalid_json(self):
        """Test that an unknown tool with invalid JSON still returns text."""
        llm = FakeLLMProvider("{not json at all")
        result = await ToolDispatcher(llm).run_tool("Weather in Paris?", "weather-lookup")

        assert result.result
        assert "{not json at all" in result.result

    @pytest.mark.asyncio
    async def test_custom_tool_backend_error(self):
        """Test that a custom tool backend failure returns a ToolResult."""
        llm = FakeLLMProvider(TransportError("timeout"))
        result = await ToolDispatcher(llm).run_tool("Weather in Paris?", "weather-lookup")

        assert "weather-lookup" in result.result
        assert result.needs_additional_processing is True

    @pytest.mark.asyncio
    @given(st.text(max_size=200))
    async def test_custom_tool_never_raises(self, raw: str):
        """Property test: any backend text yields a non-empty result."""
        llm = FakeLLMProvider(raw)
        result = await ToolDispatcher(llm).run_tool("Do the thing", "weather-lookup")
        assert result.result
