import base64
import binascii

from pydantic import BaseModel, ConfigDict, Field


class InlineImage(BaseModel):
    """Binary image payload carried inside a chat turn."""

    model_config = ConfigDict(frozen=True)

    media_type: str = Field(description="MIME type, e.g. 'image/png'")
    data: bytes = Field(description="Raw image bytes")

    @classmethod
    def from_data_url(cls, data_url: str) -> "InlineImage":
        """Parse a ``data:<mime>;base64,<payload>`` URL.

        Raises:
            ValueError: If the URL is not a base64 data URL
        """
        header, sep, payload = data_url.partition(",")
        if not sep or not header.startswith("data:") or ";base64" not in header:
            raise ValueError("Expected a base64 data URL")

        media_type = header[len("data:"):].split(";", 1)[0] or "application/octet-stream"
        try:
            data = base64.b64decode(payload, validate=True)
        except (binascii.Error, ValueError) as e:
            raise ValueError(f"Invalid base64 payload: {e}") from e
        return cls(media_type=media_type, data=data)

    def to_base64(self) -> str:
        """Return the payload as a base64 string."""
        return base64.b64encode(self.data).decode("ascii")

    def to_data_url(self) -> str:
        """Return the payload as a data URL."""
        return f"data:{self.media_type};base64,{self.to_base64()}"


class ChatMessage(BaseModel):
    """One role-tagged turn sent to a text-generation backend."""

    model_config = ConfigDict(frozen=True)

    role: str = Field(description="Role of the message sender: 'user', 'assistant', or 'system'")
    content: str = Field(default="", description="Text part of the turn")
    images: list[InlineImage] = Field(
        default_factory=list,
        description="Inline image parts, sent before the text part"
    )


class LLMResponse(BaseModel):
    """Response from an LLM provider."""

    model_config = ConfigDict(frozen=True)

    content: str = Field(description="Generated text content")
    model: str = Field(description="Model that generated the response")
    usage: dict[str, int] | None = Field(
        default=None,
        description="Token usage information"
    )
