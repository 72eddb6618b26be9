from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ImageQuality(str, Enum):
    STANDARD = "standard"
    HIGH = "high"
    ULTRA_HIGH = "ultra-high"
    MAX = "max"


class AspectRatio(str, Enum):
    SQUARE = "1:1"
    LANDSCAPE = "16:9"
    PORTRAIT = "9:16"
    CLASSIC = "4:3"
    CLASSIC_PORTRAIT = "3:4"


class ImageStyle(str, Enum):
    NATURAL = "natural"
    VIVID = "vivid"
    ARTISTIC = "artistic"
    PHOTOREALISTIC = "photorealistic"


class DetailLevel(str, Enum):
    K4 = "4k"
    K8 = "8k"
    K16 = "16k"


class ImageGenerationOptions(BaseModel):
    """Enumerated generation settings folded into the prompt."""

    model_config = ConfigDict(frozen=True)

    quality: ImageQuality = ImageQuality.ULTRA_HIGH
    aspect_ratio: AspectRatio = AspectRatio.SQUARE
    style: ImageStyle = ImageStyle.PHOTOREALISTIC
    detail_level: DetailLevel = DetailLevel.K16

    def enhance(self, prompt: str) -> str:
        """Prefix the prompt with the quality instructions."""
        return (
            f"Generate a {self.detail_level.value} resolution, {self.quality.value} quality, "
            f"{self.style.value} style image with aspect ratio {self.aspect_ratio.value} of: {prompt}"
        )


# Settings used by the pipeline when it detects an image request
PIPELINE_IMAGE_OPTIONS = ImageGenerationOptions(
    quality=ImageQuality.ULTRA_HIGH,
    detail_level=DetailLevel.K16,
    style=ImageStyle.PHOTOREALISTIC,
    aspect_ratio=AspectRatio.LANDSCAPE,
)


class ImageGenerationResult(BaseModel):
    """Outcome of an image generation call."""

    model_config = ConfigDict(frozen=True)

    success: bool
    data: str | None = Field(default=None, description="Image reference (URL or data URL)")
    message: str
