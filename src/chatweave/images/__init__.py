"""Image generation adapters and request detection."""

from .base import ImageGenerator
from .factory import create_image_generator
from .intent import is_image_intent
from .models import (
    PIPELINE_IMAGE_OPTIONS,
    AspectRatio,
    DetailLevel,
    ImageGenerationOptions,
    ImageGenerationResult,
    ImageQuality,
    ImageStyle,
)

__all__ = [
    "ImageGenerator",
    "create_image_generator",
    "is_image_intent",
    "PIPELINE_IMAGE_OPTIONS",
    "AspectRatio",
    "DetailLevel",
    "ImageGenerationOptions",
    "ImageGenerationResult",
    "ImageQuality",
    "ImageStyle",
]
