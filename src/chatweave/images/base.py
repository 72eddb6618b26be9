import logging
from abc import ABC, abstractmethod

from .models import ImageGenerationOptions, ImageGenerationResult

logger = logging.getLogger(__name__)


class ImageGenerator(ABC):
    """Abstract image generation backend.

    ``generate`` never raises: failures come back as an unsuccessful
    ImageGenerationResult and the caller decides what to do next.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Short identifier used in logs."""

    @abstractmethod
    async def _generate(self, prompt: str, options: ImageGenerationOptions) -> str:
        """Produce one image for an already enhanced prompt.

        Returns:
            Image reference (URL or data URL)

        Raises:
            Exception: Any backend failure; handled by ``generate``
        """

    async def generate(
        self,
        prompt: str,
        options: ImageGenerationOptions | None = None
    ) -> ImageGenerationResult:
        """Generate an image.

        Args:
            prompt: What to draw
            options: Quality settings (defaults to ImageGenerationOptions())

        Returns:
            ImageGenerationResult with the image reference on success
        """
        options = options or ImageGenerationOptions()
        enhanced = options.enhance(prompt)
        logger.info("Generating image via %s", self.name)
        try:
            reference = await self._generate(enhanced, options)
        except Exception as e:
            logger.warning("Image generation via %s failed: %s", self.name, e)
            return ImageGenerationResult(
                success=False,
                data=None,
                message=str(e) or "Failed to generate image",
            )

        if not reference:
            return ImageGenerationResult(
                success=False,
                data=None,
                message="No image URL received in response",
            )
        return ImageGenerationResult(
            success=True,
            data=reference,
            message="Image generated successfully",
        )

    async def close(self) -> None:
        """Release backend resources."""
