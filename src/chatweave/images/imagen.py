"""Image generation with Google Imagen through the GenAI SDK."""

import base64
from typing import Any

from google import genai
from google.genai import types

from .base import ImageGenerator
from .models import ImageGenerationOptions


class ImagenImageGenerator(ImageGenerator):
    """Imagen backend returning the image as a data URL."""

    def __init__(
        self,
        api_key: str,
        model: str = "imagen-3.0-generate-002",
        **client_kwargs: Any
    ):
        """Initialize the generator.

        Args:
            api_key: Google AI API key
            model: Imagen model name
            **client_kwargs: Additional kwargs for Client
        """
        self._model = model
        self._client = genai.Client(api_key=api_key, **client_kwargs)

    @property
    def name(self) -> str:
        return f"imagen:{self._model}"

    async def _generate(self, prompt: str, options: ImageGenerationOptions) -> str:
        response = await self._client.aio.models.generate_images(
            model=self._model,
            prompt=prompt,
            config=types.GenerateImagesConfig(
                number_of_images=1,
                aspect_ratio=options.aspect_ratio.value,
            ),
        )
        if not response.generated_images:
            raise ValueError("Invalid response: No image data received")

        image = response.generated_images[0].image
        if image is None or not image.image_bytes:
            raise ValueError("No image bytes received in response")

        mime_type = image.mime_type or "image/png"
        encoded = base64.b64encode(image.image_bytes).decode("ascii")
        return f"data:{mime_type};base64,{encoded}"
