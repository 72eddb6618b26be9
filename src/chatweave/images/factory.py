from typing import Any

from .base import ImageGenerator


def create_image_generator(provider: str, **config: Any) -> ImageGenerator:
    """Create an image generator.

    Args:
        provider: Backend type ('gradio', 'imagen')
        **config: Backend-specific configuration
            For gradio:
                - space: str (default: 'Rooc/FLUX-Fast')
                - hf_token: str | None
            For imagen:
                - api_key: str (required)
                - model: str (default: 'imagen-3.0-generate-002')

    Returns:
        Initialized image generator

    Raises:
        ValueError: If backend type is not supported
        TypeError: If required configuration is missing
    """
    provider_lower = provider.lower()

    if provider_lower == "gradio":
        from .gradio import GradioImageGenerator
        return GradioImageGenerator(**config)

    if provider_lower == "imagen":
        if "api_key" not in config:
            raise TypeError("Imagen generator requires 'api_key' in config")
        from .imagen import ImagenImageGenerator
        return ImagenImageGenerator(**config)

    raise ValueError(
        f"Unsupported image provider: {provider}. "
        f"Supported providers: 'gradio', 'imagen'"
    )
