"""Image generation through a Hugging Face Space.

Uses gradio_client, whose API is blocking; calls run in a worker thread.
File outputs are downloaded by the client to a local temporary path,
which is inlined as a data URL before it leaves this module.
"""

import asyncio
import logging
import mimetypes
from collections.abc import Callable
from pathlib import Path
from typing import Any

from gradio_client import Client

from ..llm import InlineImage
from .base import ImageGenerator
from .models import ImageGenerationOptions

logger = logging.getLogger(__name__)

DEFAULT_SPACE = "Rooc/FLUX-Fast"


def _extract_reference(result: Any) -> str | None:
    """Pull an image URL or file path out of a Space prediction."""
    if isinstance(result, (list, tuple)):
        if not result:
            return None
        return _extract_reference(result[0])
    if isinstance(result, dict):
        return result.get("url") or result.get("path")
    if isinstance(result, str):
        return result or None
    return None


def _inline_local_file(reference: str) -> str:
    """Turn a downloaded file path into a data URL; leave URLs untouched."""
    if reference.startswith(("http://", "https://", "data:")):
        return reference
    path = Path(reference)
    if not path.is_file():
        return reference
    media_type = mimetypes.guess_type(path.name)[0] or "image/png"
    return InlineImage(media_type=media_type, data=path.read_bytes()).to_data_url()


class GradioImageGenerator(ImageGenerator):
    """Image generator backed by a Gradio Space endpoint."""

    def __init__(
        self,
        space: str = DEFAULT_SPACE,
        api_name: str = "/predict",
        hf_token: str | None = None,
        client_factory: Callable[[], Any] | None = None
    ):
        """Initialize the generator.

        Args:
            space: Space id ("owner/name") or URL
            api_name: Endpoint of the Space to call
            hf_token: Optional Hugging Face token for private or rate-limited Spaces
            client_factory: Override for building the gradio client
        """
        self._space = space
        self._api_name = api_name
        self._hf_token = hf_token
        self._client_factory = client_factory or self._default_client
        self._client: Any | None = None

    @property
    def name(self) -> str:
        return f"gradio:{self._space}"

    def _default_client(self) -> Client:
        if self._hf_token:
            return Client(self._space, hf_token=self._hf_token)
        return Client(self._space)

    def _predict(self, prompt: str) -> str | None:
        if self._client is None:
            self._client = self._client_factory()
        result = self._client.predict(param_0=prompt, api_name=self._api_name)
        logger.debug("Space raw response: %r", result)

        reference = _extract_reference(result)
        if reference is None:
            return None
        return _inline_local_file(reference)

    async def _generate(self, prompt: str, options: ImageGenerationOptions) -> str:
        reference = await asyncio.to_thread(self._predict, prompt)
        if not reference:
            raise ValueError("Invalid response: No image data received")
        return reference
