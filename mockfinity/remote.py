"""Remote image-generation service adapters."""
from __future__ import annotations

import base64
import binascii
import logging
from typing import Any, Optional

from google import genai
from google.genai import types

from . import config
from .constants import DEFAULT_MIME_TYPE, MODEL_NAME, NO_IMAGE_DATA_MESSAGE

logger = logging.getLogger(__name__)


class RemoteServiceError(RuntimeError):
    """The remote service failed or returned no usable image."""


def strip_data_uri_header(image: str) -> str:
    """Drop a ``data:<mime>;base64,`` prefix if present."""
    if "," in image:
        return image.split(",", 1)[1] or image
    return image


def wrap_data_uri(data: Any, mime_type: Optional[str] = None) -> str:
    if isinstance(data, (bytes, bytearray)):
        data = base64.b64encode(bytes(data)).decode("ascii")
    return f"data:{mime_type or DEFAULT_MIME_TYPE};base64,{data}"


class ImageService:
    """Interface of the remote image generator.

    ``generate`` takes a base64 image (optionally a full data URI), an
    instruction, and an aspect tag, and returns a data URI or raises.
    """

    def generate(self, image: str, prompt: str, aspect_ratio: str = "1:1") -> str:
        raise NotImplementedError


class GeminiImageService(ImageService):
    """Image editing through the Gemini image model."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = MODEL_NAME,
        timeout_ms: Optional[int] = None,
        client: Optional[Any] = None,
    ) -> None:
        self.model = model
        if client is not None:
            self.client = client
            return

        api_key = api_key or config.get_api_key()
        if not api_key:
            raise RemoteServiceError("No Gemini API key configured (set GEMINI_API_KEY)")

        http_options = types.HttpOptions(timeout=timeout_ms) if timeout_ms else None
        self.client = genai.Client(api_key=api_key, http_options=http_options)

    def generate(self, image: str, prompt: str, aspect_ratio: str = "1:1") -> str:
        try:
            image_bytes = base64.b64decode(strip_data_uri_header(image), validate=True)
        except (binascii.Error, ValueError) as exc:
            raise RemoteServiceError(f"Source image is not valid base64: {exc}") from exc

        try:
            response = self.client.models.generate_content(
                model=self.model,
                contents=[
                    types.Part.from_bytes(data=image_bytes, mime_type=DEFAULT_MIME_TYPE),
                    types.Part.from_text(text=prompt),
                ],
                config=types.GenerateContentConfig(
                    image_config=types.ImageConfig(aspect_ratio=aspect_ratio),
                ),
            )
        except Exception as exc:
            logger.error("Gemini generation error: %s", exc)
            raise RemoteServiceError(str(exc)) from exc

        for candidate in response.candidates or []:
            content = candidate.content
            if content is None:
                continue
            for part in content.parts or []:
                inline = getattr(part, "inline_data", None)
                if inline is not None and inline.data:
                    return wrap_data_uri(inline.data, inline.mime_type)

        raise RemoteServiceError(NO_IMAGE_DATA_MESSAGE)
