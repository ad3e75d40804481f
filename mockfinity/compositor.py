"""Flatten a framed source image into an export raster."""
from __future__ import annotations

import base64
import binascii
import logging
import math
from io import BytesIO
from typing import Optional, Tuple, Union

from PIL import Image

from .aspect import cover_fit, output_size
from .constants import DEFAULT_MIME_TYPE, OUTPUT_SIZE
from .transform import TransformState

logger = logging.getLogger(__name__)

ImageLike = Union[str, Image.Image]


def encode_data_uri(data: bytes, mime_type: str = DEFAULT_MIME_TYPE) -> str:
    return f"data:{mime_type};base64,{base64.b64encode(data).decode('ascii')}"


def decode_data_uri(uri: str) -> Optional[Image.Image]:
    """Decode a data URI (or bare base64 payload) into an RGBA image."""
    if not uri:
        return None

    payload = uri.split(",", 1)[1] if uri.startswith("data:") and "," in uri else uri
    try:
        img = Image.open(BytesIO(base64.b64decode(payload, validate=False)))
        img.load()
    except (binascii.Error, ValueError, OSError):
        logger.debug("Could not decode image data URI", exc_info=True)
        return None

    if img.mode != "RGBA":
        img = img.convert("RGBA")
    return img


class Compositor:
    """Render a :class:`TransformState` applied to an image at a fixed output size.

    Every call builds its own drawing surface, so concurrent renders never
    share state.
    """

    def __init__(self, long_side: int = OUTPUT_SIZE) -> None:
        self.long_side = long_side

    # ------------------------------------------------------------------
    # Image loading helpers
    # ------------------------------------------------------------------
    @staticmethod
    def load_image(image_path: str) -> Optional[Image.Image]:
        """Load an image from disk as RGBA."""
        try:
            img = Image.open(image_path)
            if img.mode != "RGBA":
                img = img.convert("RGBA")
            return img
        except OSError:
            logger.debug("Could not load image %s", image_path, exc_info=True)
            return None

    def _resolve(self, image: Optional[ImageLike]) -> Optional[Image.Image]:
        if image is None:
            return None
        if isinstance(image, str):
            return decode_data_uri(image)
        if image.mode != "RGBA":
            return image.convert("RGBA")
        return image

    # ------------------------------------------------------------------
    # Composition
    # ------------------------------------------------------------------
    def pixel_ratio(self, aspect_tag: str, display_frame_size: Tuple[float, float]) -> float:
        out_w, _ = output_size(aspect_tag, self.long_side)
        return out_w / display_frame_size[0]

    def render_image(
        self,
        image: Optional[ImageLike],
        transform: TransformState,
        aspect_tag: str,
        display_frame_size: Tuple[float, float],
    ) -> Optional[Image.Image]:
        """Composite ``image`` onto a fresh transparent canvas.

        The canvas is centred, then translated by the on-screen pan scaled
        into output pixels, rotated, and scaled, in that order, before the
        cover-fit rectangle of the source is drawn centred on the origin.
        Pillow maps output pixels back to source pixels, so the forward
        matrix is inverted here in closed form.
        """
        source = self._resolve(image)
        if source is None or source.width == 0 or source.height == 0:
            logger.debug("Render skipped: source image not ready")
            return None

        frame_w, frame_h = display_frame_size
        if frame_w <= 0 or frame_h <= 0:
            logger.debug("Render skipped: display frame has no size")
            return None

        out_w, out_h = output_size(aspect_tag, self.long_side)
        pixel_ratio = out_w / frame_w

        draw_w, draw_h = cover_fit(source.width, source.height, out_w, out_h)

        pos_x, pos_y = transform.position
        origin_x = out_w / 2 + pos_x * pixel_ratio
        origin_y = out_h / 2 + pos_y * pixel_ratio

        theta = math.radians(transform.rotation)
        cos_t = math.cos(theta)
        sin_t = math.sin(theta)
        kx = source.width / draw_w / transform.scale
        ky = source.height / draw_h / transform.scale

        a = kx * cos_t
        b = kx * sin_t
        d = -ky * sin_t
        e = ky * cos_t
        c = source.width / 2 - a * origin_x - b * origin_y
        f = source.height / 2 - d * origin_x - e * origin_y

        return source.transform(
            (out_w, out_h),
            Image.Transform.AFFINE,
            (a, b, c, d, e, f),
            resample=Image.Resampling.BICUBIC,
            fillcolor=(0, 0, 0, 0),
        )

    def render(
        self,
        image: Optional[ImageLike],
        transform: TransformState,
        aspect_tag: str,
        display_frame_size: Tuple[float, float],
    ) -> Optional[bytes]:
        """Return the composited framing as PNG bytes, or ``None`` if the source is not ready."""
        canvas = self.render_image(image, transform, aspect_tag, display_frame_size)
        if canvas is None:
            return None

        buffer = BytesIO()
        canvas.save(buffer, format="PNG")
        return buffer.getvalue()

    def render_data_uri(
        self,
        image: Optional[ImageLike],
        transform: TransformState,
        aspect_tag: str,
        display_frame_size: Tuple[float, float],
    ) -> Optional[str]:
        data = self.render(image, transform, aspect_tag, display_frame_size)
        if data is None:
            return None
        return encode_data_uri(data, "image/png")
