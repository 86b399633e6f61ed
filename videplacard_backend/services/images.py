"""Downsizing of scan photos before they are sent to the model."""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass

from PIL import Image, ImageOps, UnidentifiedImageError

from videplacard_backend.config.images import IMAGE_JPEG_QUALITY, IMAGE_MAX_DIMENSION

logger = logging.getLogger(__name__)


class ImageTooLargeError(ValueError):
    """Raised when an upload decodes to more pixels than Pillow allows."""


@dataclass(slots=True)
class PreparedImage:
    data: bytes
    mime_type: str


def downscale_image(
    image_bytes: bytes,
    mime_type: str | None = None,
    *,
    max_dimension: int = IMAGE_MAX_DIMENSION,
    quality: int = IMAGE_JPEG_QUALITY,
) -> PreparedImage:
    """Scale the longest edge down to ``max_dimension`` and re-encode as JPEG.

    Bytes Pillow cannot decode are returned unchanged so the model can still
    try to read them. Decompression bombs raise ``ImageTooLargeError``.
    """

    try:
        with Image.open(io.BytesIO(image_bytes)) as image:
            image = ImageOps.exif_transpose(image)
            if image.mode not in ("RGB", "L"):
                image = image.convert("RGB")
            # thumbnail() keeps the aspect ratio and never upscales.
            image.thumbnail((max_dimension, max_dimension))

            output_buffer = io.BytesIO()
            image.save(output_buffer, format="JPEG", quality=quality)
    except Image.DecompressionBombError as exc:
        raise ImageTooLargeError("image too large") from exc
    except (UnidentifiedImageError, OSError) as exc:
        logger.warning("could not decode scan image, forwarding as-is: %s", exc)
        return PreparedImage(data=image_bytes, mime_type=mime_type or "image/jpeg")

    return PreparedImage(data=output_buffer.getvalue(), mime_type="image/jpeg")
