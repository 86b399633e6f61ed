"""Photo scan pipeline: uploaded image in, ingredient names out."""

from __future__ import annotations

from werkzeug.datastructures import FileStorage

from videplacard_backend.config.llm import SCAN_PROMPT
from videplacard_backend.services.images import downscale_image
from videplacard_backend.services.llm import LLMClient
from videplacard_backend.services.parsing import split_lines

SCAN_MAX_OUTPUT_TOKENS = 1000


def read_image_upload(image_file: FileStorage) -> bytes:
    """Return the bytes of an uploaded photo, rejecting empty uploads."""

    if image_file.filename == "":
        raise ValueError("empty filename")

    image_bytes = image_file.read()
    if not image_bytes:
        raise ValueError("uploaded file was empty")
    return image_bytes


def scan_ingredients(
    llm_client: LLMClient,
    *,
    image_bytes: bytes,
    mime_type: str | None = None,
) -> list[str]:
    """List the grocery items the model can see in the photo."""

    prepared = downscale_image(image_bytes, mime_type)
    result = llm_client.analyze_image(
        image_bytes=prepared.data,
        prompt=SCAN_PROMPT,
        mime_type=prepared.mime_type,
        max_output_tokens=SCAN_MAX_OUTPUT_TOKENS,
    )
    return split_lines(result.raw_text)
