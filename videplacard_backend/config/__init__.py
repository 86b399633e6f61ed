"""Static configuration shipped with the codebase."""

# LLM defaults are in a dedicated module for clarity and reuse.
from .llm import (
    DEFAULT_LLM_MODEL,
    DEFAULT_LLM_TEMPERATURE,
    RECIPE_SYSTEM_PROMPT,
    SCAN_PROMPT,
)
from .images import IMAGE_JPEG_QUALITY, IMAGE_MAX_DIMENSION

__all__ = [
    "DEFAULT_LLM_MODEL",
    "DEFAULT_LLM_TEMPERATURE",
    "IMAGE_JPEG_QUALITY",
    "IMAGE_MAX_DIMENSION",
    "RECIPE_SYSTEM_PROMPT",
    "SCAN_PROMPT",
]
