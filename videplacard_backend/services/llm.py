"""Client helpers for interacting with the hosted LLM."""

from __future__ import annotations

import base64
import logging
from dataclasses import dataclass
from typing import Any, Optional

import openai
from httpx import RequestError, TimeoutException
from openai import OpenAI
from openai.types.responses import Response

from videplacard_backend.services.errors import (
    ProviderError,
    ProviderErrorKind,
    classify_provider_error,
)

logger = logging.getLogger(__name__)


@dataclass
class LLMSettings:
    """Configuration required to talk to the model."""

    api_key: str
    model: str = "gpt-4o-mini"
    temperature: Optional[float] = None


@dataclass(slots=True)
class LLMResult:
    """Container for the raw text output of the model."""

    raw_text: str


class LLMClient:
    """Thin wrapper around the OpenAI Responses API for text and vision requests."""

    def __init__(self, settings: LLMSettings) -> None:
        self._settings = settings
        self._client = OpenAI(api_key=settings.api_key)

    def run_prompt(
        self,
        *,
        prompt: str,
        system_prompt: str | None = None,
        temperature: float | None = None,
    ) -> LLMResult:
        """Send a text-only prompt to the configured LLM."""

        user_text = (prompt or "").strip()
        if not user_text:
            raise ValueError("prompt is required")

        content: list[dict[str, Any]] = []
        if system_prompt:
            content.append(
                {
                    "role": "system",
                    "content": [{"type": "input_text", "text": system_prompt}],
                }
            )
        content.append(
            {
                "role": "user",
                "content": [{"type": "input_text", "text": user_text}],
            }
        )

        effective_temperature = (
            temperature if temperature is not None else self._settings.temperature
        )
        options: dict[str, Any] = {}
        if effective_temperature is not None:
            options["temperature"] = effective_temperature

        return self._create(content, **options)

    def analyze_image(
        self,
        *,
        image_bytes: bytes,
        prompt: str,
        mime_type: str | None = None,
        max_output_tokens: int | None = None,
    ) -> LLMResult:
        """Send the given prompt and image to the configured LLM."""
        if not image_bytes:
            raise ValueError("image_bytes is empty")

        user_text = (prompt or "").strip()
        if not user_text:
            raise ValueError("prompt is required")

        image_base64 = base64.b64encode(image_bytes).decode("ascii")
        mime = (mime_type or "image/jpeg").strip() or "image/jpeg"
        data_uri = f"data:{mime};base64,{image_base64}"

        content = [
            {
                "role": "user",
                "content": [
                    {"type": "input_text", "text": user_text},
                    {"type": "input_image", "image_url": data_uri},
                ],
            }
        ]

        options: dict[str, Any] = {}
        if max_output_tokens is not None:
            options["max_output_tokens"] = max_output_tokens

        return self._create(content, **options)

    def _create(self, content: list[dict[str, Any]], **options: Any) -> LLMResult:
        try:
            response: Response = self._client.responses.create(
                model=self._settings.model,
                input=content,
                **options,
            )
        except openai.APIError as e:
            kind = classify_provider_error(e)
            logger.error("OpenAI API error (%s): %s", kind.value, e)
            raise ProviderError(kind, _provider_message(e)) from e
        except TimeoutException as e:
            logger.error("OpenAI / HTTP timeout: %r", e)
            raise ProviderError(ProviderErrorKind.UPSTREAM, str(e)) from e
        except RequestError as e:
            logger.error("OpenAI / HTTP network error: %r", e)
            raise ProviderError(ProviderErrorKind.UPSTREAM, str(e)) from e

        return LLMResult(raw_text=response.output_text or "")


def _provider_message(exc: openai.APIError) -> str:
    message = getattr(exc, "message", None) or str(exc)
    return message.strip()


def init_llm_client(settings: LLMSettings) -> LLMClient:
    """Create an ``LLMClient`` instance from the provided settings."""

    return LLMClient(settings)
