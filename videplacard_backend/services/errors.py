"""Provider error taxonomy and its mapping onto HTTP responses."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

import openai

MISSING_API_KEY_MESSAGE = "Clé API OpenAI non configurée"


class ProviderErrorKind(str, Enum):
    """Failure classes reported by the hosted model provider."""

    AUTHENTICATION = "authentication"
    RATE_LIMIT = "rate_limit"
    BILLING = "billing"
    UPSTREAM = "upstream"


@dataclass(frozen=True, slots=True)
class ErrorResponse:
    status: int
    message: str


class LLMNotConfiguredError(RuntimeError):
    """Raised when no provider credential is configured."""

    def __init__(self, message: str = MISSING_API_KEY_MESSAGE) -> None:
        super().__init__(message)


class ProviderError(RuntimeError):
    """Raised when a request to the model provider fails."""

    def __init__(self, kind: ProviderErrorKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message


_BILLING_CODES = {"insufficient_quota", "billing_hard_limit_reached"}

# Every recipe-endpoint failure maps to exactly one of these responses.
RECIPE_ERROR_RESPONSES: dict[ProviderErrorKind, ErrorResponse] = {
    ProviderErrorKind.AUTHENTICATION: ErrorResponse(401, "Clé API OpenAI invalide."),
    ProviderErrorKind.RATE_LIMIT: ErrorResponse(
        429, "Trop de requêtes. Réessayez dans quelques instants."
    ),
    ProviderErrorKind.BILLING: ErrorResponse(
        402, "Crédit OpenAI insuffisant. Vérifiez votre facturation."
    ),
}

# Scans only distinguish an invalid credential.
SCAN_ERROR_RESPONSES: dict[ProviderErrorKind, ErrorResponse] = {
    ProviderErrorKind.AUTHENTICATION: RECIPE_ERROR_RESPONSES[
        ProviderErrorKind.AUTHENTICATION
    ],
}


def classify_provider_error(exc: openai.APIError) -> ProviderErrorKind:
    """Map an OpenAI SDK exception onto the provider error taxonomy."""

    code = getattr(exc, "code", None)
    if code in _BILLING_CODES:
        return ProviderErrorKind.BILLING

    status = getattr(exc, "status_code", None)
    if isinstance(exc, openai.AuthenticationError) or status == 401:
        return ProviderErrorKind.AUTHENTICATION
    if status == 402:
        return ProviderErrorKind.BILLING
    if isinstance(exc, openai.RateLimitError) or status == 429:
        return ProviderErrorKind.RATE_LIMIT
    return ProviderErrorKind.UPSTREAM


def error_response_for(
    exc: ProviderError,
    table: dict[ProviderErrorKind, ErrorResponse],
) -> ErrorResponse:
    """Return the response for ``exc``; unlisted kinds become a generic 500."""

    mapped = table.get(exc.kind)
    if mapped is not None:
        return mapped
    return ErrorResponse(500, f"Erreur : {exc.message or 'Erreur inconnue'}")
