import unittest

import httpx
import openai

from videplacard_backend.services.errors import (
    RECIPE_ERROR_RESPONSES,
    SCAN_ERROR_RESPONSES,
    ProviderError,
    ProviderErrorKind,
    classify_provider_error,
    error_response_for,
)

_REQUEST = httpx.Request("POST", "https://api.openai.com/v1/responses")


def _status_error(cls, status: int, code: str | None = None):
    body = {"message": "boom", "code": code} if code else None
    return cls(
        "boom",
        response=httpx.Response(status, request=_REQUEST),
        body=body,
    )


class ClassifyProviderErrorTests(unittest.TestCase):
    def test_status_errors(self):
        cases = [
            (_status_error(openai.AuthenticationError, 401), ProviderErrorKind.AUTHENTICATION),
            (_status_error(openai.RateLimitError, 429), ProviderErrorKind.RATE_LIMIT),
            (
                _status_error(openai.RateLimitError, 429, code="insufficient_quota"),
                ProviderErrorKind.BILLING,
            ),
            (_status_error(openai.APIStatusError, 402), ProviderErrorKind.BILLING),
            (_status_error(openai.InternalServerError, 500), ProviderErrorKind.UPSTREAM),
            (_status_error(openai.BadRequestError, 400), ProviderErrorKind.UPSTREAM),
        ]
        for exc, expected in cases:
            with self.subTest(exc=type(exc).__name__, status=exc.status_code):
                self.assertIs(classify_provider_error(exc), expected)

    def test_connection_errors_are_upstream(self):
        exc = openai.APIConnectionError(request=_REQUEST)
        self.assertIs(classify_provider_error(exc), ProviderErrorKind.UPSTREAM)


class ErrorResponseForTests(unittest.TestCase):
    def test_recipe_table(self):
        expected_statuses = {
            ProviderErrorKind.AUTHENTICATION: 401,
            ProviderErrorKind.RATE_LIMIT: 429,
            ProviderErrorKind.BILLING: 402,
            ProviderErrorKind.UPSTREAM: 500,
        }
        for kind, status in expected_statuses.items():
            with self.subTest(kind=kind):
                response = error_response_for(
                    ProviderError(kind, "provider says no"), RECIPE_ERROR_RESPONSES
                )
                self.assertEqual(response.status, status)

    def test_generic_error_carries_provider_message(self):
        response = error_response_for(
            ProviderError(ProviderErrorKind.UPSTREAM, "model overloaded"),
            RECIPE_ERROR_RESPONSES,
        )
        self.assertIn("model overloaded", response.message)

    def test_scan_table_only_distinguishes_authentication(self):
        self.assertEqual(
            error_response_for(
                ProviderError(ProviderErrorKind.AUTHENTICATION, "x"),
                SCAN_ERROR_RESPONSES,
            ).status,
            401,
        )
        for kind in (ProviderErrorKind.RATE_LIMIT, ProviderErrorKind.BILLING):
            with self.subTest(kind=kind):
                response = error_response_for(
                    ProviderError(kind, "quota"), SCAN_ERROR_RESPONSES
                )
                self.assertEqual(response.status, 500)
                self.assertIn("quota", response.message)


if __name__ == "__main__":
    unittest.main()
