"""Tests for provider error classification."""

from http import HTTPStatus

from csvchat.core.service.errors import (
    CODE_INPUT_TOO_LONG,
    MSG_PROCESSING_ERROR,
    MSG_QUOTA_EXCEEDED,
    InputValidationError,
    ProviderQuotaError,
    ResponseTooLongError,
    UnclassifiedError,
    classify_provider_error,
)


class FakeAPIError(Exception):
    def __init__(self, message: str, status_code=None):
        super().__init__(message)
        self.status_code = status_code


class TestClassifyProviderError:
    def test_status_code_429(self):
        error = classify_provider_error(FakeAPIError("slow down", status_code=429))

        assert isinstance(error, ProviderQuotaError)
        assert error.status_code == 429
        assert error.message == MSG_QUOTA_EXCEEDED

    def test_http_status_enum(self):
        error = classify_provider_error(
            FakeAPIError("nope", status_code=HTTPStatus.TOO_MANY_REQUESTS)
        )
        assert isinstance(error, ProviderQuotaError)

    def test_quota_message(self):
        error = classify_provider_error(
            RuntimeError("429 RESOURCE_EXHAUSTED: Quota exceeded for model")
        )
        assert isinstance(error, ProviderQuotaError)

    def test_rate_limit_beats_length(self):
        error = classify_provider_error(
            RuntimeError("rate limit reached for tokens per minute")
        )
        assert isinstance(error, ProviderQuotaError)

    def test_token_message(self):
        error = classify_provider_error(
            ValueError("The input token count exceeds the maximum")
        )

        assert isinstance(error, ResponseTooLongError)
        assert error.code == CODE_INPUT_TOO_LONG
        assert error.status_code == 400

    def test_wrapped_cause_is_inspected(self):
        try:
            try:
                raise FakeAPIError("busy", status_code=429)
            except FakeAPIError as inner:
                raise RuntimeError("generation failed") from inner
        except RuntimeError as outer:
            error = classify_provider_error(outer)

        assert isinstance(error, ProviderQuotaError)

    def test_unknown_failure(self):
        error = classify_provider_error(ConnectionError("connection reset"))

        assert isinstance(error, UnclassifiedError)
        assert error.status_code == 500
        assert error.message == MSG_PROCESSING_ERROR

    def test_chat_errors_pass_through(self):
        original = InputValidationError()
        assert classify_provider_error(original) is original
