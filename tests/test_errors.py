"""Tests for error classification."""

import pytest

from vnr_chat.errors import (
    AUTH_DETAILS,
    QUOTA_DETAILS,
    TIMEOUT_DETAILS,
    AuthError,
    EmptyResponseError,
    ExhaustedModelsError,
    FatalModelError,
    ModelError,
    QuotaExceededError,
    RequestTimeoutError,
    UnknownError,
    categorize_error,
    classify_error,
    is_fatal_error,
)


class TestIsFatalError:
    """Tests for is_fatal_error."""

    @pytest.mark.parametrize("message", ["bad API key", "quota", "Quota hit", "read timeout"])
    def test_fatal_substrings(self, message: str) -> None:
        assert is_fatal_error(RuntimeError(message)) is True

    @pytest.mark.parametrize("message", ["model not found", "connection reset", ""])
    def test_transient(self, message: str) -> None:
        assert is_fatal_error(RuntimeError(message)) is False

    def test_request_timeout_type(self) -> None:
        """Test that our own timeout is fatal whatever its text."""
        assert is_fatal_error(RequestTimeoutError("took too long")) is True

    def test_upstream_429(self) -> None:
        error = RuntimeError("Too Many Requests")
        error.status_code = 429
        assert is_fatal_error(error) is True


class TestClassifyError:
    """Tests for classify_error."""

    def test_api_key(self) -> None:
        assert classify_error(RuntimeError("API key not valid")) == (401, AUTH_DETAILS)

    def test_timeout(self) -> None:
        assert classify_error(FatalModelError("Request timeout after 30s (m1)")) == (408, TIMEOUT_DETAILS)

    def test_quota(self) -> None:
        assert classify_error(RuntimeError("Quota exceeded for model m1")) == (429, QUOTA_DETAILS)

    def test_model(self) -> None:
        """Test that model errors are 400 and keep the error text."""
        info = classify_error(ExhaustedModelsError("The model `x` does not exist"))
        assert info.status_code == 400
        assert info.details == "Model error: The model `x` does not exist"

    def test_unknown(self) -> None:
        assert classify_error(RuntimeError("boom")) == (500, "boom")

    def test_empty_message(self) -> None:
        assert classify_error(RuntimeError()) == (500, "Unknown error")

    def test_upstream_status_used(self) -> None:
        """Test that an upstream HTTP status is kept when no substring matches."""
        error = ExhaustedModelsError("service unavailable", upstream_status=503)
        assert classify_error(error) == (503, "service unavailable")

    def test_empty_response_is_500(self) -> None:
        assert classify_error(EmptyResponseError("Empty response from Groq API")).status_code == 500


class TestCategorizeError:
    """Tests for categorize_error."""

    @pytest.mark.parametrize(
        ("message", "category"),
        [
            ("API key invalid", AuthError),
            ("Request timeout", RequestTimeoutError),
            ("quota exceeded", QuotaExceededError),
            ("Model overloaded", ModelError),
            ("connection reset", UnknownError),
        ],
    )
    def test_categories(self, message: str, category: type) -> None:
        assert categorize_error(RuntimeError(message)) is category

    def test_api_key_wins_over_model(self) -> None:
        """Test that the first matching category is used."""
        assert categorize_error(RuntimeError("API key not valid for model m1")) is AuthError

    @pytest.mark.parametrize(
        ("status_code", "category"),
        [(401, AuthError), (429, QuotaExceededError)],
    )
    def test_upstream_status_before_model(self, status_code: int, category: type) -> None:
        """Test that an upstream 401/429 wins over a mention of the model."""
        error = RuntimeError("Rate limit reached for model `llama-3.3-70b-versatile`")
        error.status_code = status_code
        assert categorize_error(error) is category

    def test_rate_limit_through_fatal_error(self) -> None:
        """Test that the status carried by FatalModelError maps to 429."""
        error = FatalModelError("Rate limit reached for model `m1`", model_name="m1", upstream_status=429)
        assert classify_error(error) == (429, QUOTA_DETAILS)

    def test_invalid_api_key_capitalized(self) -> None:
        error = FatalModelError("Invalid API Key", model_name="m1", upstream_status=401)
        assert classify_error(error) == (401, AUTH_DETAILS)
