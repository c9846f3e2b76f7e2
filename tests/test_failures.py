"""Tests for transport error classification."""

from unittest.mock import MagicMock

import pytest

from agents.failures import (
    AuthFailed,
    ConfigMissing,
    GenerationFailure,
    InsufficientQuota,
    InvalidResponse,
    RateLimited,
    UnknownFailure,
    classify_transport_error,
)
from validation import MalformedResponse


class StatusError(Exception):
    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.status_code = status_code


class TestClassifyTransportError:
    """Test classify_transport_error."""

    @pytest.mark.parametrize("message, expected", [
        ("rate limit exceeded for model", RateLimited),
        ("Too Many Requests", RateLimited),
        ("User not found.", AuthFailed),
        ("Invalid API key provided", AuthFailed),
        ("insufficient credits on account", InsufficientQuota),
        ("You exceeded your current quota", InsufficientQuota),
        ("OPENROUTER_API_KEY environment variable is not set", ConfigMissing),
        ("connection reset by peer", UnknownFailure),
        ("Request timed out", UnknownFailure),
    ])
    def test_message_markers(self, message, expected):
        failure = classify_transport_error(Exception(message))
        assert type(failure) is expected
        assert failure.message == message

    @pytest.mark.parametrize("code, expected", [
        (401, AuthFailed),
        (403, AuthFailed),
        (402, InsufficientQuota),
        (429, RateLimited),
        (500, UnknownFailure),
    ])
    def test_status_codes(self, code, expected):
        assert type(classify_transport_error(StatusError("boom", code))) is expected

    def test_status_code_on_response(self):
        exc = Exception("boom")
        exc.response = MagicMock(status_code=429)
        assert isinstance(classify_transport_error(exc), RateLimited)

    def test_quota_wins_over_rate_limit(self):
        exc = StatusError("insufficient_quota", 429)
        assert isinstance(classify_transport_error(exc), InsufficientQuota)

    def test_empty_message_uses_class_name(self):
        assert classify_transport_error(TimeoutError()).message == "TimeoutError"


class TestFailureFlags:
    """Test the taxonomy flags callers branch on."""

    def test_all_are_generation_failures(self):
        for cls in (ConfigMissing, AuthFailed, RateLimited, InsufficientQuota, UnknownFailure, InvalidResponse):
            assert issubclass(cls, GenerationFailure)

    def test_operator_fixable(self):
        assert AuthFailed("x").operator_fixable
        assert ConfigMissing("x").operator_fixable
        assert not RateLimited("x").operator_fixable

    def test_retryable_later(self):
        assert RateLimited("x").retryable_later
        assert InsufficientQuota("x").retryable_later
        assert not UnknownFailure("x").retryable_later

    def test_invalid_response_wraps_parse_failure(self):
        cause = MalformedResponse("Expecting value: line 1 column 1 (char 0)")
        failure = InvalidResponse(cause)
        assert failure.parse_failure is cause
        assert failure.kind == "invalid_response"
        assert "Expecting value" in str(failure)
