"""Generation failure taxonomy and transport error classification.

Callers branch on the exception class; the original transport message is kept
on the exception and as ``__cause__`` for diagnostics.
"""

from typing import Optional

from validation.response_parser import ParseFailure


class GenerationFailure(Exception):
    """Base class for every way plan generation can fail."""
    kind = "generation_failure"
    operator_fixable = False
    retryable_later = False

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigMissing(GenerationFailure):
    """Model identifier or credential is not configured."""
    kind = "config_missing"
    operator_fixable = True


class AuthFailed(GenerationFailure):
    """The model endpoint rejected the credential."""
    kind = "auth_failed"
    operator_fixable = True


class RateLimited(GenerationFailure):
    kind = "rate_limited"
    retryable_later = True


class InsufficientQuota(GenerationFailure):
    """Account has no credits or quota left."""
    kind = "insufficient_quota"
    operator_fixable = True
    retryable_later = True


class UnknownFailure(GenerationFailure):
    """Transport failure that matched no known kind."""
    kind = "unknown"


class InvalidResponse(GenerationFailure):
    """The model answered, but the answer is not a valid plan."""
    kind = "invalid_response"

    def __init__(self, parse_failure: ParseFailure):
        super().__init__(f"Model response rejected: {parse_failure}")
        self.parse_failure = parse_failure


_CONFIG_MARKERS = ("api_key client option must be set", "is not set", "no api key provided")
_AUTH_MARKERS = ("user not found", "invalid api key", "incorrect api key", "authentication", "unauthorized")
_QUOTA_MARKERS = ("insufficient credits", "insufficient_quota", "exceeded your current quota")
_RATE_MARKERS = ("rate limit", "rate_limit", "too many requests")


def _status_code(exc: BaseException) -> Optional[int]:
    code = getattr(exc, "status_code", None)
    if code is None:
        response = getattr(exc, "response", None)
        code = getattr(response, "status_code", None)
    try:
        return int(code) if code is not None else None
    except (TypeError, ValueError):
        return None


def classify_transport_error(exc: BaseException) -> GenerationFailure:
    """Map a provider/SDK exception onto the generation failure taxonomy.

    Status codes win over message text. Quota is checked before rate
    limiting because some gateways report exhausted credits as 429.

    Args:
        exc: Exception raised by the provider call

    Returns:
        The classified failure (not raised)
    """
    message = str(exc) or exc.__class__.__name__
    lowered = message.lower()
    code = _status_code(exc)

    if code in (401, 403):
        return AuthFailed(message)
    if code == 402:
        return InsufficientQuota(message)
    if any(marker in lowered for marker in _QUOTA_MARKERS):
        return InsufficientQuota(message)
    if code == 429 or any(marker in lowered for marker in _RATE_MARKERS):
        return RateLimited(message)
    if any(marker in lowered for marker in _AUTH_MARKERS):
        return AuthFailed(message)
    if any(marker in lowered for marker in _CONFIG_MARKERS):
        return ConfigMissing(message)
    return UnknownFailure(message)
