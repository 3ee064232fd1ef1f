"""
ERRORS MODULE
=============

Exception types raised by the services, and the two functions that read them:

  is_fatal_error(exc)  - Used by the model invoker: should we stop trying other models?
  classify_error(exc)  - Used by the API layer: which HTTP status and message to return?

Both inspect the error text the same way the upstream SDKs report problems
("Invalid API key", "quota exceeded", "Request timeout", ...), plus the HTTP
status an SDK exception may carry.
"""

from typing import List, NamedTuple, Optional, Tuple

# ==============================================================================
# TAXONOMY
# ==============================================================================

class ChatAppError(Exception):
    """Base class. status_code is the HTTP status used when nothing more specific matches."""
    status_code = 500


class InvalidInputError(ChatAppError):
    """A required request field is missing or malformed."""
    status_code = 400


class AuthError(ChatAppError):
    status_code = 401


class RequestTimeoutError(ChatAppError):
    """A model attempt did not finish within its time limit."""
    status_code = 408


class QuotaExceededError(ChatAppError):
    status_code = 429


class ModelError(ChatAppError):
    status_code = 400


class UnknownError(ChatAppError):
    status_code = 500


class ExtractionError(ChatAppError):
    """The model's reply did not contain a usable quiz question."""


class EmptyResponseError(ChatAppError):
    """The model replied with nothing but whitespace."""


class FatalModelError(ChatAppError):
    """
    The invoker stopped early because the failure would repeat on every model
    (bad key, quota, timeout). The message is the underlying error's message.
    """

    def __init__(self, message: str, model_name: Optional[str] = None, upstream_status: Optional[int] = None):
        super().__init__(message)
        self.model_name = model_name
        self.upstream_status = upstream_status


class ExhaustedModelsError(ChatAppError):
    """
    Every configured model failed with a non-fatal error. The message is the
    last error's message; attempts lists (model_name, exception) in order.
    """

    def __init__(self, message: str, attempts: Optional[List[Tuple[str, Exception]]] = None,
                 upstream_status: Optional[int] = None):
        super().__init__(message)
        self.attempts = attempts or []
        self.upstream_status = upstream_status

# ==============================================================================
# CLASSIFICATION
# ==============================================================================

AUTH_DETAILS = "Invalid or missing API key. Please check your GROQ_API_KEY in .env"
TIMEOUT_DETAILS = "Request timeout. Please try again."
QUOTA_DETAILS = "API quota exceeded. Please check your Groq API quota."


class ErrorInfo(NamedTuple):
    status_code: int
    details: str


def upstream_status_of(exc: Exception) -> Optional[int]:
    """HTTP status carried by an SDK exception (status_code / upstream_status), if any."""
    for attr in ("upstream_status", "status_code", "status"):
        value = getattr(exc, attr, None)
        # ChatAppError.status_code is our own mapping, not something the upstream said.
        if attr == "status_code" and isinstance(exc, ChatAppError):
            continue
        if isinstance(value, int) and 400 <= value <= 599:
            return value
    return None


def _mentions_quota(msg: str) -> bool:
    return "quota" in msg or "Quota" in msg


def is_fatal_error(exc: Exception) -> bool:
    """
    True if trying the next model would not help.

    Matches the message substrings "API key", "quota", "Quota" and "timeout",
    our own RequestTimeoutError, and upstream 401/429 responses.
    """
    if isinstance(exc, RequestTimeoutError):
        return True
    msg = str(exc)
    if "API key" in msg or _mentions_quota(msg) or "timeout" in msg:
        return True
    return upstream_status_of(exc) in (401, 429)


def categorize_error(exc: Exception) -> type:
    """
    Which taxonomy class an arbitrary exception belongs to.

    Judged by its text first, then by an upstream 401/429 status, which
    Groq sends with messages such as "Invalid API Key" or "Rate limit reached
    for model ..." that the substrings miss.
    """
    msg = str(exc)
    if "API key" in msg:
        return AuthError
    if "timeout" in msg or isinstance(exc, RequestTimeoutError):
        return RequestTimeoutError
    if _mentions_quota(msg):
        return QuotaExceededError
    status = upstream_status_of(exc)
    if status == 401:
        return AuthError
    if status == 429:
        return QuotaExceededError
    if "model" in msg or "Model" in msg:
        return ModelError
    return UnknownError


def classify_error(exc: Exception) -> ErrorInfo:
    """Map any exception to the HTTP status and user-facing details string."""
    category = categorize_error(exc)
    msg = str(exc)

    if category is AuthError:
        return ErrorInfo(AuthError.status_code, AUTH_DETAILS)
    if category is RequestTimeoutError:
        return ErrorInfo(RequestTimeoutError.status_code, TIMEOUT_DETAILS)
    if category is QuotaExceededError:
        return ErrorInfo(QuotaExceededError.status_code, QUOTA_DETAILS)
    if category is ModelError:
        return ErrorInfo(ModelError.status_code, f"Model error: {msg}")

    status = upstream_status_of(exc)
    if status is None:
        status = exc.status_code if isinstance(exc, ChatAppError) else UnknownError.status_code
    return ErrorInfo(status, msg or "Unknown error")
