"""
Error taxonomy. Route handlers raise these; the handlers registered in
learnai.app turn them into HTTP responses.
"""

from __future__ import annotations

from typing import Any


class LearnAIError(Exception):
    status_code: int = 500
    default_message: str = "Internal Server Error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_body(self) -> dict[str, Any]:
        return {"message": self.message}


class AuthenticationError(LearnAIError):
    status_code = 401
    default_message = "Authentication failed"


class ValidationError(LearnAIError):
    """Malformed request payload. `errors` is a list of {field, message}."""

    status_code = 400
    default_message = "Validation failed"

    def __init__(self, errors: list[dict[str, str]], message: str | None = None):
        super().__init__(message)
        self.errors = errors

    def to_body(self) -> dict[str, Any]:
        return {"errors": self.errors}


class RateLimitError(LearnAIError):
    status_code = 429
    default_message = "Too many requests, please try again later"

    def __init__(self, retry_after: float, message: str | None = None):
        super().__init__(message)
        self.retry_after = retry_after


class NotFoundError(LearnAIError):
    status_code = 404
    default_message = "Not found"


class UpstreamServiceError(LearnAIError):
    """Reasoning provider failure. Absorbed by the reasoning adapter, never sent to clients."""

    status_code = 502
    default_message = "Reasoning service unavailable"


class SessionWriteConflictError(LearnAIError):
    """A session append kept losing optimistic-concurrency races."""

    status_code = 500
    default_message = "Failed to record tutor turn"
