# src/rakugaki/domain/errors.py
"""
Error taxonomy shared by the critique pipeline and the API.

Every error carries a stable ``code``, an HTTP ``status_code`` and a safe
``user_message``. Technical detail stays in ``str(exc)`` and the logs.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional


class AppError(Exception):
    code: str = "API_ERROR"
    status_code: int = 500
    default_user_message = "Something went wrong while preparing the critique. Please try again."

    def __init__(self, message: str, *, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause

    @property
    def user_message(self) -> str:
        return self.default_user_message

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": type(self).__name__,
            "code": self.code,
            "message": self.message,
            "status_code": self.status_code,
        }


class ParseErrorKind(str, Enum):
    INVALID_STRUCTURE = "InvalidStructure"
    DECODE_ERROR = "DecodeError"
    SCHEMA_VIOLATION = "SchemaViolation"


class ParseError(AppError):
    """Model output could not be turned into an Evaluation."""

    code = "PARSE_ERROR"
    status_code = 500

    _USER_MESSAGES = {
        ParseErrorKind.INVALID_STRUCTURE: "The critic's reply was not in the expected format. Please try again.",
        ParseErrorKind.DECODE_ERROR: "The critic's reply could not be read. Please try again.",
        ParseErrorKind.SCHEMA_VIOLATION: "The critic's reply was incomplete. Please try again.",
    }

    def __init__(
        self,
        kind: ParseErrorKind,
        message: str,
        *,
        field: Optional[str] = None,
        raw_text: str = "",
        cause: Optional[BaseException] = None,
    ):
        super().__init__(f"Model output failure ({kind.value}): {message}", cause=cause)
        self.kind = kind
        self.reason = message
        self.field = field
        self.raw_text = raw_text

    @property
    def user_message(self) -> str:
        return self._USER_MESSAGES.get(self.kind, self.default_user_message)


class ModelError(AppError):
    """Failure reported by the generative model boundary."""

    RATE_LIMIT = "RATE_LIMIT"
    API_ERROR = "API_ERROR"

    def __init__(self, code: str, message: str, *, cause: Optional[BaseException] = None):
        if code not in (self.RATE_LIMIT, self.API_ERROR):
            raise ValueError(f"unsupported model error code: {code}")
        super().__init__(message, cause=cause)
        self.code = code
        self.status_code = 429 if code == self.RATE_LIMIT else 500

    @property
    def is_rate_limit(self) -> bool:
        return self.code == self.RATE_LIMIT

    @property
    def user_message(self) -> str:
        if self.is_rate_limit:
            return "The critic is getting too many requests right now. Please wait a moment and try again."
        return "Something went wrong while the critic was writing. Please try again."


class InputValidationError(AppError):
    code = "VALIDATION_ERROR"
    status_code = 400

    def __init__(self, message: str, *, field: Optional[str] = None, user_message: Optional[str] = None):
        super().__init__(message)
        self.field = field
        self._user_message = user_message

    @property
    def user_message(self) -> str:
        if self._user_message:
            return self._user_message
        if self.field:
            return f"Invalid input: {self.field}"
        return "Invalid input."


class InvalidIdError(InputValidationError):
    code = "INVALID_ID"

    @property
    def user_message(self) -> str:
        return "That artwork id is not valid."


class RateLimitExceeded(AppError):
    """The caller used up its admission quota for the current window."""

    code = "RATE_LIMIT"
    status_code = 429

    def __init__(self, message: str = "rate limit exceeded", *, retry_after_ms: int = 0, remaining: int = 0):
        super().__init__(message)
        self.retry_after_ms = max(0, int(retry_after_ms))
        self.remaining = remaining

    @property
    def retry_after_seconds(self) -> int:
        return -(-self.retry_after_ms // 1000)

    @property
    def user_message(self) -> str:
        return "The critic is on a break. Please try again in a minute."


class NotFoundError(AppError):
    code = "NOT_FOUND"
    status_code = 404

    def __init__(self, resource: str, resource_id: Optional[str] = None):
        super().__init__(f"{resource} not found: {resource_id}" if resource_id else f"{resource} not found")
        self.resource = resource
        self.resource_id = resource_id

    @property
    def user_message(self) -> str:
        return "The requested artwork could not be found."


def normalize_error(error: BaseException) -> AppError:
    """Map any exception onto the taxonomy; unknown failures become API_ERROR."""
    if isinstance(error, AppError):
        return error
    message = str(error) or type(error).__name__
    if "429" in message:
        return ModelError(ModelError.RATE_LIMIT, message, cause=error)
    return ModelError(ModelError.API_ERROR, message, cause=error)
