"""Standardized error handling for control-plane calls.

Provides error codes and structured error descriptions used for retry
decisions. Uses Pydantic for validation and serialization.
"""

from __future__ import annotations

from enum import StrEnum
from functools import lru_cache
from typing import Annotated, Any, Self

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    computed_field,
    field_validator,
)


class ErrorCode(StrEnum):
    """Standard error codes for control-plane failures.

    Used for programmatic error handling and retry decisions.
    """
    LIMIT_EXCEEDED = "LIMIT_EXCEEDED"
    RESOURCE_IN_USE = "RESOURCE_IN_USE"
    RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"
    INVALID_ARGUMENT = "INVALID_ARGUMENT"
    ACCESS_DENIED = "ACCESS_DENIED"
    TIMEOUT = "TIMEOUT"
    NETWORK_ERROR = "NETWORK_ERROR"
    EXTERNAL_SERVICE_ERROR = "EXTERNAL_SERVICE_ERROR"
    UNKNOWN = "UNKNOWN"


# Service error codes as they appear in AWS-style error payloads
_SERVICE_CODES: dict[str, ErrorCode] = {
    "LimitExceededException": ErrorCode.LIMIT_EXCEEDED,
    "ProvisionedThroughputExceededException": ErrorCode.LIMIT_EXCEEDED,
    "ThrottlingException": ErrorCode.LIMIT_EXCEEDED,
    "ResourceInUseException": ErrorCode.RESOURCE_IN_USE,
    "ResourceNotFoundException": ErrorCode.RESOURCE_NOT_FOUND,
    "InvalidArgumentException": ErrorCode.INVALID_ARGUMENT,
    "ValidationException": ErrorCode.INVALID_ARGUMENT,
    "AccessDeniedException": ErrorCode.ACCESS_DENIED,
}

# Flattened pattern -> code mapping, checked in order
_PATTERN_CODES: dict[str, ErrorCode] = {
    "limitexceeded": ErrorCode.LIMIT_EXCEEDED,
    "throttl": ErrorCode.LIMIT_EXCEEDED,
    "rate exceeded": ErrorCode.LIMIT_EXCEEDED,
    "timeout": ErrorCode.TIMEOUT,
    "connection": ErrorCode.NETWORK_ERROR,
    "network": ErrorCode.NETWORK_ERROR,
    "notfound": ErrorCode.RESOURCE_NOT_FOUND,
    "not found": ErrorCode.RESOURCE_NOT_FOUND,
    "inuse": ErrorCode.RESOURCE_IN_USE,
    "accessdenied": ErrorCode.ACCESS_DENIED,
    "permission": ErrorCode.ACCESS_DENIED,
    "forbidden": ErrorCode.ACCESS_DENIED,
    "validation": ErrorCode.INVALID_ARGUMENT,
    "invalid": ErrorCode.INVALID_ARGUMENT,
}
_PATTERN_KEYS = tuple(_PATTERN_CODES.keys())


@lru_cache(maxsize=256)
def _classify_cached(exc_key: str) -> ErrorCode:
    """Cached classification by exception signature."""
    haystack = exc_key.lower()
    for pattern in _PATTERN_KEYS:
        if pattern in haystack:
            return _PATTERN_CODES[pattern]
    return ErrorCode.EXTERNAL_SERVICE_ERROR


def _service_code(exc: BaseException) -> str | None:
    """Extract the service error code from an SDK-style ``response`` payload."""
    response: Any = getattr(exc, "response", None)
    if not isinstance(response, dict):
        return None
    error = response.get("Error")
    return error.get("Code") if isinstance(error, dict) else None


def classify_exception(exc: BaseException) -> ErrorCode:
    """Map an exception to an error code.

    Resolution order: explicit code on ``ControlPlaneException``, service
    code in an SDK error payload, exception class name, then pattern matching
    on name and message.
    """
    if isinstance(exc, ControlPlaneException):
        return exc.error.code
    if (code := _service_code(exc)) and code in _SERVICE_CODES:
        return _SERVICE_CODES[code]
    if (name := type(exc).__name__) in _SERVICE_CODES:
        return _SERVICE_CODES[name]
    if isinstance(exc, TimeoutError):
        return ErrorCode.TIMEOUT
    return _classify_cached(f"{name} {exc}")


def is_rate_limited(exc: BaseException) -> bool:
    """Whether the server rejected the request because of rate limiting."""
    return classify_exception(exc) is ErrorCode.LIMIT_EXCEEDED


class ControlPlaneError(BaseModel):
    """Structured description of a failed control-plane call.

    Attributes:
        operation: Name of the remote operation that failed
        message: Human-readable error message
        code: Machine-readable error code for programmatic handling
    """

    model_config = ConfigDict(
        frozen=True,
        str_strip_whitespace=True,
        validate_default=True,
        json_schema_extra={
            "title": "Control Plane Error",
            "examples": [{
                "operation": "list_streams",
                "message": "Rate exceeded for account",
                "code": "LIMIT_EXCEEDED",
            }],
        },
    )

    operation: Annotated[str, Field(min_length=1, description="Remote operation name")]
    message: Annotated[str, Field(min_length=1, description="Human-readable error message")]
    code: ErrorCode = Field(default=ErrorCode.UNKNOWN, description="Machine-readable error classification")

    @field_validator("message", mode="before")
    @classmethod
    def _ensure_message(cls, v: str | Exception) -> str:
        """Accept Exception objects and extract message."""
        return str(v) if isinstance(v, Exception) else v

    @computed_field
    @property
    def is_retryable(self) -> bool:
        """Whether the same request may succeed if retried."""
        return self.code is ErrorCode.LIMIT_EXCEEDED

    @classmethod
    def from_exception(cls, operation: str, exc: BaseException) -> Self:
        """Create from exception with auto-classification."""
        return cls(operation=operation, message=str(exc) or type(exc).__name__, code=classify_exception(exc))

    def __str__(self) -> str:
        return f"{self.operation} failed ({self.code}): {self.message}"


class ControlPlaneException(Exception):
    """Exception wrapping a ControlPlaneError for raising."""

    __slots__ = ("error",)

    def __init__(self, error: ControlPlaneError) -> None:
        self.error = error
        super().__init__(error.message)

    @classmethod
    def create(cls, operation: str, message: str, code: ErrorCode = ErrorCode.UNKNOWN) -> Self:
        return cls(ControlPlaneError(operation=operation, message=message, code=code))

    @property
    def code(self) -> ErrorCode:
        return self.error.code


class LimitExceededException(ControlPlaneException):
    """The request was rejected because the account's request rate was exceeded."""

    def __init__(self, operation: str, message: str = "Rate exceeded") -> None:
        super().__init__(ControlPlaneError(operation=operation, message=message, code=ErrorCode.LIMIT_EXCEEDED))
