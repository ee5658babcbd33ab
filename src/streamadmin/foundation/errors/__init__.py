"""Unified error handling for streamadmin.

- ErrorCode: Standard error codes for control-plane failures
- ControlPlaneError/ControlPlaneException: Structured errors and exceptions
- classify_exception/is_rate_limited: Retry classification
"""

from .errors import (
    ControlPlaneError,
    ControlPlaneException,
    ErrorCode,
    LimitExceededException,
    classify_exception,
    is_rate_limited,
)

__all__ = [
    "ErrorCode", "ControlPlaneError", "ControlPlaneException", "LimitExceededException",
    "classify_exception", "is_rate_limited",
]
