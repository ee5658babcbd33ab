"""Foundation layer: errors and configuration."""

from .config import StreamAdminSettings, clear_settings_cache, get_settings
from .errors import (
    ControlPlaneError,
    ControlPlaneException,
    ErrorCode,
    LimitExceededException,
    classify_exception,
    is_rate_limited,
)

__all__ = [
    "StreamAdminSettings", "get_settings", "clear_settings_cache",
    "ErrorCode", "ControlPlaneError", "ControlPlaneException", "LimitExceededException",
    "classify_exception", "is_rate_limited",
]
