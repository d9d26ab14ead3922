# =============================================================================
# lib/utils.py - Shared Utilities
# =============================================================================
# Common utilities used across the application.
# =============================================================================

from datetime import datetime, timezone
from typing import Any


# =============================================================================
# Time Utilities
# =============================================================================

def utc_timestamp() -> str:
    """
    Current time formatted as an HTTP-date in UTC.

    Example:
        utc_timestamp()  # "Sun, 18 Oct 2026 09:15:02 GMT"
    """
    return datetime.now(timezone.utc).strftime("%a, %d %b %Y %H:%M:%S GMT")


# =============================================================================
# Base Error Class
# =============================================================================

class ApplicationError(Exception):
    """
    Base class for errors the server raises itself.

    Each error carries a stable ``code`` for log searches and, where the
    operator can do something about it, a ``suggestion``. The terminal
    error responder logs ``to_dict()``; clients never see these fields.

    Example:
        raise SessionStoreError("Redis is unreachable")
        # logged as {"code": "SESSION_STORE_ERROR", "message": ..., ...}
    """

    def __init__(
        self,
        message: str,
        code: str = "APPLICATION_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.details = details or {}

    def __str__(self) -> str:
        return f"{self.message} ({self.code})"

    def to_dict(self) -> dict[str, Any]:
        """Fields for a structured log line; empty ones are left out."""
        result: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.suggestion:
            result["suggestion"] = self.suggestion
        if self.details:
            result["details"] = self.details
        return result
