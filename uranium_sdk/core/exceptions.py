"""
Error taxonomy for the Uranium SDK.

Every failure surfaced to callers is a UraniumError tagged with one ErrorKind,
so callers branch on ``error.kind`` instead of on exception classes.
"""

from enum import Enum
from typing import Any, Dict, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .cancellation import CancellationToken


class ErrorKind(str, Enum):
    """Closed set of failure kinds."""

    VALIDATION = "validation"
    CANCELLED = "cancelled"
    RETRIES_EXHAUSTED = "retries_exhausted"
    UPSTREAM = "upstream"
    UNEXPECTED = "unexpected"


class UraniumError(Exception):
    """Base exception for all SDK errors."""

    def __init__(
        self,
        message: str,
        kind: ErrorKind,
        code: str,
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.kind = kind
        self.code = code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)

    def __repr__(self) -> str:
        return f"UraniumError(kind={self.kind.value!r}, code={self.code!r}, message={self.message!r})"

    @classmethod
    def validation(cls, message: str, code: str = "VALIDATION_ERROR", **details: Any) -> "UraniumError":
        return cls(message, ErrorKind.VALIDATION, code, status_code=400, details=details)

    @classmethod
    def cancelled(cls, message: str = "Upload cancelled by user", code: str = "UPLOAD_CANCELLED", **details: Any) -> "UraniumError":
        return cls(message, ErrorKind.CANCELLED, code, details=details)

    @classmethod
    def retries_exhausted(cls, message: str, code: str = "UPLOAD_FAILED", **details: Any) -> "UraniumError":
        return cls(message, ErrorKind.RETRIES_EXHAUSTED, code, details=details)

    @classmethod
    def upstream(
        cls,
        message: str,
        code: str = "API_ERROR",
        status_code: Optional[int] = None,
        **details: Any,
    ) -> "UraniumError":
        return cls(message, ErrorKind.UPSTREAM, code, status_code=status_code, details=details)

    @classmethod
    def unexpected(cls, message: str, code: str = "UPLOAD_FAILED", **details: Any) -> "UraniumError":
        return cls(message, ErrorKind.UNEXPECTED, code, status_code=500, details=details)


def to_upload_error(
    exc: BaseException, cancel_token: Optional["CancellationToken"] = None
) -> UraniumError:
    """
    Normalize any failure raised during an upload into the taxonomy.
    A signalled token turns every failure into a cancellation.
    """
    if isinstance(exc, UraniumError) and exc.kind == ErrorKind.CANCELLED:
        return exc
    if cancel_token is not None and cancel_token.cancelled:
        return UraniumError.cancelled(original_error=str(exc) or None)
    if isinstance(exc, UraniumError):
        return exc
    return UraniumError.unexpected(f"Upload failed: {exc}", original_error=type(exc).__name__)
