"""
Exception classes for the metrics URL input engine.

All exceptions inherit from MetricsUrlError and provide structured
error information with codes, messages, and optional details.
"""

from typing import Optional

from .enums import RejectionCode


class MetricsUrlError(Exception):
    """Base exception for all metrics URL input errors."""

    def __init__(
        self,
        code: str,
        message: str,
        details: Optional[dict] = None,
    ) -> None:
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"

    def to_dict(self) -> dict:
        """Convert exception to dictionary for serialization."""
        return {
            "error_type": self.__class__.__name__,
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class FormatError(MetricsUrlError):
    """Raised when a field value is not a syntactically valid absolute URL."""

    pass


class ProbeError(MetricsUrlError):
    """
    Raised when an availability probe rejects a URL.

    Subclasses fix the rejection code; the message is the exact reason
    string shown to the user.
    """

    rejection_code = RejectionCode.NETWORK_ERROR

    def __init__(
        self,
        message: str,
        url: str,
        http_status_code: Optional[int] = None,
        details: Optional[dict] = None,
    ) -> None:
        self.url = url
        self.http_status_code = http_status_code
        merged = {"url": url}
        if http_status_code is not None:
            merged["http_status_code"] = http_status_code
        merged.update(details or {})
        super().__init__(self.rejection_code.value, message, merged)

    def to_outcome(self):
        """Convert the error to a rejected ValidationOutcome."""
        from .models import ValidationOutcome

        return ValidationOutcome.reject(
            code=self.rejection_code,
            reason=self.message,
            http_status_code=self.http_status_code,
        )


class ProbeTimeoutError(ProbeError):
    """Raised when the probe does not complete within the timeout."""

    rejection_code = RejectionCode.TIMEOUT

    def __init__(self, url: str, timeout_seconds: float) -> None:
        super().__init__(
            f"Timeout reaching {url}",
            url,
            details={"timeout_seconds": timeout_seconds},
        )


class UnavailableError(ProbeError):
    """Raised when the probe returns a non-success HTTP status."""

    rejection_code = RejectionCode.UNAVAILABLE

    def __init__(self, url: str, status_code: int) -> None:
        super().__init__(
            f"HEAD request failed ({status_code})",
            url,
            http_status_code=status_code,
        )


class ContentTypeError(ProbeError):
    """Raised when the response content type does not contain text/plain."""

    rejection_code = RejectionCode.CONTENT_TYPE

    def __init__(
        self,
        url: str,
        content_type: Optional[str],
        expected: str = "text/plain",
        http_status_code: Optional[int] = None,
    ) -> None:
        super().__init__(
            f"Invalid content type (expected {expected})",
            url,
            http_status_code=http_status_code,
            details={"content_type": content_type},
        )


class MalformedResponseError(ProbeError):
    """Raised for any other transport or protocol failure during the probe."""

    rejection_code = RejectionCode.NETWORK_ERROR

    def __init__(self, url: str, detail: str) -> None:
        super().__init__(f"Request to {url} failed: {detail}", url)


class SchedulerError(MetricsUrlError):
    """Raised when the refresh scheduler is used in an invalid state."""

    pass
