"""
Enumeration types for the metrics URL input engine.

These enums provide type-safe constants for status codes, error codes,
and state machine states throughout the system.
"""

from enum import Enum


class LogLevel(Enum):
    """Logging severity levels."""

    DEBUG = "debug"
    INFO = "info"
    WARN = "warn"
    ERROR = "error"


class UrlValidationErrorCode(Enum):
    """Error codes for URL format validation failures."""

    EMPTY_INPUT = "empty_input"
    FORBIDDEN_CHARS = "forbidden_chars"
    MISSING_SCHEME = "missing_scheme"
    MISSING_HOST = "missing_host"
    INVALID_HOST = "invalid_host"
    INVALID_PORT = "invalid_port"


class RejectionCode(Enum):
    """Reasons an availability probe rejects a URL."""

    TIMEOUT = "timeout"
    UNAVAILABLE = "unavailable"
    CONTENT_TYPE = "content_type"
    NETWORK_ERROR = "network_error"


class SuggestionPhase(Enum):
    """Which part of the URL the suggestion engine is completing."""

    PROTOCOL = "protocol"
    SUBDOMAIN = "subdomain"
    TLD = "tld"
    PATH = "path"


class RefreshState(Enum):
    """Auto-refresh state machine states."""

    DISABLED = "disabled"
    ARMED = "armed"
    CLOSED = "closed"


class SubmitStatus(Enum):
    """Result of one validate-then-submit attempt."""

    ACCEPTED = "accepted"
    REJECTED = "rejected"
    INVALID_FORMAT = "invalid_format"
    SKIPPED_BUSY = "skipped_busy"
