"""
Metrics URL Input - completion and validation engine for a metrics URL field.

This package provides incremental URL completion, a bounded-time availability
probe for metrics endpoints, and a non-overlapping auto-refresh scheduler,
wired together behind a small form controller.
"""

__version__ = "0.1.0"

from metrics_url_input.exceptions import (
    MetricsUrlError,
    FormatError,
    ProbeError,
    ProbeTimeoutError,
    UnavailableError,
    ContentTypeError,
    MalformedResponseError,
    SchedulerError,
)
from metrics_url_input.enums import (
    LogLevel,
    UrlValidationErrorCode,
    RejectionCode,
    SuggestionPhase,
    RefreshState,
    SubmitStatus,
)
from metrics_url_input.models import (
    UrlSuggestionTable,
    DEFAULT_URL_SUGGESTIONS,
    InputState,
    ValidationOutcome,
    ErrorNotification,
    RefreshSession,
)
from metrics_url_input.config import (
    ProbeConfig,
    RefreshConfig,
    SuggestionConfig,
    LoggingConfig,
    FormConfig,
    create_default_config,
    load_config_from_env,
    load_config_from_file,
)
from metrics_url_input.audit_logger import (
    AuditLogger,
    LogEntry,
    mask_url_credentials,
)
from metrics_url_input.url_validator import (
    UrlValidator,
    UrlValidationResult,
    UrlValidationError,
    INVALID_URL_MESSAGE,
)
from metrics_url_input.suggestion_engine import (
    SuggestionEngine,
    on_input_change,
    on_focus,
    on_key,
    on_suggestion_click,
    on_click_outside,
)
from metrics_url_input.notifications import (
    ERROR_TITLES,
    pick_error_title,
    build_error_notification,
    NotificationSink,
    AuditLogNotifier,
)
from metrics_url_input.availability_checker import (
    AvailabilityChecker,
)
from metrics_url_input.scheduler import (
    RefreshScheduler,
)
from metrics_url_input.form import (
    MetricsForm,
)

__all__ = [
    # Exceptions
    "MetricsUrlError",
    "FormatError",
    "ProbeError",
    "ProbeTimeoutError",
    "UnavailableError",
    "ContentTypeError",
    "MalformedResponseError",
    "SchedulerError",
    # Enums
    "LogLevel",
    "UrlValidationErrorCode",
    "RejectionCode",
    "SuggestionPhase",
    "RefreshState",
    "SubmitStatus",
    # Models
    "UrlSuggestionTable",
    "DEFAULT_URL_SUGGESTIONS",
    "InputState",
    "ValidationOutcome",
    "ErrorNotification",
    "RefreshSession",
    # Configuration
    "ProbeConfig",
    "RefreshConfig",
    "SuggestionConfig",
    "LoggingConfig",
    "FormConfig",
    "create_default_config",
    "load_config_from_env",
    "load_config_from_file",
    # Audit Logger
    "AuditLogger",
    "LogEntry",
    "mask_url_credentials",
    # URL Validator
    "UrlValidator",
    "UrlValidationResult",
    "UrlValidationError",
    "INVALID_URL_MESSAGE",
    # Suggestion Engine
    "SuggestionEngine",
    "on_input_change",
    "on_focus",
    "on_key",
    "on_suggestion_click",
    "on_click_outside",
    # Notifications
    "ERROR_TITLES",
    "pick_error_title",
    "build_error_notification",
    "NotificationSink",
    "AuditLogNotifier",
    # Availability Checker
    "AvailabilityChecker",
    # Scheduler
    "RefreshScheduler",
    # Form
    "MetricsForm",
]
