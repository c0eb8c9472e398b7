"""
Data models for the metrics URL input engine.

This module defines the suggestion lookup table, the transient input field
state, probe outcomes, error notifications and the auto-refresh session.
"""

import asyncio
from dataclasses import dataclass, field
from typing import Optional

from .enums import RejectionCode


@dataclass(frozen=True)
class UrlSuggestionTable:
    """
    Static completion fragments keyed by category.

    Declaration order is significance order: earlier entries are offered
    first and the first match is the one accepted by Tab.
    """

    protocols: tuple[str, ...]
    subdomains: tuple[str, ...]
    tlds: tuple[str, ...]
    paths: tuple[str, ...]


DEFAULT_URL_SUGGESTIONS = UrlSuggestionTable(
    protocols=("https://", "http://"),
    subdomains=("server.", "api.", "staging.", "www."),
    tlds=(".com", ".net", ".org", ".io", ".co", ".dev"),
    paths=("/metrics",),
)


@dataclass
class InputState:
    """Live value of the URL field and its suggestion list."""

    value: str = ""
    suggestions: list[str] = field(default_factory=list)
    suggestions_visible: bool = False

    @property
    def shows_suggestions(self) -> bool:
        """True when the presentation layer should render the list."""
        return self.suggestions_visible and bool(self.suggestions)


@dataclass(frozen=True)
class ValidationOutcome:
    """Result of a single availability probe: accepted or rejected with a reason."""

    accepted: bool
    reason: Optional[str] = None
    code: Optional[RejectionCode] = None
    http_status_code: Optional[int] = None

    @classmethod
    def accept(cls, http_status_code: Optional[int] = None) -> "ValidationOutcome":
        return cls(accepted=True, http_status_code=http_status_code)

    @classmethod
    def reject(
        cls,
        code: RejectionCode,
        reason: str,
        http_status_code: Optional[int] = None,
    ) -> "ValidationOutcome":
        if not reason:
            raise ValueError("A rejected outcome requires a reason")
        return cls(
            accepted=False,
            reason=reason,
            code=code,
            http_status_code=http_status_code,
        )

    @property
    def rejected(self) -> bool:
        return not self.accepted


@dataclass(frozen=True)
class ErrorNotification:
    """A destructive toast shown when a probe rejects a URL."""

    title: str
    description: str
    url: str
    variant: str = "destructive"


@dataclass
class RefreshSession:
    """
    Lifecycle of one armed auto-refresh timer.

    Created when auto-refresh is armed and discarded (timer cancelled) on
    disarm or teardown. At most one cycle is in flight per session.
    """

    enabled: bool = True
    in_flight: bool = False
    timer_handle: Optional[asyncio.Task] = None
    tick_count: int = 0
    skipped_ticks: int = 0
