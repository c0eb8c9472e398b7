"""
Error notification module for the metrics URL input engine.

Builds the destructive toast shown when a probe rejects a URL. The title
is drawn at random from a fixed pool of lighthearted headers; the body is
always the exact rejection reason. The random source is injectable so
tests can pin the title.
"""

import random
from abc import abstractmethod
from typing import Optional, Protocol, runtime_checkable

from .audit_logger import AuditLogger
from .models import ErrorNotification


ERROR_TITLES: tuple[str, ...] = (
    "Oops! We hit a snag:",
    "Houston, we have a problem:",
    "Well, this is awkward:",
    "Unexpected detour:",
    "That didn't go as planned:",
    "Minor setback detected:",
    "Plot twist:",
    "Hmm, something's not right:",
    "We ran into a hiccup:",
    "Quick heads up:",
)


def pick_error_title(rng: Optional[random.Random] = None) -> str:
    """Pick an error title uniformly at random from ERROR_TITLES."""
    return (rng or random).choice(ERROR_TITLES)


def build_error_notification(
    url: str,
    reason: str,
    rng: Optional[random.Random] = None,
) -> ErrorNotification:
    """
    Build the notification for a rejected URL.

    Args:
        url: The URL that was probed
        reason: The precise rejection reason, used verbatim as the body
        rng: Optional random source for the title

    Returns:
        ErrorNotification with a random title and the reason as description
    """
    return ErrorNotification(
        title=pick_error_title(rng),
        description=reason,
        url=url,
    )


@runtime_checkable
class NotificationSink(Protocol):
    """Protocol for whatever displays error notifications to the user."""

    @abstractmethod
    def notify(self, notification: ErrorNotification) -> None:
        """
        Display a notification.

        Args:
            notification: The notification to show
        """
        ...


class AuditLogNotifier:
    """Notification sink that writes notifications to the audit log."""

    def __init__(self, logger: AuditLogger) -> None:
        self._logger = logger

    def notify(self, notification: ErrorNotification) -> None:
        self._logger.warn(
            "notifications",
            f"{notification.title} {notification.description}",
            {"url": notification.url, "variant": notification.variant},
        )
