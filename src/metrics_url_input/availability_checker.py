"""
Availability checker for metrics endpoints.

This module probes a candidate URL with a bounded-time HEAD request and
classifies the result as accepted or rejected with a human-readable reason.

Classification:
- No response within the timeout -> "Timeout reaching <url>"
- Non-2xx status -> "HEAD request failed (<status>)"
- Content type without text/plain -> "Invalid content type (expected text/plain)"
- Any other transport failure -> "Request to <url> failed: <detail>"
- Otherwise accepted
"""

import asyncio
import random
import time
from typing import Optional

import httpx

from .audit_logger import AuditLogger
from .config import ProbeConfig
from .exceptions import (
    ContentTypeError,
    MalformedResponseError,
    ProbeError,
    ProbeTimeoutError,
    UnavailableError,
)
from .models import ValidationOutcome
from .notifications import NotificationSink, build_error_notification


COMPONENT = "availability_checker"


class AvailabilityChecker:
    """
    Async HEAD probe with a hard timeout and content-type check.

    The total wait is bounded by ProbeConfig.timeout_seconds. When the
    bound is hit the in-flight request is cancelled, so no connection or
    timer outlives the call.
    """

    def __init__(
        self,
        config: Optional[ProbeConfig] = None,
        logger: Optional[AuditLogger] = None,
        notifier: Optional[NotificationSink] = None,
        rng: Optional[random.Random] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """
        Initialize the checker.

        Args:
            config: Probe settings (timeout, headers, TLS verification)
            logger: Optional audit logger
            notifier: Optional sink that displays rejection notifications
            rng: Optional random source for notification titles
            transport: Optional httpx transport (used by tests)
        """
        self._config = config or ProbeConfig()
        self._logger = logger
        self._notifier = notifier
        self._rng = rng
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> "AvailabilityChecker":
        """Async context manager entry."""
        self._ensure_client()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        await self.close()

    @property
    def timeout_seconds(self) -> float:
        return self._config.timeout_seconds

    @property
    def notifier(self) -> Optional[NotificationSink]:
        return self._notifier

    def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                verify=self._config.verify_tls,
                timeout=httpx.Timeout(self._config.timeout_seconds),
                follow_redirects=self._config.follow_redirects,
                transport=self._transport,
            )
        return self._client

    async def check(self, url: str) -> ValidationOutcome:
        """
        Probe url and classify the result.

        Rejections are reported to the notifier (if any) with a random
        title and the exact reason as the body. Network failures never
        raise out of this method.

        Args:
            url: The URL to probe (already format-validated)

        Returns:
            ValidationOutcome, accepted or rejected with a reason
        """
        start_time = time.perf_counter()
        self._log_debug("Probing URL", {"url": url})

        try:
            status_code = await self.probe(url)
        except ProbeError as e:
            outcome = e.to_outcome()
            self._report_rejection(url, outcome, self._elapsed_ms(start_time))
            return outcome

        if self._logger:
            self._logger.info(
                COMPONENT,
                "URL accepted",
                {
                    "url": url,
                    "http_status_code": status_code,
                    "response_time_ms": self._elapsed_ms(start_time),
                },
            )
        return ValidationOutcome.accept(http_status_code=status_code)

    async def probe(self, url: str) -> int:
        """
        Issue the HEAD request and raise on any rejection.

        Args:
            url: The URL to probe

        Returns:
            The HTTP status code of an accepted response

        Raises:
            ProbeTimeoutError: If no response arrives within the timeout
            UnavailableError: If the status is not 2xx
            ContentTypeError: If the content type lacks the expected type
            MalformedResponseError: For any other transport failure
        """
        client = self._ensure_client()
        timeout = self._config.timeout_seconds

        try:
            response = await asyncio.wait_for(
                client.head(url, headers={"Accept": self._config.accept_header}),
                timeout=timeout,
            )
        except (asyncio.TimeoutError, httpx.TimeoutException):
            raise ProbeTimeoutError(url, timeout)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise MalformedResponseError(url, str(e) or type(e).__name__)

        return self._classify(url, response)

    def _classify(self, url: str, response: httpx.Response) -> int:
        if not response.is_success:
            raise UnavailableError(url, response.status_code)

        expected = self._config.expected_content_type
        content_type = response.headers.get("content-type")
        if not content_type or expected not in content_type:
            raise ContentTypeError(
                url,
                content_type,
                expected=expected,
                http_status_code=response.status_code,
            )

        return response.status_code

    def _report_rejection(
        self,
        url: str,
        outcome: ValidationOutcome,
        elapsed_ms: float,
    ) -> None:
        if self._logger:
            self._logger.warn(
                COMPONENT,
                "URL rejected",
                {
                    "url": url,
                    "code": outcome.code.value,
                    "reason": outcome.reason,
                    "http_status_code": outcome.http_status_code,
                    "response_time_ms": elapsed_ms,
                },
            )
        if self._notifier:
            self._notifier.notify(
                build_error_notification(url, outcome.reason, self._rng)
            )

    def _log_debug(self, message: str, data: dict) -> None:
        if self._logger:
            self._logger.debug(COMPONENT, message, data)

    def _elapsed_ms(self, start_time: float) -> float:
        """Calculate elapsed time in milliseconds."""
        return (time.perf_counter() - start_time) * 1000

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None
