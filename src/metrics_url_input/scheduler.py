"""
Auto-refresh scheduler for the metrics URL field.

Runs a recurring validate-then-submit cycle while auto-refresh is enabled
and the field holds a valid URL. The scheduler is an explicit state machine:

    DISABLED --sync(enabled, valid url)--> ARMED
    ARMED --sync(changed deps)--> DISABLED --(conditions hold)--> ARMED
    ARMED / DISABLED --close()--> CLOSED

Every dependency change cancels the timer and, if conditions still hold,
arms a fresh one. A tick that finds a cycle in flight is dropped.
"""

import asyncio
from typing import Awaitable, Callable, Optional

from .audit_logger import AuditLogger
from .config import RefreshConfig
from .enums import RefreshState
from .exceptions import SchedulerError
from .models import RefreshSession
from .url_validator import UrlValidator


COMPONENT = "refresh_scheduler"


class RefreshScheduler:
    """
    Recurring tick driver with a skip-if-busy guard.

    Must be driven from inside a running asyncio event loop.
    """

    def __init__(
        self,
        cycle: Callable[[], Awaitable[object]],
        is_busy: Optional[Callable[[], bool]] = None,
        config: Optional[RefreshConfig] = None,
        validator: Optional[UrlValidator] = None,
        logger: Optional[AuditLogger] = None,
    ) -> None:
        """
        Initialize the scheduler.

        Args:
            cycle: Async callable running one validate-then-submit cycle
            is_busy: Returns True while any other cycle (e.g. a manual
                     submit) is in flight
            config: Refresh settings (tick interval)
            validator: URL format rule used to decide whether to arm
            logger: Optional audit logger
        """
        self._cycle = cycle
        self._is_busy = is_busy or (lambda: False)
        self._config = config or RefreshConfig()
        self._validator = validator or UrlValidator()
        self._logger = logger
        self._session: Optional[RefreshSession] = None
        self._cycle_task: Optional[asyncio.Task] = None
        self._deps: Optional[tuple] = None
        self._closed = False

    @property
    def state(self) -> RefreshState:
        if self._closed:
            return RefreshState.CLOSED
        if self._session is not None:
            return RefreshState.ARMED
        return RefreshState.DISABLED

    @property
    def session(self) -> Optional[RefreshSession]:
        return self._session

    @property
    def interval_seconds(self) -> float:
        return self._config.interval_seconds

    @property
    def in_flight(self) -> bool:
        return self._cycle_task is not None and not self._cycle_task.done()

    def sync(self, enabled: bool, url: str, loading: bool = False) -> RefreshState:
        """
        React to the current toggle, field value and loading flag.

        Unchanged dependencies leave the timer alone. Any change tears the
        timer down and re-arms from scratch when auto-refresh is enabled
        and url passes the format rule; otherwise the scheduler stays
        disabled without error.

        Returns:
            The resulting state
        """
        if self._closed:
            raise SchedulerError(
                code="closed",
                message="Refresh scheduler has been closed",
            )

        deps = (enabled, url, loading)
        if deps == self._deps:
            return self.state

        self._deps = deps
        self._teardown()

        if enabled and url and self._validator.is_valid(url):
            self._arm()
        else:
            self._log_debug("Auto-refresh inert", {"enabled": enabled, "url": url})

        return self.state

    def disable(self) -> None:
        """Cancel the timer and forget the tracked dependencies."""
        self._deps = None
        self._teardown()

    def close(self) -> None:
        """Tear down for good; no further ticks are possible."""
        self.disable()
        self._closed = True

    def tick(self) -> bool:
        """
        Run one scheduled tick.

        Returns:
            True if a cycle was started, False if the tick was dropped
        """
        session = self._session
        if session is None:
            return False

        session.tick_count += 1

        if session.in_flight or self.in_flight or self._is_busy():
            session.skipped_ticks += 1
            self._log_debug("Tick skipped, cycle in flight", {"tick": session.tick_count})
            return False

        session.in_flight = True
        self._cycle_task = asyncio.get_running_loop().create_task(
            self._run_cycle(session)
        )
        self._log_debug("Tick started cycle", {"tick": session.tick_count})
        return True

    async def wait_idle(self) -> None:
        """Wait for the in-flight scheduled cycle, if any, to finish."""
        if self._cycle_task is not None:
            await asyncio.gather(self._cycle_task, return_exceptions=True)

    def _arm(self) -> None:
        loop = asyncio.get_running_loop()
        session = RefreshSession(enabled=True)
        session.timer_handle = loop.create_task(self._run_timer(session))
        self._session = session
        self._log_debug("Auto-refresh armed", {"interval_seconds": self.interval_seconds})

    def _teardown(self) -> None:
        session = self._session
        if session is None:
            return
        self._session = None
        session.enabled = False
        if session.timer_handle is not None:
            # cancel() on a finished task is a no-op
            session.timer_handle.cancel()
            session.timer_handle = None
        self._log_debug(
            "Auto-refresh disarmed",
            {"ticks": session.tick_count, "skipped_ticks": session.skipped_ticks},
        )

    async def _run_timer(self, session: RefreshSession) -> None:
        while session.enabled:
            await asyncio.sleep(self._config.interval_seconds)
            if not session.enabled:
                break
            self.tick()

    async def _run_cycle(self, session: RefreshSession) -> None:
        try:
            await self._cycle()
        except Exception as e:
            # A failed cycle never stops the schedule
            if self._logger:
                self._logger.log_error(COMPONENT, "Scheduled cycle failed", error=e)
        finally:
            session.in_flight = False

    def _log_debug(self, message: str, data: dict) -> None:
        if self._logger:
            self._logger.debug(COMPONENT, message, data)
