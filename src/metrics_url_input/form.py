"""
Metrics URL form controller.

Wires the suggestion engine, availability checker and refresh scheduler
behind the minimal event contract a presentation layer needs: input
changes, key presses, suggestion clicks, manual submit and the
auto-refresh toggle. The controller owns no rendering; it exposes the
state the presentation layer draws.
"""

import random
from typing import Callable, Optional, TextIO

from .audit_logger import AuditLogger
from .availability_checker import AvailabilityChecker
from .config import FormConfig
from .enums import SubmitStatus
from .models import InputState, ValidationOutcome
from .notifications import AuditLogNotifier, NotificationSink
from .scheduler import RefreshScheduler
from .suggestion_engine import (
    SuggestionEngine,
    on_click_outside,
    on_focus,
    on_input_change,
    on_key,
    on_suggestion_click,
)
from .url_validator import UrlValidator


COMPONENT = "metrics_form"

SUBMIT_LABEL = "Fetch Metrics"
SUBMIT_LABEL_LOADING = "Fetching..."


class MetricsForm:
    """
    Controller for the single metrics URL field.

    Only one validate-then-submit cycle runs at a time: a manual submit
    or a scheduled tick that finds another cycle in flight is skipped,
    never queued. Methods that may arm the auto-refresh timer must be
    called from inside a running event loop.

    Hosts that show toasts pass a notifier; otherwise rejections are
    written to the audit log (stderr unless a logger is given).
    """

    def __init__(
        self,
        on_submit: Callable[[str], None],
        on_auto_refresh_toggle: Optional[Callable[[], None]] = None,
        current_url: Optional[str] = None,
        auto_refresh: bool = False,
        is_loading: bool = False,
        config: Optional[FormConfig] = None,
        checker: Optional[AvailabilityChecker] = None,
        engine: Optional[SuggestionEngine] = None,
        validator: Optional[UrlValidator] = None,
        notifier: Optional[NotificationSink] = None,
        logger: Optional[AuditLogger] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self._config = config or FormConfig()
        self._logger = logger
        self._on_submit = on_submit
        self._on_auto_refresh_toggle = on_auto_refresh_toggle
        self._validator = validator or UrlValidator()
        self._engine = engine or SuggestionEngine(
            table=self._config.suggestions.table,
            max_suggestions=self._config.suggestions.max_suggestions,
        )
        if notifier is None:
            # Without a host sink, rejections go to the audit log
            notifier = AuditLogNotifier(logger or AuditLogger())
        self._checker = checker or AvailabilityChecker(
            config=self._config.probe,
            logger=logger,
            notifier=notifier,
            rng=rng,
        )
        self._scheduler = RefreshScheduler(
            cycle=self._scheduled_cycle,
            is_busy=lambda: self.busy,
            config=self._config.refresh,
            validator=self._validator,
            logger=logger,
        )

        self._state = InputState(value=current_url or "")
        self._auto_refresh = auto_refresh
        self._is_loading = is_loading
        self._local_loading = False
        self._closed = False
        self.field_error: Optional[str] = None
        self.last_outcome: Optional[ValidationOutcome] = None

    @classmethod
    def from_config(
        cls,
        config: FormConfig,
        on_submit: Callable[[str], None],
        output_stream: Optional[TextIO] = None,
        **kwargs,
    ) -> "MetricsForm":
        """Create a form whose logger follows config.logging."""
        logger = AuditLogger.from_config(config.logging, output_stream=output_stream)
        return cls(on_submit=on_submit, config=config, logger=logger, **kwargs)

    # State exposed to the presentation layer

    @property
    def state(self) -> InputState:
        return self._state

    @property
    def value(self) -> str:
        return self._state.value

    @property
    def scheduler(self) -> RefreshScheduler:
        return self._scheduler

    @property
    def checker(self) -> AvailabilityChecker:
        return self._checker

    @property
    def auto_refresh(self) -> bool:
        return self._auto_refresh

    @property
    def local_loading(self) -> bool:
        return self._local_loading

    @property
    def busy(self) -> bool:
        return self._is_loading or self._local_loading

    @property
    def submit_disabled(self) -> bool:
        return self.busy

    @property
    def auto_refresh_disabled(self) -> bool:
        return self._is_loading

    @property
    def submit_label(self) -> str:
        return SUBMIT_LABEL_LOADING if self._local_loading else SUBMIT_LABEL

    # Lifecycle

    def mount(self) -> None:
        """Arm auto-refresh for the initial props, if they call for it."""
        self._sync_refresh()

    def close(self) -> None:
        """Cancel the auto-refresh timer; no further ticks fire."""
        if self._closed:
            return
        self._closed = True
        self._scheduler.close()

    async def aclose(self) -> None:
        """Close the form, wait for a scheduled cycle and release the HTTP client."""
        self.close()
        await self._scheduler.wait_idle()
        await self._checker.close()

    # Props owned by the host application

    def set_auto_refresh(self, enabled: bool) -> None:
        self._auto_refresh = enabled
        self._sync_refresh()

    def set_loading(self, is_loading: bool) -> None:
        self._is_loading = is_loading
        self._sync_refresh()

    def toggle_auto_refresh(self) -> bool:
        """
        Ask the host to flip auto-refresh.

        Returns:
            False if the toggle is disabled or no callback is wired
        """
        if self.auto_refresh_disabled or self._on_auto_refresh_toggle is None:
            return False
        self._on_auto_refresh_toggle()
        return True

    # Input events

    def handle_input_change(self, value: str) -> None:
        on_input_change(self._engine, self._state, value)
        self._sync_refresh()

    def handle_focus(self) -> None:
        on_focus(self._engine, self._state)

    def handle_key(self, key: str) -> bool:
        consumed = on_key(self._state, key)
        if consumed:
            self._sync_refresh()
        return consumed

    def handle_suggestion_click(self, suggestion: str) -> None:
        on_suggestion_click(self._state, suggestion)
        self._sync_refresh()

    def handle_click_outside(self) -> None:
        on_click_outside(self._state)

    # Submission

    async def submit(self) -> SubmitStatus:
        """
        Manual submit: format check, then probe, then hand off.

        Returns:
            SubmitStatus describing what happened
        """
        if self.busy or self._scheduler.in_flight:
            self._log_debug("Submit skipped, cycle in flight", {})
            return SubmitStatus.SKIPPED_BUSY

        url = self._state.value
        result = self._validator.validate(url)
        if not result.valid:
            self.field_error = result.error.message
            self._log_debug("Submit rejected by format rule", {"code": result.error.code.value})
            return SubmitStatus.INVALID_FORMAT

        self.field_error = None
        return await self._validate_and_submit(result.url)

    async def _scheduled_cycle(self) -> SubmitStatus:
        if self.busy:
            return SubmitStatus.SKIPPED_BUSY

        result = self._validator.validate(self._state.value)
        if not result.valid:
            return SubmitStatus.INVALID_FORMAT

        return await self._validate_and_submit(result.url)

    async def _validate_and_submit(self, url: str) -> SubmitStatus:
        self._set_local_loading(True)
        try:
            outcome = await self._checker.check(url)
            self.last_outcome = outcome
            if outcome.rejected:
                return SubmitStatus.REJECTED

            if self._logger:
                self._logger.info(COMPONENT, "Submitting URL", {"url": url})
            self._on_submit(url)
            self._state.suggestions_visible = False
            return SubmitStatus.ACCEPTED
        finally:
            self._set_local_loading(False)

    def _set_local_loading(self, loading: bool) -> None:
        self._local_loading = loading
        self._sync_refresh()

    def _sync_refresh(self) -> None:
        if self._closed:
            return
        self._scheduler.sync(self._auto_refresh, self._state.value, self.busy)

    def _log_debug(self, message: str, data: dict) -> None:
        if self._logger:
            self._logger.debug(COMPONENT, message, data)
