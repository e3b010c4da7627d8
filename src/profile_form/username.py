"""Debounced username availability check.

Each username change moves the checker through::

    IDLE -> DEBOUNCING -> (syntax check) -> REMOTE_CHECK -> IDLE

- A value equal to the persisted username is accepted at once, no request.
- Every change restarts the debounce timer, so only the latest value is
  ever checked.
- The timer is an ``anyio.CancelScope`` around ``anyio.sleep`` running in
  the session's task group; a generation counter guards against a tick
  that survived its cancellation.
- In-flight requests are never cancelled.  Their result is applied only if
  the field still holds the value that was checked when the response
  arrives; otherwise it is dropped silently.
- A failed request is reported as an error notification and the field goes
  back to no error, so the user is never blocked by a flaky server.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

import anyio
from anyio.abc import TaskGroup

from profile_form.config import FormSettings
from profile_form.errors import OperationError, ProfileFormError
from profile_form.messages import USERNAME_TAKEN, Translator, default_translate
from profile_form.models import Notification
from profile_form.server import ProfileServer
from profile_form.validation.rules import username_syntax_error

logger = logging.getLogger("profile_form.username")


class CheckPhase(Enum):
    IDLE = "idle"
    DEBOUNCING = "debouncing"
    REMOTE_CHECK = "remote_check"


@dataclass(frozen=True, slots=True)
class UsernameCheckState:
    """Snapshot of the checker.

    Attributes:
        pending_value: Value waiting on the timer or the server, if any.
        last_resolved_value: Last value whose check completed.
        error: Inline message for the username field, ``None`` when valid.
    """

    pending_value: str | None = None
    last_resolved_value: str | None = None
    error: str | None = None


class UsernameChecker:
    """Asynchronous validity of the username field for one form session."""

    __slots__ = (
        "_baseline",
        "_busy",
        "_current_value",
        "_debounce",
        "_error",
        "_generation",
        "_idle",
        "_last_resolved",
        "_notify",
        "_on_change",
        "_pending",
        "_phase",
        "_server",
        "_settings",
        "_task_group",
        "_timer",
        "_translate",
    )

    def __init__(
        self,
        *,
        baseline: str,
        settings: FormSettings,
        server: ProfileServer,
        current_value: Callable[[], str],
        on_change: Callable[[], None],
        notify: Callable[[Notification], None],
        translate: Translator = default_translate,
        debounce: float = 0.4,
    ) -> None:
        self._baseline = baseline
        self._settings = settings
        self._server = server
        self._current_value = current_value
        self._on_change = on_change
        self._notify = notify
        self._translate = translate
        self._debounce = debounce

        self._phase = CheckPhase.IDLE
        self._pending: str | None = None
        self._last_resolved: str | None = None
        self._error: str | None = None
        self._generation = 0
        self._timer: anyio.CancelScope | None = None
        self._task_group: TaskGroup | None = None
        # Timers plus in-flight checks; _idle is set whenever it drops to 0
        self._busy = 0
        self._idle: anyio.Event | None = None

    # -- Session wiring --

    def attach(self, task_group: TaskGroup) -> None:
        self._task_group = task_group

    def detach(self) -> None:
        self._cancel_timer()
        self._task_group = None

    # -- Read side --

    @property
    def error(self) -> str | None:
        return self._error

    @property
    def phase(self) -> CheckPhase:
        return self._phase

    @property
    def state(self) -> UsernameCheckState:
        return UsernameCheckState(
            pending_value=self._pending,
            last_resolved_value=self._last_resolved,
            error=self._error,
        )

    async def wait_idle(self) -> None:
        """Wait until no timer is pending and no request is in flight."""
        while self._busy and self._idle is not None:
            await self._idle.wait()

    # -- Events --

    def value_changed(self, value: str) -> None:
        """React to a new username value (restarts the debounce timer)."""
        self._generation += 1
        self._cancel_timer()

        if value == self._baseline:
            self._pending = None
            self._phase = CheckPhase.IDLE
            self._set_error(None)
            return

        if self._task_group is None:
            msg = "UsernameChecker is not attached to a running form session"
            raise ProfileFormError(msg)

        self._pending = value
        self._phase = CheckPhase.DEBOUNCING
        # Created here, not in the task: a change arriving before the task
        # starts must still be able to cancel it.
        scope = anyio.CancelScope()
        self._timer = scope
        self._enter_busy()
        self._task_group.start_soon(self._tick, value, scope, self._generation)

    # -- Internals --

    async def _tick(self, value: str, scope: anyio.CancelScope, generation: int) -> None:
        try:
            with scope:
                await anyio.sleep(self._debounce)
            if scope.cancel_called or generation != self._generation:
                logger.debug("Debounce for %r superseded", value)
                return
            self._timer = None
            await self._check(value)
        finally:
            self._leave_busy()

    async def _check(self, value: str) -> None:
        error = username_syntax_error(
            value, self._settings.names_pattern, translate=self._translate
        )
        if error is not None:
            self._resolve(value, error)
            return

        self._phase = CheckPhase.REMOTE_CHECK
        self._set_error(None)
        logger.debug("Checking availability of %r", value)

        try:
            available = await self._server.check_username_availability(value)
        except Exception as exc:
            if self._is_stale(value):
                logger.debug("Dropping failed check for stale username %r", value)
                return
            failure = OperationError.from_exception("checkUsernameAvailability", exc)
            logger.warning("Username availability check failed: %s", failure)
            self._notify(Notification.error(failure.detail))
            self._resolve(value, None)
            return

        if self._is_stale(value):
            logger.debug("Dropping stale availability result for %r", value)
            return
        self._resolve(value, None if available else self._translate(USERNAME_TAKEN))

    def _is_stale(self, value: str) -> bool:
        return self._current_value() != value

    def _resolve(self, value: str, error: str | None) -> None:
        self._last_resolved = value
        # A new debounce for the same value keeps it pending
        if self._timer is None:
            if self._pending == value:
                self._pending = None
            self._phase = CheckPhase.IDLE
        self._set_error(error)

    def _set_error(self, error: str | None) -> None:
        if error == self._error:
            return
        self._error = error
        self._on_change()

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _enter_busy(self) -> None:
        if self._busy == 0:
            self._idle = anyio.Event()
        self._busy += 1

    def _leave_busy(self) -> None:
        self._busy -= 1
        if self._busy == 0 and self._idle is not None:
            self._idle.set()
