"""ProfileForm — the composition root of one profile-editing session.

The container owns the values and the save action.  It hands the form its
current ``ProfileValues`` and a setter per field, then calls ``update()``
whenever its values change::

    async with ProfileForm(
        values, handlers, user, settings, set_can_save,
        server=server, notify=toasts.append,
    ) as form:
        form.update(values.replace(username="bob"))
        await form.wait_idle()
        form.errors["username"]  # -> "Username already exists"

Per change, the form:

1. feeds a new username to the ``UsernameChecker`` (debounced, async),
2. recomputes every field's validity and republishes ``can_save`` if it flipped,
3. runs the password cascade last, so a handler that synchronously calls
   ``update()`` again sees a consistent form.

Entering the session opens an anyio task group for the timers and remote
calls, starts the one-off avatar fetch, and publishes the initial
``can_save``.  Leaving it cancels everything still pending.
"""

import contextlib
import dataclasses
import logging
from collections.abc import Callable
from typing import Any

import anyio
from anyio.abc import TaskGroup

from profile_form.aggregate import CanSaveSignal
from profile_form.config import FormConfig, FormSettings
from profile_form.errors import ProfileFormError
from profile_form.fields import FieldState, describe_fields
from profile_form.messages import Translator, default_translate
from profile_form.models import FieldHandlers, Notification, ProfileValues, UserSnapshot
from profile_form.reactor import AvatarState, SideEffectReactor
from profile_form.server import ProfileServer
from profile_form.username import CheckPhase, UsernameCheckState, UsernameChecker
from profile_form.validation import ProfileValidity, validate_profile

logger = logging.getLogger("profile_form.form")

_HANDLER_FIELDS = frozenset(f.name for f in dataclasses.fields(FieldHandlers))


def _log_notification(notification: Notification) -> None:
    logger.info("Unhandled %s notification: %s", notification.type, notification.message)


class ProfileForm:
    """Validation and side-effect orchestration for the account profile form."""

    def __init__(
        self,
        values: ProfileValues,
        handlers: FieldHandlers,
        user: UserSnapshot,
        settings: FormSettings,
        set_can_save: Callable[[bool], None],
        *,
        server: ProfileServer,
        notify: Callable[[Notification], None] | None = None,
        translate: Translator = default_translate,
        config: FormConfig | None = None,
    ) -> None:
        self._values = values
        self._handlers = handlers
        self._user = user
        self._settings = settings
        self._config = config or FormConfig()
        self._translate = translate
        self._notify = notify or _log_notification

        self._signal = CanSaveSignal(set_can_save)
        self._checker = UsernameChecker(
            baseline=user.username,
            settings=settings,
            server=server,
            current_value=lambda: self._values.username,
            on_change=self._refresh,
            notify=self._notify,
            translate=translate,
            debounce=self._config.username_debounce,
        )
        self._reactor = SideEffectReactor(
            user=user,
            handlers=handlers,
            server=server,
            notify=self._notify,
            translate=translate,
        )
        self._validity = ProfileValidity(errors={})
        self._stack: contextlib.AsyncExitStack | None = None
        self._task_group: TaskGroup | None = None
        self._closed = False

    # -- Session lifecycle --

    async def __aenter__(self) -> "ProfileForm":
        if self._stack is not None:
            msg = "ProfileForm session is already open"
            raise ProfileFormError(msg)
        if self._closed:
            msg = "ProfileForm session has ended; create a new form"
            raise ProfileFormError(msg)
        stack = contextlib.AsyncExitStack()
        self._task_group = await stack.enter_async_context(anyio.create_task_group())
        self._stack = stack
        self._checker.attach(self._task_group)

        self._task_group.start_soon(self._reactor.load_avatar_suggestions)
        self._checker.value_changed(self._values.username)
        self._refresh()
        self._reactor.password_changed(self._values.password)
        return self

    async def __aexit__(self, *exc_info: Any) -> bool | None:
        stack, task_group = self._stack, self._task_group
        self._stack = None
        self._task_group = None
        self._closed = True
        self._checker.detach()
        if task_group is not None:
            task_group.cancel_scope.cancel()
        if stack is None:
            return None
        return await stack.__aexit__(*exc_info)

    def _require_session(self) -> None:
        if self._task_group is None:
            msg = "ProfileForm must be used inside 'async with'"
            raise ProfileFormError(msg)

    # -- Container input --

    def update(self, values: ProfileValues) -> None:
        """Take the container's new values and react to what changed."""
        self._require_session()
        previous, self._values = self._values, values
        changed = values.changed_fields(previous)
        if not changed:
            return
        logger.debug("Fields changed: %s", ", ".join(sorted(changed)))

        if "username" in changed:
            self._checker.value_changed(values.username)
        self._refresh()
        if "password" in changed:
            self._reactor.password_changed(values.password)

    def set(self, field_name: str, value: Any) -> None:
        """Forward a user edit to the container's handler for *field_name*."""
        if field_name not in _HANDLER_FIELDS:
            msg = f"Unknown profile field: {field_name!r}"
            raise ProfileFormError(msg)
        getattr(self._handlers, field_name)(value)

    # -- Derived state --

    def _refresh(self) -> None:
        self._validity = validate_profile(
            self._values,
            self._user,
            self._settings,
            self._config,
            translate=self._translate,
            username_error=self._checker.error,
        )
        self._signal.update(self._validity.slots())

    @property
    def values(self) -> ProfileValues:
        return self._values

    @property
    def validity(self) -> ProfileValidity:
        return self._validity

    @property
    def errors(self) -> dict[str, str | None]:
        """Every error slot, ``None`` for valid fields."""
        return self._validity.slots()

    @property
    def can_save(self) -> bool:
        return self._validity.can_save

    @property
    def username_state(self) -> UsernameCheckState:
        return self._checker.state

    @property
    def username_phase(self) -> CheckPhase:
        return self._checker.phase

    @property
    def avatar(self) -> AvatarState:
        return self._reactor.avatar

    def fields(self) -> dict[str, FieldState]:
        return describe_fields(self._values, self.errors, self._settings, self._reactor.avatar)

    # -- Actions --

    @property
    def resend_confirmation_visible(self) -> bool:
        """Offered only while the persisted email is unverified."""
        return self._reactor.resend_confirmation_visible

    @property
    def can_resend_confirmation(self) -> bool:
        return self._reactor.can_resend_confirmation(self._values.email)

    async def resend_confirmation_email(self) -> bool:
        return await self._reactor.resend_confirmation_email(self._values.email)

    async def wait_idle(self) -> None:
        """Wait for pending username checks to settle (useful in tests)."""
        await self._checker.wait_idle()
