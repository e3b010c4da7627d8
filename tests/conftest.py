"""Shared fakes for the profile_form tests.

``FakeServer`` answers the three remote operations and can hold a username
check open until the test releases it.  ``Container`` plays the owning
component: it stores the values, hands out setters that feed every change
back into the form, and records ``can_save`` and notifications.
"""

import asyncio
from collections.abc import Callable
from typing import Any

import anyio
import pytest

from profile_form.config import FormConfig, FormSettings
from profile_form.form import ProfileForm
from profile_form.models import EmailEntry, FieldHandlers, Notification, ProfileValues, UserSnapshot

USER = UserSnapshot(
    name="Alice",
    username="alice",
    emails=(EmailEntry(address="a@x.com", verified=False),),
)

BASE_VALUES = ProfileValues(
    realname="Alice",
    email="a@x.com",
    username="alice",
    status_text="Working from home",
)

FAST = FormConfig(username_debounce=0.01)

_VALUE_FIELDS = (
    "realname",
    "email",
    "username",
    "password",
    "confirmation_password",
    "status_text",
    "status_type",
    "bio",
    "custom_fields",
)


class FakeServer:
    def __init__(
        self,
        *,
        taken: set[str] | None = None,
        suggestions: Any = None,
        avatar_error: Exception | None = None,
        email_error: Exception | None = None,
    ) -> None:
        self.taken = taken or set()
        self.failing: dict[str, Exception] = {}
        self.gates: dict[str, asyncio.Event] = {}
        self.username_checks: list[str] = []
        self.suggestions = suggestions if suggestions is not None else []
        self.avatar_error = avatar_error
        self.avatar_calls = 0
        self.email_error = email_error
        self.emails_sent: list[str] = []

    def hold(self, username: str) -> asyncio.Event:
        """Keep the check for *username* in flight until the event is set."""
        gate = asyncio.Event()
        self.gates[username] = gate
        return gate

    async def check_username_availability(self, username: str) -> bool:
        self.username_checks.append(username)
        gate = self.gates.get(username)
        if gate is not None:
            await gate.wait()
        if username in self.failing:
            raise self.failing[username]
        return username not in self.taken

    async def get_avatar_suggestion(self) -> Any:
        self.avatar_calls += 1
        if self.avatar_error is not None:
            raise self.avatar_error
        return self.suggestions

    async def send_confirmation_email(self, email: str) -> None:
        if self.email_error is not None:
            raise self.email_error
        self.emails_sent.append(email)


class Container:
    """Owns the values and re-renders the form on every handler call."""

    def __init__(self, values: ProfileValues = BASE_VALUES) -> None:
        self.values = values
        self.form: ProfileForm | None = None
        self.can_save_calls: list[bool] = []
        self.notifications: list[Notification] = []
        self.avatars: list[Any] = []
        self.handlers = FieldHandlers(
            **{name: self._setter(name) for name in _VALUE_FIELDS},
            avatar=self.avatars.append,
        )

    def _setter(self, name: str) -> Callable[[Any], None]:
        def handle(value: Any) -> None:
            self.values = self.values.replace(**{name: value})
            if self.form is not None:
                self.form.update(self.values)

        return handle

    def set_can_save(self, value: bool) -> None:
        self.can_save_calls.append(value)

    def open(
        self,
        server: FakeServer,
        *,
        user: UserSnapshot = USER,
        settings: FormSettings | None = None,
        config: FormConfig = FAST,
        **kwargs: Any,
    ) -> ProfileForm:
        self.form = ProfileForm(
            self.values,
            self.handlers,
            user,
            settings or FormSettings(),
            self.set_can_save,
            server=server,
            notify=self.notifications.append,
            config=config,
            **kwargs,
        )
        return self.form


async def wait_until(predicate: Callable[[], bool], timeout: float = 1.0) -> None:
    """Poll *predicate* until it holds."""
    with anyio.fail_after(timeout):
        while not predicate():
            await anyio.sleep(0.001)


@pytest.fixture
def server() -> FakeServer:
    return FakeServer()


@pytest.fixture
def container() -> Container:
    return Container()
