"""Side effects triggered by the form's values.

Each reaction is independent:

1. Avatar suggestions are fetched once per session.
2. Emptying the password empties the confirmation (never the reverse).
3. The "resend verification email" action is offered only while the
   displayed email is still the persisted one.

None of these change validity; they only call handlers, the server, or
the notification sink.
"""

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass

from profile_form.errors import OperationError
from profile_form.messages import VERIFICATION_EMAIL_SENT, Translator, default_translate
from profile_form.models import AvatarSource, FieldHandlers, Notification, UserSnapshot
from profile_form.server import ProfileServer

logger = logging.getLogger("profile_form.reactor")


@dataclass(frozen=True, slots=True)
class AvatarState:
    """Suggestions for the avatar editor.

    ``suggestions`` is ``None`` until the fetch completes.  A failed fetch
    leaves it ``None`` and records ``error``; there is no retry.
    """

    suggestions: tuple[AvatarSource, ...] | None = None
    error: OperationError | None = None

    @property
    def loaded(self) -> bool:
        return self.suggestions is not None


class SideEffectReactor:
    __slots__ = ("_avatar", "_avatar_requested", "_handlers", "_notify", "_server", "_translate", "_user")

    def __init__(
        self,
        *,
        user: UserSnapshot,
        handlers: FieldHandlers,
        server: ProfileServer,
        notify: Callable[[Notification], None],
        translate: Translator = default_translate,
    ) -> None:
        self._user = user
        self._handlers = handlers
        self._server = server
        self._notify = notify
        self._translate = translate
        self._avatar = AvatarState()
        self._avatar_requested = False

    # -- Avatar suggestions --

    @property
    def avatar(self) -> AvatarState:
        return self._avatar

    async def load_avatar_suggestions(self) -> AvatarState:
        """Fetch suggestions on the first call; later calls return the stored state."""
        if self._avatar_requested:
            return self._avatar
        self._avatar_requested = True

        try:
            result = await self._server.get_avatar_suggestion()
        except Exception as exc:
            error = OperationError.from_exception("getAvatarSuggestion", exc)
            logger.warning("Avatar suggestions unavailable: %s", error)
            self._avatar = AvatarState(error=error)
            return self._avatar

        # The server keys suggestions by service name
        if isinstance(result, Mapping):
            suggestions = tuple(result.values())
        else:
            suggestions = tuple(result or ())
        logger.debug("Loaded %d avatar suggestion(s)", len(suggestions))
        self._avatar = AvatarState(suggestions=suggestions)
        return self._avatar

    # -- Password cascade --

    def password_changed(self, password: str) -> None:
        if not password:
            self._handlers.confirmation_password("")

    # -- Confirmation email --

    @property
    def resend_confirmation_visible(self) -> bool:
        return not self._user.email_verified

    def can_resend_confirmation(self, email: str) -> bool:
        """Only the persisted address may be sent a confirmation."""
        return bool(email) and email == self._user.email_address

    async def resend_confirmation_email(self, email: str) -> bool:
        """Ask the server to resend the verification email.

        Returns ``True`` when the server accepted the request.  Outcomes are
        reported through notifications; form state is never touched.
        """
        if not self.can_resend_confirmation(email):
            logger.debug("Resend skipped: %r is not the persisted address", email)
            return False

        try:
            await self._server.send_confirmation_email(email)
        except Exception as exc:
            error = OperationError.from_exception("sendConfirmationEmail", exc)
            logger.warning("Sending confirmation email failed: %s", error)
            self._notify(Notification.error(error.detail))
            return False

        self._notify(Notification.success(self._translate(VERIFICATION_EMAIL_SENT)))
        return True
