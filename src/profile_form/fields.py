"""Per-field view state derived from values, errors and settings.

Layout is the container's concern; this only says, for each field, what
it holds, whether it is editable, and whether it should be shown.
"""

from dataclasses import dataclass
from typing import Any

from profile_form.config import FormSettings
from profile_form.models import ProfileValues
from profile_form.reactor import AvatarState


@dataclass(frozen=True, slots=True)
class FieldState:
    value: Any
    error: str | None = None
    disabled: bool = False
    visible: bool = True


def describe_fields(
    values: ProfileValues,
    errors: dict[str, str | None],
    settings: FormSettings,
    avatar: AvatarState,
) -> dict[str, FieldState]:
    """Build the view state of every editable field.

    The confirmation field is only shown while a password is being set and
    shares the password's error.  The avatar editor is keyed by username.
    """
    password_error = errors.get("password")
    return {
        "avatar": FieldState(
            value=values.username,
            error=avatar.error.detail if avatar.error else None,
            disabled=not settings.allow_user_avatar_change,
        ),
        "realname": FieldState(
            value=values.realname,
            error=errors.get("realname"),
            disabled=not settings.allow_real_name_change,
        ),
        "username": FieldState(
            value=values.username,
            error=errors.get("username"),
            disabled=not settings.can_change_username,
        ),
        "status_text": FieldState(
            value=values.status_text,
            error=errors.get("status_text"),
            disabled=not settings.allow_user_status_message_change,
        ),
        "bio": FieldState(value=values.bio),
        "email": FieldState(
            value=values.email,
            error=errors.get("email"),
            disabled=not settings.allow_email_change,
        ),
        "password": FieldState(
            value=values.password,
            error=password_error,
            disabled=not settings.allow_password_change,
        ),
        "confirmation_password": FieldState(
            value=values.confirmation_password,
            error=password_error,
            visible=bool(values.password),
        ),
    }
