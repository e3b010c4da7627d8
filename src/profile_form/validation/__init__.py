"""Field validation — pure functions over the current values.

Usage::

    from profile_form.validation import validate_profile

    validity = validate_profile(values, user, settings, username_error=checker.error)
    if not validity:
        # validity.errors == {"status_text": "Max length is 120"}
        ...

The username's availability is asynchronous and lives in
``profile_form.username``; its current error is passed in here so every
field's error ends up in one result.
"""

from profile_form.config import FormConfig, FormSettings
from profile_form.messages import Translator, default_translate
from profile_form.models import ProfileValues, UserSnapshot
from profile_form.validation.result import ERROR_FIELDS, ProfileValidity
from profile_form.validation.rules import (
    Validator,
    email,
    email_error,
    matches,
    max_length,
    name_error,
    password_error,
    required,
    status_text_error,
    username_syntax_error,
)

__all__ = [
    "ERROR_FIELDS",
    "ProfileValidity",
    "Validator",
    "email",
    "email_error",
    "matches",
    "max_length",
    "name_error",
    "password_error",
    "required",
    "status_text_error",
    "username_syntax_error",
    "validate_profile",
]


def validate_profile(
    values: ProfileValues,
    user: UserSnapshot,
    settings: FormSettings,
    config: FormConfig | None = None,
    *,
    translate: Translator = default_translate,
    username_error: str | None = None,
) -> ProfileValidity:
    """Validate every field of *values*.

    Args:
        values: Current field values.
        user: Persisted user, the baseline for "unchanged" exemptions.
        settings: Session policy (``require_name``).
        config: Engine configuration (status text limit).
        translate: Message lookup for error strings.
        username_error: Current result of the asynchronous username check.

    Returns:
        A ``ProfileValidity`` holding only the fields that failed.
    """
    config = config or FormConfig()
    candidates = {
        "password": password_error(
            values.password, values.confirmation_password, translate=translate
        ),
        "email": email_error(values.email, translate=translate),
        "username": username_error,
        "realname": name_error(
            values.realname, user, require_name=settings.require_name, translate=translate
        ),
        "status_text": status_text_error(
            values.status_text, limit=config.status_text_max_length, translate=translate
        ),
    }
    errors = {name: error for name, error in candidates.items() if error}
    return ProfileValidity(errors=errors)
