"""Message keys and the default English catalog.

String lookup belongs to the container.  The engine only calls a
``Translator`` with a key and positional arguments::

    translate("Max_length_is", "120")  # -> "Max length is 120"
"""

from collections.abc import Callable
from typing import TypeAlias

Translator: TypeAlias = Callable[..., str]

FIELD_REQUIRED = "Field_required"
INVALID_EMAIL = "error-invalid-email-address"
INVALID_USERNAME = "error-invalid-username"
USERNAME_TAKEN = "Username_already_exist"
PASSWORDS_DO_NOT_MATCH = "Passwords_do_not_match"
MAX_LENGTH_IS = "Max_length_is"
VERIFICATION_EMAIL_SENT = "Verification_email_sent"

DEFAULT_MESSAGES: dict[str, str] = {
    FIELD_REQUIRED: "Field required",
    INVALID_EMAIL: "Invalid email address",
    INVALID_USERNAME: "Invalid username",
    USERNAME_TAKEN: "Username already exists",
    PASSWORDS_DO_NOT_MATCH: "Passwords do not match",
    MAX_LENGTH_IS: "Max length is {0}",
    VERIFICATION_EMAIL_SENT: "Verification email sent",
}


def default_translate(key: str, *args: object) -> str:
    """Look *key* up in the built-in catalog; unknown keys come back unchanged."""
    template = DEFAULT_MESSAGES.get(key)
    if template is None:
        return key
    return template.format(*args)
