"""Validation rules for the profile form.

Generic rules are factories returning a validator with the signature::

    def rule(value: str) -> str | None:
        '''Return error message, or None if valid.'''

The per-field functions below combine them with the values and settings
each field depends on.  They read raw values only, never another field's
error, so nothing recomputes in a cycle.
"""

import re
from collections.abc import Callable
from typing import TypeAlias

from profile_form.messages import (
    FIELD_REQUIRED,
    INVALID_EMAIL,
    INVALID_USERNAME,
    MAX_LENGTH_IS,
    PASSWORDS_DO_NOT_MATCH,
    Translator,
    default_translate,
)
from profile_form.models import UserSnapshot

# Type alias for a validator function
Validator: TypeAlias = Callable[[str], str | None]


# ---------------------------------------------------------------------------
# Generic rules
# ---------------------------------------------------------------------------


def required(message: str) -> Validator:
    """Value must be non-empty."""

    def check(value: str) -> str | None:
        if not value:
            return message
        return None

    return check


def max_length(n: int, message: str | None = None) -> Validator:
    """String must be at most *n* characters."""

    def check(value: str) -> str | None:
        if len(value) > n:
            return message or f"Must be at most {n} characters"
        return None

    return check


def matches(pattern: str | re.Pattern[str], message: str | None = None) -> Validator:
    """Whole value must match the given regex pattern."""
    compiled = re.compile(pattern)

    def check(value: str) -> str | None:
        if not compiled.fullmatch(value):
            return message or f"Must match pattern: {compiled.pattern}"
        return None

    return check


# local@domain: unquoted dot-separated local part or a quoted string; domain is
# dot-separated labels ending in a 2+ letter TLD, or a bracketed IPv4 literal
_EMAIL_RE = re.compile(
    r'(([^<>()\[\]\\.,;:\s@"]+(\.[^<>()\[\]\\.,;:\s@"]+)*)|(".+"))'
    r"@"
    r"((\[[0-9]{1,3}\.[0-9]{1,3}\.[0-9]{1,3}\.[0-9]{1,3}\])|(([a-zA-Z\-0-9]+\.)+[a-zA-Z]{2,}))"
)


def email(message: str | None = None) -> Validator:
    """Value must be an email address (format check, not deliverability)."""

    def check(value: str) -> str | None:
        if not _EMAIL_RE.fullmatch(value):
            return message or "Must be a valid email address"
        return None

    return check


# ---------------------------------------------------------------------------
# Profile fields
# ---------------------------------------------------------------------------


def name_error(
    realname: str,
    user: UserSnapshot,
    *,
    require_name: bool,
    translate: Translator = default_translate,
) -> str | None:
    """An unchanged name is always accepted, even when empty."""
    if realname == user.name or not require_name:
        return None
    return required(translate(FIELD_REQUIRED))(realname)


def email_error(value: str, *, translate: Translator = default_translate) -> str | None:
    return email(translate(INVALID_EMAIL))(value)


def password_error(
    password: str,
    confirmation_password: str,
    *,
    translate: Translator = default_translate,
) -> str | None:
    """Mismatch is only reported once both fields hold something."""
    if not password or not confirmation_password or password == confirmation_password:
        return None
    return translate(PASSWORDS_DO_NOT_MATCH)


def status_text_error(
    status_text: str,
    *,
    limit: int = 120,
    translate: Translator = default_translate,
) -> str | None:
    return max_length(limit, translate(MAX_LENGTH_IS, str(limit)))(status_text)


def username_syntax_error(
    username: str,
    pattern: str | re.Pattern[str],
    *,
    translate: Translator = default_translate,
) -> str | None:
    return matches(pattern, translate(INVALID_USERNAME))(username)
