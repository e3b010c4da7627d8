"""Form configuration.

``FormSettings`` is the per-session policy handed in by the owning container
(which fields may change, the username pattern).  ``FormConfig`` holds the
engine's own knobs.  Both are frozen dataclasses: immutable for the lifetime
of one form session, IDE-autocompletable, no string-key dict lookups.
"""

import re
from collections.abc import Mapping
from dataclasses import dataclass, fields
from typing import Any

from profile_form.errors import ConfigurationError

DEFAULT_NAMES_REGEX = "[0-9a-zA-Z-_.]+"

# Container key -> FormSettings attribute
_SETTING_KEYS = {
    "allowRealNameChange": "allow_real_name_change",
    "allowUserStatusMessageChange": "allow_user_status_message_change",
    "allowEmailChange": "allow_email_change",
    "allowPasswordChange": "allow_password_change",
    "allowUserAvatarChange": "allow_user_avatar_change",
    "canChangeUsername": "can_change_username",
    "namesRegex": "names_regex",
    "requireName": "require_name",
}


@dataclass(frozen=True, slots=True)
class FormSettings:
    """Which profile fields the user may edit, and how names are checked.

    Override what you need::

        settings = FormSettings(allow_email_change=False, require_name=True)
    """

    allow_real_name_change: bool = True
    allow_user_status_message_change: bool = True
    allow_email_change: bool = True
    allow_password_change: bool = True
    allow_user_avatar_change: bool = True
    can_change_username: bool = True
    names_regex: str | re.Pattern[str] = DEFAULT_NAMES_REGEX
    require_name: bool = False

    def __post_init__(self) -> None:
        if isinstance(self.names_regex, re.Pattern):
            return
        try:
            re.compile(self.names_regex)
        except re.error as exc:
            msg = f"Invalid names_regex {self.names_regex!r}: {exc}"
            raise ConfigurationError(msg) from exc

    @property
    def names_pattern(self) -> re.Pattern[str]:
        """The compiled username pattern (``re`` caches compilation)."""
        if isinstance(self.names_regex, re.Pattern):
            return self.names_regex
        return re.compile(self.names_regex)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "FormSettings":
        """Build settings from the container's camelCase keys.

        Snake-case attribute names are accepted too.  Unknown keys are ignored.
        """
        known = {f.name for f in fields(cls)}
        kwargs: dict[str, Any] = {}
        for key, value in data.items():
            name = _SETTING_KEYS.get(key, key)
            if name in known:
                kwargs[name] = value
        return cls(**kwargs)


@dataclass(frozen=True, slots=True)
class FormConfig:
    """Engine configuration. Immutable after creation."""

    # Seconds the username must stay unchanged before it is checked
    username_debounce: float = 0.4

    status_text_max_length: int = 120

    def __post_init__(self) -> None:
        if self.username_debounce < 0:
            msg = f"username_debounce must be >= 0, got {self.username_debounce}"
            raise ConfigurationError(msg)
        if self.status_text_max_length <= 0:
            msg = f"status_text_max_length must be > 0, got {self.status_text_max_length}"
            raise ConfigurationError(msg)
