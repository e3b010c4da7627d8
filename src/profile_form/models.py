"""Profile data types.

Frozen dataclasses for everything the engine reads.  Values are replaced,
never mutated: the container hands in a new ``ProfileValues`` on each change.
"""

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field, fields, replace
from enum import StrEnum
from typing import Any, Literal, TypeAlias

# Opaque avatar descriptor from the server (blob, contentType, service, url)
AvatarSource: TypeAlias = Mapping[str, Any]


class UserStatus(StrEnum):
    ONLINE = "online"
    AWAY = "away"
    BUSY = "busy"
    OFFLINE = "offline"


@dataclass(frozen=True, slots=True)
class ProfileValues:
    """Current value of every profile field."""

    realname: str = ""
    email: str = ""
    username: str = ""
    password: str = ""
    confirmation_password: str = ""
    status_text: str = ""
    status_type: UserStatus | str = UserStatus.ONLINE
    bio: str = ""
    custom_fields: Mapping[str, Any] = field(default_factory=dict)

    def replace(self, **changes: Any) -> "ProfileValues":
        return replace(self, **changes)

    def changed_fields(self, other: "ProfileValues") -> frozenset[str]:
        """Names of the fields whose values differ from *other*."""
        return frozenset(
            f.name for f in fields(self) if getattr(self, f.name) != getattr(other, f.name)
        )


def _ignore(_value: Any) -> None:
    return None


@dataclass(frozen=True, slots=True)
class FieldHandlers:
    """One setter per field, supplied by the container.

    The engine calls these on the user's behalf and for side effects
    (e.g. clearing ``confirmation_password``).  Setters the container does
    not care about default to a no-op.
    """

    realname: Callable[[str], None] = _ignore
    email: Callable[[str], None] = _ignore
    username: Callable[[str], None] = _ignore
    password: Callable[[str], None] = _ignore
    confirmation_password: Callable[[str], None] = _ignore
    avatar: Callable[[Any], None] = _ignore
    status_text: Callable[[str], None] = _ignore
    status_type: Callable[[str], None] = _ignore
    bio: Callable[[str], None] = _ignore
    custom_fields: Callable[[Mapping[str, Any]], None] = _ignore


@dataclass(frozen=True, slots=True)
class EmailEntry:
    address: str
    verified: bool = False


@dataclass(frozen=True, slots=True)
class UserSnapshot:
    """The persisted user record, used as the baseline for change detection."""

    name: str = ""
    username: str = ""
    emails: tuple[EmailEntry, ...] = ()

    @property
    def email_address(self) -> str:
        """Primary email address, or ``""`` when the user has none."""
        return self.emails[0].address if self.emails else ""

    @property
    def email_verified(self) -> bool:
        return self.emails[0].verified if self.emails else False

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "UserSnapshot":
        """Build a snapshot from a server user record.

        Example::

            UserSnapshot.from_mapping({
                "name": "Alice",
                "username": "alice",
                "emails": [{"address": "a@x.com", "verified": True}],
            })
        """
        emails = tuple(
            EmailEntry(address=entry.get("address", ""), verified=bool(entry.get("verified", False)))
            for entry in data.get("emails") or ()
        )
        return cls(
            name=data.get("name") or "",
            username=data.get("username") or "",
            emails=emails,
        )


@dataclass(frozen=True, slots=True)
class Notification:
    """A toast-style outcome of an asynchronous action."""

    type: Literal["success", "error"]
    message: str

    @classmethod
    def success(cls, message: str) -> "Notification":
        return cls(type="success", message=message)

    @classmethod
    def error(cls, message: str) -> "Notification":
        return cls(type="error", message=message)
