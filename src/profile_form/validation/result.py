"""Validation result — immutable container for per-field errors."""

from dataclasses import dataclass

# Every field that can block saving, in display order
ERROR_FIELDS: tuple[str, ...] = ("password", "email", "username", "realname", "status_text")


@dataclass(frozen=True, slots=True)
class ProfileValidity:
    """Per-field validation errors for one snapshot of the form.

    The result is falsy when any field is invalid, so you can write::

        validity = validate_profile(values, user, settings)
        if not validity:
            show(validity.errors)

    ``errors`` maps field names to an inline message and only holds
    fields that failed::

        {"password": "Passwords do not match"}
    """

    errors: dict[str, str]

    @property
    def is_valid(self) -> bool:
        """True if no field has an error."""
        return not self.errors

    @property
    def can_save(self) -> bool:
        return self.is_valid

    def error(self, field_name: str) -> str | None:
        return self.errors.get(field_name)

    def slots(self) -> dict[str, str | None]:
        """All error slots, ``None`` for valid fields."""
        return {name: self.errors.get(name) for name in ERROR_FIELDS}

    def __bool__(self) -> bool:
        """Falsy when invalid, enables ``if not validity:`` pattern."""
        return self.is_valid
