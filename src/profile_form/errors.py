"""profile_form exception hierarchy.

Field validation failures are not exceptions: they are inline messages in
``ProfileValidity.errors``.  The types below cover configuration mistakes
and failed remote operations.
"""

from dataclasses import dataclass


class ProfileFormError(Exception):
    """Base for all profile_form errors."""


class ConfigurationError(ProfileFormError):
    """Raised when form settings or engine configuration are invalid.

    Typically raised while constructing ``FormSettings`` or ``FormConfig``.
    """


@dataclass(frozen=True, slots=True)
class OperationError(ProfileFormError):
    """A remote call that failed.

    Never escapes the engine: it is logged and turned into an error
    ``Notification`` (or stored on the avatar state) so the user can retry.
    """

    operation: str
    detail: str = ""

    def __str__(self) -> str:
        if self.detail:
            return f"{self.operation}: {self.detail}"
        return self.operation

    @classmethod
    def from_exception(cls, operation: str, exc: BaseException) -> "OperationError":
        """Wrap *exc*, preferring a ``message`` or ``reason`` attribute over ``str()``."""
        detail = getattr(exc, "message", None) or getattr(exc, "reason", None) or str(exc)
        return cls(operation=operation, detail=str(detail) or type(exc).__name__)
