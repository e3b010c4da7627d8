"""Aggregate validity — one ``can_save`` boolean for the container."""

import logging
from collections.abc import Callable, Iterable, Mapping

logger = logging.getLogger("profile_form.aggregate")


class CanSaveSignal:
    """Fold per-field errors into ``can_save`` and publish changes.

    ``can_save`` is ``not any(errors)``.  The first evaluation always
    publishes; after that the callback fires only when the boolean flips.
    """

    __slots__ = ("_last", "_publish")

    def __init__(self, publish: Callable[[bool], None]) -> None:
        self._publish = publish
        self._last: bool | None = None

    @property
    def value(self) -> bool | None:
        """Last published value, ``None`` before the first evaluation."""
        return self._last

    def update(self, errors: Mapping[str, str | None] | Iterable[str | None]) -> bool:
        if isinstance(errors, Mapping):
            errors = errors.values()
        can_save = not any(errors)
        if can_save != self._last:
            # Recorded before publishing so a re-entrant update sees it
            self._last = can_save
            logger.debug("can_save -> %s", can_save)
            self._publish(can_save)
        return can_save
