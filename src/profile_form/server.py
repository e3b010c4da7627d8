"""Remote operations the form depends on.

The transport is the container's business.  The engine only needs an
object matching ``ProfileServer``::

    class MyServer:
        async def check_username_availability(self, username: str) -> bool: ...
        async def get_avatar_suggestion(self) -> Sequence[AvatarSource]: ...
        async def send_confirmation_email(self, email: str) -> None: ...

No base class required.  Containers that expose a generic method-call RPC
can wrap it in ``MethodServer``.
"""

from collections.abc import Awaitable, Callable, Mapping, Sequence
from typing import Any, Protocol, TypeAlias

from profile_form.models import AvatarSource

# call(method_name, *args) -> result
MethodCall: TypeAlias = Callable[..., Awaitable[Any]]


class ProfileServer(Protocol):
    """Protocol for the server side of the profile form."""

    async def check_username_availability(self, username: str) -> bool: ...

    async def get_avatar_suggestion(
        self,
    ) -> Sequence[AvatarSource] | Mapping[str, AvatarSource]: ...

    async def send_confirmation_email(self, email: str) -> None: ...


class MethodServer:
    """Adapt a ``call(method_name, *args)`` coroutine to ``ProfileServer``."""

    __slots__ = ("_call",)

    def __init__(self, call: MethodCall) -> None:
        self._call = call

    async def check_username_availability(self, username: str) -> bool:
        return bool(await self._call("checkUsernameAvailability", username))

    async def get_avatar_suggestion(self) -> Sequence[AvatarSource] | Mapping[str, AvatarSource]:
        return await self._call("getAvatarSuggestion")

    async def send_confirmation_email(self, email: str) -> None:
        await self._call("sendConfirmationEmail", email)
