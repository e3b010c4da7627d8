"""profile_form — validation and side-effect engine for an account profile form.

Decides, field by field, whether the current values are acceptable, runs the
debounced username availability check, reacts to value transitions, and
tells the owning container whether the form can be saved.

Basic usage::

    from profile_form import FieldHandlers, FormSettings, ProfileForm, ProfileValues, UserSnapshot

    async with ProfileForm(
        values, handlers, user, FormSettings(require_name=True), set_can_save,
        server=server, notify=show_toast,
    ) as form:
        form.update(new_values)
"""

__version__ = "0.1.0"
__all__ = [
    "AvatarState",
    "CanSaveSignal",
    "CheckPhase",
    "ConfigurationError",
    "EmailEntry",
    "FieldHandlers",
    "FieldState",
    "FormConfig",
    "FormSettings",
    "MethodServer",
    "Notification",
    "OperationError",
    "ProfileForm",
    "ProfileFormError",
    "ProfileServer",
    "ProfileValidity",
    "ProfileValues",
    "SideEffectReactor",
    "UserSnapshot",
    "UserStatus",
    "UsernameCheckState",
    "UsernameChecker",
    "default_translate",
    "validate_profile",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import profile_form`` free of anyio until the engine is used.
    """
    if name == "ProfileForm":
        from profile_form.form import ProfileForm

        return ProfileForm

    if name in ("FormConfig", "FormSettings"):
        from profile_form import config as _config

        return getattr(_config, name)

    if name in ("EmailEntry", "FieldHandlers", "Notification", "ProfileValues", "UserSnapshot", "UserStatus"):
        from profile_form import models as _models

        return getattr(_models, name)

    if name in ("ProfileValidity", "validate_profile"):
        from profile_form import validation as _validation

        return getattr(_validation, name)

    if name in ("CheckPhase", "UsernameCheckState", "UsernameChecker"):
        from profile_form import username as _username

        return getattr(_username, name)

    if name in ("AvatarState", "SideEffectReactor"):
        from profile_form import reactor as _reactor

        return getattr(_reactor, name)

    if name == "CanSaveSignal":
        from profile_form.aggregate import CanSaveSignal

        return CanSaveSignal

    if name == "FieldState":
        from profile_form.fields import FieldState

        return FieldState

    if name in ("MethodServer", "ProfileServer"):
        from profile_form import server as _server

        return getattr(_server, name)

    if name == "default_translate":
        from profile_form.messages import default_translate

        return default_translate

    if name in ("ConfigurationError", "OperationError", "ProfileFormError"):
        from profile_form import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
