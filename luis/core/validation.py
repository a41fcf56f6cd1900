"""
Argument checks shared by the client factory and its operations.

Every check raises before a request is built, so a failure here never
reaches the network.
"""

from collections.abc import Mapping
from typing import Any

from .contracts import DialogState, PredictionResult, ResponseHandlers
from .errors import ConfigError, InputError


def validate_string(param: Any, name: str, error: type[Exception] = InputError) -> str:
    if param is None:
        raise error(f"Missing {name}")
    if not isinstance(param, str):
        raise error(f"{name} is not a string")
    return param


def validate_app_info(param: Any, name: str) -> str:
    """Application Id and Subscription Key: non-empty, no spaces."""
    validate_string(param, name, ConfigError)
    if param == "":
        raise ConfigError(f"Empty {name}")
    if " " in param:
        raise ConfigError(f"Invalid {name}")
    return param


def validate_flag(param: Any, name: str) -> bool:
    if param is None:
        return False
    if not isinstance(param, bool):
        raise ConfigError(f"{name} flag is not boolean")
    return param


def validate_text(text: Any) -> str:
    """Return the trimmed text to predict."""
    text = validate_string(text, "text to predict").strip()
    if not text:
        raise InputError("Empty text to predict")
    return text


def _handler(handlers: Any, name: str):
    if isinstance(handlers, Mapping):
        fn = handlers.get(name)
    else:
        fn = getattr(handlers, name, None)
    if not callable(fn):
        raise InputError(f'You have to provide an "{name}" function in the response handlers')
    return fn


def validate_handlers(handlers: Any) -> ResponseHandlers:
    """Accept any object (or mapping) exposing callable on_success/on_failure."""
    if handlers is None:
        raise InputError('You have to provide response handlers with "on_success" and "on_failure"')
    if isinstance(handlers, ResponseHandlers):
        _handler(handlers, "on_success")
        _handler(handlers, "on_failure")
        return handlers
    return ResponseHandlers(
        on_success=_handler(handlers, "on_success"),
        on_failure=_handler(handlers, "on_failure"),
    )


def extract_context_id(prior: Any) -> str:
    """Pull the dialog context id out of a previous prediction."""
    context_id = None
    if isinstance(prior, PredictionResult):
        if prior.dialog is not None:
            context_id = prior.dialog.context_id
    elif isinstance(prior, DialogState):
        context_id = prior.context_id
    elif isinstance(prior, Mapping):
        dialog = prior.get("dialog")
        if isinstance(dialog, DialogState):
            context_id = dialog.context_id
        elif isinstance(dialog, Mapping):
            context_id = dialog.get("contextId")

    if not isinstance(context_id, str) or not context_id:
        raise InputError(
            "You have to provide a previous result containing the Context Id "
            "of the dialog you're replying to"
        )
    return context_id
