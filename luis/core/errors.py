"""
Error taxonomy for the LUIS client.

Config and input problems are raised before any request goes out.
Auth and protocol problems come back from the prediction service.
"""


class LUISError(Exception):
    """Base class for every error raised by the client."""


class ConfigError(LUISError, ValueError):
    """Bad client configuration (credentials or flags)."""


class InputError(LUISError, ValueError):
    """Bad arguments to predict/reply."""


class ModeError(LUISError, RuntimeError):
    """Operation not available in the client's configured mode."""


class AuthError(LUISError):
    """HTTP-level failure from the prediction service."""


class ProtocolError(LUISError):
    """Malformed or error-shaped response body."""
