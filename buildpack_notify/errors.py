"""
buildpack_notify/errors.py
Exception types that abort a notification run.
Exports: ConfigError, StateError, PlatformAPIError, OwnerResolutionError, TimestampParseError
"""


class ConfigError(RuntimeError):
    """Raised when required configuration is missing or malformed."""


class StateError(RuntimeError):
    """Raised when the buildpack state file cannot be read or written."""


class PlatformAPIError(RuntimeError):
    """Raised for any failed Cloud Controller or UAA request."""


class OwnerResolutionError(RuntimeError):
    """Raised when the owners of a space cannot be resolved."""


class TimestampParseError(RuntimeError):
    """Raised when a platform or state timestamp is not valid RFC3339."""
