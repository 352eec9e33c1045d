"""
buildpack_notify/shared.py
Shared environment helpers for the notifier.
Exports: _required_env, env_flag, env_int, DEFAULT_* constants
"""

import os

from buildpack_notify.errors import ConfigError

DEFAULT_HTTP_TIMEOUT_SECONDS = 30
DEFAULT_LOG_LEVEL = "INFO"
_TRUTHY = {"1", "t", "true"}
_FALSY = {"0", "f", "false"}


def _required_env(name: str) -> str:
    """Read a required environment variable or raise ConfigError."""
    value = os.getenv(name, "").strip()
    if not value:
        raise ConfigError(f"Missing required env var: {name}")
    return value


def env_flag(name: str, default: bool = False) -> bool:
    """
    Return a boolean flag from the environment.

    Unset or blank means ``default``. Accepts 1/t/true and 0/f/false in any case.

    Raises:
        ConfigError: For any other value.
    """
    value = os.getenv(name, "").strip().lower()
    if not value:
        return default
    if value in _TRUTHY:
        return True
    if value in _FALSY:
        return False
    raise ConfigError(f"Invalid {name}: expected true or false, got {value!r}.")


def env_int(name: str) -> int:
    """Read a required integer environment variable."""
    raw_value = _required_env(name)
    try:
        return int(raw_value)
    except ValueError as exc:
        raise ConfigError(f"Invalid {name}: expected an integer.") from exc
