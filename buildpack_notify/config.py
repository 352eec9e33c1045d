"""
buildpack_notify/config.py
Immutable run configuration assembled once from the environment.
Exports: NotifyConfig, EmailConfig, CFAPIConfig, RunConfig, load_config
"""

from dataclasses import dataclass
import os

from buildpack_notify.shared import (
    DEFAULT_HTTP_TIMEOUT_SECONDS,
    _required_env,
    env_flag,
    env_int,
)


@dataclass(frozen=True)
class NotifyConfig:
    """State file locations and run mode."""

    in_state: str
    out_state: str
    dry_run: bool = False


@dataclass(frozen=True)
class EmailConfig:
    """SMTP transport settings."""

    sender: str
    host: str
    port: int
    user: str
    password: str = ""
    cert: str = ""


@dataclass(frozen=True)
class CFAPIConfig:
    """Cloud Controller endpoint and UAA client credentials."""

    api: str
    client_id: str
    client_secret: str
    skip_ssl_validation: bool = False
    timeout: int = DEFAULT_HTTP_TIMEOUT_SECONDS


@dataclass(frozen=True)
class RunConfig:
    """Everything one notification run needs."""

    notify: NotifyConfig
    email: EmailConfig
    cf_api: CFAPIConfig


def load_notify_config() -> NotifyConfig:
    return NotifyConfig(
        in_state=_required_env("IN_STATE"),
        out_state=_required_env("OUT_STATE"),
        dry_run=env_flag("DRY_RUN"),
    )


def load_email_config() -> EmailConfig:
    return EmailConfig(
        sender=_required_env("SMTP_FROM"),
        host=_required_env("SMTP_HOST"),
        port=env_int("SMTP_PORT"),
        user=_required_env("SMTP_USER"),
        password=_required_env("SMTP_PASSWORD"),
        cert=os.getenv("SMTP_CERT", ""),
    )


def load_cf_api_config() -> CFAPIConfig:
    return CFAPIConfig(
        api=_required_env("CF_API").rstrip("/"),
        client_id=_required_env("CLIENT_ID"),
        client_secret=_required_env("CLIENT_SECRET"),
        skip_ssl_validation=os.getenv("INSECURE", "").strip() == "1",
    )


def load_config() -> RunConfig:
    """
    Build the full run configuration from environment variables.

    Returns:
        Frozen RunConfig passed explicitly into every component.
    Raises:
        ConfigError: When a required variable is missing or malformed.
    """
    return RunConfig(
        notify=load_notify_config(),
        email=load_email_config(),
        cf_api=load_cf_api_config(),
    )
