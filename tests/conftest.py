"""Shared pytest fixtures for the buildpack notifier test suite."""

import logging

import pytest

NOTIFIER_ENV_VARS = (
    "IN_STATE",
    "OUT_STATE",
    "DRY_RUN",
    "CF_API",
    "CLIENT_ID",
    "CLIENT_SECRET",
    "INSECURE",
    "SMTP_FROM",
    "SMTP_HOST",
    "SMTP_PORT",
    "SMTP_USER",
    "SMTP_PASSWORD",
    "SMTP_CERT",
    "LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def _clear_notifier_env(monkeypatch):
    """Keep tests deterministic regardless of developer shell env vars."""
    for name in NOTIFIER_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def logger():
    return logging.getLogger("test-buildpack-notify")
