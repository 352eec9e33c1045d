"""
buildpack_notify/notify.py
Sends one restage notification per owner.
Exports: NOTIFY_SUBJECT, notify_subject, send_notify_email_to_users
"""

import logging
import smtplib
from typing import Any

from buildpack_notify.cf.models import Application
from buildpack_notify.releases import BuildpackReleaseInfo
from buildpack_notify.templates import NotifyEmail, render_notify_email

NOTIFY_SUBJECT = "Action required: restage your application"


def notify_subject(is_multiple_app: bool) -> str:
    return NOTIFY_SUBJECT + "s" if is_multiple_app else NOTIFY_SUBJECT


def send_notify_email_to_users(
    users: dict[str, list[Application]],
    updated_buildpacks: list[BuildpackReleaseInfo],
    mailer: Any,
    dry_run: bool,
    logger: logging.Logger,
) -> int:
    """
    Send each owner a single message listing all of their outdated applications.

    Every recipient receives the full release list of this run. A failed send
    is logged and only that recipient is skipped. In dry-run mode nothing is
    sent but each recipient is still logged as sent.

    Returns:
        Number of recipients logged as sent.
    """
    sent = 0
    for user, apps in users.items():
        is_multiple_app = len(apps) > 1
        body = render_notify_email(
            NotifyEmail(
                username=user,
                apps=apps,
                is_multiple_app=is_multiple_app,
                buildpacks=updated_buildpacks,
            )
        ).encode("utf-8")
        if not dry_run:
            try:
                mailer.send_email(user, notify_subject(is_multiple_app), body)
            except (smtplib.SMTPException, OSError):
                logger.exception("Unable to send e-mail to %s", user)
                continue
        logger.info("Sent e-mail to %s", user)
        sent += 1
    return sent
