"""
buildpack_notify/mailer.py
SMTP transport for notification e-mails.
Exports: SMTPMailer
"""

from email.message import EmailMessage
import logging
import smtplib
import ssl

from buildpack_notify.config import EmailConfig
from buildpack_notify.shared import DEFAULT_HTTP_TIMEOUT_SECONDS

logger = logging.getLogger(__name__)


class SMTPMailer:
    """Sends HTML e-mail through an authenticated STARTTLS SMTP server."""

    def __init__(self, config: EmailConfig, timeout: int = DEFAULT_HTTP_TIMEOUT_SECONDS) -> None:
        self.config = config
        self.timeout = timeout

    def _tls_context(self) -> ssl.SSLContext:
        context = ssl.create_default_context()
        if self.config.cert:
            context.load_verify_locations(cadata=self.config.cert)
        return context

    def build_message(self, recipient: str, subject: str, body: bytes) -> EmailMessage:
        message = EmailMessage()
        message["From"] = self.config.sender
        message["To"] = recipient
        message["Subject"] = subject
        message.set_content(body.decode("utf-8"), subtype="html")
        return message

    def send_email(self, recipient: str, subject: str, body: bytes) -> None:
        """
        Deliver one message.

        Raises:
            smtplib.SMTPException: When the server rejects the session or message.
            OSError: On connection or TLS failures.
        """
        message = self.build_message(recipient, subject, body)
        with smtplib.SMTP(self.config.host, self.config.port, timeout=self.timeout) as smtp:
            smtp.starttls(context=self._tls_context())
            smtp.login(self.config.user, self.config.password)
            smtp.send_message(message)
        logger.debug("SMTP accepted message to %s", recipient)
