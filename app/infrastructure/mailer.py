"""SMTP client for outgoing email.

When SMTP_HOST is empty the message is logged and dropped, which keeps
local development and tests free of a mail server.
"""

import logging
import smtplib
from email.message import EmailMessage
from email.utils import make_msgid

from app.config import get_settings

settings = get_settings()
logger = logging.getLogger(__name__)


class SMTPMailer:
    """Sends HTML email through the configured SMTP relay."""

    def __init__(self):
        self.host = settings.SMTP_HOST
        self.port = settings.SMTP_PORT
        self.user = settings.SMTP_USER
        self.password = settings.SMTP_PASSWORD
        self.sender = settings.SMTP_FROM
        self.use_tls = settings.SMTP_USE_TLS
        self.timeout = 10  # seconds

    @property
    def enabled(self) -> bool:
        return bool(self.host)

    def send(self, to: str, subject: str, html: str, text: str = "") -> bool:
        """Send one message. Returns False when sending is disabled."""
        if not self.enabled:
            logger.warning(f"SMTP_HOST not configured, skipping email to {to}: {subject}")
            return False

        msg = EmailMessage()
        msg["From"] = f"{settings.APP_NAME} <{self.sender}>"
        msg["To"] = to
        msg["Subject"] = subject
        msg["Message-ID"] = make_msgid()
        msg.set_content(text or "This is an automated message. Please view in HTML.")
        msg.add_alternative(html, subtype="html")

        with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as server:
            if self.use_tls:
                server.starttls()
            if self.user:
                server.login(self.user, self.password)
            server.send_message(msg)

        logger.info(f"Email sent to {to}: {subject}")
        return True
