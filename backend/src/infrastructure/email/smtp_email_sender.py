"""SMTP email sender

Hands HTML emails to a relay (SES, SendGrid, Postfix...) over SMTP. Delivery
itself is the relay's job.
"""

import logging
import smtplib
from email.message import EmailMessage
from typing import Optional

from config import Settings, get_settings

logger = logging.getLogger(__name__)


class EmailDeliveryError(Exception):
    """Raised when the relay refuses or cannot be reached."""
    pass


class SmtpEmailSender:
    """Send HTML email through an SMTP relay.

    Example:
        sender = SmtpEmailSender.from_settings()
        sender.send("asha@example.com", "Document Approved", "<p>...</p>")
    """

    def __init__(
        self,
        host: str,
        port: int,
        sender: str,
        username: Optional[str] = None,
        password: Optional[str] = None,
        use_tls: bool = False,
        timeout: float = 30.0,
    ):
        self.host = host
        self.port = port
        self.sender = sender
        self.username = username
        self.password = password
        self.use_tls = use_tls
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "SmtpEmailSender":
        settings = settings or get_settings()
        return cls(
            host=settings.SMTP_HOST,
            port=settings.SMTP_PORT,
            sender=settings.EMAIL_SENDER,
            username=settings.SMTP_USERNAME,
            password=settings.SMTP_PASSWORD,
            use_tls=settings.SMTP_USE_TLS,
        )

    def build_message(self, to: str, subject: str, html: str) -> EmailMessage:
        message = EmailMessage()
        message["From"] = self.sender
        message["To"] = to
        message["Subject"] = subject
        message.set_content("This message requires an HTML capable email client.")
        message.add_alternative(html, subtype="html")
        return message

    def send(self, to: str, subject: str, html: str) -> None:
        """Send one email.

        Raises:
            EmailDeliveryError: If the relay rejects the message or is unreachable
        """
        message = self.build_message(to, subject, html)
        try:
            with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as smtp:
                if self.use_tls:
                    smtp.starttls()
                if self.username:
                    smtp.login(self.username, self.password or "")
                smtp.send_message(message)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"SMTP delivery failed: to={to}, subject={subject}, error={e}")
            raise EmailDeliveryError(f"Failed to send email: {e}")

        logger.info(f"Email sent: to={to}, subject={subject}")
