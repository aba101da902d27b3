"""Outbound email delivery"""

from .smtp_email_sender import EmailDeliveryError, SmtpEmailSender

__all__ = ["EmailDeliveryError", "SmtpEmailSender"]
