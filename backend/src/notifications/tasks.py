"""Celery tasks for notification delivery."""

import logging

from infrastructure.email.smtp_email_sender import EmailDeliveryError, SmtpEmailSender
from observability.metrics import emails_sent_total
from workers.base import BaseTask
from workers.celery_app import celery_app

logger = logging.getLogger(__name__)


# Sync routes run in threadpool workers where Celery has no current app
@celery_app.task(
    name="notifications.send_email",
    base=BaseTask,
    bind=True,
    autoretry_for=(EmailDeliveryError,),
    retry_backoff=True,
    retry_kwargs={"max_retries": 3},
)
def send_email(self, to: str, subject: str, html: str) -> None:
    """Send one transactional email through the SMTP relay.

    Relay failures are retried with exponential backoff; after the last
    attempt the failure is logged by BaseTask.on_failure and dropped.
    """
    try:
        SmtpEmailSender.from_settings().send(to, subject, html)
    except EmailDeliveryError:
        emails_sent_total.labels(status="error").inc()
        raise
    emails_sent_total.labels(status="success").inc()
