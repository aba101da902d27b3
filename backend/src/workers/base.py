"""Base utilities for background tasks.

Tasks are enqueued after the web request has committed its state change, and
they carry the request's X-Request-ID in a message header so worker logs can
be correlated with the request that caused them.

Enqueueing Pattern:
==================

    send_email.apply_async(
        kwargs={"to": to, "subject": subject, "html": html},
        headers=request_id_headers(),
    )
"""

import logging
from typing import Dict

from celery import Task

from observability.request_id import get_request_id, set_request_id

logger = logging.getLogger(__name__)


def request_id_headers() -> Dict[str, str]:
    """Message headers carrying the current request ID."""
    return {"request_id": get_request_id()}


class BaseTask(Task):
    """Base Celery task class restoring the originating request ID.

    Usage:
        @celery_app.task(base=BaseTask, bind=True)
        def my_task(self, ...):
            ...
    """

    def __call__(self, *args, **kwargs):
        set_request_id(getattr(self.request, "request_id", None))
        return super().__call__(*args, **kwargs)

    def on_failure(self, exc, task_id, args, kwargs, einfo):
        logger.error(
            f"Task {self.name} failed permanently: task_id={task_id}, error={exc}",
            extra={"task_id": task_id},
        )
        super().on_failure(exc, task_id, args, kwargs, einfo)
