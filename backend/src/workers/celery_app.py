"""Celery application

Start a worker with:
    celery -A workers.celery_app worker --loglevel=INFO

Set CELERY_TASK_ALWAYS_EAGER=true to run tasks inline (local development
without Redis).
"""

from celery import Celery

from config import get_settings

settings = get_settings()

celery_app = Celery(
    "onboarding",
    broker=settings.CELERY_BROKER_URL,
    backend=settings.CELERY_RESULT_BACKEND,
    include=["notifications.tasks"],
)

celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    task_always_eager=settings.CELERY_TASK_ALWAYS_EAGER,
    task_acks_late=True,
    task_reject_on_worker_lost=True,
    broker_connection_retry_on_startup=True,
)
