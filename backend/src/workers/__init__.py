"""Background workers module for async task processing.

Email delivery runs here so an SMTP outage never slows down or fails the
request that triggered it.
"""

from .base import BaseTask, request_id_headers

__all__ = [
    "BaseTask",
    "request_id_headers",
]
