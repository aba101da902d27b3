"""Observability module.

Provides structured logging, metrics, request correlation and health checks.
"""

from .logging_config import configure_logging, get_logger
from .metrics import (
    document_transitions_total,
    documents_superseded_total,
    emails_sent_total,
    side_effect_failures_total,
    storage_latency_seconds,
    upload_conflicts_total,
)
from .request_id import request_id_var, get_request_id, set_request_id, generate_request_id
from .health import HealthStatus, ComponentHealth

__all__ = [
    # Logging
    "configure_logging",
    "get_logger",
    # Metrics
    "document_transitions_total",
    "documents_superseded_total",
    "emails_sent_total",
    "side_effect_failures_total",
    "storage_latency_seconds",
    "upload_conflicts_total",
    # Request ID
    "request_id_var",
    "get_request_id",
    "set_request_id",
    "generate_request_id",
    # Health
    "HealthStatus",
    "ComponentHealth",
]
