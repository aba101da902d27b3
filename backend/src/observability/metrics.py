"""Prometheus metrics for the onboarding service.

Defines and exposes operational metrics for monitoring and alerting.
"""

from prometheus_client import Counter, Histogram

# Document lifecycle metrics
document_transitions_total = Counter(
    "onboarding_document_transitions_total",
    "Document lifecycle transitions",
    ["document_type", "transition"]  # transition: uploaded|approved|rejected|deleted
)

documents_superseded_total = Counter(
    "onboarding_documents_superseded_total",
    "Documents replaced by a newer upload of the same type",
    ["document_type"]
)

upload_conflicts_total = Counter(
    "onboarding_upload_conflicts_total",
    "Concurrent uploads rejected by the one-document-per-type constraint"
)

# Side effects (notifications, emails, object cleanup) never fail a request
side_effect_failures_total = Counter(
    "onboarding_side_effect_failures_total",
    "Best-effort side effects that failed after a committed transition",
    ["effect"]  # effect: notification|email|object_cleanup
)

emails_sent_total = Counter(
    "onboarding_emails_sent_total",
    "Emails handed to the SMTP relay by workers",
    ["status"]  # status: success|error
)

# Object storage latency
storage_latency_seconds = Histogram(
    "onboarding_storage_latency_seconds",
    "Object storage call latency in seconds",
    ["operation"],
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0]
)
