"""Kinds of in-app notifications raised by document transitions"""

from enum import Enum


class NotificationType(str, Enum):
    DOCUMENT_UPLOADED = "document_uploaded"  # to every admin
    DOCUMENT_APPROVED = "document_approved"  # to the owner
    DOCUMENT_REJECTED = "document_rejected"  # to the owner
