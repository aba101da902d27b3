"""Onboarding document types every new joiner has to submit"""

from enum import Enum
from typing import Dict


class DocumentType(str, Enum):
    PAN_CARD = "PAN_CARD"
    AADHAR_CARD = "AADHAR_CARD"
    CANCELLED_CHEQUE = "CANCELLED_CHEQUE"
    OFFER_LETTER = "OFFER_LETTER"


DOCUMENT_TYPE_NAMES: Dict[DocumentType, str] = {
    DocumentType.PAN_CARD: "PAN Card",
    DocumentType.AADHAR_CARD: "Aadhaar Card",
    DocumentType.CANCELLED_CHEQUE: "Cancelled Cheque",
    DocumentType.OFFER_LETTER: "Offer Letter",
}


def display_name(document_type: DocumentType) -> str:
    """Human readable label used in notifications and emails"""
    return DOCUMENT_TYPE_NAMES[DocumentType(document_type)]
