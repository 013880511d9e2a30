"""Request/response DTOs and form validation."""

from .dtos import (
    AppointmentResponse,
    ClinicalEntryDraft,
    ClinicalEntryFields,
    ClinicalEntryResponse,
    ClinicalRecordResponse,
    ErrorResponse,
    PurchaseResponse,
)

__all__ = [
    "AppointmentResponse",
    "ClinicalEntryDraft",
    "ClinicalEntryFields",
    "ClinicalEntryResponse",
    "ClinicalRecordResponse",
    "ErrorResponse",
    "PurchaseResponse",
]
