"""Application services: the use-cases of the clinic core."""

from .appointment_service import AppointmentService
from .clinical_log_service import ClinicalLogService
from .purchase_service import PurchaseService
from .teleconference_service import TeleconferenceService, build_teleconference_url

__all__ = [
    "AppointmentService",
    "ClinicalLogService",
    "PurchaseService",
    "TeleconferenceService",
    "build_teleconference_url",
]
