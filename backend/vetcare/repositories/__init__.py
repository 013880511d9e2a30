"""SQLAlchemy implementations of the domain repository interfaces."""

from .appointment_repo import AppointmentRepository
from .clinical_record_repo import ClinicalRecordRepository
from .purchase_repo import PurchaseRepository

__all__ = ["AppointmentRepository", "ClinicalRecordRepository", "PurchaseRepository"]
