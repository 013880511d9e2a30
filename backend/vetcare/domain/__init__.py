"""
Domain package - Pure business logic layer.

This package contains:
- entities.py: Domain entities, closed status enums and transition rules
- interfaces.py: Repository and auth contracts
"""

from .entities import (
    Appointment,
    AppointmentStatus,
    AppointmentType,
    ClinicalEntry,
    ClinicalRecord,
    Purchase,
    PurchaseItem,
    PurchaseStatus,
)
from .interfaces import (
    IAppointmentReader,
    IAppointmentRepository,
    IAppointmentWriter,
    IClinicalEntryWriter,
    IClinicalRecordReader,
    IClinicalRecordRepository,
    ICurrentUserProvider,
    IPurchaseReader,
)

__all__ = [
    # Domain entities
    "Appointment",
    "AppointmentStatus",
    "AppointmentType",
    "ClinicalEntry",
    "ClinicalRecord",
    "Purchase",
    "PurchaseItem",
    "PurchaseStatus",
    # Repository interfaces
    "IAppointmentRepository",
    "IClinicalRecordRepository",
    "IPurchaseReader",
    "ICurrentUserProvider",
    # Segregated interfaces
    "IAppointmentReader",
    "IAppointmentWriter",
    "IClinicalRecordReader",
    "IClinicalEntryWriter",
]
