"""
Abstract interfaces for the record store and auth seams.

Services depend on these contracts only, so tests can pass
``Mock(spec=...)`` doubles and the SQLAlchemy adapters stay swappable.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional, Sequence

from .entities import (
    Appointment,
    AppointmentStatus,
    ClinicalEntry,
    ClinicalRecord,
    Purchase,
)


class IAppointmentReader(ABC):
    """Interface for appointment read operations."""

    @abstractmethod
    def get_by_id(self, appointment_id: str) -> Optional[Appointment]:
        """Get appointment by ID."""
        pass

    @abstractmethod
    def list_by_status(
        self,
        statuses: Sequence[AppointmentStatus],
        since: Optional[datetime] = None,
        include_unrecognized: bool = False,
    ) -> List[Appointment]:
        """Appointments in ``statuses`` ascending by scheduled time, unscheduled last.

        With ``include_unrecognized`` rows whose stored status is not a known
        lifecycle state are returned too.
        """
        pass


class IAppointmentWriter(ABC):
    """Interface for guarded appointment writes.

    Every write is conditioned on the state the caller observed and returns
    False when that condition no longer holds (or the row is gone).
    """

    @abstractmethod
    def transition(
        self,
        appointment_id: str,
        expected_status: str,
        new_status: AppointmentStatus,
        vet_id: Optional[str] = None,
    ) -> bool:
        """Set the status (and optionally the practitioner) if status is still ``expected_status``."""
        pass

    @abstractmethod
    def set_teleconference_url(self, appointment_id: str, url: str) -> bool:
        """Persist ``url`` if the appointment is a confirmed remote consultation without one."""
        pass


class IAppointmentRepository(IAppointmentReader, IAppointmentWriter):
    """Complete appointment repository interface."""

    pass


class IClinicalRecordReader(ABC):
    """Interface for clinical record read operations."""

    @abstractmethod
    def get_record(self, record_id: str) -> Optional[ClinicalRecord]:
        """Get a record (without entries) by ID."""
        pass

    @abstractmethod
    def list_records(self, pet_id: Optional[str] = None) -> List[ClinicalRecord]:
        """Records newest-first, each with its entries in insertion order."""
        pass

    @abstractmethod
    def list_entries(self, record_id: str) -> List[ClinicalEntry]:
        """Entries of one record in insertion order."""
        pass


class IClinicalEntryWriter(ABC):
    """Append-only write side of the clinical log."""

    @abstractmethod
    def add_entry(self, entry: ClinicalEntry) -> ClinicalEntry:
        """Insert a new entry and return it with its assigned id."""
        pass


class IClinicalRecordRepository(IClinicalRecordReader, IClinicalEntryWriter):
    """Complete clinical record repository interface."""

    pass


class IPurchaseReader(ABC):
    """Read-only access to completed sales."""

    @abstractmethod
    def get_by_id(self, purchase_id: str) -> Optional[Purchase]:
        """Get one purchase with its line items."""
        pass

    @abstractmethod
    def list_by_customer(self, customer_id: str) -> List[Purchase]:
        """Purchases of a customer newest-first, with line items."""
        pass


class ICurrentUserProvider(ABC):
    """Resolves the authenticated principal for the current request."""

    @abstractmethod
    def current_user_id(self) -> Optional[str]:
        """Return the authenticated user id, or None when anonymous."""
        pass
