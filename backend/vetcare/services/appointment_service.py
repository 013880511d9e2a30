"""
Appointment lifecycle service.

Transitions are checked against the domain's transition table first and then
persisted with a write conditioned on the status that was observed, so two
practitioners acting on the same request cannot both succeed.
"""

import logging
from datetime import date, datetime, time, timezone
from typing import List, Optional, Union

from vetcare.core.config import get_app_timezone
from vetcare.core.events import APPOINTMENTS_COLLECTION, emit_invalidation
from vetcare.core.exceptions import (
    InvalidStateError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)
from vetcare.domain.entities import ACTIVE_STATUSES
from vetcare.domain.entities import Appointment as DomainAppointment
from vetcare.domain.entities import AppointmentStatus
from vetcare.domain.interfaces import IAppointmentRepository

logger = logging.getLogger(__name__)


class AppointmentService:
    """Application service for the appointment triage use-cases."""

    def __init__(self, appointment_repo: IAppointmentRepository):
        self.appointment_repo = appointment_repo

    def list_active(
        self, since: Optional[Union[date, datetime]] = None
    ) -> List[DomainAppointment]:
        """Requested and confirmed appointments, soonest first.

        A bare date is read as midnight in the clinic's time zone and compared
        in UTC, the way ``scheduled_for`` is stored. Rows with an unrecognized
        stored status are returned too so they can be corrected.
        """
        return self.appointment_repo.list_by_status(
            ACTIVE_STATUSES,
            since=self._as_datetime(since),
            include_unrecognized=True,
        )

    def accept(
        self, appointment_id: str, practitioner_id: Optional[str]
    ) -> DomainAppointment:
        """Confirm a requested appointment and assign the practitioner."""
        if not practitioner_id:
            raise ValidationError(
                "practitioner_id", "An acting practitioner is required to accept"
            )
        return self._transition(
            appointment_id,
            AppointmentStatus.CONFIRMED,
            "accept",
            vet_id=practitioner_id,
        )

    def cancel(self, appointment_id: str) -> DomainAppointment:
        return self._transition(appointment_id, AppointmentStatus.CANCELLED, "cancel")

    def complete(self, appointment_id: str) -> DomainAppointment:
        """Mark a confirmed appointment as completed.

        Callers typically offer to open a clinical entry for the pet next;
        nothing here creates one.
        """
        return self._transition(
            appointment_id, AppointmentStatus.COMPLETED, "complete"
        )

    def _transition(
        self,
        appointment_id: str,
        target: AppointmentStatus,
        operation: str,
        vet_id: Optional[str] = None,
    ) -> DomainAppointment:
        appointment = self._get_or_raise(appointment_id)
        try:
            current = appointment.check_transition(target)
        except (InvalidTransitionError, InvalidStateError) as e:
            self._log_rejected(appointment_id, operation, e)
            raise

        applied = self.appointment_repo.transition(
            appointment_id, current.value, target, vet_id=vet_id
        )
        if not applied:
            # Someone else changed the row between our read and our write
            error = self._stale_write_error(appointment_id, target)
            self._log_rejected(appointment_id, operation, error)
            raise error

        logger.info(
            "Appointment %s",
            operation,
            extra={
                "context": {
                    "appointment_id": appointment_id,
                    "from": current.value,
                    "to": target.value,
                    "vet_id": vet_id,
                }
            },
        )
        emit_invalidation(self, APPOINTMENTS_COLLECTION, appointment_id, operation)

        updated = self.appointment_repo.get_by_id(appointment_id)
        return updated or appointment

    def _stale_write_error(self, appointment_id: str, target: AppointmentStatus):
        fresh = self.appointment_repo.get_by_id(appointment_id)
        if fresh is None:
            return NotFoundError("Appointment", appointment_id)
        if fresh.status is None:
            return InvalidStateError(
                f"Appointment '{appointment_id}' has unrecognized status "
                f"'{fresh.status_value}'",
                {"id": appointment_id, "status": fresh.status_value},
            )
        return InvalidTransitionError(appointment_id, fresh.status_value, target.value)

    def _get_or_raise(self, appointment_id: str) -> DomainAppointment:
        appointment = self.appointment_repo.get_by_id(appointment_id)
        if appointment is None:
            raise NotFoundError("Appointment", appointment_id)
        return appointment

    @staticmethod
    def _log_rejected(appointment_id: str, operation: str, error: Exception) -> None:
        logger.warning(
            "Appointment %s rejected",
            operation,
            extra={
                "context": {
                    "appointment_id": appointment_id,
                    "error": getattr(error, "code", type(error).__name__),
                    "message": str(error),
                }
            },
        )

    @staticmethod
    def _as_datetime(value: Optional[Union[date, datetime]]) -> Optional[datetime]:
        if value is None or isinstance(value, datetime):
            return value
        local_midnight = datetime.combine(value, time.min, tzinfo=get_app_timezone())
        return local_midnight.astimezone(timezone.utc)
