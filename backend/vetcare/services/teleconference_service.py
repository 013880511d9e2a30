"""Teleconference link provisioning for remote consultations."""

import logging
from typing import Optional

from vetcare.core.config import get_teleconference_base_url
from vetcare.core.events import APPOINTMENTS_COLLECTION, emit_invalidation
from vetcare.core.exceptions import InvalidStateError, NotFoundError
from vetcare.domain.entities import Appointment as DomainAppointment
from vetcare.domain.entities import AppointmentStatus
from vetcare.domain.interfaces import IAppointmentRepository

logger = logging.getLogger(__name__)


def build_teleconference_url(appointment_id: str, base_url: Optional[str] = None) -> str:
    """Derive the meeting URL for an appointment. Same id, same URL."""
    base = (base_url or get_teleconference_base_url()).rstrip("/")
    return f"{base}/{appointment_id}"


class TeleconferenceService:
    def __init__(
        self, appointment_repo: IAppointmentRepository, base_url: Optional[str] = None
    ):
        self.appointment_repo = appointment_repo
        self.base_url = base_url

    def ensure_link(self, appointment_id: str) -> str:
        """Return the appointment's meeting URL, creating it on first use.

        Raises:
            NotFoundError: unknown appointment
            InvalidStateError: appointment is not a confirmed remote consultation
        """
        appointment = self.appointment_repo.get_by_id(appointment_id)
        if appointment is None:
            raise NotFoundError("Appointment", appointment_id)
        self._check_eligible(appointment)

        if appointment.teleconference_url:
            return appointment.teleconference_url

        url = build_teleconference_url(appointment_id, self.base_url)
        if self.appointment_repo.set_teleconference_url(appointment_id, url):
            logger.info(
                "Teleconference link provisioned",
                extra={"context": {"appointment_id": appointment_id, "url": url}},
            )
            emit_invalidation(
                self, APPOINTMENTS_COLLECTION, appointment_id, "ensure_link"
            )
            return url

        # Guard failed: either a concurrent call stored a URL or the row moved on
        fresh = self.appointment_repo.get_by_id(appointment_id)
        if fresh is None:
            raise NotFoundError("Appointment", appointment_id)
        if fresh.teleconference_url:
            return fresh.teleconference_url
        self._check_eligible(fresh)
        raise InvalidStateError(
            f"Could not store a teleconference link for appointment '{appointment_id}'",
            {"id": appointment_id},
        )

    @staticmethod
    def _check_eligible(appointment: DomainAppointment) -> None:
        if not appointment.is_remote_consultation:
            raise InvalidStateError(
                f"Appointment '{appointment.id}' is not a remote consultation",
                {"id": appointment.id, "type": appointment.type_value},
            )
        if appointment.status is not AppointmentStatus.CONFIRMED:
            raise InvalidStateError(
                f"Appointment '{appointment.id}' must be confirmed before "
                "a teleconference link is created",
                {"id": appointment.id, "status": appointment.status_value},
            )
