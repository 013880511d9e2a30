"""
Appointment repository: the store adapter behind the lifecycle manager.

Writes are single conditional UPDATE statements; the affected row count tells
the caller whether the state it observed still held at write time.
"""

import logging
from datetime import datetime
from typing import List, Optional, Sequence

from sqlalchemy import or_, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import joinedload

from vetcare.core.exceptions import StoreError
from vetcare.db.base import Appointment as DbAppointment
from vetcare.domain.entities import Appointment as DomainAppointment
from vetcare.domain.entities import AppointmentStatus, AppointmentType
from vetcare.domain.interfaces import IAppointmentRepository

logger = logging.getLogger(__name__)


class AppointmentRepository(IAppointmentRepository):
    """Repository for Appointment persistence operations."""

    def __init__(self, db_session) -> None:
        self.db = db_session

    def get_by_id(self, appointment_id: str) -> Optional[DomainAppointment]:
        try:
            db_appointment = (
                self.db.query(DbAppointment)
                .options(joinedload(DbAppointment.pet), joinedload(DbAppointment.client))
                .filter(DbAppointment.id == appointment_id)
                .first()
            )
        except SQLAlchemyError as e:
            raise self._store_error("get_by_id", e) from e
        return self._to_domain(db_appointment) if db_appointment else None

    def list_by_status(
        self,
        statuses: Sequence[AppointmentStatus],
        since: Optional[datetime] = None,
        include_unrecognized: bool = False,
    ) -> List[DomainAppointment]:
        status_filter = DbAppointment.status.in_([s.value for s in statuses])
        if include_unrecognized:
            status_filter = or_(
                status_filter,
                DbAppointment.status.notin_([s.value for s in AppointmentStatus]),
            )

        query = (
            self.db.query(DbAppointment)
            .options(joinedload(DbAppointment.pet), joinedload(DbAppointment.client))
            .filter(status_filter)
        )
        if since is not None:
            query = query.filter(DbAppointment.scheduled_for >= since)

        # Unscheduled ("to be confirmed") rows go last, oldest request first
        query = query.order_by(
            DbAppointment.scheduled_for.is_(None),
            DbAppointment.scheduled_for.asc(),
            DbAppointment.created_at.asc(),
            DbAppointment.id.asc(),
        )
        try:
            rows = query.all()
        except SQLAlchemyError as e:
            raise self._store_error("list_by_status", e) from e
        return [self._to_domain(row) for row in rows]

    def transition(
        self,
        appointment_id: str,
        expected_status: str,
        new_status: AppointmentStatus,
        vet_id: Optional[str] = None,
    ) -> bool:
        values = {"status": new_status.value}
        if vet_id is not None:
            values["vet_id"] = vet_id

        stmt = (
            update(DbAppointment)
            .where(
                DbAppointment.id == appointment_id,
                DbAppointment.status == expected_status,
            )
            .values(**values)
        )
        return self._execute_guarded(stmt, "transition")

    def set_teleconference_url(self, appointment_id: str, url: str) -> bool:
        stmt = (
            update(DbAppointment)
            .where(
                DbAppointment.id == appointment_id,
                DbAppointment.teleconference_url.is_(None),
                DbAppointment.type == AppointmentType.REMOTE_CONSULTATION.value,
                DbAppointment.status == AppointmentStatus.CONFIRMED.value,
            )
            .values(teleconference_url=url)
        )
        return self._execute_guarded(stmt, "set_teleconference_url")

    def _execute_guarded(self, stmt, operation: str) -> bool:
        try:
            result = self.db.execute(stmt, execution_options={"synchronize_session": False})
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise self._store_error(operation, e) from e
        return result.rowcount == 1

    def _store_error(self, operation: str, error: Exception) -> StoreError:
        logger.error(
            "Appointment store operation failed",
            extra={"context": {"operation": operation, "error": str(error)}},
        )
        return StoreError()

    def _to_domain(self, db_appointment: DbAppointment) -> DomainAppointment:
        pet = db_appointment.pet
        client = db_appointment.client
        return DomainAppointment(
            id=db_appointment.id,
            pet_id=db_appointment.pet_id,
            client_id=db_appointment.client_id,
            status_value=db_appointment.status,
            type_value=db_appointment.type,
            reason=db_appointment.reason or "",
            scheduled_for=db_appointment.scheduled_for,
            vet_id=db_appointment.vet_id,
            teleconference_url=db_appointment.teleconference_url,
            created_at=db_appointment.created_at,
            pet_name=pet.name if pet else None,
            pet_species=pet.species if pet else None,
            client_name=client.full_name if client else None,
        )
