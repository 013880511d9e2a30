"""
Clinical record repository.

The write side only inserts entries; there is no update or delete path for
``clinical_entries`` rows.
"""

import logging
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import joinedload, selectinload

from vetcare.core.exceptions import StoreError
from vetcare.db.base import ClinicalEntry as DbClinicalEntry
from vetcare.db.base import ClinicalRecord as DbClinicalRecord
from vetcare.db.base import Pet as DbPet
from vetcare.domain.entities import ClinicalEntry as DomainClinicalEntry
from vetcare.domain.entities import ClinicalRecord as DomainClinicalRecord
from vetcare.domain.interfaces import IClinicalRecordRepository

logger = logging.getLogger(__name__)


class ClinicalRecordRepository(IClinicalRecordRepository):
    """Repository for clinical records and their append-only entries."""

    def __init__(self, db_session) -> None:
        self.db = db_session

    def get_record(self, record_id: str) -> Optional[DomainClinicalRecord]:
        try:
            db_record = (
                self.db.query(DbClinicalRecord)
                .options(joinedload(DbClinicalRecord.pet).joinedload(DbPet.owner))
                .filter(DbClinicalRecord.id == record_id)
                .first()
            )
        except SQLAlchemyError as e:
            raise self._store_error("get_record", e) from e
        return self._record_to_domain(db_record, with_entries=False) if db_record else None

    def list_records(self, pet_id: Optional[str] = None) -> List[DomainClinicalRecord]:
        query = self.db.query(DbClinicalRecord).options(
            joinedload(DbClinicalRecord.pet).joinedload(DbPet.owner),
            selectinload(DbClinicalRecord.entries),
        )
        if pet_id:
            query = query.filter(DbClinicalRecord.pet_id == pet_id)
        query = query.order_by(
            DbClinicalRecord.created_at.desc(), DbClinicalRecord.id.asc()
        )
        try:
            rows = query.all()
        except SQLAlchemyError as e:
            raise self._store_error("list_records", e) from e
        return [self._record_to_domain(row, with_entries=True) for row in rows]

    def list_entries(self, record_id: str) -> List[DomainClinicalEntry]:
        try:
            rows = (
                self.db.query(DbClinicalEntry)
                .filter(DbClinicalEntry.record_id == record_id)
                .order_by(DbClinicalEntry.id.asc())
                .all()
            )
        except SQLAlchemyError as e:
            raise self._store_error("list_entries", e) from e
        return [self._entry_to_domain(row) for row in rows]

    def add_entry(self, entry: DomainClinicalEntry) -> DomainClinicalEntry:
        db_entry = DbClinicalEntry(
            record_id=entry.record_id,
            vet_id=entry.vet_id,
            reason=entry.reason,
            diagnosis=entry.diagnosis,
            treatment=entry.treatment,
            prescriptions=entry.prescriptions,
            weight=entry.weight,
            temperature=entry.temperature,
            next_appointment=entry.next_appointment,
            visit_date=entry.visit_date,
        )
        try:
            self.db.add(db_entry)
            self.db.commit()
            self.db.refresh(db_entry)
        except SQLAlchemyError as e:
            self.db.rollback()
            raise self._store_error("add_entry", e) from e
        return self._entry_to_domain(db_entry)

    def _store_error(self, operation: str, error: Exception) -> StoreError:
        logger.error(
            "Clinical record store operation failed",
            extra={"context": {"operation": operation, "error": str(error)}},
        )
        return StoreError()

    def _record_to_domain(
        self, db_record: DbClinicalRecord, with_entries: bool
    ) -> DomainClinicalRecord:
        pet = db_record.pet
        owner = pet.owner if pet else None
        entries = (
            [self._entry_to_domain(e) for e in db_record.entries] if with_entries else []
        )
        return DomainClinicalRecord(
            id=db_record.id,
            pet_id=db_record.pet_id,
            created_at=db_record.created_at,
            pet_name=pet.name if pet else None,
            pet_species=pet.species if pet else None,
            owner_name=owner.full_name if owner else None,
            entries=entries,
        )

    def _entry_to_domain(self, db_entry: DbClinicalEntry) -> DomainClinicalEntry:
        return DomainClinicalEntry(
            id=db_entry.id,
            record_id=db_entry.record_id,
            vet_id=db_entry.vet_id,
            reason=db_entry.reason,
            diagnosis=db_entry.diagnosis,
            treatment=db_entry.treatment,
            prescriptions=db_entry.prescriptions,
            weight=db_entry.weight,
            temperature=db_entry.temperature,
            next_appointment=db_entry.next_appointment,
            visit_date=db_entry.visit_date,
        )
