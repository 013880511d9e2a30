"""
Clinical entry log.

Entries are append-only: this service can add and list them, nothing else.
"""

import logging
from datetime import datetime, timezone
from typing import Callable, List, Optional

from vetcare.core.events import CLINICAL_RECORDS_COLLECTION, emit_invalidation
from vetcare.core.exceptions import FeatureUnavailableError, NotFoundError
from vetcare.domain.entities import ClinicalEntry as DomainClinicalEntry
from vetcare.domain.entities import ClinicalRecord as DomainClinicalRecord
from vetcare.domain.interfaces import IClinicalRecordRepository
from vetcare.schemas.dtos import ClinicalEntryDraft

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ClinicalLogService:
    def __init__(
        self,
        record_repo: IClinicalRecordRepository,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.record_repo = record_repo
        self.clock = clock

    def append_entry(
        self,
        record_id: str,
        practitioner_id: Optional[str],
        draft: ClinicalEntryDraft,
    ) -> DomainClinicalEntry:
        """Validate ``draft`` and append it to the record.

        Raises:
            ValidationError: first invalid draft field
            NotFoundError: unknown record
        """
        fields = draft.validate()
        self._get_record_or_raise(record_id)

        entry = DomainClinicalEntry(
            record_id=record_id,
            vet_id=practitioner_id,
            reason=fields.reason,
            visit_date=self.clock(),
            diagnosis=fields.diagnosis,
            treatment=fields.treatment,
            prescriptions=fields.prescriptions,
            weight=fields.weight,
            temperature=fields.temperature,
            next_appointment=fields.next_appointment,
        )
        saved = self.record_repo.add_entry(entry)

        logger.info(
            "Clinical entry added",
            extra={
                "context": {
                    "record_id": record_id,
                    "entry_id": saved.id,
                    "vet_id": practitioner_id,
                }
            },
        )
        emit_invalidation(self, CLINICAL_RECORDS_COLLECTION, record_id, "append_entry")
        return saved

    def list_entries(self, record_id: str) -> List[DomainClinicalEntry]:
        """Entries of a record, most recent first."""
        self._get_record_or_raise(record_id)
        return list(reversed(self.record_repo.list_entries(record_id)))

    def list_records(self, pet_id: Optional[str] = None) -> List[DomainClinicalRecord]:
        records = self.record_repo.list_records(pet_id=pet_id)
        for record in records:
            record.entries = list(reversed(record.entries))
        return records

    def export_record_pdf(self, record_id: str):
        self._get_record_or_raise(record_id)
        raise FeatureUnavailableError(
            "record_pdf", "PDF export of clinical records is not available yet"
        )

    def _get_record_or_raise(self, record_id: str) -> DomainClinicalRecord:
        record = self.record_repo.get_record(record_id)
        if record is None:
            raise NotFoundError("Clinical record", record_id)
        return record
