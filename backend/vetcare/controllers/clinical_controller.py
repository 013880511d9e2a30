"""Clinical record controller."""

from flask import Blueprint, request
from flask_login import login_required

from vetcare.core.api_utils import api_response
from vetcare.core.auth import current_user_id, staff_required
from vetcare.core.limiter_config import MUTATION_LIMIT, READ_LIMIT, limiter
from vetcare.db.session import SessionLocal
from vetcare.repositories.clinical_record_repo import ClinicalRecordRepository
from vetcare.schemas.dtos import (
    ClinicalEntryDraft,
    ClinicalEntryResponse,
    ClinicalRecordResponse,
)
from vetcare.services.clinical_log_service import ClinicalLogService

clinical_bp = Blueprint("clinical", __name__, url_prefix="/api/clinical-records")


@clinical_bp.route("", methods=["GET"])
@login_required
@limiter.limit(READ_LIMIT)
def list_records():
    db = SessionLocal()
    try:
        service = ClinicalLogService(ClinicalRecordRepository(db))
        records = service.list_records(pet_id=request.args.get("pet_id") or None)
        return api_response(
            True,
            f"{len(records)} clinical record(s)",
            [ClinicalRecordResponse.from_domain(r).to_dict() for r in records],
        )
    finally:
        db.close()


@clinical_bp.route("/<record_id>/entries", methods=["GET"])
@login_required
@limiter.limit(READ_LIMIT)
def list_entries(record_id: str):
    db = SessionLocal()
    try:
        service = ClinicalLogService(ClinicalRecordRepository(db))
        entries = service.list_entries(record_id)
        return api_response(
            True,
            f"{len(entries)} entry(ies)",
            [ClinicalEntryResponse.from_domain(e).to_dict() for e in entries],
        )
    finally:
        db.close()


@clinical_bp.route("/<record_id>/entries", methods=["POST"])
@login_required
@staff_required
@limiter.limit(MUTATION_LIMIT)
def append_entry(record_id: str):
    draft = ClinicalEntryDraft.from_mapping(request.get_json(silent=True) or request.form)
    db = SessionLocal()
    try:
        service = ClinicalLogService(ClinicalRecordRepository(db))
        entry = service.append_entry(record_id, current_user_id(), draft)
        return api_response(
            True,
            "Clinical entry added",
            ClinicalEntryResponse.from_domain(entry).to_dict(),
            201,
        )
    finally:
        db.close()


@clinical_bp.route("/<record_id>/pdf", methods=["GET"])
@login_required
@limiter.limit(READ_LIMIT)
def export_pdf(record_id: str):
    db = SessionLocal()
    try:
        ClinicalLogService(ClinicalRecordRepository(db)).export_record_pdf(record_id)
    finally:
        db.close()
