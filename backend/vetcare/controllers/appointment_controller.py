"""
Appointment controller: HTTP concerns only.

Each request builds its own session and service; domain errors propagate to
the error handler registered in ``vetcare.core.api_utils``.
"""

from datetime import date

from flask import Blueprint, request
from flask_login import login_required

from vetcare.core.api_utils import api_response
from vetcare.core.auth import current_user_id, staff_required
from vetcare.core.exceptions import ValidationError
from vetcare.core.limiter_config import MUTATION_LIMIT, READ_LIMIT, limiter
from vetcare.db.session import SessionLocal
from vetcare.repositories.appointment_repo import AppointmentRepository
from vetcare.schemas.dtos import AppointmentResponse
from vetcare.services.appointment_service import AppointmentService
from vetcare.services.teleconference_service import TeleconferenceService

appointment_bp = Blueprint("appointments", __name__, url_prefix="/api/appointments")


def _parse_since(raw):
    if not raw:
        return None
    try:
        return date.fromisoformat(raw)
    except ValueError:
        raise ValidationError("since", f"'since' must be a date (YYYY-MM-DD), got '{raw}'")


def _serialize(appointment) -> dict:
    return AppointmentResponse.from_domain(appointment).to_dict()


@appointment_bp.route("", methods=["GET"])
@login_required
@limiter.limit(READ_LIMIT)
def list_active():
    since = _parse_since(request.args.get("since"))
    db = SessionLocal()
    try:
        service = AppointmentService(AppointmentRepository(db))
        appointments = service.list_active(since=since)
        return api_response(
            True,
            f"{len(appointments)} active appointment(s)",
            [_serialize(a) for a in appointments],
        )
    finally:
        db.close()


@appointment_bp.route("/<appointment_id>/accept", methods=["POST"])
@login_required
@staff_required
@limiter.limit(MUTATION_LIMIT)
def accept(appointment_id: str):
    db = SessionLocal()
    try:
        service = AppointmentService(AppointmentRepository(db))
        appointment = service.accept(appointment_id, current_user_id())
        return api_response(True, "Appointment confirmed", _serialize(appointment))
    finally:
        db.close()


@appointment_bp.route("/<appointment_id>/cancel", methods=["POST"])
@login_required
@limiter.limit(MUTATION_LIMIT)
def cancel(appointment_id: str):
    db = SessionLocal()
    try:
        service = AppointmentService(AppointmentRepository(db))
        appointment = service.cancel(appointment_id)
        return api_response(True, "Appointment cancelled", _serialize(appointment))
    finally:
        db.close()


@appointment_bp.route("/<appointment_id>/complete", methods=["POST"])
@login_required
@staff_required
@limiter.limit(MUTATION_LIMIT)
def complete(appointment_id: str):
    db = SessionLocal()
    try:
        service = AppointmentService(AppointmentRepository(db))
        appointment = service.complete(appointment_id)
        data = _serialize(appointment)
        # Advisory only: the client may offer to open a clinical entry next
        data["next_step"] = {"action": "create_clinical_entry", "pet_id": appointment.pet_id}
        return api_response(True, "Appointment completed", data)
    finally:
        db.close()


@appointment_bp.route("/<appointment_id>/teleconference", methods=["POST"])
@login_required
@staff_required
@limiter.limit(MUTATION_LIMIT)
def teleconference(appointment_id: str):
    db = SessionLocal()
    try:
        service = TeleconferenceService(AppointmentRepository(db))
        url = service.ensure_link(appointment_id)
        return api_response(
            True,
            "Teleconference link ready",
            {"appointment_id": appointment_id, "teleconference_url": url},
        )
    finally:
        db.close()
