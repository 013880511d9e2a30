"""Purchase history controller for the signed-in customer."""

from flask import Blueprint
from flask_login import login_required

from vetcare.core.api_utils import api_response
from vetcare.core.auth import current_user_id
from vetcare.core.limiter_config import READ_LIMIT, limiter
from vetcare.db.session import SessionLocal
from vetcare.repositories.purchase_repo import PurchaseRepository
from vetcare.schemas.dtos import PurchaseResponse
from vetcare.services.purchase_service import PurchaseService

purchase_bp = Blueprint("purchases", __name__, url_prefix="/api/purchases")


@purchase_bp.route("", methods=["GET"])
@login_required
@limiter.limit(READ_LIMIT)
def list_purchases():
    db = SessionLocal()
    try:
        service = PurchaseService(PurchaseRepository(db))
        purchases = service.list_purchases(current_user_id())
        return api_response(
            True,
            f"{len(purchases)} purchase(s)",
            [PurchaseResponse.from_domain(p).to_dict() for p in purchases],
        )
    finally:
        db.close()


@purchase_bp.route("/<purchase_id>/invoice", methods=["GET"])
@login_required
@limiter.limit(READ_LIMIT)
def invoice(purchase_id: str):
    db = SessionLocal()
    try:
        PurchaseService(PurchaseRepository(db)).generate_invoice(
            purchase_id, current_user_id()
        )
    finally:
        db.close()
