"""
Database seeding for local development.

``seed_demo_data`` is idempotent: rows are keyed by fixed ids and only
inserted when missing, so it can run on every ``flask seed-demo``.
"""

import logging
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from sqlalchemy.exc import SQLAlchemyError

from vetcare.db.base import (
    Appointment,
    ClinicalRecord,
    Pet,
    Product,
    Profile,
    Sale,
    SaleItem,
)
from vetcare.db.session import SessionLocal

logger = logging.getLogger(__name__)

DEMO_VET_ID = "00000000-0000-4000-8000-000000000001"
DEMO_CLIENT_ID = "00000000-0000-4000-8000-000000000002"
DEMO_PET_ID = "00000000-0000-4000-8000-000000000010"
DEMO_RECORD_ID = "00000000-0000-4000-8000-000000000020"
DEMO_SALE_ID = "00000000-0000-4000-8000-000000000030"


def _demo_rows(now: datetime) -> list:
    return [
        Profile(id=DEMO_VET_ID, full_name="Dra. Ana Torres", email="vet@vetcare.local", role="vet"),
        Profile(
            id=DEMO_CLIENT_ID,
            full_name="Carlos Medina",
            email="client@vetcare.local",
            role="client",
        ),
        Pet(id=DEMO_PET_ID, owner_id=DEMO_CLIENT_ID, name="Luna", species="Perro"),
        Appointment(
            id="00000000-0000-4000-8000-000000000101",
            pet_id=DEMO_PET_ID,
            client_id=DEMO_CLIENT_ID,
            scheduled_for=now + timedelta(days=1),
            status="pendiente",
            type="presencial",
            reason="Vacunación anual",
        ),
        Appointment(
            id="00000000-0000-4000-8000-000000000102",
            pet_id=DEMO_PET_ID,
            client_id=DEMO_CLIENT_ID,
            vet_id=DEMO_VET_ID,
            scheduled_for=now + timedelta(days=2),
            status="confirmada",
            type="teleconsulta",
            reason="Control post-operatorio",
        ),
        Appointment(
            id="00000000-0000-4000-8000-000000000103",
            pet_id=DEMO_PET_ID,
            client_id=DEMO_CLIENT_ID,
            scheduled_for=None,
            status="pendiente",
            type="domicilio",
            reason="Revisión de piel",
        ),
        ClinicalRecord(id=DEMO_RECORD_ID, pet_id=DEMO_PET_ID),
        Product(
            id="00000000-0000-4000-8000-000000000201",
            name="Alimento premium 3kg",
            sku="ALI-003",
            price=Decimal("25.00"),
        ),
        Product(
            id="00000000-0000-4000-8000-000000000202",
            name="Antipulgas",
            sku="ANT-010",
            price=Decimal("12.50"),
        ),
        Sale(
            id=DEMO_SALE_ID,
            customer_id=DEMO_CLIENT_ID,
            total=Decimal("87.50"),
            payment_status="paid",
        ),
    ]


def _demo_items() -> list:
    return [
        SaleItem(
            sale_id=DEMO_SALE_ID,
            product_id="00000000-0000-4000-8000-000000000201",
            quantity=2,
            unit_price=Decimal("25.00"),
            subtotal=Decimal("50.00"),
        ),
        SaleItem(
            sale_id=DEMO_SALE_ID,
            product_id="00000000-0000-4000-8000-000000000202",
            quantity=3,
            unit_price=Decimal("12.50"),
            subtotal=Decimal("37.50"),
        ),
    ]


def seed_demo_data() -> int:
    """Insert the demo clinic rows that are missing. Returns rows inserted."""
    now = datetime.now(timezone.utc).replace(minute=0, second=0, microsecond=0)
    inserted = 0
    try:
        with SessionLocal() as db:
            for row in _demo_rows(now):
                if db.get(type(row), row.id) is None:
                    db.add(row)
                    inserted += 1
            db.flush()
            has_items = (
                db.query(SaleItem).filter(SaleItem.sale_id == DEMO_SALE_ID).first()
                is not None
            )
            if not has_items:
                items = _demo_items()
                db.add_all(items)
                inserted += len(items)
            db.commit()
    except SQLAlchemyError as e:
        logger.error(
            "Failed to seed demo data",
            extra={"context": {"error": str(e)}},
            exc_info=True,
        )
        raise

    logger.info("Demo data seeded", extra={"context": {"inserted": inserted}})
    return inserted
