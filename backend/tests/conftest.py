"""
Central pytest configuration for the VetCare clinic core tests.

Environment variables are set before any ``vetcare`` import so the lazily
built engine points at the shared in-memory SQLite database.
"""

import os
from datetime import datetime, timezone
from decimal import Decimal

import pytest

# Test database configuration (set early so import-time engines use it)
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["TESTING"] = "true"
os.environ["RATE_LIMIT_ENABLED"] = "0"  # Disable rate limiting in tests
os.environ["TZ"] = "UTC"
os.environ.pop("SENTRY_DSN", None)
os.environ.pop("TELECONFERENCE_BASE_URL", None)

from flask_login import FlaskLoginClient  # noqa: E402

from tests.config.markers import (  # noqa: E402,F401
    pytest_collection_modifyitems,
    pytest_configure,
)
from vetcare.db import base as models  # noqa: E402
from vetcare.db.session import SessionLocal, create_tables, drop_tables  # noqa: E402


# =====================================================
# DATABASE FIXTURES
# =====================================================


@pytest.fixture
def db_session():
    """Fresh schema per test on the shared in-memory database."""
    create_tables()
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        drop_tables()


@pytest.fixture
def clinic(db_session):
    """A vet, a client with one pet, and the pet's clinical record."""
    vet = models.Profile(id="vet-1", full_name="Dra. Ana Torres", email="vet@test.local", role="vet")
    client = models.Profile(
        id="client-1", full_name="Carlos Medina", email="client@test.local", role="client"
    )
    pet = models.Pet(id="pet-1", owner_id="client-1", name="Luna", species="Perro")
    record = models.ClinicalRecord(
        id="rec-1", pet_id="pet-1", created_at=datetime(2030, 1, 1, tzinfo=timezone.utc)
    )
    db_session.add_all([vet, client, pet, record])
    db_session.commit()
    return {"vet": vet, "client": client, "pet": pet, "record": record}


@pytest.fixture
def add_appointment(db_session, clinic):
    """Insert an appointment row for the clinic's pet and return its id."""

    def _add(appointment_id, status="pendiente", type_="presencial", **fields):
        fields.setdefault("scheduled_for", datetime(2030, 5, 1, 10, 0))
        fields.setdefault("created_at", datetime(2030, 4, 1, 9, 0))
        db_session.add(
            models.Appointment(
                id=appointment_id,
                pet_id="pet-1",
                client_id="client-1",
                status=status,
                type=type_,
                reason=fields.pop("reason", "Vacunación"),
                **fields,
            )
        )
        db_session.commit()
        return appointment_id

    return _add


@pytest.fixture
def add_sale(db_session, clinic):
    """Insert a sale with one line per quantity and return its id."""

    def _add(sale_id, quantities=(2, 3), status="paid", created_at=None):
        product = db_session.get(models.Product, "prod-1")
        if product is None:
            product = models.Product(
                id="prod-1", name="Antipulgas", sku="ANT-010", price=Decimal("12.50")
            )
            db_session.add(product)
        items = [
            models.SaleItem(
                sale_id=sale_id,
                product_id="prod-1",
                quantity=quantity,
                unit_price=Decimal("12.50"),
                subtotal=Decimal("12.50") * quantity,
            )
            for quantity in quantities
        ]
        db_session.add(
            models.Sale(
                id=sale_id,
                customer_id="client-1",
                total=sum((item.subtotal for item in items), Decimal("0")),
                payment_status=status,
                created_at=created_at or datetime(2030, 3, 1, 12, 0),
            )
        )
        db_session.flush()
        db_session.add_all(items)
        db_session.commit()
        return sale_id

    return _add


# =====================================================
# APPLICATION FIXTURES
# =====================================================


@pytest.fixture
def app(db_session):
    from vetcare.main import create_app

    flask_app = create_app({"TESTING": True})
    flask_app.test_client_class = FlaskLoginClient
    return flask_app


@pytest.fixture
def vet_client(app, clinic):
    """Test client logged in as the clinic's vet."""
    return app.test_client(user=clinic["vet"])


@pytest.fixture
def owner_client(app, clinic):
    """Test client logged in as the pet owner."""
    return app.test_client(user=clinic["client"])


@pytest.fixture
def anonymous_client(app):
    return app.test_client()
