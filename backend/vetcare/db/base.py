from __future__ import annotations

import uuid
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import (
    Date,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.types import TypeDecorator

from vetcare.domain.entities import MEASUREMENT_PRECISION

from .session import Base


def _new_id() -> str:
    return str(uuid.uuid4())


class UTCDateTime(TypeDecorator):
    """Timestamp stored as UTC on every backend.

    Aware values are converted to UTC before binding; naive values are taken
    as UTC already. Loaded values always come back aware (UTC), also on SQLite
    where the driver drops the offset.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


# Explicitly implement the Flask-Login interface without inheriting UserMixin
class Profile(Base):
    """Clinic user: pet owner, veterinarian or admin."""

    __tablename__ = "profiles"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    full_name: Mapped[str] = mapped_column(String(150), nullable=False)
    email: Mapped[Optional[str]] = mapped_column(String(150), unique=True, nullable=True)
    role: Mapped[str] = mapped_column(
        String(20), nullable=False, default="client"
    )  # 'client', 'vet', 'admin'
    created_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    pets: Mapped[List["Pet"]] = relationship(back_populates="owner")

    def get_id(self):
        """Return user identifier for Flask-Login"""
        return str(self.id)

    @property
    def is_active(self) -> bool:
        return True

    @property
    def is_authenticated(self):
        return True

    @property
    def is_anonymous(self):
        return False


class Pet(Base):
    __tablename__ = "pets"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    owner_id: Mapped[str] = mapped_column(ForeignKey("profiles.id"), nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    species: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    created_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    owner: Mapped[Profile] = relationship(back_populates="pets")


class Appointment(Base):
    __tablename__ = "appointments"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    pet_id: Mapped[str] = mapped_column(ForeignKey("pets.id"), nullable=False, index=True)
    client_id: Mapped[str] = mapped_column(ForeignKey("profiles.id"), nullable=False)
    vet_id: Mapped[Optional[str]] = mapped_column(
        ForeignKey("profiles.id"), nullable=True
    )  # Set when a vet accepts the request
    scheduled_for: Mapped[Optional[datetime]] = mapped_column(
        UTCDateTime(), nullable=True, index=True
    )  # NULL means "to be confirmed"
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="pendiente", index=True
    )
    type: Mapped[str] = mapped_column(String(20), nullable=False, default="presencial")
    reason: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    teleconference_url: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    created_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    pet: Mapped[Pet] = relationship()
    client: Mapped[Profile] = relationship(foreign_keys=[client_id])


class ClinicalRecord(Base):
    __tablename__ = "clinical_records"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    pet_id: Mapped[str] = mapped_column(ForeignKey("pets.id"), nullable=False, unique=True)
    created_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    pet: Mapped[Pet] = relationship()
    entries: Mapped[List["ClinicalEntry"]] = relationship(
        order_by="ClinicalEntry.id", viewonly=True
    )


class ClinicalEntry(Base):
    """Append-only: rows are inserted and never updated or deleted."""

    __tablename__ = "clinical_entries"

    # Autoincrement id doubles as the canonical insertion order
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    record_id: Mapped[str] = mapped_column(
        ForeignKey("clinical_records.id"), nullable=False, index=True
    )
    vet_id: Mapped[Optional[str]] = mapped_column(ForeignKey("profiles.id"), nullable=True)
    reason: Mapped[str] = mapped_column(Text, nullable=False)
    diagnosis: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    treatment: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    prescriptions: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    weight: Mapped[Optional[Decimal]] = mapped_column(
        Numeric(*MEASUREMENT_PRECISION["weight"]), nullable=True
    )  # kg
    temperature: Mapped[Optional[Decimal]] = mapped_column(
        Numeric(*MEASUREMENT_PRECISION["temperature"]), nullable=True
    )  # °C
    next_appointment: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    visit_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)


class Product(Base):
    __tablename__ = "products"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    name: Mapped[str] = mapped_column(String(150), nullable=False)
    sku: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=0)


class Sale(Base):
    __tablename__ = "sales"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    customer_id: Mapped[str] = mapped_column(
        ForeignKey("profiles.id"), nullable=False, index=True
    )
    total: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=0)
    payment_status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="pending"
    )  # 'pending', 'paid', 'cancelled'
    created_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    items: Mapped[List["SaleItem"]] = relationship(
        back_populates="sale", order_by="SaleItem.id"
    )


class SaleItem(Base):
    __tablename__ = "sale_items"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    sale_id: Mapped[str] = mapped_column(ForeignKey("sales.id"), nullable=False, index=True)
    product_id: Mapped[Optional[str]] = mapped_column(
        ForeignKey("products.id"), nullable=True
    )
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    unit_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    subtotal: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)

    sale: Mapped[Sale] = relationship(back_populates="items")
    product: Mapped[Optional[Product]] = relationship()
