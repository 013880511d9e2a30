"""
Data Transfer Objects (DTOs) and validation schemas.

``ClinicalEntryDraft`` replaces a loosely typed form bag: build it from the
submitted fields, call ``validate()`` (which stops at the first invalid field)
and hand the resulting ``ClinicalEntryFields`` to the clinical log.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, List, Mapping, Optional

from vetcare.core.exceptions import ValidationError, VetCareError
from vetcare.domain.entities import MEASUREMENT_PRECISION

_NUMERIC_LABELS = {"weight": "Weight", "temperature": "Temperature"}


def _clean_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def parse_optional_decimal(field_name: str, value: Any) -> Optional[Decimal]:
    """Parse an optional numeric form field.

    Blank input means "not provided". Anything else must be a finite number
    that the store can hold exactly; it is rejected rather than coerced.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValidationError(field_name, f"{_label(field_name)} must be a number")
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        number = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationError(
            field_name, f"{_label(field_name)} must be a number, got '{value}'"
        )
    if not number.is_finite():
        raise ValidationError(
            field_name, f"{_label(field_name)} must be a finite number, got '{value}'"
        )
    if field_name in MEASUREMENT_PRECISION:
        _check_precision(field_name, number, value)
    return number


def _check_precision(field_name: str, number: Decimal, raw: Any) -> None:
    precision, scale = MEASUREMENT_PRECISION[field_name]
    limit = Decimal(10) ** (precision - scale)
    if abs(number) >= limit:
        raise ValidationError(
            field_name, f"{_label(field_name)} must be less than {limit}, got '{raw}'"
        )
    if number != number.quantize(Decimal(1).scaleb(-scale)):
        raise ValidationError(
            field_name,
            f"{_label(field_name)} allows at most {scale} decimal places, got '{raw}'",
        )


def parse_optional_date(field_name: str, value: Any) -> Optional[date]:
    if value is None or isinstance(value, date) and not isinstance(value, datetime):
        return value
    if isinstance(value, datetime):
        return value.date()
    text = str(value).strip()
    if not text:
        return None
    try:
        return date.fromisoformat(text)
    except ValueError:
        raise ValidationError(
            field_name, f"Next appointment must be a date (YYYY-MM-DD), got '{text}'"
        )


def _label(field_name: str) -> str:
    return _NUMERIC_LABELS.get(field_name, field_name)


@dataclass(frozen=True)
class ClinicalEntryFields:
    """Validated, typed clinical entry input."""

    reason: str
    diagnosis: Optional[str] = None
    treatment: Optional[str] = None
    prescriptions: Optional[str] = None
    weight: Optional[Decimal] = None
    temperature: Optional[Decimal] = None
    next_appointment: Optional[date] = None


@dataclass
class ClinicalEntryDraft:
    """Mutable form state for a new clinical entry."""

    reason: Any = ""
    diagnosis: Any = ""
    treatment: Any = ""
    prescriptions: Any = ""
    weight: Any = ""
    temperature: Any = ""
    next_appointment: Any = ""

    FIELDS = (
        "reason",
        "diagnosis",
        "treatment",
        "prescriptions",
        "weight",
        "temperature",
        "next_appointment",
    )

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]]) -> "ClinicalEntryDraft":
        """Build a draft from submitted form/JSON data, ignoring unknown keys.

        Raises:
            ValidationError: if the payload is not a key/value object
        """
        if data is None:
            data = {}
        if not isinstance(data, Mapping):
            raise ValidationError(
                "body", f"Request body must be an object, got {type(data).__name__}"
            )
        return cls(**{name: data.get(name, "") for name in cls.FIELDS})

    def validate(self) -> ClinicalEntryFields:
        """Validate in form order and return typed fields.

        Raises:
            ValidationError: naming the first invalid field
        """
        reason = _clean_text(self.reason)
        if not reason:
            raise ValidationError("reason", "Visit reason is required")

        weight = parse_optional_decimal("weight", self.weight)
        temperature = parse_optional_decimal("temperature", self.temperature)
        next_appointment = parse_optional_date("next_appointment", self.next_appointment)

        return ClinicalEntryFields(
            reason=reason,
            diagnosis=_clean_text(self.diagnosis),
            treatment=_clean_text(self.treatment),
            prescriptions=_clean_text(self.prescriptions),
            weight=weight,
            temperature=temperature,
            next_appointment=next_appointment,
        )


def _iso(value) -> Optional[str]:
    return value.isoformat() if value is not None else None


def _number(value: Optional[Decimal]) -> Optional[float]:
    return float(value) if value is not None else None


@dataclass
class AppointmentResponse:
    """DTO for appointment API responses."""

    id: str
    pet_id: str
    pet_name: Optional[str]
    pet_species: Optional[str]
    client_id: str
    client_name: Optional[str]
    scheduled_for: Optional[datetime]
    schedule_label: Optional[str]
    type: str
    reason: str
    status: str
    status_label: str
    vet_id: Optional[str]
    teleconference_url: Optional[str]
    actions: List[str]

    @classmethod
    def from_domain(cls, appointment) -> "AppointmentResponse":
        """Create response from domain entity."""
        display = appointment.display_status
        return cls(
            id=appointment.id,
            pet_id=appointment.pet_id,
            pet_name=appointment.pet_name,
            pet_species=appointment.pet_species,
            client_id=appointment.client_id,
            client_name=appointment.client_name,
            scheduled_for=appointment.scheduled_for,
            schedule_label=appointment.schedule_label,
            type=appointment.type_value,
            reason=appointment.reason,
            status=display.value,
            status_label=display.label,
            vet_id=appointment.vet_id,
            teleconference_url=appointment.teleconference_url,
            actions=list(appointment.available_actions),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "pet": {"id": self.pet_id, "name": self.pet_name, "species": self.pet_species},
            "client": {"id": self.client_id, "full_name": self.client_name},
            "scheduled_for": _iso(self.scheduled_for),
            "schedule_label": self.schedule_label,
            "type": self.type,
            "reason": self.reason,
            "status": self.status,
            "status_label": self.status_label,
            "vet_id": self.vet_id,
            "teleconference_url": self.teleconference_url,
            "actions": self.actions,
        }


@dataclass
class ClinicalEntryResponse:
    id: Optional[int]
    record_id: str
    vet_id: Optional[str]
    visit_date: datetime
    reason: str
    diagnosis: Optional[str]
    treatment: Optional[str]
    prescriptions: Optional[str]
    weight: Optional[Decimal]
    temperature: Optional[Decimal]
    next_appointment: Optional[date]

    @classmethod
    def from_domain(cls, entry) -> "ClinicalEntryResponse":
        return cls(
            id=entry.id,
            record_id=entry.record_id,
            vet_id=entry.vet_id,
            visit_date=entry.visit_date,
            reason=entry.reason,
            diagnosis=entry.diagnosis,
            treatment=entry.treatment,
            prescriptions=entry.prescriptions,
            weight=entry.weight,
            temperature=entry.temperature,
            next_appointment=entry.next_appointment,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "record_id": self.record_id,
            "vet_id": self.vet_id,
            "visit_date": _iso(self.visit_date),
            "reason": self.reason,
            "diagnosis": self.diagnosis,
            "treatment": self.treatment,
            "prescriptions": self.prescriptions,
            "weight": _number(self.weight),
            "temperature": _number(self.temperature),
            "next_appointment": _iso(self.next_appointment),
        }


@dataclass
class ClinicalRecordResponse:
    id: str
    pet_id: str
    pet_name: Optional[str]
    pet_species: Optional[str]
    owner_name: Optional[str]
    created_at: Optional[datetime]
    entries: List[ClinicalEntryResponse] = field(default_factory=list)

    @classmethod
    def from_domain(cls, record) -> "ClinicalRecordResponse":
        return cls(
            id=record.id,
            pet_id=record.pet_id,
            pet_name=record.pet_name,
            pet_species=record.pet_species,
            owner_name=record.owner_name,
            created_at=record.created_at,
            entries=[ClinicalEntryResponse.from_domain(e) for e in record.entries],
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "pet": {
                "id": self.pet_id,
                "name": self.pet_name,
                "species": self.pet_species,
                "owner_name": self.owner_name,
            },
            "created_at": _iso(self.created_at),
            "entries": [entry.to_dict() for entry in self.entries],
        }


@dataclass
class PurchaseResponse:
    """DTO for purchase history rows, aggregates included."""

    id: str
    created_at: Optional[datetime]
    total: Decimal
    status: str
    status_label: str
    item_count: int
    unit_count: int
    items: List[dict]

    @classmethod
    def from_domain(cls, purchase) -> "PurchaseResponse":
        return cls(
            id=purchase.id,
            created_at=purchase.created_at,
            total=purchase.total,
            status=purchase.status.value,
            status_label=purchase.status_label,
            item_count=purchase.item_count,
            unit_count=purchase.unit_count,
            items=[
                {
                    "product_id": item.product_id,
                    "product_name": item.product_name,
                    "product_sku": item.product_sku,
                    "quantity": item.quantity,
                    "unit_price": float(item.unit_price),
                    "subtotal": float(item.subtotal),
                }
                for item in purchase.items
            ],
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "created_at": _iso(self.created_at),
            "total": float(self.total),
            "status": self.status,
            "status_label": self.status_label,
            "item_count": self.item_count,
            "unit_count": self.unit_count,
            "items": self.items,
        }


@dataclass
class ErrorResponse:
    """DTO for error responses."""

    error: str
    message: str
    details: Optional[dict] = None

    @classmethod
    def from_exception(cls, exc: VetCareError) -> "ErrorResponse":
        return cls(error=exc.code, message=exc.message, details=exc.details or None)

    @classmethod
    def server_error(cls, message: str = "Internal server error") -> "ErrorResponse":
        """Create server error response."""
        return cls(error="server_error", message=message)

    def to_dict(self) -> dict:
        body = {"success": False, "error": self.error, "message": self.message}
        if self.details:
            body["details"] = self.details
        return body
