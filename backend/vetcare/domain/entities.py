"""
Domain entities - Pure business logic, no framework dependencies.

Status and type values mirror what the clinic's store persists, so rows can be
mapped without translation tables. Unrecognized stored values are kept
verbatim on the entity and parse to ``None``.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Dict, List, Mapping, Optional, Tuple

from vetcare.core.exceptions import InvalidStateError, InvalidTransitionError

TO_BE_CONFIRMED_LABEL = "Por confirmar"


def _require_exhaustive(enum_cls, mapping: Mapping, name: str) -> None:
    missing = [member.name for member in enum_cls if member not in mapping]
    if missing:
        raise RuntimeError(f"{name} has no entry for {enum_cls.__name__}: {missing}")


class AppointmentStatus(str, Enum):
    """Closed set of appointment lifecycle states."""

    REQUESTED = "pendiente"
    CONFIRMED = "confirmada"
    COMPLETED = "completada"
    CANCELLED = "cancelada"

    @classmethod
    def parse(cls, raw: Optional[str]) -> Optional["AppointmentStatus"]:
        try:
            return cls(raw)
        except ValueError:
            return None

    @property
    def label(self) -> str:
        return STATUS_LABELS[self]

    @property
    def is_terminal(self) -> bool:
        return not ALLOWED_TRANSITIONS[self]


class AppointmentType(str, Enum):
    IN_PERSON = "presencial"
    REMOTE_CONSULTATION = "teleconsulta"
    HOME_VISIT = "domicilio"

    @classmethod
    def parse(cls, raw: Optional[str]) -> Optional["AppointmentType"]:
        try:
            return cls(raw)
        except ValueError:
            return None


ACTIVE_STATUSES: Tuple[AppointmentStatus, ...] = (
    AppointmentStatus.REQUESTED,
    AppointmentStatus.CONFIRMED,
)

ALLOWED_TRANSITIONS: Dict[AppointmentStatus, Tuple[AppointmentStatus, ...]] = {
    AppointmentStatus.REQUESTED: (
        AppointmentStatus.CONFIRMED,
        AppointmentStatus.CANCELLED,
    ),
    AppointmentStatus.CONFIRMED: (
        AppointmentStatus.COMPLETED,
        AppointmentStatus.CANCELLED,
    ),
    AppointmentStatus.COMPLETED: (),
    AppointmentStatus.CANCELLED: (),
}

STATUS_LABELS: Dict[AppointmentStatus, str] = {
    AppointmentStatus.REQUESTED: "Pendiente",
    AppointmentStatus.CONFIRMED: "Confirmada",
    AppointmentStatus.COMPLETED: "Completada",
    AppointmentStatus.CANCELLED: "Cancelada",
}

# Actions a practitioner may offer for each state; the teleconference action
# is added separately because it also depends on the appointment type.
STATUS_ACTIONS: Dict[AppointmentStatus, Tuple[str, ...]] = {
    AppointmentStatus.REQUESTED: ("accept", "cancel"),
    AppointmentStatus.CONFIRMED: ("complete", "cancel"),
    AppointmentStatus.COMPLETED: (),
    AppointmentStatus.CANCELLED: (),
}

_require_exhaustive(AppointmentStatus, ALLOWED_TRANSITIONS, "ALLOWED_TRANSITIONS")
_require_exhaustive(AppointmentStatus, STATUS_LABELS, "STATUS_LABELS")
_require_exhaustive(AppointmentStatus, STATUS_ACTIONS, "STATUS_ACTIONS")


@dataclass
class Appointment:
    """Domain entity for an appointment request and its lifecycle.

    ``status_value`` and ``type_value`` hold the raw stored strings;
    ``status`` and ``type`` are the parsed enums (``None`` when unrecognized).
    """

    id: str
    pet_id: str
    client_id: str
    status_value: str = AppointmentStatus.REQUESTED.value
    type_value: str = AppointmentType.IN_PERSON.value
    reason: str = ""
    scheduled_for: Optional[datetime] = None
    vet_id: Optional[str] = None
    teleconference_url: Optional[str] = None
    created_at: Optional[datetime] = None
    pet_name: Optional[str] = None
    pet_species: Optional[str] = None
    client_name: Optional[str] = None

    def __post_init__(self):
        if not self.id:
            raise ValueError("Appointment id is required")

    @property
    def status(self) -> Optional[AppointmentStatus]:
        return AppointmentStatus.parse(self.status_value)

    @property
    def type(self) -> Optional[AppointmentType]:
        return AppointmentType.parse(self.type_value)

    @property
    def display_status(self) -> AppointmentStatus:
        """Status used for rendering; unrecognized values show as requested."""
        return self.status or AppointmentStatus.REQUESTED

    @property
    def is_remote_consultation(self) -> bool:
        return self.type is AppointmentType.REMOTE_CONSULTATION

    @property
    def is_scheduled(self) -> bool:
        return self.scheduled_for is not None

    @property
    def schedule_label(self) -> Optional[str]:
        return None if self.is_scheduled else TO_BE_CONFIRMED_LABEL

    @property
    def available_actions(self) -> Tuple[str, ...]:
        if self.status is None:
            return ()
        actions = STATUS_ACTIONS[self.status]
        if self.status is AppointmentStatus.CONFIRMED and self.is_remote_consultation:
            actions = actions + ("teleconference",)
        return actions

    def check_transition(self, target: AppointmentStatus) -> AppointmentStatus:
        """Return the current status if ``target`` is reachable from it.

        Raises:
            InvalidStateError: stored status is not a known lifecycle state
            InvalidTransitionError: ``target`` is not reachable from the current state
        """
        current = self.status
        if current is None:
            raise InvalidStateError(
                f"Appointment '{self.id}' has unrecognized status "
                f"'{self.status_value}'; correct it before changing its state",
                {"id": self.id, "status": self.status_value},
            )
        if target not in ALLOWED_TRANSITIONS[current]:
            raise InvalidTransitionError(self.id, current.value, target.value)
        return current


# (precision, scale) of the stored measurements: weight in kg, temperature in °C
MEASUREMENT_PRECISION: Dict[str, Tuple[int, int]] = {
    "weight": (7, 2),
    "temperature": (5, 2),
}


@dataclass(frozen=True)
class ClinicalEntry:
    """One immutable visit record appended to a clinical record."""

    record_id: str
    vet_id: Optional[str]
    reason: str
    visit_date: datetime
    diagnosis: Optional[str] = None
    treatment: Optional[str] = None
    prescriptions: Optional[str] = None
    weight: Optional[Decimal] = None
    temperature: Optional[Decimal] = None
    next_appointment: Optional[date] = None
    id: Optional[int] = None

    def __post_init__(self):
        if not self.reason or not self.reason.strip():
            raise ValueError("Visit reason is required")


@dataclass
class ClinicalRecord:
    """Durable per-pet container for clinical history."""

    id: str
    pet_id: str
    created_at: Optional[datetime] = None
    pet_name: Optional[str] = None
    pet_species: Optional[str] = None
    owner_name: Optional[str] = None
    entries: List[ClinicalEntry] = field(default_factory=list)


class PurchaseStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    CANCELLED = "cancelled"

    @classmethod
    def parse(cls, raw: Optional[str]) -> Optional["PurchaseStatus"]:
        try:
            return cls(raw)
        except ValueError:
            return None


PURCHASE_STATUS_LABELS: Dict[PurchaseStatus, str] = {
    PurchaseStatus.PENDING: "Pendiente",
    PurchaseStatus.PAID: "Pagado",
    PurchaseStatus.CANCELLED: "Cancelado",
}

_require_exhaustive(PurchaseStatus, PURCHASE_STATUS_LABELS, "PURCHASE_STATUS_LABELS")


@dataclass(frozen=True)
class PurchaseItem:
    product_id: Optional[str]
    quantity: int
    unit_price: Decimal
    subtotal: Decimal
    product_name: Optional[str] = None
    product_sku: Optional[str] = None


@dataclass
class Purchase:
    """Read-only projection of a completed sale."""

    id: str
    customer_id: str
    total: Decimal
    status_value: str
    created_at: Optional[datetime] = None
    items: List[PurchaseItem] = field(default_factory=list)

    @property
    def status(self) -> PurchaseStatus:
        return PurchaseStatus.parse(self.status_value) or PurchaseStatus.PENDING

    @property
    def status_label(self) -> str:
        return PURCHASE_STATUS_LABELS[self.status]

    @property
    def item_count(self) -> int:
        return len(self.items)

    @property
    def unit_count(self) -> int:
        return sum(item.quantity for item in self.items)
