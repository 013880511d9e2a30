"""
Unit tests for AppointmentService lifecycle operations.

This module tests:
- accept/cancel/complete against the transition table
- not-found and missing-practitioner handling
- lost races detected by the guarded write
- invalidation events after successful mutations
"""

from unittest.mock import Mock

import pytest

from tests.factories.entity_factories import make_appointment
from tests.factories.repository_factories import AppointmentRepositoryFactory
from vetcare.core.events import APPOINTMENTS_COLLECTION, collection_invalidated
from vetcare.core.exceptions import (
    InvalidStateError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)
from vetcare.domain.entities import AppointmentStatus
from vetcare.services.appointment_service import AppointmentService


class InMemoryAppointmentStore:
    """Tiny stand-in that honours the guarded-write contract."""

    def __init__(self, *appointments):
        self.rows = {a.id: a for a in appointments}

    def get_by_id(self, appointment_id):
        row = self.rows.get(appointment_id)
        if row is None:
            return None
        return make_appointment(
            appointment_id=row.id,
            status=row.status_value,
            type_=row.type_value,
            vet_id=row.vet_id,
            teleconference_url=row.teleconference_url,
        )

    def transition(self, appointment_id, expected_status, new_status, vet_id=None):
        row = self.rows.get(appointment_id)
        if row is None or row.status_value != expected_status:
            return False
        row.status_value = new_status.value
        if vet_id is not None:
            row.vet_id = vet_id
        return True


@pytest.fixture
def mock_appointment_repo() -> Mock:
    """Create a mock appointment repository."""
    return AppointmentRepositoryFactory.create_mock_full()


@pytest.fixture
def service(mock_appointment_repo) -> AppointmentService:
    return AppointmentService(mock_appointment_repo)


@pytest.fixture
def events():
    received = []

    def _listener(sender, **payload):
        received.append(payload)

    collection_invalidated.connect(_listener)
    yield received
    collection_invalidated.disconnect(_listener)


@pytest.mark.unit
@pytest.mark.services
@pytest.mark.appointment
class TestAccept:
    def test_accept_requested_sets_confirmed_and_practitioner(
        self, service, mock_appointment_repo, events
    ):
        requested = make_appointment(status=AppointmentStatus.REQUESTED)
        confirmed = make_appointment(status=AppointmentStatus.CONFIRMED, vet_id="vet-9")
        mock_appointment_repo.get_by_id.side_effect = [requested, confirmed]
        mock_appointment_repo.transition.return_value = True

        result = service.accept("apt-1", "vet-9")

        assert result.status is AppointmentStatus.CONFIRMED
        assert result.vet_id == "vet-9"
        mock_appointment_repo.transition.assert_called_once_with(
            "apt-1", "pendiente", AppointmentStatus.CONFIRMED, vet_id="vet-9"
        )
        assert events == [
            {"collection": APPOINTMENTS_COLLECTION, "entity_id": "apt-1", "operation": "accept"}
        ]

    @pytest.mark.parametrize(
        "status",
        [
            AppointmentStatus.CONFIRMED,
            AppointmentStatus.COMPLETED,
            AppointmentStatus.CANCELLED,
        ],
    )
    def test_accept_non_requested_fails_without_write(
        self, service, mock_appointment_repo, events, status
    ):
        mock_appointment_repo.get_by_id.return_value = make_appointment(status=status)

        with pytest.raises(InvalidTransitionError):
            service.accept("apt-1", "vet-9")

        mock_appointment_repo.transition.assert_not_called()
        assert events == []

    def test_accept_unknown_id(self, service, mock_appointment_repo):
        with pytest.raises(NotFoundError):
            service.accept("missing", "vet-9")

    def test_accept_requires_practitioner(self, service, mock_appointment_repo):
        with pytest.raises(ValidationError) as exc_info:
            service.accept("apt-1", None)

        assert exc_info.value.field == "practitioner_id"
        mock_appointment_repo.get_by_id.assert_not_called()

    def test_accept_lost_race_reports_fresh_status(self, service, mock_appointment_repo, events):
        requested = make_appointment(status=AppointmentStatus.REQUESTED)
        cancelled_meanwhile = make_appointment(status=AppointmentStatus.CANCELLED)
        mock_appointment_repo.get_by_id.side_effect = [requested, cancelled_meanwhile]
        mock_appointment_repo.transition.return_value = False

        with pytest.raises(InvalidTransitionError) as exc_info:
            service.accept("apt-1", "vet-9")

        assert exc_info.value.current == "cancelada"
        assert events == []

    def test_accept_row_vanished_during_write(self, service, mock_appointment_repo):
        mock_appointment_repo.get_by_id.side_effect = [make_appointment(), None]
        mock_appointment_repo.transition.return_value = False

        with pytest.raises(NotFoundError):
            service.accept("apt-1", "vet-9")

    def test_accept_unrecognized_status(self, service, mock_appointment_repo):
        mock_appointment_repo.get_by_id.return_value = make_appointment(status="reprogramada")

        with pytest.raises(InvalidStateError):
            service.accept("apt-1", "vet-9")

        mock_appointment_repo.transition.assert_not_called()


@pytest.mark.unit
@pytest.mark.services
@pytest.mark.appointment
class TestCancelAndComplete:
    @pytest.mark.parametrize(
        "status", [AppointmentStatus.REQUESTED, AppointmentStatus.CONFIRMED]
    )
    def test_cancel_from_active_states(self, service, mock_appointment_repo, status):
        mock_appointment_repo.get_by_id.side_effect = [
            make_appointment(status=status),
            make_appointment(status=AppointmentStatus.CANCELLED),
        ]
        mock_appointment_repo.transition.return_value = True

        result = service.cancel("apt-1")

        assert result.status is AppointmentStatus.CANCELLED
        mock_appointment_repo.transition.assert_called_once_with(
            "apt-1", status.value, AppointmentStatus.CANCELLED, vet_id=None
        )

    def test_complete_requires_confirmed(self, service, mock_appointment_repo):
        mock_appointment_repo.get_by_id.return_value = make_appointment(
            status=AppointmentStatus.REQUESTED
        )

        with pytest.raises(InvalidTransitionError):
            service.complete("apt-1")

    def test_complete_confirmed(self, service, mock_appointment_repo, events):
        mock_appointment_repo.get_by_id.side_effect = [
            make_appointment(status=AppointmentStatus.CONFIRMED),
            make_appointment(status=AppointmentStatus.COMPLETED),
        ]
        mock_appointment_repo.transition.return_value = True

        result = service.complete("apt-1")

        assert result.status is AppointmentStatus.COMPLETED
        assert events[0]["operation"] == "complete"


@pytest.mark.unit
@pytest.mark.services
@pytest.mark.appointment
class TestLifecycleScenarios:
    def test_cancel_twice_fails_second_time(self):
        store = InMemoryAppointmentStore(make_appointment(status=AppointmentStatus.REQUESTED))
        service = AppointmentService(store)

        service.cancel("apt-1")
        with pytest.raises(InvalidTransitionError):
            service.cancel("apt-1")

        assert store.rows["apt-1"].status_value == "cancelada"

    def test_accept_complete_then_cancel_keeps_completed(self):
        store = InMemoryAppointmentStore(make_appointment(status=AppointmentStatus.REQUESTED))
        service = AppointmentService(store)

        service.accept("apt-1", "vet-1")
        service.complete("apt-1")
        with pytest.raises(InvalidTransitionError):
            service.cancel("apt-1")

        row = store.rows["apt-1"]
        assert row.status_value == "completada"
        assert row.vet_id == "vet-1"

    def test_only_one_of_two_concurrent_accepts_wins(self):
        store = InMemoryAppointmentStore(make_appointment(status=AppointmentStatus.REQUESTED))
        first = AppointmentService(store)
        second = AppointmentService(store)

        # Both observe "requested" before either writes
        stale = store.get_by_id("apt-1")
        first.accept("apt-1", "vet-1")
        assert store.transition("apt-1", stale.status_value, AppointmentStatus.CONFIRMED, "vet-2") is False
        with pytest.raises(InvalidTransitionError):
            second.accept("apt-1", "vet-2")

        assert store.rows["apt-1"].vet_id == "vet-1"
