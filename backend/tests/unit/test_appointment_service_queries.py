"""Unit tests for AppointmentService.list_active."""

from datetime import date, datetime, timezone

import pytest

from tests.factories.entity_factories import make_appointment
from tests.factories.repository_factories import AppointmentRepositoryFactory
from vetcare.domain.entities import ACTIVE_STATUSES
from vetcare.services.appointment_service import AppointmentService


@pytest.fixture
def mock_appointment_repo():
    return AppointmentRepositoryFactory.create_mock_reader()


@pytest.mark.unit
@pytest.mark.services
@pytest.mark.appointment
class TestListActive:
    def test_queries_active_statuses_including_unrecognized(self, mock_appointment_repo):
        rows = [make_appointment("a"), make_appointment("b", scheduled_for=None)]
        mock_appointment_repo.list_by_status.return_value = rows

        result = AppointmentService(mock_appointment_repo).list_active()

        assert result == rows
        mock_appointment_repo.list_by_status.assert_called_once_with(
            ACTIVE_STATUSES, since=None, include_unrecognized=True
        )

    def test_date_filter_becomes_midnight_in_app_timezone(self, mock_appointment_repo, monkeypatch):
        monkeypatch.setenv("TZ", "UTC")

        AppointmentService(mock_appointment_repo).list_active(since=date(2030, 5, 1))

        since = mock_appointment_repo.list_by_status.call_args.kwargs["since"]
        assert since == datetime(2030, 5, 1, tzinfo=timezone.utc)

    def test_datetime_filter_passed_through(self, mock_appointment_repo):
        moment = datetime(2030, 5, 1, 15, 30, tzinfo=timezone.utc)

        AppointmentService(mock_appointment_repo).list_active(since=moment)

        assert mock_appointment_repo.list_by_status.call_args.kwargs["since"] is moment

    def test_date_filter_is_converted_to_utc(self, mock_appointment_repo, monkeypatch):
        monkeypatch.setenv("TZ", "America/Mexico_City")

        AppointmentService(mock_appointment_repo).list_active(since=date(2030, 5, 2))

        since = mock_appointment_repo.list_by_status.call_args.kwargs["since"]
        assert since == datetime(2030, 5, 2, 6, 0, tzinfo=timezone.utc)
        assert since.utcoffset().total_seconds() == 0
