"""
Repository test factories following Interface Segregation Principle.

This module provides mock factories for repository interfaces, ensuring
tests only depend on the specific interfaces they need.
"""

from unittest.mock import Mock

from vetcare.domain.interfaces import (
    IAppointmentReader,
    IAppointmentRepository,
    IClinicalRecordRepository,
    IPurchaseReader,
)


class AppointmentRepositoryFactory:
    """Factory for creating Appointment repository mocks."""

    @staticmethod
    def create_mock_reader() -> Mock:
        """Create mock that only implements IAppointmentReader operations."""
        mock_reader = Mock(spec=IAppointmentReader)
        mock_reader.get_by_id.return_value = None
        mock_reader.list_by_status.return_value = []
        return mock_reader

    @staticmethod
    def create_mock_full() -> Mock:
        """Create full appointment repository mock."""
        mock_repo = Mock(spec=IAppointmentRepository)

        # Set up default return values for read operations
        mock_repo.get_by_id.return_value = None
        mock_repo.list_by_status.return_value = []

        # Guarded writes report "condition no longer holds" unless told otherwise
        mock_repo.transition.return_value = False
        mock_repo.set_teleconference_url.return_value = False

        return mock_repo


class ClinicalRecordRepositoryFactory:
    @staticmethod
    def create_mock_full() -> Mock:
        mock_repo = Mock(spec=IClinicalRecordRepository)
        mock_repo.get_record.return_value = None
        mock_repo.list_records.return_value = []
        mock_repo.list_entries.return_value = []
        # Echo the entry back with an id, like the store would
        mock_repo.add_entry.side_effect = lambda entry: entry
        return mock_repo


class PurchaseRepositoryFactory:
    @staticmethod
    def create_mock_reader() -> Mock:
        mock_reader = Mock(spec=IPurchaseReader)
        mock_reader.get_by_id.return_value = None
        mock_reader.list_by_customer.return_value = []
        return mock_reader
