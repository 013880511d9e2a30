"""
Integration tests for the appointment endpoints.

Requests go through the Flask test client with a logged-in practitioner;
the database is the shared in-memory SQLite schema from conftest.
"""

from datetime import datetime

import pytest

from vetcare.db.base import Appointment as DbAppointment
from vetcare.db.base import Profile


@pytest.mark.integration
@pytest.mark.controllers
@pytest.mark.appointment
class TestAppointmentEndpoints:
    def test_requires_login(self, anonymous_client):
        response = anonymous_client.get("/api/appointments")

        assert response.status_code == 401
        assert response.get_json()["error"] == "unauthorized"

    def test_list_active(self, vet_client, add_appointment):
        add_appointment("a1", scheduled_for=datetime(2030, 5, 2, 9, 0))
        add_appointment("a2", scheduled_for=None)
        add_appointment("done", status="completada")

        response = vet_client.get("/api/appointments")

        assert response.status_code == 200
        data = response.get_json()["data"]
        assert [a["id"] for a in data] == ["a1", "a2"]
        assert data[0]["pet"]["name"] == "Luna"
        assert data[0]["client"]["full_name"] == "Carlos Medina"
        assert data[0]["actions"] == ["accept", "cancel"]
        assert data[1]["schedule_label"] == "Por confirmar"

    def test_list_active_since(self, vet_client, add_appointment):
        add_appointment("before", scheduled_for=datetime(2030, 4, 1, 9, 0))
        add_appointment("after", scheduled_for=datetime(2030, 6, 1, 9, 0))

        response = vet_client.get("/api/appointments?since=2030-05-01")

        assert [a["id"] for a in response.get_json()["data"]] == ["after"]

    def test_list_active_bad_since(self, vet_client, clinic):
        response = vet_client.get("/api/appointments?since=yesterday")

        assert response.status_code == 400
        body = response.get_json()
        assert body["success"] is False
        assert body["details"] == {"field": "since"}

    def test_unrecognized_status_listed_as_requested(self, vet_client, add_appointment):
        add_appointment("odd", status="reprogramada")

        data = vet_client.get("/api/appointments").get_json()["data"]

        assert data[0]["status"] == "pendiente"
        assert data[0]["actions"] == []

    def test_accept_assigns_acting_practitioner(self, vet_client, db_session, add_appointment):
        add_appointment("a1")

        response = vet_client.post("/api/appointments/a1/accept")

        assert response.status_code == 200
        data = response.get_json()["data"]
        assert data["status"] == "confirmada"
        assert data["vet_id"] == "vet-1"
        db_session.expire_all()
        assert db_session.get(DbAppointment, "a1").vet_id == "vet-1"

    def test_accept_then_complete_then_cancel(self, vet_client, db_session, add_appointment):
        add_appointment("a1")

        assert vet_client.post("/api/appointments/a1/accept").status_code == 200
        completed = vet_client.post("/api/appointments/a1/complete")
        cancel = vet_client.post("/api/appointments/a1/cancel")

        assert completed.status_code == 200
        assert completed.get_json()["data"]["next_step"]["action"] == "create_clinical_entry"
        assert cancel.status_code == 409
        assert cancel.get_json()["error"] == "invalid_transition"
        db_session.expire_all()
        assert db_session.get(DbAppointment, "a1").status == "completada"

    def test_cancel_twice(self, vet_client, add_appointment):
        add_appointment("a1")

        assert vet_client.post("/api/appointments/a1/cancel").status_code == 200
        second = vet_client.post("/api/appointments/a1/cancel")

        assert second.status_code == 409
        assert second.get_json()["details"]["current"] == "cancelada"

    def test_unknown_appointment(self, vet_client, clinic):
        response = vet_client.post("/api/appointments/missing/cancel")

        assert response.status_code == 404
        assert response.get_json()["error"] == "not_found"

    def test_transition_on_unrecognized_status(self, vet_client, add_appointment):
        add_appointment("odd", status="reprogramada")

        response = vet_client.post("/api/appointments/odd/accept")

        assert response.status_code == 409
        assert response.get_json()["error"] == "invalid_state"


@pytest.mark.integration
@pytest.mark.controllers
@pytest.mark.appointment
class TestTeleconferenceEndpoint:
    def test_link_is_created_once(self, vet_client, add_appointment, monkeypatch):
        monkeypatch.setenv("TELECONFERENCE_BASE_URL", "https://meet.example.test")
        add_appointment("t1", status="confirmada", type_="teleconsulta", vet_id="vet-1")

        first = vet_client.post("/api/appointments/t1/teleconference")
        second = vet_client.post("/api/appointments/t1/teleconference")

        assert first.status_code == 200
        url = first.get_json()["data"]["teleconference_url"]
        assert url == "https://meet.example.test/t1"
        assert second.get_json()["data"]["teleconference_url"] == url

    def test_in_person_rejected(self, vet_client, db_session, add_appointment):
        add_appointment("p1", status="confirmada", type_="presencial")

        response = vet_client.post("/api/appointments/p1/teleconference")

        assert response.status_code == 409
        assert response.get_json()["error"] == "invalid_state"
        db_session.expire_all()
        assert db_session.get(DbAppointment, "p1").teleconference_url is None


@pytest.mark.integration
@pytest.mark.controllers
@pytest.mark.appointment
class TestStaffOnlyEndpoints:
    @pytest.mark.parametrize(
        "action,status,type_",
        [
            ("accept", "pendiente", "presencial"),
            ("complete", "confirmada", "presencial"),
            ("teleconference", "confirmada", "teleconsulta"),
        ],
    )
    def test_owner_is_forbidden(
        self, owner_client, db_session, add_appointment, action, status, type_
    ):
        add_appointment("a1", status=status, type_=type_)

        response = owner_client.post(f"/api/appointments/a1/{action}")

        assert response.status_code == 403
        assert response.get_json()["error"] == "forbidden"
        db_session.expire_all()
        row = db_session.get(DbAppointment, "a1")
        assert row.status == status
        assert row.vet_id is None
        assert row.teleconference_url is None

    def test_owner_may_cancel(self, owner_client, add_appointment):
        add_appointment("a1")

        response = owner_client.post("/api/appointments/a1/cancel")

        assert response.status_code == 200
        assert response.get_json()["data"]["status"] == "cancelada"

    def test_admin_may_accept(self, app, db_session, add_appointment):
        admin =Profile(id="admin-1", full_name="Admin", email="admin@test.local", role="admin")
        db_session.add(admin)
        db_session.commit()
        add_appointment("a1")

        response = app.test_client(user=admin).post("/api/appointments/a1/accept")

        assert response.status_code == 200
        assert response.get_json()["data"]["vet_id"] == "admin-1"
