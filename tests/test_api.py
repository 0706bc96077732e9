from __future__ import annotations

import pytest

from src.tutoring_admin.tutoring_admin.core.exceptions import StoreError
from src.tutoring_admin.tutoring_admin.ledger.transitions import PAID_SLOT_WARNING
from src.tutoring_admin.tutoring_admin.main import create_app


@pytest.fixture
def client(monkeypatch, container):
    monkeypatch.setenv("APP_ENV", "testing")
    app = create_app(container=container)
    return app.test_client()


def _create_group(client, fee=20):
    res = client.post(
        "/api/groups",
        json={"name": "Maths", "fee_per_session": fee, "schedule": [{"day": "monday", "time": "10:00"}]},
    )
    assert res.status_code == 201
    return res.get_json()["id"]


def _create_student(client, group_id):
    res = client.post(
        "/api/students",
        json={"first_name": "Amine", "last_name": "Ben Ali", "registration_date": "2025-01-06", "group_id": group_id},
    )
    assert res.status_code == 201
    return res.get_json()["id"]


def test_attendance_flow_over_http(client):
    group_id = _create_group(client)
    student_id = _create_student(client, group_id)
    slot = {"student_id": student_id, "group_id": group_id, "date": "2025-03-03", "time": "10:00"}

    res = client.post("/api/attendance/presence", json=slot)
    assert res.status_code == 200
    assert res.get_json()["montant"] == 20

    res = client.post("/api/attendance/paid", json=slot)
    assert res.get_json()["montant"] == 0

    res = client.post("/api/attendance/presence", json=slot)
    assert res.status_code == 409
    body = res.get_json()
    assert body["success"] is False
    assert body["message"] == PAID_SLOT_WARNING

    res = client.get(f"/api/students/{student_id}/payments")
    assert [e["amount"] for e in res.get_json()["entries"]] == [20]

    res = client.get(f"/api/students/{student_id}/balance")
    assert res.get_json()["consistent"] is True


def test_attendance_grid_endpoint(client):
    group_id = _create_group(client)
    _create_student(client, group_id)

    res = client.get(f"/api/attendance?group_id={group_id}&year=2025&month=3")

    body = res.get_json()
    assert res.status_code == 200
    assert len(body["lessons"]) == 5
    assert body["students"][0]["slots"][0] == {"date": "2025-03-03", "time": "10:00", "present": False, "paid": False}


def test_validation_errors_are_400(client):
    res = client.post("/api/students", json={"first_name": "A"})

    assert res.status_code == 400
    assert res.get_json()["message"] == "Veuillez remplir tous les champs obligatoires"


def test_unknown_student_is_404(client):
    assert client.get("/api/students/nope").status_code == 404


def test_deleted_group_fee_lookup(client):
    group_id = _create_group(client, fee=15)
    assert client.delete(f"/api/groups/{group_id}").status_code == 200

    res = client.get(f"/api/groups/{group_id}/fee?date=2025-03-03")

    assert res.get_json()["fee"] == 15


def test_csv_export_headers(client):
    group_id = _create_group(client)
    student_id = _create_student(client, group_id)

    res = client.get(f"/api/students/{student_id}/payments.csv")

    assert res.status_code == 200
    assert res.mimetype == "text/csv"
    assert "paiements_Ben Ali.csv" in res.headers["Content-Disposition"]


def test_store_failures_are_503(client, container, monkeypatch):
    def broken(*args, **kwargs):
        raise StoreError("connection refused")

    monkeypatch.setattr(container.store, "query", broken)

    res = client.get("/api/groups")

    assert res.status_code == 503
    assert res.get_json()["success"] is False
