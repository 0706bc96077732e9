from __future__ import annotations

import csv
import io
from datetime import datetime

import pytest

from src.tutoring_admin.tutoring_admin.core.constants import CSV_ENCODING
from src.tutoring_admin.tutoring_admin.core.exceptions import NotFoundError


@pytest.fixture
def paid_student(container, make_group, make_student):
    group_id = make_group(fee=20)
    student_id = make_student(group_id)
    ledger = container.ledger_service
    for day, paid_at in (("2025-03-03", datetime(2025, 3, 4, 8, 0)), ("2025-03-10", datetime(2025, 3, 12, 8, 0))):
        ledger.set_presence(student_id=student_id, group_id=group_id, session_date=day, session_time="10:00")
        ledger.set_paid(student_id=student_id, group_id=group_id, session_date=day, session_time="10:00", now=paid_at)
    return student_id


def test_history_is_newest_first(container, paid_student):
    view = container.payment_history_service.history_for_student(paid_student)

    assert [e.paid_at for e in view.entries] == [datetime(2025, 3, 12, 8, 0), datetime(2025, 3, 4, 8, 0)]
    assert view.total_paid == 40


def test_history_ui_labels(container, paid_student):
    service = container.payment_history_service
    ui = service.to_ui(service.history_for_student(paid_student))

    assert ui["student"]["name"] == "Amine Ben Ali"
    assert ui["entries"][0]["session_date"] == "2025-03-10"
    assert ui["entries"][0]["session_date_label"] == "10 mars 2025"
    assert ui["entries"][0]["is_reversal"] is False


def test_csv_export(container, paid_student):
    service = container.payment_history_service
    payload = service.to_csv_bytes(service.history_for_student(paid_student))

    rows = list(csv.DictReader(io.StringIO(payload.decode(CSV_ENCODING))))
    assert [r["session_date"] for r in rows] == ["2025-03-10", "2025-03-03"]
    assert rows[0]["amount"] == "20.0"
    assert rows[0]["paid_at"] == "2025-03-12 08:00"
    assert rows[0]["kind"] == "payment"


def test_history_for_unknown_student(container):
    with pytest.raises(NotFoundError):
        container.payment_history_service.history_for_student("nope")
