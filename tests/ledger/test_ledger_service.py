from __future__ import annotations

import random
from datetime import date, datetime

import pytest

from src.tutoring_admin.tutoring_admin.attendance.model import SlotState
from src.tutoring_admin.tutoring_admin.container import assemble
from src.tutoring_admin.tutoring_admin.core.enums import Collection, PaymentEntryKind
from src.tutoring_admin.tutoring_admin.core.exceptions import ValidationError
from src.tutoring_admin.tutoring_admin.ledger.transitions import ABSENT_SLOT_WARNING, PAID_SLOT_WARNING

D = date(2025, 3, 3)
T = "10:00"


@pytest.fixture
def slot(container, make_group, make_student):
    group_id = make_group(fee=20)
    student_id = make_student(group_id)
    return {"student_id": student_id, "group_id": group_id}


def _counters(container, student_id):
    s = container.student_service.get(student_id)
    return s.lessons_attended, s.montant


def _slot_state(container, student_id, session_date=D, session_time=T):
    rec = container.attendance_repo.find_for_slot(
        student_id=student_id, session_date=session_date, session_time=session_time
    )
    return rec.state if rec else SlotState()


def test_present_then_paid_then_blocked_absent(container, store, slot, fixed_now):
    ledger = container.ledger_service

    outcome = ledger.set_presence(**slot, session_date=D, session_time=T, now=fixed_now)
    assert outcome.applied
    assert _counters(container, slot["student_id"]) == (1, 20.0)

    outcome = ledger.set_paid(**slot, session_date=D, session_time=T, now=fixed_now)
    assert outcome.applied
    assert _counters(container, slot["student_id"]) == (1, 0.0)

    history = container.payments_repo.list_for_student(slot["student_id"])
    assert len(history) == 1
    assert history[0].amount == 20
    assert history[0].session_date == D
    assert history[0].session_time == T
    assert history[0].paid_at == fixed_now

    outcome = ledger.set_presence(**slot, session_date=D, session_time=T, now=fixed_now)
    assert not outcome.applied
    assert outcome.warning == PAID_SLOT_WARNING
    assert _slot_state(container, slot["student_id"]) == SlotState(present=True, paid=True)
    assert _counters(container, slot["student_id"]) == (1, 0.0)


def test_blocked_toggle_performs_no_writes(container, store, slot):
    ledger = container.ledger_service
    ledger.set_presence(**slot, session_date=D, session_time=T)
    ledger.set_paid(**slot, session_date=D, session_time=T)

    store.calls.clear()
    ledger.set_presence(**slot, session_date=D, session_time=T)

    assert not [c for c in store.calls if c[0] in {"insert", "update", "delete"}]


def test_presence_toggle_twice_restores_counters(container, slot):
    ledger = container.ledger_service
    before = _counters(container, slot["student_id"])

    ledger.set_presence(**slot, session_date=D, session_time=T)
    ledger.set_presence(**slot, session_date=D, session_time=T)

    assert _counters(container, slot["student_id"]) == before
    assert _slot_state(container, slot["student_id"]) == SlotState(present=False, paid=False)


def test_record_is_created_once_per_slot(container, store, slot):
    ledger = container.ledger_service
    for _ in range(3):
        ledger.set_presence(**slot, session_date=D, session_time=T)

    assert len(store.docs(Collection.ATTENDANCE)) == 1


def test_set_paid_on_untouched_slot_is_a_warning(container, store, slot):
    outcome = container.ledger_service.set_paid(**slot, session_date=D, session_time=T)

    assert not outcome.applied
    assert outcome.warning == ABSENT_SLOT_WARNING
    assert store.docs(Collection.ATTENDANCE) == []
    assert store.docs(Collection.PAYMENT_HISTORY) == []


def test_set_paid_on_absent_slot_is_a_warning(container, slot):
    ledger = container.ledger_service
    ledger.set_presence(**slot, session_date=D, session_time=T)
    ledger.set_presence(**slot, session_date=D, session_time=T)

    outcome = ledger.set_paid(**slot, session_date=D, session_time=T)

    assert not outcome.applied
    assert _counters(container, slot["student_id"]) == (0, 0.0)


def test_unpay_restores_fee_and_keeps_history(container, slot):
    ledger = container.ledger_service
    ledger.set_presence(**slot, session_date=D, session_time=T)
    ledger.set_paid(**slot, session_date=D, session_time=T)

    ledger.set_paid(**slot, session_date=D, session_time=T)

    assert _counters(container, slot["student_id"]) == (1, 20.0)
    history = container.payments_repo.list_for_student(slot["student_id"])
    assert [e.amount for e in history] == [20]


def test_unpay_with_reversals_keeps_history_reconcilable(store, kv):
    container = assemble(store=store, kv_store=kv, record_payment_reversals=True)
    group_id = container.group_service.create(
        name="Physique", fee_per_session=25, schedule=[{"day": "friday", "time": "18:00"}]
    )
    student_id = container.student_service.create(
        first_name="Sarra", last_name="T", registration_date="2025-01-01", group_id=group_id
    )
    args = {"student_id": student_id, "group_id": group_id, "session_date": D, "session_time": "18:00"}
    ledger = container.ledger_service

    ledger.set_presence(**args)
    for _ in range(3):
        ledger.set_paid(**args)

    history = container.payments_repo.list_for_student(student_id)
    assert [e.kind for e in history].count(PaymentEntryKind.REVERSAL) == 1
    assert sum(e.amount for e in history) == 25
    assert _counters(container, student_id) == (1, 0.0)


def test_deleted_group_sessions_are_priced_from_archive(container, make_group, make_student):
    group_id = make_group(fee=15)
    student_id = make_student(group_id)
    ledger = container.ledger_service
    ledger.set_presence(student_id=student_id, group_id=group_id, session_date=D, session_time=T)

    container.group_service.delete(group_id, now=datetime(2025, 3, 20, 12, 0))

    assert ledger.fee_for_date(group_id, D) == 15
    outcome = ledger.set_paid(student_id=student_id, group_id=group_id, session_date=D, session_time=T)
    assert outcome.fee == 15
    assert _counters(container, student_id) == (1, 0.0)


def test_unknown_group_prices_session_at_zero(container, make_group, make_student):
    student_id = make_student(make_group())

    outcome = container.ledger_service.set_presence(
        student_id=student_id, group_id="ghost", session_date=D, session_time=T
    )

    assert outcome.applied
    assert outcome.fee == 0
    assert _counters(container, student_id) == (1, 0.0)


def test_invalid_slot_arguments_raise_validation_error(container, slot):
    with pytest.raises(ValidationError):
        container.ledger_service.set_presence(**slot, session_date="03/03/2025", session_time=T)
    with pytest.raises(ValidationError):
        container.ledger_service.set_paid(**slot, session_date=D, session_time="25:00")


def test_montant_matches_present_unpaid_slots_after_random_sequences(container, make_group, make_student):
    rng = random.Random(1234)
    group_a = make_group(name="A", fee=20)
    group_b = make_group(name="B", fee=12.5)
    student_id = make_student(group_a)
    slots = [
        (group_a, date(2025, 3, 3), "10:00"),
        (group_a, date(2025, 3, 10), "10:00"),
        (group_b, date(2025, 3, 4), "14:30"),
        (group_b, date(2025, 3, 11), "14:30"),
    ]
    fees = {group_a: 20.0, group_b: 12.5}
    ledger = container.ledger_service

    for _ in range(200):
        group_id, session_date, session_time = rng.choice(slots)
        action = rng.choice([ledger.set_presence, ledger.set_paid])
        action(student_id=student_id, group_id=group_id, session_date=session_date, session_time=session_time)

        expected = 0.0
        present = 0
        for g, d, t in slots:
            state = _slot_state(container, student_id, d, t)
            present += state.present
            if state.present and not state.paid:
                expected += fees[g]
        lessons, montant = _counters(container, student_id)
        assert montant == pytest.approx(expected)
        assert lessons == present

    assert container.ledger_service.reconcile(student_id).consistent


def test_reconcile_detects_admin_edit_drift(container, slot):
    container.ledger_service.set_presence(**slot, session_date=D, session_time=T)
    student = container.student_service.get(slot["student_id"])
    container.student_service.update(
        student.student_id,
        first_name=student.first_name,
        last_name=student.last_name,
        registration_date=student.registration_date,
        group_id=student.group_id,
        lessons_attended=1,
        montant=0,
    )

    report = container.ledger_service.reconcile(slot["student_id"])

    assert not report.consistent
    assert report.expected_montant == 20
    assert report.recorded_montant == 0
