from __future__ import annotations

from datetime import date

from src.tutoring_admin.tutoring_admin.attendance.model import ABSENT, AttendanceRecord, SlotState
from src.tutoring_admin.tutoring_admin.core.enums import PaymentEntryKind
from src.tutoring_admin.tutoring_admin.ledger.transitions import (
    ABSENT_SLOT_WARNING,
    PAID_SLOT_WARNING,
    BalanceDelta,
    apply_balance_delta,
    decide_payment_toggle,
    decide_presence_toggle,
    expected_balance,
)


def test_absent_to_present_adds_lesson_and_fee():
    decision = decide_presence_toggle(ABSENT, 20)

    assert not decision.blocked
    assert decision.next == SlotState(present=True, paid=False)
    assert decision.delta == BalanceDelta(lessons=1, montant=20)
    assert decision.payment is None


def test_present_unpaid_to_absent_removes_lesson_and_fee():
    decision = decide_presence_toggle(SlotState(present=True, paid=False), 20)

    assert decision.next == ABSENT
    assert decision.delta == BalanceDelta(lessons=-1, montant=-20)


def test_present_paid_cannot_be_marked_absent():
    current = SlotState(present=True, paid=True)
    decision = decide_presence_toggle(current, 20)

    assert decision.blocked
    assert decision.warning == PAID_SLOT_WARNING
    assert decision.next == current
    assert decision.delta.is_zero


def test_pay_requires_existing_present_slot():
    assert decide_payment_toggle(None, 20).warning == ABSENT_SLOT_WARNING
    assert decide_payment_toggle(SlotState(present=False, paid=False), 20).warning == ABSENT_SLOT_WARNING


def test_unpaid_to_paid_removes_fee_and_logs_payment():
    decision = decide_payment_toggle(SlotState(present=True, paid=False), 20)

    assert decision.next == SlotState(present=True, paid=True)
    assert decision.delta == BalanceDelta(montant=-20)
    assert decision.payment.amount == 20
    assert decision.payment.kind == PaymentEntryKind.PAYMENT


def test_paid_to_unpaid_restores_fee_without_history_by_default():
    decision = decide_payment_toggle(SlotState(present=True, paid=True), 20)

    assert decision.next == SlotState(present=True, paid=False)
    assert decision.delta == BalanceDelta(montant=20)
    assert decision.payment is None


def test_paid_to_unpaid_can_record_reversal():
    decision = decide_payment_toggle(SlotState(present=True, paid=True), 20, record_reversals=True)

    assert decision.payment.amount == -20
    assert decision.payment.kind == PaymentEntryKind.REVERSAL


def test_apply_balance_delta_floors_at_zero():
    assert apply_balance_delta(0, 5, BalanceDelta(lessons=-1, montant=-20)) == (0, 0.0)
    assert apply_balance_delta(2, 40, BalanceDelta(lessons=-1, montant=-20)) == (1, 20.0)


def test_expected_balance_counts_present_and_unpaid_fees():
    def rec(rid, present, paid, group="g1"):
        return AttendanceRecord(
            record_id=rid,
            student_id="s1",
            group_id=group,
            session_date=date(2025, 3, 3),
            session_time="10:00",
            present=present,
            paid=paid,
        )

    records = [rec("a", True, False), rec("b", True, True), rec("c", False, False), rec("d", True, False, "g2")]
    fees = {"g1": 20.0, "g2": 15.0}

    lessons, montant = expected_balance(records, lambda r: fees[r.group_id])

    assert lessons == 3
    assert montant == 35.0
