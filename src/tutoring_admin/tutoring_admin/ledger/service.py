from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..attendance.model import ABSENT, SlotState
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import now_local
from ..common.validators import require_date, require_non_empty, require_time_slot
from ..core.exceptions import NotFoundError
from ..payments.repository import PaymentHistoryRepository
from ..students.repository import StudentRepository
from .fees import FeeResolver
from .transitions import (
    BalanceDelta,
    LedgerDecision,
    apply_balance_delta,
    decide_payment_toggle,
    decide_presence_toggle,
    expected_balance,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LedgerOutcome:
    """Result of a toggle. ``applied=False`` means nothing was written."""

    applied: bool
    state: SlotState
    fee: float = 0.0
    warning: Optional[str] = None
    lessons_attended: Optional[int] = None
    montant: Optional[float] = None


@dataclass(frozen=True)
class BalanceReport:
    student_id: str
    recorded_lessons: int
    recorded_montant: float
    expected_lessons: int
    expected_montant: float

    @property
    def consistent(self) -> bool:
        return (
            self.recorded_lessons == self.expected_lessons
            and abs(self.recorded_montant - self.expected_montant) < 1e-9
        )


class LedgerService:
    """Use case: mark attendance and session payments, keeping balances in step.

    Each call is a short sequence of independent store writes (attendance
    record, then student counters, then payment history) with no rollback:
    a failure midway leaves the earlier writes in place.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        students: StudentRepository,
        payments: PaymentHistoryRepository,
        fees: FeeResolver,
        *,
        record_reversals: bool = False,
    ):
        self._attendance = attendance
        self._students = students
        self._payments = payments
        self._fees = fees
        self._record_reversals = bool(record_reversals)

    def set_presence(
        self,
        *,
        student_id: str,
        group_id: str,
        session_date: date | str,
        session_time: str,
        now: datetime | None = None,
    ) -> LedgerOutcome:
        student_id, group_id, session_date, session_time = self._slot_args(
            student_id, group_id, session_date, session_time
        )
        now = now or now_local()

        record = self._attendance.find_for_slot(
            student_id=student_id, session_date=session_date, session_time=session_time
        )
        current = record.state if record else ABSENT
        fee = self._fees.fee_for_date(group_id, session_date)
        decision = decide_presence_toggle(current, fee)
        if decision.blocked:
            return self._blocked(decision, student_id, session_date, session_time)

        if record is None:
            self._attendance.create(
                student_id=student_id,
                group_id=group_id,
                session_date=session_date,
                session_time=session_time,
                present=True,
                paid=False,
                created_at=now,
            )
        else:
            self._attendance.update_flags(
                record.record_id,
                present=decision.next.present,
                paid=decision.next.paid,
                updated_at=now,
            )

        counters = self._apply_delta(student_id, decision.delta)
        logger.info(
            "Presence %s -> %s for student %s on %s %s (fee=%s)",
            current.present,
            decision.next.present,
            student_id,
            session_date,
            session_time,
            fee,
        )
        return self._applied(decision, fee, counters)

    def set_paid(
        self,
        *,
        student_id: str,
        group_id: str,
        session_date: date | str,
        session_time: str,
        now: datetime | None = None,
    ) -> LedgerOutcome:
        student_id, group_id, session_date, session_time = self._slot_args(
            student_id, group_id, session_date, session_time
        )
        now = now or now_local()

        record = self._attendance.find_for_slot(
            student_id=student_id, session_date=session_date, session_time=session_time
        )
        fee = self._fees.fee_for_date(group_id, session_date)
        decision = decide_payment_toggle(
            record.state if record else None,
            fee,
            record_reversals=self._record_reversals,
        )
        if decision.blocked:
            return self._blocked(decision, student_id, session_date, session_time)

        self._attendance.update_flags(
            record.record_id,
            present=decision.next.present,
            paid=decision.next.paid,
            updated_at=now,
        )
        counters = self._apply_delta(student_id, decision.delta)

        if decision.payment is not None:
            self._payments.append(
                student_id=student_id,
                group_id=group_id,
                session_date=session_date,
                session_time=session_time,
                amount=decision.payment.amount,
                paid_at=now,
                kind=decision.payment.kind,
            )

        logger.info(
            "Paid %s -> %s for student %s on %s %s (fee=%s)",
            decision.current.paid,
            decision.next.paid,
            student_id,
            session_date,
            session_time,
            fee,
        )
        return self._applied(decision, fee, counters)

    def fee_for_date(self, group_id: str, session_date: date | str) -> float:
        return self._fees.fee_for_date(
            require_non_empty(group_id, "Groupe"), require_date(session_date, "Date de séance")
        )

    def reconcile(self, student_id: str) -> BalanceReport:
        """Compare stored counters with the values implied by attendance records."""
        student = self._students.get_by_id(student_id)
        if not student:
            raise NotFoundError("Étudiant introuvable")

        fee_cache: dict[tuple[str, date], float] = {}

        def fee_for(record) -> float:
            key = (record.group_id, record.session_date)
            if key not in fee_cache:
                fee_cache[key] = self._fees.fee_for_date(record.group_id, record.session_date)
            return fee_cache[key]

        lessons, montant = expected_balance(self._attendance.list_for_student(student_id), fee_for)
        report = BalanceReport(
            student_id=student_id,
            recorded_lessons=student.lessons_attended,
            recorded_montant=student.montant,
            expected_lessons=lessons,
            expected_montant=montant,
        )
        if not report.consistent:
            logger.warning(
                "Balance drift for student %s: recorded (%s, %s), expected (%s, %s)",
                student_id,
                report.recorded_lessons,
                report.recorded_montant,
                report.expected_lessons,
                report.expected_montant,
            )
        return report

    @staticmethod
    def _slot_args(student_id, group_id, session_date, session_time) -> tuple[str, str, date, str]:
        return (
            require_non_empty(student_id, "Étudiant"),
            require_non_empty(group_id, "Groupe"),
            require_date(session_date, "Date de séance"),
            require_time_slot(session_time),
        )

    def _apply_delta(self, student_id: str, delta: BalanceDelta) -> Optional[tuple[int, float]]:
        if delta.is_zero:
            return None
        student = self._students.get_by_id(student_id)
        if not student:
            logger.warning("Student %s not found; counters left unchanged", student_id)
            return None
        lessons, montant = apply_balance_delta(student.lessons_attended, student.montant, delta)
        self._students.update_counters(student_id, lessons_attended=lessons, montant=montant)
        return lessons, montant

    @staticmethod
    def _blocked(decision: LedgerDecision, student_id: str, session_date: date, session_time: str) -> LedgerOutcome:
        logger.info("Blocked toggle for student %s on %s %s: %s", student_id, session_date, session_time, decision.warning)
        return LedgerOutcome(applied=False, state=decision.current, warning=decision.warning)

    @staticmethod
    def _applied(decision: LedgerDecision, fee: float, counters: Optional[tuple[int, float]]) -> LedgerOutcome:
        lessons, montant = counters if counters else (None, None)
        return LedgerOutcome(
            applied=True,
            state=decision.next,
            fee=fee,
            lessons_attended=lessons,
            montant=montant,
        )
