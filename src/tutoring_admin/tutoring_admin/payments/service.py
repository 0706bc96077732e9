from __future__ import annotations

import csv
import io
from dataclasses import dataclass

from ..common.datetime_utils import format_date_fr, to_ymd
from ..core.constants import CSV_ENCODING, DATE_FORMAT, TIME_FORMAT
from ..core.enums import PaymentEntryKind
from ..core.exceptions import NotFoundError
from ..students.model import Student
from ..students.repository import StudentRepository
from .model import PaymentHistoryEntry
from .repository import PaymentHistoryRepository

CSV_FIELDS = ["session_date", "session_time", "amount", "kind", "paid_at", "group_id"]


@dataclass(frozen=True)
class PaymentHistoryView:
    student: Student
    entries: list[PaymentHistoryEntry]

    @property
    def total_paid(self) -> float:
        return sum(e.amount for e in self.entries)


class PaymentHistoryService:
    """Use case: a student's payment history (newest first) and its export."""

    def __init__(self, payments: PaymentHistoryRepository, students: StudentRepository):
        self._payments = payments
        self._students = students

    def history_for_student(self, student_id: str) -> PaymentHistoryView:
        student = self._students.get_by_id(student_id)
        if not student:
            raise NotFoundError("Étudiant introuvable")

        entries = list(self._payments.list_for_student(student_id))
        entries.sort(key=lambda e: e.paid_at, reverse=True)
        return PaymentHistoryView(student=student, entries=entries)

    def to_ui(self, view: PaymentHistoryView) -> dict:
        return {
            "student": {"id": view.student.student_id, "name": view.student.full_name},
            "total_paid": view.total_paid,
            "entries": [self._row(e) for e in view.entries],
        }

    def to_csv_bytes(self, view: PaymentHistoryView) -> bytes:
        out = io.StringIO()
        writer = csv.DictWriter(out, fieldnames=CSV_FIELDS)
        writer.writeheader()
        for e in view.entries:
            writer.writerow(
                {
                    "session_date": to_ymd(e.session_date),
                    "session_time": e.session_time,
                    "amount": e.amount,
                    "kind": e.kind.value,
                    "paid_at": e.paid_at.strftime(f"{DATE_FORMAT} {TIME_FORMAT}"),
                    "group_id": e.group_id,
                }
            )
        return out.getvalue().encode(CSV_ENCODING)

    @staticmethod
    def _row(e: PaymentHistoryEntry) -> dict:
        return {
            "id": e.entry_id,
            "session_date": to_ymd(e.session_date),
            "session_date_label": format_date_fr(e.session_date),
            "session_time": e.session_time,
            "amount": e.amount,
            "kind": e.kind.value,
            "is_reversal": e.kind == PaymentEntryKind.REVERSAL,
            "paid_at": e.paid_at.isoformat(),
            "paid_at_label": format_date_fr(e.paid_at.date()),
        }
