from __future__ import annotations

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class Student:
    """Domain entity: a registered student.

    ``montant`` is the outstanding balance owed for present, unpaid sessions.
    ``paid`` is the legacy coarse flag, independent of per-session payments.
    """

    student_id: str
    first_name: str
    last_name: str
    registration_date: date
    group_id: str
    lessons_attended: int = 0
    montant: float = 0.0
    paid: bool = False

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


@dataclass(frozen=True)
class StudentSummary:
    """Read-model for the students overview counters."""

    total: int
    paid: int
    unpaid: int
    total_due: float
