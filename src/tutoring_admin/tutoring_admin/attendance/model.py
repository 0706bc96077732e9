from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..groups.model import Group
from ..students.model import Student


@dataclass(frozen=True)
class SlotState:
    """Presence/payment flags of one (student, date, time) slot."""

    present: bool = False
    paid: bool = False


ABSENT = SlotState()


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: attendance of one student at one lesson occurrence.

    At most one record exists per ``(student_id, session_date, session_time)``.
    """

    record_id: str
    student_id: str
    group_id: str
    session_date: date
    session_time: str
    present: bool
    paid: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def state(self) -> SlotState:
        return SlotState(present=self.present, paid=self.paid)

    @property
    def slot_key(self) -> tuple[str, date, str]:
        return (self.student_id, self.session_date, self.session_time)


@dataclass(frozen=True)
class LessonSlot:
    """A concrete lesson occurrence of a group in a given month."""

    session_date: date
    session_time: str


@dataclass(frozen=True)
class MonthGrid:
    """Read-model for the monthly attendance sheet of one group."""

    group: Group
    year: int
    month: int
    students: list[Student]
    lessons: list[LessonSlot]
    cells: dict[tuple[str, date, str], SlotState]

    def state_for(self, student_id: str, session_date: date, session_time: str) -> SlotState:
        return self.cells.get((student_id, session_date, session_time), ABSENT)
