from __future__ import annotations

from datetime import date, timedelta

from ..common.datetime_utils import format_short_date_fr, month_bounds, to_ymd, weekday_fr
from ..core.exceptions import NotFoundError, ValidationError
from ..groups.model import ScheduleSlot
from ..groups.repository import GroupRepository
from ..students.repository import StudentRepository
from .model import LessonSlot, MonthGrid
from .repository import AttendanceRepository


def lessons_in_month(schedule, year: int, month: int) -> list[LessonSlot]:
    """Every date of the month whose weekday appears in ``schedule``."""
    start, end = month_bounds(year, month)
    by_weekday: dict[int, list[ScheduleSlot]] = {}
    for slot in schedule:
        by_weekday.setdefault(slot.day.iso_index, []).append(slot)

    lessons: list[LessonSlot] = []
    day = start
    while day <= end:
        for slot in by_weekday.get(day.weekday(), []):
            lessons.append(LessonSlot(session_date=day, session_time=slot.time))
        day += timedelta(days=1)

    lessons.sort(key=lambda lesson: (lesson.session_date, lesson.session_time))
    return lessons


class AttendanceGridService:
    """Use case: monthly attendance sheet of one group."""

    def __init__(self, attendance: AttendanceRepository, groups: GroupRepository, students: StudentRepository):
        self._attendance = attendance
        self._groups = groups
        self._students = students

    def month_grid(self, *, group_id: str, year: int, month: int) -> MonthGrid:
        if not 1 <= int(month) <= 12:
            raise ValidationError("Mois invalide")

        group = self._groups.get_by_id(group_id)
        if not group:
            raise NotFoundError("Groupe introuvable")

        start, end = month_bounds(int(year), int(month))
        records = self._attendance.list_for_group_between(group_id=group_id, start=start, end=end)

        return MonthGrid(
            group=group,
            year=int(year),
            month=int(month),
            students=list(self._students.list_all(group_id=group_id)),
            lessons=lessons_in_month(group.schedule, int(year), int(month)),
            cells={r.slot_key: r.state for r in records},
        )

    def to_ui(self, grid: MonthGrid) -> dict:
        return {
            "group": {"id": grid.group.group_id, "name": grid.group.name},
            "year": grid.year,
            "month": grid.month,
            "lessons": [
                {
                    "date": to_ymd(lesson.session_date),
                    "time": lesson.session_time,
                    "weekday": weekday_fr(lesson.session_date),
                    "label": f"{format_short_date_fr(lesson.session_date)} - {lesson.session_time}",
                }
                for lesson in grid.lessons
            ],
            "students": [
                {
                    "id": s.student_id,
                    "name": s.full_name,
                    "montant": s.montant,
                    "lessons_attended": s.lessons_attended,
                    "slots": [
                        self._cell(grid, s.student_id, lesson.session_date, lesson.session_time)
                        for lesson in grid.lessons
                    ],
                }
                for s in grid.students
            ],
        }

    @staticmethod
    def _cell(grid: MonthGrid, student_id: str, session_date: date, session_time: str) -> dict:
        state = grid.state_for(student_id, session_date, session_time)
        return {"date": to_ymd(session_date), "time": session_time, "present": state.present, "paid": state.paid}
