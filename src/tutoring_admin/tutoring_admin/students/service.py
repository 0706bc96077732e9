from __future__ import annotations

import logging
from datetime import date
from typing import Optional, Sequence

from ..common.datetime_utils import format_date_fr, to_ymd
from ..common.validators import REQUIRED_FIELDS_MESSAGE, require_date, require_non_negative
from ..core.exceptions import NotFoundError, ValidationError
from .model import Student, StudentSummary
from .repository import StudentRepository

logger = logging.getLogger(__name__)


class StudentService:
    """Use case: manage students (administrative create/edit/delete)."""

    def __init__(self, students: StudentRepository):
        self._students = students

    def get(self, student_id: str) -> Student:
        student = self._students.get_by_id(student_id)
        if not student:
            raise NotFoundError("Étudiant introuvable")
        return student

    def list_all(self, *, group_id: Optional[str] = None) -> Sequence[Student]:
        return self._students.list_all(group_id=group_id or None)

    def create(
        self,
        *,
        first_name: str,
        last_name: str,
        registration_date: date | str,
        group_id: str,
        paid: bool = False,
        lessons_attended: int = 0,
        montant: float = 0.0,
    ) -> str:
        student = self._build(
            student_id="",
            first_name=first_name,
            last_name=last_name,
            registration_date=registration_date,
            group_id=group_id,
            paid=paid,
            lessons_attended=lessons_attended,
            montant=montant,
        )
        student_id = self._students.create(student)
        logger.info("Created student %s (%s) in group %s", student_id, student.full_name, student.group_id)
        return student_id

    def update(
        self,
        student_id: str,
        *,
        first_name: str,
        last_name: str,
        registration_date: date | str,
        group_id: str,
        paid: bool = False,
        lessons_attended: int = 0,
        montant: float = 0.0,
    ) -> Student:
        """Administrative edit. Counters are overwritten as given."""
        self.get(student_id)
        student = self._build(
            student_id=student_id,
            first_name=first_name,
            last_name=last_name,
            registration_date=registration_date,
            group_id=group_id,
            paid=paid,
            lessons_attended=lessons_attended,
            montant=montant,
        )
        self._students.update(student)
        logger.info("Updated student %s", student_id)
        return student

    def toggle_paid(self, student_id: str) -> bool:
        """Flip the legacy ``paid`` flag; per-session payments are untouched."""
        student = self.get(student_id)
        self._students.set_paid(student_id, paid=not student.paid)
        return not student.paid

    def delete(self, student_id: str) -> None:
        # Attendance and payment history are kept.
        if not self._students.delete(student_id):
            raise NotFoundError("Étudiant introuvable")
        logger.info("Deleted student %s", student_id)

    def summary(self, *, group_id: Optional[str] = None) -> StudentSummary:
        students = self.list_all(group_id=group_id)
        paid = sum(1 for s in students if s.paid)
        return StudentSummary(
            total=len(students),
            paid=paid,
            unpaid=len(students) - paid,
            total_due=sum(s.montant for s in students),
        )

    def to_ui(self, student: Student) -> dict:
        return {
            "id": student.student_id,
            "first_name": student.first_name,
            "last_name": student.last_name,
            "name": student.full_name,
            "registration_date": to_ymd(student.registration_date),
            "registration_label": format_date_fr(student.registration_date),
            "group_id": student.group_id,
            "lessons_attended": student.lessons_attended,
            "montant": student.montant,
            "paid": student.paid,
        }

    @staticmethod
    def _build(
        *,
        student_id: str,
        first_name: str,
        last_name: str,
        registration_date,
        group_id: str,
        paid: bool,
        lessons_attended,
        montant,
    ) -> Student:
        first_name = (first_name or "").strip()
        last_name = (last_name or "").strip()
        group_id = (group_id or "").strip()
        if not first_name or not last_name or not registration_date or not group_id:
            raise ValidationError(REQUIRED_FIELDS_MESSAGE)

        lessons = require_non_negative(lessons_attended, "Cours suivis")
        if int(lessons) != lessons:
            raise ValidationError("Cours suivis doit être un nombre entier")

        return Student(
            student_id=student_id,
            first_name=first_name,
            last_name=last_name,
            registration_date=require_date(registration_date, "Date d'inscription"),
            group_id=group_id,
            lessons_attended=int(lessons),
            montant=require_non_negative(montant, "Montant"),
            paid=bool(paid),
        )
