from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..common.datetime_utils import to_ymd
from ..core.enums import Collection
from ..store.document_store import Document, DocumentStore, where
from ..store.schema import read_bool, read_date, read_id, read_int, read_number, read_str
from .model import Student


class StudentRepository(Protocol):
    def get_by_id(self, student_id: str) -> Optional[Student]:
        raise NotImplementedError

    def list_all(self, *, group_id: Optional[str] = None) -> Sequence[Student]:
        raise NotImplementedError

    def create(self, student: Student) -> str:
        raise NotImplementedError

    def update(self, student: Student) -> bool:
        raise NotImplementedError

    def update_counters(self, student_id: str, *, lessons_attended: int, montant: float) -> bool:
        """Write only the ledger-owned counters."""

        raise NotImplementedError

    def set_paid(self, student_id: str, *, paid: bool) -> bool:
        raise NotImplementedError

    def delete(self, student_id: str) -> bool:
        raise NotImplementedError


def student_from_document(doc: Document) -> Student:
    return Student(
        student_id=read_id(doc),
        first_name=read_str(doc, "firstName"),
        last_name=read_str(doc, "lastName"),
        registration_date=read_date(doc, "dateOfRegistration"),
        group_id=read_str(doc, "groupId", required=False),
        lessons_attended=read_int(doc, "lessonsAttended"),
        montant=read_number(doc, "montant", required=False),
        paid=read_bool(doc, "paid"),
    )


def student_to_document(student: Student) -> Document:
    return {
        "firstName": student.first_name,
        "lastName": student.last_name,
        "dateOfRegistration": to_ymd(student.registration_date),
        "paid": bool(student.paid),
        "groupId": student.group_id,
        "lessonsAttended": int(student.lessons_attended),
        "montant": float(student.montant),
    }


class DocumentStudentRepository(StudentRepository):
    def __init__(self, store: DocumentStore):
        self._store = store

    def get_by_id(self, student_id: str) -> Optional[Student]:
        doc = self._store.get(Collection.STUDENTS, student_id)
        return student_from_document(doc) if doc else None

    def list_all(self, *, group_id: Optional[str] = None) -> Sequence[Student]:
        predicates = [where("groupId", "==", group_id)] if group_id else []
        docs = self._store.query(Collection.STUDENTS, predicates)
        students = [student_from_document(d) for d in docs]
        students.sort(key=lambda s: (s.last_name.lower(), s.first_name.lower()))
        return students

    def create(self, student: Student) -> str:
        return self._store.insert(Collection.STUDENTS, student_to_document(student))

    def update(self, student: Student) -> bool:
        return self._store.update(Collection.STUDENTS, student.student_id, student_to_document(student))

    def update_counters(self, student_id: str, *, lessons_attended: int, montant: float) -> bool:
        return self._store.update(
            Collection.STUDENTS,
            student_id,
            {"lessonsAttended": int(lessons_attended), "montant": float(montant)},
        )

    def set_paid(self, student_id: str, *, paid: bool) -> bool:
        return self._store.update(Collection.STUDENTS, student_id, {"paid": bool(paid)})

    def delete(self, student_id: str) -> bool:
        return self._store.delete(Collection.STUDENTS, student_id)
