from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..common.datetime_utils import to_ymd
from ..core.enums import Collection
from ..store.document_store import Document, DocumentStore, where
from ..store.schema import read_bool, read_date, read_datetime, read_id, read_str
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def find_for_slot(self, *, student_id: str, session_date: date, session_time: str) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def create(
        self,
        *,
        student_id: str,
        group_id: str,
        session_date: date,
        session_time: str,
        present: bool,
        paid: bool,
        created_at: datetime,
    ) -> str:
        raise NotImplementedError

    def update_flags(self, record_id: str, *, present: bool, paid: bool, updated_at: datetime) -> bool:
        raise NotImplementedError

    def list_for_group_between(self, *, group_id: str, start: date, end: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_for_student(self, student_id: str) -> Sequence[AttendanceRecord]:
        raise NotImplementedError


def attendance_from_document(doc: Document) -> AttendanceRecord:
    return AttendanceRecord(
        record_id=read_id(doc),
        student_id=read_str(doc, "studentId"),
        group_id=read_str(doc, "groupId", required=False),
        session_date=read_date(doc, "date"),
        session_time=read_str(doc, "time"),
        present=read_bool(doc, "present"),
        paid=read_bool(doc, "paid"),
        created_at=read_datetime(doc, "createdAt"),
        updated_at=read_datetime(doc, "updatedAt"),
    )


class DocumentAttendanceRepository(AttendanceRepository):
    def __init__(self, store: DocumentStore):
        self._store = store

    def find_for_slot(self, *, student_id: str, session_date: date, session_time: str) -> Optional[AttendanceRecord]:
        docs = self._store.query(
            Collection.ATTENDANCE,
            [
                where("studentId", "==", student_id),
                where("date", "==", to_ymd(session_date)),
                where("time", "==", session_time),
            ],
        )
        if not docs:
            return None
        return attendance_from_document(docs[0])

    def create(
        self,
        *,
        student_id: str,
        group_id: str,
        session_date: date,
        session_time: str,
        present: bool,
        paid: bool,
        created_at: datetime,
    ) -> str:
        return self._store.insert(
            Collection.ATTENDANCE,
            {
                "studentId": student_id,
                "groupId": group_id,
                "date": to_ymd(session_date),
                "time": session_time,
                "present": bool(present),
                "paid": bool(paid),
                "createdAt": created_at,
            },
        )

    def update_flags(self, record_id: str, *, present: bool, paid: bool, updated_at: datetime) -> bool:
        return self._store.update(
            Collection.ATTENDANCE,
            record_id,
            {"present": bool(present), "paid": bool(paid), "updatedAt": updated_at},
        )

    def list_for_group_between(self, *, group_id: str, start: date, end: date) -> Sequence[AttendanceRecord]:
        docs = self._store.query(
            Collection.ATTENDANCE,
            [
                where("groupId", "==", group_id),
                where("date", ">=", to_ymd(start)),
                where("date", "<=", to_ymd(end)),
            ],
        )
        return [attendance_from_document(d) for d in docs]

    def list_for_student(self, student_id: str) -> Sequence[AttendanceRecord]:
        docs = self._store.query(Collection.ATTENDANCE, [where("studentId", "==", student_id)])
        records = [attendance_from_document(d) for d in docs]
        records.sort(key=lambda r: (r.session_date, r.session_time))
        return records
