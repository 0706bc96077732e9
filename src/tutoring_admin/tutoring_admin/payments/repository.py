from __future__ import annotations

from datetime import date, datetime
from typing import Protocol, Sequence

from ..common.datetime_utils import to_ymd
from ..core.enums import Collection, PaymentEntryKind
from ..core.exceptions import MalformedDocumentError
from ..store.document_store import Document, DocumentStore, where
from ..store.schema import read_date, read_datetime, read_id, read_number, read_str
from .model import PaymentHistoryEntry


class PaymentHistoryRepository(Protocol):
    def append(
        self,
        *,
        student_id: str,
        group_id: str,
        session_date: date,
        session_time: str,
        amount: float,
        paid_at: datetime,
        kind: PaymentEntryKind = PaymentEntryKind.PAYMENT,
    ) -> str:
        raise NotImplementedError

    def list_for_student(self, student_id: str) -> Sequence[PaymentHistoryEntry]:
        raise NotImplementedError


def payment_from_document(doc: Document) -> PaymentHistoryEntry:
    try:
        kind = PaymentEntryKind(doc.get("kind") or PaymentEntryKind.PAYMENT.value)
    except ValueError:
        raise MalformedDocumentError(f"Unknown payment entry kind: {doc.get('kind')!r}") from None
    return PaymentHistoryEntry(
        entry_id=read_id(doc),
        student_id=read_str(doc, "studentId"),
        group_id=read_str(doc, "groupId", required=False),
        session_date=read_date(doc, "sessionDate"),
        session_time=read_str(doc, "sessionTime"),
        amount=read_number(doc, "amount"),
        paid_at=read_datetime(doc, "paidAt", required=True),
        kind=kind,
    )


class DocumentPaymentHistoryRepository(PaymentHistoryRepository):
    """Append-only: this repository never updates or deletes entries."""

    def __init__(self, store: DocumentStore):
        self._store = store

    def append(
        self,
        *,
        student_id: str,
        group_id: str,
        session_date: date,
        session_time: str,
        amount: float,
        paid_at: datetime,
        kind: PaymentEntryKind = PaymentEntryKind.PAYMENT,
    ) -> str:
        return self._store.insert(
            Collection.PAYMENT_HISTORY,
            {
                "studentId": student_id,
                "groupId": group_id,
                "sessionDate": to_ymd(session_date),
                "sessionTime": session_time,
                "amount": float(amount),
                "paidAt": paid_at,
                "kind": kind.value,
            },
        )

    def list_for_student(self, student_id: str) -> Sequence[PaymentHistoryEntry]:
        docs = self._store.query(Collection.PAYMENT_HISTORY, [where("studentId", "==", student_id)])
        return [payment_from_document(d) for d in docs]
