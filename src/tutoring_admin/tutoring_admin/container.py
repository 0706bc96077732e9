from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .archive.cache import ArchivedGroupCache
from .archive.key_value import JsonFileKeyValueStore, KeyValueStore
from .attendance.repository import DocumentAttendanceRepository
from .attendance.service import AttendanceGridService
from .groups.repository import DocumentGroupRepository
from .groups.service import GroupService
from .ledger.fees import FeeResolver
from .ledger.service import LedgerService
from .payments.repository import DocumentPaymentHistoryRepository
from .payments.service import PaymentHistoryService
from .store.connection import DBConfig, DatabaseConnection
from .store.document_store import DocumentStore
from .store.mysql_document_store import MySQLDocumentStore
from .students.repository import DocumentStudentRepository
from .students.service import StudentService


@dataclass(frozen=True)
class Container:
    store: DocumentStore
    archive: ArchivedGroupCache

    students_repo: DocumentStudentRepository
    groups_repo: DocumentGroupRepository
    attendance_repo: DocumentAttendanceRepository
    payments_repo: DocumentPaymentHistoryRepository

    student_service: StudentService
    group_service: GroupService
    attendance_grid_service: AttendanceGridService
    ledger_service: LedgerService
    payment_history_service: PaymentHistoryService


def assemble(*, store: DocumentStore, kv_store: KeyValueStore, record_payment_reversals: bool = False) -> Container:
    """Wire services over any document store / key-value store pair."""
    archive = ArchivedGroupCache(kv_store)

    students_repo = DocumentStudentRepository(store)
    groups_repo = DocumentGroupRepository(store)
    attendance_repo = DocumentAttendanceRepository(store)
    payments_repo = DocumentPaymentHistoryRepository(store)

    fees = FeeResolver(groups_repo, archive)

    return Container(
        store=store,
        archive=archive,
        students_repo=students_repo,
        groups_repo=groups_repo,
        attendance_repo=attendance_repo,
        payments_repo=payments_repo,
        student_service=StudentService(students_repo),
        group_service=GroupService(groups_repo, archive),
        attendance_grid_service=AttendanceGridService(attendance_repo, groups_repo, students_repo),
        ledger_service=LedgerService(
            attendance_repo,
            students_repo,
            payments_repo,
            fees,
            record_reversals=record_payment_reversals,
        ),
        payment_history_service=PaymentHistoryService(payments_repo, students_repo),
    )


def build_container(
    *,
    db_config: dict,
    archive_cache_path: str | Path,
    record_payment_reversals: bool = False,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
    return assemble(
        store=MySQLDocumentStore(conn),
        kv_store=JsonFileKeyValueStore(archive_cache_path),
        record_payment_reversals=record_payment_reversals,
    )
